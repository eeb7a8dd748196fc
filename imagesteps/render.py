import io
from typing import Tuple

import cairosvg
from PIL import Image


WHITE: Tuple[int, int, int, int] = (255, 255, 255, 255)

SVG_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'


def new_canvas(width: int, height: int) -> Image.Image:
    """Fully opaque white RGBA canvas."""
    return Image.new("RGBA", (width, height), color=WHITE)


def bake(img: Image.Image) -> Image.Image:
    """
    Force the canvas through a lossless PNG round-trip and return a fresh,
    fully loaded RGBA buffer that shares nothing with the input.
    """
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    baked = Image.open(buf)
    baked.load()
    return baked.convert("RGBA")


def escape_xml(unsafe: str) -> str:
    return (
        unsafe.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def font_family_attr(name: str) -> str:
    """
    `font-family` attribute for `name` with a sans-serif fallback. The family is
    a double-quoted CSS string, so double quotes inside the name are dropped.
    """
    family = name.replace('"', "")
    value = '"' + family + '", sans-serif'
    return f'font-family="{escape_xml(value)}"'


def svg_document(width: int, height: int, body: str, preserve_space: bool = False) -> str:
    space = ' xml:space="preserve"' if preserve_space else ""
    return (
        f"{SVG_HEADER}"
        f'<svg width="{width}" height="{height}" viewBox="0 0 {width} {height}" '
        f'xmlns="http://www.w3.org/2000/svg"{space}>\n'
        f"  {body}\n"
        f"</svg>"
    )


def rasterize_svg(svg: str) -> Image.Image:
    png_bytes = cairosvg.svg2png(bytestring=svg.encode("utf-8"))
    img = Image.open(io.BytesIO(png_bytes))
    img.load()
    return img.convert("RGBA")


def apply_opacity(overlay: Image.Image, opacity: float) -> Image.Image:
    """
    Scale the overlay's alpha channel by `opacity`, leaving RGB untouched.

    Images without alpha are treated as fully opaque first.
    """
    overlay = overlay.convert("RGBA")
    if opacity >= 1:
        return overlay
    alpha = overlay.getchannel("A").point(lambda p: int(round(p * opacity)))
    overlay.putalpha(alpha)
    return overlay


def composite_at(canvas: Image.Image, overlay: Image.Image, x: int, y: int) -> Image.Image:
    """
    Alpha-composite `overlay` onto a copy of `canvas` with its top-left corner at (x, y).

    Parts of the overlay falling outside the canvas are clipped, including
    negative offsets.
    """
    # convert() always returns a new image, even for RGBA input
    result = canvas.convert("RGBA")
    overlay = overlay.convert("RGBA")

    src_x = max(-x, 0)
    src_y = max(-y, 0)
    dest_x = max(x, 0)
    dest_y = max(y, 0)
    if (
        src_x >= overlay.width
        or src_y >= overlay.height
        or dest_x >= result.width
        or dest_y >= result.height
    ):
        return result

    result.alpha_composite(overlay, dest=(dest_x, dest_y), source=(src_x, src_y))
    return result


def encode_canvas(img: Image.Image, fmt: str, quality: int = 90) -> bytes:
    """
    Encode the final canvas. PNG keeps alpha; JPEG is flattened onto white.
    """
    fmt = "jpg" if fmt == "jpeg" else fmt
    buf = io.BytesIO()
    if fmt == "png":
        img.save(buf, format="PNG")
    elif fmt == "jpg":
        rgba = img.convert("RGBA")
        flat = Image.new("RGB", rgba.size, WHITE[:3])
        flat.paste(rgba, mask=rgba.getchannel("A"))
        flat.save(buf, format="JPEG", quality=quality)
    else:
        raise ValueError(f"Unsupported output format: {fmt}")
    return buf.getvalue()
