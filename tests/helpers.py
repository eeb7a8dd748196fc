import io
from typing import Tuple

from PIL import Image, ImageDraw

from imagesteps.render import new_canvas

RGBA = Tuple[int, int, int, int]

WHITE: RGBA = (255, 255, 255, 255)


def pixel(img: Image.Image, x: int, y: int) -> RGBA:
    return img.convert("RGBA").getpixel((x, y))


def canvas_with_square(
    width: int, height: int, box: Tuple[int, int, int, int], color: RGBA = (0, 0, 0, 255)
) -> Image.Image:
    """White canvas with a solid square drawn directly through Pillow (box is inclusive)."""
    img = new_canvas(width, height)
    ImageDraw.Draw(img).rectangle(box, fill=color)
    return img


def png_bytes(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def find_non_white(img: Image.Image, box: Tuple[int, int, int, int]):
    x0, y0, x1, y1 = box
    for y in range(y0, y1):
        for x in range(x0, x1):
            if pixel(img, x, y)[:3] != (255, 255, 255):
                return x, y
    return None


def darkest_sum(img: Image.Image, box: Tuple[int, int, int, int]) -> int:
    region = img.convert("RGB").crop(box)
    return min(r + g + b for r, g, b in region.getdata())


def outside_unchanged(before: Image.Image, after: Image.Image, box: Tuple[int, int, int, int]) -> bool:
    """True when every pixel outside `box` is identical in both images."""
    expected = after.convert("RGBA").copy()
    expected.paste(before.convert("RGBA").crop(box), box[:2])
    return expected.tobytes() == before.convert("RGBA").tobytes()
