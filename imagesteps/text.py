import math
from functools import lru_cache
from typing import Callable, List

from .render import escape_xml, font_family_attr, rasterize_svg, svg_document


MeasureFn = Callable[[str, str, int], int]

MEASURE_MIN_WIDTH = 2048
# cairo refuses image surfaces larger than this on either side
MEASURE_MAX_WIDTH = 32767


@lru_cache(maxsize=4096)
def measure_text_width(text: str, font_family: str, font_size_px: int) -> int:
    """
    Measure the rendered width (in pixels) of `text` for a given font and size.

    The text is rasterized into an oversized transparent SVG canvas and the
    width of the tight bounding box around the inked pixels is returned. This
    follows whatever glyph shaping the rasterizer applies, so no font-metrics
    table is needed.

    Runs wider than the largest surface cairo can allocate are clipped at that
    width; they still measure wider than any box they would have to fit.
    """
    if not text:
        return 0

    width = min(MEASURE_MAX_WIDTH, max(MEASURE_MIN_WIDTH, math.ceil(len(text) * font_size_px * 1.5)))
    height = min(MEASURE_MAX_WIDTH, max(32, math.ceil(font_size_px * 2)))
    ascent = round(font_size_px * 0.8)
    body = (
        f'<text x="0" y="{ascent}" '
        f"{font_family_attr(font_family)} "
        f'font-size="{font_size_px}px" fill="#000">{escape_xml(text)}</text>'
    )
    rendered = rasterize_svg(svg_document(width, height, body, preserve_space=True))

    bbox = rendered.getchannel("A").getbbox()
    if bbox is None:
        return 0
    left, _, right, _ = bbox
    return right - left


def wrap_text(
    text: str,
    max_width_px: int,
    font: str,
    font_size: int,
    measure: MeasureFn = measure_text_width,
) -> List[str]:
    """
    Greedy word wrap driven by measured pixel widths.

    Words that do not fit on an empty line on their own are broken per
    character; the tail of such a word carries over as the start of the next
    line.
    """
    if max_width_px <= 0:
        return [text]

    lines: List[str] = []
    current = ""
    for word in text.split():
        proposal = f"{current} {word}" if current else word
        if measure(proposal, font, font_size) <= max_width_px:
            current = proposal
            continue

        if current:
            lines.append(current)

        if measure(word, font, font_size) <= max_width_px:
            current = word
            continue

        chunk = ""
        for ch in word:
            test = chunk + ch
            if measure(test, font, font_size) <= max_width_px:
                chunk = test
            else:
                if chunk:
                    lines.append(chunk)
                chunk = ch
        current = chunk

    if current:
        lines.append(current)
    return lines
