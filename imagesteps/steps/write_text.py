from typing import List, Literal, Union

from PIL import Image
from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr

from ..render import apply_opacity, composite_at, escape_xml, font_family_attr, rasterize_svg, svg_document
from ..text import wrap_text
from .base import (
    NonNegativeFloat,
    NonNegativeInt,
    Opacity,
    PositiveFloat,
    PositiveInt,
    StepImplementation,
    StepParams,
)


class BorderParams(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    color: StrictStr = "#000000"
    stroke_width: PositiveFloat = 2.0
    radius: NonNegativeFloat = 0.0


class WriteTextParams(StepParams):
    action: Literal["write_text"] = "write_text"
    x: NonNegativeInt
    y: NonNegativeInt
    width: PositiveInt
    height: PositiveInt
    text: StrictStr
    font: StrictStr = "Arial"
    font_size: PositiveInt = 16
    color: StrictStr = "#000000"
    align: Literal["left", "center", "right"] = "left"
    valign: Literal["top", "center", "bottom"] = "top"
    line_break: StrictBool = True
    opacity: Opacity = 1.0
    draw_border: Union[StrictBool, BorderParams] = False


TEXT_ANCHORS = {"left": "start", "center": "middle", "right": "end"}


def render_border(border: Union[bool, BorderParams], width: int, height: int) -> str:
    if border is False:
        return ""
    cfg = border if isinstance(border, BorderParams) else BorderParams()
    return (
        f'<rect x="0" y="0" width="{width}" height="{height}" fill="none" '
        f'stroke="{escape_xml(cfg.color)}" stroke-width="{cfg.stroke_width}" '
        f'rx="{cfg.radius}" ry="{cfg.radius}" />'
    )


def first_baseline(step: WriteTextParams, line_count: int) -> float:
    """
    y of the first baseline inside the box. The block is at least one line
    tall, so an empty text still positions like a single line.
    """
    ascent = step.font_size * 0.8
    line_height = round(step.font_size * 1.2)
    block_height = max(line_height, line_count * line_height)

    if step.valign == "top":
        return ascent
    if step.valign == "center":
        return (step.height - block_height) / 2 + ascent
    return step.height - block_height + ascent - step.font_size * 0.2


def svg_for_text_box(step: WriteTextParams, lines: List[str]) -> str:
    """
    Build the SVG for the text box: optional border first, then one tspan
    per wrapped line.
    """
    anchor = TEXT_ANCHORS[step.align]
    x_pos = {"left": 0, "center": step.width / 2, "right": step.width}[step.align]
    line_height = round(step.font_size * 1.2)
    y_start = first_baseline(step, len(lines))

    spans = "".join(
        f'<tspan x="{x_pos:g}" dy="{0 if idx == 0 else line_height}">{escape_xml(line)}</tspan>'
        for idx, line in enumerate(lines)
    )
    text = (
        f'<text x="{x_pos:g}" y="{y_start:g}" text-anchor="{anchor}" '
        f"{font_family_attr(step.font)} "
        f'font-size="{step.font_size}px" fill="{escape_xml(step.color)}">{spans}</text>'
    )
    body = render_border(step.draw_border, step.width, step.height) + "\n  " + text
    return svg_document(step.width, step.height, body, preserve_space=True)


def render_write_text(canvas: Image.Image, step: WriteTextParams) -> Image.Image:
    if step.line_break:
        lines = wrap_text(step.text, step.width, step.font, step.font_size)
    else:
        lines = [step.text]

    overlay = rasterize_svg(svg_for_text_box(step, lines))
    overlay = apply_opacity(overlay, step.opacity)
    return composite_at(canvas, overlay, step.x, step.y)


write_text = StepImplementation(
    name="write_text",
    params_model=WriteTextParams,
    render=render_write_text,
)
