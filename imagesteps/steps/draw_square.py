from typing import Literal, Optional

from PIL import Image
from pydantic import StrictStr

from ..render import composite_at, escape_xml, rasterize_svg, svg_document
from .base import NonNegativeFloat, NonNegativeInt, Opacity, PositiveInt, StepImplementation, StepParams


class DrawSquareParams(StepParams):
    action: Literal["draw_square"] = "draw_square"
    x: NonNegativeInt
    y: NonNegativeInt
    width: PositiveInt
    height: PositiveInt
    fill: Optional[StrictStr] = None
    stroke: StrictStr = "#000000"
    stroke_width: NonNegativeFloat = 0.0
    radius: NonNegativeFloat = 0.0
    opacity: Opacity = 1.0


def svg_for_square(step: DrawSquareParams) -> str:
    fill = escape_xml(step.fill) if step.fill else "none"
    # stroke_width 0 means no outline at all
    stroke = escape_xml(step.stroke) if step.stroke_width > 0 else "none"
    rect = (
        f'<rect x="0" y="0" width="{step.width}" height="{step.height}" '
        f'rx="{step.radius}" ry="{step.radius}" fill="{fill}" stroke="{stroke}" '
        f'stroke-width="{step.stroke_width}" fill-opacity="{step.opacity}" />'
    )
    return svg_document(step.width, step.height, rect)


def render_draw_square(canvas: Image.Image, step: DrawSquareParams) -> Image.Image:
    overlay = rasterize_svg(svg_for_square(step))
    return composite_at(canvas, overlay, step.x, step.y)


draw_square = StepImplementation(
    name="draw_square",
    params_model=DrawSquareParams,
    render=render_draw_square,
)
