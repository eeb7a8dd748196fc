import math
from dataclasses import dataclass
from typing import Annotated, List, Literal, Sequence, Tuple

from PIL import Image
from pydantic import Field, StrictFloat, StrictStr

from ..render import composite_at, escape_xml, rasterize_svg, svg_document
from .base import Opacity, PositiveFloat, StepImplementation, StepParams

Point = Tuple[float, float]
PointField = Annotated[List[StrictFloat], Field(min_length=2, max_length=2)]


class DrawLineParams(StepParams):
    action: Literal["draw_line"] = "draw_line"
    points: List[PointField] = Field(..., min_length=2)
    stroke: StrictStr = "#000000"
    stroke_width: PositiveFloat = 2.0
    opacity: Opacity = 1.0


@dataclass(frozen=True)
class ViewBox:
    min_x: int
    min_y: int
    width: int
    height: int


def to_view_box(points: Sequence[Point]) -> ViewBox:
    """
    Tight integer bounding box of `points`, at least 1x1 so the markup
    never has zero area.
    """
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    min_x = math.floor(min(xs))
    min_y = math.floor(min(ys))
    max_x = math.ceil(max(xs))
    max_y = math.ceil(max(ys))
    return ViewBox(min_x, min_y, max(1, max_x - min_x), max(1, max_y - min_y))


def svg_for_line(step: DrawLineParams, box: ViewBox) -> str:
    normalized = " ".join(f"{x - box.min_x:g},{y - box.min_y:g}" for x, y in step.points)
    polyline = (
        f'<polyline points="{normalized}" fill="none" stroke="{escape_xml(step.stroke)}" '
        f'stroke-width="{step.stroke_width}" stroke-opacity="{step.opacity}" />'
    )
    return svg_document(box.width, box.height, polyline)


def render_draw_line(canvas: Image.Image, step: DrawLineParams) -> Image.Image:
    box = to_view_box(step.points)
    overlay = rasterize_svg(svg_for_line(step, box))
    return composite_at(canvas, overlay, box.min_x, box.min_y)


draw_line = StepImplementation(
    name="draw_line",
    params_model=DrawLineParams,
    render=render_draw_line,
)
