from typing import Literal, Optional

from PIL import Image, ImageOps
from pydantic import AnyUrl

from ..assets import load_image_from_url
from ..render import apply_opacity, composite_at
from .base import NonNegativeInt, Opacity, PositiveInt, StepImplementation, StepParams


class DrawImageParams(StepParams):
    action: Literal["draw_image"] = "draw_image"
    source: AnyUrl
    x: NonNegativeInt = 0
    y: NonNegativeInt = 0
    width: Optional[PositiveInt] = None
    height: Optional[PositiveInt] = None
    opacity: Opacity = 1.0


def resize_cover(img: Image.Image, width: Optional[int], height: Optional[int]) -> Image.Image:
    """
    Resize to fill `width` x `height`, cropping the overflow around the centre.
    With only one dimension given the other follows the aspect ratio.
    """
    if width and height:
        return ImageOps.fit(img, (width, height), method=Image.LANCZOS)
    if width:
        height = max(1, round(img.height * width / img.width))
    else:
        width = max(1, round(img.width * height / img.height))
    return img.resize((width, height), Image.LANCZOS)


def render_draw_image(canvas: Image.Image, step: DrawImageParams) -> Image.Image:
    overlay = load_image_from_url(str(step.source))
    if step.width or step.height:
        overlay = resize_cover(overlay, step.width, step.height)
    overlay = apply_opacity(overlay, step.opacity)
    return composite_at(canvas, overlay, step.x, step.y)


draw_image = StepImplementation(
    name="draw_image",
    params_model=DrawImageParams,
    render=render_draw_image,
)
