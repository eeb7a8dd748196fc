from typing import Literal

from PIL import Image, ImageFilter

from ..errors import StepValidationError
from .base import NonNegativeInt, PositiveFloat, PositiveInt, StepImplementation, StepParams


class BlurRegionParams(StepParams):
    action: Literal["blur_region"] = "blur_region"
    x: NonNegativeInt
    y: NonNegativeInt
    width: PositiveInt
    height: PositiveInt
    sigma: PositiveFloat = 10.0


def render_blur_region(canvas: Image.Image, step: BlurRegionParams) -> Image.Image:
    box = (step.x, step.y, step.x + step.width, step.y + step.height)
    if box[2] > canvas.width or box[3] > canvas.height:
        raise StepValidationError(
            "blur_region",
            f"region {box} exceeds canvas {canvas.width}x{canvas.height}",
        )

    region = canvas.crop(box).filter(ImageFilter.GaussianBlur(radius=step.sigma))
    canvas.paste(region, box[:2])
    return canvas


blur_region = StepImplementation(
    name="blur_region",
    params_model=BlurRegionParams,
    render=render_blur_region,
)
