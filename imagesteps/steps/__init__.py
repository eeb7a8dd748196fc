"""
Step variants. Each module defines a parameter model and a render function,
bundled into a `StepImplementation`:
- draw_image: composite a fetched bitmap
- write_text: wrapped, aligned text with an optional border
- draw_square: filled and/or stroked (rounded) rectangle
- draw_line: open polyline
- blur_region: Gaussian blur restricted to a rectangle
"""

from typing import Annotated, Any, Dict, Union

from pydantic import Field, TypeAdapter, ValidationError

from ..errors import StepValidationError
from .base import StepImplementation, StepParams
from .blur_region import BlurRegionParams, blur_region
from .draw_image import DrawImageParams, draw_image
from .draw_line import DrawLineParams, draw_line
from .draw_square import DrawSquareParams, draw_square
from .write_text import WriteTextParams, write_text

StepDescriptor = Annotated[
    Union[DrawImageParams, WriteTextParams, DrawSquareParams, DrawLineParams, BlurRegionParams],
    Field(discriminator="action"),
]

BUILTIN_STEPS = (draw_image, write_text, draw_square, draw_line, blur_region)

_DESCRIPTOR_ADAPTER = TypeAdapter(StepDescriptor)


def parse_step(descriptor: Dict[str, Any]) -> StepParams:
    """
    Validate an untyped descriptor into the parameter model of the variant its
    `action` selects, without going through the registry.
    """
    try:
        return _DESCRIPTOR_ADAPTER.validate_python(descriptor)
    except ValidationError as exc:
        action = descriptor.get("action") if isinstance(descriptor, dict) else None
        raise StepValidationError(
            str(action or "step"),
            f"invalid descriptor ({exc.error_count()} error(s))",
            errors=exc.errors(include_url=False),
        ) from exc


__all__ = [
    "BUILTIN_STEPS",
    "StepDescriptor",
    "StepImplementation",
    "StepParams",
    "parse_step",
]
