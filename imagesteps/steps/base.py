import logging
from dataclasses import dataclass
from typing import Annotated, Any, Callable, Dict, Generic, Optional, Type, TypeVar

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, ValidationError

from ..errors import MissingBaseImageError, StepValidationError

logger = logging.getLogger(__name__)

# Strict numeric fields: strings, booleans and integral floats are rejected for
# ints; floats still accept plain ints.
NonNegativeInt = Annotated[StrictInt, Field(ge=0)]
PositiveInt = Annotated[StrictInt, Field(gt=0)]
NonNegativeFloat = Annotated[StrictFloat, Field(ge=0)]
PositiveFloat = Annotated[StrictFloat, Field(gt=0)]
Opacity = Annotated[StrictFloat, Field(ge=0, le=1)]


class StepParams(BaseModel):
    """Base for per-step parameter models. Unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore", frozen=True)


P = TypeVar("P", bound=StepParams)


@dataclass(frozen=True)
class StepImplementation(Generic[P]):
    """
    One registered step variant.

    `is_base_image_provider` marks steps that may run without an existing
    canvas. No current step sets it; the orchestrator always creates a canvas
    before the first step.
    """

    name: str
    params_model: Type[P]
    render: Callable[[Image.Image, P], Image.Image]
    is_base_image_provider: bool = False

    def parse(self, descriptor: Dict[str, Any]) -> P:
        try:
            return self.params_model.model_validate(descriptor)
        except ValidationError as exc:
            raise StepValidationError(
                self.name,
                f"invalid parameters ({exc.error_count()} error(s))",
                errors=exc.errors(include_url=False),
            ) from exc

    def apply(self, canvas: Optional[Image.Image], descriptor: Dict[str, Any]) -> Image.Image:
        if canvas is None and not self.is_base_image_provider:
            raise MissingBaseImageError(self.name)
        params = self.parse(descriptor)
        logger.debug("Applying %s with %s", self.name, params)
        base = canvas.copy() if canvas is not None else None
        return self.render(base, params)
