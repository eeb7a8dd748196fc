import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError, field_validator

from .errors import CanvasRequiredError, ImageStepError, PayloadError, UnknownStepError
from .registry import resolve_step
from .render import bake, new_canvas

logger = logging.getLogger(__name__)


OutputFormat = Literal["png", "jpg"]


class CanvasSize(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: PositiveInt
    height: PositiveInt


class JobPayload(BaseModel):
    """
    Validated job envelope. Only the base shape of each step (a string
    `action`) is checked here; every step validates its own fields.
    """

    model_config = ConfigDict(frozen=True)

    format: OutputFormat = "png"
    quality: int = Field(90, ge=1, le=100)
    canvas: Optional[CanvasSize] = None
    steps: List[Dict[str, Any]] = Field(..., min_length=1)

    @field_validator("format", mode="before")
    @classmethod
    def normalise_format(cls, value: Any) -> Any:
        return "jpg" if value == "jpeg" else value

    @field_validator("steps")
    @classmethod
    def steps_have_action(cls, steps: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        for idx, step in enumerate(steps):
            if not isinstance(step.get("action"), str):
                raise ValueError(f"steps[{idx}].action must be a string")
        return steps


def parse_job(data: Any) -> JobPayload:
    try:
        return JobPayload.model_validate(data)
    except ValidationError as exc:
        raise PayloadError("Invalid payload", errors=exc.errors(include_url=False)) from exc


def load_job(path: Path) -> JobPayload:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise PayloadError(f"Invalid payload: {path} is not valid JSON ({exc})") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise PayloadError(f"Cannot read job file {path}: {exc}") from exc
    return parse_job(data)


class ImageStepPipeline:
    """
    Folds a white canvas through the job's steps, in order:
    - resolve each step's action in the registry
    - apply it to the current canvas
    - bake the result before the next step reads it

    Any failure aborts the run; no partial canvas is returned.
    """

    def run(self, payload: JobPayload) -> Image.Image:
        if payload.canvas is None:
            raise CanvasRequiredError()

        image = new_canvas(payload.canvas.width, payload.canvas.height)
        total = len(payload.steps)
        for idx, step in enumerate(payload.steps):
            action = step["action"]
            impl = resolve_step(action)
            if impl is None:
                logger.error("Step %d/%d: unknown action %r", idx + 1, total, action)
                raise UnknownStepError(action)

            logger.debug("Step %d/%d: %s", idx + 1, total, action)
            try:
                image = impl.apply(image, step)
            except ImageStepError as exc:
                logger.error("Step %d/%d (%s) failed: %s", idx + 1, total, action, exc)
                raise
            image = bake(image)

        return image


def process_image_steps(payload: JobPayload) -> Image.Image:
    return ImageStepPipeline().run(payload)
