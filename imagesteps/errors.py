from typing import Any, List, Optional


class ImageStepError(Exception):
    """Base class for every failure that aborts an image-step run."""


class PayloadError(ImageStepError):
    """
    The job envelope itself is malformed (bad format, empty steps, ...).

    `errors` carries the structured validation details when available.
    """

    def __init__(self, message: str, errors: Optional[List[Any]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class CanvasRequiredError(PayloadError):
    def __init__(self) -> None:
        super().__init__("canvas.width and canvas.height are required")


class UnknownStepError(PayloadError):
    def __init__(self, action: str) -> None:
        super().__init__(f"Unknown step action: {action}")
        self.action = action


class StepValidationError(ImageStepError):
    def __init__(self, step: str, message: str, errors: Optional[List[Any]] = None) -> None:
        super().__init__(f"{step}: {message}")
        self.step = step
        self.errors = errors or []


class ResourceFetchError(ImageStepError):
    def __init__(self, url: str, status: Optional[int] = None, reason: str = "") -> None:
        detail = f" (HTTP {status})" if status is not None else ""
        if reason:
            detail += f": {reason}"
        super().__init__(f"Failed to load: {url}{detail}")
        self.url = url
        self.status = status


class MissingBaseImageError(ImageStepError):
    def __init__(self, step: str) -> None:
        super().__init__(f"{step} requires an existing image")
        self.step = step


class ConfigurationError(ImageStepError):
    def __init__(self, variable: str, value: str, expected: str) -> None:
        super().__init__(f"{variable}={value!r} is invalid: expected {expected}")
        self.variable = variable
