"""
Declarative image-step pipeline.

Modules:
- core: job payload model and the step orchestrator
- registry: action name -> step implementation table
- steps: the individual step variants
- text: rendered-width measurement and greedy line wrapping
- render: canvas, SVG rasterization, compositing and encoding helpers
- assets: remote image loading
"""

from .core import ImageStepPipeline, JobPayload, load_job, parse_job, process_image_steps
from .errors import ImageStepError

__all__ = [
    "ImageStepError",
    "ImageStepPipeline",
    "JobPayload",
    "load_job",
    "parse_job",
    "process_image_steps",
]
