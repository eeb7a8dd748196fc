import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from imagesteps.config import get_settings
from imagesteps.core import ImageStepPipeline, load_job
from imagesteps.errors import ImageStepError
from imagesteps.registry import available_steps
from imagesteps.render import encode_canvas


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render an image from a JSON job describing a canvas and an ordered list of steps."
    )
    parser.add_argument(
        "--job",
        type=Path,
        help="Path to the job JSON file.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Where to write the rendered image. Defaults to the job path with the job's format as suffix.",
    )
    parser.add_argument(
        "--list-steps",
        action="store_true",
        help="Print the registered step actions and exit.",
    )
    args = parser.parse_args(argv)
    if not args.list_steps and args.job is None:
        parser.error("--job is required unless --list-steps is given")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    # Load environment variables from a local .env file if present
    # (e.g. IMAGESTEPS_FETCH_TIMEOUT=10).
    load_dotenv()
    try:
        settings = get_settings()
    except ImageStepError as exc:
        print(f"⚠️  Invalid configuration: {exc}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    args = parse_args(argv)

    if args.list_steps:
        for name in available_steps():
            print(name)
        return 0

    try:
        payload = load_job(args.job)
        print(f"🎨 Rendering {len(payload.steps)} step(s) from {args.job.name}")
        image = ImageStepPipeline().run(payload)
    except ImageStepError as exc:
        print(f"⚠️  Image processing failed: {exc}", file=sys.stderr)
        return 1

    output = args.output or args.job.with_suffix(f".{payload.format}")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(encode_canvas(image, payload.format, payload.quality))
    print(f"✨ Wrote {image.width}x{image.height} {payload.format} to {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
