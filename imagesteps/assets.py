import io
import logging

import requests
from PIL import Image

from .config import get_settings
from .errors import ResourceFetchError

logger = logging.getLogger(__name__)


def load_bytes_from_url(url: str) -> bytes:
    """
    Fetch a remote resource and return its raw bytes.

    Any transport failure or non-2xx response raises `ResourceFetchError`;
    retries are left to the caller.
    """
    settings = get_settings()
    logger.debug("Fetching %s", url)
    try:
        response = requests.get(
            url,
            timeout=settings.fetch_timeout,
            headers={"User-Agent": settings.user_agent},
        )
    except requests.RequestException as exc:
        raise ResourceFetchError(url, reason=str(exc)) from exc

    if not response.ok:
        raise ResourceFetchError(url, status=response.status_code)
    return response.content


def load_image_from_url(url: str) -> Image.Image:
    data = load_bytes_from_url(url)
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (OSError, Image.DecompressionBombError) as exc:
        raise ResourceFetchError(url, reason=f"not a decodable image ({exc})") from exc
    return img.convert("RGBA")
