"""Map link helpers: follow short links and pull coordinates out of them"""
import logging
import re
from typing import Optional, Tuple

import httpx

from app.config import settings
from app.exceptions import ServiceError

logger = logging.getLogger(__name__)

_NUMBER = r"(-?\d+\.?\d*)"

# Checked in order; the first match wins
COORDINATE_PATTERNS = [
    re.compile(rf"@{_NUMBER},{_NUMBER}"),               # .../@22.30,70.78,17z
    re.compile(rf"[?&]q={_NUMBER},{_NUMBER}"),          # ?q=22.30,70.78
    re.compile(rf"/place/{_NUMBER},{_NUMBER}"),         # /place/22.30,70.78
    re.compile(rf"ll={_NUMBER},{_NUMBER}"),             # ll=22.30,70.78
    re.compile(rf"^\s*{_NUMBER}\s*,\s*{_NUMBER}\s*$"),  # bare "22.30, 70.78"
]


def extract_coordinates(url: str) -> Optional[Tuple[float, float]]:
    """Return (lat, lng) found in a maps URL or a bare "lat,lng" string"""
    if not url:
        return None
    for pattern in COORDINATE_PATTERNS:
        match = pattern.search(url)
        if match:
            return float(match.group(1)), float(match.group(2))
    return None


async def resolve_map_url(url: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> str:
    """Follow redirects of a (shortened) maps link and return the final URL"""
    try:
        async with httpx.AsyncClient(
            follow_redirects=True,
            timeout=settings.RESOLVE_URL_TIMEOUT_SECONDS,
            transport=transport,
        ) as client:
            response = await client.get(url)
    except httpx.HTTPError as e:
        logger.warning(f"Could not resolve map link {url}: {e}")
        raise ServiceError(
            message="Could not resolve URL",
            details={"reason": str(e)},
            status_code=400
        ) from e

    return str(response.url)
