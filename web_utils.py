"""
Web utilities for MtgProxySheet.
"""

import urllib.parse
from typing import Optional

import requests

from card_processing import CardFace
from config import REQUEST_HEADERS, REQUEST_TIMEOUT_SECONDS, SCRYFALL_IMAGE_URL
from errors import NetworkError
from logging_config import get_logger

logger = get_logger(__name__)


def card_image_url(card_id: str, face: str = CardFace.FRONT) -> str:
    """Builds the PNG image URL for one face of a card."""
    url = SCRYFALL_IMAGE_URL.format(card_id=urllib.parse.quote(card_id, safe=""))
    if face == CardFace.BACK:
        url += "&face=back"
    return url


def download_card_image(
    card_id: str,
    face: str = CardFace.FRONT,
    session: Optional[requests.Session] = None,
    timeout: float = REQUEST_TIMEOUT_SECONDS,
) -> bytes:
    """
    Downloads the PNG artwork for one card face.
    Raises NetworkError on transport errors, non-2xx statuses and bodies that are not an image.
    """
    url = card_image_url(card_id, face)
    logger.debug(f"Downloading {face} of {card_id} from {url}")
    getter = session.get if session is not None else requests.get
    try:
        r = getter(url, headers=REQUEST_HEADERS, timeout=timeout, allow_redirects=True)
        r.raise_for_status()
    except requests.exceptions.HTTPError as e:
        raise NetworkError(card_id, face, f"HTTP {e.response.status_code if e.response is not None else '?'}", url) from e
    except requests.exceptions.RequestException as e:
        raise NetworkError(card_id, face, f"network error: {e}", url) from e

    content_type = r.headers.get("Content-Type", "")
    if content_type and not content_type.lower().startswith("image/"):
        raise NetworkError(card_id, face, f"unexpected content type '{content_type}'", url)
    if not r.content:
        raise NetworkError(card_id, face, "empty response body", url)
    logger.debug(f"Downloaded {len(r.content)} bytes for {face} of {card_id}")
    return r.content
