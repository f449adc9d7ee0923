"""
Image retrieval for MtgProxySheet.
"""

import asyncio
from typing import Callable, Dict, Optional, Sequence

from card_processing import CardKey, CardRequest, distinct_keys
from config import CACHE_TTL_SECONDS, REQUEST_DELAY_SECONDS
from content_cache import ContentCache
from errors import NetworkError, raise_if_cancelled
from logging_config import get_logger
from output_utils import ProgressCallback, report_progress
from web_utils import download_card_image

logger = get_logger(__name__)

# (card_id, face) -> raw image bytes
Downloader = Callable[[str, str], bytes]


class ImageFetcher:
    """
    Resolves card keys to image bytes: cache first, then a rate-limited download.

    Downloads run one at a time on a worker thread. Each one is paired with
    a delay started at the same moment, and the next key is only handled
    once both have finished. Cache hits cost no delay.
    """

    def __init__(
        self,
        cache: ContentCache,
        download: Downloader = download_card_image,
        request_delay: float = REQUEST_DELAY_SECONDS,
        ttl: float = CACHE_TTL_SECONDS,
    ):
        self.cache = cache
        self.download = download
        self.request_delay = request_delay
        self.ttl = ttl

    async def resolve(
        self,
        requests: Sequence[CardRequest],
        progress: Optional[ProgressCallback] = None,
        cancel_event=None,
    ) -> Dict[CardKey, bytes]:
        """
        Returns the bytes of every distinct key in `requests`.
        Any failure aborts the whole call; nothing partial is returned.
        """
        supplied: Dict[CardKey, bytes] = {}
        for request in requests:
            if request.image_data is not None:
                supplied.setdefault(request.key, request.image_data)

        keys = distinct_keys(requests)
        resolved: Dict[CardKey, bytes] = {}
        for i, key in enumerate(keys, 1):
            raise_if_cancelled(cancel_event, "image retrieval")
            report_progress(progress, f"Fetching card images ({i} / {len(keys)})")
            if key in supplied:
                resolved[key] = supplied[key]
                continue
            data = self.cache.get(key)
            if data is not None:
                logger.debug(f"Cache hit for {key.face} of {key.card_id}")
            else:
                data = await self._download_rate_limited(key)
                self.cache.put(key, data, self.ttl)
            resolved[key] = data
        return resolved

    async def _download_rate_limited(self, key: CardKey) -> bytes:
        data, _ = await asyncio.gather(
            asyncio.to_thread(self._download, key),
            asyncio.sleep(self.request_delay),
        )
        return data

    def _download(self, key: CardKey) -> bytes:
        try:
            data = self.download(key.card_id, key.face)
        except NetworkError:
            raise
        except Exception as e:
            raise NetworkError(key.card_id, key.face, f"{type(e).__name__}: {e}") from e
        if not data:
            raise NetworkError(key.card_id, key.face, "empty response body")
        return data
