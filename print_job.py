"""
Print job orchestration for MtgProxySheet.

Downloads run on the event loop (one at a time, rate limited). Decoding,
compositing and PDF compression are handed to an executor so a large job
never blocks other work on the same loop.

Usage:
    printer = Printer()
    pdf_bytes = await printer.print([CardRequest(card_id, quantity=4)])

    # From synchronous code
    pdf_bytes = print_cards([CardRequest(card_id, CardFace.BACK)])

    # Host scheduler, e.g. every second
    printer.prune_cache()
"""

import asyncio
from concurrent.futures import Executor
from typing import Dict, List, Optional, Sequence

from PIL import Image

from card_processing import CardKey, CardRequest, chunk_cards, expand_requests
from config import CACHE_TTL_SECONDS, DEFAULT_LAYOUT, REQUEST_DELAY_SECONDS, LayoutConfig, validate_layout
from content_cache import ContentCache
from errors import CompositionError, ProxySheetError, raise_if_cancelled
from image_handler import Downloader, ImageFetcher
from logging_config import get_logger
from output_utils import ProgressCallback, report_progress
from pdf_generator import assemble_pdf, compose_page
from web_utils import download_card_image

logger = get_logger(__name__)


class Printer:
    """
    Turns card requests into a multi-page proxy sheet PDF.

    The cache is the only state shared between jobs; pass one in to share
    it across Printers, or let each Printer own its own.
    """

    def __init__(
        self,
        cache: Optional[ContentCache] = None,
        download: Downloader = download_card_image,
        executor: Optional[Executor] = None,
        request_delay: float = REQUEST_DELAY_SECONDS,
        ttl: float = CACHE_TTL_SECONDS,
    ):
        self.cache = cache if cache is not None else ContentCache()
        self.fetcher = ImageFetcher(self.cache, download=download, request_delay=request_delay, ttl=ttl)
        # None -> the event loop's default executor
        self.executor = executor

    def prune_cache(self) -> int:
        return self.cache.prune()

    async def print(
        self,
        requests: Sequence[CardRequest],
        config: LayoutConfig = DEFAULT_LAYOUT,
        progress: Optional[ProgressCallback] = None,
        cancel_event=None,
    ) -> bytes:
        """
        Returns the finished PDF, or raises a ProxySheetError.
        There is no partial output: any failing stage aborts the job.
        """
        validate_layout(config)
        cells = expand_requests(requests)
        try:
            images = await self.fetcher.resolve(requests, progress=progress, cancel_event=cancel_event)
            logger.debug(f"card count: {len(cells)}, unique images: {len(images)}")
            logger.debug(f"cards size: {sum(len(data) for data in images.values())} bytes")
            pages = await self._create_pages(cells, images, config, progress, cancel_event)
            raise_if_cancelled(cancel_event, "pdf assembly")
            pdf_bytes = await self._run_in_executor(assemble_pdf, pages, config, progress)
        except ProxySheetError as e:
            logger.warning(f"Print job failed ({type(e).__name__}): {e}")
            raise
        logger.debug(f"pdf size: {len(pdf_bytes)}")
        return pdf_bytes

    async def _create_pages(
        self,
        cells: List[CardKey],
        images: Dict[CardKey, bytes],
        config: LayoutConfig,
        progress: Optional[ProgressCallback],
        cancel_event,
    ) -> List[Image.Image]:
        chunks = chunk_cards(cells, config.capacity)
        pages: List[Image.Image] = []
        for i, chunk in enumerate(chunks, 1):
            raise_if_cancelled(cancel_event, "page composition")
            report_progress(progress, f"Generating page images ({i} / {len(chunks)})")
            try:
                chunk_images = [images[key] for key in chunk]
            except KeyError as e:
                raise CompositionError(f"No image resolved for {e.args[0]}", {"page": i}) from e
            pages.append(await self._run_in_executor(compose_page, chunk_images, config))
        logger.debug(f"pages count: {len(pages)}")
        return pages

    async def _run_in_executor(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, func, *args)


def print_cards(
    requests: Sequence[CardRequest],
    config: LayoutConfig = DEFAULT_LAYOUT,
    printer: Optional[Printer] = None,
    progress: Optional[ProgressCallback] = None,
) -> bytes:
    """Blocking wrapper around Printer.print for callers without an event loop."""
    printer = printer if printer is not None else Printer()
    return asyncio.run(printer.print(requests, config, progress=progress))
