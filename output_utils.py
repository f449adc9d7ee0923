"""
Output utilities for MtgProxySheet.
"""

import os
from typing import Callable, Optional, Sequence

from card_processing import CardRequest
from logging_config import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[str], None]


def report_progress(progress: Optional[ProgressCallback], message: str) -> None:
    """Progress is advisory: a failing sink never stops the job."""
    if progress is None:
        return
    try:
        progress(message)
    except Exception as e:
        logger.warning(f"Progress callback failed on '{message}': {e}")


def print_card_summary(requests: Sequence[CardRequest], capacity: int):
    """Prints what is about to be laid out."""
    total = sum(r.quantity for r in requests)
    unique = len({r.key for r in requests})
    pages = (total + capacity - 1) // capacity
    print(f"  {total} card(s), {unique} unique image(s), {pages} page(s) at {capacity} cards per page")


def write_pdf_file(output_path: str, pdf_bytes: bytes) -> str:
    """Writes the PDF, adding the extension and creating the directory as needed."""
    if not output_path.lower().endswith(".pdf"):
        output_path = f"{output_path}.pdf"
    output_dir = os.path.dirname(output_path)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir, exist_ok=True)
    with open(output_path, 'wb') as f:
        f.write(pdf_bytes)
    size = len(pdf_bytes)
    size_str = f"{size / (1024 * 1024):.1f} MB" if size >= 1024 * 1024 else f"{size / 1024:.1f} KB"
    print(f"PDF saved to: {output_path} ({size_str})")
    return output_path
