"""
Custom exceptions for MtgProxySheet.

Exception Hierarchy:
    ProxySheetError (base)
    ├── NetworkError      - Card image download failed
    ├── DecodeError       - Card image bytes could not be decoded
    ├── CompositionError  - A page could not be laid out
    ├── AssemblyError     - The PDF could not be written
    └── PrintJobCancelled - The caller asked the job to stop

Every kind aborts the whole print job. The kind is for diagnostics only.
"""

from typing import Optional, Dict, Any


class ProxySheetError(Exception):
    """
    Base exception for all MtgProxySheet errors.

    Callers that only need to know whether a job failed can catch this
    single class.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class NetworkError(ProxySheetError):
    """
    A card image could not be retrieved.

    Covers transport errors, non-success HTTP statuses and bodies that are
    empty or not an image.
    """

    def __init__(self, card_id: str, face: str, reason: str, url: Optional[str] = None):
        message = f"Error downloading {face} face of card {card_id}: {reason}"
        details: Dict[str, Any] = {"card_id": card_id, "face": face}
        if url:
            details["url"] = url
        super().__init__(message, details)
        self.card_id = card_id
        self.face = face


class DecodeError(ProxySheetError):
    """Card image bytes are not a readable raster."""

    def __init__(self, reason: str, cell_index: Optional[int] = None):
        details = {"cell_index": cell_index} if cell_index is not None else None
        super().__init__(f"Could not decode image: {reason}", details)
        self.cell_index = cell_index


class CompositionError(ProxySheetError):
    """A page chunk violates the layout, e.g. a resolved image is missing."""


class AssemblyError(ProxySheetError):
    """Encoding, compression or I/O failure while writing the PDF."""


class PrintJobCancelled(ProxySheetError):
    """The caller's cancellation signal was set."""

    def __init__(self, stage: str):
        super().__init__(f"Print job cancelled during {stage}", {"stage": stage})
        self.stage = stage


def raise_if_cancelled(cancel_event, stage: str) -> None:
    """`cancel_event` is anything with is_set(), e.g. asyncio.Event or threading.Event."""
    if cancel_event is not None and cancel_event.is_set():
        raise PrintJobCancelled(stage)
