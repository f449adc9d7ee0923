"""
Card request processing for MtgProxySheet.

Turns the caller's card requests into the ordered list of grid cells that
end up on the sheets, and into the distinct set of images to retrieve.
"""

from typing import Dict, List, NamedTuple, Optional, Sequence, TypeVar

T = TypeVar("T")


class CardFace:
    FRONT = "front"
    BACK = "back"

CARD_FACES = (CardFace.FRONT, CardFace.BACK)


class CardKey(NamedTuple):
    """Cache and download identity of one piece of artwork."""
    card_id: str
    face: str = CardFace.FRONT


class CardRequest(NamedTuple):
    card_id: str
    face: str = CardFace.FRONT
    quantity: int = 1
    # Already downloaded artwork; skips the network for this key
    image_data: Optional[bytes] = None

    @property
    def key(self) -> CardKey:
        return CardKey(self.card_id, self.face)


def validate_request(request: CardRequest) -> CardRequest:
    if not request.card_id:
        raise ValueError("Card request is missing a card identifier")
    if request.face not in CARD_FACES:
        raise ValueError(f"Invalid card face '{request.face}' for {request.card_id}. Supported: {', '.join(CARD_FACES)}")
    if not isinstance(request.quantity, int) or request.quantity < 1:
        raise ValueError(f"Quantity for {request.card_id} must be a positive integer, got {request.quantity!r}")
    return request


def expand_requests(requests: Sequence[CardRequest]) -> List[CardKey]:
    """
    Flattens requests by quantity, preserving input order.
    Repeated requests for the same key are not merged.
    """
    cells: List[CardKey] = []
    for request in requests:
        validate_request(request)
        cells.extend([request.key] * request.quantity)
    return cells


def distinct_keys(requests: Sequence[CardRequest]) -> List[CardKey]:
    """Unique keys in first-seen order."""
    seen: Dict[CardKey, None] = {}
    for request in requests:
        seen.setdefault(request.key, None)
    return list(seen)


def chunk_cards(cells: Sequence[T], chunk_size: int) -> List[List[T]]:
    """Splits cells into page-sized chunks. Only the last one may be short."""
    if chunk_size < 1:
        raise ValueError(f"Chunk size must be positive, got {chunk_size}")
    return [list(cells[i:i + chunk_size]) for i in range(0, len(cells), chunk_size)]
