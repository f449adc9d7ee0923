"""
Parsing utilities for MtgProxySheet.
"""

import re
from typing import List, Optional, Tuple

from PIL import ImageColor

from card_processing import CardFace, CardRequest
from config import PAPER_SIZES_PT

# Regex to parse card list lines
CARD_LINE_RE = re.compile(
    # 1. Optional count with an optional 'x', e.g. "4 " or "4x "
    r"^\s*(?:(?P<count>\d+)x?\s+)?"
    # 2. The card identifier, e.g. a Scryfall UUID
    r"(?P<card_id>[^\s#]+)"
    # 3. Optional face selector
    r"(?:\s+(?P<face>front|back))?"
    r"\s*$",
    re.IGNORECASE
)


def parse_card_line(line: str) -> Optional[CardRequest]:
    """
    Parses 'COUNT[x] ID [front|back]'. The count defaults to 1 and the face to front.
    Returns None for lines that do not match.
    """
    match = CARD_LINE_RE.match(line)
    if not match:
        return None
    data = match.groupdict()
    return CardRequest(
        card_id=data['card_id'],
        face=data['face'].lower() if data.get('face') else CardFace.FRONT,
        quantity=int(data['count']) if data.get('count') else 1,
    )


def parse_card_list(card_list_path: str, debug: bool = False) -> Tuple[List[CardRequest], List[str]]:
    """
    Reads a card list file. Blank lines and '#' comments are skipped.
    Returns the requests in file order and the lines that could not be parsed.
    """
    requests: List[CardRequest] = []
    invalid_lines: List[str] = []
    with open(card_list_path, 'r', encoding='utf-8') as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            request = parse_card_line(line)
            if request is None or request.quantity < 1:
                print(f"  Warning: Skipping malformed line {line_num}: '{line}'")
                invalid_lines.append(line)
                continue
            if debug: print(f"DEBUG: Line {line_num}: {request.quantity}x {request.card_id} ({request.face})")
            requests.append(request)
    return requests, invalid_lines


def parse_color(color_str: str) -> Tuple[int, int, int, int]:
    """Parses a PIL color string ('gray', '#7f7f7f', '#7f7f7fff') into RGBA."""
    rgb = ImageColor.getrgb(color_str.strip())
    if len(rgb) == 3:
        return (rgb[0], rgb[1], rgb[2], 0xff)
    return tuple(rgb)


def parse_paper_type(size_str: str) -> str:
    size_str = size_str.lower().strip()
    if size_str not in PAPER_SIZES_PT:
        raise ValueError(f"Invalid paper type: '{size_str}'. Supported: {', '.join(PAPER_SIZES_PT.keys())}")
    return size_str
