"""
Configuration constants for MtgProxySheet.
"""

from typing import Dict, NamedTuple, Tuple
from reportlab.lib.pagesizes import A4, letter, legal

# --- Card artwork raster, as served by the image API ---
CARD_WIDTH_PX = 745
CARD_HEIGHT_PX = 1040

# --- Image retrieval ---
SCRYFALL_IMAGE_URL = "https://api.scryfall.com/cards/{card_id}?format=image&version=png"
REQUEST_HEADERS: Dict[str, str] = {
    "User-Agent": "MtgProxySheet/1.0",
    "Accept": "image/png,image/*;q=0.8",
}
REQUEST_TIMEOUT_SECONDS = 30
# Floor between the starts of two consecutive downloads
REQUEST_DELAY_SECONDS = 0.05

# --- Content cache ---
CACHE_TTL_SECONDS = 3600

# --- PDF placement: pixels -> points for 2.5in x 3.5in cards ---
POINTS_PER_INCH = 72
RASTER_PPI_X = 298
RASTER_PPI_Y = 297

PAPER_SIZES_PT: Dict[str, Tuple[float, float]] = {
    "letter": letter, "legal": legal, "a4": A4,
}

RGBA = Tuple[int, int, int, int]
WHITE: RGBA = (0xff, 0xff, 0xff, 0xff)
BLACK: RGBA = (0x00, 0x00, 0x00, 0xff)


class LayoutConfig(NamedTuple):
    """Grid, cut-guide and page geometry for one print job."""
    rows: int = 3
    cols: int = 3
    line_len: int = 40
    line_width: int = 1
    line_color: RGBA = (0x7f, 0x7f, 0x7f, 0xff)
    bleed_inset: int = 8
    # Page size in PDF points
    page_width: int = 595
    page_height: int = 792

    @property
    def capacity(self) -> int:
        return self.rows * self.cols


DEFAULT_LAYOUT = LayoutConfig()


def validate_layout(config: LayoutConfig) -> LayoutConfig:
    """Raises ValueError if the layout can not produce a sensible page."""
    for field in ("rows", "cols", "line_len", "line_width", "bleed_inset", "page_width", "page_height"):
        value = getattr(config, field)
        if not isinstance(value, int) or value <= 0:
            raise ValueError(f"Layout '{field}' must be a positive integer, got {value!r}")
    if config.line_width > config.line_len:
        raise ValueError(f"Cut line width ({config.line_width}) can not exceed cut line length ({config.line_len})")
    if config.bleed_inset > config.line_len:
        raise ValueError(f"Bleed inset ({config.bleed_inset}) can not exceed cut line length ({config.line_len})")
    color = tuple(config.line_color)
    if len(color) != 4 or not all(isinstance(c, int) and 0 <= c <= 255 for c in color):
        raise ValueError(f"Cut line color must be an RGBA tuple of 0-255 ints, got {config.line_color!r}")
    return config
