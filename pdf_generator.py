"""
Page composition and PDF generation for MtgProxySheet.

compose_page() lays one chunk of card images out on a white sheet with a
black bleed behind the grid and cut guides at every grid intersection.
assemble_pdf() embeds the composed sheets, one per PDF page, scaled to
2.5in x 3.5in cards and centered on the page.
"""

import io
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from config import (
    BLACK, CARD_HEIGHT_PX, CARD_WIDTH_PX, DEFAULT_LAYOUT, POINTS_PER_INCH,
    RASTER_PPI_X, RASTER_PPI_Y, WHITE, LayoutConfig,
)
from errors import AssemblyError, CompositionError, DecodeError
from logging_config import get_logger
from output_utils import ProgressCallback, report_progress

logger = get_logger(__name__)


def page_size_px(config: LayoutConfig) -> Tuple[int, int]:
    return (
        config.cols * CARD_WIDTH_PX + 2 * config.line_len,
        config.rows * CARD_HEIGHT_PX + 2 * config.line_len,
    )


def decode_card_image(data: bytes, cell_index: Optional[int] = None) -> Image.Image:
    """Decodes card artwork into an RGBA cell of the fixed card size."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            card = img.convert("RGBA")
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise DecodeError(str(e), cell_index) from e
    if card.size != (CARD_WIDTH_PX, CARD_HEIGHT_PX):
        logger.debug(f"Resizing cell {cell_index} from {card.size} to {(CARD_WIDTH_PX, CARD_HEIGHT_PX)}")
        card = card.resize((CARD_WIDTH_PX, CARD_HEIGHT_PX))
    return card


def draw_cut_guides(page: Image.Image, config: LayoutConfig):
    # A cross at every grid intersection, outer border included
    draw = ImageDraw.Draw(page)
    color = tuple(config.line_color)
    line_len, line_width = config.line_len, config.line_width
    for i in range(config.cols + 1):
        for j in range(config.rows + 1):
            x = line_len + i * CARD_WIDTH_PX
            y = line_len + j * CARD_HEIGHT_PX
            draw.rectangle([x - line_len, y - line_width, x + line_len - 1, y + line_width - 1], fill=color)
            draw.rectangle([x - line_width, y - line_len, x + line_width - 1, y + line_len - 1], fill=color)


def compose_page(card_images: Sequence[bytes], config: LayoutConfig = DEFAULT_LAYOUT) -> Image.Image:
    """
    Composes one sheet from up to rows*cols card images, in row-major order.
    Short chunks are padded with white cells. Returns an opaque RGB image.
    """
    capacity = config.capacity
    if len(card_images) > capacity:
        raise CompositionError(
            f"Page chunk has {len(card_images)} cards but the grid only holds {capacity}",
            {"rows": config.rows, "cols": config.cols},
        )
    logger.debug(f"Creating page image from {len(card_images)} card(s)")

    cells: List[Image.Image] = [decode_card_image(data, i) for i, data in enumerate(card_images)]
    padding = Image.new("RGBA", (CARD_WIDTH_PX, CARD_HEIGHT_PX), WHITE)
    cells.extend([padding] * (capacity - len(cells)))

    page = Image.new("RGBA", page_size_px(config), WHITE)

    # Black behind the grid, reaching past the cut lines by the bleed inset
    bleed_origin = config.line_len - config.bleed_inset
    bleed_width = config.cols * CARD_WIDTH_PX + 2 * config.bleed_inset
    bleed_height = config.rows * CARD_HEIGHT_PX + 2 * config.bleed_inset
    ImageDraw.Draw(page).rectangle(
        [bleed_origin, bleed_origin, bleed_origin + bleed_width - 1, bleed_origin + bleed_height - 1],
        fill=BLACK,
    )

    for idx, cell in enumerate(cells):
        row, col = divmod(idx, config.cols)
        page.alpha_composite(cell, dest=(col * CARD_WIDTH_PX + config.line_len, row * CARD_HEIGHT_PX + config.line_len))

    draw_cut_guides(page, config)

    # PDF image streams carry no alpha
    flattened = page.convert("RGB")
    page.close()
    return flattened


def calculate_page_placement(width_px: int, height_px: int, config: LayoutConfig = DEFAULT_LAYOUT) -> Tuple[int, int, int, int]:
    """
    Returns (width, height, x, y) in PDF points for a composed sheet:
    sized as 2.5in x 3.5in cards at the artwork's native resolution, centered.
    """
    width_pt = width_px * POINTS_PER_INCH // RASTER_PPI_X
    height_pt = height_px * POINTS_PER_INCH // RASTER_PPI_Y
    x_pt = (config.page_width - width_pt) // 2
    y_pt = (config.page_height - height_pt) // 2
    return width_pt, height_pt, x_pt, y_pt


def assemble_pdf(
    pages: List[Image.Image],
    config: LayoutConfig = DEFAULT_LAYOUT,
    progress: Optional[ProgressCallback] = None,
) -> bytes:
    """
    Writes one PDF page per composed sheet, in order.

    Takes ownership of `pages`: each sheet is removed from the list and
    closed as soon as its compressed stream is embedded.
    """
    logger.debug(f"Creating pdf from {len(pages)} page image(s)")
    buffer = io.BytesIO()
    total = len(pages)
    page_num = 0
    try:
        # invariant=1 keeps dates and document IDs out, so equal input gives equal bytes
        c = canvas.Canvas(buffer, pagesize=(config.page_width, config.page_height), invariant=1)
        while pages:
            page = pages.pop(0)
            page_num += 1
            report_progress(progress, f"Compressing pages ({page_num} / {total})")
            width_pt, height_pt, x_pt, y_pt = calculate_page_placement(page.width, page.height, config)
            c.drawImage(ImageReader(page), x_pt, y_pt, width=width_pt, height=height_pt)
            page.close()
            c.showPage()
        c.save()
    except Exception as e:
        raise AssemblyError(f"Error writing PDF: {type(e).__name__}: {e}", {"pages_written": page_num, "pages_total": total}) from e
    pdf_bytes = buffer.getvalue()
    logger.debug(f"pdf size: {len(pdf_bytes)} bytes")
    return pdf_bytes
