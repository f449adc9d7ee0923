"""
Command line entry point for MtgProxySheet.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from config import DEFAULT_LAYOUT, PAPER_SIZES_PT, REQUEST_DELAY_SECONDS, LayoutConfig, validate_layout
from errors import ProxySheetError
from logging_config import setup_logging
from output_utils import print_card_summary, write_pdf_file
from parsing_utils import parse_card_list, parse_color, parse_paper_type
from print_job import Printer, print_cards


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Lay out card artwork on printable proxy sheets with cut guides.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter #type: ignore
    )
    # --- Input/Output Control ---
    io_group = parser.add_argument_group('Input and Output')
    io_group.add_argument(
        "--card-list", type=str, required=True,
        help="Path to a card list. One card per line: 'COUNT[x] ID [front|back]'. COUNT defaults to 1, face to front."
    )
    io_group.add_argument("--output-file", type=str, default=None, help="Output PDF path. Extension auto-added. Defaults to <card_list_name>.pdf.")

    # --- Page & Layout Options ---
    layout_group = parser.add_argument_group('Page and Layout Options')
    layout_group.add_argument("--rows", type=int, default=DEFAULT_LAYOUT.rows, help="Rows of cards per page.")
    layout_group.add_argument("--cols", type=int, default=DEFAULT_LAYOUT.cols, help="Columns of cards per page.")
    layout_group.add_argument("--paper-type", type=str, default=None, choices=sorted(PAPER_SIZES_PT.keys()), help="Paper size. Overrides --page-width/--page-height.")
    layout_group.add_argument("--page-width", type=int, default=DEFAULT_LAYOUT.page_width, help="Page width in points.")
    layout_group.add_argument("--page-height", type=int, default=DEFAULT_LAYOUT.page_height, help="Page height in points.")
    layout_group.add_argument("--bleed", type=int, default=DEFAULT_LAYOUT.bleed_inset, help="Pixels of black background extending past the outer cut lines.")

    # --- Cut Line Options ---
    cut_line_group = parser.add_argument_group('Cut Line Options')
    cut_line_group.add_argument("--cut-line-length", type=int, default=DEFAULT_LAYOUT.line_len, help="Half length of each cut guide in pixels. Also the page margin around the grid.")
    cut_line_group.add_argument("--cut-line-width", type=int, default=DEFAULT_LAYOUT.line_width, help="Half thickness of each cut guide in pixels.")
    cut_line_group.add_argument("--cut-line-color", type=str, default="#7f7f7f", help="Color of cut guides.")

    # --- General Options ---
    general_group = parser.add_argument_group('General Options')
    general_group.add_argument("--request-delay-ms", type=int, default=int(REQUEST_DELAY_SECONDS * 1000), help="Minimum time between the starts of two image downloads.")
    general_group.add_argument("--log-file", type=str, default=None, help="Also write logs to this file.")
    general_group.add_argument("--debug", action="store_true", help="Enable detailed debug messages.")
    return parser


def build_layout(args: argparse.Namespace) -> LayoutConfig:
    page_width, page_height = args.page_width, args.page_height
    if args.paper_type:
        paper_width_pt, paper_height_pt = PAPER_SIZES_PT[parse_paper_type(args.paper_type)]
        page_width, page_height = int(round(paper_width_pt)), int(round(paper_height_pt))
    return validate_layout(LayoutConfig(
        rows=args.rows,
        cols=args.cols,
        line_len=args.cut_line_length,
        line_width=args.cut_line_width,
        line_color=parse_color(args.cut_line_color),
        bleed_inset=args.bleed,
        page_width=page_width,
        page_height=page_height,
    ))


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        log_level=logging.DEBUG if args.debug else logging.INFO,
        log_file=Path(args.log_file) if args.log_file else None,
    )

    if not os.path.isfile(args.card_list):
        print(f"Error: Card list file '{args.card_list}' not found."); return 1
    if args.request_delay_ms < 0:
        parser.error("--request-delay-ms can not be negative.")
    try:
        layout = build_layout(args)
    except ValueError as e:
        print(f"Error: {e}"); return 1

    print("--- Reading Card List ---")
    requests, invalid_lines = parse_card_list(args.card_list, debug=args.debug)
    if invalid_lines:
        print(f"  {len(invalid_lines)} line(s) could not be parsed.")
    if not requests:
        print("No cards to print. Exiting."); return 1
    print_card_summary(requests, layout.capacity)

    if args.output_file:
        output_path = args.output_file
    else:
        output_path = os.path.splitext(args.card_list)[0]

    print("\n--- Generating PDF ---")
    printer = Printer(request_delay=args.request_delay_ms / 1000.0)
    try:
        pdf_bytes = print_cards(requests, layout, printer=printer, progress=lambda message: print(f"  {message}"))
    except ProxySheetError as e:
        print(f"Error: {e}"); return 1
    try:
        write_pdf_file(output_path, pdf_bytes)
    except OSError as e:
        print(f"Error writing PDF file: {e}"); return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
