"""
Unit tests for print job orchestration.
"""

import asyncio
import io
import threading
from unittest.mock import patch

import pytest
from pypdf import PdfReader

import pdf_generator
from card_processing import CardFace, CardRequest
from config import DEFAULT_LAYOUT, LayoutConfig
from content_cache import ContentCache
from errors import DecodeError, NetworkError, PrintJobCancelled, ProxySheetError
from print_job import Printer, print_cards


@pytest.fixture
def images(red_png, blue_png):
    return {
        ("a", "front"): red_png,
        ("b", "front"): blue_png,
        ("a", "back"): blue_png,
    }


@pytest.fixture
def downloader(fake_downloader, images):
    return fake_downloader(images)


@pytest.fixture
def printer(downloader):
    return Printer(download=downloader, request_delay=0)


def run_print(printer, requests, config=DEFAULT_LAYOUT, **kwargs):
    return asyncio.run(printer.print(requests, config, **kwargs))


def page_count(pdf_bytes):
    return len(PdfReader(io.BytesIO(pdf_bytes)).pages)


class TestEndToEnd:

    def test_two_cards_four_each_fill_one_page(self, printer, downloader, red_png, blue_png):
        with patch("print_job.compose_page", wraps=pdf_generator.compose_page) as compose:
            pdf_bytes = run_print(printer, [CardRequest("a", quantity=4), CardRequest("b", quantity=4)])

        assert page_count(pdf_bytes) == 1
        assert len(downloader.calls) == 2
        compose.assert_called_once()
        chunk = compose.call_args.args[0]
        assert chunk == [red_png] * 4 + [blue_png] * 4

    @pytest.mark.parametrize("total,expected_pages", [(1, 1), (9, 1), (10, 2), (19, 3)])
    def test_page_count_is_ceiling(self, printer, total, expected_pages):
        pdf_bytes = run_print(printer, [CardRequest("a", quantity=total)])

        assert page_count(pdf_bytes) == expected_pages

    def test_no_cards_gives_empty_pdf(self, printer, downloader):
        pdf_bytes = run_print(printer, [])

        assert pdf_bytes.startswith(b"%PDF")
        assert page_count(pdf_bytes) == 0
        assert downloader.calls == []

    def test_custom_layout(self, printer):
        config = LayoutConfig(rows=1, cols=2, page_width=612, page_height=792)

        pdf_bytes = run_print(printer, [CardRequest("a", quantity=3)], config)
        reader = PdfReader(io.BytesIO(pdf_bytes))

        assert len(reader.pages) == 2
        assert float(reader.pages[0].mediabox.width) == 612

    def test_back_faces_are_fetched_separately(self, printer, downloader):
        run_print(printer, [CardRequest("a"), CardRequest("a", CardFace.BACK)])

        assert downloader.calls == [("a", "front"), ("a", "back")]

    def test_supplied_image_data(self, fake_downloader, make_png):
        downloader = fake_downloader({})
        printer = Printer(download=downloader, request_delay=0)

        pdf_bytes = run_print(printer, [CardRequest("custom", quantity=2, image_data=make_png((0, 255, 0, 255)))])

        assert page_count(pdf_bytes) == 1
        assert downloader.calls == []


class TestDeterminism:

    def test_same_input_same_bytes(self, printer, downloader):
        requests = [CardRequest("a", quantity=2), CardRequest("b")]

        first = run_print(printer, requests)
        second = run_print(printer, requests)

        assert first == second
        # Second run served from cache
        assert len(downloader.calls) == 2


class TestFailures:

    def test_network_error_aborts_job(self, printer):
        with pytest.raises(NetworkError):
            run_print(printer, [CardRequest("a"), CardRequest("missing")])

    def test_decode_error_aborts_job(self, fake_downloader):
        printer = Printer(download=fake_downloader({("bad", "front"): b"not an image"}), request_delay=0)

        with pytest.raises(DecodeError):
            run_print(printer, [CardRequest("bad")])

    def test_failures_share_a_base_class(self, printer):
        with pytest.raises(ProxySheetError):
            run_print(printer, [CardRequest("missing")])

    def test_invalid_layout(self, printer, downloader):
        with pytest.raises(ValueError):
            run_print(printer, [CardRequest("a")], LayoutConfig(rows=0))
        assert downloader.calls == []

    def test_invalid_quantity(self, printer, downloader):
        with pytest.raises(ValueError):
            run_print(printer, [CardRequest("a", quantity=0)])
        assert downloader.calls == []


class TestCancellation:

    def test_cancel_before_fetch(self, printer, downloader):
        cancel_event = threading.Event()
        cancel_event.set()

        with pytest.raises(PrintJobCancelled):
            run_print(printer, [CardRequest("a")], cancel_event=cancel_event)
        assert downloader.calls == []

    def test_cancel_during_composition(self, printer):
        cancel_event = threading.Event()

        def progress(message):
            if message.startswith("Generating page images"):
                cancel_event.set()

        with pytest.raises(PrintJobCancelled) as exc_info:
            run_print(
                printer, [CardRequest("a", quantity=10)],
                progress=progress, cancel_event=cancel_event,
            )
        assert exc_info.value.stage == "page composition"


class TestProgress:

    def test_stage_messages(self, printer):
        messages = []

        run_print(printer, [CardRequest("a", quantity=10), CardRequest("b")], progress=messages.append)

        assert messages == [
            "Fetching card images (1 / 2)",
            "Fetching card images (2 / 2)",
            "Generating page images (1 / 2)",
            "Generating page images (2 / 2)",
            "Compressing pages (1 / 2)",
            "Compressing pages (2 / 2)",
        ]

    def test_failing_progress_sink_is_ignored(self, printer):
        def progress(message):
            raise RuntimeError("sink is gone")

        pdf_bytes = run_print(printer, [CardRequest("a")], progress=progress)

        assert page_count(pdf_bytes) == 1


class TestCache:

    def test_cache_shared_between_printers(self, downloader):
        cache = ContentCache()
        first = Printer(cache=cache, download=downloader, request_delay=0)
        second = Printer(cache=cache, download=downloader, request_delay=0)

        run_print(first, [CardRequest("a")])
        run_print(second, [CardRequest("a")])

        assert len(downloader.calls) == 1

    def test_prune_cache(self, clock, downloader):
        printer = Printer(cache=ContentCache(clock=clock), download=downloader, request_delay=0, ttl=60)
        run_print(printer, [CardRequest("a"), CardRequest("b")])

        assert printer.prune_cache() == 0
        clock.advance(60)
        assert printer.prune_cache() == 2
        assert len(printer.cache) == 0


class TestPrintCards:

    def test_blocking_wrapper(self, printer):
        pdf_bytes = print_cards([CardRequest("a", quantity=2)], printer=printer)

        assert page_count(pdf_bytes) == 1

    def test_progress_passed_through(self, printer):
        messages = []

        print_cards([CardRequest("a")], printer=printer, progress=messages.append)

        assert "Compressing pages (1 / 1)" in messages
