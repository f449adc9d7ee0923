"""Shared fixtures for the MtgProxySheet tests."""

import io
import threading

import pytest
from PIL import Image

from config import CARD_HEIGHT_PX, CARD_WIDTH_PX
from errors import NetworkError


class FakeClock:
    """Manually advanced replacement for time.monotonic."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeDownloader:
    """Serves images from a dict and records every call."""

    def __init__(self, images):
        self.images = dict(images)
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, card_id, face):
        with self._lock:
            self.calls.append((card_id, face))
        if (card_id, face) not in self.images:
            raise NetworkError(card_id, face, "HTTP 404")
        return self.images[(card_id, face)]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_png():
    """Factory for PNG bytes of a solid color card."""
    def _make_png(color=(255, 0, 0, 255), size=(CARD_WIDTH_PX, CARD_HEIGHT_PX)):
        buffer = io.BytesIO()
        Image.new("RGBA", size, color).save(buffer, format="PNG")
        return buffer.getvalue()
    return _make_png


@pytest.fixture
def red_png(make_png):
    return make_png((255, 0, 0, 255))


@pytest.fixture
def blue_png(make_png):
    return make_png((0, 0, 255, 255))


@pytest.fixture
def fake_downloader():
    """Factory for a FakeDownloader over {(card_id, face): bytes}."""
    return FakeDownloader
