"""Shared test fixtures for the framecolor test suite.

Provides common fixtures used across the unit tests: settings, palettes,
color stores, a wired-up test client, and frame action payload bodies.
"""

from __future__ import annotations

import io
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from framecolor.config.settings import Settings
from framecolor.domain.models import DEFAULT_PALETTE, Color, Palette
from framecolor.server.app import create_app
from framecolor.state import PerCastColorStore, SharedColorStore


# ---------------------------------------------------------------------------
# Domain Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def palette() -> Palette:
    """The default four-color palette (green, purple, red, blue)."""
    return DEFAULT_PALETTE


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of any config file on disk."""
    return Settings()


# ---------------------------------------------------------------------------
# Server Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> SharedColorStore:
    return SharedColorStore()


@pytest.fixture
def client(settings: Settings, store: SharedColorStore, palette: Palette) -> TestClient:
    """A test client backed by a fresh shared color store."""
    app = create_app(settings=settings, store=store, palette=palette)
    return TestClient(app)


@pytest.fixture
def per_cast_store() -> PerCastColorStore:
    return PerCastColorStore()


@pytest.fixture
def per_cast_client(
    settings: Settings, per_cast_store: PerCastColorStore, palette: Palette
) -> TestClient:
    """A test client backed by a per-cast color store."""
    app = create_app(settings=settings, store=per_cast_store, palette=palette)
    return TestClient(app)


# ---------------------------------------------------------------------------
# Payload / Image Helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def make_payload() -> Callable[..., dict[str, Any]]:
    """Build a frame action body like the ones frame clients post."""

    def _make(button_index: int | None = 1, cast_hash: str = "0x0000000000000000000000000000000000000001") -> dict[str, Any]:
        untrusted: dict[str, Any] = {
            "fid": 244761,
            "url": "https://frame.example.net",
            "messageHash": "0xe84754f4668a4d2d779fb694af806f2edd2ccc53",
            "timestamp": 1706655303000,
            "network": 1,
            "castId": {"fid": 244761, "hash": cast_hash},
        }
        if button_index is not None:
            untrusted["buttonIndex"] = button_index
        return {
            "untrustedData": untrusted,
            "trustedData": {"messageBytes": "0a53080d1099f80e18c7b0ac2e"},
        }

    return _make


def decode_jpeg(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


def assert_filled_with(image: Image.Image, color: Color, tolerance: int = 8) -> None:
    """Assert every pixel is within ``tolerance`` of ``color`` (JPEG is lossy)."""
    rgb = image.convert("RGB")
    for band, expected in zip(rgb.getextrema(), color.as_rgb()):
        low, high = band
        assert abs(low - expected) <= tolerance, (band, expected)
        assert abs(high - expected) <= tolerance, (band, expected)


@pytest.fixture
def read_jpeg() -> Callable[[bytes], Image.Image]:
    return decode_jpeg


@pytest.fixture
def assert_filled() -> Callable[..., None]:
    return assert_filled_with
