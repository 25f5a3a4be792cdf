"""Tests for image rendering utilities."""

from __future__ import annotations

from unittest.mock import patch

import numpy as np
import pytest

from framecolor.domain.models import DEFAULT_PALETTE, Color
from framecolor.utils.imaging import (
    ImageEncodeError,
    encode_jpeg,
    render_color_jpeg,
    solid_frame,
)


class TestSolidFrame:
    def test_shape_and_dtype(self) -> None:
        image = solid_frame(Color(r=1, g=2, b=3), width=40, height=30)
        assert image.shape == (30, 40, 3)
        assert image.dtype == np.uint8

    def test_every_pixel_is_bgr_color(self) -> None:
        image = solid_frame(Color(r=255, g=0, b=0), width=8, height=4)
        assert (image == np.array([0, 0, 255], dtype=np.uint8)).all()

    @pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5)])
    def test_invalid_size(self, size: tuple[int, int]) -> None:
        with pytest.raises(ValueError):
            solid_frame(Color(r=0, g=0, b=0), width=size[0], height=size[1])


class TestEncodeJpeg:
    def test_jpeg_magic(self) -> None:
        data = encode_jpeg(solid_frame(Color(r=0, g=0, b=255), 16, 16))
        assert data[:2] == b"\xff\xd8"
        assert data[-2:] == b"\xff\xd9"

    @pytest.mark.parametrize("quality", [-5, 101])
    def test_quality_bounds(self, quality: int) -> None:
        with pytest.raises(ValueError):
            encode_jpeg(solid_frame(Color(r=0, g=0, b=0), 4, 4), quality=quality)

    def test_encoder_failure_raises(self) -> None:
        image = solid_frame(Color(r=0, g=0, b=0), 4, 4)
        with patch("framecolor.utils.imaging.cv2.imencode", return_value=(False, None)):
            with pytest.raises(ImageEncodeError):
                encode_jpeg(image)

    def test_lower_quality_is_smaller(self) -> None:
        # Noise makes quality visible in the output size
        rng = np.random.default_rng(0)
        image = rng.integers(0, 256, size=(64, 64, 3), dtype=np.uint8)
        assert len(encode_jpeg(image, quality=10)) < len(encode_jpeg(image, quality=90))


class TestRenderColorJpeg:
    @pytest.mark.parametrize("color", list(DEFAULT_PALETTE))
    def test_palette_colors_render_uniformly(self, color: Color, read_jpeg, assert_filled) -> None:
        image = read_jpeg(render_color_jpeg(color, width=1375, height=720, quality=90))
        assert image.size == (1375, 720)
        assert_filled(image, color)
