"""
Unit tests for palette swatch rendering.
"""

import base64
import io

import numpy as np
import pytest
from PIL import Image

from huepalette.services.colors.extraction import Palette
from huepalette.services.colors.model import Color, BLACK, WHITE
from huepalette.services.colors.swatches import (
    hex_to_bgr, validate_swatch_params, render_swatch_strip, render_palette_swatch
)


def decode_b64_png(b64_string):
    return np.array(Image.open(io.BytesIO(base64.b64decode(b64_string))).convert("RGB"))


class TestHexToBgr:
    """Test hex to OpenCV BGR conversion"""

    def test_channel_order(self):
        assert hex_to_bgr("#FF8000") == (0, 128, 255)
        assert hex_to_bgr("00f") == (255, 0, 0)


class TestValidation:
    """Test swatch parameter validation"""

    def test_empty_colors(self):
        with pytest.raises(ValueError):
            validate_swatch_params([], 40, None)

    def test_non_positive_chip(self):
        with pytest.raises(ValueError):
            validate_swatch_params(["#FFFFFF"], 0, None)

    def test_highlight_out_of_range(self):
        with pytest.raises(ValueError):
            validate_swatch_params(["#FFFFFF", "#000000"], 40, 2)

    def test_invalid_hex(self):
        with pytest.raises(ValueError):
            validate_swatch_params(["#FFFFFF", "not-a-color"], 40, None)


class TestRendering:
    """Test swatch strip output"""

    def test_strip_dimensions_and_colors(self):
        img = decode_b64_png(render_swatch_strip(["#FF0000", "#00FF00", "#0000FF"], chip_size=20))
        assert img.shape == (20, 60, 3)
        assert tuple(img[10, 10]) == (255, 0, 0)
        assert tuple(img[10, 30]) == (0, 255, 0)
        assert tuple(img[10, 50]) == (0, 0, 255)

    def test_highlight_border(self):
        img = decode_b64_png(render_swatch_strip(["#FFFFFF", "#000000"], chip_size=20, highlight_index=0))
        assert tuple(img[10, 0]) == (128, 128, 128)
        assert tuple(img[10, 10]) == (255, 255, 255)

    def test_palette_swatch(self):
        palette = Palette(WHITE, Color(1, 0, 0), Color(0, 0, 1), BLACK)
        img = decode_b64_png(render_palette_swatch(palette, chip_size=40))
        assert img.shape == (40, 160, 3)
        assert tuple(img[20, 20]) == (255, 255, 255)
        assert tuple(img[20, 60]) == (255, 0, 0)
        assert tuple(img[20, 100]) == (0, 0, 255)
        assert tuple(img[20, 140]) == (0, 0, 0)
