"""
End-to-end tests for the palette extraction pipeline.

Synthetic images are built with numpy and fed through extract_palette as
arrays, PIL images and encoded bytes.
"""

import numpy as np
import pytest
from PIL import Image

from huepalette.services.colors.extraction import Palette, PaletteExtractor, extract_palette
from huepalette.services.colors.model import Color, BLACK, WHITE, clamp_saturation, is_distinct_from
from huepalette.services.imaging import ImageDecodeError
from huepalette.services.observability import get_metrics_collector

from generate_test_images import create_framed_image, create_solid_image, encode_png

RED = Color(1, 0, 0)
BLUE = Color(0, 0, 1)


class TestFramedImage:
    """Solid red interior inside a white frame"""

    @pytest.fixture
    def framed(self):
        return create_framed_image(100, 100, inner_color=(255, 0, 0), frame_color=(255, 255, 255), frame=20)

    def test_native_size(self, framed):
        palette = extract_palette(framed, target_size=(100, 100))
        assert palette == Palette(WHITE, RED, BLACK, BLACK)

    def test_default_size(self, framed):
        palette = extract_palette(framed)
        assert palette.background == WHITE
        assert palette.primary == RED
        for slot in (palette.secondary, palette.detail):
            assert slot == BLACK or is_distinct_from(slot, palette.primary)

    def test_png_bytes_input(self, framed):
        palette = extract_palette(encode_png(framed), target_size=(100, 100))
        assert palette.hexes() == {
            "background": "#FFFFFF",
            "primary": "#FF0000",
            "secondary": "#000000",
            "detail": "#000000",
        }

    def test_pil_input(self, framed):
        palette = extract_palette(Image.fromarray(framed), target_size=(100, 100))
        assert palette.primary == RED


class TestSingleColorImage:
    """All pixels identical"""

    @pytest.mark.parametrize("rgb,fallback", [
        ((0, 0, 255), WHITE),
        ((255, 255, 0), BLACK),
        ((40, 120, 60), WHITE),
    ])
    def test_background_is_the_color_and_slots_fall_back(self, rgb, fallback):
        image = create_solid_image(64, 64, rgb)
        palette = extract_palette(image, target_size=(64, 64))
        assert palette.background == Color.from_rgba8(*rgb)
        assert (palette.primary, palette.secondary, palette.detail) == (fallback, fallback, fallback)

    def test_downscaled_solid_image(self):
        image = Image.new("RGB", (500, 250), (0, 0, 255))
        palette = extract_palette(image)
        assert palette.background == BLUE
        assert palette.primary == WHITE


class TestEdgeBackground:
    """Background chosen from the left edge strip"""

    def test_chromatic_band_replaces_white_edge(self):
        image = np.full((100, 120, 3), 255, dtype=np.uint8)
        image[60:, :] = (0, 0, 255)
        palette = extract_palette(image, target_size=(120, 100))
        assert palette.background == BLUE

    def test_narrow_image_background_black(self):
        image = create_solid_image(5, 40, (255, 255, 255))
        palette = extract_palette(image, target_size=(5, 40))
        assert palette.background == BLACK
        # White is kept as a light candidate once its saturation is clamped
        assert palette.primary == clamp_saturation(WHITE, 0.15)

    def test_transparent_pixels_count_as_black(self):
        rgba = np.zeros((50, 50, 4), dtype=np.uint8)
        rgba[..., :3] = 255
        palette = extract_palette(rgba, target_size=(50, 50))
        assert palette.background == BLACK

    def test_transparent_color_does_not_leak_when_downscaled(self):
        # Opaque red columns alternate with fully transparent green ones
        rgba = np.zeros((100, 100, 4), dtype=np.uint8)
        rgba[:, 0::2] = (255, 0, 0, 255)
        rgba[:, 1::2] = (0, 255, 0, 0)

        palette = extract_palette(rgba, target_size=(50, 50))

        r, g, b, a = palette.background.rgba8
        assert g == 0
        assert r == pytest.approx(128, abs=1)
        assert (b, a) == (0, 255)


class TestExtractorOptions:
    """Extractor configuration"""

    def test_weighted_contrast_option(self):
        image = np.zeros((100, 100, 3), dtype=np.uint8)
        image[...] = (0, 0, 255)
        image[40:60, 40:60] = (0, 255, 0)

        legacy = PaletteExtractor(weighted_contrast=False).extract(image, (100, 100))
        weighted = PaletteExtractor(weighted_contrast=True).extract(image, (100, 100))

        assert legacy.primary == WHITE
        assert weighted.primary == Color(0, 1, 0)

    def test_default_width_option(self):
        extractor = PaletteExtractor(default_width=50)
        palette = extractor.extract(create_framed_image(200, 100, frame=40))
        assert palette.background == WHITE


class TestFailures:
    """Only undecodable input is an error"""

    def test_garbage_bytes(self):
        with pytest.raises(ImageDecodeError):
            extract_palette(b"definitely not an image")

    def test_empty_bytes(self):
        with pytest.raises(ImageDecodeError):
            extract_palette(b"")

    def test_zero_dimensions(self):
        with pytest.raises(ImageDecodeError):
            extract_palette(np.zeros((0, 10, 3), dtype=np.uint8))

    def test_unsupported_array(self):
        with pytest.raises(ImageDecodeError):
            extract_palette(np.zeros((10, 10, 2), dtype=np.uint8))

    def test_unsupported_type(self):
        with pytest.raises(ImageDecodeError):
            extract_palette("image.png")


class TestObservability:
    """Extraction stages are recorded"""

    def test_stage_metrics_recorded(self):
        extract_palette(create_framed_image(), target_size=(100, 100))
        operations = get_metrics_collector().get_all_stats()["operations"]
        for stage in ("rasterize", "resize", "color_counting", "edge_selection", "palette_selection"):
            assert stage in operations
            assert operations[stage]["total_calls"] == 1
