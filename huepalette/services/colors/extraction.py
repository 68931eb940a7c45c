"""
Palette extraction service.

This module implements the palette extraction pipeline: the image is resized
and rasterized, its edge strip and full area are frequency-counted, and the
background, primary, secondary and detail colors are selected from those
counts.
"""

import time
from typing import Dict, NamedTuple, Optional, Tuple

from loguru import logger

from .counting import ColorCounter
from .edge_selection import edge_strip, select_edge_color
from .model import Color, color_to_hex
from .palette_selection import fallback_color, select_palette_colors
from ..imaging import (
    ImageInput, ImageDecodeError, default_target_size, get_image_dimensions,
    premultiply_opaque, rasterize, resize
)
from ..observability import (
    performance_monitor,
    get_extraction_logger,
    log_memory_usage,
    force_garbage_collection
)
from huepalette.config import config


class Palette(NamedTuple):
    """Extracted palette; every slot is always populated."""
    background: Color
    primary: Color
    secondary: Color
    detail: Color

    def hexes(self, with_prefix: bool = True) -> Dict[str, str]:
        """Slot name to ``#RRGGBB`` mapping."""
        return {name: color_to_hex(color, with_prefix) for name, color in self._asdict().items()}

    def to_dict(self) -> Dict[str, Dict]:
        return {
            name: {"hex": color_to_hex(color), "rgba": list(color.rgba)}
            for name, color in self._asdict().items()
        }


class PaletteExtractor:
    """
    Runs the extraction pipeline with a fixed set of options.

    Args:
        default_width: Analysis width used when no target size is given
        weighted_contrast: Use true relative luminance in contrast tests
    """

    def __init__(self, default_width: int = None, weighted_contrast: bool = None):
        self.default_width = default_width if default_width is not None else config.DEFAULT_WIDTH
        self.weighted_contrast = (weighted_contrast if weighted_contrast is not None
                                  else config.WEIGHTED_CONTRAST)

    def extract(self, image: ImageInput, target_size: Optional[Tuple[int, int]] = None) -> Palette:
        """
        Extract a palette from an image.

        Args:
            image: PIL image, uint8 pixel array or encoded image bytes
            target_size: Optional (width, height) to analyze at; by default the
                image is scaled to ``default_width`` keeping its aspect ratio

        Returns:
            Palette of background, primary, secondary and detail colors

        Raises:
            ImageDecodeError: If the image cannot be decoded or rasterized
        """
        extraction_logger = get_extraction_logger()

        with performance_monitor("rasterize"):
            pixels = rasterize(image)

        width, height = get_image_dimensions(pixels)
        extraction_id = extraction_logger.start_extraction(image_size=(width, height))

        try:
            # Stage 1: resize to the analysis size
            with performance_monitor("resize", pixel_count=width * height):
                start_time = time.time()
                if target_size is None:
                    target_size = default_target_size(width, height, self.default_width)
                pixels = resize(premultiply_opaque(pixels), target_size)
                width, height = get_image_dimensions(pixels)
                extraction_logger.log_stage(extraction_id, "resize",
                                            (time.time() - start_time) * 1000,
                                            size=(width, height))

            # Stage 2: count edge strip and full image colors
            with performance_monitor("color_counting", pixel_count=width * height):
                start_time = time.time()
                edge_counter = ColorCounter.from_pixels(edge_strip(pixels))
                image_counter = ColorCounter.from_pixels(pixels)
                extraction_logger.log_stage(extraction_id, "color_counting",
                                            (time.time() - start_time) * 1000,
                                            edge_colors=len(edge_counter),
                                            image_colors=len(image_counter))

            # Release the pixel buffer before selection
            del pixels
            force_garbage_collection()
            extraction_logger.log_stage(extraction_id, "buffer_release", 0.0,
                                        **log_memory_usage("buffer_release"))

            if len(edge_counter) == 0:
                extraction_logger.log_warning(
                    extraction_id,
                    f"Image width {width} leaves an empty edge strip; background falls back to black"
                )

            # Stage 3: background from the edge strip
            with performance_monitor("edge_selection", color_count=len(edge_counter)):
                start_time = time.time()
                background = select_edge_color(edge_counter, height)
                extraction_logger.log_stage(extraction_id, "edge_selection",
                                            (time.time() - start_time) * 1000,
                                            color_count=len(edge_counter))

            # Stage 4: primary, secondary and detail
            with performance_monitor("palette_selection", color_count=len(image_counter)):
                start_time = time.time()
                primary, secondary, detail = select_palette_colors(
                    image_counter, background, weighted_contrast=self.weighted_contrast
                )
                extraction_logger.log_stage(extraction_id, "palette_selection",
                                            (time.time() - start_time) * 1000,
                                            color_count=len(image_counter))

        except Exception:
            extraction_logger.abandon_extraction(extraction_id)
            raise

        palette = Palette(background, primary, secondary, detail)

        fallback = fallback_color(background)
        fallback_slots = sum(1 for color in (primary, secondary, detail) if color == fallback)
        extraction_logger.finish_extraction(extraction_id, fallback_slots=fallback_slots)

        logger.info(f"Palette {extraction_id}: " +
                    ", ".join(f"{name}={hex_value}" for name, hex_value in palette.hexes().items()))

        return palette


def extract_palette(image: ImageInput, target_size: Optional[Tuple[int, int]] = None) -> Palette:
    """
    Extract a palette with the configured defaults.

    Args:
        image: PIL image, uint8 pixel array or encoded image bytes
        target_size: Optional (width, height) to analyze at

    Returns:
        Palette of background, primary, secondary and detail colors

    Raises:
        ImageDecodeError: If the image cannot be decoded or rasterized
    """
    return PaletteExtractor().extract(image, target_size)


__all__ = ["Palette", "PaletteExtractor", "extract_palette", "ImageDecodeError"]
