"""
Swatch Rendering Module

Renders extracted palettes as PNG color strips for quick visual QA.
"""

import base64
from typing import List, Optional, Tuple

import cv2
import numpy as np
from loguru import logger

from .model import hex_to_color
from ..observability import performance_tracked


def hex_to_bgr(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to BGR tuple for OpenCV."""
    r, g, b, _ = hex_to_color(hex_color).rgba8
    return (b, g, r)  # BGR for OpenCV


def validate_swatch_params(hex_colors: List[str], chip_size: int, highlight_index: Optional[int]) -> None:
    """Validate swatch rendering parameters."""
    if not hex_colors:
        raise ValueError("hex_colors cannot be empty")

    if chip_size <= 0:
        raise ValueError("chip_size must be positive")

    if highlight_index is not None and (highlight_index < 0 or highlight_index >= len(hex_colors)):
        raise ValueError(f"highlight_index {highlight_index} out of range [0, {len(hex_colors)})")

    for i, hex_color in enumerate(hex_colors):
        if not isinstance(hex_color, str):
            raise ValueError(f"Color at index {i} is not a string: {type(hex_color)}")

        if hex_to_color(hex_color).alpha == 0:
            raise ValueError(f"Invalid hex color at index {i}: {hex_color}")


def render_swatch_strip(hex_colors: List[str],
                        chip_size: int = 40,
                        highlight_index: Optional[int] = None,
                        border_color: Tuple[int, int, int] = (128, 128, 128),
                        border_width: int = 2) -> str:
    """
    Render a horizontal strip of color swatches.

    Args:
        hex_colors: List of hex color strings
        chip_size: Size of each color chip in pixels
        highlight_index: Index of color to highlight with border
        border_color: BGR color for highlight border
        border_width: Width of highlight border in pixels

    Returns:
        Base64-encoded PNG image string
    """
    validate_swatch_params(hex_colors, chip_size, highlight_index)

    k = len(hex_colors)
    logger.debug(f"Rendering swatch strip with {k} colors, chip_size={chip_size}")

    img_height = chip_size
    img_width = chip_size * k
    img = np.zeros((img_height, img_width, 3), dtype=np.uint8)

    for i, hex_color in enumerate(hex_colors):
        x_start = i * chip_size
        x_end = (i + 1) * chip_size
        img[:, x_start:x_end, :] = hex_to_bgr(hex_color)

    if highlight_index is not None:
        x_start = highlight_index * chip_size
        x_end = (highlight_index + 1) * chip_size

        cv2.rectangle(
            img,
            (x_start, 0),
            (x_end - 1, img_height - 1),
            border_color,
            border_width
        )

    success, buffer = cv2.imencode('.png', img)
    if not success:
        raise RuntimeError("Failed to encode swatch strip as PNG")

    b64_string = base64.b64encode(buffer.tobytes()).decode('ascii')
    logger.debug(f"Encoded swatch strip: {img_width}×{img_height} -> {len(b64_string)} chars")

    return b64_string


@performance_tracked("swatch_rendering")
def render_palette_swatch(palette, chip_size: int = 40) -> str:
    """
    Render background, primary, secondary and detail as one strip.

    The background chip is outlined.

    Args:
        palette: Extracted Palette
        chip_size: Size of each color chip in pixels

    Returns:
        Base64-encoded PNG image string
    """
    hex_colors = list(palette.hexes().values())
    return render_swatch_strip(hex_colors, chip_size=chip_size, highlight_index=0)
