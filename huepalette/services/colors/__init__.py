"""
Hue Palette Colors Module

Provides the color model, frequency counting, edge and palette selection,
and the extraction pipeline that ties them together.
"""

from .model import (
    Color, BLACK, WHITE, TRANSPARENT_WHITE,
    hex_to_color, color_to_hex, clamp_saturation, with_alpha,
    relative_luminance, contrast_ratio, is_contrasting_with, is_distinct_from,
    add_hsba, add_rgba, add_hsb, add_rgb, add_hsba_color, add_rgba_color
)
from .counting import ColorCounter, CountedColor
from .edge_selection import select_edge_color
from .palette_selection import select_palette_colors
from .extraction import Palette, PaletteExtractor, extract_palette, ImageDecodeError
