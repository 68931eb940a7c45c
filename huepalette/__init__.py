"""
Hue Palette

Extracts a background, primary, secondary and detail color from a bitmap
image, with supporting color-space utilities.
"""

__version__ = "1.0.0"
