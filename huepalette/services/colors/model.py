"""
Color Model Module

Value-level color operations used by palette extraction: hex parsing and
formatting, HSB/RGB accessors, luminance, contrast and distinctness tests,
saturation clamping and componentwise blending.
"""

import colorsys
import string
from dataclasses import dataclass, field
from typing import Tuple


# Relative luminance coefficients (ITU-R BT.709)
LUMINANCE_COEFS = (0.2126, 0.7152, 0.0722)

DARK_LUMINANCE_THRESHOLD = 0.5
NEAR_WHITE_THRESHOLD = 0.91
NEAR_BLACK_THRESHOLD = 0.09
DISTINCT_CHANNEL_THRESHOLD = 0.25
GRAY_CHANNEL_TOLERANCE = 0.03
CONTRAST_RATIO_THRESHOLD = 1.6

_HEX_DIGITS = set(string.hexdigits)


def _quantize(channel: float) -> int:
    return int(round(channel * 255))


@dataclass(frozen=True, eq=False)
class Color:
    """
    Immutable RGBA color with normalized float channels.

    Equality and hashing go through the quantized 8-bit key so that colors
    read from a pixel buffer collapse onto one entry per visible value.
    Channels are not clamped; blending may push them outside [0, 1].
    """
    r: float
    g: float
    b: float
    a: float = 1.0
    key: Tuple[int, int, int, int] = field(init=False, repr=False)

    def __post_init__(self):
        object.__setattr__(
            self, "key",
            (_quantize(self.r), _quantize(self.g), _quantize(self.b), _quantize(self.a))
        )

    def __eq__(self, other):
        if not isinstance(other, Color):
            return NotImplemented
        return self.key == other.key

    def __hash__(self):
        return hash(self.key)

    # ------------------ CONSTRUCTORS ------------------
    @classmethod
    def from_rgba8(cls, r: int, g: int, b: int, a: int = 255) -> "Color":
        """Build a color from 0-255 channel values."""
        return cls(r / 255.0, g / 255.0, b / 255.0, a / 255.0)

    @classmethod
    def from_hsb(cls, hue: float, saturation: float, brightness: float, alpha: float = 1.0) -> "Color":
        """Build a color from HSB components in [0, 1]."""
        r, g, b = colorsys.hsv_to_rgb(hue, saturation, brightness)
        return cls(r, g, b, alpha)

    # ------------------ ACCESSORS ------------------
    @property
    def red(self) -> float:
        return self.r

    @property
    def green(self) -> float:
        return self.g

    @property
    def blue(self) -> float:
        return self.b

    @property
    def alpha(self) -> float:
        return self.a

    @property
    def rgb(self) -> Tuple[float, float, float]:
        return (self.r, self.g, self.b)

    @property
    def rgba(self) -> Tuple[float, float, float, float]:
        return (self.r, self.g, self.b, self.a)

    @property
    def rgba8(self) -> Tuple[int, int, int, int]:
        """Quantized channels clipped to 0-255."""
        return tuple(max(0, min(255, v)) for v in self.key)

    def hsb(self) -> Tuple[float, float, float, float]:
        """Return (hue, saturation, brightness, alpha)."""
        h, s, v = colorsys.rgb_to_hsv(self.r, self.g, self.b)
        return (h, s, v, self.a)

    # ------------------ PREDICATES ------------------
    @property
    def luminance(self) -> float:
        return relative_luminance(self)

    @property
    def is_dark(self) -> bool:
        return relative_luminance(self) < DARK_LUMINANCE_THRESHOLD

    @property
    def is_black(self) -> bool:
        return all(c < NEAR_BLACK_THRESHOLD for c in self.rgb)

    @property
    def is_white(self) -> bool:
        return all(c > NEAR_WHITE_THRESHOLD for c in self.rgb)

    @property
    def is_black_or_white(self) -> bool:
        return self.is_white or self.is_black

    @property
    def is_near_gray(self) -> bool:
        return (abs(self.r - self.g) < GRAY_CHANNEL_TOLERANCE and
                abs(self.r - self.b) < GRAY_CHANNEL_TOLERANCE)

    def is_distinct_from(self, other: "Color") -> bool:
        return is_distinct_from(self, other)

    def is_contrasting_with(self, other: "Color", weighted: bool = False) -> bool:
        return is_contrasting_with(self, other, weighted=weighted)

    def hex(self, with_prefix: bool = True) -> str:
        return color_to_hex(self, with_prefix)


BLACK = Color(0.0, 0.0, 0.0, 1.0)
WHITE = Color(1.0, 1.0, 1.0, 1.0)
TRANSPARENT_WHITE = Color(1.0, 1.0, 1.0, 0.0)


# ============================================================================
# HEX
# ============================================================================

def hex_to_color(text: str) -> Color:
    """
    Parse a hex color string.

    Accepts an optional leading '#', then exactly 3 or 6 hex digits. The
    3-digit form expands each digit (``"abc"`` -> ``"aabbcc"``).

    Args:
        text: Hex color string

    Returns:
        Opaque Color, or transparent white for any malformed input
    """
    digits = text[1:] if text.startswith("#") else text

    if len(digits) not in (3, 6) or not set(digits) <= _HEX_DIGITS:
        return TRANSPARENT_WHITE

    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)

    value = int(digits, 16)
    return Color.from_rgba8((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def color_to_hex(color: Color, with_prefix: bool = True) -> str:
    """Format RGB channels as uppercase ``#RRGGBB``; alpha is dropped."""
    r, g, b, _ = color.rgba8
    prefix = "#" if with_prefix else ""
    return f"{prefix}{r:02X}{g:02X}{b:02X}"


# ============================================================================
# LUMINANCE / CONTRAST / DISTINCTNESS
# ============================================================================

def relative_luminance(color: Color) -> float:
    """Weighted luminance 0.2126 R + 0.7152 G + 0.0722 B."""
    return sum(c * k for c, k in zip(color.rgb, LUMINANCE_COEFS))


def legacy_luminance(color: Color) -> float:
    """Channel-plus-coefficient sum used by the reference contrast test."""
    return sum(c + k for c, k in zip(color.rgb, LUMINANCE_COEFS))


def contrast_ratio(a: Color, b: Color, weighted: bool = False) -> float:
    """
    WCAG-style contrast ratio (L1 + 0.05) / (L2 + 0.05) with L1 >= L2.

    Args:
        a: First color
        b: Second color
        weighted: Use true relative luminance instead of the legacy sum

    Returns:
        Ratio >= 1.0
    """
    lum = relative_luminance if weighted else legacy_luminance
    la, lb = lum(a), lum(b)
    hi, lo = (la, lb) if la > lb else (lb, la)
    return (hi + 0.05) / (lo + 0.05)


def is_contrasting_with(a: Color, b: Color, weighted: bool = False) -> bool:
    return contrast_ratio(a, b, weighted=weighted) > CONTRAST_RATIO_THRESHOLD


def is_distinct_from(a: Color, b: Color) -> bool:
    """
    True if any RGB channel differs by more than 0.25.

    Two near-gray colors are never distinct, whatever their gap.
    """
    if not any(abs(x - y) > DISTINCT_CHANNEL_THRESHOLD for x, y in zip(a.rgb, b.rgb)):
        return False
    return not (a.is_near_gray and b.is_near_gray)


# ============================================================================
# SATURATION / ALPHA
# ============================================================================

def clamp_saturation(color: Color, min_saturation: float) -> Color:
    """Raise HSB saturation to ``min_saturation`` if it is lower."""
    hue, saturation, brightness, alpha = color.hsb()
    if saturation < min_saturation:
        return Color.from_hsb(hue, min_saturation, brightness, alpha)
    return color


def with_alpha(color: Color, value: float) -> Color:
    return Color(color.r, color.g, color.b, value)


# ============================================================================
# BLENDING
# ============================================================================
# Sums are not clamped; out-of-range channels pass through.

def add_hsba(color: Color, hue: float, saturation: float,
             brightness: float, alpha: float) -> Color:
    """Add hue, saturation, brightness and alpha to the HSB components of ``color``."""
    h, s, v, a = color.hsb()
    return Color.from_hsb(h + hue, s + saturation, v + brightness, a + alpha)


def add_rgba(color: Color, red: float, green: float,
             blue: float, alpha: float) -> Color:
    """Add red, green, blue and alpha to the RGB components of ``color``."""
    return Color(color.r + red, color.g + green, color.b + blue, color.a + alpha)


def add_hsb(color: Color, other: Color) -> Color:
    h, s, v, _ = other.hsb()
    return add_hsba(color, h, s, v, 0.0)


def add_rgb(color: Color, other: Color) -> Color:
    return add_rgba(color, other.r, other.g, other.b, 0.0)


def add_hsba_color(color: Color, other: Color) -> Color:
    h, s, v, a = other.hsb()
    return add_hsba(color, h, s, v, a)


def add_rgba_color(color: Color, other: Color) -> Color:
    """Add the RGBA components of two colors."""
    return add_rgba(color, other.r, other.g, other.b, other.a)
