"""
Color frequency counting.

A multiset over quantized colors, filled either one color at a time or in
bulk from an RGBA8 pixel block.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Tuple

import numpy as np

from .model import Color


@dataclass(frozen=True)
class CountedColor:
    """A color paired with its observed frequency."""
    color: Color
    count: int

    def __post_init__(self):
        if self.count < 1:
            raise ValueError(f"count must be >= 1, got {self.count}")


class ColorCounter:
    """Frequency multiset keyed by the quantized 8-bit color value."""

    def __init__(self, colors: Iterable[Color] = ()):
        self._counts: Counter = Counter()
        self._colors: Dict[Tuple[int, int, int, int], Color] = {}
        for color in colors:
            self.add(color)

    @classmethod
    def from_pixels(cls, pixels_rgba_u8: np.ndarray) -> "ColorCounter":
        """
        Count every pixel of an RGBA8 block.

        Args:
            pixels_rgba_u8: uint8 array whose last axis holds (R, G, B, A)

        Returns:
            Counter holding one entry per distinct pixel value
        """
        if pixels_rgba_u8.ndim < 1 or pixels_rgba_u8.shape[-1] != 4:
            raise ValueError(f"Expected RGBA pixels, got shape {pixels_rgba_u8.shape}")

        counter = cls()
        flat = pixels_rgba_u8.reshape(-1, 4)
        if flat.shape[0] == 0:
            return counter

        unique, counts = np.unique(flat, axis=0, return_counts=True)
        for (r, g, b, a), count in zip(unique.tolist(), counts.tolist()):
            color = Color.from_rgba8(r, g, b, a)
            counter._colors[color.key] = color
            counter._counts[color.key] = count
        return counter

    def add(self, color: Color, count: int = 1) -> None:
        if count < 1:
            raise ValueError(f"count must be >= 1, got {count}")
        key = color.key
        if key not in self._colors:
            self._colors[key] = color
        self._counts[key] += count

    def count(self, color: Color) -> int:
        return self._counts.get(color.key, 0)

    def unique_colors(self) -> Iterator[Color]:
        """Distinct colors in first-seen order."""
        return iter(list(self._colors.values()))

    def counted_colors(self) -> List[CountedColor]:
        return [CountedColor(self._colors[key], count) for key, count in self._counts.items()]

    def most_common(self, n: int = None) -> List[CountedColor]:
        return [CountedColor(self._colors[key], count) for key, count in self._counts.most_common(n)]

    @property
    def total(self) -> int:
        return sum(self._counts.values())

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, color: Color) -> bool:
        return color.key in self._counts

    def __repr__(self) -> str:
        return f"ColorCounter(unique={len(self)}, total={self.total})"
