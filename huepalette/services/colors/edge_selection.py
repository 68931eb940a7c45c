"""
Edge Color Selection Module

Picks the background color of an image from a narrow vertical strip near its
left edge. Near-black and near-white strip colors give way to a reasonably
frequent chromatic color when one exists.
"""

import math
from typing import List

import numpy as np
from loguru import logger

from .counting import ColorCounter, CountedColor
from .model import BLACK, Color


# Edge strip columns (inclusive)
EDGE_STRIP_START = 5
EDGE_STRIP_END = 10

# Minimum share of the image height a strip color needs to be considered
EDGE_COUNT_RATIO = 0.01

# A chromatic replacement must reach this fraction of the leading count
EDGE_REPLACEMENT_RATIO = 0.3


def edge_strip(pixels_rgba_u8: np.ndarray) -> np.ndarray:
    """Return the edge strip columns of an (H, W, 4) pixel buffer."""
    return pixels_rgba_u8[:, EDGE_STRIP_START:EDGE_STRIP_END + 1]


def edge_count_threshold(image_height: int) -> int:
    return int(math.floor(EDGE_COUNT_RATIO * image_height))


def rank_edge_colors(counter: ColorCounter, image_height: int) -> List[CountedColor]:
    """
    Collect strip colors frequent enough to be background candidates.

    Args:
        counter: Frequencies of the edge strip colors
        image_height: Height of the analyzed image in pixels

    Returns:
        Candidates with count >= floor(0.01 * height), most frequent first
    """
    threshold = edge_count_threshold(image_height)
    candidates = [cc for cc in counter.counted_colors() if cc.count >= threshold]
    candidates.sort(key=lambda cc: cc.count, reverse=True)
    return candidates


def select_edge_color(counter: ColorCounter, image_height: int) -> Color:
    """
    Choose the background color from edge strip frequencies.

    The most frequent candidate wins unless it is black or white, in which
    case the first chromatic candidate holding more than 30% of its count
    replaces it. With no candidates the background is black.

    Args:
        counter: Frequencies of the edge strip colors
        image_height: Height of the analyzed image in pixels

    Returns:
        Background color
    """
    candidates = rank_edge_colors(counter, image_height)

    proposed = candidates[0] if candidates else CountedColor(BLACK, 1)

    if proposed.color.is_black_or_white and candidates:
        for counted in candidates:
            if counted.color.is_black_or_white:
                continue
            if counted.count / proposed.count > EDGE_REPLACEMENT_RATIO:
                logger.debug(f"Edge color {proposed.color.hex()} replaced by "
                             f"{counted.color.hex()} ({counted.count}/{proposed.count})")
                proposed = counted
                break

    logger.debug(f"Edge color {proposed.color.hex()} from {len(candidates)} candidates "
                 f"(threshold={edge_count_threshold(image_height)})")

    return proposed.color
