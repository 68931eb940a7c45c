"""
Palette Color Selection Module

Ranks the colors of an image against its background and greedily assigns
the primary, secondary and detail slots. Selected colors contrast with the
background and are pairwise distinct; frequency decides among them.
"""

from typing import List, Optional, Tuple

from loguru import logger

from .counting import ColorCounter, CountedColor
from .model import BLACK, WHITE, Color, clamp_saturation


MIN_SATURATION = 0.15


def fallback_color(background: Color) -> Color:
    """White on a dark background, black otherwise."""
    return WHITE if background.is_dark else BLACK


def rank_palette_candidates(counter: ColorCounter, background: Color) -> List[CountedColor]:
    """
    Saturation-clamp every color and keep those of opposite darkness.

    Args:
        counter: Frequencies of all image colors
        background: Selected background color

    Returns:
        Clamped candidates carrying their original counts, most frequent first
    """
    is_dark_background = background.is_dark

    candidates = []
    for counted in counter.counted_colors():
        color = clamp_saturation(counted.color, MIN_SATURATION)
        if color.is_dark == (not is_dark_background):
            candidates.append(CountedColor(color, counted.count))

    candidates.sort(key=lambda cc: cc.count, reverse=True)
    return candidates


def select_palette_colors(
    counter: ColorCounter,
    background: Color,
    weighted_contrast: bool = False
) -> Tuple[Color, Color, Color]:
    """
    Choose primary, secondary and detail colors.

    A single pass over the ranked candidates fills each slot with the first
    color that contrasts with the background and is distinct from the slots
    already filled.

    Args:
        counter: Frequencies of all image colors
        background: Selected background color
        weighted_contrast: Use true relative luminance in the contrast test

    Returns:
        Tuple of (primary, secondary, detail)
    """
    candidates = rank_palette_candidates(counter, background)

    primary: Optional[Color] = None
    secondary: Optional[Color] = None
    detail: Optional[Color] = None

    for counted in candidates:
        color = counted.color
        contrasting = color.is_contrasting_with(background, weighted=weighted_contrast)

        if primary is None:
            if contrasting:
                primary = color
        elif secondary is None:
            if primary.is_distinct_from(color) and contrasting:
                secondary = color
        elif (secondary.is_distinct_from(color) and
              primary.is_distinct_from(color) and
              contrasting):
            detail = color
            break

    fallback = fallback_color(background)

    logger.debug(f"Palette selection over {len(candidates)} candidates: "
                 f"primary={'found' if primary else 'fallback'}, "
                 f"secondary={'found' if secondary else 'fallback'}, "
                 f"detail={'found' if detail else 'fallback'}")

    return (
        primary or fallback,
        secondary or fallback,
        detail or fallback,
    )
