"""
Palette Filters

Predicates the quantizer consults before a color may become a swatch.
"""

from typing import Iterable, Protocol, Sequence, runtime_checkable

from .color_utils import HSL


@runtime_checkable
class PaletteFilter(Protocol):
    """Anything with ``is_allowed(rgb, hsl) -> bool`` can act as a filter."""

    def is_allowed(self, rgb: int, hsl: Sequence[float]) -> bool:
        ...


class DefaultFilter:
    """
    Rejects near-black, near-white and the desaturated band around the
    red "I-line" (hue 10-37 degrees) where skin tones sit.
    """

    black_max_lightness = 0.05
    white_min_lightness = 0.95

    def is_allowed(self, rgb: int, hsl: Sequence[float]) -> bool:
        return not self.is_white(hsl) and not self.is_black(hsl) and not self.is_near_red_i_line(hsl)

    def is_black(self, hsl: Sequence[float]) -> bool:
        return hsl[2] <= self.black_max_lightness

    def is_white(self, hsl: Sequence[float]) -> bool:
        return hsl[2] >= self.white_min_lightness

    def is_near_red_i_line(self, hsl: Sequence[float]) -> bool:
        return 10 <= hsl[0] <= 37 and hsl[1] <= 0.82

    def __repr__(self) -> str:
        return "DefaultFilter()"


def is_color_allowed(filters: Iterable[PaletteFilter], rgb: int, hsl: HSL) -> bool:
    """A color survives only if every filter allows it."""
    for palette_filter in filters:
        if not palette_filter.is_allowed(rgb, hsl):
            return False
    return True
