"""
palettekit Colors Module

Provides the color codec, histogram quantization, palette filters, target
profiles and swatch scoring used to build palettes from images.
"""

from .builder import PaletteBuilder
from .filters import DefaultFilter, PaletteFilter
from .palette import Palette, Swatch
from .target import Target, TargetBuilder, default_targets

__all__ = [
    "DefaultFilter",
    "Palette",
    "PaletteBuilder",
    "PaletteFilter",
    "Swatch",
    "Target",
    "TargetBuilder",
    "default_targets",
]
