"""
palettekit Errors
Exception taxonomy for invalid palette and color arguments.
"""


class PaletteError(Exception):
    """Base class for palettekit errors."""
    pass


class InvalidArgumentError(PaletteError, ValueError):
    """Raised when a caller passes a malformed argument (translucent background, bad alpha, ...)."""
    pass


class ColorRangeError(PaletteError, IndexError):
    """Raised when a color component index exceeds the color space's component count."""
    pass
