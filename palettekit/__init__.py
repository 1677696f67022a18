"""
palettekit

Extracts prominent colors from images: a median-cut color quantizer, target
profiles describing vibrant and muted swatches, and a scorer that selects the
best swatch for each profile.
"""

__version__ = "1.0.0"
