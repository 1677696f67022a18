"""
palettekit Imaging Utilities
Bridges Pillow images and flat ARGB pixel buffers, and applies the resize
and region policies a palette builder asks for.
"""
import math
from typing import NamedTuple, Optional

import numpy as np
from PIL import Image

from palettekit.errors import InvalidArgumentError


class Region(NamedTuple):
    """Half-open pixel rectangle: ``left <= x < right``, ``top <= y < bottom``."""
    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def intersect(self, other: "Region") -> Optional["Region"]:
        """Return the overlapping rectangle, or None when the two do not overlap."""
        overlap = Region(
            max(self.left, other.left),
            max(self.top, other.top),
            min(self.right, other.right),
            min(self.bottom, other.bottom),
        )
        return None if overlap.is_empty() else overlap

    def scaled(self, ratio: float, max_width: int, max_height: int) -> "Region":
        """Scale to a resized image, rounding outward and clamping to its bounds."""
        return Region(
            int(math.floor(self.left * ratio)),
            int(math.floor(self.top * ratio)),
            min(int(math.ceil(self.right * ratio)), max_width),
            min(int(math.ceil(self.bottom * ratio)), max_height),
        )


def pixels_to_image(pixels, width: int, height: int) -> Image.Image:
    """
    Wrap a row-major ARGB pixel buffer in an RGBA Pillow image.

    Raises:
        InvalidArgumentError: If the buffer size does not match the geometry
            or a value is not a packed 32-bit color
    """
    if width <= 0 or height <= 0:
        raise InvalidArgumentError(f"Invalid image dimensions: {width}x{height}")

    argb = np.asarray(pixels, dtype=np.int64).ravel()
    if argb.size != width * height:
        raise InvalidArgumentError(
            f"Pixel buffer holds {argb.size} values, expected {width}x{height}={width * height}"
        )
    if argb.size and (argb.min() < 0 or argb.max() > 0xFFFFFFFF):
        raise InvalidArgumentError("Pixel values must be packed colors in [0, 0xFFFFFFFF]")

    rgba = np.empty((height, width, 4), dtype=np.uint8)
    grid = argb.reshape(height, width)
    rgba[..., 0] = (grid >> 16) & 0xFF
    rgba[..., 1] = (grid >> 8) & 0xFF
    rgba[..., 2] = grid & 0xFF
    rgba[..., 3] = (grid >> 24) & 0xFF
    return Image.fromarray(rgba, mode="RGBA")


def image_to_pixels(image: Image.Image) -> np.ndarray:
    """
    Flatten a Pillow image to row-major packed ARGB values.

    Returns:
        1-D ``uint32`` array of length ``width * height``
    """
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    rgba = np.asarray(image, dtype=np.uint32)
    argb = (rgba[..., 3] << 24) | (rgba[..., 0] << 16) | (rgba[..., 1] << 8) | rgba[..., 2]
    return argb.ravel()


def scale_ratio(width: int, height: int, resize_area: int = -1, resize_max_dimension: int = -1) -> float:
    """
    Downscale ratio for the given policy, or -1 when no scaling is needed.

    Area policy wins when both are positive; at most one is normally set.
    """
    if resize_area > 0:
        area = width * height
        if area > resize_area:
            return math.sqrt(resize_area / area)
    elif resize_max_dimension > 0:
        max_dimension = max(width, height)
        if max_dimension > resize_max_dimension:
            return resize_max_dimension / max_dimension
    return -1.0


def scale_image_down(image: Image.Image, resize_area: int = -1, resize_max_dimension: int = -1) -> Image.Image:
    """
    Shrink ``image`` to fit the resize policy; returns the same object when
    scaling is disabled or unnecessary.
    """
    ratio = scale_ratio(image.width, image.height, resize_area, resize_max_dimension)
    if ratio <= 0:
        return image

    new_size = (
        max(1, int(math.ceil(image.width * ratio))),
        max(1, int(math.ceil(image.height * ratio))),
    )
    return image.resize(new_size, Image.BILINEAR)


def crop_region(image: Image.Image, region: Optional[Region]) -> Image.Image:
    """Return only the pixels inside ``region`` (the whole image when None)."""
    if region is None:
        return image
    return image.crop((region.left, region.top, region.right, region.bottom))
