"""
Color Cut Quantizer

A median-cut variant tuned for picking out *distinct* colors rather than
representative ones. Pixels are reduced to 5 bits per channel and counted in
a dense histogram; the occupied buckets are then carved into boxes, always
splitting the box with the largest color volume (not population), until the
requested number of boxes exists. Each box contributes one averaged swatch.

Boxes never copy colors: every ``Vbox`` is an inclusive ``[lower, upper]``
window into the quantizer's single ``colors`` array, which splitting reorders
in place.
"""

from typing import List, Optional, Sequence

import numpy as np
from loguru import logger

from palettekit.errors import InvalidArgumentError

from . import color_utils
from .filters import PaletteFilter, is_color_allowed
from .palette import Swatch

COMPONENT_RED = -3
COMPONENT_GREEN = -2
COMPONENT_BLUE = -1

QUANTIZE_WORD_WIDTH = 5
QUANTIZE_WORD_MASK = (1 << QUANTIZE_WORD_WIDTH) - 1
HISTOGRAM_SIZE = 1 << (QUANTIZE_WORD_WIDTH * 3)


def modify_word_width(value, current_width: int, target_width: int):
    """Rescale a channel between bit depths, keeping the most significant bits."""
    if target_width > current_width:
        new_value = value << (target_width - current_width)
    else:
        new_value = value >> (current_width - target_width)
    return new_value & ((1 << target_width) - 1)


def quantized_red(color):
    return (color >> (QUANTIZE_WORD_WIDTH + QUANTIZE_WORD_WIDTH)) & QUANTIZE_WORD_MASK


def quantized_green(color):
    return (color >> QUANTIZE_WORD_WIDTH) & QUANTIZE_WORD_MASK


def quantized_blue(color):
    return color & QUANTIZE_WORD_MASK


def quantize_from_rgb888(color):
    """Reduce a packed RGB888 color (or an array of them) to a 15-bit histogram index."""
    r = modify_word_width((color >> 16) & 0xFF, 8, QUANTIZE_WORD_WIDTH)
    g = modify_word_width((color >> 8) & 0xFF, 8, QUANTIZE_WORD_WIDTH)
    b = modify_word_width(color & 0xFF, 8, QUANTIZE_WORD_WIDTH)
    return (r << (QUANTIZE_WORD_WIDTH + QUANTIZE_WORD_WIDTH)) | (g << QUANTIZE_WORD_WIDTH) | b


def approximate_to_rgb888(r: int, g: int, b: int) -> int:
    """Expand 5-bit channels back to an opaque 8-bit color."""
    return color_utils.rgb(
        modify_word_width(r, QUANTIZE_WORD_WIDTH, 8),
        modify_word_width(g, QUANTIZE_WORD_WIDTH, 8),
        modify_word_width(b, QUANTIZE_WORD_WIDTH, 8),
    )


def quantized_to_rgb888(color: int) -> int:
    return approximate_to_rgb888(quantized_red(color), quantized_green(color), quantized_blue(color))


def modify_significant_octet(colors: np.ndarray, dimension: int) -> np.ndarray:
    """
    Repack quantized colors so ``dimension`` becomes the most significant
    channel (RGB stays RGB, green gives GRB, blue gives BGR). Sorting the
    result orders by that channel first and the remaining channels after it.
    """
    if dimension == COMPONENT_GREEN:
        return (quantized_green(colors) << (QUANTIZE_WORD_WIDTH + QUANTIZE_WORD_WIDTH)
                | quantized_red(colors) << QUANTIZE_WORD_WIDTH
                | quantized_blue(colors))
    if dimension == COMPONENT_BLUE:
        return (quantized_blue(colors) << (QUANTIZE_WORD_WIDTH + QUANTIZE_WORD_WIDTH)
                | quantized_green(colors) << QUANTIZE_WORD_WIDTH
                | quantized_red(colors))
    return colors


class Vbox:
    """A tightly fitting box around a contiguous range of the quantizer's colors."""

    def __init__(self, quantizer: "ColorCutQuantizer", lower_index: int, upper_index: int):
        self._quantizer = quantizer
        # lower and upper index are inclusive
        self.lower_index = lower_index
        self.upper_index = upper_index
        self.population = 0
        self.min_red = self.max_red = 0
        self.min_green = self.max_green = 0
        self.min_blue = self.max_blue = 0
        self.fit_box()

    def _window(self) -> np.ndarray:
        return self._quantizer.colors[self.lower_index:self.upper_index + 1]

    @property
    def volume(self) -> int:
        return ((self.max_red - self.min_red + 1)
                * (self.max_green - self.min_green + 1)
                * (self.max_blue - self.min_blue + 1))

    @property
    def color_count(self) -> int:
        return 1 + self.upper_index - self.lower_index

    def can_split(self) -> bool:
        return self.color_count > 1

    def fit_box(self) -> None:
        """Recompute population and channel bounds for the current index range."""
        window = self._window()
        self.population = int(self._quantizer.histogram[window].sum())

        reds = quantized_red(window)
        greens = quantized_green(window)
        blues = quantized_blue(window)
        self.min_red, self.max_red = int(reds.min()), int(reds.max())
        self.min_green, self.max_green = int(greens.min()), int(greens.max())
        self.min_blue, self.max_blue = int(blues.min()), int(blues.max())

    def split_box(self) -> "Vbox":
        """
        Split this box at the population median of its longest dimension.

        This box keeps the lower half; the returned box holds the upper half.
        """
        if not self.can_split():
            raise RuntimeError("Can not split a box with only 1 color")

        split_point = self.find_split_point()
        new_box = Vbox(self._quantizer, split_point + 1, self.upper_index)

        self.upper_index = split_point
        self.fit_box()
        return new_box

    def get_longest_color_dimension(self) -> int:
        red_length = self.max_red - self.min_red
        green_length = self.max_green - self.min_green
        blue_length = self.max_blue - self.min_blue

        if red_length >= green_length and red_length >= blue_length:
            return COMPONENT_RED
        elif green_length >= red_length and green_length >= blue_length:
            return COMPONENT_GREEN
        else:
            return COMPONENT_BLUE

    def find_split_point(self) -> int:
        """
        Sort this box's colors along its longest dimension and return the
        index at which the running population first reaches half the box.
        """
        dimension = self.get_longest_color_dimension()
        colors = self._quantizer.colors
        window = self._window()

        order = np.argsort(modify_significant_octet(window, dimension), kind="stable")
        colors[self.lower_index:self.upper_index + 1] = window[order]

        mid_point = self.population // 2
        running = np.cumsum(self._quantizer.histogram[self._window()])
        offset = int(np.searchsorted(running, mid_point, side="left"))
        if offset >= len(running):
            return self.lower_index

        # never split on upper_index, that would reproduce the same box
        return min(self.upper_index - 1, self.lower_index + offset)

    def get_average_color(self) -> Swatch:
        window = self._window()
        populations = self._quantizer.histogram[window]
        total_population = int(populations.sum())

        red_sum = int((populations * quantized_red(window)).sum())
        green_sum = int((populations * quantized_green(window)).sum())
        blue_sum = int((populations * quantized_blue(window)).sum())

        red_mean = color_utils.round_half_up(red_sum / total_population)
        green_mean = color_utils.round_half_up(green_sum / total_population)
        blue_mean = color_utils.round_half_up(blue_sum / total_population)

        return Swatch(approximate_to_rgb888(red_mean, green_mean, blue_mean), total_population)

    def __repr__(self) -> str:
        return (f"Vbox(lower={self.lower_index}, upper={self.upper_index}, "
                f"population={self.population}, volume={self.volume})")


class ColorCutQuantizer:
    """
    Reduce a pixel buffer to at most ``max_colors`` swatches.

    Args:
        pixels: Packed RGB/ARGB ints (alpha ignored), any iterable or numpy array
        max_colors: Maximum number of swatches to produce; values below 1 are treated as 1
        filters: Filters every candidate color must pass

    Raises:
        InvalidArgumentError: If a pixel value lies outside [0, 0xFFFFFFFF]
    """

    def __init__(self, pixels, max_colors: int, filters: Optional[Sequence[PaletteFilter]] = None):
        self.filters: List[PaletteFilter] = list(filters or [])
        self.boxes_split = 0

        if max_colors < 1:
            logger.warning(f"max_colors={max_colors} is not positive, quantizing to a single box")
            max_colors = 1

        pixel_array = np.asarray(pixels, dtype=np.int64).ravel()
        if pixel_array.size and (pixel_array.min() < 0 or pixel_array.max() > 0xFFFFFFFF):
            raise InvalidArgumentError("Pixel values must be packed colors in [0, 0xFFFFFFFF]")

        self.quantized_pixels = quantize_from_rgb888(pixel_array)
        histogram = np.bincount(self.quantized_pixels, minlength=HISTOGRAM_SIZE).astype(np.int64)

        ignored = 0
        for color in np.flatnonzero(histogram):
            if self._should_ignore_quantized(int(color)):
                histogram[color] = 0
                ignored += 1

        self.histogram = histogram
        # Ascending bucket order; split_box reorders windows of this array in place
        self.colors = np.flatnonzero(histogram).astype(np.int64)
        distinct_color_count = len(self.colors)

        logger.info(f"Histogram built: {pixel_array.size} pixels, "
                    f"{distinct_color_count} distinct colors ({ignored} filtered)")

        if distinct_color_count <= max_colors:
            # Fewer colors than requested, every bucket becomes a swatch as-is
            self.quantized_colors = [
                Swatch(quantized_to_rgb888(int(color)), int(histogram[color]))
                for color in self.colors
            ]
        else:
            self.quantized_colors = self._quantize_pixels(max_colors)

        logger.info(f"Quantizer produced {len(self.quantized_colors)} swatches "
                    f"(max_colors={max_colors}, boxes_split={self.boxes_split})")

    def get_quantized_colors(self) -> List[Swatch]:
        return self.quantized_colors

    def _quantize_pixels(self, max_colors: int) -> List[Swatch]:
        # Queue sorted by volume descending, so the largest box is always split next
        queue = [Vbox(self, 0, len(self.colors) - 1)]
        self._split_boxes(queue, max_colors)
        return self._generate_average_colors(queue)

    def _split_boxes(self, queue: List[Vbox], max_size: int) -> None:
        while 0 < len(queue) < max_size:
            vbox = queue.pop(0)

            if not vbox.can_split():
                # The largest box is a single color, so no box can split any further
                queue.insert(0, vbox)
                logger.debug(f"Stopped splitting at {len(queue)} boxes, {vbox} is terminal")
                return

            new_box = vbox.split_box()
            self.boxes_split += 1
            queue.append(new_box)
            queue.append(vbox)
            # sort() is stable, so equal volumes keep their queue order
            queue.sort(key=lambda box: box.volume, reverse=True)

    def _generate_average_colors(self, vboxes: List[Vbox]) -> List[Swatch]:
        swatches = []
        for vbox in vboxes:
            swatch = vbox.get_average_color()
            # Averaging can still land on an unwanted color, so check again
            if not self._should_ignore_swatch(swatch):
                swatches.append(swatch)
        dropped = len(vboxes) - len(swatches)
        if dropped:
            logger.debug(f"Dropped {dropped} averaged swatches rejected by filters")
        return swatches

    def _should_ignore_quantized(self, color: int) -> bool:
        rgb = quantized_to_rgb888(color)
        return self._should_ignore(rgb, color_utils.color_to_hsl(rgb))

    def _should_ignore_swatch(self, swatch: Swatch) -> bool:
        return self._should_ignore(swatch.rgb, swatch.hsl)

    def _should_ignore(self, rgb: int, hsl) -> bool:
        return not is_color_allowed(self.filters, rgb, hsl)
