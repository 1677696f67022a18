"""
Unit tests for the color cut quantizer.

Tests the histogram and median cut logic:
- 5-bit quantization helpers
- distinct colors below the box limit
- box splitting, averaging and population conservation
- filter application
"""

import numpy as np
import pytest

from palettekit.errors import InvalidArgumentError
from palettekit.services.colors import color_utils
from palettekit.services.colors.filters import DefaultFilter
from palettekit.services.colors.quantizer import (
    COMPONENT_BLUE,
    COMPONENT_GREEN,
    COMPONENT_RED,
    ColorCutQuantizer,
    Vbox,
    modify_significant_octet,
    modify_word_width,
    quantize_from_rgb888,
    quantized_to_rgb888,
)


class TestQuantizationHelpers:
    """Test bit depth conversion helpers"""

    def test_modify_word_width(self):
        assert modify_word_width(0xFF, 8, 5) == 31
        assert modify_word_width(31, 5, 8) == 248
        assert modify_word_width(0x07, 8, 5) == 0

    def test_quantize_round_trip_loses_low_bits(self):
        quantized = quantize_from_rgb888(0xFFFF0000)
        assert quantized == 31 << 10
        assert quantized_to_rgb888(quantized) == 0xFFF80000

    def test_quantize_vectorized(self):
        colors = np.array([color_utils.RED, color_utils.GREEN, color_utils.BLUE], dtype=np.int64)
        assert quantize_from_rgb888(colors).tolist() == [31 << 10, 31 << 5, 31]

    def test_modify_significant_octet(self):
        color = np.array([(1 << 10) | (2 << 5) | 3], dtype=np.int64)
        assert modify_significant_octet(color, COMPONENT_RED).tolist() == [(1 << 10) | (2 << 5) | 3]
        assert modify_significant_octet(color, COMPONENT_GREEN).tolist() == [(2 << 10) | (1 << 5) | 3]
        assert modify_significant_octet(color, COMPONENT_BLUE).tolist() == [(3 << 10) | (2 << 5) | 1]


class TestDistinctColors:
    """Test inputs with no more distinct colors than requested"""

    def test_primary_colors_without_filters(self, primary_pixels):
        swatches = ColorCutQuantizer(primary_pixels, 16).get_quantized_colors()

        # Ascending histogram index: blue, green, red, white
        assert [(s.rgb, s.population) for s in swatches] == [
            (0xFF0000F8, 30),
            (0xFF00F800, 50),
            (0xFFF80000, 100),
            (0xFFF8F8F8, 1),
        ]

    def test_default_filter_drops_white(self, primary_pixels):
        swatches = ColorCutQuantizer(primary_pixels, 16, [DefaultFilter()]).get_quantized_colors()

        assert len(swatches) == 3
        assert 0xFFF8F8F8 not in {s.rgb for s in swatches}
        assert sum(s.population for s in swatches) == 180

    def test_alpha_is_ignored(self):
        swatches = ColorCutQuantizer([0x00FF0000, 0xFFFF0000], 16).get_quantized_colors()
        assert len(swatches) == 1
        assert swatches[0].population == 2

    def test_empty_input(self):
        quantizer = ColorCutQuantizer([], 16)
        assert quantizer.get_quantized_colors() == []
        assert quantizer.boxes_split == 0

    def test_out_of_range_pixels_rejected(self):
        with pytest.raises(InvalidArgumentError):
            ColorCutQuantizer([-1], 16)
        with pytest.raises(InvalidArgumentError):
            ColorCutQuantizer([0x1FFFFFFFF], 16)

    def test_caller_buffer_untouched(self):
        pixels = np.array([color_utils.RED, color_utils.BLUE, color_utils.GREEN], dtype=np.int64)
        ColorCutQuantizer(pixels, 2)
        assert pixels.tolist() == [color_utils.RED, color_utils.BLUE, color_utils.GREEN]


class TestMedianCut:
    """Test box splitting when there are more colors than boxes"""

    def test_two_boxes_split_at_population_median(self, primary_pixels):
        quantizer = ColorCutQuantizer(primary_pixels, 2)
        swatches = quantizer.get_quantized_colors()

        # Red is the longest dimension (ties go to red); the running population
        # reaches half the box on red, so blue/green/red stay together.
        assert quantizer.boxes_split == 1
        assert [(s.rgb, s.population) for s in swatches] == [
            (0xFF884828, 180),
            (0xFFF8F8F8, 1),
        ]

    def test_non_positive_max_colors_uses_single_box(self, primary_pixels):
        swatches = ColorCutQuantizer(primary_pixels, 0).get_quantized_colors()
        assert len(swatches) == 1
        assert swatches[0].population == len(primary_pixels)

    def test_population_conserved(self):
        rng = np.random.default_rng(42)
        pixels = rng.integers(0, 0x1000000, size=5000) | 0xFF000000

        swatches = ColorCutQuantizer(pixels, 16).get_quantized_colors()

        assert len(swatches) == 16
        assert sum(s.population for s in swatches) == 5000

    def test_split_count_bounded(self):
        rng = np.random.default_rng(7)
        pixels = rng.integers(0, 0x1000000, size=2000) | 0xFF000000

        quantizer = ColorCutQuantizer(pixels, 64)

        assert len(quantizer.get_quantized_colors()) <= 64
        assert quantizer.boxes_split <= 63

    def test_vbox_single_color_cannot_split(self):
        quantizer = ColorCutQuantizer([color_utils.RED, color_utils.BLUE], 16)
        vbox = Vbox(quantizer, 0, 0)

        assert not vbox.can_split()
        assert vbox.volume == 1
        with pytest.raises(RuntimeError):
            vbox.split_box()

    def test_vbox_bounds(self):
        quantizer = ColorCutQuantizer([color_utils.RED, color_utils.BLUE], 16)
        vbox = Vbox(quantizer, 0, 1)

        assert vbox.population == 2
        assert vbox.color_count == 2
        assert (vbox.min_red, vbox.max_red) == (0, 31)
        assert (vbox.min_green, vbox.max_green) == (0, 0)
        assert (vbox.min_blue, vbox.max_blue) == (0, 31)
        assert vbox.volume == 32 * 1 * 32
        assert vbox.get_longest_color_dimension() == COMPONENT_RED


class TestCustomFilters:
    """Test user supplied filters"""

    class RejectGreen:
        def is_allowed(self, rgb, hsl):
            return not (90 <= hsl[0] <= 150)

    def test_rejected_colors_never_become_swatches(self, primary_pixels):
        swatches = ColorCutQuantizer(primary_pixels, 16, [self.RejectGreen()]).get_quantized_colors()
        assert 0xFF00F800 not in {s.rgb for s in swatches}
        assert len(swatches) == 3

    def test_averaged_swatch_filtered_again(self):
        """An average landing in a rejected region is dropped"""
        class RejectMidGray:
            def is_allowed(self, rgb, hsl):
                return not (hsl[1] == 0 and 0.2 < hsl[2] < 0.8)

        pixels = [color_utils.rgb(0x20, 0x20, 0x20), color_utils.rgb(0xE0, 0xE0, 0xE0)]
        swatches = ColorCutQuantizer(pixels, 1, [RejectMidGray()]).get_quantized_colors()

        assert swatches == []
