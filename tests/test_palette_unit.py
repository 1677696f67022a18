"""
Unit tests for swatches and palette scoring.

Tests the selection logic:
- swatch derived values and text colors
- target eligibility and scoring
- exclusivity within one generation
- dominant swatch tie-breaking
"""

import pytest

from palettekit.errors import InvalidArgumentError
from palettekit.services.colors import color_utils
from palettekit.services.colors import target as targets
from palettekit.services.colors.palette import Palette, Swatch
from palettekit.services.colors.target import TargetBuilder


class TestSwatch:
    """Test swatch construction and derived values"""

    def test_rgb_forced_opaque(self):
        assert Swatch(0x00123456, 1).rgb == 0xFF123456

    def test_hsl_derived(self):
        h, s, l = Swatch(color_utils.RED, 5).hsl  # noqa: E741
        assert (h, s, l) == pytest.approx((0.0, 1.0, 0.5))

    def test_negative_population_rejected(self):
        with pytest.raises(InvalidArgumentError):
            Swatch(color_utils.RED, -1)

    def test_equality_ignores_derived_fields(self):
        assert Swatch(color_utils.RED, 3) == Swatch.from_rgb(255, 0, 0, 3)
        assert Swatch(color_utils.RED, 3) != Swatch(color_utils.RED, 4)
        assert Swatch.from_hsl((240.0, 1.0, 0.5), 3).rgb == color_utils.BLUE

    def test_text_colors_on_dark_background(self):
        swatch = Swatch(color_utils.BLACK, 1)
        for text in (swatch.title_text_color, swatch.body_text_color):
            assert text & 0x00FFFFFF == 0x00FFFFFF
        assert color_utils.alpha(swatch.title_text_color) <= color_utils.alpha(swatch.body_text_color)
        assert color_utils.calculate_contrast(swatch.body_text_color, swatch.rgb) >= 4.5

    def test_text_colors_on_light_background(self):
        swatch = Swatch(color_utils.WHITE, 1)
        for text in (swatch.title_text_color, swatch.body_text_color):
            assert text & 0x00FFFFFF == 0
        assert color_utils.calculate_contrast(swatch.title_text_color, swatch.rgb) >= 3.0

    def test_repr(self):
        assert "#FF0000" in repr(Swatch(color_utils.RED, 7))


class TestScoring:
    """Test target eligibility and scoring"""

    def test_vibrant_selects_saturated_mid_color(self):
        red = Swatch(color_utils.RED, 10)
        vibrant = targets.vibrant()
        light_vibrant = targets.light_vibrant()

        palette = Palette([red], [vibrant, light_vibrant])
        palette.generate()

        assert palette.get_swatch_for_target(vibrant) == red
        # lightness 0.5 is below the light vibrant minimum of 0.55
        assert palette.get_swatch_for_target(light_vibrant) is None

    def test_score_of_perfect_match(self):
        red = Swatch(color_utils.RED, 10)
        vibrant = targets.vibrant()
        palette = Palette([red], [vibrant])
        assert palette._generate_score(red, vibrant) == pytest.approx(1.0)

    def test_population_breaks_equal_hsl(self):
        small = Swatch(color_utils.RED, 5)
        large = Swatch(color_utils.RED, 10)
        vibrant = targets.vibrant()

        palette = Palette([small, large], [vibrant])
        palette.generate()

        assert palette.get_swatch_for_target(vibrant) is large

    def test_first_swatch_wins_ties(self):
        red = Swatch(color_utils.RED, 10)
        blue = Swatch(color_utils.BLUE, 10)
        vibrant = targets.vibrant()

        palette = Palette([red, blue], [vibrant])
        palette.generate()

        assert palette.get_swatch_for_target(vibrant) is red

    def test_zero_weight_ignores_population(self):
        small = Swatch(color_utils.RED, 1)
        large = Swatch(color_utils.rgb(200, 0, 0), 100)
        target = TargetBuilder(targets.vibrant()).set_population_weight(0).build()

        palette = Palette([large, small], [target])
        palette.generate()

        # pure red is closer to the target saturation and lightness
        assert palette.get_swatch_for_target(target) is small

    def test_saturated_swatch_beats_larger_muted_one(self):
        saturated = Swatch.from_hsl((0.0, 0.9, 0.5), 100)
        muted = Swatch.from_hsl((120.0, 0.2, 0.5), 200)
        vibrant = targets.vibrant()

        palette = Palette([saturated, muted], [vibrant])
        palette.generate()

        # saturation 0.2 is below the vibrant minimum of 0.35
        assert palette.get_swatch_for_target(vibrant) is saturated

    def test_inclusive_bounds(self):
        swatch = Swatch(color_utils.RED, 1)
        target = (TargetBuilder()
                  .set_minimum_saturation(1.0)
                  .set_minimum_lightness(0.5)
                  .set_maximum_lightness(0.5)
                  .build())
        palette = Palette([swatch], [target])
        palette.generate()
        assert palette.get_swatch_for_target(target) is swatch


class TestExclusivity:
    """Test swatch reservation by exclusive targets"""

    def test_exclusive_target_reserves_swatch(self):
        red = Swatch(color_utils.RED, 10)
        first = targets.vibrant()
        second = first.copy()

        palette = Palette([red], [first, second])
        palette.generate()

        assert palette.get_swatch_for_target(first) is red
        assert palette.get_swatch_for_target(second) is None

    def test_second_exclusive_target_takes_runner_up(self):
        red = Swatch(color_utils.RED, 100)
        runner_up = Swatch.from_hsl((0.0, 0.9, 0.5), 100)
        first = targets.vibrant()
        second = first.copy()

        palette = Palette([runner_up, red], [first, second])
        palette.generate()

        assert palette.get_swatch_for_target(first) is red
        assert palette.get_swatch_for_target(second) is runner_up

    def test_duplicate_target_scored_once(self):
        red = Swatch(color_utils.RED, 10)
        vibrant = targets.vibrant()

        palette = Palette([red], [vibrant, vibrant])
        palette.generate()

        assert palette.targets == [vibrant]
        assert palette.get_swatch_for_target(vibrant) is red

    def test_non_exclusive_target_shares_swatch(self):
        red = Swatch(color_utils.RED, 10)
        first = TargetBuilder(targets.vibrant()).set_exclusive(False).build()
        second = targets.vibrant()

        palette = Palette([red], [first, second])
        palette.generate()

        assert palette.get_swatch_for_target(first) is red
        assert palette.get_swatch_for_target(second) is red

    def test_generate_is_idempotent(self):
        swatches = [Swatch(color_utils.RED, 10), Swatch(color_utils.rgb(40, 40, 120), 4)]
        palette = Palette(swatches, targets.default_targets())

        palette.generate()
        first = dict(palette.selected_swatches)
        palette.generate()

        assert palette.selected_swatches == first


class TestAccessors:
    """Test dominant swatch and preset accessors"""

    def test_dominant_tie_keeps_first(self):
        first = Swatch(color_utils.RED, 10)
        second = Swatch(color_utils.BLUE, 10)
        palette = Palette([first, second], [])
        assert palette.dominant_swatch is first
        assert palette.get_dominant_color(0) == color_utils.RED

    def test_empty_palette_defaults(self):
        palette = Palette([], targets.default_targets())
        palette.generate()

        assert palette.dominant_swatch is None
        assert palette.get_dominant_color(color_utils.GRAY) == color_utils.GRAY
        assert palette.vibrant_swatch is None
        assert palette.get_muted_color(color_utils.CYAN) == color_utils.CYAN

    def test_preset_accessors(self):
        red = Swatch(color_utils.RED, 10)
        palette = Palette.from_swatches([red])

        assert len(palette.targets) == 6
        assert palette.vibrant_swatch is red
        assert palette.get_vibrant_color(0) == color_utils.RED
        assert palette.light_vibrant_swatch is None
        assert palette.get_light_vibrant_color(color_utils.YELLOW) == color_utils.YELLOW

    def test_get_color_for_target_default(self):
        unused = targets.dark_muted()
        palette = Palette([Swatch(color_utils.RED, 1)], [])
        palette.generate()
        assert palette.get_color_for_target(unused, color_utils.MAGENTA) == color_utils.MAGENTA


class TestContrastThresholds:
    """Test validation of configured text contrast ratios"""

    def test_invalid_ratio_falls_back(self, monkeypatch):
        from palettekit.config import config

        monkeypatch.setattr(config, "MIN_CONTRAST_BODY_TEXT", 40.0)
        swatch = Swatch(color_utils.BLACK, 1)

        # a ratio above 21 is unreachable, the default 4.5 is used instead
        assert color_utils.alpha(swatch.body_text_color) < 0xFF
        assert color_utils.calculate_contrast(swatch.body_text_color, swatch.rgb) >= 4.5

    def test_valid_ratio_used(self, monkeypatch):
        from palettekit.config import config

        monkeypatch.setattr(config, "MIN_CONTRAST_BODY_TEXT", 20.0)
        swatch = Swatch(color_utils.BLACK, 1)

        # near-maximum contrast needs near-opaque white
        assert color_utils.alpha(swatch.body_text_color) > 0xF0
        assert color_utils.calculate_contrast(swatch.body_text_color, swatch.rgb) >= 20.0
