"""
Palette Scoring

Holds the swatches produced by quantization and selects, for each target
profile, the swatch that best matches it. Scoring combines closeness in
saturation and lightness with relative population, weighted per target.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from loguru import logger

from palettekit.config import config
from palettekit.errors import InvalidArgumentError

from . import color_utils
from .color_utils import HSL
from .target import (
    DARK_MUTED,
    DARK_VIBRANT,
    LIGHT_MUTED,
    LIGHT_VIBRANT,
    MUTED,
    VIBRANT,
    Target,
)


DEFAULT_MIN_CONTRAST_TITLE_TEXT = 3.0
DEFAULT_MIN_CONTRAST_BODY_TEXT = 4.5


def _contrast_threshold(ratio: float, fallback: float) -> float:
    """Return ``ratio`` if it is a valid WCAG ratio, otherwise warn and use ``fallback``."""
    if config.validate_contrast_ratio(ratio):
        return ratio
    logger.warning(f"Invalid minimum contrast ratio {ratio}, using {fallback}")
    return fallback


@dataclass(frozen=True)
class Swatch:
    """
    A representative color and the number of pixels it stands for.

    ``rgb`` is always stored fully opaque. HSL and the title/body text colors
    are derived once at construction; equality and hashing only look at
    ``(rgb, population)``.
    """

    rgb: int
    population: int
    hsl: HSL = field(init=False, compare=False)
    title_text_color: int = field(init=False, compare=False)
    body_text_color: int = field(init=False, compare=False)

    def __post_init__(self):
        if self.population < 0:
            raise InvalidArgumentError(f"population must be non-negative, got {self.population}")
        opaque = (self.rgb & 0x00FFFFFF) | 0xFF000000
        object.__setattr__(self, "rgb", opaque)
        object.__setattr__(self, "hsl", color_utils.color_to_hsl(opaque))

        title, body = _generate_text_colors(opaque)
        object.__setattr__(self, "title_text_color", title)
        object.__setattr__(self, "body_text_color", body)

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int, population: int) -> "Swatch":
        return cls(color_utils.rgb(r, g, b), population)

    @classmethod
    def from_hsl(cls, hsl: HSL, population: int) -> "Swatch":
        return cls(color_utils.hsl_to_color(hsl), population)

    @property
    def hex(self) -> str:
        return color_utils.to_hex(self.rgb)

    def __repr__(self) -> str:
        h, s, l = self.hsl  # noqa: E741
        return (f"Swatch(rgb={self.hex}, hsl=({h:.1f}, {s:.3f}, {l:.3f}), "
                f"population={self.population}, "
                f"title_text={color_utils.to_hex(self.title_text_color, include_alpha=True)}, "
                f"body_text={color_utils.to_hex(self.body_text_color, include_alpha=True)})")


def _generate_text_colors(background: int):
    """
    Pick translucent white or black text colors readable on ``background``.

    White is tried first since most swatch colors are dark. When neither white
    nor black satisfies both thresholds, each text color falls back separately.

    Returns:
        ``(title_text_color, body_text_color)``
    """
    white, black = color_utils.WHITE, color_utils.BLACK
    title_ratio = _contrast_threshold(config.MIN_CONTRAST_TITLE_TEXT, DEFAULT_MIN_CONTRAST_TITLE_TEXT)
    body_ratio = _contrast_threshold(config.MIN_CONTRAST_BODY_TEXT, DEFAULT_MIN_CONTRAST_BODY_TEXT)

    light_body_alpha = color_utils.calculate_minimum_alpha(white, background, body_ratio)
    light_title_alpha = color_utils.calculate_minimum_alpha(white, background, title_ratio)
    if light_body_alpha != -1 and light_title_alpha != -1:
        return (color_utils.set_alpha_component(white, light_title_alpha),
                color_utils.set_alpha_component(white, light_body_alpha))

    dark_body_alpha = color_utils.calculate_minimum_alpha(black, background, body_ratio)
    dark_title_alpha = color_utils.calculate_minimum_alpha(black, background, title_ratio)
    if dark_body_alpha != -1 and dark_title_alpha != -1:
        return (color_utils.set_alpha_component(black, dark_title_alpha),
                color_utils.set_alpha_component(black, dark_body_alpha))

    # Mismatched lightness: use whichever color reached each threshold. When
    # neither did, the opaque one with the higher contrast is the closest we get.
    if color_utils.calculate_contrast(white, background) >= color_utils.calculate_contrast(black, background):
        closest = white
    else:
        closest = black

    def pick(light_alpha: int, dark_alpha: int) -> int:
        if light_alpha != -1:
            return color_utils.set_alpha_component(white, light_alpha)
        if dark_alpha != -1:
            return color_utils.set_alpha_component(black, dark_alpha)
        return closest

    return pick(light_title_alpha, dark_title_alpha), pick(light_body_alpha, dark_body_alpha)


class Palette:
    """
    Swatches extracted from an image plus the swatch selected for each target.

    ``generate()`` fills ``selected_swatches``; everything else is fixed at
    construction. Use :class:`~palettekit.services.colors.builder.PaletteBuilder`
    (or the ``from_*`` helpers) rather than constructing palettes directly.
    """

    def __init__(self, swatches: Sequence[Swatch], targets: Sequence[Target]):
        self.swatches: List[Swatch] = list(swatches)
        self.targets: List[Target] = []
        for target in targets:
            # a target listed twice would be scored against its own reservation
            if not any(existing is target for existing in self.targets):
                self.targets.append(target)
        self.selected_swatches: Dict[Target, Optional[Swatch]] = {}
        self._used_colors: Set[int] = set()
        self.dominant_swatch: Optional[Swatch] = self._find_dominant_swatch()

    @staticmethod
    def from_pixels(pixels, width: int, height: int):
        """Start a builder over a row-major ARGB pixel buffer."""
        from .builder import PaletteBuilder
        return PaletteBuilder.from_pixels(pixels, width, height)

    @staticmethod
    def from_image(image):
        """Start a builder over a Pillow image."""
        from .builder import PaletteBuilder
        return PaletteBuilder.from_image(image)

    @staticmethod
    def from_swatches(swatches: Sequence[Swatch]) -> "Palette":
        """Generate a palette from existing swatches using the default targets."""
        from .builder import PaletteBuilder
        from .target import default_targets

        builder = PaletteBuilder.from_swatches(swatches)
        for target in default_targets():
            builder.add_target(target)
        return builder.generate()

    def generate(self) -> None:
        """Select the best swatch for every target, in target order."""
        for target in self.targets:
            target.normalize_weights()
            self.selected_swatches[target] = self._generate_scored_target(target)
        # Exclusivity only applies within one pass
        self._used_colors.clear()

        logger.debug("Selected swatches: " + ", ".join(
            f"{target.name or 'custom'}={swatch.hex if swatch else None}"
            for target, swatch in self.selected_swatches.items()
        ))

    def _generate_scored_target(self, target: Target) -> Optional[Swatch]:
        max_score_swatch = self._get_max_scored_swatch_for_target(target)
        if max_score_swatch is not None and target.is_exclusive:
            self._used_colors.add(max_score_swatch.rgb)
        return max_score_swatch

    def _get_max_scored_swatch_for_target(self, target: Target) -> Optional[Swatch]:
        max_score = 0.0
        max_score_swatch = None
        for swatch in self.swatches:
            if self._should_be_scored_for_target(swatch, target):
                score = self._generate_score(swatch, target)
                # Strict comparison: the first swatch wins ties
                if max_score_swatch is None or score > max_score:
                    max_score_swatch = swatch
                    max_score = score
        return max_score_swatch

    def _should_be_scored_for_target(self, swatch: Swatch, target: Target) -> bool:
        _, saturation, lightness = swatch.hsl
        return (target.minimum_saturation <= saturation <= target.maximum_saturation
                and target.minimum_lightness <= lightness <= target.maximum_lightness
                and swatch.rgb not in self._used_colors)

    def _generate_score(self, swatch: Swatch, target: Target) -> float:
        _, saturation, lightness = swatch.hsl
        max_population = self.dominant_swatch.population if self.dominant_swatch else 1

        saturation_score = 0.0
        luminance_score = 0.0
        population_score = 0.0

        if target.saturation_weight > 0:
            saturation_score = target.saturation_weight * (1 - abs(saturation - target.target_saturation))
        if target.lightness_weight > 0:
            luminance_score = target.lightness_weight * (1 - abs(lightness - target.target_lightness))
        if target.population_weight > 0 and max_population > 0:
            population_score = target.population_weight * (swatch.population / max_population)

        return saturation_score + luminance_score + population_score

    def _find_dominant_swatch(self) -> Optional[Swatch]:
        max_swatch = None
        for swatch in self.swatches:
            if max_swatch is None or swatch.population > max_swatch.population:
                max_swatch = swatch
        return max_swatch

    def get_swatch_for_target(self, target: Target) -> Optional[Swatch]:
        return self.selected_swatches.get(target)

    def get_color_for_target(self, target: Target, default_color: int) -> int:
        swatch = self.get_swatch_for_target(target)
        return swatch.rgb if swatch is not None else default_color

    def _swatch_for_preset(self, name: str) -> Optional[Swatch]:
        for target in self.targets:
            if target.name == name:
                return self.selected_swatches.get(target)
        return None

    def _color_for_preset(self, name: str, default_color: int) -> int:
        swatch = self._swatch_for_preset(name)
        return swatch.rgb if swatch is not None else default_color

    @property
    def vibrant_swatch(self) -> Optional[Swatch]:
        return self._swatch_for_preset(VIBRANT)

    @property
    def light_vibrant_swatch(self) -> Optional[Swatch]:
        return self._swatch_for_preset(LIGHT_VIBRANT)

    @property
    def dark_vibrant_swatch(self) -> Optional[Swatch]:
        return self._swatch_for_preset(DARK_VIBRANT)

    @property
    def muted_swatch(self) -> Optional[Swatch]:
        return self._swatch_for_preset(MUTED)

    @property
    def light_muted_swatch(self) -> Optional[Swatch]:
        return self._swatch_for_preset(LIGHT_MUTED)

    @property
    def dark_muted_swatch(self) -> Optional[Swatch]:
        return self._swatch_for_preset(DARK_MUTED)

    def get_vibrant_color(self, default_color: int) -> int:
        return self._color_for_preset(VIBRANT, default_color)

    def get_light_vibrant_color(self, default_color: int) -> int:
        return self._color_for_preset(LIGHT_VIBRANT, default_color)

    def get_dark_vibrant_color(self, default_color: int) -> int:
        return self._color_for_preset(DARK_VIBRANT, default_color)

    def get_muted_color(self, default_color: int) -> int:
        return self._color_for_preset(MUTED, default_color)

    def get_light_muted_color(self, default_color: int) -> int:
        return self._color_for_preset(LIGHT_MUTED, default_color)

    def get_dark_muted_color(self, default_color: int) -> int:
        return self._color_for_preset(DARK_MUTED, default_color)

    def get_dominant_color(self, default_color: int) -> int:
        return self.dominant_swatch.rgb if self.dominant_swatch is not None else default_color
