"""
Target Profiles

A Target describes the kind of swatch a palette should pick: saturation and
lightness bounds (minimum, target, maximum), three weights saying how much
closeness in saturation, closeness in lightness and pixel population matter,
and whether the winning swatch is reserved (exclusive) for this target.

The six presets are built by factory functions, so every palette owns its
own instances and weight normalization never leaks between generations.
"""

from typing import List, Optional

INDEX_MIN = 0
INDEX_TARGET = 1
INDEX_MAX = 2

INDEX_WEIGHT_SAT = 0
INDEX_WEIGHT_LUMA = 1
INDEX_WEIGHT_POP = 2

TARGET_DARK_LUMA = 0.26
MAX_DARK_LUMA = 0.45

MIN_LIGHT_LUMA = 0.55
TARGET_LIGHT_LUMA = 0.74

MIN_NORMAL_LUMA = 0.3
TARGET_NORMAL_LUMA = 0.5
MAX_NORMAL_LUMA = 0.7

TARGET_MUTED_SATURATION = 0.3
MAX_MUTED_SATURATION = 0.4

TARGET_VIBRANT_SATURATION = 1.0
MIN_VIBRANT_SATURATION = 0.35

WEIGHT_SATURATION = 0.24
WEIGHT_LUMA = 0.52
WEIGHT_POPULATION = 0.24

LIGHT_VIBRANT = "light_vibrant"
VIBRANT = "vibrant"
DARK_VIBRANT = "dark_vibrant"
LIGHT_MUTED = "light_muted"
MUTED = "muted"
DARK_MUTED = "dark_muted"


def _default_bounds() -> List[float]:
    return [0.0, 0.5, 1.0]


class Target:
    """
    A scoring profile used to select one swatch from a palette.

    Targets compare and hash by identity, so two targets with equal values are
    still scored separately.
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self.saturation_targets: List[float] = _default_bounds()
        self.lightness_targets: List[float] = _default_bounds()
        self.weights: List[float] = [WEIGHT_SATURATION, WEIGHT_LUMA, WEIGHT_POPULATION]
        self.is_exclusive = True

    def copy(self, name: Optional[str] = None) -> "Target":
        """Return an independent copy, optionally renamed."""
        clone = Target(name if name is not None else self.name)
        clone.saturation_targets = list(self.saturation_targets)
        clone.lightness_targets = list(self.lightness_targets)
        clone.weights = list(self.weights)
        clone.is_exclusive = self.is_exclusive
        return clone

    @property
    def minimum_saturation(self) -> float:
        return self.saturation_targets[INDEX_MIN]

    @property
    def target_saturation(self) -> float:
        return self.saturation_targets[INDEX_TARGET]

    @property
    def maximum_saturation(self) -> float:
        return self.saturation_targets[INDEX_MAX]

    @property
    def minimum_lightness(self) -> float:
        return self.lightness_targets[INDEX_MIN]

    @property
    def target_lightness(self) -> float:
        return self.lightness_targets[INDEX_TARGET]

    @property
    def maximum_lightness(self) -> float:
        return self.lightness_targets[INDEX_MAX]

    @property
    def saturation_weight(self) -> float:
        """
        How much a swatch's closeness to ``target_saturation`` counts, relative
        to the other two weights.
        """
        return self.weights[INDEX_WEIGHT_SAT]

    @property
    def lightness_weight(self) -> float:
        return self.weights[INDEX_WEIGHT_LUMA]

    @property
    def population_weight(self) -> float:
        return self.weights[INDEX_WEIGHT_POP]

    def normalize_weights(self) -> None:
        """Scale the weights so the positive ones sum to 1; all-zero weights stay untouched."""
        total = sum(weight for weight in self.weights if weight > 0)
        if total != 0:
            self.weights = [weight / total for weight in self.weights]

    def __repr__(self) -> str:
        return (f"Target(name={self.name!r}, saturation={self.saturation_targets}, "
                f"lightness={self.lightness_targets}, weights={self.weights}, "
                f"exclusive={self.is_exclusive})")


def _set_dark_lightness(target: Target) -> None:
    target.lightness_targets[INDEX_TARGET] = TARGET_DARK_LUMA
    target.lightness_targets[INDEX_MAX] = MAX_DARK_LUMA


def _set_normal_lightness(target: Target) -> None:
    target.lightness_targets[INDEX_MIN] = MIN_NORMAL_LUMA
    target.lightness_targets[INDEX_TARGET] = TARGET_NORMAL_LUMA
    target.lightness_targets[INDEX_MAX] = MAX_NORMAL_LUMA


def _set_light_lightness(target: Target) -> None:
    target.lightness_targets[INDEX_MIN] = MIN_LIGHT_LUMA
    target.lightness_targets[INDEX_TARGET] = TARGET_LIGHT_LUMA


def _set_vibrant_saturation(target: Target) -> None:
    target.saturation_targets[INDEX_MIN] = MIN_VIBRANT_SATURATION
    target.saturation_targets[INDEX_TARGET] = TARGET_VIBRANT_SATURATION


def _set_muted_saturation(target: Target) -> None:
    target.saturation_targets[INDEX_TARGET] = TARGET_MUTED_SATURATION
    target.saturation_targets[INDEX_MAX] = MAX_MUTED_SATURATION


def light_vibrant() -> Target:
    """A vibrant color which is light in luminance."""
    target = Target(LIGHT_VIBRANT)
    _set_light_lightness(target)
    _set_vibrant_saturation(target)
    return target


def vibrant() -> Target:
    """A vibrant color which is neither light nor dark."""
    target = Target(VIBRANT)
    _set_normal_lightness(target)
    _set_vibrant_saturation(target)
    return target


def dark_vibrant() -> Target:
    """A vibrant color which is dark in luminance."""
    target = Target(DARK_VIBRANT)
    _set_dark_lightness(target)
    _set_vibrant_saturation(target)
    return target


def light_muted() -> Target:
    """A muted color which is light in luminance."""
    target = Target(LIGHT_MUTED)
    _set_light_lightness(target)
    _set_muted_saturation(target)
    return target


def muted() -> Target:
    """A muted color which is neither light nor dark."""
    target = Target(MUTED)
    _set_normal_lightness(target)
    _set_muted_saturation(target)
    return target


def dark_muted() -> Target:
    """A muted color which is dark in luminance."""
    target = Target(DARK_MUTED)
    _set_dark_lightness(target)
    _set_muted_saturation(target)
    return target


PRESET_FACTORIES = {
    LIGHT_VIBRANT: light_vibrant,
    VIBRANT: vibrant,
    DARK_VIBRANT: dark_vibrant,
    LIGHT_MUTED: light_muted,
    MUTED: muted,
    DARK_MUTED: dark_muted,
}


def default_targets() -> List[Target]:
    """Fresh instances of the six presets, in scoring order."""
    return [factory() for factory in PRESET_FACTORIES.values()]


class TargetBuilder:
    """
    Fluent builder for custom targets.

    Example:
        >>> target = (TargetBuilder(vibrant())
        ...           .set_population_weight(0.0)
        ...           .set_exclusive(False)
        ...           .build())
    """

    def __init__(self, base: Optional[Target] = None, name: Optional[str] = None):
        self._target = base.copy(name) if base is not None else Target(name)

    def set_minimum_saturation(self, value: float) -> "TargetBuilder":
        self._target.saturation_targets[INDEX_MIN] = value
        return self

    def set_target_saturation(self, value: float) -> "TargetBuilder":
        self._target.saturation_targets[INDEX_TARGET] = value
        return self

    def set_maximum_saturation(self, value: float) -> "TargetBuilder":
        self._target.saturation_targets[INDEX_MAX] = value
        return self

    def set_minimum_lightness(self, value: float) -> "TargetBuilder":
        self._target.lightness_targets[INDEX_MIN] = value
        return self

    def set_target_lightness(self, value: float) -> "TargetBuilder":
        self._target.lightness_targets[INDEX_TARGET] = value
        return self

    def set_maximum_lightness(self, value: float) -> "TargetBuilder":
        self._target.lightness_targets[INDEX_MAX] = value
        return self

    def set_saturation_weight(self, weight: float) -> "TargetBuilder":
        self._target.weights[INDEX_WEIGHT_SAT] = weight
        return self

    def set_lightness_weight(self, weight: float) -> "TargetBuilder":
        self._target.weights[INDEX_WEIGHT_LUMA] = weight
        return self

    def set_population_weight(self, weight: float) -> "TargetBuilder":
        self._target.weights[INDEX_WEIGHT_POP] = weight
        return self

    def set_exclusive(self, exclusive: bool) -> "TargetBuilder":
        self._target.is_exclusive = exclusive
        return self

    def build(self) -> Target:
        return self._target
