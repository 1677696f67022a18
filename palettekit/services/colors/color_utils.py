"""
Color Codec

Packs and unpacks ARGB integers, converts between RGB, HSL and CIE XYZ,
composites translucent colors and computes WCAG contrast ratios.

Colors are plain Python ints laid out as ``0xAARRGGBB``. Python ints never
overflow, so a fully opaque color is simply a non-negative value >= 0xFF000000.
"""

import math
from typing import Tuple

from palettekit.errors import ColorRangeError, InvalidArgumentError

BLACK = 0xFF000000
DKGRAY = 0xFF444444
GRAY = 0xFF888888
LTGRAY = 0xFFCCCCCC
WHITE = 0xFFFFFFFF
RED = 0xFFFF0000
GREEN = 0xFF00FF00
BLUE = 0xFF0000FF
YELLOW = 0xFFFFFF00
CYAN = 0xFF00FFFF
MAGENTA = 0xFFFF00FF
TRANSPARENT = 0

# Number of components per supported color space, alpha included
COLOR_SPACE_COMPONENTS = {"rgb": 4, "gray": 2}

MIN_ALPHA_SEARCH_MAX_ITERATIONS = 10
MIN_ALPHA_SEARCH_PRECISION = 1

HSL = Tuple[float, float, float]


def alpha(color: int) -> int:
    return (color >> 24) & 0xFF


def red(color: int) -> int:
    return (color >> 16) & 0xFF


def green(color: int) -> int:
    return (color >> 8) & 0xFF


def blue(color: int) -> int:
    return color & 0xFF


def argb(a: int, r: int, g: int, b: int) -> int:
    """Pack four 8-bit channels into ``0xAARRGGBB``; extra bits are masked off."""
    return ((a & 0xFF) << 24) | ((r & 0xFF) << 16) | ((g & 0xFF) << 8) | (b & 0xFF)


def rgb(r: int, g: int, b: int) -> int:
    """Pack an opaque color."""
    return argb(0xFF, r, g, b)


def argb_from_floats(a: float, r: float, g: float, b: float) -> int:
    """Pack normalized [0, 1] channels, rounding each to the nearest 8-bit step."""
    return argb(
        int(a * 0xFF + 0.5),
        int(r * 0xFF + 0.5),
        int(g * 0xFF + 0.5),
        int(b * 0xFF + 0.5),
    )


def component(color: int, index: int, color_space: str = "rgb") -> float:
    """
    Return one normalized component of ``color``.

    For ``"rgb"`` the components are red, green, blue, alpha. For ``"gray"``
    they are luma (Rec. 601 weights) and alpha.

    Raises:
        ColorRangeError: If ``index`` is not a component of ``color_space``
    """
    if color_space not in COLOR_SPACE_COMPONENTS:
        raise InvalidArgumentError(f"Unknown color space: {color_space}")
    count = COLOR_SPACE_COMPONENTS[color_space]
    if index < 0 or index >= count:
        raise ColorRangeError(
            f"Component index {index} out of range for {color_space} ({count} components)"
        )

    if color_space == "gray":
        if index == 0:
            luma = 0.299 * red(color) + 0.587 * green(color) + 0.114 * blue(color)
            return luma / 255.0
        return alpha(color) / 255.0

    return (red, green, blue, alpha)[index](color) / 255.0


def _constrain(amount: float, low: float, high: float) -> float:
    return low if amount < low else (high if amount > high else amount)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rgb_to_hsl(r: int, g: int, b: int) -> HSL:
    """
    Convert 8-bit RGB to HSL.

    Returns:
        ``(hue, saturation, lightness)`` with hue in [0, 360) and the others in [0, 1]
    """
    rf = r / 255.0
    gf = g / 255.0
    bf = b / 255.0

    max_c = max(rf, gf, bf)
    min_c = min(rf, gf, bf)
    delta = max_c - min_c

    lightness = (max_c + min_c) / 2

    if max_c == min_c:
        # Monochromatic
        hue = saturation = 0.0
    else:
        if max_c == rf:
            hue = math.fmod((gf - bf) / delta, 6)
        elif max_c == gf:
            hue = ((bf - rf) / delta) + 2
        else:
            hue = ((rf - gf) / delta) + 4
        saturation = delta / (1 - abs(2 * lightness - 1))

    hue = math.fmod(hue * 60, 360)
    if hue < 0:
        hue += 360

    return (
        _constrain(hue, 0.0, 360.0),
        _constrain(saturation, 0.0, 1.0),
        _constrain(lightness, 0.0, 1.0),
    )


def color_to_hsl(color: int) -> HSL:
    return rgb_to_hsl(red(color), green(color), blue(color))


def hsl_to_color(hsl: HSL) -> int:
    """Convert an HSL triple to an opaque packed color."""
    h, s, l = hsl  # noqa: E741

    c = (1 - abs(2 * l - 1)) * s
    m = l - 0.5 * c
    x = c * (1 - abs((h / 60 % 2) - 1))

    segment = int(h // 60)

    if segment == 0:
        rf, gf, bf = c + m, x + m, m
    elif segment == 1:
        rf, gf, bf = x + m, c + m, m
    elif segment == 2:
        rf, gf, bf = m, c + m, x + m
    elif segment == 3:
        rf, gf, bf = m, x + m, c + m
    elif segment == 4:
        rf, gf, bf = x + m, m, c + m
    elif segment in (5, 6):
        rf, gf, bf = c + m, m, x + m
    else:
        rf = gf = bf = 0.0

    r = min(max(round_half_up(255 * rf), 0), 255)
    g = min(max(round_half_up(255 * gf), 0), 255)
    b = min(max(round_half_up(255 * bf), 0), 255)
    return rgb(r, g, b)


def _linearize(channel: int) -> float:
    c = channel / 255.0
    return c / 12.92 if c < 0.04045 else ((c + 0.055) / 1.055) ** 2.4


def rgb_to_xyz(r: int, g: int, b: int) -> Tuple[float, float, float]:
    """Convert 8-bit sRGB to CIE XYZ (D65, 2° observer) on the 0-100 scale."""
    sr = _linearize(r)
    sg = _linearize(g)
    sb = _linearize(b)
    return (
        100 * (sr * 0.4124 + sg * 0.3576 + sb * 0.1805),
        100 * (sr * 0.2126 + sg * 0.7152 + sb * 0.0722),
        100 * (sr * 0.0193 + sg * 0.1192 + sb * 0.9505),
    )


def color_to_xyz(color: int) -> Tuple[float, float, float]:
    return rgb_to_xyz(red(color), green(color), blue(color))


def calculate_luminance(color: int) -> float:
    """Relative luminance of ``color`` in [0, 1] (the XYZ Y component / 100)."""
    return color_to_xyz(color)[1] / 100


def _composite_alpha(fg_alpha: int, bg_alpha: int) -> int:
    return 0xFF - (((0xFF - bg_alpha) * (0xFF - fg_alpha)) // 0xFF)


def _composite_component(fg_c: int, fg_a: int, bg_c: int, bg_a: int, a: int) -> int:
    if a == 0:
        return 0
    return ((0xFF * fg_c * fg_a) + (bg_c * bg_a * (0xFF - fg_a))) // (a * 0xFF)


def composite_colors(foreground: int, background: int) -> int:
    """Composite ``foreground`` over ``background`` (both may be translucent)."""
    bg_alpha = alpha(background)
    fg_alpha = alpha(foreground)
    a = _composite_alpha(fg_alpha, bg_alpha)

    r = _composite_component(red(foreground), fg_alpha, red(background), bg_alpha, a)
    g = _composite_component(green(foreground), fg_alpha, green(background), bg_alpha, a)
    b = _composite_component(blue(foreground), fg_alpha, blue(background), bg_alpha, a)
    return argb(a, r, g, b)


def calculate_contrast(foreground: int, background: int) -> float:
    """
    WCAG contrast ratio between two colors.

    A translucent foreground is composited over the background first.

    Raises:
        InvalidArgumentError: If ``background`` is not fully opaque
    """
    if alpha(background) != 0xFF:
        raise InvalidArgumentError(f"background can not be translucent: #{background:08X}")
    if alpha(foreground) < 0xFF:
        foreground = composite_colors(foreground, background)

    luminance1 = calculate_luminance(foreground) + 0.05
    luminance2 = calculate_luminance(background) + 0.05
    return max(luminance1, luminance2) / min(luminance1, luminance2)


def set_alpha_component(color: int, alpha_value: int) -> int:
    """
    Replace the alpha byte of ``color``.

    Raises:
        InvalidArgumentError: If ``alpha_value`` is outside [0, 255]
    """
    if alpha_value < 0 or alpha_value > 0xFF:
        raise InvalidArgumentError(f"alpha must be between 0 and 255, got {alpha_value}")
    return (color & 0x00FFFFFF) | (alpha_value << 24)


def calculate_minimum_alpha(foreground: int, background: int, min_contrast_ratio: float) -> int:
    """
    Find the minimum alpha for ``foreground`` that still reaches ``min_contrast_ratio``
    against ``background``.

    Returns:
        Alpha in [0, 255], or -1 if even a fully opaque foreground falls short

    Raises:
        InvalidArgumentError: If ``background`` is not fully opaque
    """
    if alpha(background) != 0xFF:
        raise InvalidArgumentError(f"background can not be translucent: #{background:08X}")

    test_foreground = set_alpha_component(foreground, 0xFF)
    if calculate_contrast(test_foreground, background) < min_contrast_ratio:
        return -1

    iterations = 0
    min_alpha = 0
    max_alpha = 0xFF

    while (iterations <= MIN_ALPHA_SEARCH_MAX_ITERATIONS
           and (max_alpha - min_alpha) > MIN_ALPHA_SEARCH_PRECISION):
        test_alpha = (min_alpha + max_alpha) // 2
        test_foreground = set_alpha_component(foreground, test_alpha)
        if calculate_contrast(test_foreground, background) < min_contrast_ratio:
            min_alpha = test_alpha
        else:
            max_alpha = test_alpha
        iterations += 1

    # max_alpha is the bound known to pass
    return max_alpha


def to_hex(color: int, include_alpha: bool = False) -> str:
    """Format ``color`` as ``#RRGGBB`` or ``#AARRGGBB``."""
    if include_alpha:
        return f"#{color & 0xFFFFFFFF:08X}"
    return f"#{color & 0xFFFFFF:06X}"


def from_hex(hex_color: str) -> int:
    """Parse ``#RRGGBB`` (opaque) or ``#AARRGGBB`` into a packed color."""
    hex_clean = hex_color.lstrip('#')
    if len(hex_clean) == 6:
        return 0xFF000000 | int(hex_clean, 16)
    if len(hex_clean) == 8:
        return int(hex_clean, 16)
    raise InvalidArgumentError(f"Invalid hex color: {hex_color}")
