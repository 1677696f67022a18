"""
Test configuration and fixtures for palettekit tests.
"""
import pytest

from palettekit.services.colors import color_utils


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from palettekit.utils.metrics import reset_metrics
    reset_metrics()


@pytest.fixture
def primary_pixels():
    """100 red, 50 green, 30 blue and 1 white pixel."""
    return ([color_utils.RED] * 100
            + [color_utils.GREEN] * 50
            + [color_utils.BLUE] * 30
            + [color_utils.WHITE])


@pytest.fixture
def split_pixels():
    """10x10 image, left half pure red and right half pure blue."""
    row = [color_utils.RED] * 5 + [color_utils.BLUE] * 5
    return row * 10
