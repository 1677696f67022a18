"""
palettekit Configuration
Manages environment variables and defaults for palette generation.
"""
import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Configuration class for palettekit."""

    # Logging
    LOG_LEVEL: str = os.environ.get("PALETTEKIT_LOG_LEVEL", "INFO")

    # Quantization defaults
    DEFAULT_MAX_COLORS: int = int(os.environ.get("PALETTEKIT_DEFAULT_MAX_COLORS", "16"))
    DEFAULT_RESIZE_AREA: int = int(os.environ.get("PALETTEKIT_DEFAULT_RESIZE_AREA", str(112 * 112)))

    # WCAG contrast thresholds for swatch text colors
    MIN_CONTRAST_TITLE_TEXT: float = float(os.environ.get("PALETTEKIT_MIN_CONTRAST_TITLE_TEXT", "3.0"))
    MIN_CONTRAST_BODY_TEXT: float = float(os.environ.get("PALETTEKIT_MIN_CONTRAST_BODY_TEXT", "4.5"))

    # Observability
    METRICS_ENABLED: bool = bool(int(os.environ.get("PALETTEKIT_METRICS_ENABLED", "1")))

    # Background generation
    ASYNC_WORKERS: int = int(os.environ.get("PALETTEKIT_ASYNC_WORKERS", "2"))

    @classmethod
    def validate_max_colors(cls, max_colors: int) -> bool:
        """Validate maximum palette size."""
        return 1 <= max_colors <= 256

    @classmethod
    def validate_resize_area(cls, area: int) -> bool:
        """Validate bitmap resize area."""
        return area > 0

    @classmethod
    def validate_contrast_ratio(cls, ratio: float) -> bool:
        """Validate a WCAG contrast ratio."""
        return 1.0 <= ratio <= 21.0


# Global config instance
config = Config()
