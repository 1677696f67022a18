"""
palettekit Schemas
Pydantic models for serializing generated palettes.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from palettekit.services.colors import color_utils
from palettekit.services.colors.palette import Palette, Swatch


class SwatchModel(BaseModel):
    """A single swatch with its derived text colors."""
    hex: str = Field(
        ...,
        pattern=r"^#[0-9A-Fa-f]{6}$",
        description="Opaque swatch color in format #RRGGBB"
    )
    rgb: List[int] = Field(
        ...,
        min_length=3,
        max_length=3,
        description="Red, green and blue channels (0-255)"
    )
    population: int = Field(..., ge=0, description="Number of pixels this swatch represents")
    hsl: List[float] = Field(
        ...,
        min_length=3,
        max_length=3,
        description="Hue [0, 360), saturation and lightness [0, 1]"
    )
    title_text_hex: str = Field(
        ...,
        pattern=r"^#[0-9A-Fa-f]{8}$",
        description="Title text color in format #AARRGGBB"
    )
    body_text_hex: str = Field(
        ...,
        pattern=r"^#[0-9A-Fa-f]{8}$",
        description="Body text color in format #AARRGGBB"
    )


class PaletteModel(BaseModel):
    """Generated palette: all swatches plus the selection per target."""
    swatches: List[SwatchModel] = Field(..., description="Swatches in quantizer order")
    dominant: Optional[SwatchModel] = Field(None, description="Most populous swatch")
    selected: Dict[str, Optional[SwatchModel]] = Field(
        default_factory=dict,
        description="Selected swatch per named target (null when nothing qualified)"
    )
    targets: List[str] = Field(default_factory=list, description="Target names in scoring order")


def swatch_to_model(swatch: Swatch) -> SwatchModel:
    return SwatchModel(
        hex=swatch.hex,
        rgb=[color_utils.red(swatch.rgb), color_utils.green(swatch.rgb), color_utils.blue(swatch.rgb)],
        population=swatch.population,
        hsl=list(swatch.hsl),
        title_text_hex=color_utils.to_hex(swatch.title_text_color, include_alpha=True),
        body_text_hex=color_utils.to_hex(swatch.body_text_color, include_alpha=True),
    )


def palette_to_model(palette: Palette) -> PaletteModel:
    """
    Convert a generated palette to its serializable form.

    Unnamed targets are keyed as ``target_<index>`` by their position in the
    palette's target list.
    """
    names = [target.name or f"target_{index}" for index, target in enumerate(palette.targets)]
    selected = {}
    for name, target in zip(names, palette.targets):
        swatch = palette.get_swatch_for_target(target)
        selected[name] = swatch_to_model(swatch) if swatch is not None else None

    return PaletteModel(
        swatches=[swatch_to_model(swatch) for swatch in palette.swatches],
        dominant=swatch_to_model(palette.dominant_swatch) if palette.dominant_swatch else None,
        selected=selected,
        targets=names,
    )
