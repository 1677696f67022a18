"""
Palette Builder

Collects the generation settings (color count, resize policy, region of
interest, filters and targets) for one pixel source and runs the pipeline:
scale down, crop to the region, quantize, score every target.
"""

import asyncio
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

from PIL import Image

from palettekit.config import config
from palettekit.errors import InvalidArgumentError
from palettekit.services import imaging
from palettekit.services.imaging import Region
from palettekit.utils.ids import generate_generation_id
from palettekit.utils.logging import get_logger
from palettekit.utils.metrics import get_metrics, performance_monitor

from .filters import DefaultFilter, PaletteFilter
from .palette import Palette, Swatch
from .quantizer import ColorCutQuantizer
from .target import Target, default_targets

log = get_logger("builder")

_executor: Optional[ThreadPoolExecutor] = None


def _get_executor() -> ThreadPoolExecutor:
    """Shared pool for background generation, created on first use."""
    global _executor
    if _executor is None:
        _executor = ThreadPoolExecutor(max_workers=max(1, config.ASYNC_WORKERS),
                                       thread_name_prefix="palettekit")
    return _executor


class PaletteBuilder:
    """
    Fluent configuration for generating a :class:`Palette`.

    Create one with :meth:`from_image`, :meth:`from_pixels` or
    :meth:`from_swatches`. Image and pixel sources start with the default
    filter and the six preset targets; a swatch source starts with neither.

    Example:
        >>> palette = (PaletteBuilder.from_image(image)
        ...            .maximum_color_count(24)
        ...            .set_region(0, 0, 64, 64)
        ...            .generate())
    """

    def __init__(self, image: Optional[Image.Image] = None,
                 swatches: Optional[Sequence[Swatch]] = None):
        self._image = image
        self._swatches: Optional[List[Swatch]] = list(swatches) if swatches is not None else None
        self._max_colors = config.DEFAULT_MAX_COLORS
        self._resize_area = config.DEFAULT_RESIZE_AREA
        self._resize_max_dimension = -1
        self._region: Optional[Region] = None
        self._filters: List[PaletteFilter] = []
        self._targets: List[Target] = []

        if image is not None:
            self._filters.append(DefaultFilter())
            self._targets.extend(default_targets())

    @classmethod
    def from_image(cls, image: Image.Image) -> "PaletteBuilder":
        return cls(image=image)

    @classmethod
    def from_pixels(cls, pixels, width: int, height: int) -> "PaletteBuilder":
        """
        Build from a row-major buffer of packed ARGB ints.

        Raises:
            InvalidArgumentError: If the buffer does not match ``width * height``
        """
        return cls(image=imaging.pixels_to_image(pixels, width, height))

    @classmethod
    def from_swatches(cls, swatches: Sequence[Swatch]) -> "PaletteBuilder":
        """
        Build from precomputed swatches; quantization is skipped.

        Raises:
            InvalidArgumentError: If ``swatches`` is empty
        """
        if not swatches:
            raise InvalidArgumentError("List of Swatches is not valid")
        return cls(swatches=swatches)

    def maximum_color_count(self, colors: int) -> "PaletteBuilder":
        """Upper bound on the number of swatches the quantizer produces."""
        if not config.validate_max_colors(colors):
            log.warning(f"Unusual maximum color count {colors}", {"max_colors": colors})
        self._max_colors = colors
        return self

    def resize_bitmap_area(self, area: int) -> "PaletteBuilder":
        """Downscale images larger than ``area`` pixels; ``area <= 0`` disables scaling."""
        if not config.validate_resize_area(area):
            log.debug("Bitmap resizing disabled", {"resize_area": area})
        self._resize_area = area
        self._resize_max_dimension = -1
        return self

    def resize_bitmap_size(self, max_dimension: int) -> "PaletteBuilder":
        """Downscale images whose longest edge exceeds ``max_dimension``."""
        self._resize_max_dimension = max_dimension
        self._resize_area = -1
        return self

    def clear_filters(self) -> "PaletteBuilder":
        self._filters.clear()
        return self

    def add_filter(self, palette_filter: PaletteFilter) -> "PaletteBuilder":
        if palette_filter is not None:
            self._filters.append(palette_filter)
        return self

    def set_region(self, left: int, top: int, right: int, bottom: int) -> "PaletteBuilder":
        """
        Only use pixels inside the given rectangle of the source image.

        Raises:
            InvalidArgumentError: If there is no image source or the rectangle
                does not overlap the image
        """
        if self._image is None:
            raise InvalidArgumentError("A region can only be set on an image source")

        bounds = Region(0, 0, self._image.width, self._image.height)
        region = Region(left, top, right, bottom).intersect(bounds)
        if region is None:
            raise InvalidArgumentError(
                f"The given region ({left}, {top}, {right}, {bottom}) must intersect "
                f"with the image's dimensions {self._image.width}x{self._image.height}"
            )
        self._region = region
        return self

    def clear_region(self) -> "PaletteBuilder":
        self._region = None
        return self

    def add_target(self, target: Target) -> "PaletteBuilder":
        if not any(existing is target for existing in self._targets):
            self._targets.append(target)
        return self

    def clear_targets(self) -> "PaletteBuilder":
        self._targets.clear()
        return self

    def generate(self) -> Palette:
        """Run the whole pipeline synchronously and return the generated palette."""
        generation_id = generate_generation_id()
        metrics = get_metrics()
        source = "swatches" if self._swatches is not None else "image"

        log.info("Palette generation started", {
            "generation_id": generation_id,
            "source": source,
            "max_colors": self._max_colors,
            "targets": len(self._targets),
        })

        try:
            with performance_monitor("generate", generation_id=generation_id):
                if self._swatches is not None:
                    swatches = list(self._swatches)
                else:
                    swatches = self._quantize(generation_id)

                palette = Palette(swatches, self._targets)
                with performance_monitor("score", generation_id=generation_id):
                    palette.generate()
        except Exception as e:
            log.error(f"Palette generation failed: {e}", {
                "generation_id": generation_id,
                "error_type": type(e).__name__,
            })
            metrics.increment_failure(type(e).__name__)
            raise

        metrics.increment_generated()
        metrics.increment("swatches_emitted_total", len(swatches))
        log.info("Palette generation completed", {
            "generation_id": generation_id,
            "swatches": len(swatches),
            "dominant": palette.dominant_swatch.hex if palette.dominant_swatch else None,
        })
        return palette

    def generate_async(self, listener: Optional[Callable[[Palette], None]] = None) -> "Future[Palette]":
        """
        Generate on the shared worker pool.

        ``listener`` is called with the palette once generation succeeds; a
        failure is left on the returned future.
        """
        future = _get_executor().submit(self.generate)
        if listener is not None:
            def _notify(done: "Future[Palette]"):
                if done.exception() is None:
                    listener(done.result())
            future.add_done_callback(_notify)
        return future

    async def agenerate(self) -> Palette:
        return await asyncio.to_thread(self.generate)

    def _quantize(self, generation_id: str) -> List[Swatch]:
        pixels = self._extract_pixels()
        with performance_monitor("quantize", generation_id=generation_id, pixels=int(pixels.size)):
            quantizer = ColorCutQuantizer(pixels, self._max_colors, self._filters)
        get_metrics().increment("quantizer_boxes_split_total", quantizer.boxes_split)
        return quantizer.get_quantized_colors()

    def _extract_pixels(self):
        image = self._image
        scaled = imaging.scale_image_down(image, self._resize_area, self._resize_max_dimension)

        region = self._region
        if region is not None and scaled is not image:
            ratio = imaging.scale_ratio(image.width, image.height,
                                        self._resize_area, self._resize_max_dimension)
            region = region.scaled(ratio, scaled.width, scaled.height)

        if scaled is not image:
            log.debug(f"Scaled image from {image.width}x{image.height} to {scaled.width}x{scaled.height}")

        return imaging.image_to_pixels(imaging.crop_region(scaled, region))
