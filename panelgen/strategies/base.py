"""Sizing strategy contract and the dimension math shared by both strategies."""

import logging
import math
from abc import ABC, abstractmethod
from itertools import product

from pydantic import BaseModel, Field

from .. import config
from ..enums import DimensionKey, ModelFamily, TargetQuality
from ..layout import LayoutProvider, TemplateLayoutProvider
from ..presets import family_dimension_key, find_closest_preset, get_size_preset

logger = logging.getLogger(__name__)

# Pixel budget at medium target quality
BASE_PIXELS = {
    DimensionKey.SDXL: 1024 * 1024,
    DimensionKey.SD15: 512 * 512,
    DimensionKey.FLUX: 1024 * 1024,
}

QUALITY_MULTIPLIERS = {
    TargetQuality.LOW: 0.5,
    TargetQuality.MEDIUM: 1.0,
    TargetQuality.HIGH: 1.5,
}

# (min side, max side, max pixels)
DIMENSION_LIMITS = {
    DimensionKey.SDXL: (512, 2048, 4194304),
    DimensionKey.SD15: (256, 1024, 786432),
    DimensionKey.FLUX: (512, 2048, 4194304),
}


class OptimalSize(BaseModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    preset_id: str | None = Field(default=None, description="Size preset the dimensions came from")


class SlotDimensions(BaseModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    aspect_ratio: float
    preset_id: str | None = None


def round_to_grid(value: float, grid: int = config.GRID_ALIGNMENT) -> int:
    """Round to the nearest multiple of ``grid`` (never below one grid step)."""
    return max(grid, round(value / grid) * grid)


def align_to_grid(
    width: float, height: float, aspect_ratio: float, grid: int = config.GRID_ALIGNMENT
) -> tuple[int, int]:
    """Snap both sides to ``grid`` multiples, staying within the aspect tolerance.

    Tries the floor and ceiling multiple for each side and keeps the closest
    pair whose aspect error is under ``MAX_ASPECT_ERROR``. If no pair meets
    the tolerance, the pair with the smallest aspect error is used.
    """
    def bounds(value: float) -> set[int]:
        low = max(grid, math.floor(value / grid) * grid)
        return {low, max(grid, math.ceil(value / grid) * grid)}

    candidates = list(product(sorted(bounds(width)), sorted(bounds(height))))

    def aspect_error(pair: tuple[int, int]) -> float:
        return abs(pair[0] / pair[1] - aspect_ratio) / aspect_ratio

    valid = [pair for pair in candidates if aspect_error(pair) < config.MAX_ASPECT_ERROR]
    if valid:
        return min(valid, key=lambda pair: (abs(pair[0] - width) + abs(pair[1] - height), aspect_error(pair)))
    return min(candidates, key=aspect_error)


def dimensions_for_pixel_count(aspect_ratio: float, target_pixels: float) -> tuple[float, float]:
    height = math.sqrt(target_pixels / aspect_ratio)
    return height * aspect_ratio, height


def target_pixel_count(family: ModelFamily | str, target_quality: TargetQuality | str | None = None) -> float:
    quality = TargetQuality(target_quality) if target_quality is not None else TargetQuality.MEDIUM
    return BASE_PIXELS[family_dimension_key(family)] * QUALITY_MULTIPLIERS[quality]


def validate_dimensions(width: int, height: int, family: ModelFamily | str) -> str | None:
    """Return the reason the dimensions are unusable for the family, or None."""
    min_side, max_side, max_pixels = DIMENSION_LIMITS[family_dimension_key(family)]
    family = ModelFamily(family).value
    if width < min_side or height < min_side:
        return f"Dimensions too small for {family} (min: {min_side}px)"
    if width > max_side or height > max_side:
        return f"Dimensions too large for {family} (max: {max_side}px)"
    if width * height > max_pixels:
        return f"Total pixels exceed maximum for {family}"
    return None


def fallback_dimensions(family: ModelFamily | str) -> OptimalSize:
    """Portrait 3:4 dimensions for the family, used when a slot cannot be resolved."""
    preset = get_size_preset(config.DEFAULT_SIZE_PRESET)
    if preset is None:
        return OptimalSize(width=config.FALLBACK_WIDTH, height=config.FALLBACK_HEIGHT)
    dims = preset.dimensions_for(family_dimension_key(family))
    return OptimalSize(width=dims.width, height=dims.height, preset_id=preset.id)


class SizingStrategy(ABC):
    """Maps an aspect ratio or a layout slot to pixel dimensions.

    ``uses_slot_context`` tells the configuration engine whether slot
    dimensions from this strategy should override a size preset.
    """

    id: str = ""
    name: str = ""
    uses_slot_context: bool = False

    def __init__(self, layout: LayoutProvider | None = None):
        self.layout = layout if layout is not None else TemplateLayoutProvider()

    def calculate_optimal_size(
        self,
        aspect_ratio: float,
        family: ModelFamily | str,
        target_quality: TargetQuality | str | None = None,
    ) -> OptimalSize:
        """Pick dimensions for an aspect ratio.

        At the default (medium) target a size preset within 10% is preferred.
        Otherwise dimensions are computed from the family pixel budget, so
        area grows with the requested target quality.
        """
        key = family_dimension_key(family)
        quality = TargetQuality(target_quality) if target_quality is not None else None

        if quality in (None, TargetQuality.MEDIUM):
            preset = find_closest_preset(aspect_ratio, config.STRATEGY_PRESET_TOLERANCE)
            if preset is not None:
                dims = preset.dimensions_for(key)
                return OptimalSize(width=dims.width, height=dims.height, preset_id=preset.id)

        width, height = self._computed_dimensions(aspect_ratio, family, quality)
        problem = validate_dimensions(width, height, family)
        if problem is not None:
            logger.debug(f"Computed {width}x{height} rejected: {problem}")
            return self._fit_to_limits(aspect_ratio, family, quality, width, height)
        return OptimalSize(width=width, height=height)

    @abstractmethod
    def dimensions_for_slot(
        self,
        template_id: str,
        slot_id: str,
        family: ModelFamily | str = ModelFamily.SDXL,
        page_size: str | None = None,
        target_quality: TargetQuality | str | None = None,
        aspect_ratio: float | None = None,
    ) -> SlotDimensions:
        """Dimensions for a layout slot."""

    def _computed_dimensions(
        self, aspect_ratio: float, family: ModelFamily | str, quality: TargetQuality | None
    ) -> tuple[int, int]:
        width, height = dimensions_for_pixel_count(aspect_ratio, target_pixel_count(family, quality))
        return align_to_grid(width, height, aspect_ratio)

    def _fit_to_limits(
        self,
        aspect_ratio: float,
        family: ModelFamily | str,
        quality: TargetQuality | None,
        width: int,
        height: int,
    ) -> OptimalSize:
        """Bring computed dimensions inside the family limits.

        A short side below the family minimum is raised to it, keeping the
        aspect ratio. Oversized results are then scaled down.
        """
        min_side, max_side, max_pixels = DIMENSION_LIMITS[family_dimension_key(family)]
        grid = config.GRID_ALIGNMENT
        if width < min_side or height < min_side:
            short = math.ceil(min_side / grid) * grid
            if aspect_ratio >= 1.0:
                width, height = round_to_grid(short * aspect_ratio), short
            else:
                width, height = short, round_to_grid(short / aspect_ratio)
        scale = min(1.0, max_side / width, max_side / height, math.sqrt(max_pixels / (width * height)))
        if scale < 1.0:
            width = max(grid, math.floor(width * scale / grid) * grid)
            height = max(grid, math.floor(height * scale / grid) * grid)
        return OptimalSize(width=width, height=height)

    def _slot_result(self, size: OptimalSize) -> SlotDimensions:
        return SlotDimensions(
            width=size.width,
            height=size.height,
            aspect_ratio=size.width / size.height,
            preset_id=size.preset_id,
        )
