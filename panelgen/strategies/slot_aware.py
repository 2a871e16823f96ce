"""Slot-aware sizing: dimensions derived from the slot's place on a page."""

import logging

from pydantic import BaseModel, Field

from .. import config
from ..enums import ModelFamily, TargetQuality
from ..presets import family_dimension_key, find_closest_preset
from .base import OptimalSize, SizingStrategy, SlotDimensions, fallback_dimensions

logger = logging.getLogger(__name__)


class TemplateSizeRecommendation(BaseModel):
    """Slot sizes for a template, grouped by the size they share."""

    by_slot: dict[str, SlotDimensions] = Field(default_factory=dict)
    by_preset: dict[str, list[str]] = Field(default_factory=dict, description="Preset id (or custom_WxH) -> slot ids")

    @property
    def unique_presets(self) -> list[str]:
        return list(self.by_preset)


class SlotAwareStrategy(SizingStrategy):
    """Sizes each slot from its pixel geometry on the chosen page size.

    This is the default strategy: it produces crops that match the panels of
    multi-panel page layouts.
    """

    id = "slot-aware"
    name = "Slot-Aware Strategy"
    uses_slot_context = True

    def dimensions_for_slot(
        self,
        template_id: str,
        slot_id: str,
        family: ModelFamily | str = ModelFamily.SDXL,
        page_size: str | None = None,
        target_quality: TargetQuality | str | None = None,
        aspect_ratio: float | None = None,
    ) -> SlotDimensions:
        if aspect_ratio is not None:
            return self._slot_result(self.calculate_optimal_size(aspect_ratio, family, target_quality))

        geometry = self.layout.slot_geometry(template_id, slot_id, page_size)
        if geometry is None:
            logger.warning(f"Slot '{slot_id}' not found in template '{template_id}', using default dimensions")
            return self._slot_result(fallback_dimensions(family))

        return self._slot_result(self.calculate_optimal_size(geometry.aspect_ratio, family, target_quality))

    def _fit_to_limits(
        self,
        aspect_ratio: float,
        family: ModelFamily | str,
        quality: TargetQuality | None,
        width: int,
        height: int,
    ) -> OptimalSize:
        # Only at the default target, so a preset never undercuts a higher requested quality
        if quality in (None, TargetQuality.MEDIUM):
            preset = find_closest_preset(aspect_ratio, config.STRATEGY_FALLBACK_TOLERANCE)
            if preset is not None:
                dims = preset.dimensions_for(family_dimension_key(family))
                return OptimalSize(width=dims.width, height=dims.height, preset_id=preset.id)
        return super()._fit_to_limits(aspect_ratio, family, quality, width, height)

    def calculate_all_slot_sizes(
        self,
        template_id: str,
        page_size: str | None = None,
        family: ModelFamily | str = ModelFamily.SDXL,
    ) -> dict[str, SlotDimensions]:
        """Dimensions for every slot of a template, in slot order."""
        return {
            slot_id: self.dimensions_for_slot(template_id, slot_id, family=family, page_size=page_size)
            for slot_id in self.layout.template_slot_ids(template_id)
        }

    def recommend_sizes_for_template(
        self,
        template_id: str,
        page_size: str | None = None,
        family: ModelFamily | str = ModelFamily.SDXL,
    ) -> TemplateSizeRecommendation:
        by_slot = self.calculate_all_slot_sizes(template_id, page_size, family)
        by_preset: dict[str, list[str]] = {}
        for slot_id, size in by_slot.items():
            key = size.preset_id or f"custom_{size.width}x{size.height}"
            by_preset.setdefault(key, []).append(slot_id)
        return TemplateSizeRecommendation(by_slot=by_slot, by_preset=by_preset)
