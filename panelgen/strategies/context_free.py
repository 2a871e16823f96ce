"""Context-free sizing: one best guess per aspect ratio, no page layout."""

import logging

from ..enums import ModelFamily, TargetQuality
from .base import SizingStrategy, SlotDimensions, fallback_dimensions

logger = logging.getLogger(__name__)


class ContextFreeStrategy(SizingStrategy):
    """Sizes images from aspect ratio alone.

    For a slot it only looks up the slot's nominal aspect ratio on the
    default page size; the requested page size is ignored.
    """

    id = "context-free"
    name = "Context-Free Strategy"
    uses_slot_context = False

    def dimensions_for_slot(
        self,
        template_id: str,
        slot_id: str,
        family: ModelFamily | str = ModelFamily.SDXL,
        page_size: str | None = None,
        target_quality: TargetQuality | str | None = None,
        aspect_ratio: float | None = None,
    ) -> SlotDimensions:
        if aspect_ratio is None:
            geometry = self.layout.slot_geometry(template_id, slot_id)
            if geometry is None:
                logger.warning(f"Slot '{slot_id}' not found in template '{template_id}', using default dimensions")
                return self._slot_result(fallback_dimensions(family))
            aspect_ratio = geometry.aspect_ratio

        return self._slot_result(self.calculate_optimal_size(aspect_ratio, family, target_quality))
