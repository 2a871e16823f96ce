"""Interchangeable sizing strategies."""

from .base import (
    OptimalSize,
    SizingStrategy,
    SlotDimensions,
    align_to_grid,
    fallback_dimensions,
    round_to_grid,
    validate_dimensions,
)
from .context_free import ContextFreeStrategy
from .slot_aware import SlotAwareStrategy, TemplateSizeRecommendation

__all__ = [
    "OptimalSize",
    "SizingStrategy",
    "SlotDimensions",
    "align_to_grid",
    "fallback_dimensions",
    "round_to_grid",
    "validate_dimensions",
    "ContextFreeStrategy",
    "SlotAwareStrategy",
    "TemplateSizeRecommendation",
]
