"""Multi-condition composition."""

from .composer import (
    BACKEND_CONDITION_TYPES,
    ConditionComposer,
    build_prompt,
    calculate_total_influence,
    get_condition_composer,
    map_condition_type,
    recommended_strength,
    reset_condition_composer,
)
from .masks import MASK_PRESETS, MaskPreset, MaskRegion, list_mask_presets, mask_condition
from .presets import (
    COMPOSITION_PRESETS,
    CompositionPreset,
    PresetCondition,
    get_composition_preset,
    list_composition_presets,
    presets_for_use_case,
)
from .types import BundleCondition, Condition, ConditionBundle, Influence, RecommendedStrength

__all__ = [
    "BACKEND_CONDITION_TYPES",
    "ConditionComposer",
    "build_prompt",
    "calculate_total_influence",
    "get_condition_composer",
    "map_condition_type",
    "recommended_strength",
    "reset_condition_composer",
    "MASK_PRESETS",
    "MaskPreset",
    "MaskRegion",
    "list_mask_presets",
    "mask_condition",
    "COMPOSITION_PRESETS",
    "CompositionPreset",
    "PresetCondition",
    "get_composition_preset",
    "list_composition_presets",
    "presets_for_use_case",
    "BundleCondition",
    "Condition",
    "ConditionBundle",
    "Influence",
    "RecommendedStrength",
]
