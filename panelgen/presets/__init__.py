"""Size, quality and model preset catalogs."""

from .models import (
    MODEL_PRESETS,
    ModelPreset,
    detect_model_family,
    family_dimension_key,
    get_model_preset,
    list_model_families,
    recommended_cfg_range,
    supports_negative_prompt,
)
from .quality import (
    QUALITY_PRESETS,
    QualityPreset,
    estimate_relative_time,
    get_quality_preset,
    get_quality_preset_safe,
    list_quality_presets,
    recommend_quality_preset,
)
from .sizes import (
    SIZE_PRESETS,
    Dimensions,
    SizePreset,
    classify_aspect_ratio,
    find_closest_preset,
    find_presets_for_use_case,
    get_presets_by_category,
    get_size_preset,
    list_size_presets,
)

__all__ = [
    "MODEL_PRESETS",
    "ModelPreset",
    "detect_model_family",
    "family_dimension_key",
    "get_model_preset",
    "list_model_families",
    "recommended_cfg_range",
    "supports_negative_prompt",
    "QUALITY_PRESETS",
    "QualityPreset",
    "estimate_relative_time",
    "get_quality_preset",
    "get_quality_preset_safe",
    "list_quality_presets",
    "recommend_quality_preset",
    "SIZE_PRESETS",
    "Dimensions",
    "SizePreset",
    "classify_aspect_ratio",
    "find_closest_preset",
    "find_presets_for_use_case",
    "get_presets_by_category",
    "get_size_preset",
    "list_size_presets",
]
