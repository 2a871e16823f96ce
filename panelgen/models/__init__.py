"""Model, adapter and conditioner compatibility catalog."""

from .adapters import (
    ADAPTER_CATALOG,
    AdapterEntry,
    AdapterSelection,
    AppliedAdapter,
    ResolvedAdapterStack,
    StrengthRange,
    build_stack,
    compatible_adapters,
    extract_trigger_words,
    find_adapter_by_name,
    get_adapter,
    list_adapters_by_category,
    list_adapters_by_family,
    recommended_stack,
    resolve_adapter_stack,
    suggest_adapters,
)
from .checkpoints import (
    CHECKPOINT_CATALOG,
    CheckpointEntry,
    checkpoint_family,
    get_checkpoint,
    list_checkpoints_by_family,
    list_recommended_checkpoints,
)
from .conditioners import (
    CONDITIONER_CATALOG,
    UNION_CONTROL_MODES,
    ConditionerEntry,
    find_best_conditioner,
    get_conditioner,
    list_conditioners_by_family,
    list_conditioners_by_type,
    union_control_mode,
)
from .families import FAMILY_COMPATIBILITY, SDXL_COMPATIBLE_FAMILIES, compatible_families
from .resolver import (
    ConditionerResolution,
    FullCompatibility,
    ModelResolver,
    ValidationResult,
    get_model_resolver,
    reset_model_resolver,
)

__all__ = [
    "ADAPTER_CATALOG",
    "AdapterEntry",
    "AdapterSelection",
    "AppliedAdapter",
    "ResolvedAdapterStack",
    "StrengthRange",
    "build_stack",
    "compatible_adapters",
    "extract_trigger_words",
    "find_adapter_by_name",
    "get_adapter",
    "list_adapters_by_category",
    "list_adapters_by_family",
    "recommended_stack",
    "resolve_adapter_stack",
    "suggest_adapters",
    "CHECKPOINT_CATALOG",
    "CheckpointEntry",
    "checkpoint_family",
    "get_checkpoint",
    "list_checkpoints_by_family",
    "list_recommended_checkpoints",
    "CONDITIONER_CATALOG",
    "UNION_CONTROL_MODES",
    "ConditionerEntry",
    "find_best_conditioner",
    "get_conditioner",
    "list_conditioners_by_family",
    "list_conditioners_by_type",
    "union_control_mode",
    "FAMILY_COMPATIBILITY",
    "SDXL_COMPATIBLE_FAMILIES",
    "compatible_families",
    "ConditionerResolution",
    "FullCompatibility",
    "ModelResolver",
    "ValidationResult",
    "get_model_resolver",
    "reset_model_resolver",
]
