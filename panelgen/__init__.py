"""Generation configuration resolution for comic panel image requests.

Resolves image dimensions, sampling settings, model choice, adapters and
conditioning inputs from presets, page layout and explicit overrides.
"""

from .conditioning import Condition, ConditionBundle, ConditionComposer, get_condition_composer
from .engine import (
    ConfigEngine,
    GenerationOverrides,
    ResolutionOptions,
    ResolvedConfig,
    SlotContext,
    create_config_engine,
    get_config_engine,
    reset_config_engine,
)
from .enums import (
    AdapterCategory,
    ConditionType,
    ConfigSource,
    ModelFamily,
    SizeCategory,
    StackPosition,
    TargetQuality,
)
from .models import ModelResolver, ResolvedAdapterStack, get_model_resolver
from .presets import (
    detect_model_family,
    find_closest_preset,
    get_presets_by_category,
    get_size_preset,
    list_model_families,
    list_quality_presets,
    list_size_presets,
)
from .strategies import ContextFreeStrategy, SizingStrategy, SlotAwareStrategy

__version__ = "0.1.0"

__all__ = [
    "Condition",
    "ConditionBundle",
    "ConditionComposer",
    "get_condition_composer",
    "ConfigEngine",
    "GenerationOverrides",
    "ResolutionOptions",
    "ResolvedConfig",
    "SlotContext",
    "create_config_engine",
    "get_config_engine",
    "reset_config_engine",
    "AdapterCategory",
    "ConditionType",
    "ConfigSource",
    "ModelFamily",
    "SizeCategory",
    "StackPosition",
    "TargetQuality",
    "ModelResolver",
    "ResolvedAdapterStack",
    "get_model_resolver",
    "detect_model_family",
    "find_closest_preset",
    "get_presets_by_category",
    "get_size_preset",
    "list_model_families",
    "list_quality_presets",
    "list_size_presets",
    "ContextFreeStrategy",
    "SizingStrategy",
    "SlotAwareStrategy",
]
