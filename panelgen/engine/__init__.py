"""Configuration engine."""

from .engine import (
    ConfigEngine,
    DefaultEngineHolder,
    create_config_engine,
    get_config_engine,
    reset_config_engine,
)
from .types import (
    TRACKED_FIELDS,
    GenerationOverrides,
    ResolutionOptions,
    ResolvedConfig,
    SlotContext,
)

__all__ = [
    "ConfigEngine",
    "DefaultEngineHolder",
    "create_config_engine",
    "get_config_engine",
    "reset_config_engine",
    "TRACKED_FIELDS",
    "GenerationOverrides",
    "ResolutionOptions",
    "ResolvedConfig",
    "SlotContext",
]
