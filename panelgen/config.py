"""Central configuration for all technical settings.

Default model, page size, fallback dimensions and conditioning limits are
defined here. The default model and page size can be overridden through
``PANELGEN_DEFAULT_MODEL`` and ``PANELGEN_PAGE_SIZE`` (the CLI also loads a
``.env`` file).
"""

import os

# =============================================================================
# Model Settings
# =============================================================================
DEFAULT_MODEL = "waiIllustriousSDXL_v160.safetensors"

# =============================================================================
# Preset Defaults
# =============================================================================
DEFAULT_QUALITY_PRESET = "standard"
DEFAULT_SIZE_PRESET = "portrait_3x4"  # Used when nothing else sets dimensions
STRATEGY_PRESET_TOLERANCE = 0.1
STRATEGY_FALLBACK_TOLERANCE = 0.5

# =============================================================================
# Layout Settings
# =============================================================================
DEFAULT_PAGE_SIZE = "comic_standard"
FALLBACK_WIDTH = 768
FALLBACK_HEIGHT = 1024
GRID_ALIGNMENT = 64
MAX_ASPECT_ERROR = 0.15

# =============================================================================
# Conditioning Limits
# =============================================================================
MIN_CONDITIONS = 1
MAX_CONDITIONS = 5
INFLUENCE_HIGH = 1.5
INFLUENCE_VERY_HIGH = 2.0
MAX_CONDITION_STRENGTH = 2.0
MIN_ADAPTER_STRENGTH = 0.0
MAX_ADAPTER_STRENGTH = 2.0


def default_model() -> str:
    return os.getenv("PANELGEN_DEFAULT_MODEL") or DEFAULT_MODEL


def default_page_size() -> str:
    return os.getenv("PANELGEN_PAGE_SIZE") or DEFAULT_PAGE_SIZE
