"""Configuration engine: merges presets, layout and overrides.

Each tracked field is taken whole from exactly one layer, lowest to highest
precedence:

1. model defaults (standard quality values, configured model, 3:4 portrait size)
2. size preset
3. quality preset
4. slot context, only when the active strategy uses it
5. explicit overrides

Unknown preset ids fall back to the layer below with a logged warning.
Malformed overrides are rejected by ``GenerationOverrides`` validation.
"""

import logging
from typing import Any

from .. import config
from ..enums import ConfigSource, ModelFamily, TargetQuality
from ..layout import LayoutProvider, TemplateLayoutProvider
from ..models import ResolvedAdapterStack, checkpoint_family, resolve_adapter_stack
from ..presets import (
    QualityPreset,
    SizePreset,
    family_dimension_key,
    get_quality_preset,
    get_quality_preset_safe,
    get_size_preset,
    list_quality_presets,
    list_size_presets,
)
from ..strategies import (
    ContextFreeStrategy,
    OptimalSize,
    SizingStrategy,
    SlotAwareStrategy,
    SlotDimensions,
    fallback_dimensions,
)
from .types import GenerationOverrides, ResolutionOptions, ResolvedConfig, SlotContext

logger = logging.getLogger(__name__)


class ConfigEngine:
    """Resolves generation parameters using a sizing strategy.

    The strategy is the engine's only mutable state. Callers that need a
    stable strategy across several calls should hold their own engine, or
    pass ``strategy`` to ``resolve`` for a single call.
    """

    def __init__(self, strategy: SizingStrategy | None = None, layout: LayoutProvider | None = None):
        self.layout = layout if layout is not None else TemplateLayoutProvider()
        self._slot_aware = SlotAwareStrategy(self.layout)
        self._strategy = strategy if strategy is not None else self._slot_aware

    # =========================================================================
    # Strategy selection
    # =========================================================================

    @property
    def strategy(self) -> SizingStrategy:
        return self._strategy

    @property
    def strategy_id(self) -> str:
        return self._strategy.id

    def set_strategy(self, strategy: SizingStrategy) -> None:
        self._strategy = strategy

    def use_default_strategy(self) -> None:
        """Switch to the context-free strategy."""
        self._strategy = ContextFreeStrategy(self.layout)

    def use_slot_aware_strategy(self) -> None:
        self._strategy = self._slot_aware

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve(
        self,
        options: ResolutionOptions | dict[str, Any] | None = None,
        strategy: SizingStrategy | None = None,
    ) -> ResolvedConfig:
        """Resolve one request into a ResolvedConfig.

        Args:
            options: Presets, slot and overrides for this request.
            strategy: Sizing strategy for this call only; the engine's own
                strategy is left unchanged.
        """
        if options is None:
            options = ResolutionOptions()
        elif isinstance(options, dict):
            options = ResolutionOptions.model_validate(options)
        strategy = strategy or self._strategy
        overrides = options.overrides or GenerationOverrides()

        values: dict[str, Any] = {}
        sources: dict[str, ConfigSource] = {}

        def set_field(name: str, value: Any, source: ConfigSource) -> None:
            values[name] = value
            sources[name] = source

        # 1. Model defaults
        model = overrides.model or config.default_model()
        model_source = ConfigSource.OVERRIDE if overrides.model else ConfigSource.MODEL_DEFAULT
        family = checkpoint_family(model)
        set_field("model", model, model_source)
        set_field("model_family", family, model_source)

        default_size = fallback_dimensions(family)
        set_field("width", default_size.width, ConfigSource.MODEL_DEFAULT)
        set_field("height", default_size.height, ConfigSource.MODEL_DEFAULT)

        baseline = get_quality_preset_safe(config.DEFAULT_QUALITY_PRESET)
        self._apply_quality(set_field, baseline, ConfigSource.MODEL_DEFAULT)
        effective_quality = baseline
        size_preset_used: str | None = None
        quality_preset_used: str | None = None

        # 2. Size preset
        if options.size_preset:
            preset = get_size_preset(options.size_preset)
            if preset is None:
                logger.warning(f"Unknown size preset '{options.size_preset}', keeping default dimensions")
            else:
                dims = preset.dimensions_for(family_dimension_key(family))
                set_field("width", dims.width, ConfigSource.SIZE_PRESET)
                set_field("height", dims.height, ConfigSource.SIZE_PRESET)
                size_preset_used = preset.id

        # 3. Quality preset
        if options.quality_preset:
            quality = get_quality_preset(options.quality_preset)
            if quality is None:
                logger.warning(
                    f"Unknown quality preset '{options.quality_preset}', "
                    f"using '{config.DEFAULT_QUALITY_PRESET}'"
                )
            else:
                self._apply_quality(set_field, quality, ConfigSource.QUALITY_PRESET)
                effective_quality = quality
                quality_preset_used = quality.id

        # 4. Slot context
        if options.slot is not None:
            if strategy.uses_slot_context:
                slot_dims = self._slot_dimensions(strategy, options.slot, family, options.target_quality)
                set_field("width", slot_dims.width, ConfigSource.SLOT)
                set_field("height", slot_dims.height, ConfigSource.SLOT)
                size_preset_used = slot_dims.preset_id
            else:
                logger.debug(f"Strategy '{strategy.id}' ignores slot context")

        # 5. Overrides
        for name in ("width", "height", "steps", "cfg", "sampler", "scheduler"):
            value = getattr(overrides, name)
            if value is not None:
                set_field(name, value, ConfigSource.OVERRIDE)

        adapters = ResolvedAdapterStack()
        if overrides.adapters:
            adapters = resolve_adapter_stack(model, overrides.adapters)

        resolved = ResolvedConfig(
            **values,
            aspect_ratio=values["width"] / values["height"],
            size_preset_used=size_preset_used,
            quality_preset_used=quality_preset_used,
            hi_res_fix=effective_quality.hi_res_fix,
            upscale=effective_quality.upscale,
            negative_prompt=overrides.negative_prompt or "",
            adapters=adapters,
            strategy_id=strategy.id,
            sources=sources,
        )
        logger.debug(
            f"Resolved panel={options.panel_id} {resolved.width}x{resolved.height} "
            f"steps={resolved.steps} model={resolved.model} via {strategy.id}"
        )
        return resolved

    @staticmethod
    def _apply_quality(set_field, quality: QualityPreset, source: ConfigSource) -> None:
        set_field("steps", quality.steps, source)
        set_field("cfg", quality.cfg, source)
        set_field("sampler", quality.sampler, source)
        set_field("scheduler", quality.scheduler, source)

    @staticmethod
    def _slot_dimensions(
        strategy: SizingStrategy,
        slot: SlotContext,
        family: ModelFamily,
        target_quality: TargetQuality | None,
    ) -> SlotDimensions:
        return strategy.dimensions_for_slot(
            slot.template_id,
            slot.slot_id,
            family=family,
            page_size=slot.page_size,
            target_quality=target_quality,
            aspect_ratio=slot.aspect_ratio,
        )

    # =========================================================================
    # Convenience wrappers
    # =========================================================================

    def config_for_panel(
        self, panel_id: str, overrides: GenerationOverrides | dict[str, Any] | None = None
    ) -> ResolvedConfig:
        return self.resolve(ResolutionOptions(panel_id=panel_id, overrides=overrides))

    def config_for_slot(
        self,
        slot: SlotContext | dict[str, Any],
        quality_preset: str | None = None,
        overrides: GenerationOverrides | dict[str, Any] | None = None,
    ) -> ResolvedConfig:
        return self.resolve(ResolutionOptions(slot=slot, quality_preset=quality_preset, overrides=overrides))

    def config_with_presets(
        self,
        size_preset: str | None = None,
        quality_preset: str | None = None,
        overrides: GenerationOverrides | dict[str, Any] | None = None,
    ) -> ResolvedConfig:
        return self.resolve(
            ResolutionOptions(size_preset=size_preset, quality_preset=quality_preset, overrides=overrides)
        )

    # =========================================================================
    # Dimension helpers (always slot-aware, whatever the active strategy)
    # =========================================================================

    def calculate_optimal_size(
        self,
        aspect_ratio: float,
        family: ModelFamily | str = ModelFamily.SDXL,
        target_quality: TargetQuality | str | None = None,
    ) -> OptimalSize:
        return self._slot_aware.calculate_optimal_size(aspect_ratio, family, target_quality)

    def dimensions_for_slot(
        self,
        template_id: str,
        slot_id: str,
        family: ModelFamily | str = ModelFamily.SDXL,
        page_size: str | None = None,
        target_quality: TargetQuality | str | None = None,
        aspect_ratio: float | None = None,
    ) -> SlotDimensions:
        return self._slot_aware.dimensions_for_slot(
            template_id,
            slot_id,
            family=family,
            page_size=page_size,
            target_quality=target_quality,
            aspect_ratio=aspect_ratio,
        )

    def template_size_map(
        self,
        template_id: str,
        page_size: str | None = None,
        family: ModelFamily | str = ModelFamily.SDXL,
    ) -> dict[str, SlotDimensions]:
        return self._slot_aware.calculate_all_slot_sizes(template_id, page_size, family)

    # =========================================================================
    # Preset accessors
    # =========================================================================

    def get_size_preset(self, preset_id: str) -> SizePreset | None:
        return get_size_preset(preset_id)

    def get_quality_preset(self, preset_id: str) -> QualityPreset | None:
        return get_quality_preset(preset_id)

    def list_size_presets(self) -> list[SizePreset]:
        return list_size_presets()

    def list_quality_presets(self) -> list[QualityPreset]:
        return list_quality_presets()


class DefaultEngineHolder:
    """Holds the lazily created process-wide engine."""

    def __init__(self):
        self._engine: ConfigEngine | None = None

    def get(self) -> ConfigEngine:
        if self._engine is None:
            self._engine = ConfigEngine()
        return self._engine

    def reset(self) -> None:
        self._engine = None


_default_engine = DefaultEngineHolder()


def get_config_engine() -> ConfigEngine:
    """Shared engine instance. Strategy changes on it affect every caller."""
    return _default_engine.get()


def reset_config_engine() -> None:
    _default_engine.reset()


def create_config_engine(strategy: SizingStrategy | None = None) -> ConfigEngine:
    """Independent engine instance with its own strategy state."""
    return ConfigEngine(strategy)
