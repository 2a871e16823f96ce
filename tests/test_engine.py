"""Tests for layered configuration resolution."""

import pytest

from panelgen.engine import (
    TRACKED_FIELDS,
    ConfigEngine,
    GenerationOverrides,
    ResolutionOptions,
    create_config_engine,
    get_config_engine,
    reset_config_engine,
)
from panelgen.enums import ConfigSource, ModelFamily
from panelgen.strategies import ContextFreeStrategy

SIX_GRID_SLOT = {"template_id": "six-grid", "slot_id": "row1-left"}


@pytest.fixture
def engine():
    return ConfigEngine()


# ---------------------------------------------------------------------------
# Defaults and presets
# ---------------------------------------------------------------------------

class TestDefaults:
    def test_empty_request(self, engine):
        config = engine.resolve()
        assert config.model == "waiIllustriousSDXL_v160.safetensors"
        assert config.model_family == ModelFamily.ILLUSTRIOUS
        assert (config.width, config.height) == (768, 1024)
        assert (config.steps, config.cfg, config.sampler, config.scheduler) == (28, 7.0, "euler_ancestral", "normal")
        assert config.strategy_id == "slot-aware"
        assert config.size_preset_used is None
        assert config.quality_preset_used is None
        assert config.hi_res_fix is False
        assert len(config.adapters) == 0

    def test_every_tracked_field_has_a_source(self, engine):
        config = engine.resolve()
        assert set(config.sources) == set(TRACKED_FIELDS)
        assert set(config.sources.values()) == {ConfigSource.MODEL_DEFAULT}

    def test_dict_options(self, engine):
        config = engine.resolve({"size_preset": "square_1x1"})
        assert config.width == 1024

    def test_default_model_from_environment(self, monkeypatch):
        monkeypatch.setenv("PANELGEN_DEFAULT_MODEL", "flux1-schnell-fp8.safetensors")
        config = ConfigEngine().resolve()
        assert config.model_family == ModelFamily.FLUX
        assert config.sources["model"] == ConfigSource.MODEL_DEFAULT


class TestPresetLayers:
    def test_size_preset(self, engine):
        config = engine.resolve(ResolutionOptions(size_preset="landscape_16x9"))
        assert (config.width, config.height) == (1344, 768)
        assert config.sources["width"] == ConfigSource.SIZE_PRESET
        assert config.size_preset_used == "landscape_16x9"
        assert config.aspect_ratio == pytest.approx(1344 / 768)

    def test_quality_preset(self, engine):
        config = engine.resolve(ResolutionOptions(quality_preset="high"))
        assert config.steps == 35
        assert config.sources["steps"] == ConfigSource.QUALITY_PRESET
        assert config.sources["width"] == ConfigSource.MODEL_DEFAULT
        assert config.hi_res_fix is True
        assert config.quality_preset_used == "high"

    def test_unknown_size_preset(self, engine, caplog):
        config = engine.resolve(ResolutionOptions(size_preset="poster_a0"))
        assert (config.width, config.height) == (768, 1024)
        assert config.sources["width"] == ConfigSource.MODEL_DEFAULT
        assert "poster_a0" in caplog.text

    def test_unknown_quality_preset(self, engine, caplog):
        config = engine.resolve(ResolutionOptions(quality_preset="cinematic"))
        assert config.steps == 28
        assert config.sources["steps"] == ConfigSource.MODEL_DEFAULT
        assert config.quality_preset_used is None
        assert "cinematic" in caplog.text

    def test_presets_follow_model_family(self, engine):
        config = engine.resolve(ResolutionOptions(
            size_preset="square_1x1", overrides=GenerationOverrides(model="dreamshaper_8.safetensors")
        ))
        assert config.model_family == ModelFamily.SD15
        assert (config.width, config.height) == (512, 512)


# ---------------------------------------------------------------------------
# Slot context and strategies
# ---------------------------------------------------------------------------

class TestSlotLayer:
    def test_slot_aware_uses_slot(self, engine):
        config = engine.resolve(ResolutionOptions(slot=SIX_GRID_SLOT))
        assert config.sources["width"] == ConfigSource.SLOT
        assert (config.width, config.height) == (1024, 1024)
        assert config.size_preset_used == "square_1x1"

    def test_slot_beats_size_preset(self, engine):
        config = engine.resolve(ResolutionOptions(size_preset="landscape_16x9", slot=SIX_GRID_SLOT))
        assert config.sources["height"] == ConfigSource.SLOT
        assert config.width == 1024

    def test_context_free_ignores_slot(self):
        engine = ConfigEngine(strategy=ContextFreeStrategy())
        config = engine.resolve(ResolutionOptions(slot=SIX_GRID_SLOT))
        assert config.sources["width"] != ConfigSource.SLOT
        assert config.width == 768
        assert config.strategy_id == "context-free"

    def test_per_call_strategy(self, engine):
        config = engine.resolve(ResolutionOptions(slot=SIX_GRID_SLOT), strategy=ContextFreeStrategy())
        assert config.strategy_id == "context-free"
        assert config.sources["width"] == ConfigSource.MODEL_DEFAULT
        assert engine.strategy_id == "slot-aware"

    def test_target_quality_enlarges_slot(self, engine):
        config = engine.resolve(ResolutionOptions(slot=SIX_GRID_SLOT, target_quality="high"))
        assert config.width * config.height > 1024 * 1024
        assert config.width % 64 == 0 and config.height % 64 == 0

    def test_unknown_slot_keeps_fallback_size(self, engine):
        config = engine.resolve(ResolutionOptions(slot={"template_id": "six-grid", "slot_id": "row9-left"}))
        assert (config.width, config.height) == (768, 1024)

    def test_switching_strategies(self, engine):
        engine.use_default_strategy()
        assert engine.strategy_id == "context-free"
        engine.use_slot_aware_strategy()
        assert engine.strategy_id == "slot-aware"

    def test_dimension_helpers_stay_slot_aware(self, engine):
        engine.use_default_strategy()
        dims = engine.dimensions_for_slot("six-grid", "row1-left", page_size="web_hd")
        assert dims.preset_id == "comic_sixth_grid"
        assert list(engine.template_size_map("two-vertical")) == ["top", "bottom"]
        assert engine.calculate_optimal_size(1.0).preset_id == "square_1x1"

    def test_slot_helper_passes_quality_and_ratio(self, engine):
        assert engine.dimensions_for_slot("not-a-template", "x", aspect_ratio=1.5).preset_id == "landscape_3x2"
        dims = engine.dimensions_for_slot("six-grid", "row1-left", target_quality="high")
        assert dims.width * dims.height > 1024 * 1024


# ---------------------------------------------------------------------------
# Overrides
# ---------------------------------------------------------------------------

class TestOverrides:
    def test_width_override(self, engine):
        config = engine.resolve(ResolutionOptions(
            size_preset="landscape_16x9", overrides=GenerationOverrides(width=999)
        ))
        assert config.width == 999
        assert config.sources["width"] == ConfigSource.OVERRIDE
        assert config.height == 768
        assert config.sources["height"] == ConfigSource.SIZE_PRESET

    def test_override_beats_slot(self, engine):
        config = engine.resolve(ResolutionOptions(slot=SIX_GRID_SLOT, overrides={"height": 640}))
        assert config.height == 640
        assert config.sources["height"] == ConfigSource.OVERRIDE
        assert config.sources["width"] == ConfigSource.SLOT

    def test_model_override(self, engine):
        config = engine.resolve(ResolutionOptions(overrides={"model": "flux1-schnell-fp8.safetensors"}))
        assert config.model_family == ModelFamily.FLUX
        assert config.sources["model"] == ConfigSource.OVERRIDE
        assert config.sources["model_family"] == ConfigSource.OVERRIDE

    @pytest.mark.parametrize("overrides,message", [
        ({"width": 0}, "width must be positive"),
        ({"steps": -5}, "steps must be positive"),
        ({"cfg": -1.0}, "cfg must be positive"),
        ({"adapters": [{"name": "pixelart.safetensors", "strength": 3.0}]}, "adapter strength"),
    ])
    def test_malformed_overrides(self, engine, overrides, message):
        with pytest.raises(ValueError, match=message):
            engine.resolve({"overrides": overrides})

    def test_unknown_override_field(self):
        with pytest.raises(ValueError):
            GenerationOverrides(seed=42)

    def test_negative_prompt(self, engine):
        config = engine.resolve({"overrides": {"negative_prompt": "blurry"}})
        assert config.negative_prompt == "blurry"

    def test_adapter_stack(self, engine):
        config = engine.resolve({"overrides": {"adapters": [
            {"name": "Detailer IL v2"},
            {"name": "colorful_line_art_illustriousXL.safetensors", "strength": 0.9},
        ]}})
        assert config.adapters.filenames == [
            "colorful_line_art_illustriousXL.safetensors",
            "DetailerILv2-000008.safetensors",
        ]
        assert [a.strength for a in config.adapters.adapters] == [0.9, 0.5]

    def test_incompatible_adapter_is_skipped(self, engine):
        config = engine.resolve({"overrides": {"adapters": [{"name": "Flux Tarot"}]}})
        assert len(config.adapters) == 0
        assert len(config.adapters.warnings) == 1


# ---------------------------------------------------------------------------
# Wrappers and shared instance
# ---------------------------------------------------------------------------

class TestWrappers:
    def test_config_for_panel(self, engine):
        config = engine.config_for_panel("panel-1", {"steps": 50})
        assert config.steps == 50
        assert config.sources["steps"] == ConfigSource.OVERRIDE

    def test_config_for_slot(self, engine):
        config = engine.config_for_slot(SIX_GRID_SLOT, quality_preset="draft")
        assert config.sources["width"] == ConfigSource.SLOT
        assert config.steps == 15

    def test_config_with_presets(self, engine):
        config = engine.config_with_presets("square_1x1", "ultra")
        assert (config.width, config.height) == (1024, 1024)
        assert config.upscale is True

    def test_preset_accessors(self, engine):
        assert engine.get_size_preset("square_1x1").id == "square_1x1"
        assert engine.get_quality_preset("nope") is None
        assert len(engine.list_size_presets()) == 17
        assert engine.list_quality_presets()[0].id == "draft"


class TestSharedEngine:
    def test_shared_instance(self):
        assert get_config_engine() is get_config_engine()

    def test_reset(self):
        first = get_config_engine()
        reset_config_engine()
        assert get_config_engine() is not first

    def test_created_engines_are_independent(self):
        own = create_config_engine()
        own.use_default_strategy()
        assert get_config_engine().strategy_id == "slot-aware"
        assert create_config_engine(ContextFreeStrategy()).strategy_id == "context-free"
