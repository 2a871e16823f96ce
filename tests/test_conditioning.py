"""Tests for multi-condition composition."""

import pytest

from panelgen.conditioning import (
    Condition,
    ConditionComposer,
    build_prompt,
    calculate_total_influence,
    get_condition_composer,
    list_mask_presets,
    map_condition_type,
    mask_condition,
    presets_for_use_case,
    recommended_strength,
    reset_condition_composer,
)
from panelgen.enums import ConditionType

ILLUSTRIOUS_CKPT = "waiIllustriousSDXL_v160.safetensors"
FLUX_CKPT = "flux1-schnell-fp8.safetensors"


def cond(condition_type, strength=None):
    return Condition(type=condition_type, source_image="ref.png", strength=strength)


@pytest.fixture
def composer():
    return ConditionComposer()


# ---------------------------------------------------------------------------
# Influence
# ---------------------------------------------------------------------------

class TestInfluence:
    def test_empty(self):
        influence = calculate_total_influence([])
        assert influence.total == 0
        assert influence.warning is None

    def test_low_total(self):
        assert calculate_total_influence([cond("openpose", 0.9)]).warning is None

    def test_high_total(self):
        influence = calculate_total_influence([cond("openpose", 0.8), cond("depth", 0.8)])
        assert influence.total == pytest.approx(1.6)
        assert influence.warning.startswith("High total influence")

    def test_very_high_total(self):
        influence = calculate_total_influence([cond("openpose", 1.0), cond("depth", 1.1)])
        assert influence.warning.startswith("Very high total influence")

    def test_unset_strength_counts_as_one(self):
        assert calculate_total_influence([cond("canny")]).total == 1.0

    def test_total_at_threshold_has_no_warning(self):
        conditions = [cond("openpose", 0.4), cond("depth", 0.4), cond("lineart", 0.4), cond("canny", 0.3)]
        influence = calculate_total_influence(conditions)
        assert influence.total == 1.5
        assert influence.warning is None

    def test_total_of_two_is_only_high(self):
        influence = calculate_total_influence([cond("openpose", 0.7), cond("depth", 0.7), cond("canny", 0.6)])
        assert influence.total == 2.0
        assert influence.warning.startswith("High total influence")

    @pytest.mark.parametrize("strength", [-0.5, 2.5])
    def test_strength_bounds(self, strength):
        with pytest.raises(ValueError, match="condition strength"):
            cond("canny", strength)


# ---------------------------------------------------------------------------
# Type mapping and prompt hints
# ---------------------------------------------------------------------------

class TestTypeMapping:
    @pytest.mark.parametrize("condition_type,expected", [
        ("canny", ConditionType.CANNY),
        ("openpose", ConditionType.OPENPOSE),
        ("softedge", ConditionType.LINEART),
        ("tile", ConditionType.SCRIBBLE),
        ("normalbae", ConditionType.SCRIBBLE),
    ])
    def test_map_condition_type(self, condition_type, expected):
        assert map_condition_type(condition_type) == expected

    def test_recommended_strength(self):
        assert recommended_strength("openpose").default == 0.85
        assert recommended_strength(ConditionType.REFERENCE).default == 0.7


class TestBuildPrompt:
    def test_single_condition_unchanged(self):
        assert build_prompt("a hero", [cond("openpose")]) == "a hero"

    def test_hints_for_secondary_conditions(self):
        conditions = [cond("openpose"), cond("depth"), cond("lineart"), cond("depth")]
        assert build_prompt("a hero", conditions) == "a hero, proper depth, clean lines"

    def test_types_without_hint(self):
        assert build_prompt("a hero", [cond("canny"), cond("tile")]) == "a hero"


# ---------------------------------------------------------------------------
# Composer
# ---------------------------------------------------------------------------

class TestCompose:
    def test_requires_a_condition(self, composer):
        with pytest.raises(ValueError, match="At least one condition required"):
            composer.compose("a hero", [])

    def test_rejects_more_than_five(self, composer):
        with pytest.raises(ValueError, match="Maximum 5 conditions supported, got 6"):
            composer.compose("a hero", [cond("canny", 0.2)] * 6)

    @pytest.mark.parametrize("count", [1, 5])
    def test_accepts_one_to_five(self, composer, count):
        bundle = composer.compose("a hero", [cond("canny", 0.2)] * count)
        assert len(bundle.conditions) == count

    def test_primary_is_first(self, composer):
        bundle = composer.compose("a hero", [cond("softedge", 0.5), cond("openpose", 0.7)])
        assert bundle.primary.type == ConditionType.SOFTEDGE
        assert bundle.primary.backend_type == ConditionType.LINEART
        assert bundle.prompt == "a hero, accurate pose"

    def test_dict_conditions(self, composer):
        bundle = composer.compose("a hero", [{"type": "depth", "source_image": "d.png"}])
        assert bundle.primary.strength == 1.0

    def test_influence_warning_in_bundle(self, composer):
        bundle = composer.compose("a hero", [cond("canny")] * 5)
        assert bundle.influence.total == 5.0
        assert bundle.warnings == [bundle.influence.warning]

    def test_conditioner_resolution(self, composer):
        bundle = composer.compose("a hero", [cond("openpose", 0.8)], model=ILLUSTRIOUS_CKPT)
        assert bundle.primary.conditioner == "union-sdxl/diffusion_pytorch_model.safetensors"
        assert bundle.primary.control_mode == 4
        assert bundle.model == ILLUSTRIOUS_CKPT

    def test_incompatible_condition_for_model(self, composer):
        with pytest.raises(ValueError, match="No conditioner found for lineart"):
            composer.compose("a hero", [cond("lineart")], model=FLUX_CKPT)

    def test_negative_prompt_passthrough(self, composer):
        bundle = composer.compose("a hero", [cond("canny")], negative_prompt="blurry")
        assert bundle.negative_prompt == "blurry"


class TestComposeWithPreset:
    def test_panel_continuity(self, composer):
        bundle = composer.compose_with_preset("panel_continuity", "ref.png", "hero")
        assert [c.type for c in bundle.conditions] == [
            ConditionType.OPENPOSE,
            ConditionType.DEPTH,
            ConditionType.SOFTEDGE,
        ]
        assert all(c.image == "ref.png" for c in bundle.conditions)
        assert bundle.influence.total == pytest.approx(1.45)
        assert bundle.influence.warning is None
        assert bundle.prompt == "hero, proper depth, soft contours"

    def test_custom_strengths(self, composer):
        bundle = composer.compose_with_preset("pose_depth", "ref.png", "hero", strengths={"openpose": 1.0})
        assert [c.strength for c in bundle.conditions] == [1.0, 0.5]

    def test_unknown_preset(self, composer):
        with pytest.raises(ValueError, match="Unknown preset: nope"):
            composer.compose_with_preset("nope", "ref.png", "hero")

    def test_presets_for_use_case(self, composer):
        assert [p.id for p in presets_for_use_case("continuity")] == ["panel_continuity", "character_consistency"]
        assert presets_for_use_case("unknown") == []
        assert len(composer.list_presets()) == 8


# ---------------------------------------------------------------------------
# Masks
# ---------------------------------------------------------------------------

class TestMasks:
    def test_face_uses_pose_detection(self):
        condition = mask_condition("face", "img.png")
        assert condition.type == ConditionType.OPENPOSE
        assert condition.source_image == "img.png"

    def test_background_uses_depth(self):
        assert mask_condition("background", "img.png", strength=0.6).type == ConditionType.DEPTH

    def test_region_without_detector(self):
        with pytest.raises(ValueError, match="Auto-mask generation not supported for region: hands"):
            mask_condition("hands", "img.png")

    def test_auto_supported_regions(self):
        supported = {p.region.value for p in list_mask_presets() if p.auto_supported}
        assert supported == {"face", "background", "foreground"}


class TestSharedComposer:
    def test_shared_instance(self):
        first = get_condition_composer()
        assert get_condition_composer() is first
        reset_condition_composer()
        assert get_condition_composer() is not first
