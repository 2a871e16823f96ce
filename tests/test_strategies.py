"""Tests for page layout geometry and the two sizing strategies."""

import pytest

from panelgen.enums import ModelFamily, TargetQuality
from panelgen.layout import TemplateLayoutProvider
from panelgen.strategies import (
    ContextFreeStrategy,
    SlotAwareStrategy,
    align_to_grid,
    fallback_dimensions,
    round_to_grid,
    validate_dimensions,
)


@pytest.fixture
def slot_aware():
    return SlotAwareStrategy()


@pytest.fixture
def context_free():
    return ContextFreeStrategy()


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

class TestLayoutProvider:
    def test_slot_geometry_on_default_page(self):
        geometry = TemplateLayoutProvider().slot_geometry("six-grid", "row1-left")
        assert geometry.page_size == "comic_standard"
        assert geometry.pixel_width == pytest.approx(0.47 * 1988)
        assert geometry.pixel_height == pytest.approx(0.30 * 3075)
        assert geometry.area_weight == pytest.approx(0.141)

    def test_unknown_template_or_slot(self):
        layout = TemplateLayoutProvider()
        assert layout.slot_geometry("twelve-grid", "a") is None
        assert layout.slot_geometry("six-grid", "row9-left") is None
        assert layout.template_slot_ids("twelve-grid") == []

    def test_unknown_page_size_uses_default(self):
        geometry = TemplateLayoutProvider().slot_geometry("full-page", "main", "tabloid")
        assert geometry.page_size == "comic_standard"

    def test_page_size_from_environment(self, monkeypatch):
        monkeypatch.setenv("PANELGEN_PAGE_SIZE", "web_hd")
        assert TemplateLayoutProvider().default_page_size == "web_hd"

    def test_unknown_default_page_size(self):
        assert TemplateLayoutProvider(default_page_size="tabloid").default_page_size == "comic_standard"


# ---------------------------------------------------------------------------
# Dimension math
# ---------------------------------------------------------------------------

class TestDimensionMath:
    def test_round_to_grid(self):
        assert round_to_grid(1000) == 1024
        assert round_to_grid(10) == 64

    @pytest.mark.parametrize("width,height,ratio", [
        (934.4, 922.5, 1.0129),
        (1773.6, 591.2, 3.0),
        (612.4, 816.5, 0.75),
    ])
    def test_align_to_grid(self, width, height, ratio):
        w, h = align_to_grid(width, height, ratio)
        assert w % 64 == 0 and h % 64 == 0
        assert abs(w / h - ratio) / ratio < 0.15

    def test_validate_dimensions(self):
        assert validate_dimensions(1024, 1024, "sdxl") is None
        assert "too small" in validate_dimensions(256, 1024, "illustrious")
        assert "too large" in validate_dimensions(4096, 1024, "sdxl")
        assert "exceed" in validate_dimensions(1024, 1024, "sd15")

    def test_fallback_dimensions(self):
        assert fallback_dimensions("sdxl").model_dump() == {"width": 768, "height": 1024, "preset_id": "portrait_3x4"}
        assert (fallback_dimensions("sd15").width, fallback_dimensions("sd15").height) == (384, 512)


# ---------------------------------------------------------------------------
# Optimal size
# ---------------------------------------------------------------------------

class TestCalculateOptimalSize:
    def test_square_uses_preset(self, slot_aware):
        size = slot_aware.calculate_optimal_size(1.0, "sdxl")
        assert (size.width, size.height, size.preset_id) == (1024, 1024, "square_1x1")

    def test_family_dimension_table(self, slot_aware):
        size = slot_aware.calculate_optimal_size(1.0, ModelFamily.SD15)
        assert (size.width, size.height) == (512, 512)

    def test_unmatched_ratio_is_computed(self, slot_aware):
        size = slot_aware.calculate_optimal_size(3.0, "sdxl")
        assert size.preset_id is None
        assert size.width % 64 == 0 and size.height % 64 == 0
        assert abs(size.width / size.height - 3.0) / 3.0 < 0.15

    @pytest.mark.parametrize("strategy_cls", [SlotAwareStrategy, ContextFreeStrategy])
    @pytest.mark.parametrize("ratio", [0.75, 1.0, 1.5, 3.0])
    @pytest.mark.parametrize("family", ["sdxl", "sd15", "flux"])
    def test_area_grows_with_target_quality(self, strategy_cls, ratio, family):
        strategy = strategy_cls()
        areas = []
        for quality in (TargetQuality.LOW, TargetQuality.MEDIUM, TargetQuality.HIGH):
            size = strategy.calculate_optimal_size(ratio, family, quality)
            assert validate_dimensions(size.width, size.height, family) is None
            if family == "sdxl":
                assert size.width % 64 == 0 and size.height % 64 == 0
            areas.append(size.width * size.height)
        assert areas[0] <= areas[1] <= areas[2]

    @pytest.mark.parametrize("family,max_side", [("sdxl", 2048), ("flux", 2048), ("sd15", 1024)])
    def test_oversized_result_is_scaled_down(self, context_free, family, max_side):
        size = context_free.calculate_optimal_size(3.0, family, "high")
        assert size.width <= max_side
        assert size.height <= max_side
        assert validate_dimensions(size.width, size.height, family) is None

    @pytest.mark.parametrize("strategy_cls", [SlotAwareStrategy, ContextFreeStrategy])
    def test_undersized_result_is_scaled_up(self, strategy_cls):
        size = strategy_cls().calculate_optimal_size(3.0, "sd15", "low")
        assert (size.width, size.height) == (768, 256)
        assert validate_dimensions(size.width, size.height, "sd15") is None
        assert abs(size.width / size.height - 3.0) / 3.0 < 0.15


# ---------------------------------------------------------------------------
# Slot dimensions
# ---------------------------------------------------------------------------

class TestSlotAwareStrategy:
    def test_six_grid_panel(self, slot_aware):
        dims = slot_aware.dimensions_for_slot("six-grid", "row1-left")
        assert (dims.width, dims.height) == (1024, 1024)
        assert dims.preset_id == "square_1x1"

    def test_page_size_changes_slot_shape(self, slot_aware):
        dims = slot_aware.dimensions_for_slot("six-grid", "row1-left", page_size="web_hd")
        assert dims.preset_id == "comic_sixth_grid"
        assert (dims.width, dims.height) == (960, 1024)

    def test_wide_panel(self, slot_aware):
        dims = slot_aware.dimensions_for_slot("two-vertical", "top")
        assert dims.preset_id == "landscape_4x3"
        assert (dims.width, dims.height) == (1024, 768)

    def test_explicit_aspect_ratio_skips_layout(self, slot_aware):
        dims = slot_aware.dimensions_for_slot("not-a-template", "x", aspect_ratio=1.5)
        assert dims.preset_id == "landscape_3x2"

    def test_unknown_slot_falls_back(self, slot_aware, caplog):
        dims = slot_aware.dimensions_for_slot("six-grid", "row9-left", family="sdxl")
        assert (dims.width, dims.height) == (768, 1024)
        assert "row9-left" in caplog.text

    def test_all_slot_sizes(self, slot_aware):
        sizes = slot_aware.calculate_all_slot_sizes("six-grid")
        assert list(sizes) == ["row1-left", "row1-right", "row2-left", "row2-right", "row3-left", "row3-right"]
        assert slot_aware.calculate_all_slot_sizes("twelve-grid") == {}

    def test_template_recommendation_groups_equal_slots(self, slot_aware):
        recommendation = slot_aware.recommend_sizes_for_template("four-grid")
        assert recommendation.unique_presets == ["comic_full_page"]
        assert recommendation.by_preset["comic_full_page"] == ["top-left", "top-right", "bottom-left", "bottom-right"]
        assert recommendation.by_slot["top-left"].width == 832


class TestContextFreeStrategy:
    def test_flag(self, context_free, slot_aware):
        assert context_free.uses_slot_context is False
        assert slot_aware.uses_slot_context is True

    def test_nominal_slot_geometry(self, context_free):
        dims = context_free.dimensions_for_slot("six-grid", "row1-left")
        assert dims.preset_id == "square_1x1"

    def test_page_size_is_ignored(self, context_free):
        dims = context_free.dimensions_for_slot("six-grid", "row1-left", page_size="web_hd")
        assert dims.preset_id == "square_1x1"

    def test_unknown_slot_falls_back(self, context_free):
        dims = context_free.dimensions_for_slot("twelve-grid", "a", family="flux")
        assert (dims.width, dims.height) == (768, 1024)
