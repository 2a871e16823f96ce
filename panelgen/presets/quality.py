"""Quality presets: sampling parameters ordered by generation cost."""

import logging

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

_BASELINE_STEPS = 28


class QualityPreset(BaseModel):
    """Steps, guidance and sampler settings for one quality level."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique preset identifier")
    name: str = Field(description="Display name")
    description: str = Field(default="", description="What the preset is for")
    steps: int = Field(gt=0, description="Sampling steps")
    cfg: float = Field(gt=0, description="Classifier-free guidance scale")
    sampler: str = Field(description="Sampler name")
    scheduler: str = Field(description="Scheduler name")
    hi_res_fix: bool = Field(default=False, description="Run a second high-resolution pass")
    upscale: bool = Field(default=False, description="Upscale the final image")

    @property
    def relative_cost(self) -> float:
        return estimate_relative_time(self)


QUALITY_PRESETS: dict[str, QualityPreset] = {
    "draft": QualityPreset(
        id="draft",
        name="Draft (Fast Preview)",
        description="Quick previews and composition checks",
        steps=15,
        cfg=6.0,
        sampler="euler",
        scheduler="normal",
    ),
    "standard": QualityPreset(
        id="standard",
        name="Standard",
        description="Balanced quality for everyday panels",
        steps=28,
        cfg=7.0,
        sampler="euler_ancestral",
        scheduler="normal",
    ),
    "high": QualityPreset(
        id="high",
        name="High Quality",
        description="Final panels with a high-resolution pass",
        steps=35,
        cfg=7.5,
        sampler="dpmpp_2m_sde",
        scheduler="karras",
        hi_res_fix=True,
    ),
    "ultra": QualityPreset(
        id="ultra",
        name="Ultra (Publication Ready)",
        description="Print output with high-resolution pass and upscaling",
        steps=40,
        cfg=7.5,
        sampler="dpmpp_2m_sde",
        scheduler="karras",
        hi_res_fix=True,
        upscale=True,
    ),
}

_USE_CASE_PRESETS = {
    "preview": "draft",
    "iteration": "standard",
    "web": "standard",
    "social": "standard",
    "final": "high",
    "print": "ultra",
}


def get_quality_preset(preset_id: str) -> QualityPreset | None:
    return QUALITY_PRESETS.get(preset_id)


def get_quality_preset_safe(preset_id: str | None, fallback: str = "standard") -> QualityPreset:
    """Get a quality preset, falling back to ``fallback`` for unknown ids."""
    if preset_id is not None and preset_id in QUALITY_PRESETS:
        return QUALITY_PRESETS[preset_id]
    if preset_id is not None:
        logger.warning(f"Unknown quality preset '{preset_id}', using '{fallback}'")
    return QUALITY_PRESETS[fallback]


def list_quality_presets() -> list[QualityPreset]:
    """All quality presets, cheapest first."""
    return sorted(QUALITY_PRESETS.values(), key=lambda p: p.relative_cost)


def estimate_relative_time(preset: QualityPreset) -> float:
    """Estimate generation time relative to the standard preset (1.0).

    Scales with step count; a high-resolution pass, upscaling and the
    slower dpmpp samplers each add a fixed multiplier.
    """
    multiplier = preset.steps / _BASELINE_STEPS
    if preset.hi_res_fix:
        multiplier *= 1.8
    if preset.upscale:
        multiplier *= 1.5
    if preset.sampler.startswith("dpmpp"):
        multiplier *= 1.1
    return round(multiplier, 2)


def recommend_quality_preset(use_case: str) -> QualityPreset:
    """Pick a quality preset for a use case (preview, iteration, web, social, final, print)."""
    return QUALITY_PRESETS[_USE_CASE_PRESETS.get(use_case.lower(), "standard")]
