"""Model family presets and filename-based family detection."""

from pydantic import BaseModel, ConfigDict, Field

from ..enums import DimensionKey, ModelFamily


class ModelPreset(BaseModel):
    """Sampling defaults that suit one model family."""

    model_config = ConfigDict(frozen=True)

    family: ModelFamily
    default_model: str = Field(description="Checkpoint used when none is given for this family")
    cfg: float = Field(gt=0)
    sampler: str
    scheduler: str
    min_steps: int = Field(gt=0)
    default_steps: int = Field(gt=0)
    supports_negative: bool = Field(default=True, description="Whether negative prompts have an effect")
    notes: str = ""


MODEL_PRESETS: dict[ModelFamily, ModelPreset] = {
    ModelFamily.ILLUSTRIOUS: ModelPreset(
        family=ModelFamily.ILLUSTRIOUS,
        default_model="waiIllustriousSDXL_v160.safetensors",
        cfg=7.0,
        sampler="euler_ancestral",
        scheduler="normal",
        min_steps=20,
        default_steps=28,
        notes="Anime-focused SDXL fine-tune; danbooru-style tags work best.",
    ),
    ModelFamily.PONY: ModelPreset(
        family=ModelFamily.PONY,
        default_model="ponyDiffusionV6XL_v6StartWithThisOne.safetensors",
        cfg=7.0,
        sampler="euler_ancestral",
        scheduler="normal",
        min_steps=20,
        default_steps=28,
        notes="Needs score_9, score_8_up quality tags at the start of the prompt.",
    ),
    ModelFamily.SDXL: ModelPreset(
        family=ModelFamily.SDXL,
        default_model="sdXL_v10VAEFix.safetensors",
        cfg=7.0,
        sampler="dpmpp_2m_sde",
        scheduler="karras",
        min_steps=25,
        default_steps=30,
    ),
    ModelFamily.FLUX: ModelPreset(
        family=ModelFamily.FLUX,
        default_model="flux1-schnell-fp8.safetensors",
        cfg=3.5,
        sampler="euler",
        scheduler="simple",
        min_steps=20,
        default_steps=28,
        supports_negative=False,
        notes="Low guidance; negative prompts are mostly ignored.",
    ),
    ModelFamily.SD15: ModelPreset(
        family=ModelFamily.SD15,
        default_model="SD1.5/v1-5-pruned-emaonly.ckpt",
        cfg=7.5,
        sampler="euler_ancestral",
        scheduler="normal",
        min_steps=20,
        default_steps=30,
    ),
    ModelFamily.REALISTIC: ModelPreset(
        family=ModelFamily.REALISTIC,
        default_model="realisticVisionV60_v60B1.safetensors",
        cfg=7.5,
        sampler="dpmpp_2m_sde",
        scheduler="karras",
        min_steps=25,
        default_steps=35,
    ),
}

# Checked in order; the first family with a matching substring wins
_FAMILY_MARKERS: list[tuple[ModelFamily, tuple[str, ...]]] = [
    (ModelFamily.ILLUSTRIOUS, ("illustrious", "noob", "wai-")),
    (ModelFamily.PONY, ("pony", "furry", "nova")),
    (ModelFamily.FLUX, ("flux",)),
    (ModelFamily.REALISTIC, ("realistic", "photon", "real", "photo")),
    (ModelFamily.SDXL, ("sdxl", "xl")),
]

_DIMENSION_KEYS = {
    ModelFamily.ILLUSTRIOUS: DimensionKey.SDXL,
    ModelFamily.PONY: DimensionKey.SDXL,
    ModelFamily.SDXL: DimensionKey.SDXL,
    ModelFamily.REALISTIC: DimensionKey.SDXL,
    ModelFamily.FLUX: DimensionKey.FLUX,
    ModelFamily.SD15: DimensionKey.SD15,
}

_CFG_RANGES = {
    ModelFamily.FLUX: (1.0, 5.0),
    ModelFamily.REALISTIC: (5.0, 10.0),
}


def detect_model_family(model_name: str) -> ModelFamily:
    """Guess the family of a checkpoint from its filename.

    Matching is on lowercased substrings; names matching nothing are
    treated as SD 1.5.
    """
    lower = model_name.lower()
    for family, markers in _FAMILY_MARKERS:
        if any(marker in lower for marker in markers):
            return family
    return ModelFamily.SD15


def list_model_families() -> list[ModelFamily]:
    return list(MODEL_PRESETS)


def get_model_preset(family: ModelFamily | str) -> ModelPreset:
    return MODEL_PRESETS[ModelFamily(family)]


def family_dimension_key(family: ModelFamily | str) -> DimensionKey:
    """Dimension table used by a family in the size presets."""
    return _DIMENSION_KEYS[ModelFamily(family)]


def supports_negative_prompt(family: ModelFamily | str) -> bool:
    return get_model_preset(family).supports_negative


def recommended_cfg_range(family: ModelFamily | str) -> tuple[float, float, float]:
    """Return ``(min, max, default)`` guidance scale for a family."""
    family = ModelFamily(family)
    low, high = _CFG_RANGES.get(family, (4.0, 12.0))
    return low, high, MODEL_PRESETS[family].cfg
