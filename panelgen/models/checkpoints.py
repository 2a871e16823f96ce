"""Checkpoint catalog."""

from pydantic import BaseModel, ConfigDict, Field

from ..enums import CheckpointType, ModelFamily
from ..presets import detect_model_family
from .families import compatible_families


class CheckpointEntry(BaseModel):
    """A known base model file."""

    model_config = ConfigDict(frozen=True)

    filename: str
    family: ModelFamily
    type: CheckpointType = CheckpointType.BASE
    recommended: bool = False
    notes: str = ""
    prompt_style: str = Field(default="natural", description="danbooru, pony or natural")

    @property
    def compatible_families(self) -> frozenset[ModelFamily]:
        return compatible_families(self.family)


def _ckpt(filename: str, family: ModelFamily, notes: str, prompt_style: str = "natural", **kwargs) -> CheckpointEntry:
    return CheckpointEntry(filename=filename, family=family, notes=notes, prompt_style=prompt_style, **kwargs)


CHECKPOINT_CATALOG: dict[str, CheckpointEntry] = {
    c.filename: c
    for c in [
        # Illustrious
        _ckpt("waiIllustriousSDXL_v160.safetensors", ModelFamily.ILLUSTRIOUS,
              "General-purpose Illustrious anime model.", "danbooru", recommended=True),
        _ckpt("novaFurryXL_ilV130.safetensors", ModelFamily.ILLUSTRIOUS,
              "Illustrious-based anthro model.", "danbooru", recommended=True),
        _ckpt("mistoonAnime_v10Illustrious.safetensors", ModelFamily.ILLUSTRIOUS,
              "Cartoon-leaning anime style.", "danbooru"),
        _ckpt("prefectIllustriousXL_v5.safetensors", ModelFamily.ILLUSTRIOUS,
              "Clean anime rendering.", "danbooru"),
        _ckpt("realismIllustriousBy_v50FP16.safetensors", ModelFamily.ILLUSTRIOUS,
              "Semi-realistic Illustrious variant.", "danbooru"),
        # Pony
        _ckpt("ponyDiffusionV6XL_v6StartWithThisOne.safetensors", ModelFamily.PONY,
              "Base Pony V6. Needs score tags.", "pony", recommended=True),
        _ckpt("hassakuXLPony_v13BetterEyesVersion.safetensors", ModelFamily.PONY,
              "Anime Pony variant with improved eyes.", "pony"),
        _ckpt("cyberrealisticPony_v141.safetensors", ModelFamily.PONY,
              "Cyber-realistic Pony.", "pony"),
        # SDXL
        _ckpt("sdXL_v10.safetensors", ModelFamily.SDXL, "Base SDXL 1.0."),
        _ckpt("sdXL_v10VAEFix.safetensors", ModelFamily.SDXL, "SDXL with VAE fix.", recommended=True),
        _ckpt("sdXL_v10RefinerVAEFix.safetensors", ModelFamily.SDXL, "SDXL Refiner.",
              type=CheckpointType.REFINER),
        _ckpt("AnythingXL_v50.safetensors", ModelFamily.SDXL, "Anime-focused SDXL.", "danbooru"),
        _ckpt("cyberrealistic_v90.safetensors", ModelFamily.SDXL, "Photorealistic SDXL."),
        _ckpt("awpainting_v14.safetensors", ModelFamily.SDXL, "Artistic/painting style."),
        # Realistic
        _ckpt("realisticVisionV60_v60B1.safetensors", ModelFamily.REALISTIC, "Photorealistic portraits and scenes."),
        # Flux
        _ckpt("flux1-schnell-fp8.safetensors", ModelFamily.FLUX,
              "Flux Schnell (fast). FP8 quantized.", recommended=True),
        # SD 1.5
        _ckpt("SD1.5/v1-5-pruned-emaonly.ckpt", ModelFamily.SD15,
              "Base SD 1.5. Use SD1.5 conditioners with this."),
        _ckpt("512-inpainting-ema.safetensors", ModelFamily.SD15, "SD 1.5 inpainting model.",
              type=CheckpointType.INPAINT),
    ]
}


def get_checkpoint(filename: str) -> CheckpointEntry | None:
    return CHECKPOINT_CATALOG.get(filename)


def list_checkpoints_by_family(family: ModelFamily | str) -> list[CheckpointEntry]:
    family = ModelFamily(family)
    return [c for c in CHECKPOINT_CATALOG.values() if c.family == family]


def list_recommended_checkpoints() -> list[CheckpointEntry]:
    return [c for c in CHECKPOINT_CATALOG.values() if c.recommended]


def checkpoint_family(filename: str, family_override: ModelFamily | str | None = None) -> ModelFamily:
    """Family of a checkpoint: explicit override, then catalog entry, then filename heuristics."""
    if family_override is not None:
        return ModelFamily(family_override)
    entry = get_checkpoint(filename)
    if entry is not None:
        return entry.family
    return detect_model_family(filename)
