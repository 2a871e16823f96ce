"""Conditioner (ControlNet) catalog."""

from pydantic import BaseModel, ConfigDict, Field

from ..enums import ConditionType, ModelFamily


class ConditionerEntry(BaseModel):
    """A known conditioner model file."""

    model_config = ConfigDict(frozen=True)

    filename: str
    name: str
    compatible_families: tuple[ModelFamily, ...]
    condition_types: tuple[ConditionType, ...]
    is_union: bool = Field(default=False, description="One model serving several condition types")
    preprocessor: str | None = None
    notes: str = ""


_SDXL_FAMILIES = (ModelFamily.SDXL, ModelFamily.ILLUSTRIOUS, ModelFamily.PONY, ModelFamily.REALISTIC)


def _sd15(filename: str, name: str, condition_type: ConditionType, preprocessor: str | None) -> ConditionerEntry:
    return ConditionerEntry(
        filename=filename,
        name=name,
        compatible_families=(ModelFamily.SD15,),
        condition_types=(condition_type,),
        preprocessor=preprocessor,
    )


CONDITIONER_CATALOG: dict[str, ConditionerEntry] = {
    c.filename: c
    for c in [
        ConditionerEntry(
            filename="union-sdxl/diffusion_pytorch_model.safetensors",
            name="ControlNet Union SDXL",
            compatible_families=_SDXL_FAMILIES,
            condition_types=(
                ConditionType.CANNY,
                ConditionType.DEPTH,
                ConditionType.OPENPOSE,
                ConditionType.SCRIBBLE,
                ConditionType.LINEART,
                ConditionType.SOFTEDGE,
                ConditionType.TILE,
            ),
            is_union=True,
            notes="Single model that handles all common condition types for SDXL. Recommended.",
        ),
        ConditionerEntry(
            filename="FLUX.1-dev-ControlNet-Union-Pro/diffusion_pytorch_model.safetensors",
            name="ControlNet Union Pro (Flux)",
            compatible_families=(ModelFamily.FLUX,),
            condition_types=(
                ConditionType.CANNY,
                ConditionType.TILE,
                ConditionType.DEPTH,
                ConditionType.BLUR,
                ConditionType.OPENPOSE,
            ),
            is_union=True,
            notes="Union conditioner for Flux models.",
        ),
        _sd15("control_v11p_sd15_openpose_fp16.safetensors", "OpenPose SD1.5", ConditionType.OPENPOSE, "openpose"),
        _sd15("control_v11p_sd15_canny_fp16.safetensors", "Canny SD1.5", ConditionType.CANNY, "canny"),
        _sd15("control_v11f1p_sd15_depth_fp16.safetensors", "Depth SD1.5", ConditionType.DEPTH, "depth_midas"),
        _sd15("control_v11p_sd15_lineart_fp16.safetensors", "Lineart SD1.5", ConditionType.LINEART, "lineart"),
        _sd15("control_v11p_sd15_scribble_fp16.safetensors", "Scribble SD1.5", ConditionType.SCRIBBLE, "scribble"),
        _sd15("control_v11p_sd15_seg_fp16.safetensors", "Segmentation SD1.5", ConditionType.SEMANTIC_SEG, "semantic_seg"),
        _sd15("control_v11p_sd15_normalbae_fp16.safetensors", "Normal BAE SD1.5", ConditionType.NORMALBAE, "normalbae"),
        _sd15("control_v11e_sd15_ip2p_fp16.safetensors", "InstructPix2Pix SD1.5", ConditionType.IP2P, None),
        _sd15("control_v1p_sd15_qrcode_monster.safetensors", "QR Code Monster SD1.5", ConditionType.QRCODE, None),
    ]
}

# Mode index expected by union models; -1 when a union model has no mode for the type
UNION_CONTROL_MODES: dict[ConditionType, int] = {
    ConditionType.CANNY: 0,
    ConditionType.TILE: 1,
    ConditionType.DEPTH: 2,
    ConditionType.BLUR: 3,
    ConditionType.OPENPOSE: 4,
    ConditionType.SCRIBBLE: 5,
    ConditionType.LINEART: 6,
    ConditionType.SOFTEDGE: 6,
    ConditionType.NORMALBAE: 7,
    ConditionType.SEMANTIC_SEG: 8,
}

DEFAULT_PREPROCESSORS: dict[ConditionType, str] = {t: t.value for t in ConditionType}
DEFAULT_PREPROCESSORS[ConditionType.DEPTH] = "depth_midas"


def get_conditioner(filename: str) -> ConditionerEntry | None:
    return CONDITIONER_CATALOG.get(filename)


def list_conditioners_by_family(family: ModelFamily | str) -> list[ConditionerEntry]:
    family = ModelFamily(family)
    return [c for c in CONDITIONER_CATALOG.values() if family in c.compatible_families]


def list_conditioners_by_type(condition_type: ConditionType | str) -> list[ConditionerEntry]:
    condition_type = ConditionType(condition_type)
    return [c for c in CONDITIONER_CATALOG.values() if condition_type in c.condition_types]


def find_best_conditioner(family: ModelFamily | str, condition_type: ConditionType | str) -> ConditionerEntry | None:
    """Best conditioner for a family and condition type; union models first."""
    family = ModelFamily(family)
    condition_type = ConditionType(condition_type)
    candidates = [
        c for c in CONDITIONER_CATALOG.values()
        if family in c.compatible_families and condition_type in c.condition_types
    ]
    for candidate in candidates:
        if candidate.is_union:
            return candidate
    return candidates[0] if candidates else None


def union_control_mode(condition_type: ConditionType | str) -> int:
    return UNION_CONTROL_MODES.get(ConditionType(condition_type), -1)
