"""Named multi-condition composition patterns."""

from pydantic import BaseModel, ConfigDict

from ..enums import ConditionType


class PresetCondition(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: ConditionType
    default_strength: float


class CompositionPreset(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    conditions: tuple[PresetCondition, ...]


def _preset(id: str, name: str, description: str, *conditions: tuple[ConditionType, float]) -> CompositionPreset:
    return CompositionPreset(
        id=id,
        name=name,
        description=description,
        conditions=tuple(PresetCondition(type=t, default_strength=s) for t, s in conditions),
    )


COMPOSITION_PRESETS: dict[str, CompositionPreset] = {
    p.id: p
    for p in [
        _preset("pose_transfer", "Pose Transfer",
                "Transfer character pose from reference while changing content",
                (ConditionType.OPENPOSE, 0.9)),
        _preset("pose_depth", "Pose + Depth",
                "Maintain pose and spatial relationships",
                (ConditionType.OPENPOSE, 0.85), (ConditionType.DEPTH, 0.5)),
        _preset("character_consistency", "Character Consistency",
                "Maintain character pose and linework for panel sequences",
                (ConditionType.OPENPOSE, 0.8), (ConditionType.LINEART, 0.6)),
        _preset("lineart_color", "Lineart to Color",
                "Colorize line art while preserving details",
                (ConditionType.LINEART, 1.0)),
        _preset("scene_reconstruction", "Scene Reconstruction",
                "Reconstruct scene with different style from reference",
                (ConditionType.DEPTH, 0.7), (ConditionType.CANNY, 0.5)),
        _preset("detailed_pose", "Detailed Pose",
                "Full pose with hands and face for detailed character work",
                (ConditionType.OPENPOSE, 0.9)),
        _preset("sketch_to_render", "Sketch to Render",
                "Transform rough sketches into finished artwork",
                (ConditionType.SCRIBBLE, 0.8), (ConditionType.DEPTH, 0.4)),
        _preset("panel_continuity", "Panel Continuity",
                "Maintain visual continuity between comic panels",
                (ConditionType.OPENPOSE, 0.75), (ConditionType.DEPTH, 0.4), (ConditionType.SOFTEDGE, 0.3)),
    ]
}

_USE_CASES: dict[str, tuple[str, ...]] = {
    "pose": ("pose_transfer", "pose_depth", "detailed_pose"),
    "style": ("lineart_color", "scene_reconstruction"),
    "sketch": ("sketch_to_render", "lineart_color"),
    "continuity": ("panel_continuity", "character_consistency"),
    "detail": ("detailed_pose", "scene_reconstruction"),
}


def get_composition_preset(preset_id: str) -> CompositionPreset | None:
    return COMPOSITION_PRESETS.get(preset_id)


def list_composition_presets() -> list[CompositionPreset]:
    return list(COMPOSITION_PRESETS.values())


def presets_for_use_case(use_case: str) -> list[CompositionPreset]:
    """Presets suited to pose, style, sketch, continuity or detail work."""
    return [COMPOSITION_PRESETS[preset_id] for preset_id in _USE_CASES.get(use_case, ())]
