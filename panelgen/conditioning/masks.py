"""Regions that can be masked for inpainting, and their automatic detectors."""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from ..enums import ConditionType
from .types import Condition


class MaskRegion(str, Enum):
    HANDS = "hands"
    LEFT_HAND = "left_hand"
    RIGHT_HAND = "right_hand"
    FACE = "face"
    EYES = "eyes"
    MOUTH = "mouth"
    BACKGROUND = "background"
    FOREGROUND = "foreground"
    CLOTHING = "clothing"


class MaskPreset(BaseModel):
    model_config = ConfigDict(frozen=True)

    region: MaskRegion
    description: str
    detector: ConditionType | None = None

    @property
    def auto_supported(self) -> bool:
        return self.detector is not None


MASK_PRESETS: dict[MaskRegion, MaskPreset] = {
    p.region: p
    for p in [
        MaskPreset(region=MaskRegion.HANDS, description="Both hands region"),
        MaskPreset(region=MaskRegion.LEFT_HAND, description="Left hand only"),
        MaskPreset(region=MaskRegion.RIGHT_HAND, description="Right hand only"),
        # Pose detection includes face keypoints
        MaskPreset(region=MaskRegion.FACE, description="Face region", detector=ConditionType.OPENPOSE),
        MaskPreset(region=MaskRegion.EYES, description="Eyes region only"),
        MaskPreset(region=MaskRegion.MOUTH, description="Mouth region only"),
        MaskPreset(region=MaskRegion.BACKGROUND, description="Everything except the subject",
                   detector=ConditionType.DEPTH),
        MaskPreset(region=MaskRegion.FOREGROUND, description="Subject only (inverse of background)",
                   detector=ConditionType.DEPTH),
        MaskPreset(region=MaskRegion.CLOTHING, description="Clothing/outfit region"),
    ]
}


def list_mask_presets() -> list[MaskPreset]:
    return list(MASK_PRESETS.values())


def mask_condition(region: MaskRegion | str, source_image: str, strength: float | None = None) -> Condition:
    """Condition that lets the backend derive a mask for ``region``.

    Raises:
        ValueError: The region has no automatic detector; the caller must
            supply a mask.
    """
    preset = MASK_PRESETS[MaskRegion(region)]
    if preset.detector is None:
        raise ValueError(
            f"Auto-mask generation not supported for region: {preset.region.value}. "
            "Please provide a custom mask."
        )
    return Condition(type=preset.detector, source_image=source_image, strength=strength)
