"""Request and result types for configuration resolution."""

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from ..enums import ConfigSource, ModelFamily, TargetQuality
from ..models import AdapterSelection, ResolvedAdapterStack

# Fields whose origin layer is tracked in ResolvedConfig.sources
TRACKED_FIELDS = ("width", "height", "steps", "cfg", "sampler", "scheduler", "model", "model_family")


class SlotContext(BaseModel):
    """Reference to a panel slot in a page template."""

    template_id: str
    slot_id: str
    page_size: str | None = Field(default=None, description="Page size preset the template is laid out on")
    aspect_ratio: float | None = Field(default=None, gt=0, description="Known slot aspect ratio, skips the layout lookup")


class GenerationOverrides(BaseModel):
    """Explicit field values that take precedence over every preset.

    Values are validated on construction; a malformed override raises
    ``ValueError`` (pydantic's ``ValidationError``).
    """

    model_config = ConfigDict(extra="forbid")

    width: int | None = None
    height: int | None = None
    steps: int | None = None
    cfg: float | None = None
    sampler: str | None = None
    scheduler: str | None = None
    model: str | None = None
    negative_prompt: str | None = None
    adapters: list[AdapterSelection] | None = None

    @field_validator("width", "height", "steps")
    @classmethod
    def _positive_int(cls, value: int | None, info: ValidationInfo) -> int | None:
        if value is not None and value <= 0:
            raise ValueError(f"{info.field_name} must be positive")
        return value

    @field_validator("cfg")
    @classmethod
    def _positive_cfg(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("cfg must be positive")
        return value


class ResolutionOptions(BaseModel):
    """Everything a caller can supply to the engine; all fields optional."""

    size_preset: str | None = None
    quality_preset: str | None = None
    slot: SlotContext | None = None
    panel_id: str | None = Field(default=None, description="Caller's panel reference, carried through for logging")
    target_quality: TargetQuality | None = None
    overrides: GenerationOverrides | None = None


class ResolvedConfig(BaseModel):
    """Fully determined generation parameters with per-field provenance."""

    width: int
    height: int
    aspect_ratio: float
    steps: int
    cfg: float
    sampler: str
    scheduler: str
    model: str
    model_family: ModelFamily
    size_preset_used: str | None = None
    quality_preset_used: str | None = None
    hi_res_fix: bool = False
    upscale: bool = False
    negative_prompt: str = ""
    adapters: ResolvedAdapterStack = Field(default_factory=ResolvedAdapterStack)
    strategy_id: str
    sources: dict[str, ConfigSource]
