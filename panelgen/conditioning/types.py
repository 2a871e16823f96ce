"""Condition inputs and the bundle handed to the generation dispatch layer."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .. import config
from ..enums import ConditionType

DEFAULT_STRENGTH = 1.0


class Condition(BaseModel):
    """One conditioning image with its strength and active step range."""

    type: ConditionType
    source_image: str = Field(description="Path or reference of the conditioning image")
    strength: float | None = Field(default=None, description="Defaults to 1.0 when not set")
    start_percent: float = Field(default=0.0, ge=0.0, le=1.0)
    end_percent: float = Field(default=1.0, ge=0.0, le=1.0)

    @field_validator("strength")
    @classmethod
    def _strength_in_range(cls, value: float | None) -> float | None:
        if value is not None and not (0.0 <= value <= config.MAX_CONDITION_STRENGTH):
            raise ValueError(f"condition strength must be between 0 and {config.MAX_CONDITION_STRENGTH:g}")
        return value

    @property
    def effective_strength(self) -> float:
        return DEFAULT_STRENGTH if self.strength is None else self.strength


class RecommendedStrength(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: float
    max: float
    default: float
    notes: str


class Influence(BaseModel):
    total: float
    warning: str | None = None


class BundleCondition(BaseModel):
    """A condition as forwarded to the backend."""

    type: ConditionType
    backend_type: ConditionType = Field(description="Type the backend actually supports")
    image: str
    strength: float
    start_percent: float = 0.0
    end_percent: float = 1.0
    conditioner: str | None = None
    preprocessor: str | None = None
    control_mode: int | None = None


class ConditionBundle(BaseModel):
    """Validated conditions ready for a single generation request."""

    prompt: str
    negative_prompt: str = ""
    model: str | None = None
    primary: BundleCondition
    conditions: list[BundleCondition]
    influence: Influence
    warnings: list[str] = Field(default_factory=list)
