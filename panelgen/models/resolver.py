"""Resolves and validates conditioners and adapters for a checkpoint."""

from functools import lru_cache

from pydantic import BaseModel, Field

from ..enums import ConditionType, ModelFamily
from .adapters import (
    AdapterEntry,
    AdapterSelection,
    ResolvedAdapterStack,
    compatible_adapters,
    extract_trigger_words,
    get_adapter,
    recommended_stack,
    resolve_adapter_stack,
)
from .checkpoints import CheckpointEntry, checkpoint_family, get_checkpoint
from .conditioners import (
    CONDITIONER_CATALOG,
    DEFAULT_PREPROCESSORS,
    ConditionerEntry,
    find_best_conditioner,
    list_conditioners_by_family,
    union_control_mode,
)


class ConditionerResolution(BaseModel):
    compatible: bool
    conditioner: str | None = None
    preprocessor: str | None = None
    control_mode: int | None = Field(default=None, description="Union model mode index")
    warnings: list[str] = Field(default_factory=list)
    error: str | None = None


class ValidationResult(BaseModel):
    valid: bool
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)


class FullCompatibility(BaseModel):
    checkpoint: CheckpointEntry
    conditioners: list[ConditionerEntry]
    adapters: list[AdapterEntry]
    warnings: list[str] = Field(default_factory=list)


class ModelResolver:
    """Answers which conditioners and adapters work with a checkpoint."""

    def family_for(self, checkpoint: str) -> ModelFamily:
        return checkpoint_family(checkpoint)

    def resolve_conditioner(
        self, checkpoint: str, condition_type: ConditionType | str
    ) -> ConditionerResolution:
        """Pick the conditioner, preprocessor and union mode for a condition type."""
        family = self.family_for(checkpoint)
        condition_type = ConditionType(condition_type)
        conditioner = find_best_conditioner(family, condition_type)
        if conditioner is None:
            return ConditionerResolution(
                compatible=False,
                error=f"No conditioner found for {condition_type.value} compatible with {family.value} models.",
            )

        result = ConditionerResolution(
            compatible=True,
            conditioner=conditioner.filename,
            preprocessor=conditioner.preprocessor or DEFAULT_PREPROCESSORS[condition_type],
        )
        if conditioner.is_union:
            mode = union_control_mode(condition_type)
            if mode >= 0:
                result.control_mode = mode
            else:
                result.warnings.append(
                    f"Condition type {condition_type.value} may not be fully supported by the union model."
                )
        elif family != ModelFamily.SD15:
            result.warnings.append(
                f"Using dedicated {condition_type.value} model. Consider a union conditioner instead."
            )
        return result

    def is_compatible(self, checkpoint: str, condition_type: ConditionType | str) -> bool:
        return self.resolve_conditioner(checkpoint, condition_type).compatible

    def list_available_condition_types(self, checkpoint: str) -> list[ConditionType]:
        types: list[ConditionType] = []
        for conditioner in list_conditioners_by_family(self.family_for(checkpoint)):
            for condition_type in conditioner.condition_types:
                if condition_type not in types:
                    types.append(condition_type)
        return types

    def full_compatibility(self, checkpoint: str) -> FullCompatibility:
        entry = get_checkpoint(checkpoint)
        if entry is None:
            entry = CheckpointEntry(filename=checkpoint, family=self.family_for(checkpoint))

        conditioners = list_conditioners_by_family(entry.family)
        warnings: list[str] = []
        if not conditioners:
            warnings.append(f"No conditioners found for {entry.family.value} family.")
        elif entry.family != ModelFamily.SD15 and not any(c.is_union for c in conditioners):
            warnings.append(f"No union conditioner found for {entry.family.value}.")

        return FullCompatibility(
            checkpoint=entry,
            conditioners=conditioners,
            adapters=compatible_adapters(checkpoint, entry.family),
            warnings=warnings,
        )

    def validate_conditioner(self, checkpoint: str, conditioner_filename: str) -> ValidationResult:
        family = self.family_for(checkpoint)
        conditioner = CONDITIONER_CATALOG.get(conditioner_filename)
        if conditioner is None:
            return ValidationResult(valid=False, error=f"Unknown conditioner: {conditioner_filename}")
        if family not in conditioner.compatible_families:
            families = ", ".join(f.value for f in conditioner.compatible_families)
            return ValidationResult(
                valid=False,
                error=f"Conditioner {conditioner.name} is not compatible with {family.value} models. "
                      f"Compatible families: {families}",
            )
        return ValidationResult(valid=True)

    def validate_adapter(self, checkpoint: str, adapter_filename: str) -> ValidationResult:
        """Check an adapter against a checkpoint; unknown adapters pass with a warning."""
        family = self.family_for(checkpoint)
        adapter = get_adapter(adapter_filename)
        if adapter is None:
            return ValidationResult(
                valid=True,
                warnings=[f"Adapter {adapter_filename} not in catalog. Compatibility unknown."],
            )
        if adapter not in compatible_adapters(checkpoint):
            families = ", ".join(f.value for f in adapter.compatible_families)
            return ValidationResult(
                valid=False,
                error=f"Adapter {adapter.name} is not compatible with {family.value} models. "
                      f"Compatible families: {families}",
            )
        return ValidationResult(valid=True)

    def recommended_adapter_stack(self, checkpoint: str, use_case: str = "general") -> list[AdapterEntry]:
        return recommended_stack(checkpoint, use_case)

    def adapter_stack(self, checkpoint: str, selections: list[AdapterSelection]) -> ResolvedAdapterStack:
        return resolve_adapter_stack(checkpoint, selections)

    def trigger_words(self, adapter_filenames: list[str]) -> list[str]:
        return extract_trigger_words(adapter_filenames)


@lru_cache(maxsize=1)
def get_model_resolver() -> ModelResolver:
    """Process-wide resolver, created on first use."""
    return ModelResolver()


def reset_model_resolver() -> None:
    get_model_resolver.cache_clear()
