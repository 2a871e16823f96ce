"""Multi-condition composer.

The generation backend enforces a single condition per request. The first
condition is sent as the primary one; every later condition contributes a
prompt hint instead of being enforced directly.
"""

import logging
from collections.abc import Sequence
from typing import Any

from .. import config
from ..enums import ConditionType
from ..models import ModelResolver, get_model_resolver
from .presets import CompositionPreset, get_composition_preset, list_composition_presets, presets_for_use_case
from .types import BundleCondition, Condition, ConditionBundle, Influence, RecommendedStrength

logger = logging.getLogger(__name__)

# Condition types the backend accepts natively
BACKEND_CONDITION_TYPES = frozenset({
    ConditionType.CANNY,
    ConditionType.DEPTH,
    ConditionType.OPENPOSE,
    ConditionType.LINEART,
    ConditionType.SCRIBBLE,
})
FALLBACK_CONDITION_TYPE = ConditionType.SCRIBBLE

PROMPT_HINTS: dict[ConditionType, str] = {
    ConditionType.OPENPOSE: "accurate pose",
    ConditionType.DEPTH: "proper depth",
    ConditionType.LINEART: "clean lines",
    ConditionType.CANNY: "precise edges",
    ConditionType.SCRIBBLE: "sketch composition",
    ConditionType.SOFTEDGE: "soft contours",
}

RECOMMENDED_STRENGTHS: dict[ConditionType, RecommendedStrength] = {
    ConditionType.CANNY: RecommendedStrength(
        min=0.3, max=1.2, default=0.7, notes="Lower for creative freedom, higher for exact edge following"
    ),
    ConditionType.DEPTH: RecommendedStrength(
        min=0.3, max=1.0, default=0.5, notes="Best combined with other conditions for spatial guidance"
    ),
    ConditionType.OPENPOSE: RecommendedStrength(
        min=0.5, max=1.0, default=0.85, notes="High strength for accurate pose, lower for flexible interpretation"
    ),
    ConditionType.LINEART: RecommendedStrength(
        min=0.5, max=1.2, default=0.8, notes="Higher values preserve line detail better"
    ),
    ConditionType.SCRIBBLE: RecommendedStrength(
        min=0.4, max=1.0, default=0.7, notes="Works well with rough sketches"
    ),
    ConditionType.SOFTEDGE: RecommendedStrength(
        min=0.3, max=0.9, default=0.5, notes="Subtle guidance, good for backgrounds"
    ),
}
DEFAULT_RECOMMENDED_STRENGTH = RecommendedStrength(
    min=0.3, max=1.0, default=0.7, notes="Adjust based on desired influence level"
)

HIGH_INFLUENCE_WARNING = "High total influence. Some conditions may fight each other."
VERY_HIGH_INFLUENCE_WARNING = (
    "Very high total influence. Consider reducing individual strengths to avoid artifacts."
)


def map_condition_type(condition_type: ConditionType | str) -> ConditionType:
    """Map a condition type onto the subset the backend supports."""
    condition_type = ConditionType(condition_type)
    if condition_type in BACKEND_CONDITION_TYPES:
        return condition_type
    if condition_type == ConditionType.SOFTEDGE:
        return ConditionType.LINEART
    return FALLBACK_CONDITION_TYPE


def recommended_strength(condition_type: ConditionType | str) -> RecommendedStrength:
    return RECOMMENDED_STRENGTHS.get(ConditionType(condition_type), DEFAULT_RECOMMENDED_STRENGTH)


def calculate_total_influence(conditions: Sequence[Condition]) -> Influence:
    """Sum condition strengths (1.0 when unset) and warn when the total is high."""
    # Rounded so strengths that add up to a threshold do not cross it
    total = round(sum(condition.effective_strength for condition in conditions), 6)
    warning = None
    if total > config.INFLUENCE_VERY_HIGH:
        warning = VERY_HIGH_INFLUENCE_WARNING
    elif total > config.INFLUENCE_HIGH:
        warning = HIGH_INFLUENCE_WARNING
    return Influence(total=total, warning=warning)


def build_prompt(prompt: str, conditions: Sequence[Condition]) -> str:
    """Append hints for every condition after the primary one."""
    hints: list[str] = []
    for condition in conditions[1:]:
        hint = PROMPT_HINTS.get(condition.type)
        if hint and hint not in hints:
            hints.append(hint)
    if not hints:
        return prompt
    return f"{prompt}, {', '.join(hints)}"


class ConditionComposer:
    """Validates and assembles conditions into one generation-ready bundle."""

    def __init__(self, resolver: ModelResolver | None = None):
        self.resolver = resolver if resolver is not None else get_model_resolver()

    def compose(
        self,
        prompt: str,
        conditions: Sequence[Condition | dict[str, Any]],
        model: str | None = None,
        negative_prompt: str = "",
    ) -> ConditionBundle:
        """Build a condition bundle.

        Args:
            prompt: Base prompt.
            conditions: One to five conditions; the first is primary.
            model: Checkpoint to check conditioner compatibility against.
            negative_prompt: Passed through unchanged.

        Raises:
            ValueError: Zero or more than five conditions, or a condition
                type with no compatible conditioner for ``model``.
        """
        conditions = [
            c if isinstance(c, Condition) else Condition.model_validate(c)
            for c in conditions
        ]
        if len(conditions) < config.MIN_CONDITIONS:
            raise ValueError("At least one condition required")
        if len(conditions) > config.MAX_CONDITIONS:
            raise ValueError(
                f"Maximum {config.MAX_CONDITIONS} conditions supported, got {len(conditions)}"
            )

        warnings: list[str] = []
        entries = [self._bundle_condition(condition, model, warnings) for condition in conditions]

        influence = calculate_total_influence(conditions)
        if influence.warning:
            warnings.append(influence.warning)
        if warnings:
            logger.info(f"Condition warnings: {warnings}")

        return ConditionBundle(
            prompt=build_prompt(prompt, conditions),
            negative_prompt=negative_prompt,
            model=model,
            primary=entries[0],
            conditions=entries,
            influence=influence,
            warnings=warnings,
        )

    def compose_with_preset(
        self,
        preset_id: str,
        reference_image: str,
        prompt: str,
        model: str | None = None,
        strengths: dict[ConditionType | str, float] | None = None,
        negative_prompt: str = "",
    ) -> ConditionBundle:
        """Compose every condition of a named preset from one reference image.

        ``strengths`` replaces the preset's default strength per condition type.

        Raises:
            ValueError: Unknown preset id.
        """
        preset = get_composition_preset(preset_id)
        if preset is None:
            raise ValueError(f"Unknown preset: {preset_id}")

        custom = {ConditionType(t): s for t, s in (strengths or {}).items()}
        conditions = [
            Condition(
                type=entry.type,
                source_image=reference_image,
                strength=custom.get(entry.type, entry.default_strength),
            )
            for entry in preset.conditions
        ]
        return self.compose(prompt, conditions, model=model, negative_prompt=negative_prompt)

    def _bundle_condition(self, condition: Condition, model: str | None, warnings: list[str]) -> BundleCondition:
        entry = BundleCondition(
            type=condition.type,
            backend_type=map_condition_type(condition.type),
            image=condition.source_image,
            strength=condition.effective_strength,
            start_percent=condition.start_percent,
            end_percent=condition.end_percent,
        )
        if model is None:
            return entry

        resolution = self.resolver.resolve_conditioner(model, condition.type)
        if not resolution.compatible:
            raise ValueError(resolution.error)
        warnings.extend(resolution.warnings)
        entry.conditioner = resolution.conditioner
        entry.preprocessor = resolution.preprocessor
        entry.control_mode = resolution.control_mode
        return entry

    # Pure lookups, exposed on the instance for callers holding a composer

    def calculate_total_influence(self, conditions: Sequence[Condition]) -> Influence:
        return calculate_total_influence(conditions)

    def recommended_strength(self, condition_type: ConditionType | str) -> RecommendedStrength:
        return recommended_strength(condition_type)

    def list_presets(self) -> list[CompositionPreset]:
        return list_composition_presets()

    def presets_for_use_case(self, use_case: str) -> list[CompositionPreset]:
        return presets_for_use_case(use_case)


_composer: ConditionComposer | None = None


def get_condition_composer() -> ConditionComposer:
    global _composer
    if _composer is None:
        _composer = ConditionComposer()
    return _composer


def reset_condition_composer() -> None:
    global _composer
    _composer = None
