"""Adapter (LoRA) catalog, stack ordering and stack resolution."""

import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .. import config
from ..enums import AdapterCategory, ModelFamily, StackPosition
from .checkpoints import checkpoint_family
from .families import compatible_families

logger = logging.getLogger(__name__)


class StrengthRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: float
    recommended: float
    max: float


class AdapterEntry(BaseModel):
    """A known adapter file."""

    model_config = ConfigDict(frozen=True)

    filename: str
    name: str
    trigger: str | None = Field(default=None, description="Phrase the adapter responds to")
    compatible_families: tuple[ModelFamily, ...]
    category: AdapterCategory
    stack_position: StackPosition
    strength: StrengthRange
    notes: str = ""


class AdapterSelection(BaseModel):
    """A caller's request to apply an adapter."""

    name: str = Field(description="Adapter filename or display name")
    strength: float | None = Field(default=None, description="Applied strength; catalog recommendation when None")

    @field_validator("strength")
    @classmethod
    def _strength_in_range(cls, value: float | None) -> float | None:
        if value is not None and not (config.MIN_ADAPTER_STRENGTH <= value <= config.MAX_ADAPTER_STRENGTH):
            raise ValueError(
                f"adapter strength must be between {config.MIN_ADAPTER_STRENGTH:g} and {config.MAX_ADAPTER_STRENGTH:g}"
            )
        return value


class AppliedAdapter(BaseModel):
    adapter: AdapterEntry
    strength: float


class ResolvedAdapterStack(BaseModel):
    """Adapters in application order (first, middle, last) with applied strengths."""

    adapters: list[AppliedAdapter] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def filenames(self) -> list[str]:
        return [applied.adapter.filename for applied in self.adapters]

    def __len__(self) -> int:
        return len(self.adapters)


def _adapter(
    filename: str,
    name: str,
    trigger: str | None,
    families: tuple[ModelFamily, ...],
    category: AdapterCategory,
    position: StackPosition,
    strength: tuple[float, float, float],
    notes: str = "",
) -> AdapterEntry:
    return AdapterEntry(
        filename=filename,
        name=name,
        trigger=trigger,
        compatible_families=families,
        category=category,
        stack_position=position,
        strength=StrengthRange(min=strength[0], recommended=strength[1], max=strength[2]),
        notes=notes,
    )


_IL = ModelFamily.ILLUSTRIOUS
_XL = ModelFamily.SDXL
_PONY = ModelFamily.PONY
_FLUX = ModelFamily.FLUX
_STYLE, _QUALITY, _POSE, _CHAR, _CONCEPT = (
    AdapterCategory.STYLE,
    AdapterCategory.QUALITY,
    AdapterCategory.POSE,
    AdapterCategory.CHARACTER,
    AdapterCategory.CONCEPT,
)
_FIRST, _MIDDLE, _LAST = StackPosition.FIRST, StackPosition.MIDDLE, StackPosition.LAST

ADAPTER_CATALOG: dict[str, AdapterEntry] = {
    a.filename: a
    for a in [
        # Style
        _adapter("colorful_line_art_illustriousXL.safetensors", "Colorful Line Art",
                 "colorful line art style", (_IL, _XL), _STYLE, _MIDDLE, (0.4, 0.7, 1.2),
                 "Bold outlines with flat color, good for comic panels"),
        _adapter("illustr_style.safetensors", "Illustration Style",
                 "illustration style", (_IL, _XL), _STYLE, _MIDDLE, (0.4, 0.6, 0.9)),
        _adapter("tarot_illustration_style_illustriousXL-000025.safetensors", "Tarot Illustration Style",
                 "tarot card style, ornate border", (_IL, _XL), _STYLE, _MIDDLE, (0.5, 0.8, 1.0)),
        _adapter("flux_tarot_v1_lora.safetensors", "Flux Tarot",
                 "tarot card style", (_FLUX,), _STYLE, _MIDDLE, (0.5, 0.8, 1.0)),
        _adapter("pixelart.safetensors", "Pixel Art",
                 "pixel art style, pixelated", (_IL, _XL), _STYLE, _MIDDLE, (0.6, 0.8, 1.0)),
        _adapter("pochoir-fluxlora.safetensors", "Pochoir Style",
                 "pochoir style, stencil art", (_FLUX,), _STYLE, _MIDDLE, (0.5, 0.7, 1.0)),
        _adapter("cyberpunk-cksc-ilSDXL.safetensors", "Cyberpunk Style",
                 "cyberpunk style, neon lights, futuristic", (_IL, _XL), _STYLE, _MIDDLE, (0.5, 0.7, 1.0)),
        _adapter("cyberpunk-cksc-flux.safetensors", "Cyberpunk Style (Flux)",
                 "cyberpunk style, neon lights", (_FLUX,), _STYLE, _MIDDLE, (0.5, 0.7, 1.0)),
        _adapter("ral-bubblegum-sdxl.safetensors", "Bubblegum Colors",
                 "ral-bubblegum, pastel colors, pink", (_XL, _IL, _PONY), _STYLE, _MIDDLE, (0.4, 0.6, 0.9)),
        _adapter("ral-colorswirl-sdxl.safetensors", "Color Swirl",
                 "ral-colorswirl, swirling colors", (_XL, _IL, _PONY), _STYLE, _MIDDLE, (0.4, 0.6, 0.9)),
        _adapter("the-look-flux.safetensors", "The Look (Flux)",
                 "the look style", (_FLUX,), _STYLE, _MIDDLE, (0.4, 0.7, 1.0)),
        _adapter("LineDrawing03_CE_FLUX_AIT3k.safetensors", "Line Drawing (Flux)",
                 "line drawing style, sketch", (_FLUX,), _STYLE, _MIDDLE, (0.5, 0.7, 1.0)),
        # Quality
        _adapter("DetailerILv2-000008.safetensors", "Detailer IL v2",
                 None, (_IL,), _QUALITY, _LAST, (0.3, 0.5, 0.8), "Detail enhancement, apply last in stack"),
        _adapter("Face_Enhancer_Illustrious.safetensors", "Face Enhancer",
                 None, (_IL,), _QUALITY, _LAST, (0.3, 0.5, 0.8), "Improves face quality and details"),
        _adapter("ILXL_Realism_Slider_V.1.safetensors", "Realism Slider",
                 None, (_IL, _XL), _QUALITY, _LAST, (0.2, 0.4, 0.7), "Pushes output toward realism"),
        _adapter("Lightning-4steps-V1.0.safetensors", "Lightning 4-Step",
                 None, (_XL, _IL), _QUALITY, _LAST, (0.8, 1.0, 1.0), "Fast inference, use with 4 steps"),
        # Pose
        _adapter("PosingDynamicsILL.safetensors", "Posing Dynamics",
                 "dynamic pose", (_IL,), _POSE, _MIDDLE, (0.4, 0.7, 1.0)),
        _adapter("posing-dynamics-flux.safetensors", "Posing Dynamics (Flux)",
                 "dynamic pose", (_FLUX,), _POSE, _MIDDLE, (0.4, 0.7, 1.0)),
        # Character
        _adapter("Charizard_Pokemon_Illustrious.safetensors", "Charizard",
                 "charizard, pokemon", (_IL,), _CHAR, _FIRST, (0.6, 0.8, 1.0)),
        _adapter("DeathclawILL.safetensors", "Deathclaw",
                 "deathclaw, fallout", (_IL,), _CHAR, _FIRST, (0.6, 0.8, 1.0)),
        _adapter("judy_hopps_v3.safetensors", "Judy Hopps",
                 "judy hopps, rabbit, zootopia", (_IL, _XL, _PONY), _CHAR, _FIRST, (0.6, 0.8, 1.0)),
        # Concept
        _adapter("Egypt_IL.safetensors", "Egyptian Theme",
                 "ancient egypt, egyptian", (_IL,), _CONCEPT, _MIDDLE, (0.5, 0.7, 1.0)),
        _adapter("Classroom-IL.safetensors", "Classroom",
                 "classroom, school", (_IL,), _CONCEPT, _MIDDLE, (0.5, 0.7, 1.0)),
        _adapter("falloutpostsdxl.safetensors", "Fallout Post (SDXL)",
                 "fallout, post-apocalyptic", (_XL, _IL, _PONY), _CONCEPT, _MIDDLE, (0.5, 0.7, 1.0)),
        _adapter("pipGirlUIChibi.638V.safetensors", "Pip-Girl UI Chibi",
                 "pip-girl, fallout ui, chibi", (_IL, _XL), _CONCEPT, _MIDDLE, (0.5, 0.7, 1.0)),
    ]
}

_POSITION_ORDER = {StackPosition.FIRST: 0, StackPosition.MIDDLE: 1, StackPosition.LAST: 2}

# (category, lowercase name fragment) picked for each recommended-stack use case
_USE_CASE_PICKS = {
    "comic": (AdapterCategory.STYLE, "line"),
    "realistic": (AdapterCategory.QUALITY, "realis"),
    "anime": (AdapterCategory.STYLE, "illustr"),
    "general": (AdapterCategory.QUALITY, "detail"),
}


# =============================================================================
# Lookups
# =============================================================================

def get_adapter(filename: str) -> AdapterEntry | None:
    return ADAPTER_CATALOG.get(filename)


def find_adapter_by_name(name: str) -> AdapterEntry | None:
    """Find an adapter by display name or filename (case-insensitive)."""
    if name in ADAPTER_CATALOG:
        return ADAPTER_CATALOG[name]
    lower = name.lower()
    for adapter in ADAPTER_CATALOG.values():
        if adapter.name.lower() == lower or adapter.filename.lower() == lower:
            return adapter
    return None


def list_adapters_by_family(family: ModelFamily | str) -> list[AdapterEntry]:
    family = ModelFamily(family)
    return [a for a in ADAPTER_CATALOG.values() if family in a.compatible_families]


def list_adapters_by_category(category: AdapterCategory | str) -> list[AdapterEntry]:
    category = AdapterCategory(category)
    return [a for a in ADAPTER_CATALOG.values() if a.category == category]


# =============================================================================
# Compatibility and stacking
# =============================================================================

def compatible_adapters(checkpoint: str, family_override: ModelFamily | str | None = None) -> list[AdapterEntry]:
    """Adapters loadable by a checkpoint, including cross-family compatible ones."""
    allowed = compatible_families(checkpoint_family(checkpoint, family_override))
    return [a for a in ADAPTER_CATALOG.values() if allowed.intersection(a.compatible_families)]


def suggest_adapters(
    checkpoint: str,
    categories: list[AdapterCategory | str] | None = None,
    family_override: ModelFamily | str | None = None,
) -> list[AdapterEntry]:
    adapters = compatible_adapters(checkpoint, family_override)
    if not categories:
        return adapters
    wanted = {AdapterCategory(c) for c in categories}
    return [a for a in adapters if a.category in wanted]


def build_stack(adapters: list[AdapterEntry]) -> list[AdapterEntry]:
    """Order adapters first, middle, last; equal positions keep their input order."""
    return sorted(adapters, key=lambda a: _POSITION_ORDER[a.stack_position])


def recommended_stack(checkpoint: str, use_case: str = "general") -> list[AdapterEntry]:
    """A small curated stack for a use case (comic, realistic, anime or general).

    Picks one adapter matching the use case when the checkpoint has one, then
    adds a quality adapter that is not already in the stack.
    """
    compatible = compatible_adapters(checkpoint)
    category, fragment = _USE_CASE_PICKS.get(use_case, _USE_CASE_PICKS["general"])

    stack: list[AdapterEntry] = []
    pick = next(
        (a for a in compatible if a.category == category and fragment in a.name.lower()),
        None,
    )
    if pick is not None:
        stack.append(pick)

    quality = next(
        (a for a in compatible if a.category == AdapterCategory.QUALITY and a not in stack),
        None,
    )
    if quality is not None:
        stack.append(quality)

    return build_stack(stack)


def extract_trigger_words(filenames: list[str]) -> list[str]:
    """Trigger phrases of the named adapters, in catalog order.

    Unknown filenames and adapters without a trigger are skipped.
    """
    wanted = set(filenames)
    return [
        adapter.trigger
        for filename, adapter in ADAPTER_CATALOG.items()
        if filename in wanted and adapter.trigger
    ]


def resolve_adapter_stack(
    checkpoint: str,
    selections: list[AdapterSelection],
    family_override: ModelFamily | str | None = None,
) -> ResolvedAdapterStack:
    """Turn adapter selections into an ordered stack for a checkpoint.

    Unknown and incompatible selections are left out with a warning.
    """
    family = checkpoint_family(checkpoint, family_override)
    allowed = compatible_families(family)
    warnings: list[str] = []
    chosen: list[tuple[AdapterEntry, float]] = []

    for selection in selections:
        adapter = find_adapter_by_name(selection.name)
        if adapter is None:
            warnings.append(f"Adapter {selection.name} not in catalog; skipped.")
            continue
        if any(adapter.filename == seen.filename for seen, _ in chosen):
            warnings.append(f"Adapter {adapter.name} selected more than once; using the first selection.")
            continue
        if not allowed.intersection(adapter.compatible_families):
            families = ", ".join(f.value for f in adapter.compatible_families)
            warnings.append(
                f"Adapter {adapter.name} is not compatible with {family.value} models "
                f"(compatible families: {families}); skipped."
            )
            continue
        strength = selection.strength if selection.strength is not None else adapter.strength.recommended
        if not adapter.strength.min <= strength <= adapter.strength.max:
            warnings.append(
                f"Adapter {adapter.name} strength {strength:g} is outside its recommended range "
                f"{adapter.strength.min:g}-{adapter.strength.max:g}."
            )
        chosen.append((adapter, strength))

    strengths = {adapter.filename: strength for adapter, strength in chosen}
    ordered = build_stack([adapter for adapter, _ in chosen])
    for warning in warnings:
        logger.warning(warning)
    return ResolvedAdapterStack(
        adapters=[AppliedAdapter(adapter=a, strength=strengths[a.filename]) for a in ordered],
        warnings=warnings,
    )
