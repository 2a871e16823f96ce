"""Cross-family compatibility sets."""

from ..enums import ModelFamily

# Families whose adapters a checkpoint of the key family can load
FAMILY_COMPATIBILITY: dict[ModelFamily, frozenset[ModelFamily]] = {
    ModelFamily.ILLUSTRIOUS: frozenset({ModelFamily.ILLUSTRIOUS, ModelFamily.SDXL}),
    ModelFamily.PONY: frozenset({ModelFamily.PONY, ModelFamily.SDXL}),
    ModelFamily.REALISTIC: frozenset({ModelFamily.REALISTIC, ModelFamily.SDXL}),
    ModelFamily.SDXL: frozenset({ModelFamily.SDXL}),
    ModelFamily.FLUX: frozenset({ModelFamily.FLUX}),
    ModelFamily.SD15: frozenset({ModelFamily.SD15}),
}

# SDXL architecture families; they share conditioner models
SDXL_COMPATIBLE_FAMILIES: frozenset[ModelFamily] = frozenset(
    {ModelFamily.SDXL, ModelFamily.ILLUSTRIOUS, ModelFamily.PONY, ModelFamily.REALISTIC}
)


def compatible_families(family: ModelFamily | str) -> frozenset[ModelFamily]:
    return FAMILY_COMPATIBILITY[ModelFamily(family)]
