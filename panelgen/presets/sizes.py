"""Size preset catalog.

Each preset carries an aspect ratio and per-family pixel dimensions. The
``sdxl`` dimension table is grid aligned (multiples of 64, 0.4-1.6 MP);
``sd15`` and ``flux`` follow their own native resolutions.
"""

from pydantic import BaseModel, ConfigDict, Field

from ..enums import DimensionKey, SizeCategory


class Dimensions(BaseModel):
    """Pixel dimensions for one dimension key."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(gt=0)
    height: int = Field(gt=0)

    @property
    def pixels(self) -> int:
        return self.width * self.height

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


class SizePreset(BaseModel):
    """A named image size with dimensions for each model family."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique preset identifier")
    name: str = Field(description="Display name")
    aspect_ratio: float = Field(gt=0, description="Nominal width / height")
    category: SizeCategory = Field(description="Declared catalog section")
    dimensions: dict[DimensionKey, Dimensions] = Field(description="Dimensions per dimension key")
    suggested_uses: list[str] = Field(default_factory=list, description="Use-case tags")

    def dimensions_for(self, key: DimensionKey | str) -> Dimensions:
        return self.dimensions[DimensionKey(key)]


def _preset(
    id: str,
    name: str,
    aspect_ratio: float,
    category: SizeCategory,
    sdxl: tuple[int, int],
    sd15: tuple[int, int],
    flux: tuple[int, int],
    uses: list[str],
) -> SizePreset:
    return SizePreset(
        id=id,
        name=name,
        aspect_ratio=aspect_ratio,
        category=category,
        dimensions={
            DimensionKey.SDXL: Dimensions(width=sdxl[0], height=sdxl[1]),
            DimensionKey.SD15: Dimensions(width=sd15[0], height=sd15[1]),
            DimensionKey.FLUX: Dimensions(width=flux[0], height=flux[1]),
        },
        suggested_uses=uses,
    )


# =============================================================================
# Catalog (declaration order is the tie-break order for lookups)
# =============================================================================
SIZE_PRESETS: dict[str, SizePreset] = {
    p.id: p
    for p in [
        # Square
        _preset("square_1x1", "Square (1:1)", 1.0, SizeCategory.SQUARE,
                (1024, 1024), (512, 512), (1024, 1024),
                ["avatar", "icon", "thumbnail", "profile"]),
        # Portrait
        _preset("portrait_3x4", "Portrait (3:4)", 0.75, SizeCategory.PORTRAIT,
                (768, 1024), (384, 512), (768, 1024),
                ["character", "full-body", "standard-panel"]),
        _preset("portrait_2x3", "Portrait (2:3)", 0.667, SizeCategory.PORTRAIT,
                (832, 1216), (341, 512), (832, 1248),
                ["comic-panel", "page", "poster"]),
        _preset("portrait_9x16", "Portrait (9:16)", 0.5625, SizeCategory.PORTRAIT,
                (768, 1344), (288, 512), (720, 1280),
                ["mobile", "story", "vertical-video"]),
        _preset("portrait_1x2", "Portrait (1:2)", 0.5, SizeCategory.PORTRAIT,
                (704, 1408), (256, 512), (640, 1280),
                ["tall-panel", "vertical-strip"]),
        # Landscape
        _preset("landscape_4x3", "Landscape (4:3)", 1.333, SizeCategory.LANDSCAPE,
                (1024, 768), (512, 384), (1024, 768),
                ["scene", "establishing-shot", "dialog"]),
        _preset("landscape_3x2", "Landscape (3:2)", 1.5, SizeCategory.LANDSCAPE,
                (1216, 832), (512, 341), (1248, 832),
                ["cinematic", "wide-panel", "photography"]),
        _preset("landscape_16x9", "Landscape (16:9)", 1.778, SizeCategory.LANDSCAPE,
                (1344, 768), (512, 288), (1280, 720),
                ["cinematic-wide", "banner", "video-frame"]),
        _preset("landscape_21x9", "Ultra-wide (21:9)", 2.333, SizeCategory.LANDSCAPE,
                (1536, 640), (512, 219), (1344, 576),
                ["panoramic", "establishing", "ultra-wide"]),
        _preset("landscape_2x1", "Double-wide (2:1)", 2.0, SizeCategory.LANDSCAPE,
                (1408, 704), (512, 256), (1280, 640),
                ["horizontal-strip", "spread"]),
        # Comic
        _preset("comic_full_page", "Comic Full Page", 0.65, SizeCategory.COMIC,
                (832, 1280), (333, 512), (832, 1280),
                ["full-page", "splash", "cover"]),
        _preset("comic_half_horizontal", "Comic Half Page (Horizontal)", 1.3, SizeCategory.COMIC,
                (1024, 768), (512, 394), (1024, 787),
                ["half-page", "wide-panel", "action-strip"]),
        _preset("comic_third_vertical", "Comic Vertical Third", 0.48, SizeCategory.COMIC,
                (640, 1344), (246, 512), (640, 1344),
                ["vertical-strip", "side-panel", "action-sequence"]),
        _preset("comic_sixth_grid", "Comic Grid Panel (1/6)", 0.97, SizeCategory.COMIC,
                (960, 1024), (496, 512), (1024, 1056),
                ["grid-panel", "six-grid", "four-grid"]),
        # Manga
        _preset("manga_full_page", "Manga Full Page", 0.71, SizeCategory.MANGA,
                (832, 1152), (363, 512), (832, 1168),
                ["manga-page", "manga-splash"]),
        # Social
        _preset("instagram_square", "Instagram Square", 1.0, SizeCategory.SOCIAL,
                (1024, 1024), (512, 512), (1080, 1080),
                ["instagram", "social-square"]),
        _preset("instagram_portrait", "Instagram Portrait (4:5)", 0.8, SizeCategory.SOCIAL,
                (896, 1152), (410, 512), (864, 1080),
                ["instagram-portrait", "social-portrait"]),
    ]
}

# Categories that are assigned by declaration rather than by aspect ratio
_DECLARED_CATEGORIES = {SizeCategory.COMIC, SizeCategory.MANGA, SizeCategory.SOCIAL}
_SQUARE_BAND = 0.02


def get_size_preset(preset_id: str) -> SizePreset | None:
    """Get a size preset by id, or None if it does not exist."""
    return SIZE_PRESETS.get(preset_id)


def list_size_presets() -> list[SizePreset]:
    return list(SIZE_PRESETS.values())


def find_closest_preset(aspect_ratio: float, tolerance: float = 0.05) -> SizePreset | None:
    """Find the preset whose aspect ratio is closest to ``aspect_ratio``.

    Closeness is the relative difference ``|ratio - preset| / preset``. Only
    presets within ``tolerance`` qualify; on a tie the earlier catalog entry
    wins. Returns None when nothing qualifies or the ratio is not positive.
    """
    if aspect_ratio <= 0:
        return None

    best: SizePreset | None = None
    best_diff = float("inf")
    for preset in SIZE_PRESETS.values():
        diff = abs(aspect_ratio - preset.aspect_ratio) / preset.aspect_ratio
        if diff <= tolerance and diff < best_diff:
            best = preset
            best_diff = diff
    return best


def find_presets_for_use_case(use_case: str) -> list[SizePreset]:
    """Presets whose suggested uses contain ``use_case`` (case-insensitive)."""
    needle = use_case.lower()
    return [
        preset for preset in SIZE_PRESETS.values()
        if any(needle in use.lower() for use in preset.suggested_uses)
    ]


def classify_aspect_ratio(aspect_ratio: float) -> SizeCategory:
    if abs(aspect_ratio - 1.0) <= _SQUARE_BAND:
        return SizeCategory.SQUARE
    return SizeCategory.PORTRAIT if aspect_ratio < 1.0 else SizeCategory.LANDSCAPE


def get_presets_by_category() -> dict[SizeCategory, list[SizePreset]]:
    """Partition every preset into exactly one category bucket.

    Comic, manga and social presets keep their declared section; every other
    preset is bucketed by its aspect ratio.
    """
    groups: dict[SizeCategory, list[SizePreset]] = {category: [] for category in SizeCategory}
    for preset in SIZE_PRESETS.values():
        if preset.category in _DECLARED_CATEGORIES:
            groups[preset.category].append(preset)
        else:
            groups[classify_aspect_ratio(preset.aspect_ratio)].append(preset)
    return groups
