"""Page templates and the layout provider that resolves slot geometry.

Slot rectangles are stored as percentages of the page, so the same template
can be laid out on any page size.
"""

import logging
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from .. import config

logger = logging.getLogger(__name__)


class PageSize(BaseModel):
    """A physical or screen page size in pixels."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    dpi: int = 300


class PanelSlot(BaseModel):
    """A panel rectangle in percent of the page."""

    model_config = ConfigDict(frozen=True)

    id: str
    x: float
    y: float
    width: float = Field(gt=0, le=100)
    height: float = Field(gt=0, le=100)
    z_index: int = 0


class PageTemplate(BaseModel):
    """A named page layout."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    gutter: float = 2
    margin: float = 2
    aspect_ratio: float = 0.65
    slots: list[PanelSlot] = Field(default_factory=list)

    def get_slot(self, slot_id: str) -> PanelSlot | None:
        for slot in self.slots:
            if slot.id == slot_id:
                return slot
        return None


class SlotGeometry(BaseModel):
    """A slot resolved against a page size."""

    template_id: str
    slot_id: str
    page_size: str
    pixel_width: float = Field(description="Slot width on the page in pixels")
    pixel_height: float = Field(description="Slot height on the page in pixels")
    area_weight: float = Field(description="Fraction of the page area covered by the slot")

    @property
    def aspect_ratio(self) -> float:
        return self.pixel_width / self.pixel_height


class LayoutProvider(Protocol):
    """Source of slot geometry for sizing strategies."""

    def slot_geometry(
        self, template_id: str, slot_id: str, page_size: str | None = None
    ) -> SlotGeometry | None: ...

    def template_slot_ids(self, template_id: str) -> list[str]: ...


# =============================================================================
# Built-in tables
# =============================================================================
PAGE_SIZES: dict[str, PageSize] = {
    p.id: p
    for p in [
        PageSize(id="comic_standard", name="US Comic (6.625 x 10.25 in)", width=1988, height=3075),
        PageSize(id="comic_digest", name="Digest (5.5 x 8.5 in)", width=1650, height=2550),
        PageSize(id="manga_b6", name="Manga B6 (5 x 7 in)", width=1500, height=2100),
        PageSize(id="manga_tankoubon", name="Tankoubon (5.04 x 7.17 in)", width=1512, height=2151),
        PageSize(id="web_hd", name="Web HD (1080 x 1920)", width=1080, height=1920, dpi=72),
        PageSize(id="web_4k", name="Web 4K (2160 x 3840)", width=2160, height=3840, dpi=72),
        PageSize(id="spread_comic", name="Comic Spread (13.25 x 10.25 in)", width=3975, height=3075),
    ]
}


def _slots(*rows: tuple) -> list[PanelSlot]:
    return [
        PanelSlot(id=row[0], x=row[1], y=row[2], width=row[3], height=row[4], z_index=row[5] if len(row) > 5 else 0)
        for row in rows
    ]


PAGE_TEMPLATES: dict[str, PageTemplate] = {
    t.id: t
    for t in [
        PageTemplate(
            id="full-page",
            name="Full Page",
            description="Single panel filling the entire page",
            gutter=0,
            slots=_slots(("main", 2, 2, 96, 96)),
        ),
        PageTemplate(
            id="two-vertical",
            name="Two Vertical",
            description="Two panels stacked vertically (50/50 split)",
            slots=_slots(("top", 2, 2, 96, 47), ("bottom", 2, 51, 96, 47)),
        ),
        PageTemplate(
            id="two-horizontal",
            name="Two Horizontal",
            description="Two panels side by side",
            slots=_slots(("left", 2, 2, 47, 96), ("right", 51, 2, 47, 96)),
        ),
        PageTemplate(
            id="three-top-heavy",
            name="Three (Top Heavy)",
            description="Large panel on top, two smaller panels below",
            slots=_slots(
                ("top", 2, 2, 96, 60),
                ("bottom-left", 2, 64, 47, 34),
                ("bottom-right", 51, 64, 47, 34),
            ),
        ),
        PageTemplate(
            id="three-bottom-heavy",
            name="Three (Bottom Heavy)",
            description="Two smaller panels on top, large panel below",
            slots=_slots(
                ("top-left", 2, 2, 47, 34),
                ("top-right", 51, 2, 47, 34),
                ("bottom", 2, 38, 96, 60),
            ),
        ),
        PageTemplate(
            id="four-grid",
            name="Four Grid",
            description="Four equal panels in a 2x2 grid",
            slots=_slots(
                ("top-left", 2, 2, 47, 47),
                ("top-right", 51, 2, 47, 47),
                ("bottom-left", 2, 51, 47, 47),
                ("bottom-right", 51, 51, 47, 47),
            ),
        ),
        PageTemplate(
            id="six-grid",
            name="Six Grid",
            description="Six panels in a classic 2x3 comic grid",
            slots=_slots(
                ("row1-left", 2, 2, 47, 30),
                ("row1-right", 51, 2, 47, 30),
                ("row2-left", 2, 34, 47, 30),
                ("row2-right", 51, 34, 47, 30),
                ("row3-left", 2, 66, 47, 32),
                ("row3-right", 51, 66, 47, 32),
            ),
        ),
        PageTemplate(
            id="nine-grid",
            name="Nine Grid",
            description="Nine panels in a 3x3 grid",
            gutter=1.5,
            slots=_slots(
                ("r1c1", 2, 2, 30.67, 30.67),
                ("r1c2", 34.17, 2, 30.67, 30.67),
                ("r1c3", 66.33, 2, 31.67, 30.67),
                ("r2c1", 2, 34.17, 30.67, 30.67),
                ("r2c2", 34.17, 34.17, 30.67, 30.67),
                ("r2c3", 66.33, 34.17, 31.67, 30.67),
                ("r3c1", 2, 66.33, 30.67, 31.67),
                ("r3c2", 34.17, 66.33, 30.67, 31.67),
                ("r3c3", 66.33, 66.33, 31.67, 31.67),
            ),
        ),
        PageTemplate(
            id="cinematic",
            name="Cinematic",
            description="Three widescreen panels for cinematic storytelling",
            slots=_slots(
                ("top", 2, 2, 96, 30),
                ("middle", 2, 34, 96, 30),
                ("bottom", 2, 66, 96, 32),
            ),
        ),
        PageTemplate(
            id="action",
            name="Action",
            description="Dynamic asymmetric layout for action sequences",
            gutter=1.5,
            slots=_slots(
                ("hero", 2, 2, 60, 55),
                ("top-right", 63.5, 2, 34.5, 26.5),
                ("mid-right", 63.5, 30, 34.5, 27),
                ("bottom-left", 2, 58.5, 47, 39.5),
                ("bottom-right", 50.5, 58.5, 47.5, 39.5),
            ),
        ),
        PageTemplate(
            id="splash-insets",
            name="Splash with Insets",
            description="Large splash panel with small inset panels",
            gutter=0,
            margin=0,
            slots=_slots(
                ("splash", 0, 0, 100, 100),
                ("inset-1", 3, 3, 25, 20, 1),
                ("inset-2", 72, 3, 25, 20, 1),
                ("inset-3", 3, 77, 35, 20, 1),
            ),
        ),
    ]
}


class TemplateLayoutProvider:
    """Layout provider backed by page template and page size tables."""

    def __init__(
        self,
        templates: dict[str, PageTemplate] | None = None,
        page_sizes: dict[str, PageSize] | None = None,
        default_page_size: str | None = None,
    ):
        self._templates = templates if templates is not None else PAGE_TEMPLATES
        self._page_sizes = page_sizes if page_sizes is not None else PAGE_SIZES
        self.default_page_size = default_page_size or config.default_page_size()
        if self.default_page_size not in self._page_sizes:
            logger.warning(f"Unknown default page size '{self.default_page_size}', using '{config.DEFAULT_PAGE_SIZE}'")
            self.default_page_size = config.DEFAULT_PAGE_SIZE

    def get_template(self, template_id: str) -> PageTemplate | None:
        return self._templates.get(template_id)

    def list_templates(self) -> list[PageTemplate]:
        return list(self._templates.values())

    def get_page_size(self, page_size_id: str | None) -> PageSize:
        """Get a page size, falling back to the default for unknown ids."""
        if page_size_id and page_size_id in self._page_sizes:
            return self._page_sizes[page_size_id]
        if page_size_id:
            logger.warning(f"Unknown page size '{page_size_id}', using '{self.default_page_size}'")
        return self._page_sizes[self.default_page_size]

    def template_slot_ids(self, template_id: str) -> list[str]:
        template = self.get_template(template_id)
        if template is None:
            return []
        return [slot.id for slot in template.slots]

    def slot_geometry(
        self, template_id: str, slot_id: str, page_size: str | None = None
    ) -> SlotGeometry | None:
        """Resolve a slot to pixel geometry on a page, or None if unknown."""
        template = self.get_template(template_id)
        if template is None:
            return None
        slot = template.get_slot(slot_id)
        if slot is None:
            return None

        page = self.get_page_size(page_size)
        return SlotGeometry(
            template_id=template_id,
            slot_id=slot_id,
            page_size=page.id,
            pixel_width=slot.width / 100 * page.width,
            pixel_height=slot.height / 100 * page.height,
            area_weight=(slot.width * slot.height) / 10000,
        )
