"""Page layout geometry."""

from .templates import (
    PAGE_SIZES,
    PAGE_TEMPLATES,
    LayoutProvider,
    PageSize,
    PageTemplate,
    PanelSlot,
    SlotGeometry,
    TemplateLayoutProvider,
)

__all__ = [
    "PAGE_SIZES",
    "PAGE_TEMPLATES",
    "LayoutProvider",
    "PageSize",
    "PageTemplate",
    "PanelSlot",
    "SlotGeometry",
    "TemplateLayoutProvider",
]
