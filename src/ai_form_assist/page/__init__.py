"""Page adapters for live and static documents."""

from ai_form_assist.page.adapter import (
    BoundingBox,
    ElementInfo,
    FetchResult,
    IndicatorBadge,
    PageAdapter,
    SelectOption,
)
from ai_form_assist.page.static import StaticPageAdapter

__all__ = [
    "BoundingBox", "ElementInfo", "FetchResult", "IndicatorBadge",
    "PageAdapter", "SelectOption", "StaticPageAdapter",
]
