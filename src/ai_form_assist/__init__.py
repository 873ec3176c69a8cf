"""
AI Form Assist: fills web form fields with values from a generation service.

The engine resolves which fields to fill, collects page context for the
generation service and writes the returned values back with type-aware
semantics. All page access goes through a page adapter, so the same engine
drives a live Playwright page or a static HTML document.
"""

__version__ = "0.1.0"

from ai_form_assist.core.models import Configuration, TargetDescriptor, TargetType
from ai_form_assist.engine.filler import FieldFiller
from ai_form_assist.page.adapter import PageAdapter
from ai_form_assist.page.static import StaticPageAdapter
from ai_form_assist.session import AssistSession

__all__ = [
    "AssistSession",
    "Configuration",
    "FieldFiller",
    "PageAdapter",
    "StaticPageAdapter",
    "TargetDescriptor",
    "TargetType",
]
