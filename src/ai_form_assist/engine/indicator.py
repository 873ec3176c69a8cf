"""Transient confirmation badge shown next to filled fields."""

import asyncio
from typing import Any, Dict, Optional, Set

from ai_form_assist.config import settings
from ai_form_assist.page.adapter import BoundingBox, IndicatorBadge, PageAdapter
from ai_form_assist.utils.logging import get_logger

logger = get_logger(__name__)

INDICATOR_STYLE = (
    "position: absolute; background: #4CAF50; color: white; padding: 2px 6px; "
    "border-radius: 3px; font-size: 12px; z-index: 10000; pointer-events: none; "
    "font-family: Arial, sans-serif;"
)


class IndicatorPresenter:
    """
    Draws a short-lived badge at the top-right corner of a filled element.
    
    Purely cosmetic: ``show`` never raises and never waits for the badge to
    expire. Removal runs as a background task on the event loop.
    """
    
    def __init__(
        self,
        page: PageAdapter,
        text: Optional[str] = None,
        class_name: Optional[str] = None,
        duration_ms: Optional[int] = None
    ):
        self.page = page
        self.text = settings.indicator_text if text is None else text
        self.class_name = settings.indicator_class if class_name is None else class_name
        self.duration_ms = settings.indicator_duration_ms if duration_ms is None else duration_ms
        self.logger = logger.bind(component="indicator")
        self._pending: Set[asyncio.Task] = set()
        self._badges: Dict[int, Any] = {}
    
    @property
    def pending_count(self) -> int:
        return len(self._badges)
    
    async def show(self, element: Any) -> None:
        """Place a badge next to ``element`` and schedule its removal."""
        try:
            await self.page.remove_sibling_indicators(element, self.class_name)
            
            box = await self.page.get_bounding_box(element) or BoundingBox(0, 0, 0, 0)
            scroll_x, scroll_y = await self.page.get_scroll_offset()
            badge = IndicatorBadge(
                text=self.text,
                class_name=self.class_name,
                left=box.right + scroll_x - 30,
                top=box.top + scroll_y - 5,
                style=INDICATOR_STYLE,
            )
            handle = await self.page.insert_indicator(badge)
        except Exception as e:
            self.logger.debug("Indicator could not be shown", error=str(e))
            return
        
        self._badges[id(handle)] = handle
        task = asyncio.get_running_loop().create_task(self._expire(handle))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
    
    async def dismiss_all(self) -> None:
        """Remove every badge still on the page and cancel their timers."""
        pending = list(self._pending)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        for handle in list(self._badges.values()):
            await self._remove(handle)
    
    async def _expire(self, handle: Any) -> None:
        await asyncio.sleep(self.duration_ms / 1000)
        await self._remove(handle)
    
    async def _remove(self, handle: Any) -> None:
        self._badges.pop(id(handle), None)
        try:
            await self.page.remove_indicator(handle)
        except Exception as e:
            self.logger.debug("Indicator could not be removed", error=str(e))
