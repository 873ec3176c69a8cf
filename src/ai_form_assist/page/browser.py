"""Live-browser page adapter and session using Playwright."""

from typing import Any, List, Optional, Tuple

from playwright.async_api import ElementHandle, Page, async_playwright

from ai_form_assist.config import settings
from ai_form_assist.page.adapter import (
    BoundingBox,
    ElementInfo,
    FetchResult,
    IndicatorBadge,
    PageAdapter,
    SelectOption,
)
from ai_form_assist.utils.logging import get_logger

logger = get_logger(__name__)

DESCRIBE_ELEMENT_SCRIPT = """
(el) => ({
    tag: el.tagName.toLowerCase(),
    type: (el.type || '').toLowerCase(),
    id: el.id || '',
    name: el.getAttribute('name') || '',
    value: el.value ?? ''
})
"""

OPTIONS_SCRIPT = """
(el) => Array.from(el.options || []).map((o) => ({ value: o.value, text: o.text }))
"""

REMOVE_SIBLING_INDICATORS_SCRIPT = """
(el, cls) => {
    const parent = el.parentNode;
    if (!parent) return 0;
    const found = parent.querySelectorAll('.' + cls);
    found.forEach((node) => node.remove());
    return found.length;
}
"""

INSERT_INDICATOR_SCRIPT = """
(badge) => {
    const span = document.createElement('span');
    span.className = badge.className;
    span.textContent = badge.text;
    span.style.cssText = badge.style;
    span.style.left = badge.left + 'px';
    span.style.top = badge.top + 'px';
    document.body.appendChild(span);
    return span;
}
"""


class PlaywrightPageAdapter(PageAdapter):
    """Page adapter driving a live Playwright page."""
    
    def __init__(self, page: Page):
        self.page = page
        self.logger = logger.bind(component="playwright_page")
    
    async def get_url(self) -> str:
        return self.page.url
    
    async def get_title(self) -> str:
        return await self.page.title()
    
    async def query_selector(self, selector: str) -> Optional[ElementHandle]:
        return await self.page.query_selector(selector)
    
    async def query_selector_all(self, selector: str) -> List[ElementHandle]:
        return await self.page.query_selector_all(selector)
    
    async def describe_element(self, element: ElementHandle) -> ElementInfo:
        return ElementInfo(**await element.evaluate(DESCRIBE_ELEMENT_SCRIPT))
    
    async def get_attribute(self, element: ElementHandle, name: str) -> Optional[str]:
        return await element.get_attribute(name)
    
    async def get_text_content(self, element: ElementHandle) -> str:
        return await element.text_content() or ""
    
    async def get_options(self, element: ElementHandle) -> List[SelectOption]:
        return [SelectOption(**option) for option in await element.evaluate(OPTIONS_SCRIPT)]
    
    async def set_value(self, element: ElementHandle, value: str) -> None:
        await element.evaluate("(el, v) => { el.value = v; }", value)
    
    async def set_checked(self, element: ElementHandle, checked: bool) -> None:
        await element.evaluate("(el, c) => { el.checked = c; }", checked)
    
    async def dispatch_event(self, element: ElementHandle, event_type: str) -> None:
        # Playwright dispatches composed, bubbling events.
        await element.dispatch_event(event_type)
    
    async def get_bounding_box(self, element: ElementHandle) -> Optional[BoundingBox]:
        box = await element.bounding_box()
        if box is None:
            return None
        return BoundingBox(
            left=box["x"],
            top=box["y"],
            right=box["x"] + box["width"],
            bottom=box["y"] + box["height"],
        )
    
    async def get_scroll_offset(self) -> Tuple[float, float]:
        x, y = await self.page.evaluate("() => [window.scrollX, window.scrollY]")
        return float(x), float(y)
    
    async def remove_sibling_indicators(self, element: ElementHandle, class_name: str) -> int:
        return await element.evaluate(REMOVE_SIBLING_INDICATORS_SCRIPT, class_name)
    
    async def insert_indicator(self, badge: IndicatorBadge) -> Any:
        return await self.page.evaluate_handle(
            INSERT_INDICATOR_SCRIPT,
            {
                "className": badge.class_name,
                "text": badge.text,
                "style": badge.style,
                "left": badge.left,
                "top": badge.top,
            },
        )
    
    async def remove_indicator(self, handle: Any) -> None:
        await handle.evaluate("(el) => el.remove()")
        await handle.dispose()
    
    async def fetch_text(self, url: str) -> FetchResult:
        # The context's request client shares the page's cookie jar.
        response = await self.page.context.request.get(url)
        try:
            text = await response.text()
        finally:
            await response.dispose()
        self.logger.debug("Fetched document", url=url, status=response.status)
        return FetchResult(url=response.url, status=response.status, text=text)


class BrowserSession:
    """
    Playwright browser lifecycle for running fill cycles against live pages.
    
    The session owns one Chromium instance, one context and one page, and
    exposes the page through a ``PlaywrightPageAdapter``.
    """
    
    def __init__(
        self,
        headless: Optional[bool] = None,
        viewport_size: tuple = (1366, 768),
        timeout: Optional[int] = None
    ):
        """
        Initialize the browser session.
        
        Args:
            headless: Run browser in headless mode
            viewport_size: Browser viewport size (width, height)
            timeout: Default operation timeout in seconds
        """
        self.headless = settings.browser_headless if headless is None else headless
        self.viewport_size = viewport_size
        self.timeout = settings.browser_timeout if timeout is None else timeout
        self.logger = logger.bind(component="browser_session")
        
        self.playwright = None
        self.browser = None
        self.context = None
        self.page: Optional[Page] = None
        self.adapter: Optional[PlaywrightPageAdapter] = None
        self.is_initialized = False
    
    async def initialize(self) -> None:
        """Launch Chromium and open a page."""
        if self.is_initialized:
            return
        
        self.playwright = await async_playwright().start()
        self.browser = await self.playwright.chromium.launch(headless=self.headless)
        self.context = await self.browser.new_context(
            viewport={"width": self.viewport_size[0], "height": self.viewport_size[1]}
        )
        self.context.set_default_timeout(self.timeout * 1000)
        self.page = await self.context.new_page()
        self.adapter = PlaywrightPageAdapter(self.page)
        self.is_initialized = True
        
        self.logger.info(
            "Browser session initialized",
            headless=self.headless,
            viewport_size=self.viewport_size
        )
    
    async def navigate_to(self, url: str) -> PlaywrightPageAdapter:
        """
        Navigate to a URL and return the adapter for the loaded page.
        
        Args:
            url: Target URL
            
        Returns:
            Adapter bound to the navigated page
        """
        if not self.is_initialized:
            await self.initialize()
        
        await self.page.goto(url, wait_until="networkidle")
        self.logger.info("Navigated to URL", url=url, title=await self.page.title())
        return self.adapter
    
    async def close(self) -> None:
        """Close the browser and cleanup resources."""
        try:
            if self.context:
                await self.context.close()
            if self.browser:
                await self.browser.close()
            if self.playwright:
                await self.playwright.stop()
        finally:
            self.is_initialized = False
            self.page = None
            self.adapter = None
        
        self.logger.info("Browser session closed")
    
    async def __aenter__(self) -> "BrowserSession":
        await self.initialize()
        return self
    
    async def __aexit__(self, *exc_info) -> None:
        await self.close()
