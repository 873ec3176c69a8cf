"""Page adapter over a parsed static HTML document."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import httpx
from bs4 import BeautifulSoup, Tag

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


@dataclass
class DispatchedEvent:
    """Notification recorded by the static adapter."""
    element: Tag
    event_type: str


def _collapse(text: str) -> str:
    return " ".join(text.split())


class StaticPageAdapter(PageAdapter):
    """
    Offline page adapter backed by BeautifulSoup.
    
    Writes mutate the parsed tree so the filled document can be serialized
    with ``to_html``. Dispatched notifications are recorded in ``events``
    since there are no page scripts to receive them. There is no layout, so
    geometry is reported as absent.
    """
    
    def __init__(
        self,
        html: str,
        url: str = "about:blank",
        cookies: Optional[Dict[str, str]] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0
    ):
        """
        Initialize the static adapter.
        
        Args:
            html: Document markup
            url: URL the document is considered to live at
            cookies: Cookies sent with preview fetches
            http_client: Optional client for dependency injection
            timeout: Fetch timeout in seconds when no client is injected
        """
        self.soup = BeautifulSoup(html, "html.parser")
        self.url = url
        self.cookies = cookies or {}
        self.http_client = http_client
        if http_client is not None and self.cookies:
            http_client.cookies.update(self.cookies)
        self.timeout = timeout
        self.events: List[DispatchedEvent] = []
        self.logger = logger.bind(component="static_page")
    
    def to_html(self) -> str:
        """Serialize the current document."""
        return str(self.soup)
    
    def events_for(self, element: Tag) -> List[str]:
        """Event types dispatched on ``element``, in dispatch order."""
        return [event.event_type for event in self.events if event.element is element]
    
    async def get_url(self) -> str:
        return self.url
    
    async def get_title(self) -> str:
        if self.soup.title is None:
            return ""
        return _collapse(self.soup.title.get_text())
    
    async def query_selector(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)
    
    async def query_selector_all(self, selector: str) -> List[Tag]:
        return self.soup.select(selector)
    
    async def describe_element(self, element: Tag) -> ElementInfo:
        tag = element.name.lower()
        if tag == "input":
            element_type = (element.get("type") or "text").lower()
        else:
            element_type = tag
        return ElementInfo(
            tag=tag,
            type=element_type,
            id=element.get("id") or "",
            name=element.get("name") or "",
            value=self._read_value(element),
        )
    
    async def get_attribute(self, element: Tag, name: str) -> Optional[str]:
        value = element.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value
    
    async def get_text_content(self, element: Tag) -> str:
        return element.get_text()
    
    async def get_options(self, element: Tag) -> List[SelectOption]:
        return [
            SelectOption(value=self._option_value(option), text=_collapse(option.get_text()))
            for option in element.find_all("option")
        ]
    
    async def set_value(self, element: Tag, value: str) -> None:
        tag = element.name.lower()
        if tag == "textarea":
            element.string = value
        elif tag == "select":
            for option in element.find_all("option"):
                if self._option_value(option) == value:
                    option["selected"] = "selected"
                elif option.has_attr("selected"):
                    del option["selected"]
        else:
            element["value"] = value
    
    async def set_checked(self, element: Tag, checked: bool) -> None:
        if not checked:
            if element.has_attr("checked"):
                del element["checked"]
            return
        
        # Checking a radio unchecks the rest of its group, as a browser would.
        if (element.get("type") or "").lower() == "radio" and element.get("name"):
            scope = element.find_parent("form") or self.soup
            for radio in scope.find_all("input", attrs={"type": "radio", "name": element["name"]}):
                if radio is not element and radio.has_attr("checked"):
                    del radio["checked"]
        element["checked"] = "checked"
    
    async def dispatch_event(self, element: Tag, event_type: str) -> None:
        self.events.append(DispatchedEvent(element=element, event_type=event_type))
    
    async def get_bounding_box(self, element: Tag) -> Optional[BoundingBox]:
        return None
    
    async def get_scroll_offset(self) -> Tuple[float, float]:
        return 0.0, 0.0
    
    async def remove_sibling_indicators(self, element: Tag, class_name: str) -> int:
        parent = element.parent
        if parent is None:
            return 0
        found = parent.select(f".{class_name}")
        for badge in found:
            badge.extract()
        return len(found)
    
    async def insert_indicator(self, badge: IndicatorBadge) -> Tag:
        span = self.soup.new_tag("span", attrs={"class": badge.class_name})
        span.string = badge.text
        span["style"] = f"{badge.style} left: {badge.left:g}px; top: {badge.top:g}px;".strip()
        (self.soup.body or self.soup).append(span)
        return span
    
    async def remove_indicator(self, handle: Tag) -> None:
        handle.extract()
    
    async def fetch_text(self, url: str) -> FetchResult:
        if self.http_client is not None:
            response = await self.http_client.get(url)
        else:
            async with httpx.AsyncClient(
                cookies=self.cookies,
                follow_redirects=True,
                timeout=self.timeout
            ) as client:
                response = await client.get(url)
        
        self.logger.debug("Fetched document", url=url, status=response.status_code)
        return FetchResult(url=str(response.url), status=response.status_code, text=response.text)
    
    @staticmethod
    def _option_value(option: Tag) -> str:
        value = option.get("value")
        if value is None:
            return _collapse(option.get_text())
        return value
    
    def _read_value(self, element: Tag) -> str:
        tag = element.name.lower()
        if tag == "textarea":
            return element.get_text()
        if tag == "select":
            options = element.find_all("option")
            chosen = next((o for o in options if o.has_attr("selected")), options[0] if options else None)
            return self._option_value(chosen) if chosen is not None else ""
        return element.get("value") or ""
