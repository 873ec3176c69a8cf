"""Page adapter interface through which the engine touches the document."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple


@dataclass
class ElementInfo:
    """Static facts about an element used for target inference."""
    tag: str
    type: str = ""
    id: str = ""
    name: str = ""
    value: str = ""


@dataclass
class SelectOption:
    """One option of a selection list."""
    value: str
    text: str


@dataclass
class BoundingBox:
    """Viewport-relative element geometry."""
    left: float
    top: float
    right: float
    bottom: float


@dataclass
class IndicatorBadge:
    """Badge to be placed at document level."""
    text: str
    class_name: str
    left: float
    top: float
    style: str = ""


@dataclass
class FetchResult:
    """Text response of a credentialed fetch."""
    url: str
    status: int
    text: str = ""
    
    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class PageAdapter(ABC):
    """
    Capability object wrapping a live or static document.
    
    Element handles are opaque to callers: whatever ``query_selector``
    returns is passed back unchanged to the other methods.
    """
    
    @abstractmethod
    async def get_url(self) -> str:
        """Return the document URL."""
    
    @abstractmethod
    async def get_title(self) -> str:
        """Return the document title."""
    
    @abstractmethod
    async def query_selector(self, selector: str) -> Optional[Any]:
        """Return the first element matching ``selector`` or None."""
    
    @abstractmethod
    async def query_selector_all(self, selector: str) -> List[Any]:
        """Return all elements matching ``selector`` in document order."""
    
    @abstractmethod
    async def describe_element(self, element: Any) -> ElementInfo:
        """Return tag, type, id, name and current value of an element."""
    
    @abstractmethod
    async def get_attribute(self, element: Any, name: str) -> Optional[str]:
        """Return an attribute value or None when the attribute is absent."""
    
    @abstractmethod
    async def get_text_content(self, element: Any) -> str:
        """Return the element's text content."""
    
    @abstractmethod
    async def get_options(self, element: Any) -> List[SelectOption]:
        """Return the options of a selection list in option order."""
    
    @abstractmethod
    async def set_value(self, element: Any, value: str) -> None:
        """Assign the element's value property."""
    
    @abstractmethod
    async def set_checked(self, element: Any, checked: bool) -> None:
        """Assign the element's checked state."""
    
    @abstractmethod
    async def dispatch_event(self, element: Any, event_type: str) -> None:
        """Dispatch a bubbling notification of ``event_type`` on the element."""
    
    @abstractmethod
    async def get_bounding_box(self, element: Any) -> Optional[BoundingBox]:
        """Return the element's on-screen box, None when there is no layout."""
    
    @abstractmethod
    async def get_scroll_offset(self) -> Tuple[float, float]:
        """Return the window scroll offset as ``(x, y)``."""
    
    @abstractmethod
    async def remove_sibling_indicators(self, element: Any, class_name: str) -> int:
        """Remove indicator badges under the element's parent, returning the count."""
    
    @abstractmethod
    async def insert_indicator(self, badge: IndicatorBadge) -> Any:
        """Append a badge to the document body and return its handle."""
    
    @abstractmethod
    async def remove_indicator(self, handle: Any) -> None:
        """Remove a badge previously returned by ``insert_indicator``."""
    
    @abstractmethod
    async def fetch_text(self, url: str) -> FetchResult:
        """GET ``url`` with the page's credentials and return the body as text."""
