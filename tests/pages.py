"""Static page builders shared by the tests."""

from typing import Callable, Optional

import httpx

from ai_form_assist.page.static import StaticPageAdapter

PAGE_URL = "https://forms.example.com/apply/form.html"


def build_page(
    body: str,
    head: str = "",
    url: str = PAGE_URL,
    handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
    cookies: Optional[dict] = None
) -> StaticPageAdapter:
    """Create a static page, optionally serving fetches from ``handler``."""
    html = f"<html><head>{head}</head><body>{body}</body></html>"
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler)) if handler else None
    return StaticPageAdapter(html, url=url, cookies=cookies, http_client=client)
