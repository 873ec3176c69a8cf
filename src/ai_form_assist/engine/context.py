"""Context collection from the page and its optional preview document."""

import re
from dataclasses import dataclass
from typing import List, Optional

import httpx

from ai_form_assist.config import settings
from ai_form_assist.core.exceptions import PreviewFetchError
from ai_form_assist.core.models import ContextBlock, ContextPayload
from ai_form_assist.page.adapter import PageAdapter
from ai_form_assist.utils.logging import get_logger, preview_text

logger = get_logger(__name__)


@dataclass
class PreviewCapture:
    """Result of the conditional preview fetch."""
    url: Optional[str] = None
    block: Optional[ContextBlock] = None
    content_length: Optional[int] = None
    error: Optional[str] = None
    
    @property
    def captured(self) -> bool:
        return self.block is not None


class ContextCollector:
    """
    Gathers page metadata, tagged context blocks and preview content.
    
    Nothing here escapes: a failed read is logged and leaves its part of
    the payload empty, and a failed preview leaves out the preview block.
    """
    
    def __init__(
        self,
        page: PageAdapter,
        context_attribute: Optional[str] = None,
        description_selector: Optional[str] = None,
        preview_iframe_selector: Optional[str] = None,
        preview_path_pattern: Optional[str] = None,
        preview_max_chars: Optional[int] = None
    ):
        """
        Initialize the context collector.
        
        Args:
            page: Adapter for the page being filled
            context_attribute: Attribute marking context blocks
            description_selector: Selector of the description meta tag
            preview_iframe_selector: Selector of the preview iframe
            preview_path_pattern: Regex the preview URL path must match
            preview_max_chars: Maximum preview characters kept
        """
        self.page = page
        self.context_attribute = (
            settings.context_attribute if context_attribute is None else context_attribute
        )
        self.description_selector = (
            settings.description_selector if description_selector is None else description_selector
        )
        self.preview_iframe_selector = (
            settings.preview_iframe_selector if preview_iframe_selector is None else preview_iframe_selector
        )
        self.preview_path_pattern = re.compile(
            settings.preview_path_pattern if preview_path_pattern is None else preview_path_pattern,
            re.IGNORECASE
        )
        self.preview_max_chars = (
            settings.preview_max_chars if preview_max_chars is None else preview_max_chars
        )
        self.logger = logger.bind(component="context_collector")
    
    async def collect_context(self) -> ContextPayload:
        """
        Build the context payload for one fill cycle.
        
        Returns:
            Title, description and context blocks in page order, with the
            preview block appended last when captured
        """
        context = ContextPayload(
            title=await self._read_title(),
            description=await self._read_description(),
            context_blocks=await self._read_blocks(),
        )
        
        capture = await self.capture_preview()
        if capture.captured:
            context.context_blocks.append(capture.block)
            context.preview_url = capture.url
            context.preview_content_length = capture.content_length
        
        return context
    
    async def _read_title(self) -> str:
        try:
            return await self.page.get_title()
        except Exception as e:
            self.logger.warning("Failed to read page title", error=str(e), error_type=type(e).__name__)
            return ""
    
    async def _read_description(self) -> str:
        try:
            meta = await self.page.query_selector(self.description_selector)
            if meta is None:
                return ""
            return await self.page.get_attribute(meta, "content") or ""
        except Exception as e:
            self.logger.warning("Failed to read page description", error=str(e), error_type=type(e).__name__)
            return ""
    
    async def _read_blocks(self) -> List[ContextBlock]:
        blocks: List[ContextBlock] = []
        try:
            elements = await self.page.query_selector_all(f"[{self.context_attribute}]")
            self.logger.debug("Found context elements", count=len(elements))
            
            for index, element in enumerate(elements):
                label = await self.page.get_attribute(element, self.context_attribute) or f"context-{index}"
                content = (await self.page.get_text_content(element)).strip()
                blocks.append(ContextBlock(label=label, content=content))
                self.logger.debug("Context block collected", label=label, content=preview_text(content))
        
        except Exception as e:
            # Blocks read before the failure are kept.
            self.logger.warning(
                "Failed to read context blocks",
                collected=len(blocks),
                error=str(e),
                error_type=type(e).__name__
            )
        return blocks
    
    async def capture_preview(self) -> PreviewCapture:
        """
        Fetch the preview document referenced by the preview iframe.
        
        Returns:
            A capture holding the preview block, or the reason none was taken
        """
        try:
            iframe = await self.page.query_selector(self.preview_iframe_selector)
            src = await self.page.get_attribute(iframe, "src") if iframe is not None else None
            if not src:
                return PreviewCapture()
            
            preview_url = str(httpx.URL(await self.page.get_url()).join(src))
            self.logger.debug("Preview iframe detected", preview_url=preview_url)
            
            if not self.preview_path_pattern.search(httpx.URL(preview_url).path):
                return PreviewCapture(url=preview_url)
            
            response = await self.page.fetch_text(preview_url)
            if not response.ok:
                raise PreviewFetchError(preview_url, response.status)
            
            truncated = response.text[:self.preview_max_chars]
            self.logger.info(
                "Preview content captured",
                preview_url=preview_url,
                captured_length=len(truncated),
                content_length=len(response.text)
            )
            return PreviewCapture(
                url=preview_url,
                block=ContextBlock(label=settings.preview_block_label, content=truncated),
                content_length=len(response.text),
            )
        
        except Exception as e:
            self.logger.warning(
                "Failed to capture preview content",
                error=str(e),
                error_type=type(e).__name__
            )
            return PreviewCapture(error=str(e))
