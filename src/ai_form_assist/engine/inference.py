"""Target inference for pages that declare no fill configuration."""

import re
from typing import Dict, List

from ai_form_assist.core.models import TargetDescriptor, TargetType
from ai_form_assist.page.adapter import ElementInfo, PageAdapter
from ai_form_assist.utils.logging import get_logger

logger = get_logger(__name__)

FILLABLE_SELECTOR = ", ".join([
    'input[type="text"]',
    'input[type="email"]',
    'input[type="password"]',
    'input[type="number"]',
    'input[type="tel"]',
    'input[type="url"]',
    "textarea",
    "select",
    'input[type="checkbox"]',
    'input[type="radio"]',
])

_CSS_IDENTIFIER = re.compile(r"^-?[A-Za-z_][A-Za-z0-9_-]*$")


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def build_selector(info: ElementInfo, index: int) -> str:
    """Selector for an inferred element: id, then name, then position."""
    if info.id:
        if _CSS_IDENTIFIER.match(info.id):
            return f"#{info.id}"
        return f'[id="{_quote(info.id)}"]'
    if info.name:
        return f'[name="{_quote(info.name)}"]'
    return f"{info.tag}:nth-of-type({index + 1})"


def infer_type(info: ElementInfo) -> TargetType:
    """Map an element kind to the write strategy used for it."""
    if info.type in (TargetType.CHECKBOX.value, TargetType.RADIO.value):
        return TargetType(info.type)
    if info.tag == "select":
        return TargetType.SELECT
    return TargetType.TEXT


class TargetInferrer:
    """Derives target descriptors from the fillable controls of a page."""
    
    def __init__(self, page: PageAdapter):
        self.page = page
        self.logger = logger.bind(component="target_inference")
    
    async def infer_targets(self) -> List[TargetDescriptor]:
        """
        Scan the page for fillable controls in document order.
        
        Returns:
            Target descriptors, possibly empty
        """
        elements = await self.page.query_selector_all(FILLABLE_SELECTOR)
        self.logger.debug("Found potential target elements", count=len(elements))
        
        targets: List[TargetDescriptor] = []
        seen: Dict[str, TargetType] = {}
        for index, element in enumerate(elements):
            info = await self.page.describe_element(element)
            target = TargetDescriptor(
                name=info.name or info.id or f"field-{index}",
                selector=build_selector(info, index),
                type=infer_type(info),
            )
            
            first_type = seen.get(target.name)
            if first_type is not None and not (
                first_type is TargetType.RADIO and target.type is TargetType.RADIO
            ):
                self.logger.debug("Skipping duplicate target", name=target.name, selector=target.selector)
                continue
            seen.setdefault(target.name, target.type)
            targets.append(target)
            
            self.logger.debug(
                "Inferred target",
                name=target.name,
                selector=target.selector,
                type=target.type.value
            )
        
        return targets
