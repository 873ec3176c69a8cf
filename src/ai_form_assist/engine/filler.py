"""Field filling engine applying generated values to page controls."""

from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple

from ai_form_assist.core.coercion import parse_boolean_value, serialize_json_value, stringify_value
from ai_form_assist.core.models import (
    FieldFillResult,
    FillOutcome,
    FillReport,
    TargetDescriptor,
    TargetType,
)
from ai_form_assist.engine.indicator import IndicatorPresenter
from ai_form_assist.page.adapter import PageAdapter, SelectOption
from ai_form_assist.utils.logging import get_logger, preview_text

logger = get_logger(__name__)

# Applied whenever a target of that name is present, whatever was generated.
OVERRIDE_RULES: Dict[str, Any] = {
    "preview-toggle": True,
    "device-toggle": False,
}

WriteResult = Tuple[FillOutcome, Optional[str]]
WriteStrategy = Callable[[PageAdapter, Any, Any], Awaitable[WriteResult]]


def apply_overrides(targets: List[TargetDescriptor], data: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Copy the generated data and force the values of override targets."""
    normalized = dict(data or {})
    names = {target.name for target in targets}
    for name, value in OVERRIDE_RULES.items():
        if name in names:
            normalized[name] = value
            logger.debug("Override enforced", target=name, value=value)
    return normalized


def match_option(options: List[SelectOption], value: str) -> Optional[SelectOption]:
    """
    Pick the option for a select value.
    
    Exact value-or-text match first, then a case-insensitive substring match
    on text or value; in both passes the first option in order wins.
    """
    for option in options:
        if option.value == value or option.text == value:
            return option
    
    needle = value.lower()
    for option in options:
        if needle in option.text.lower() or needle in option.value.lower():
            return option
    return None


async def write_checkbox(page: PageAdapter, element: Any, value: Any) -> WriteResult:
    await page.set_checked(element, parse_boolean_value(value))
    await page.dispatch_event(element, "change")
    return FillOutcome.FILLED, None


async def write_radio(page: PageAdapter, element: Any, value: Any) -> WriteResult:
    info = await page.describe_element(element)
    if info.value == stringify_value(value) or parse_boolean_value(value):
        await page.set_checked(element, True)
        await page.dispatch_event(element, "change")
        return FillOutcome.FILLED, None
    return FillOutcome.SKIPPED_NO_MATCH, f"radio value {info.value!r} not selected"


async def write_select(page: PageAdapter, element: Any, value: Any) -> WriteResult:
    wanted = stringify_value(value)
    option = match_option(await page.get_options(element), wanted)
    if option is not None:
        await page.set_value(element, option.value)
    await page.dispatch_event(element, "change")
    if option is None:
        return FillOutcome.SKIPPED_NO_MATCH, f"no matching option for {wanted!r}"
    return FillOutcome.FILLED, None


async def write_json(page: PageAdapter, element: Any, value: Any) -> WriteResult:
    await page.set_value(element, serialize_json_value(value))
    await page.dispatch_event(element, "input")
    await page.dispatch_event(element, "change")
    return FillOutcome.FILLED, None


async def write_text(page: PageAdapter, element: Any, value: Any) -> WriteResult:
    await page.set_value(element, stringify_value(value))
    await page.dispatch_event(element, "input")
    await page.dispatch_event(element, "change")
    return FillOutcome.FILLED, None


WRITE_STRATEGIES: Dict[TargetType, WriteStrategy] = {
    TargetType.CHECKBOX: write_checkbox,
    TargetType.RADIO: write_radio,
    TargetType.SELECT: write_select,
    TargetType.JSON: write_json,
    TargetType.TEXT: write_text,
}


class FieldFiller:
    """
    Applies a generation result to resolved targets.
    
    Every target is processed independently: a missing element, missing
    data, an unmatched option or an adapter error is recorded for that
    target and the pass moves on. ``fill_fields`` itself never raises.
    """
    
    def __init__(self, page: PageAdapter, indicator: Optional[IndicatorPresenter] = None):
        self.page = page
        self.indicator = indicator or IndicatorPresenter(page)
        self.logger = logger.bind(component="field_filler")
    
    async def fill_fields(
        self,
        targets: List[TargetDescriptor],
        data: Optional[Mapping[str, Any]]
    ) -> FillReport:
        """
        Write generated values into the page.
        
        Args:
            targets: Resolved targets, processed in order
            data: Generation result keyed by target name
            
        Returns:
            Per-target outcomes in target order
        """
        values = apply_overrides(targets, data)
        self.logger.info("Starting to fill fields", targets=len(targets), values=len(values))
        
        report = FillReport()
        for target in targets:
            result = await self._fill_target(target, values)
            report.results.append(result)
        
        self.logger.info(
            "Field filling completed",
            filled=len(report.filled),
            skipped=len(report.skipped)
        )
        return report
    
    async def _fill_target(self, target: TargetDescriptor, values: Dict[str, Any]) -> FieldFillResult:
        result = FieldFillResult(
            name=target.name,
            selector=target.selector,
            type=target.type,
            outcome=FillOutcome.FILLED,
        )
        
        try:
            element = await self.page.query_selector(target.selector)
            if element is None:
                result.outcome = FillOutcome.SKIPPED_NO_ELEMENT
                self.logger.warning("Target element not found", target=target.name, selector=target.selector)
                return result
            
            if target.name not in values:
                result.outcome = FillOutcome.SKIPPED_NO_DATA
                self.logger.warning("No AI data for target", target=target.name)
                return result
            
            result.value = values[target.name]
            self.logger.debug(
                "Filling field",
                target=target.name,
                type=target.type.value,
                value=preview_text(stringify_value(result.value))
            )
            
            result.outcome, result.detail = await WRITE_STRATEGIES[target.type](
                self.page, element, result.value
            )
        except Exception as e:
            result.outcome = FillOutcome.FAILED
            result.detail = str(e)
            self.logger.error(
                "Field fill failed",
                target=target.name,
                selector=target.selector,
                error=str(e),
                error_type=type(e).__name__
            )
            return result
        
        if result.outcome is FillOutcome.FILLED:
            await self.indicator.show(element)
            self.logger.debug("Successfully filled field", target=target.name)
        elif target.type is TargetType.RADIO:
            self.logger.info("Radio left unchanged", target=target.name, detail=result.detail)
        else:
            self.logger.warning("No matching option found", target=target.name, detail=result.detail)
        
        return result
