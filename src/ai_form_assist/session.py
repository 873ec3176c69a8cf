"""Single-flight fill cycle orchestration."""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ai_form_assist.config import settings
from ai_form_assist.core.exceptions import GenerationError
from ai_form_assist.core.models import (
    CompletionSignal,
    Configuration,
    ContextPayload,
    FillReport,
    GenerationRequest,
    TriggerEvent,
)
from ai_form_assist.engine.context import ContextCollector
from ai_form_assist.engine.filler import FieldFiller
from ai_form_assist.engine.indicator import IndicatorPresenter
from ai_form_assist.engine.resolver import ConfigResolver
from ai_form_assist.page.adapter import PageAdapter
from ai_form_assist.service.generation import GenerationService
from ai_form_assist.utils.logging import get_logger, log_fill_cycle

logger = get_logger(__name__)

AI_ASSIST_TRIGGER_MESSAGE = "AI_ASSIST_TRIGGER"


@dataclass
class CycleResult:
    """Everything one fill cycle produced."""
    signal: CompletionSignal
    config: Optional[Configuration] = None
    context: Optional[ContextPayload] = None
    report: Optional[FillReport] = None


class AssistSession:
    """
    Runs fill cycles for one page, at most one at a time.
    
    A trigger arriving while a cycle is in flight is ignored, not queued.
    The busy flag is released when the cycle ends, whatever the outcome.
    """
    
    def __init__(
        self,
        page: PageAdapter,
        generation_service: GenerationService,
        resolver: Optional[ConfigResolver] = None,
        collector: Optional[ContextCollector] = None,
        filler: Optional[FieldFiller] = None,
        default_prompt: Optional[str] = None
    ):
        """
        Initialize the session.
        
        Args:
            page: Adapter for the page being filled
            generation_service: Service producing field values
            resolver: Configuration resolver (defaults to one over ``page``)
            collector: Context collector (defaults to one over ``page``)
            filler: Field filler (defaults to one over ``page``)
            default_prompt: Prompt used when the configuration has none
        """
        self.page = page
        self.generation_service = generation_service
        self.resolver = resolver or ConfigResolver(page)
        self.collector = collector or ContextCollector(page)
        self.filler = filler or FieldFiller(page, IndicatorPresenter(page))
        self.default_prompt = default_prompt or settings.default_prompt
        self.logger = logger.bind(component="assist_session")
        self._busy = False
    
    @property
    def is_busy(self) -> bool:
        return self._busy
    
    async def handle_message(self, message: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Entry point for host transport messages.
        
        Args:
            message: ``{"type": "AI_ASSIST_TRIGGER", "headerConfig": {...}}``
            
        Returns:
            The completion signal as a dict, or None when the message is not
            a trigger or was ignored because a cycle is in flight
        """
        if message.get("type") != AI_ASSIST_TRIGGER_MESSAGE:
            return None
        
        try:
            trigger = TriggerEvent.model_validate({"headerConfig": message.get("headerConfig")})
        except ValueError as e:
            self.logger.error("Invalid trigger configuration", error=str(e))
            return CompletionSignal(success=False, error=str(e)).model_dump(exclude_none=True)
        
        signal = await self.handle_trigger(trigger)
        if signal is None:
            return None
        return signal.model_dump(exclude_none=True)
    
    async def handle_trigger(self, trigger: TriggerEvent) -> Optional[CompletionSignal]:
        """Run a cycle for ``trigger`` unless one is already in flight."""
        if self._busy:
            self.logger.info("Fill cycle already in progress, trigger ignored")
            return None
        
        self._busy = True
        try:
            result = await self.run_cycle(trigger.config)
        finally:
            self._busy = False
        return result.signal
    
    async def run_cycle(self, external_config: Optional[Configuration] = None) -> CycleResult:
        """
        Resolve, collect, generate and fill.
        
        Args:
            external_config: Configuration supplied with the trigger
            
        Returns:
            Cycle result; failures are reported in its signal, never raised
        """
        result = CycleResult(signal=CompletionSignal(success=False))
        self.logger.info("Starting AI assist processing")
        
        try:
            result.config = await self.resolver.resolve(external_config)
            result.context = await self.collector.collect_context()
            self.logger.debug(
                "Context collected",
                **log_fill_cycle(
                    "context",
                    blocks=len(result.context.context_blocks),
                    preview_url=result.context.preview_url
                )
            )
            
            request = GenerationRequest(
                prompt=result.config.prompt or self.default_prompt,
                context=result.context,
                targets=result.config.targets or [],
            )
            response = await self.generation_service.generate(request)
            if not response.success:
                raise GenerationError(response.error or "Generation failed")
            
            result.report = await self.filler.fill_fields(request.targets, response.data)
            result.signal = CompletionSignal(success=True)
            self.logger.info(
                "AI assist processing completed successfully",
                **log_fill_cycle("fill", filled=len(result.report.filled), skipped=len(result.report.skipped))
            )
        
        except Exception as e:
            self.logger.error(
                "AI assist processing failed",
                error=str(e),
                error_type=type(e).__name__
            )
            result.signal = CompletionSignal(success=False, error=str(e))
        
        return result
