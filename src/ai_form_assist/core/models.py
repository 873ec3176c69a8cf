"""Core data models for AI Form Assist."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TargetType(str, Enum):
    """Field kinds the filler knows how to write."""
    TEXT = "text"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SELECT = "select"
    JSON = "json"


class FillOutcome(str, Enum):
    """Per-target result of a fill pass."""
    FILLED = "filled"
    SKIPPED_NO_ELEMENT = "skipped-no-element"
    SKIPPED_NO_DATA = "skipped-no-data"
    SKIPPED_NO_MATCH = "skipped-no-match"
    FAILED = "failed"


class TargetDescriptor(BaseModel):
    """Declarative pointer to one form field."""
    name: str = Field(..., description="Key into the generation result")
    selector: str = Field(..., description="CSS selector locating the field")
    type: TargetType = Field(TargetType.TEXT, description="Write strategy for the field")


class Configuration(BaseModel):
    """Effective fill configuration for one cycle."""
    model_config = ConfigDict(extra="ignore")
    
    prompt: Optional[str] = Field(None, description="Instruction for the generation service")
    targets: Optional[List[TargetDescriptor]] = Field(None, description="Fields to fill")
    
    @model_validator(mode="after")
    def _check_unique_names(self) -> "Configuration":
        # Radio buttons of one group legitimately share the group's name.
        seen: Dict[str, TargetType] = {}
        for target in self.targets or []:
            previous = seen.get(target.name)
            if previous is not None and not (
                previous is TargetType.RADIO and target.type is TargetType.RADIO
            ):
                raise ValueError(f"Duplicate target name: {target.name}")
            seen[target.name] = target.type
        return self


class ContextBlock(BaseModel):
    """One labeled unit of page-derived text."""
    label: str = Field(..., description="Block label")
    content: str = Field(..., description="Trimmed text content")


class ContextPayload(BaseModel):
    """Page context shipped to the generation service."""
    model_config = ConfigDict(populate_by_name=True)
    
    title: str = Field("", description="Document title")
    description: str = Field("", description="Description meta tag content")
    context_blocks: List[ContextBlock] = Field(
        default_factory=list, alias="contextBlocks", description="Blocks in page order"
    )
    preview_url: Optional[str] = Field(None, alias="previewUrl", description="Fetched preview URL")
    preview_content_length: Optional[int] = Field(
        None, alias="previewContentLength", description="Untruncated preview length"
    )


class GenerationRequest(BaseModel):
    """Request handed to the generation service."""
    prompt: str = Field(..., description="Instruction for the generation service")
    context: ContextPayload = Field(..., description="Collected page context")
    targets: List[TargetDescriptor] = Field(default_factory=list, description="Fields to fill")
    
    def to_wire(self) -> Dict[str, Any]:
        """Serialize with the camelCase field names used on the wire."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class GenerationResponse(BaseModel):
    """Response returned by the generation service."""
    success: bool = Field(..., description="Whether generation succeeded")
    data: Optional[Dict[str, Any]] = Field(None, description="Target name to value mapping")
    error: Optional[str] = Field(None, description="Error message if failed")


class TriggerEvent(BaseModel):
    """Trigger delivered by the host transport."""
    model_config = ConfigDict(populate_by_name=True)
    
    config: Optional[Configuration] = Field(None, alias="headerConfig", description="Caller-supplied configuration")


class CompletionSignal(BaseModel):
    """Cycle result reported back to the transport."""
    success: bool = Field(..., description="Whether the cycle completed without failure")
    error: Optional[str] = Field(None, description="Error message if failed")


class FieldFillResult(BaseModel):
    """Outcome of filling a single target."""
    name: str
    selector: str
    type: TargetType
    outcome: FillOutcome
    value: Any = None
    detail: Optional[str] = None


class FillReport(BaseModel):
    """Ordered per-target outcomes of one fill pass."""
    results: List[FieldFillResult] = Field(default_factory=list)
    
    @property
    def filled(self) -> List[FieldFillResult]:
        return [r for r in self.results if r.outcome is FillOutcome.FILLED]
    
    @property
    def skipped(self) -> List[FieldFillResult]:
        return [r for r in self.results if r.outcome is not FillOutcome.FILLED]
    
    def outcome_for(self, name: str) -> Optional[FillOutcome]:
        """Return the first outcome recorded for a target name."""
        for result in self.results:
            if result.name == name:
                return result.outcome
        return None
