"""Core models, errors and value coercion."""

from ai_form_assist.core.coercion import parse_boolean_value, serialize_json_value, stringify_value
from ai_form_assist.core.exceptions import (
    ConfigurationParseError,
    FormAssistError,
    GenerationError,
    PreviewFetchError,
)
from ai_form_assist.core.models import (
    CompletionSignal,
    Configuration,
    ContextBlock,
    ContextPayload,
    FieldFillResult,
    FillOutcome,
    FillReport,
    GenerationRequest,
    GenerationResponse,
    TargetDescriptor,
    TargetType,
    TriggerEvent,
)

__all__ = [
    "parse_boolean_value", "serialize_json_value", "stringify_value",
    "FormAssistError", "ConfigurationParseError", "PreviewFetchError", "GenerationError",
    "CompletionSignal", "Configuration", "ContextBlock", "ContextPayload",
    "FieldFillResult", "FillOutcome", "FillReport", "GenerationRequest",
    "GenerationResponse", "TargetDescriptor", "TargetType", "TriggerEvent",
]
