"""Target resolution and field filling engine."""

from ai_form_assist.engine.context import ContextCollector, PreviewCapture
from ai_form_assist.engine.filler import FieldFiller, apply_overrides, match_option
from ai_form_assist.engine.indicator import IndicatorPresenter
from ai_form_assist.engine.inference import TargetInferrer
from ai_form_assist.engine.resolver import ConfigResolution, ConfigResolver

__all__ = [
    "ContextCollector", "PreviewCapture",
    "FieldFiller", "apply_overrides", "match_option",
    "IndicatorPresenter", "TargetInferrer",
    "ConfigResolution", "ConfigResolver",
]
