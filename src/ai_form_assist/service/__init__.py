"""Generation service clients."""

from ai_form_assist.service.generation import (
    GenerationService,
    HttpGenerationService,
    MessageBridgeGenerationService,
    StaticGenerationService,
)

__all__ = [
    "GenerationService", "HttpGenerationService",
    "MessageBridgeGenerationService", "StaticGenerationService",
]
