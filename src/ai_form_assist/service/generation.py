"""Generation service clients.

The generation service maps a prompt, page context and targets to a value
per target. It is opaque to the engine; these clients only move the request
and response across a boundary.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

import httpx
from pydantic import ValidationError

from ai_form_assist.config import settings
from ai_form_assist.core.models import GenerationRequest, GenerationResponse
from ai_form_assist.utils.logging import get_logger

logger = get_logger(__name__)

AI_REQUEST_MESSAGE = "AI_REQUEST"

MessageSender = Callable[[Dict[str, Any]], Awaitable[Mapping[str, Any]]]


class GenerationService(ABC):
    """Maps a generation request to a generation response."""
    
    @abstractmethod
    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Produce values for the request's targets."""
    
    async def close(self) -> None:
        """Release resources held by the client."""


class HttpGenerationService(GenerationService):
    """Posts generation requests to a JSON HTTP endpoint."""
    
    def __init__(
        self,
        endpoint: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the HTTP client.
        
        Args:
            endpoint: URL accepting the request JSON
            api_key: Optional bearer token
            timeout: Request timeout in seconds
            client: Optional client for dependency injection
        """
        self.endpoint = endpoint or settings.generation_endpoint
        if not self.endpoint:
            raise ValueError("No generation endpoint configured")
        
        self.api_key = api_key or settings.generation_api_key
        self.headers = {"Content-Type": "application/json"}
        if self.api_key:
            self.headers["Authorization"] = f"Bearer {self.api_key}"
        
        if timeout is None:
            timeout = settings.generation_timeout
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self.logger = logger.bind(component="http_generation")
    
    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        self.logger.info("Sending generation request", endpoint=self.endpoint, targets=len(request.targets))
        
        try:
            response = await self.client.post(self.endpoint, json=request.to_wire(), headers=self.headers)
            response.raise_for_status()
            result = GenerationResponse.model_validate(response.json())
        
        except httpx.HTTPError as e:
            self.logger.error("Generation request failed", error=str(e), error_type=type(e).__name__)
            return GenerationResponse(success=False, error=f"Generation request failed: {e}")
        
        except (ValueError, ValidationError) as e:
            self.logger.error("Invalid generation response", error=str(e))
            return GenerationResponse(success=False, error=f"Invalid generation response: {e}")
        
        self.logger.debug("Generation response received", success=result.success)
        return result
    
    async def close(self) -> None:
        await self.client.aclose()


class MessageBridgeGenerationService(GenerationService):
    """
    Forwards generation requests through the host transport.
    
    ``send`` receives ``{"type": "AI_REQUEST", "data": <request>}`` and
    returns the transport's reply, which must have the response shape.
    """
    
    def __init__(self, send: MessageSender):
        self.send = send
        self.logger = logger.bind(component="message_generation")
    
    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        self.logger.debug("Sending AI request to transport", targets=len(request.targets))
        reply = await self.send({"type": AI_REQUEST_MESSAGE, "data": request.to_wire()})
        
        try:
            return GenerationResponse.model_validate(reply)
        except ValidationError as e:
            self.logger.error("Invalid transport reply", error=str(e))
            return GenerationResponse(success=False, error=f"Invalid generation response: {e}")


class StaticGenerationService(GenerationService):
    """Returns a fixed result; used for offline runs."""
    
    def __init__(self, data: Mapping[str, Any]):
        self.data = dict(data)
        self.requests = []
    
    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        self.requests.append(request)
        return GenerationResponse(success=True, data=dict(self.data))
