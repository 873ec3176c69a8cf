"""Configuration resolution across caller, page and inferred sources."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ai_form_assist.config import settings
from ai_form_assist.core.exceptions import ConfigurationParseError
from ai_form_assist.core.models import Configuration
from ai_form_assist.engine.inference import TargetInferrer
from ai_form_assist.page.adapter import PageAdapter
from ai_form_assist.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ConfigResolution:
    """Resolved configuration plus how it was assembled."""
    config: Configuration
    page_config_found: bool = False
    inferred: bool = False
    warnings: List[str] = field(default_factory=list)


class ConfigResolver:
    """
    Merges the caller-supplied configuration, the page-declared configuration
    and inferred targets into one effective configuration.
    
    Page-declared keys override caller keys one by one. Targets are inferred
    only when neither source supplies them.
    """
    
    def __init__(
        self,
        page: PageAdapter,
        inferrer: Optional[TargetInferrer] = None,
        config_element_id: Optional[str] = None
    ):
        self.page = page
        self.inferrer = inferrer or TargetInferrer(page)
        self.config_element_id = config_element_id or settings.config_element_id
        self.logger = logger.bind(component="config_resolver")
    
    async def resolve(self, external_config: Optional[Configuration] = None) -> Configuration:
        """Return the effective configuration for a fill cycle."""
        resolution = await self.resolve_detailed(external_config)
        return resolution.config
    
    async def resolve_detailed(self, external_config: Optional[Configuration] = None) -> ConfigResolution:
        """
        Resolve the configuration and report how it was assembled.
        
        Args:
            external_config: Configuration supplied with the trigger
            
        Returns:
            Resolution holding the configuration and any warnings
        """
        merged: Dict[str, Any] = (
            external_config.model_dump(exclude_none=True) if external_config else {}
        )
        resolution = ConfigResolution(config=Configuration())
        
        try:
            page_config = await self.read_page_config()
        except ConfigurationParseError as e:
            self.logger.warning("Failed to parse page AI config", error=str(e))
            resolution.warnings.append(str(e))
            page_config = None
        
        if page_config is not None:
            resolution.page_config_found = True
            merged.update(page_config)
            self.logger.debug("Page config found and parsed", keys=sorted(page_config))
        
        config = Configuration.model_validate(merged)
        if config.targets is None:
            self.logger.debug("No targets specified, inferring from page elements")
            config.targets = await self.inferrer.infer_targets()
            resolution.inferred = True
        
        resolution.config = config
        self.logger.info(
            "Configuration resolved",
            targets=len(config.targets),
            has_prompt=config.prompt is not None,
            page_config=resolution.page_config_found,
            inferred=resolution.inferred
        )
        return resolution
    
    async def read_page_config(self) -> Optional[Dict[str, Any]]:
        """
        Read the configuration object declared by the page.
        
        Returns:
            The declared keys, or None when the page declares nothing
            
        Raises:
            ConfigurationParseError: If the declaration is not a valid configuration
        """
        element = await self.page.query_selector(f'[id="{self.config_element_id}"]')
        if element is None:
            self.logger.debug("No page config element found")
            return None
        
        raw = await self.page.get_text_content(element)
        try:
            declared = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigurationParseError(f"Page config is not valid JSON: {e}") from e
        
        if not isinstance(declared, dict):
            raise ConfigurationParseError("Page config must be a JSON object")
        
        try:
            Configuration.model_validate(declared)
        except ValidationError as e:
            raise ConfigurationParseError(f"Page config is invalid: {e}") from e
        
        return declared
