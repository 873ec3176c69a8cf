"""Configuration management for AI Form Assist."""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )
    
    # Page Conventions
    config_element_id: str = Field("ai-config", description="Id of the element holding the page-declared configuration")
    context_attribute: str = Field("data-ai-context", description="Attribute marking context blocks")
    description_selector: str = Field('meta[name="description"]', description="Selector of the description meta tag")
    
    # Preview Configuration
    preview_iframe_selector: str = Field("#preview-container iframe", description="Selector of the preview iframe")
    preview_block_label: str = Field("preview-container", description="Context block label for preview content")
    preview_path_pattern: str = Field(r"\.pre\w*$", description="Regex the preview URL path must match")
    preview_max_chars: int = Field(8000, description="Maximum preview characters shipped as context")
    
    # Indicator Configuration
    indicator_text: str = Field("AI ✓", description="Badge text shown next to filled fields")
    indicator_class: str = Field("ai-indicator", description="CSS class of the badge element")
    indicator_duration_ms: int = Field(3000, description="Badge lifetime in milliseconds")
    
    # Generation Service Configuration
    default_prompt: str = Field(
        "Fill the form fields based on the context",
        description="Prompt used when the configuration has none"
    )
    generation_endpoint: Optional[str] = Field(None, description="HTTP endpoint of the generation service")
    generation_api_key: Optional[str] = Field(None, description="Bearer token for the generation service")
    generation_timeout: float = Field(60.0, description="Generation request timeout in seconds")
    
    # Browser Configuration
    browser_headless: bool = Field(True, description="Run browser in headless mode")
    browser_timeout: int = Field(30, description="Browser operation timeout in seconds")
    
    # Application Configuration
    debug: bool = Field(False, description="Enable debug mode")
    log_level: str = Field("INFO", description="Logging level")


# Global settings instance
settings = Settings()
