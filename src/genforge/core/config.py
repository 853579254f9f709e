"""
genforge.core.config - Configuration Management
=================================================

Configuration can be loaded from multiple sources with the following
priority (highest first):

    1. Explicit constructor arguments
    2. Environment variables (prefixed with GENFORGE_)
    3. YAML configuration file (genforge.yaml)
    4. Default values defined in the models below

Architecture Context:

        GenForgeConfig
            ├── LLMConfig        → LLM Providers → Agents / GenerationSession
            ├── PipelineConfig   → PipelineOrchestrator
            └── (log settings)   → configure_logging()

Usage:
    # Load from environment variables:
    config = GenForgeConfig()

    # Load from YAML file:
    config = load_config("genforge.yaml")

    # Explicit overrides:
    config = GenForgeConfig(log_level="DEBUG", environment="dev")

Environment Variables:
    GENFORGE_LOG_LEVEL=DEBUG
    GENFORGE_ENVIRONMENT=prod
    GENFORGE_LLM__PROVIDER=openai
    GENFORGE_LLM__MODEL=gpt-4o-mini
    GENFORGE_LLM__API_KEY=sk-...
    GENFORGE_PIPELINE__STAGE_TIMEOUT_SECONDS=120
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    InitSettingsSource,
    PydanticBaseSettingsSource,
)

from genforge.core.exceptions import ConfigurationError


# Values read by load_config(); consumed as the lowest-priority settings source.
_yaml_values: ContextVar[dict[str, Any]] = ContextVar("genforge_yaml_values", default={})


# =============================================================================
# LLM Configuration
# =============================================================================
class LLMConfig(BaseModel):
    """Configuration for the text-generation provider.

    Supported Providers:
        - "openai": Any OpenAI-compatible chat completions endpoint
        - "gemini": Google Gemini models (google-genai SDK)
        - "mock":   Mock provider for testing (role-aware canned responses)

    Attributes:
        provider: Which provider implementation to use.
        model: The model identifier within the provider.
        api_key: API authentication key. Not needed for the mock provider.
        temperature: Sampling temperature (0.0 = deterministic).
        max_tokens: Maximum tokens per response.
        api_base_url: Custom API endpoint (proxies, self-hosted models).
        request_timeout_seconds: HTTP timeout for a single streaming request.
    """

    provider: str = Field(
        default="mock",
        description="LLM provider name: 'openai', 'gemini' or 'mock'",
    )
    model: str = Field(
        default="gpt-4o-mini",
        description="Model identifier within the provider",
    )
    api_key: Optional[str] = Field(
        default=None,
        description="API key for authentication (None for mock provider)",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="LLM temperature: 0.0=deterministic, 1.0=creative",
    )
    max_tokens: int = Field(
        default=8192,
        ge=1,
        le=128000,
        description="Maximum tokens per LLM response",
    )
    api_base_url: Optional[str] = Field(
        default=None,
        description="Custom API base URL (for proxies or self-hosted models)",
    )
    request_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="HTTP timeout for one streaming request",
    )


# =============================================================================
# Pipeline Configuration
# =============================================================================
# Knobs of the five-stage orchestrator. The default file paths are the
# canonical locations the renderer expects.
# =============================================================================
class PipelineConfig(BaseModel):
    """Configuration for the multi-stage PipelineOrchestrator.

    Attributes:
        stage_timeout_seconds: Upper bound for a single stage's agent call.
            None (the default) leaves stages unbounded.
        backend_sentinel: Phrase the backend agent uses to decline; when it
            appears in the backend output that output is not merged.
        entry_point_path: Path of the HTML entry point (also used by the
            legacy single-artifact extraction mode).
        stylesheet_path: Path of the default base stylesheet.
        readme_path: Path of the default README.
    """

    stage_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-stage timeout in seconds (None = unbounded)",
    )
    backend_sentinel: str = Field(
        default="No backend logic required",
        min_length=1,
        description="Backend 'nothing to do' phrase (matched case-insensitively)",
    )
    entry_point_path: str = Field(
        default="public/index.html",
        description="Path of the guaranteed HTML entry point",
    )
    stylesheet_path: str = Field(
        default="src/index.css",
        description="Path of the guaranteed base stylesheet",
    )
    readme_path: str = Field(
        default="README.md",
        description="Path of the guaranteed README",
    )


# =============================================================================
# Main Configuration
# =============================================================================
# Environment Variable Mapping:
#   GENFORGE_LOG_LEVEL        → config.log_level
#   GENFORGE_LLM__PROVIDER    → config.llm.provider  (nested with double underscore)
#   GENFORGE_PIPELINE__...    → config.pipeline.*
# =============================================================================
class GenForgeConfig(BaseSettings):
    """Top-level configuration for GenForge.

    Attributes:
        environment: Deployment environment.
        log_level: Logging level name used by configure_logging().
        json_logs: Render logs as JSON lines instead of console output.
        llm: Provider configuration (see LLMConfig).
        pipeline: Orchestrator configuration (see PipelineConfig).

    Example:
        >>> config = GenForgeConfig(
        ...     environment="dev",
        ...     llm=LLMConfig(provider="mock"),
        ... )
    """

    environment: Literal["dev", "staging", "prod"] = Field(
        default="dev",
        description="Deployment environment (affects defaults and verbosity)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    json_logs: bool = Field(
        default=False,
        description="Emit JSON log lines (recommended for prod)",
    )

    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="LLM provider configuration",
    )
    pipeline: PipelineConfig = Field(
        default_factory=PipelineConfig,
        description="Pipeline orchestrator configuration",
    )

    model_config = {
        "env_prefix": "GENFORGE_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Rank YAML values below the environment.

        Sources are deep-merged, so GENFORGE_LLM__API_KEY still applies when
        the YAML file has its own ``llm:`` section.
        """
        yaml_settings = InitSettingsSource(settings_cls, init_kwargs=_yaml_values.get())
        return (init_settings, env_settings, dotenv_settings, yaml_settings, file_secret_settings)


# =============================================================================
# Configuration Loader
# =============================================================================
def load_config(path: Optional[str] = None) -> GenForgeConfig:
    """Load GenForge configuration from a YAML file and/or environment variables.

    YAML values are the lowest-priority source: environment variables win,
    key by key, inside nested sections too.

    Args:
        path: Path to a YAML configuration file. If None, looks for
            'genforge.yaml' in the current directory and falls back to pure
            defaults + environment variables when it doesn't exist.

    Returns:
        A fully validated GenForgeConfig instance.

    Raises:
        FileNotFoundError: If an explicit path is provided but doesn't exist.
        ConfigurationError: If the YAML file cannot be parsed.
    """
    if path is None:
        default_path = Path("genforge.yaml")
        if default_path.exists():
            path = str(default_path)

    yaml_data: dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {path}. "
                f"Create one or use GENFORGE_* environment variables."
            )

        with open(config_path) as f:
            try:
                raw_data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    message=f"Invalid YAML in {path}: {e}",
                    error_code="INVALID_CONFIG_FILE",
                    details={"path": str(path)},
                ) from e
            if isinstance(raw_data, dict):
                yaml_data = raw_data

    token = _yaml_values.set(yaml_data)
    try:
        return GenForgeConfig()
    finally:
        _yaml_values.reset(token)


def get_default_config() -> GenForgeConfig:
    """Create a GenForgeConfig with defaults (overridden by any set env vars)."""
    return GenForgeConfig()
