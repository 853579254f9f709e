"""
genforge.core.exceptions - Custom Exception Hierarchy
=======================================================

Components raise and catch specific exception types that carry contextual
information instead of bare strings.

Exception Hierarchy:
    GenForgeError (base)
        ├── ConfigurationError      - Invalid config, unknown provider, missing key
        ├── ProviderError           - Text-generation provider rejected or dropped a stream
        ├── AgentError              - An Agent's call failed
        ├── PipelineError           - Orchestration-level failures (stage timeout, bad input)
        │     └── PipelineCancelledError - A cancellation token fired
        └── ProjectNotFoundError    - Project store lookup failed

Error Handling Flow:
    Provider raises ProviderError
        → Agent wraps it in AgentError (status → ERROR, no retry)
        → PipelineOrchestrator catches it and returns PipelineResult(success=False)
        → GenerationSession lets it propagate to the caller

Extraction problems (unparseable JSON, no code fence yet) are NOT errors:
the parsers return None or a default instead of raising.

Usage:
    >>> from genforge.core.exceptions import ProviderError
    >>> raise ProviderError(
    ...     message="OpenAI API error: 401",
    ...     error_code="PROVIDER_HTTP_ERROR",
    ...     details={"status_code": 401},
    ... )
"""

from __future__ import annotations

from typing import Any, Optional


# =============================================================================
# Base Exception
# =============================================================================
class GenForgeError(Exception):
    """Base exception for all GenForge errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code, UPPER_SNAKE_CASE
            (e.g., "PROVIDER_FAILURE", "STAGE_TIMEOUT").
        details: Arbitrary dict with additional debugging context.

    Example:
        >>> try:
        ...     await agent.run("Build a todo app")
        ... except GenForgeError as e:
        ...     print(f"[{e.error_code}] {e.message}")
    """

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize this exception to a dictionary.

        Returns:
            Dictionary with error_type, message, error_code, and details.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


# =============================================================================
# Configuration Error
# =============================================================================
class ConfigurationError(GenForgeError):
    """Raised when GenForge configuration is invalid or incomplete.

    Common Causes:
        - Unknown LLM provider name
        - Missing API key for a real provider
        - Malformed YAML configuration file
    """

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIG_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


# =============================================================================
# Provider Error
# =============================================================================
# The two failure modes of a text-generation provider ("rejected before first
# fragment" and "stream terminated early") both surface as this one type.
# =============================================================================
class ProviderError(GenForgeError):
    """Raised when the text-generation provider fails.

    Attributes:
        provider: Name of the provider that failed ("openai", "mock", ...).
    """

    def __init__(
        self,
        message: str,
        provider: str = "unknown",
        error_code: str = "PROVIDER_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["provider"] = provider

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.provider = provider


# =============================================================================
# Agent Error
# =============================================================================
class AgentError(GenForgeError):
    """Raised when an Agent's request/response cycle fails.

    Attributes:
        role: Role value of the agent that failed ("frontend", ...).

    Example:
        >>> raise AgentError(
        ...     message="Provider stream terminated early",
        ...     role="frontend",
        ...     error_code="PROVIDER_FAILURE",
        ... )
    """

    def __init__(
        self,
        message: str,
        role: str,
        error_code: str = "AGENT_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["role"] = role

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.role = role


# =============================================================================
# Pipeline Errors
# =============================================================================
class PipelineError(GenForgeError):
    """Raised for orchestration-level failures.

    Common Causes:
        - A stage exceeded pipeline.stage_timeout_seconds
        - Empty user request
        - Attempt to store a failed PipelineResult
    """

    def __init__(
        self,
        message: str,
        error_code: str = "PIPELINE_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class PipelineCancelledError(PipelineError):
    """Raised at a checkpoint when a CancellationToken has been cancelled."""

    def __init__(
        self,
        message: str = "Generation was cancelled",
        error_code: str = "CANCELLED",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


# =============================================================================
# Project Store Error
# =============================================================================
class ProjectNotFoundError(GenForgeError):
    """Raised when a project id does not exist in the project store."""

    def __init__(
        self,
        project_id: str,
        error_code: str = "PROJECT_NOT_FOUND",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["project_id"] = project_id

        super().__init__(
            message=f"Project not found: {project_id}",
            error_code=error_code,
            details=enriched_details,
        )

        self.project_id = project_id
