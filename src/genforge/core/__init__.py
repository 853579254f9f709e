"""
genforge.core - Foundation Layer
================================

Building blocks every other GenForge package depends on:

    - config:        Configuration management (GenForgeConfig, LLMConfig, PipelineConfig)
    - enums:         Closed enumerations (AgentRole, AgentStatus, StageStatus, ContentType)
    - models:        Pydantic data models (FileArtifact, PipelineResult, ProgressSnapshot)
    - exceptions:    Custom exception hierarchy for structured error handling
    - cancellation:  CancellationToken shared by the session and pipeline paths
    - logging:       structlog setup for applications

Dependency Rule:
    core/ depends on NOTHING else in the genforge package.
"""

from genforge.core.cancellation import CancellationToken
from genforge.core.config import GenForgeConfig, LLMConfig, PipelineConfig
from genforge.core.enums import (
    AgentRole,
    AgentStatus,
    ChatRole,
    ContentType,
    StageStatus,
)
from genforge.core.exceptions import (
    AgentError,
    ConfigurationError,
    GenForgeError,
    PipelineCancelledError,
    PipelineError,
    ProjectNotFoundError,
    ProviderError,
)
from genforge.core.models import (
    AgentRunRecord,
    ArchitectureDesign,
    DevelopmentPlan,
    FileArtifact,
    FileSet,
    PipelineResult,
    PlannedTask,
    ProgressSnapshot,
    ReviewIssue,
    ReviewReport,
    RoleProgress,
)

__all__ = [
    # Config
    "GenForgeConfig",
    "LLMConfig",
    "PipelineConfig",
    # Enums
    "AgentRole",
    "AgentStatus",
    "ChatRole",
    "ContentType",
    "StageStatus",
    # Models
    "AgentRunRecord",
    "ArchitectureDesign",
    "DevelopmentPlan",
    "FileArtifact",
    "FileSet",
    "PipelineResult",
    "PlannedTask",
    "ProgressSnapshot",
    "ReviewIssue",
    "ReviewReport",
    "RoleProgress",
    # Cancellation
    "CancellationToken",
    # Exceptions
    "GenForgeError",
    "ConfigurationError",
    "ProviderError",
    "AgentError",
    "PipelineError",
    "PipelineCancelledError",
    "ProjectNotFoundError",
]
