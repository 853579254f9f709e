"""
genforge.core.models - Core Data Models
=========================================

This module defines the Pydantic data models that flow through the
generation pipeline.

Model Map:
    FileArtifact       → one extracted file (content type + content)
    FileSet            → path → FileArtifact (the virtual project)
    AgentRunRecord     → audit entry written once per completed agent call
    DevelopmentPlan    → coordinator's structured plan
    ArchitectureDesign → architect's structured design
    ReviewReport       → reviewer's structured verdict
    PipelineResult     → the sole externally consumed output of a pipeline run
    RoleProgress       → projected status of one role
    ProgressSnapshot   → projected status of every role for one overall value

Data Flow:
    ┌──────────────┐  text   ┌────────────────────┐  FileSet   ┌────────────┐
    │  Agent.run() │ ──────→ │ extract_files()    │ ─────────→ │ Pipeline   │
    └──────────────┘         └────────────────────┘            │ Result     │
           │                 ┌────────────────────┐  Plan/     └────────────┘
           └───────────────→ │ extract_model()    │  Review
                             └────────────────────┘

Design Principles:
    1. Structured agent outputs default every field, so partially valid JSON
       still validates and a missing object falls back to the model default.
    2. FileArtifact and AgentRunRecord are frozen: a new extraction replaces
       them instead of mutating them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from genforge.core.enums import AgentRole, ContentType, StageStatus


def _now() -> datetime:
    """Current UTC timestamp. Every timestamp in GenForge is UTC."""
    return datetime.now(timezone.utc)


# =============================================================================
# Extracted Files
# =============================================================================
class FileArtifact(BaseModel):
    """One file of the generated project.

    Attributes:
        content_type: Content-type tag assigned by the language classifier.
        content: The file body. An empty string is a valid (empty) file.

    Example:
        >>> FileArtifact(content_type=ContentType.STYLE, content="body{}")
    """

    model_config = ConfigDict(frozen=True)

    content_type: ContentType = Field(description="Content-type tag of the file")
    content: str = Field(description="File body")


# A FileSet maps a normalized relative path to its artifact.
FileSet = dict[str, FileArtifact]


# =============================================================================
# Agent Audit Log
# =============================================================================
class AgentRunRecord(BaseModel):
    """Append-only log entry created when an Agent's call completes.

    Only the pipeline's synthesis step reads these back (frontend/backend
    content); everything else treats them as audit data.
    """

    model_config = ConfigDict(frozen=True)

    role: AgentRole = Field(description="Role of the agent that produced the content")
    content: str = Field(description="Full response text")
    timestamp: datetime = Field(default_factory=_now, description="Completion time (UTC)")


# =============================================================================
# Structured Agent Outputs
# =============================================================================
# The coordinator, architect and reviewer answer with JSON. These models are
# the typed view of those answers. Unknown keys are ignored.
# =============================================================================
class PlannedTask(BaseModel):
    """One delegated task in the coordinator's plan."""

    agent: str = Field(default="", description="Role the task is delegated to")
    description: str = Field(default="", description="What the role should do")


class DevelopmentPlan(BaseModel):
    """The coordinator's plan. Used only to enrich the run summary."""

    plan: str = Field(default="", description="Brief description of the overall plan")
    tasks: list[PlannedTask] = Field(default_factory=list)


class ArchitectureDesign(BaseModel):
    """The architect's design; defaults to an empty file list."""

    structure: dict[str, Any] = Field(
        default_factory=dict,
        description="Components, state approach and data flow",
    )
    files: list[Any] = Field(
        default_factory=list,
        description="Files the architect expects (paths or {path, purpose} objects)",
    )


class ReviewIssue(BaseModel):
    """One issue raised by the reviewer."""

    file: str = Field(default="")
    severity: str = Field(default="low", description="high | medium | low")
    issue: str = Field(default="")
    fix: str = Field(default="")


class ReviewReport(BaseModel):
    """The reviewer's verdict. Default: not approved, no issues recorded."""

    issues: list[ReviewIssue] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    approved: bool = Field(default=False)


# =============================================================================
# Pipeline Result
# =============================================================================
class PipelineResult(BaseModel):
    """Outcome of one orchestration run.

    Consumers must treat ``success=False`` as "no usable files produced"
    regardless of what ``files`` contains.

    Attributes:
        success: Whether all stages completed.
        files: The synthesized FileSet (empty on failure).
        run_records: Audit log of every completed agent call, in stage order.
        summary: Human-readable summary, or "Error: ..." on failure.
        plan: The coordinator's plan, when one could be extracted.
        review: The reviewer's report (default report when extraction failed).
        started_at: When the run started (UTC).
        completed_at: When the run finished (UTC).
    """

    success: bool
    files: FileSet = Field(default_factory=dict)
    run_records: list[AgentRunRecord] = Field(default_factory=list)
    summary: str = ""
    plan: Optional[DevelopmentPlan] = None
    review: Optional[ReviewReport] = None
    started_at: datetime = Field(default_factory=_now)
    completed_at: Optional[datetime] = None

    @property
    def file_count(self) -> int:
        """Number of files in the result."""
        return len(self.files)


# =============================================================================
# Progress Telemetry
# =============================================================================
class RoleProgress(BaseModel):
    """Projected status of one role for a given overall progress."""

    role: AgentRole
    status: StageStatus
    progress: float = Field(ge=0.0, le=100.0)
    activity: str = Field(default="", description="Short human-readable activity text")


class ProgressSnapshot(BaseModel):
    """Projected status of every role. Recomputed from ``overall`` on each tick."""

    overall: float = Field(ge=0.0, le=100.0)
    per_role: dict[AgentRole, RoleProgress]
