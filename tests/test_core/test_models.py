"""
Tests for genforge.core.models and genforge.core.enums
========================================================

These tests verify the data models that flow through the pipeline:
    - FileArtifact / AgentRunRecord immutability
    - Structured agent outputs default every field
    - PipelineResult defaults and file_count
    - Enum string behaviour and the role-table exhaustiveness check
"""

import pytest
from pydantic import ValidationError

from genforge.core.enums import AgentRole, ContentType, StageStatus, ensure_role_table
from genforge.core.exceptions import (
    AgentError,
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
    PipelineResult,
    ProgressSnapshot,
    ReviewReport,
    RoleProgress,
)


# =============================================================================
# Tests: Enums
# =============================================================================
class TestEnums:
    """Tests for the str-based enumerations."""

    def test_roles_compare_with_strings(self) -> None:
        assert AgentRole.FRONTEND == "frontend"
        assert AgentRole("reviewer") is AgentRole.REVIEWER

    def test_role_order(self) -> None:
        assert [role.value for role in AgentRole] == [
            "coordinator", "architect", "frontend", "backend", "reviewer",
        ]

    def test_content_type_values_are_editor_ids(self) -> None:
        assert ContentType.SCRIPT.value == "javascript"
        assert ContentType.DOC.value == "markdown"

    def test_ensure_role_table_accepts_complete_table(self) -> None:
        ensure_role_table({role: role.value for role in AgentRole}, "table")

    def test_ensure_role_table_rejects_missing_role(self) -> None:
        table = {AgentRole.COORDINATOR: "x"}
        with pytest.raises(RuntimeError, match="architect"):
            ensure_role_table(table, "table")


# =============================================================================
# Tests: FileArtifact / AgentRunRecord
# =============================================================================
class TestFileArtifact:
    """Tests for the frozen FileArtifact model."""

    def test_create(self) -> None:
        artifact = FileArtifact(content_type=ContentType.STYLE, content="body{}")
        assert artifact.content_type == ContentType.STYLE
        assert artifact.content == "body{}"

    def test_empty_content_is_valid(self) -> None:
        assert FileArtifact(content_type=ContentType.PLAIN, content="").content == ""

    def test_is_frozen(self) -> None:
        artifact = FileArtifact(content_type=ContentType.STYLE, content="a")
        with pytest.raises(ValidationError):
            artifact.content = "b"

    def test_equality_by_value(self) -> None:
        a = FileArtifact(content_type=ContentType.MARKUP, content="<p>")
        b = FileArtifact(content_type=ContentType.MARKUP, content="<p>")
        assert a == b


class TestAgentRunRecord:
    """Tests for AgentRunRecord."""

    def test_timestamp_is_utc(self) -> None:
        record = AgentRunRecord(role=AgentRole.BACKEND, content="ok")
        assert record.timestamp.tzinfo is not None

    def test_is_frozen(self) -> None:
        record = AgentRunRecord(role=AgentRole.BACKEND, content="ok")
        with pytest.raises(ValidationError):
            record.content = "changed"


# =============================================================================
# Tests: Structured Agent Outputs
# =============================================================================
class TestStructuredOutputs:
    """Every field of the structured outputs has a default."""

    def test_plan_defaults(self) -> None:
        plan = DevelopmentPlan()
        assert plan.plan == ""
        assert plan.tasks == []

    def test_architecture_defaults_to_empty_file_list(self) -> None:
        assert ArchitectureDesign().files == []

    def test_review_defaults_to_not_approved(self) -> None:
        review = ReviewReport()
        assert review.approved is False
        assert review.issues == []

    def test_unknown_keys_ignored(self) -> None:
        review = ReviewReport.model_validate({"approved": True, "score": 9})
        assert review.approved is True

    def test_partial_issue_validates(self) -> None:
        review = ReviewReport.model_validate({"issues": [{"issue": "typo"}]})
        assert review.issues[0].severity == "low"


# =============================================================================
# Tests: PipelineResult / Progress
# =============================================================================
class TestPipelineResult:
    """Tests for PipelineResult."""

    def test_failure_defaults(self) -> None:
        result = PipelineResult(success=False, summary="Error: boom")
        assert result.files == {}
        assert result.run_records == []
        assert result.file_count == 0
        assert result.completed_at is None

    def test_file_count(self) -> None:
        result = PipelineResult(
            success=True,
            files={
                "a.css": FileArtifact(content_type=ContentType.STYLE, content=""),
                "b.js": FileArtifact(content_type=ContentType.SCRIPT, content=""),
            },
        )
        assert result.file_count == 2


class TestProgressModels:
    """Tests for RoleProgress / ProgressSnapshot bounds."""

    def test_progress_bounds(self) -> None:
        with pytest.raises(ValidationError):
            RoleProgress(role=AgentRole.ARCHITECT, status=StageStatus.WORKING, progress=101)

    def test_snapshot_bounds(self) -> None:
        with pytest.raises(ValidationError):
            ProgressSnapshot(overall=-1, per_role={})


# =============================================================================
# Tests: Exceptions
# =============================================================================
class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_provider_error_details(self) -> None:
        error = ProviderError("boom", provider="openai", details={"status_code": 500})
        assert isinstance(error, GenForgeError)
        assert error.details == {"status_code": 500, "provider": "openai"}

    def test_agent_error_carries_role(self) -> None:
        error = AgentError("failed", role="frontend", error_code="PROVIDER_FAILURE")
        assert error.role == "frontend"
        assert error.to_dict()["error_code"] == "PROVIDER_FAILURE"

    def test_cancelled_is_pipeline_error(self) -> None:
        error = PipelineCancelledError()
        assert isinstance(error, PipelineError)
        assert error.error_code == "CANCELLED"

    def test_project_not_found_message(self) -> None:
        error = ProjectNotFoundError("proj-1")
        assert error.message == "Project not found: proj-1"
        assert error.details["project_id"] == "proj-1"
