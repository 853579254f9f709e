"""
genforge.orchestration.pipeline - Five-Stage Generation Pipeline
==================================================================

The PipelineOrchestrator runs a fixed sequence of role-bound agent calls and
derives one project FileSet from their combined output.

Stage Flow:

    user request
        │
        ▼
    ┌──────────────┐ plan JSON     (summary only, failure tolerated)
    │ 1 Coordinator│ ─────────────────────────────────────────────────┐
    └──────┬───────┘                                          25%     │
    ┌──────▼───────┐ architecture JSON (default: empty file list)     │
    │ 2 Architect  │ ──────────┐                              40%     │
    └──────┬───────┘           │ context                              │
    ┌──────▼───────┐           ▼                                      │
    │ 3 Frontend   │ ── files ─────────────────┐              60%     │
    └──────┬───────┘                           │                      │
    ┌──────▼───────┐                           │                      │
    │ 4 Backend    │ ── files (unless "No backend logic required")    │
    └──────┬───────┘                           │              80%     │
    ┌──────▼───────┐                           │                      │
    │ 5 Reviewer   │ ── review JSON (default: not approved)   90%     │
    └──────┬───────┘                           │                      │
    ┌──────▼───────┐                           ▼                      ▼
    │ 6 Synthesis  │  frontend ∪ backend ∪ default files ──→ PipelineResult  100%
    └──────────────┘

Failure Policy:
    Any failure in stages 1-6 (provider error, stage timeout, cancellation,
    an exception from the progress observer) ends the run with
    ``PipelineResult(success=False, files={}, summary="Error: ...")``.
    Run records gathered before the failure are kept for audit.

Usage:
    >>> orchestrator = PipelineOrchestrator(provider, config.pipeline)
    >>> result = await orchestrator.run(
    ...     "A pomodoro timer with a dark theme",
    ...     on_progress=lambda text, overall: print(f"{overall:>3.0f}% {text}"),
    ... )
    >>> sorted(result.files)
    ['README.md', 'public/index.html', 'src/App.jsx', 'src/index.css']
"""

from __future__ import annotations

import asyncio
import inspect
import json
import uuid
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional, Union

import structlog

from genforge.agents.agent import Agent
from genforge.core.cancellation import CancellationToken
from genforge.core.config import PipelineConfig
from genforge.core.enums import AgentRole, ContentType
from genforge.core.exceptions import GenForgeError, PipelineError
from genforge.core.models import (
    AgentRunRecord,
    ArchitectureDesign,
    DevelopmentPlan,
    FileArtifact,
    FileSet,
    PipelineResult,
    ReviewReport,
)
from genforge.integrations.llm.base import BaseLLMProvider
from genforge.parsing.artifact_extractor import extract_files
from genforge.parsing.json_extractor import extract_model, extract_structured


# =============================================================================
# Logger
# =============================================================================
logger = structlog.get_logger()


# (status_text, overall) → None, or an awaitable for async observers.
ProgressCallback = Callable[[str, float], Union[None, Awaitable[None]]]


# =============================================================================
# Stage Table
# =============================================================================
# Stage order, and the (status text, overall) emitted when each completes.
# =============================================================================
STAGE_ORDER: tuple[AgentRole, ...] = (
    AgentRole.COORDINATOR,
    AgentRole.ARCHITECT,
    AgentRole.FRONTEND,
    AgentRole.BACKEND,
    AgentRole.REVIEWER,
)

PLANNING_DONE = ("Architect designing structure...", 25.0)
ARCHITECTURE_DONE = ("Frontend building UI components...", 40.0)
FRONTEND_DONE = ("Backend implementing logic...", 60.0)
BACKEND_DONE = ("Reviewer checking code quality...", 80.0)
REVIEW_DONE = ("Synthesizing final project...", 90.0)
SYNTHESIS_DONE = ("Complete!", 100.0)


# =============================================================================
# Default File Templates
# =============================================================================
DEFAULT_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Generated App</title>
  <script src="https://cdn.tailwindcss.com"></script>
  <script src="https://unpkg.com/react@18/umd/react.development.js"></script>
  <script src="https://unpkg.com/react-dom@18/umd/react-dom.development.js"></script>
  <script src="https://unpkg.com/@babel/standalone/babel.min.js"></script>
  <script src="https://unpkg.com/lucide@latest"></script>
</head>
<body>
  <div id="root"></div>
</body>
</html>"""

DEFAULT_CSS = """@import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap');

body {
  font-family: 'Inter', sans-serif;
  margin: 0;
  padding: 0;
}"""

DEFAULT_README = """# Generated Project

Generated by the GenForge multi-agent pipeline."""


class PipelineOrchestrator:
    """Runs the five agent stages and synthesizes the final FileSet.

    A new set of Agents is created for every run, so concurrent runs on the
    same orchestrator share nothing but the provider.

    Attributes:
        provider: Provider handed to every Agent.
        config: Pipeline knobs (stage timeout, sentinel, default paths).
    """

    def __init__(
        self,
        provider: BaseLLMProvider,
        config: Optional[PipelineConfig] = None,
    ) -> None:
        self._provider = provider
        self._config = config or PipelineConfig()
        self._logger = logger.bind(component="pipeline_orchestrator")

    @property
    def config(self) -> PipelineConfig:
        return self._config

    # =========================================================================
    # Public API
    # =========================================================================

    async def run(
        self,
        user_request: str,
        *,
        on_progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> PipelineResult:
        """Run all stages for ``user_request``.

        Args:
            user_request: The user's description of the app to build.
            on_progress: Observer called with (status_text, overall) after
                every stage. May be a plain function or a coroutine function.
            cancel_token: Checked before every stage and between fragments.

        Returns:
            PipelineResult. ``success`` is False if any stage failed.

        Raises:
            PipelineError: If ``user_request`` is empty (nothing is run).
        """
        if not user_request or not user_request.strip():
            raise PipelineError(
                message="User request must not be empty",
                error_code="EMPTY_REQUEST",
            )

        token = cancel_token or CancellationToken()
        agents = {role: Agent(role, self._provider) for role in STAGE_ORDER}
        run_logger = self._logger.bind(run_id=uuid.uuid4().hex[:12])
        started_at = datetime.now(timezone.utc)

        run_logger.info("pipeline_starting", request_length=len(user_request))

        try:
            result = await self._execute(user_request, agents, token, on_progress, run_logger)
        except Exception as e:
            message = e.message if isinstance(e, GenForgeError) else str(e)
            run_logger.error(
                "pipeline_failed",
                error=message,
                error_type=type(e).__name__,
                error_code=getattr(e, "error_code", None),
            )
            return PipelineResult(
                success=False,
                files={},
                run_records=self._collect_records(agents),
                summary=f"Error: {message or 'Unknown error'}",
                started_at=started_at,
                completed_at=datetime.now(timezone.utc),
            )

        result.started_at = started_at
        result.completed_at = datetime.now(timezone.utc)
        run_logger.info(
            "pipeline_completed",
            file_count=result.file_count,
            approved=result.review.approved if result.review else False,
        )
        return result

    # =========================================================================
    # Stages
    # =========================================================================

    async def _execute(
        self,
        user_request: str,
        agents: dict[AgentRole, Agent],
        token: CancellationToken,
        on_progress: Optional[ProgressCallback],
        run_logger: structlog.typing.FilteringBoundLogger,
    ) -> PipelineResult:
        # --- Stage 1: planning ---
        plan_response = await self._run_stage(
            agents[AgentRole.COORDINATOR],
            f'Analyze this request and create a development plan: "{user_request}"\n\n'
            "Break it down into specific tasks for the Architect, Frontend, and Backend "
            "agents. Respond with a JSON object containing the plan and task assignments.",
            None,
            token,
            run_logger,
        )
        plan = extract_model(plan_response, DevelopmentPlan)
        await self._emit(on_progress, *PLANNING_DONE)

        # --- Stage 2: architecture ---
        architecture_response = await self._run_stage(
            agents[AgentRole.ARCHITECT],
            f"Design the architecture for: {user_request}\n\n"
            "Plan the component hierarchy, file structure, and data flow. "
            "List all files that need to be created with their purposes.",
            None,
            token,
            run_logger,
        )
        # Any parsed object is handed on as-is; only unparseable output
        # falls back to the empty design.
        architecture = extract_structured(architecture_response)
        if architecture is None:
            architecture = ArchitectureDesign().model_dump()
        architecture_context = "Architecture plan:\n" + json.dumps(architecture, indent=2)
        await self._emit(on_progress, *ARCHITECTURE_DONE)

        # --- Stage 3: frontend ---
        frontend_response = await self._run_stage(
            agents[AgentRole.FRONTEND],
            f"Build the React components for: {user_request}\n\n"
            "Create the main App.jsx component and any other necessary components. "
            "Use Tailwind CSS for styling and lucide-react for icons.",
            architecture_context,
            token,
            run_logger,
        )
        await self._emit(on_progress, *FRONTEND_DONE)

        # --- Stage 4: backend ---
        backend_response = await self._run_stage(
            agents[AgentRole.BACKEND],
            f"Create utility functions and logic for: {user_request}\n\n"
            "If the app needs utility functions, data processing, or helpers, create them. "
            f'If not needed, respond with "{self._config.backend_sentinel} for this project."',
            architecture_context,
            token,
            run_logger,
        )
        backend_skipped = self.is_backend_sentinel(backend_response)
        await self._emit(on_progress, *BACKEND_DONE)

        # --- Stage 5: review ---
        review_response = await self._run_stage(
            agents[AgentRole.REVIEWER],
            f"Review the generated code for: {user_request}\n\n"
            "Check for bugs, suggest improvements, and ensure best practices.",
            f"Frontend code:\n{frontend_response}\n\nBackend code:\n{backend_response}",
            token,
            run_logger,
        )
        review = extract_model(review_response, ReviewReport, ReviewReport())
        await self._emit(on_progress, *REVIEW_DONE)

        # --- Stage 6: synthesis ---
        token.raise_if_cancelled()
        files = self.synthesize(frontend_response, None if backend_skipped else backend_response)
        run_logger.info(
            "stage_completed",
            stage="synthesis",
            file_count=len(files),
            backend_skipped=backend_skipped,
        )
        await self._emit(on_progress, *SYNTHESIS_DONE)

        return PipelineResult(
            success=True,
            files=files,
            run_records=self._collect_records(agents),
            summary=self._summarize(files, review, plan),
            plan=plan,
            review=review,
        )

    async def _run_stage(
        self,
        agent: Agent,
        task: str,
        context: Optional[str],
        token: CancellationToken,
        run_logger: structlog.typing.FilteringBoundLogger,
    ) -> str:
        token.raise_if_cancelled()
        run_logger.info("stage_starting", stage=agent.role.value)

        call = agent.run(task, context, cancel_token=token)
        timeout = self._config.stage_timeout_seconds
        if timeout is None:
            response = await call
        else:
            try:
                response = await asyncio.wait_for(call, timeout=timeout)
            except asyncio.TimeoutError as e:
                raise PipelineError(
                    message=f"{agent.name} stage timed out after {timeout} seconds",
                    error_code="STAGE_TIMEOUT",
                    details={"role": agent.role.value, "timeout_seconds": timeout},
                ) from e

        run_logger.info(
            "stage_completed",
            stage=agent.role.value,
            response_length=len(response),
        )
        return response

    @staticmethod
    async def _emit(on_progress: Optional[ProgressCallback], status_text: str, overall: float) -> None:
        if on_progress is None:
            return
        outcome = on_progress(status_text, overall)
        if inspect.isawaitable(outcome):
            await outcome

    # =========================================================================
    # Synthesis
    # =========================================================================

    def is_backend_sentinel(self, backend_response: str) -> bool:
        """True if the backend declined to produce anything."""
        return self._config.backend_sentinel.lower() in backend_response.lower()

    def synthesize(self, frontend_response: str, backend_response: Optional[str]) -> FileSet:
        """Merge extracted files and add the default files that are missing.

        Args:
            frontend_response: Raw frontend output.
            backend_response: Raw backend output, or None when it was skipped.

        Returns:
            The final FileSet. Backend files override frontend files on the
            same path.
        """
        entry_point = self._config.entry_point_path
        files: FileSet = {}
        files.update(extract_files(frontend_response, entry_point_path=entry_point) or {})
        if backend_response is not None:
            files.update(extract_files(backend_response, entry_point_path=entry_point) or {})

        defaults = (
            (entry_point, ContentType.MARKUP, DEFAULT_HTML),
            (self._config.stylesheet_path, ContentType.STYLE, DEFAULT_CSS),
            (self._config.readme_path, ContentType.DOC, DEFAULT_README),
        )
        for path, content_type, content in defaults:
            if path not in files:
                files[path] = FileArtifact(content_type=content_type, content=content)
        return files

    @staticmethod
    def _collect_records(agents: dict[AgentRole, Agent]) -> list[AgentRunRecord]:
        records: list[AgentRunRecord] = []
        for role in STAGE_ORDER:
            records.extend(agents[role].run_log)
        return records

    @staticmethod
    def _summarize(
        files: FileSet,
        review: Optional[ReviewReport],
        plan: Optional[DevelopmentPlan],
    ) -> str:
        approved = review is not None and review.approved
        summary = (
            f"Project created successfully with {len(files)} files. "
            + ("Code review passed." if approved else "Code review completed with suggestions.")
        )
        if plan is not None and plan.plan:
            summary += f" Plan: {plan.plan}"
        return summary
