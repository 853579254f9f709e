"""
genforge.facade - GenForge Top-Level Facade
=============================================

The single entry point tying the layers together: it builds the provider
from configuration, runs the pipeline with projected progress, hands out
chat sessions and stores results.

Architecture Context:

    ┌──────────────────────────────────────────────────┐
    │                GenForge (Facade)                  │
    │                                                   │
    │  ┌─────────────────────────────────────────────┐ │
    │  │         Orchestration Layer                  │ │
    │  │  PipelineOrchestrator, GenerationSession,    │ │
    │  │  project_progress                            │ │
    │  └─────────────────────┬───────────────────────┘ │
    │  ┌─────────────────────▼───────────────────────┐ │
    │  │   Agent Layer  +  Parsing (pure functions)   │ │
    │  └─────────────────────┬───────────────────────┘ │
    │  ┌─────────────────────▼───────────────────────┐ │
    │  │  Infrastructure: ProjectStore                │ │
    │  │  Integrations:   LLM providers               │ │
    │  └─────────────────────────────────────────────┘ │
    └──────────────────────────────────────────────────┘

Usage:
    >>> async with GenForge(load_config()) as forge:
    ...     result = await forge.run_pipeline(
    ...         "A habit tracker with streaks",
    ...         on_progress=lambda text, overall, snapshot: print(overall, text),
    ...     )
    ...     if result.success:
    ...         record = await forge.save_result(result, name="Habit tracker")
"""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Optional, Union

import structlog

from genforge.core.cancellation import CancellationToken
from genforge.core.config import GenForgeConfig
from genforge.core.exceptions import PipelineError
from genforge.core.models import PipelineResult, ProgressSnapshot
from genforge.infrastructure.project_store import (
    InMemoryProjectStore,
    ProjectRecord,
    ProjectStore,
)
from genforge.integrations.llm.base import BaseLLMProvider
from genforge.integrations.llm.factory import create_llm_provider
from genforge.orchestration.pipeline import PipelineOrchestrator
from genforge.orchestration.progress import project_progress
from genforge.orchestration.session import GenerationSession


# =============================================================================
# Logger
# =============================================================================
logger = structlog.get_logger()


# (status_text, overall, snapshot) → None, or an awaitable.
SnapshotCallback = Callable[[str, float, ProgressSnapshot], Union[None, Awaitable[None]]]


class GenForge:
    """Top-level facade for GenForge.

    Args:
        config: GenForge configuration. Defaults to GenForgeConfig(), which
            reads GENFORGE_* environment variables.
        provider: Optional provider instance. When omitted one is built from
            ``config.llm`` and closed again on shutdown().
        project_store: Optional project store. Defaults to InMemoryProjectStore.
    """

    def __init__(
        self,
        config: Optional[GenForgeConfig] = None,
        *,
        provider: Optional[BaseLLMProvider] = None,
        project_store: Optional[ProjectStore] = None,
    ) -> None:
        self._config = config or GenForgeConfig()

        # --- Integration Layer ---
        self._owns_provider = provider is None
        self._provider = provider or create_llm_provider(self._config.llm)

        # --- Infrastructure Layer ---
        self._project_store = project_store or InMemoryProjectStore()

        # --- Orchestration Layer ---
        self._pipeline = PipelineOrchestrator(self._provider, self._config.pipeline)

        self._initialized = False
        self._logger = logger.bind(component="genforge")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def config(self) -> GenForgeConfig:
        return self._config

    @property
    def provider(self) -> BaseLLMProvider:
        return self._provider

    @property
    def pipeline(self) -> PipelineOrchestrator:
        return self._pipeline

    @property
    def project_store(self) -> ProjectStore:
        return self._project_store

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    # =========================================================================
    # Lifecycle Management
    # =========================================================================

    async def initialize(self) -> None:
        """Mark the facade ready. Idempotent."""
        if self._initialized:
            self._logger.debug("genforge_already_initialized")
            return
        self._initialized = True
        self._logger.info(
            "genforge_initialized",
            provider=self._provider.provider_name,
            model=self._provider.model,
            environment=self._config.environment,
        )

    async def shutdown(self) -> None:
        """Release the provider if the facade created it. Idempotent."""
        if not self._initialized:
            self._logger.debug("genforge_not_initialized_skipping_shutdown")
            return
        if self._owns_provider:
            await self._provider.aclose()
        self._initialized = False
        self._logger.info("genforge_shutdown_complete")

    async def __aenter__(self) -> GenForge:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.shutdown()

    # =========================================================================
    # Generation
    # =========================================================================

    async def run_pipeline(
        self,
        request: str,
        *,
        on_progress: Optional[SnapshotCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> PipelineResult:
        """Run the five-stage pipeline for ``request``.

        Args:
            request: The user's description of the app.
            on_progress: Observer receiving (status_text, overall, snapshot)
                after every stage, where snapshot is the projected per-role
                ProgressSnapshot. May be sync or async.
            cancel_token: Optional token to stop the run between stages.

        Returns:
            The PipelineResult (``success=False`` on any stage failure).
        """
        self._ensure_initialized()

        async def forward(status_text: str, overall: float) -> None:
            if on_progress is None:
                return
            outcome = on_progress(status_text, overall, project_progress(overall))
            if inspect.isawaitable(outcome):
                await outcome

        return await self._pipeline.run(
            request,
            on_progress=forward,
            cancel_token=cancel_token,
        )

    def new_session(self, *, system_instruction: Optional[str] = None) -> GenerationSession:
        """Create a caller-owned single-agent chat session."""
        self._ensure_initialized()
        if system_instruction is None:
            return GenerationSession(self._provider, config=self._config.pipeline)
        return GenerationSession(
            self._provider,
            system_instruction=system_instruction,
            config=self._config.pipeline,
        )

    # =========================================================================
    # Project Storage
    # =========================================================================

    async def save_result(
        self,
        result: PipelineResult,
        name: str,
        description: str = "",
        tags: Optional[list[str]] = None,
    ) -> ProjectRecord:
        """Store the files of a successful pipeline run as a project.

        Raises:
            PipelineError: If ``result.success`` is False (a failed run has
                no usable files).
        """
        if not result.success:
            raise PipelineError(
                message="Cannot save a failed pipeline result",
                error_code="FAILED_RESULT",
                details={"summary": result.summary},
            )
        record = await self._project_store.save(
            ProjectRecord(
                name=name,
                description=description or result.summary,
                files=dict(result.files),
                tags=list(tags or []),
            )
        )
        self._logger.info("project_saved", project_id=record.project_id, file_count=len(record.files))
        return record

    async def get_project(self, project_id: str) -> Optional[ProjectRecord]:
        return await self._project_store.get(project_id)

    async def list_projects(self) -> list[ProjectRecord]:
        return await self._project_store.list_projects()

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError(
                "GenForge has not been initialized. "
                "Call await forge.initialize() or use 'async with GenForge() as forge:'"
            )

    def __repr__(self) -> str:
        return (
            f"GenForge("
            f"initialized={self._initialized}, "
            f"provider={self._provider.provider_name!r})"
        )
