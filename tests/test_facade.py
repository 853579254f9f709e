"""
Tests for genforge.facade - GenForge Top-Level Facade
=======================================================

What's Being Tested:
    - Initialization and shutdown lifecycle
    - Async context manager (async with)
    - Provider construction and ownership
    - Pipeline runs with projected progress snapshots
    - Chat sessions handed out by the facade
    - Saving results to the project store
    - Error handling (uninitialized access, failed results)

All tests use the mock provider and the in-memory project store.
"""

import pytest

from genforge.core.config import GenForgeConfig, LLMConfig
from genforge.core.enums import AgentRole, StageStatus
from genforge.core.exceptions import ConfigurationError, PipelineError
from genforge.core.models import PipelineResult
from genforge.facade import GenForge
from genforge.infrastructure.project_store import InMemoryProjectStore
from genforge.integrations.llm.mock import MockLLMProvider
from genforge.integrations.llm.openai_compatible import OpenAICompatibleProvider


# =============================================================================
# Tests: Lifecycle
# =============================================================================
class TestLifecycle:
    """Tests for initialize / shutdown / async with."""

    async def test_initialize_and_shutdown(self) -> None:
        forge = GenForge()
        assert forge.is_initialized is False

        await forge.initialize()
        assert forge.is_initialized is True

        await forge.shutdown()
        assert forge.is_initialized is False

    async def test_idempotent(self) -> None:
        forge = GenForge()
        await forge.initialize()
        await forge.initialize()
        await forge.shutdown()
        await forge.shutdown()
        assert forge.is_initialized is False

    async def test_async_context_manager(self) -> None:
        async with GenForge() as forge:
            assert forge.is_initialized
        assert not forge.is_initialized

    async def test_uninitialized_access_raises(self) -> None:
        forge = GenForge()
        with pytest.raises(RuntimeError, match="not been initialized"):
            await forge.run_pipeline("Todo app")
        with pytest.raises(RuntimeError):
            forge.new_session()

    def test_repr(self) -> None:
        assert "provider='mock'" in repr(GenForge())


# =============================================================================
# Tests: Provider Construction
# =============================================================================
class TestProviderConstruction:
    """The facade builds its provider from configuration."""

    def test_default_provider_is_mock(self) -> None:
        assert isinstance(GenForge().provider, MockLLMProvider)

    def test_openai_provider_from_config(self) -> None:
        config = GenForgeConfig(llm=LLMConfig(provider="openai", api_key="sk-test"))
        assert isinstance(GenForge(config).provider, OpenAICompatibleProvider)

    def test_unknown_provider(self) -> None:
        with pytest.raises(ConfigurationError):
            GenForge(GenForgeConfig(llm=LLMConfig(provider="nope")))

    def test_injected_components_used(self, mock_provider, project_store) -> None:
        forge = GenForge(provider=mock_provider, project_store=project_store)
        assert forge.provider is mock_provider
        assert forge.project_store is project_store

    def test_pipeline_uses_pipeline_config(self) -> None:
        config = GenForgeConfig()
        config.pipeline.readme_path = "docs/README.md"
        assert GenForge(config).pipeline.config.readme_path == "docs/README.md"

    async def test_injected_provider_not_closed(self) -> None:
        closed: list[bool] = []

        class TrackingProvider(MockLLMProvider):
            async def aclose(self) -> None:
                closed.append(True)

        async with GenForge(provider=TrackingProvider()):
            pass
        assert closed == []


# =============================================================================
# Tests: Pipeline Runs
# =============================================================================
class TestRunPipeline:
    """Tests for GenForge.run_pipeline()."""

    async def test_run_pipeline(self, forge) -> None:
        result = await forge.run_pipeline("A counter app")

        assert result.success is True
        assert "public/index.html" in result.files

    async def test_progress_snapshots(self, forge) -> None:
        snapshots = []

        await forge.run_pipeline(
            "A counter app",
            on_progress=lambda text, overall, snapshot: snapshots.append(snapshot),
        )

        assert [s.overall for s in snapshots] == [25, 40, 60, 80, 90, 100]
        assert snapshots[0].per_role[AgentRole.ARCHITECT].status == StageStatus.WORKING
        assert all(rp.status == StageStatus.DONE for rp in snapshots[-1].per_role.values())

    async def test_async_progress_observer(self, forge) -> None:
        texts: list[str] = []

        async def on_progress(text, overall, snapshot) -> None:
            texts.append(text)

        await forge.run_pipeline("A counter app", on_progress=on_progress)

        assert texts[-1] == "Complete!"


# =============================================================================
# Tests: Sessions
# =============================================================================
class TestSessions:
    """Tests for GenForge.new_session()."""

    async def test_new_session(self, forge) -> None:
        session = forge.new_session()

        turn = await session.send("A landing page")

        assert "public/index.html" in turn.files

    async def test_sessions_are_independent(self, forge) -> None:
        first = forge.new_session()
        second = forge.new_session(system_instruction="Be brief")

        await first.send("A landing page")

        assert second.history == []
        assert second.system_instruction == "Be brief"


# =============================================================================
# Tests: Project Storage
# =============================================================================
class TestProjectStorage:
    """Tests for save_result / get_project / list_projects."""

    async def test_save_result(self, forge) -> None:
        result = await forge.run_pipeline("A counter app")

        record = await forge.save_result(result, name="Counter", tags=["demo"])

        assert record.files == result.files
        assert record.description == result.summary
        assert (await forge.get_project(record.project_id)).name == "Counter"
        assert [p.project_id for p in await forge.list_projects()] == [record.project_id]

    async def test_explicit_description(self, forge) -> None:
        result = await forge.run_pipeline("A counter app")
        record = await forge.save_result(result, name="Counter", description="Mine")
        assert record.description == "Mine"

    async def test_failed_result_rejected(self, forge) -> None:
        failed = PipelineResult(success=False, summary="Error: boom")

        with pytest.raises(PipelineError) as exc_info:
            await forge.save_result(failed, name="Broken")

        assert exc_info.value.error_code == "FAILED_RESULT"
        assert await forge.list_projects() == []

    async def test_default_store(self) -> None:
        assert isinstance(GenForge().project_store, InMemoryProjectStore)
