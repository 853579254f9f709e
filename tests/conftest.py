"""
Shared Test Fixtures for GenForge
===================================

This module provides reusable pytest fixtures used across the entire
test suite. Fixtures are organized by layer:

    1. Configuration fixtures
    2. Infrastructure fixtures (ProjectStore)
    3. Integration fixtures (LLM providers)
    4. Orchestration fixtures (PipelineOrchestrator, GenerationSession)
    5. Facade fixtures (GenForge)
"""

from __future__ import annotations

import pytest

from genforge.core.config import GenForgeConfig, LLMConfig
from genforge.facade import GenForge
from genforge.infrastructure.project_store import InMemoryProjectStore
from genforge.integrations.llm.mock import MockLLMProvider
from genforge.orchestration.pipeline import PipelineOrchestrator
from genforge.orchestration.session import GenerationSession


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture
def config():
    """GenForge configuration with defaults and the mock provider."""
    return GenForgeConfig(llm=LLMConfig(provider="mock"))


# =============================================================================
# Infrastructure
# =============================================================================

@pytest.fixture
def project_store():
    """Fresh InMemoryProjectStore."""
    return InMemoryProjectStore()


# =============================================================================
# LLM Provider
# =============================================================================

@pytest.fixture
def mock_provider():
    """Fresh MockLLMProvider with no queued responses."""
    return MockLLMProvider(fragment_size=16)


# =============================================================================
# Orchestration
# =============================================================================

@pytest.fixture
def pipeline(mock_provider, config):
    """PipelineOrchestrator wired to the mock provider."""
    return PipelineOrchestrator(mock_provider, config.pipeline)


@pytest.fixture
def session(mock_provider):
    """GenerationSession with the default system instruction."""
    return GenerationSession(mock_provider)


# =============================================================================
# Facade
# =============================================================================

@pytest.fixture
async def forge(config, mock_provider, project_store):
    """Initialized GenForge facade using the mock provider."""
    instance = GenForge(config, provider=mock_provider, project_store=project_store)
    await instance.initialize()
    yield instance
    await instance.shutdown()
