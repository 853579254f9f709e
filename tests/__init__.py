"""
GenForge Test Suite
===================

Test organization mirrors the source code structure:
    tests/
    ├── test_core/          → Tests for genforge.core (config, models, cancellation, logging)
    ├── test_parsing/       → Tests for genforge.parsing (artifact and JSON extraction)
    ├── test_agents/        → Tests for genforge.agents (prompts, Agent)
    ├── test_orchestration/ → Tests for genforge.orchestration (pipeline, session, progress)
    ├── test_infrastructure/→ Tests for genforge.infrastructure (project store)
    ├── test_integrations/  → Tests for genforge.integrations (LLM providers)
    ├── test_integration/   → End-to-end integration tests
    └── conftest.py         → Shared pytest fixtures

Running Tests:
    pytest                          # Run all tests
    pytest tests/test_parsing/      # Run only parser tests
    pytest -m integration           # Run only integration tests
"""
