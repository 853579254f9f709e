"""
Tests for genforge.core.config
================================

These tests verify that the configuration system works correctly:
    - Default values are sensible and complete
    - Environment variables override defaults
    - YAML files are parsed correctly and rank below environment variables
    - Validation catches invalid values
    - Nested configs (LLM, pipeline) work properly

All tests are unit tests; they don't need any external service.
"""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from genforge.core.config import (
    GenForgeConfig,
    LLMConfig,
    PipelineConfig,
    get_default_config,
    load_config,
)
from genforge.core.exceptions import ConfigurationError


# =============================================================================
# Test: Default Configuration
# =============================================================================
# Creating a GenForgeConfig with no arguments must produce a runnable
# configuration: the mock provider needs no API key.
# =============================================================================
class TestDefaultConfig:
    """Tests for default configuration values."""

    def test_default_config_creates_successfully(self) -> None:
        """GenForgeConfig() should work with no arguments (zero-config startup)."""
        config = GenForgeConfig()
        assert config is not None

    def test_default_environment_is_dev(self) -> None:
        config = GenForgeConfig()
        assert config.environment == "dev"

    def test_default_log_settings(self) -> None:
        config = GenForgeConfig()
        assert config.log_level == "INFO"
        assert config.json_logs is False

    def test_default_provider_is_mock(self) -> None:
        """The mock provider is the default so the pipeline runs offline."""
        config = GenForgeConfig()
        assert config.llm.provider == "mock"
        assert config.llm.api_key is None

    def test_default_pipeline_paths(self) -> None:
        config = GenForgeConfig()
        assert config.pipeline.entry_point_path == "public/index.html"
        assert config.pipeline.stylesheet_path == "src/index.css"
        assert config.pipeline.readme_path == "README.md"

    def test_stage_timeout_is_opt_in(self) -> None:
        """Stages are unbounded unless a timeout is configured."""
        assert PipelineConfig().stage_timeout_seconds is None

    def test_default_backend_sentinel(self) -> None:
        assert PipelineConfig().backend_sentinel == "No backend logic required"

    def test_get_default_config(self) -> None:
        assert isinstance(get_default_config(), GenForgeConfig)


# =============================================================================
# Test: Validation
# =============================================================================
class TestConfigValidation:
    """Tests for field constraints."""

    def test_invalid_environment_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GenForgeConfig(environment="production")

    def test_temperature_bounds(self) -> None:
        LLMConfig(temperature=0.0)
        LLMConfig(temperature=2.0)
        with pytest.raises(ValidationError):
            LLMConfig(temperature=2.5)

    def test_max_tokens_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            LLMConfig(max_tokens=0)

    def test_stage_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            PipelineConfig(stage_timeout_seconds=0)

    def test_empty_sentinel_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PipelineConfig(backend_sentinel="")


# =============================================================================
# Test: Environment Variables
# =============================================================================
class TestEnvironmentOverrides:
    """Tests for GENFORGE_* environment variable overrides."""

    def test_top_level_override(self, monkeypatch) -> None:
        monkeypatch.setenv("GENFORGE_LOG_LEVEL", "DEBUG")
        assert GenForgeConfig().log_level == "DEBUG"

    def test_nested_llm_override(self, monkeypatch) -> None:
        monkeypatch.setenv("GENFORGE_LLM__PROVIDER", "openai")
        monkeypatch.setenv("GENFORGE_LLM__API_KEY", "sk-test")
        config = GenForgeConfig()
        assert config.llm.provider == "openai"
        assert config.llm.api_key == "sk-test"

    def test_nested_pipeline_override(self, monkeypatch) -> None:
        monkeypatch.setenv("GENFORGE_PIPELINE__STAGE_TIMEOUT_SECONDS", "45")
        assert GenForgeConfig().pipeline.stage_timeout_seconds == 45.0


# =============================================================================
# Test: YAML Loading
# =============================================================================
class TestLoadConfig:
    """Tests for load_config()."""

    def test_load_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "genforge.yaml"
        path.write_text(yaml.safe_dump({
            "environment": "staging",
            "llm": {"provider": "openai", "model": "gpt-4o", "api_key": "sk-yaml"},
            "pipeline": {"stage_timeout_seconds": 30},
        }))

        config = load_config(str(path))

        assert config.environment == "staging"
        assert config.llm.model == "gpt-4o"
        assert config.pipeline.stage_timeout_seconds == 30.0

    def test_missing_explicit_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml_raises_configuration_error(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("llm: [unclosed\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(str(path))

        assert exc_info.value.error_code == "INVALID_CONFIG_FILE"

    def test_empty_yaml_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(str(path)).llm.provider == "mock"

    def test_no_path_and_no_default_file(self, tmp_path: Path, monkeypatch) -> None:
        """Without genforge.yaml in the cwd, defaults are used."""
        monkeypatch.chdir(tmp_path)
        assert load_config().environment == "dev"

    def test_default_file_in_cwd_is_picked_up(self, tmp_path: Path, monkeypatch) -> None:
        (tmp_path / "genforge.yaml").write_text("log_level: WARNING\n")
        monkeypatch.chdir(tmp_path)
        assert load_config().log_level == "WARNING"

    def test_environment_beats_yaml(self, tmp_path: Path, monkeypatch) -> None:
        path = tmp_path / "genforge.yaml"
        path.write_text("log_level: INFO\nllm:\n  provider: openai\n  model: gpt-4o\n")
        monkeypatch.setenv("GENFORGE_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("GENFORGE_LLM__API_KEY", "sk-env")

        config = load_config(str(path))

        assert config.log_level == "DEBUG"
        assert config.llm.api_key == "sk-env"
        assert config.llm.provider == "openai"
        assert config.llm.model == "gpt-4o"

    def test_environment_overrides_single_yaml_key(self, tmp_path: Path, monkeypatch) -> None:
        path = tmp_path / "genforge.yaml"
        path.write_text("llm:\n  model: gpt-4o\n  api_key: sk-yaml\n")
        monkeypatch.setenv("GENFORGE_LLM__API_KEY", "sk-env")

        config = load_config(str(path))

        assert config.llm.api_key == "sk-env"
        assert config.llm.model == "gpt-4o"

    def test_yaml_does_not_leak_into_later_configs(self, tmp_path: Path) -> None:
        path = tmp_path / "genforge.yaml"
        path.write_text("log_level: ERROR\n")
        load_config(str(path))

        assert GenForgeConfig().log_level == "INFO"
