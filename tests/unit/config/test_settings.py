"""Unit tests for Settings class and get_settings function."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from optjobs.config import get_settings, reload_settings
from optjobs.config.models import ExecutionConfig, JobStoreConfig
from optjobs.config.settings import Settings, set_toml_config


class TestSettings:
    """Tests for Settings model."""

    def test_default_values(self) -> None:
        settings = Settings()
        assert settings.app_name == "optjobs"
        assert settings.storage.jobs.backend == "postgres"
        assert settings.storage.jobs.query_timeout == 30.0
        assert settings.execution.max_concurrent_jobs is None
        assert settings.observability.logging.level == "INFO"
        assert settings.observability.logging.redact_secrets is True

    def test_toml_values_apply(self) -> None:
        set_toml_config({"execution": {"max_concurrent_jobs": 2}})
        assert Settings().execution.max_concurrent_jobs == 2

    def test_env_overrides_toml(self, env_override) -> None:
        set_toml_config({"storage": {"jobs": {"backend": "postgres"}}})
        with env_override({"OPTJOBS_STORAGE__JOBS__BACKEND": "inmemory"}):
            settings = Settings()
        assert settings.storage.jobs.backend == "inmemory"

    def test_invalid_backend_rejected(self) -> None:
        set_toml_config({"storage": {"jobs": {"backend": "sqlite"}}})
        with pytest.raises(ValidationError):
            Settings()


class TestConfigModels:
    """Tests for nested configuration models."""

    def test_pool_bounds_checked(self) -> None:
        with pytest.raises(ValidationError):
            JobStoreConfig(min_pool_size=5, max_pool_size=2)

    def test_max_concurrent_jobs_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            ExecutionConfig(max_concurrent_jobs=0)


class TestGetSettings:
    """Tests for get_settings function."""

    def test_loads_environment_file(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        mock_toml_files({
            "default.toml": '[storage.jobs]\nbackend = "postgres"',
            "test.toml": '[storage.jobs]\nbackend = "inmemory"',
        })
        monkeypatch.setenv("OPTJOBS_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("OPTJOBS_ENV", "test")

        assert get_settings().storage.jobs.backend == "inmemory"

    def test_is_cached(self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPTJOBS_CONFIG_DIR", str(test_config_dir))
        assert get_settings() is get_settings()

    def test_reload_picks_up_changes(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OPTJOBS_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("OPTJOBS_ENV", "test")
        mock_toml_files({"default.toml": "[execution]\nshutdown_timeout = 10.0"})
        first = get_settings()

        mock_toml_files({"default.toml": "[execution]\nshutdown_timeout = 20.0"})
        second = reload_settings()

        assert first.execution.shutdown_timeout == 10.0
        assert second.execution.shutdown_timeout == 20.0
