"""Shared test fixtures for the optjobs test suite."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from optjobs.jobs.executor import JobExecutor
from optjobs.jobs.models import JobCreate
from optjobs.jobs.runners.inmemory import InMemoryMaintenanceRunner
from optjobs.jobs.service import OptimizationJobService
from optjobs.jobs.stores.inmemory import InMemoryJobStore


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "[execution]\\nmax_concurrent_jobs = 2",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            if self.original_env[key] is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = self.original_env[key]


@pytest.fixture
def env_override() -> Generator[Callable[[dict[str, str]], EnvOverrideContext], None, None]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"OPTJOBS_ENV": "test"}):
                ...
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    yield _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear cached settings and loaded TOML before and after each test."""
    from optjobs.config import get_settings
    from optjobs.config.settings import set_toml_config

    get_settings.cache_clear()
    set_toml_config({})
    yield
    get_settings.cache_clear()
    set_toml_config({})


@pytest.fixture
def job_store() -> InMemoryJobStore:
    return InMemoryJobStore()


@pytest.fixture
def runner() -> InMemoryMaintenanceRunner:
    """Runner that fails any statement mentioning a missing table."""
    return InMemoryMaintenanceRunner(fail_on=["missing_table"])


@pytest.fixture
def executor(job_store: InMemoryJobStore, runner: InMemoryMaintenanceRunner) -> JobExecutor:
    return JobExecutor(job_store, runner)


@pytest.fixture
def service(job_store: InMemoryJobStore, executor: JobExecutor) -> OptimizationJobService:
    return OptimizationJobService(job_store, executor)


@pytest.fixture
def make_request() -> Callable[..., JobCreate]:
    """Factory for valid submissions; keyword arguments override fields."""

    def _make(**overrides: Any) -> JobCreate:
        fields: dict[str, Any] = {
            "agent_name": "acme",
            "schema_name": "public",
            "sql": "CREATE INDEX idx_x ON t(x)",
        }
        fields.update(overrides)
        return JobCreate(**fields)

    return _make
