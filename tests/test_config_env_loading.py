"""
Test environment file loading precedence and settings validation.

Tests that already-set environment variables win over .env values,
that .env is found from nested working directories, and that the
API_/STORAGE_/PROFILE_ groups read their own prefixes.
"""

import os

import pytest
from pydantic import ValidationError as PydanticValidationError

from docsypatient.core.config import (
    ApiSettings,
    Settings,
    StorageSettings,
    _load_env_file_if_available,
    get_settings,
    reset_settings,
)


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    for name in ("API_BASE_URL", "API_PAGE_SIZE", "STORAGE_BACKEND", "PROFILE_STRICT_MEMBERSHIP"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


def test_env_file_found_from_nested_directory(monkeypatch, tmp_path):
    """Test that .env in a parent directory is loaded."""
    (tmp_path / ".env").write_text("API_BASE_URL=https://from-env-file.example\n")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)

    try:
        _load_env_file_if_available()
        assert os.getenv("API_BASE_URL") == "https://from-env-file.example"
    finally:
        # load_dotenv writes os.environ directly, outside monkeypatch
        os.environ.pop("API_BASE_URL", None)


def test_already_set_env_vars_take_precedence(monkeypatch, tmp_path):
    """Test that already-set environment variables are not overridden."""
    monkeypatch.setenv("API_BASE_URL", "https://already-set.example")
    (tmp_path / ".env").write_text("API_BASE_URL=https://from-env-file.example\n")
    monkeypatch.chdir(tmp_path)

    settings = get_settings()

    assert settings.api.base_url == "https://already-set.example"


def test_no_env_files_no_crash(monkeypatch, tmp_path):
    """Test that a missing .env does not cause a crash."""
    monkeypatch.chdir(tmp_path)
    _load_env_file_if_available()

    settings = get_settings()
    assert settings.api.base_url.startswith("http")
    assert get_settings() is settings


def test_sub_settings_read_prefixed_env(monkeypatch):
    monkeypatch.setenv("API_BASE_URL", "http://localhost:3001/")
    monkeypatch.setenv("API_PAGE_SIZE", "25")
    monkeypatch.setenv("STORAGE_BACKEND", "MEMORY")
    monkeypatch.setenv("PROFILE_STRICT_MEMBERSHIP", "true")

    settings = Settings()

    assert settings.api.base_url == "http://localhost:3001"
    assert settings.api.page_size == 25
    assert settings.storage.backend == "memory"
    assert settings.profile.strict_membership is True


def test_explicit_sub_settings_are_kept(monkeypatch):
    monkeypatch.setenv("API_BASE_URL", "https://ignored.example")

    settings = Settings(api=ApiSettings(base_url="http://explicit.example"))

    assert settings.api.base_url == "http://explicit.example"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"base_url": "ftp://docsyerp.in"},
        {"page_size": 0},
        {"timeout_seconds": -1},
    ],
)
def test_invalid_api_settings_rejected(kwargs):
    with pytest.raises(PydanticValidationError):
        ApiSettings(**kwargs)


def test_invalid_storage_backend_rejected():
    with pytest.raises(PydanticValidationError):
        StorageSettings(backend="sqlite")


def test_storage_path_expands_home():
    settings = StorageSettings(path="~/state.json")
    assert "~" not in str(settings.resolved_path)
