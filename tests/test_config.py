"""Tests for settings and startup configuration."""

import json

import pytest
from fastapi.testclient import TestClient

from app.core.config import DEFAULT_MODEL, Settings
from app.core.errors import ConfigError
from app.main import build_orchestrator, create_app
from tests.helpers import PROFILES


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("NVIDIA_MODEL", "PORT", "COMPLETION_TIMEOUT_SECONDS", "BUSINESS_PROFILES_PATH", "CORS_ORIGINS"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings()
        assert settings.nvidia_model == DEFAULT_MODEL
        assert settings.port == 3001
        assert settings.completion_timeout_seconds == 30.0
        assert settings.business_profiles_path == "config.json"
        assert settings.cors_origins == ["*"]

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("NVIDIA_API_KEY", raising=False)
        with pytest.raises(ConfigError, match="NVIDIA_API_KEY"):
            Settings().require_api_key()

    def test_timeout_clamped_and_bad_values_ignored(self, monkeypatch):
        monkeypatch.setenv("COMPLETION_TIMEOUT_SECONDS", "9999")
        assert Settings().completion_timeout_seconds == 300.0
        monkeypatch.setenv("COMPLETION_TIMEOUT_SECONDS", "soon")
        assert Settings().completion_timeout_seconds == 30.0

    def test_invalid_port(self, monkeypatch):
        monkeypatch.setenv("PORT", "eighty")
        with pytest.raises(ConfigError, match="PORT"):
            Settings().port

    def test_cors_origins_list(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://example.com")
        assert Settings().cors_origins == ["http://localhost:3000", "https://example.com"]


class TestStartup:
    def test_missing_profiles_file_is_fatal(self, monkeypatch, tmp_path):
        monkeypatch.setenv("NVIDIA_API_KEY", "test-key")
        monkeypatch.setenv("BUSINESS_PROFILES_PATH", str(tmp_path / "missing.json"))
        with pytest.raises(ConfigError):
            build_orchestrator(Settings())

    def test_missing_api_key_is_fatal(self, monkeypatch, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(PROFILES), encoding="utf-8")
        monkeypatch.delenv("NVIDIA_API_KEY", raising=False)
        monkeypatch.setenv("BUSINESS_PROFILES_PATH", str(path))
        with pytest.raises(ConfigError, match="NVIDIA_API_KEY"):
            build_orchestrator(Settings())

    def test_server_does_not_start_with_bad_config(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BUSINESS_PROFILES_PATH", str(tmp_path / "missing.json"))
        with pytest.raises(ConfigError):
            with TestClient(create_app()):
                pass
