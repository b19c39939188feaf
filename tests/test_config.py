"""Tests for environment-driven settings."""
from __future__ import annotations

import os
from pathlib import Path

import pytest

from contact_book.config import ConfigError, DEFAULT_CONTACTS_PATH, load_settings
from contact_book.contacts import StoreConfig


ENV_VARS = [
    "CB_CONTACTS_PATH",
    "CB_CONTACTS_ENCODING",
    "CB_ENV",
    "CB_HOST",
    "CB_PORT",
    "CB_LOG_LEVEL",
    "CB_ALLOWED_ORIGINS",
]


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestLoadSettings:
    def test_defaults(self, clean_env):
        settings = load_settings()
        assert settings.contacts_path == clean_env / DEFAULT_CONTACTS_PATH
        assert settings.contacts_encoding == "utf-8"
        assert settings.environment == "local"
        assert settings.port == 3000
        assert settings.log_level == "INFO"
        assert settings.allowed_origins == []

    def test_reads_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv("CB_CONTACTS_PATH", "/data/contacts.json")
        monkeypatch.setenv("CB_ENV", "staging")
        monkeypatch.setenv("CB_PORT", "8080")
        monkeypatch.setenv("CB_LOG_LEVEL", "debug")
        monkeypatch.setenv("CB_ALLOWED_ORIGINS", "https://a.example, ,https://b.example")

        settings = load_settings()

        assert settings.contacts_path == Path("/data/contacts.json")
        assert settings.environment == "staging"
        assert settings.port == 8080
        assert settings.log_level == "DEBUG"
        assert settings.allowed_origins == ["https://a.example", "https://b.example"]

    def test_reads_dotenv_file(self, clean_env):
        env_file = clean_env / "custom.env"
        env_file.write_text("CB_ENV=from-dotenv\n", encoding="utf-8")
        try:
            assert load_settings(env_file=str(env_file)).environment == "from-dotenv"
        finally:
            os.environ.pop("CB_ENV", None)

    @pytest.mark.parametrize("port", ["abc", "0", "70000"])
    def test_invalid_port(self, clean_env, monkeypatch, port):
        monkeypatch.setenv("CB_PORT", port)
        with pytest.raises(ConfigError):
            load_settings()

    def test_invalid_log_level(self, clean_env, monkeypatch):
        monkeypatch.setenv("CB_LOG_LEVEL", "chatty")
        with pytest.raises(ConfigError):
            load_settings()

    def test_store_config(self, clean_env, monkeypatch):
        monkeypatch.setenv("CB_CONTACTS_PATH", str(clean_env / "c.json"))
        monkeypatch.setenv("CB_CONTACTS_ENCODING", "utf-16")
        assert load_settings().store_config() == StoreConfig(
            path=clean_env / "c.json", encoding="utf-16"
        )
