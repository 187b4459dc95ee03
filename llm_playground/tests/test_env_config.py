"""Environment variable mapping and path resolution."""
from __future__ import annotations

from pathlib import Path

from llm_playground.config.env import (
    CONFIG_DIR_ENV,
    DB_PATH_ENV,
    config_dir,
    default_db_path,
    get_env_var_candidates,
    get_env_var_name,
    is_placeholder,
    resolve_provider_key,
)


def test_env_names_and_aliases():
    assert get_env_var_name("OpenAI") == "OPENAI_API_KEY"  # nosec B101
    assert get_env_var_name("unknown") is None  # nosec B101
    assert list(get_env_var_candidates("gemini")) == ["GEMINI_API_KEY", "GOOGLE_API_KEY"]  # nosec B101


def test_placeholders_are_skipped(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "your-key-placeholder")
    monkeypatch.setenv("GOOGLE_API_KEY", "g-real")
    assert is_placeholder("CHANGEME") and not is_placeholder("sk-abc")  # nosec B101
    assert resolve_provider_key("gemini") == ("g-real", "GOOGLE_API_KEY")  # nosec B101
    assert resolve_provider_key("anthropic") == (None, None)  # nosec B101


def test_config_dir_precedence(monkeypatch, tmp_path):
    monkeypatch.setenv(CONFIG_DIR_ENV, str(tmp_path / "explicit"))
    assert config_dir() == tmp_path / "explicit" / "llm-playground"  # nosec B101
    monkeypatch.delenv(CONFIG_DIR_ENV)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    assert config_dir() == tmp_path / "xdg" / "llm-playground"  # nosec B101
    monkeypatch.delenv("XDG_CONFIG_HOME")
    assert config_dir() == Path.home() / ".config" / "llm-playground"  # nosec B101


def test_db_path_override(monkeypatch, tmp_path):
    assert default_db_path() == config_dir() / "history.db"  # nosec B101
    monkeypatch.setenv(DB_PATH_ENV, str(tmp_path / "elsewhere.db"))
    assert default_db_path() == tmp_path / "elsewhere.db"  # nosec B101
