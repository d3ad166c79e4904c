import os
from pathlib import Path

import pytest

from core import env_loader
from core.errors import MissingCredential
from core.project_store import DEFAULT_STORAGE_PATH


@pytest.fixture
def clean_env(monkeypatch):
    for var in ("ANISCRIPT_TEXT_MODEL", "ANISCRIPT_IMAGE_MODEL", "ANISCRIPT_STORAGE_PATH",
                "ANISCRIPT_PREVIEW_WORKERS", "ANISCRIPT_LOG_LEVEL", env_loader.RUNTIME_KEY_VAR,
                *env_loader.KEY_VARS):
        monkeypatch.delenv(var, raising=False)
    yield monkeypatch
    # set_runtime_key / load_dotenv write os.environ directly
    env_loader.clear_runtime_key()


def test_default_settings(clean_env):
    s = env_loader.load_settings()
    assert s.text_model == "gemini-2.5-flash"
    assert s.image_model == "gemini-2.5-flash-image"
    assert s.storage_path == DEFAULT_STORAGE_PATH
    assert s.preview_workers == 3
    assert s.log_level == "INFO"


def test_settings_from_env(clean_env, tmp_path):
    clean_env.setenv("ANISCRIPT_TEXT_MODEL", "gemini-2.5-pro")
    clean_env.setenv("ANISCRIPT_STORAGE_PATH", str(tmp_path / "p.json"))
    clean_env.setenv("ANISCRIPT_PREVIEW_WORKERS", "5")
    s = env_loader.load_settings()
    assert s.text_model == "gemini-2.5-pro"
    assert s.storage_path == Path(tmp_path / "p.json")
    assert s.preview_workers == 5


def test_bad_worker_count_falls_back(clean_env):
    clean_env.setenv("ANISCRIPT_PREVIEW_WORKERS", "many")
    assert env_loader.load_settings().preview_workers == 3


def test_key_format_and_info():
    assert env_loader.validate_key_format("AIza-abc")
    assert not env_loader.validate_key_format("")
    assert not env_loader.validate_key_format("has space")
    assert env_loader.get_key_info("") == "no key"
    assert env_loader.get_key_info("abcd").startswith("key_len=4")


def test_runtime_key_set_and_clear(clean_env):
    clean_env.setenv("GEMINI_API_KEY", "placeholder")
    clean_env.setenv("GOOGLE_API_KEY", "placeholder")
    env_loader.set_runtime_key("new-key")
    assert os.environ["GEMINI_API_KEY"] == "new-key"
    assert os.environ["GOOGLE_API_KEY"] == "new-key"
    env_loader.clear_runtime_key()
    assert "GEMINI_API_KEY" not in os.environ
    assert env_loader.RUNTIME_KEY_VAR not in os.environ


def test_session_key_survives_dotenv_reload(clean_env, tmp_path):
    clean_env.chdir(tmp_path)
    (tmp_path / ".env").write_text("GEMINI_API_KEY=from-file\n", encoding="utf-8")
    assert env_loader.load_env() == "from-file"

    env_loader.set_runtime_key("typed-in-sidebar")
    assert env_loader.load_env() == "typed-in-sidebar"
    assert os.environ["GEMINI_API_KEY"] == "typed-in-sidebar"

    env_loader.clear_runtime_key()
    assert env_loader.load_env() == "from-file"


def test_write_dotenv_key(clean_env, tmp_path):
    clean_env.chdir(tmp_path)
    clean_env.setenv("GEMINI_API_KEY", "placeholder")
    clean_env.setenv("GOOGLE_API_KEY", "placeholder")
    assert env_loader.write_dotenv_key("k-123") is True
    assert "GEMINI_API_KEY='k-123'" in (tmp_path / ".env").read_text(encoding="utf-8")
    assert os.environ["GEMINI_API_KEY"] == "k-123"


def test_written_key_replaces_session_override(clean_env, tmp_path):
    clean_env.chdir(tmp_path)
    env_loader.set_runtime_key("session-only")
    assert env_loader.write_dotenv_key("k-456") is True
    assert env_loader.load_env() == "k-456"


def test_init_client_without_key():
    with pytest.raises(MissingCredential):
        env_loader.init_client("")
