"""Settings and startup behaviour."""

import logging

import pytest

from music_server import main as main_module
from music_server.config import APP_DIR, Settings, load_settings
from music_server.main import create_app


def test_defaults():
    settings = load_settings({})
    assert settings.port == 8292
    assert settings.music_dir == (APP_DIR / "music").resolve()
    assert settings.chunk_size == 64 * 1024
    assert settings.log_level == "INFO"


def test_environment_overrides(tmp_path):
    settings = load_settings({
        "PORT": "9000",
        "MUSIC_DIR": str(tmp_path),
        "CHUNK_SIZE": "4096",
        "IDLE_TIMEOUT": "30",
        "LOG_LEVEL": "debug",
    })
    assert settings.port == 9000
    assert settings.music_dir == tmp_path.resolve()
    assert settings.chunk_size == 4096
    assert settings.idle_timeout == 30
    assert settings.log_level == "DEBUG"


def test_relative_music_dir_resolves_from_app_dir():
    settings = load_settings({"MUSIC_DIR": "library/../songs"})
    assert settings.music_dir == (APP_DIR / "songs").resolve()


def test_create_app_requires_music_dir(tmp_path):
    with pytest.raises(RuntimeError, match="Music directory not found"):
        create_app(Settings(music_dir=tmp_path / "missing"))


def test_main_exits_when_music_dir_missing(tmp_path, monkeypatch, caplog):
    monkeypatch.setattr(main_module, "load_settings",
                        lambda: Settings(music_dir=tmp_path / "missing"))

    def no_run(*args, **kwargs):
        raise AssertionError("server must not start")

    monkeypatch.setattr(main_module.uvicorn, "run", no_run)
    with caplog.at_level(logging.ERROR), pytest.raises(SystemExit) as exc:
        main_module.main()
    assert exc.value.code == 1
    assert "Music directory not found" in caplog.text


def test_main_starts_uvicorn(tmp_path, monkeypatch):
    calls = {}
    monkeypatch.setattr(main_module, "load_settings",
                        lambda: Settings(music_dir=tmp_path, port=8300, idle_timeout=5))
    monkeypatch.setattr(main_module.uvicorn, "run",
                        lambda app, **kwargs: calls.update(app=app, **kwargs))
    main_module.main()
    assert calls["port"] == 8300
    assert calls["timeout_keep_alive"] == 5
    assert calls["app"].state.settings.music_dir == tmp_path
