import importlib
import logging

import pytest

from task_tracker import run


def test_help(capsys) -> None:
    run.main(["help"])

    assert "task-tracker [command]" in capsys.readouterr().out


def test_unknown_mode_exits(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        run.main(["bogus"])

    assert exc_info.value.code == 1
    assert "Unknown mode: bogus" in capsys.readouterr().out


def test_prod_mode_uses_settings(monkeypatch) -> None:
    calls = {}

    def fake_run(app_path, **kwargs):
        calls["app"] = app_path
        calls.update(kwargs)

    monkeypatch.setattr("uvicorn.run", fake_run)
    monkeypatch.setenv("PORT", "9100")
    monkeypatch.setenv("WEB_CONCURRENCY", "3")
    run.get_settings.cache_clear()
    try:
        run.main(["prod"])
    finally:
        run.get_settings.cache_clear()

    assert calls["app"] == "task_tracker.main:app"
    assert calls["port"] == 9100
    assert calls["workers"] == 3


def test_main_configures_correlated_logging(monkeypatch, capsys) -> None:
    levels = []
    monkeypatch.setattr(run, "configure_logging", levels.append)
    monkeypatch.setenv("LOG_LEVEL", "debug")
    run.get_settings.cache_clear()
    try:
        run.main(["help"])
    finally:
        run.get_settings.cache_clear()

    assert levels == ["DEBUG"]


def test_import_leaves_root_logger_alone() -> None:
    root = logging.getLogger()
    handlers = list(root.handlers)

    importlib.reload(run)

    assert root.handlers == handlers
