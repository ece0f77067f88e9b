from __future__ import annotations

import logging

import pytest

from logic import logging_utils


@pytest.fixture
def log_dir(monkeypatch, tmp_path):
    target = tmp_path / "logs"
    monkeypatch.setenv("AIA_LOG_DIR", str(target))
    logging_utils.shutdown_logging()
    root = logging.getLogger()
    level = root.level
    yield target
    logging_utils.shutdown_logging()
    root.setLevel(level)


def test_setup_logging_writes_markdown_files(log_dir):
    path = logging_utils.setup_logging()

    assert path == log_dir / "last_run.md"
    assert logging_utils.setup_logging() == path
    assert logging_utils.get_last_run_log_path() == path

    logging.getLogger("aia.test").info("Template rendered")
    for handler in logging.getLogger().handlers:
        handler.flush()

    last_run = path.read_text(encoding="utf-8")
    history = (log_dir / "app.md").read_text(encoding="utf-8")
    assert last_run.startswith("# AIA generator: last run")
    assert "INFO · aia.test" in last_run
    assert "Template rendered" in history


def test_history_skips_debug_records(log_dir):
    logging_utils.setup_logging()

    logging.getLogger("aia.test").debug("detail only")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "detail only" in (log_dir / "last_run.md").read_text(encoding="utf-8")
    assert "detail only" not in (log_dir / "app.md").read_text(encoding="utf-8")


def test_console_handler_added_once(log_dir):
    root = logging.getLogger()

    assert logging_utils.enable_console_logging(logging.WARNING) is True
    assert logging_utils.enable_console_logging(logging.ERROR) is True

    consoles = [h for h in root.handlers if getattr(h, logging_utils._CONSOLE_MARK, False)]
    assert len(consoles) == 1
    assert consoles[0].level == logging.ERROR


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, logging.WARNING),
        ("debug", logging.DEBUG),
        ("INFO", logging.INFO),
        ("loud", logging.WARNING),
    ],
)
def test_console_level_from_env(monkeypatch, value, expected):
    if value is None:
        monkeypatch.delenv("AIA_LOG_LEVEL", raising=False)
    else:
        monkeypatch.setenv("AIA_LOG_LEVEL", value)

    assert logging_utils.console_level_from_env() == expected
