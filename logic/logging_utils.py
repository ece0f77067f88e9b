"""Logging setup for the AIA generator.

Two Markdown files are written: ``last_run.md`` with the full debug trace of
the current invocation, and a rotating ``app.md`` history of INFO records.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from tempfile import gettempdir
from typing import List, Optional

_FILE_MARK = "__aia_file_handler__"
_CONSOLE_MARK = "__aia_console_handler__"

LOG_DIR_NAME = "logs"
LAST_RUN_LOG_NAME = "last_run.md"
ROTATING_LOG_NAME = "app.md"
ROTATING_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
ROTATING_BACKUP_COUNT = 5

_configured = False
_last_run_log_path: Optional[Path] = None


def _log_directories() -> List[Path]:
    dirs = []
    custom = os.getenv("AIA_LOG_DIR")
    if custom:
        dirs.append(Path(custom))
    dirs.append(Path.cwd() / LOG_DIR_NAME)
    dirs.append(Path.home() / ".aia_templates" / LOG_DIR_NAME)
    dirs.append(Path(gettempdir()) / "aia_templates_logs")
    return dirs


def _ensure_log_directory() -> Path:
    for directory in _log_directories():
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError:
            continue
        return directory
    return Path.cwd()


def console_level_from_env(default: int = logging.WARNING) -> int:
    """Return the level named by ``AIA_LOG_LEVEL`` (``DEBUG``, ``info``...)."""

    name = (os.getenv("AIA_LOG_LEVEL") or "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


class _MarkdownFormatter(logging.Formatter):
    """One Markdown section per record."""

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        text = super().format(record).rstrip()
        body = f"{text}\n" if text else ""
        return f"---\n### {stamp} · {record.levelname} · {record.name}\n\n{body}"


def _start_markdown_file(path: Path, title: str, truncate: bool) -> None:
    if truncate or not path.exists() or path.stat().st_size == 0:
        path.write_text(f"# {title}\n\n", encoding="utf-8")


def _mark(handler: logging.Handler, mark: str) -> logging.Handler:
    setattr(handler, mark, True)
    return handler


def enable_console_logging(level: int = logging.INFO) -> bool:
    """Stream log records at *level* and above to stderr.

    Returns ``False`` when the process has no usable stream.
    """

    root = logging.getLogger()
    for handler in root.handlers:
        if getattr(handler, _CONSOLE_MARK, False):
            handler.setLevel(level)
            return True

    stream = sys.stderr or sys.stdout
    if stream is None:
        return False

    console = logging.StreamHandler(stream)
    console.setLevel(level)
    console.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    root.addHandler(_mark(console, _CONSOLE_MARK))
    return True


def setup_logging() -> Path:
    """Attach the Markdown file handlers to the root logger.

    Calling it again returns the existing ``last_run.md`` path.
    """

    global _configured, _last_run_log_path

    if _configured and _last_run_log_path is not None:
        return _last_run_log_path

    log_dir = _ensure_log_directory()
    last_run_log = log_dir / LAST_RUN_LOG_NAME
    history_log = log_dir / ROTATING_LOG_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        if getattr(handler, _FILE_MARK, False):
            root.removeHandler(handler)
            handler.close()

    formatter = _MarkdownFormatter("%(message)s")

    _start_markdown_file(last_run_log, "AIA generator: last run", truncate=True)
    last_run = logging.FileHandler(last_run_log, mode="a", encoding="utf-8")
    last_run.setLevel(logging.DEBUG)
    last_run.setFormatter(formatter)

    _start_markdown_file(history_log, "AIA document generation history", truncate=False)
    history = RotatingFileHandler(
        history_log,
        maxBytes=ROTATING_MAX_BYTES,
        backupCount=ROTATING_BACKUP_COUNT,
        encoding="utf-8",
    )
    history.setLevel(logging.INFO)
    history.setFormatter(formatter)

    root.addHandler(_mark(last_run, _FILE_MARK))
    root.addHandler(_mark(history, _FILE_MARK))

    _configured = True
    _last_run_log_path = last_run_log
    root.debug("Logging configured. Logs directory: %s", log_dir)
    return last_run_log


def shutdown_logging() -> None:
    """Detach and close every handler added by this module."""

    global _configured, _last_run_log_path

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _FILE_MARK, False) or getattr(handler, _CONSOLE_MARK, False):
            root.removeHandler(handler)
            handler.close()
    _configured = False
    _last_run_log_path = None


def get_last_run_log_path() -> Path:
    """Return the ``last_run.md`` path, configuring logging if needed."""

    if not _configured or _last_run_log_path is None:
        return setup_logging()
    return _last_run_log_path


__all__ = [
    "console_level_from_env",
    "enable_console_logging",
    "get_last_run_log_path",
    "setup_logging",
    "shutdown_logging",
]
