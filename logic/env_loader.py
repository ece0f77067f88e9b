"""Helpers for loading application configuration from ``.env`` files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional

from dotenv import load_dotenv

_ENV_FILENAME = ".env"
_loaded_path: Optional[Path] = None


def _candidate_directories() -> Iterable[Path]:
    """Yield directories that may contain the ``.env`` file."""

    custom_dir = os.getenv("AIA_DOTENV_DIR")
    if custom_dir:
        yield Path(custom_dir)

    yield Path.cwd()

    # When running from source, the repository root is one level above this file.
    yield Path(__file__).resolve().parent.parent


def load_application_env() -> Optional[Path]:
    """Load the first available ``.env`` file; existing variables win."""

    global _loaded_path

    if _loaded_path is not None:
        return _loaded_path

    tried: set[Path] = set()
    for directory in _candidate_directories():
        path = Path(directory) / _ENV_FILENAME
        if path in tried:
            continue
        tried.add(path)
        if path.exists():
            load_dotenv(dotenv_path=path, override=False)
            _loaded_path = path
            return path

    return None


def reset_loaded_env() -> None:
    """Forget which ``.env`` was loaded (useful for tests)."""

    global _loaded_path
    _loaded_path = None


__all__ = ["load_application_env", "reset_loaded_env"]
