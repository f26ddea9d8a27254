# whist_scorer/paths.py
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from a .env file if present.
load_dotenv()

DATA_DIR_ENV = "WHIST_SCORER_DATA_DIR"

# Default location for saved games when no override is configured.
DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"


def data_dir() -> Path:
    override = os.getenv(DATA_DIR_ENV)
    return Path(override).expanduser() if override else DEFAULT_DATA_DIR


def ensure_data_dir(directory: str | Path | None = None) -> Path:
    """Create the data directory if it does not exist and return it."""
    path = Path(directory) if directory is not None else data_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_data_path(path_like: str | Path, directory: str | Path | None = None) -> Path:
    """
    Resolve a user-specified path into the data directory.

    Absolute paths are returned unchanged. Relative paths are anchored inside
    `directory` (or the configured data directory) so exports land next to
    the saved game. Nothing is created on disk.
    """
    path = Path(path_like)
    if path.is_absolute():
        return path
    base = Path(directory) if directory is not None else data_dir()
    return base / path
