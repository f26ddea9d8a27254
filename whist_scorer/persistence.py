# whist_scorer/persistence.py
from __future__ import annotations

import json
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from .paths import data_dir, ensure_data_dir

logger = logging.getLogger(__name__)

RESUME_FILENAME = "estimation-whist-scorer-resume-state.json"
CONFIG_FILENAME = "estimation-whist-scorer-last-config.json"


@runtime_checkable
class SnapshotStore(Protocol):
    """
    Where the scorer keeps its two records:

      - the full game snapshot (config, rounds, ui), for resuming
      - the last-used configuration, kept even when no game is running

    Records are JSON-like dicts. Loading returns None when nothing usable
    is stored.
    """

    def load_game(self) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def save_game(self, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    def load_config(self) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def save_config(self, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemoryStore(SnapshotStore):
    """Keeps records in process; handy for tests and embedding."""

    def __init__(self) -> None:
        self.game: Optional[Dict[str, Any]] = None
        self.config: Optional[Dict[str, Any]] = None

    def load_game(self) -> Optional[Dict[str, Any]]:
        return deepcopy(self.game)

    def save_game(self, data: Dict[str, Any]) -> None:
        self.game = deepcopy(data)

    def load_config(self) -> Optional[Dict[str, Any]]:
        return deepcopy(self.config)

    def save_config(self, data: Dict[str, Any]) -> None:
        self.config = deepcopy(data)

    def clear(self) -> None:
        self.game = None
        self.config = None


class JsonFileStore(SnapshotStore):
    """Persists each record as a JSON file inside `directory`."""

    def __init__(self, directory: str | Path | None = None) -> None:
        # Created lazily, on first write.
        self.directory = Path(directory) if directory is not None else data_dir()
        self.game_path = self.directory / RESUME_FILENAME
        self.config_path = self.directory / CONFIG_FILENAME

    def _read(self, path: Path) -> Optional[Dict[str, Any]]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            logger.warning("Failed to load %s: %s; ignoring it", path, exc)
            return None
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a JSON object", path)
            return None
        return data

    def _write(self, path: Path, data: Dict[str, Any]) -> None:
        ensure_data_dir(self.directory)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True, ensure_ascii=False)

    def load_game(self) -> Optional[Dict[str, Any]]:
        return self._read(self.game_path)

    def save_game(self, data: Dict[str, Any]) -> None:
        self._write(self.game_path, data)

    def load_config(self) -> Optional[Dict[str, Any]]:
        return self._read(self.config_path)

    def save_config(self, data: Dict[str, Any]) -> None:
        self._write(self.config_path, data)

    def clear(self) -> None:
        for path in (self.game_path, self.config_path):
            path.unlink(missing_ok=True)
