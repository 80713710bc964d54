"""session_store.py – abstraction layer for persisted assistant state.

State is kept as string keys mapping to text values (the contract of browser
localStorage). Two implementations:
1. InMemoryStateStore – default for unit-tests.
2. JsonFileStateStore – one JSON document on disk, survives restarts.

Backends raise PersistenceFailure; the state objects decide whether the
failure is fatal (it never is).
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

from errors import PersistenceFailure

logger = logging.getLogger(__name__)


class BaseStateStore:
    """Interface other components depend on."""

    def get_item(self, key: str) -> Optional[str]:  # pragma: no cover
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:  # pragma: no cover
        raise NotImplementedError

    def remove_item(self, key: str) -> None:  # pragma: no cover
        raise NotImplementedError


class InMemoryStateStore(BaseStateStore):
    """Simple dict-based store for dev / unit-tests."""

    def __init__(self) -> None:
        self._store: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._store.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._store[key] = value

    def remove_item(self, key: str) -> None:
        self._store.pop(key, None)


class JsonFileStateStore(BaseStateStore):
    """Persists every key in a single JSON object file."""

    def __init__(self, path: str | os.PathLike):
        self._path = Path(path)

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _read_all(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise PersistenceFailure(f"Could not read state file {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceFailure(f"State file {self._path} is not a JSON object")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        tmp_path = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, prefix=self._path.name, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self._path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise PersistenceFailure(f"Could not write state file {self._path}: {e}") from e
        logger.debug("State file %s written (%d keys)", self._path, len(data))

    # ------------------------------------------------------------------
    # API
    # ------------------------------------------------------------------

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return None if value is None else str(value)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)
