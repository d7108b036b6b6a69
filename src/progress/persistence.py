"""
Progress document transport.

The store only ever loads and saves one JSON-able dict. Where it lives is
up to the Persistence implementation:
- JsonFilePersistence: a JSON file (default ~/.libregto/progress.json)
- MemoryPersistence: a dict held in memory (tests, throwaway sessions)
"""
from __future__ import annotations

import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Protocol

from loguru import logger

from src.core.errors import PersistenceFailure


class Persistence(Protocol):
    """Load/save contract consumed by ProgressStore."""

    def load(self) -> Optional[dict[str, Any]]:
        """Stored document, or None when nothing has been saved yet."""
        ...

    def save(self, document: dict[str, Any]) -> bool:
        ...


class JsonFilePersistence:
    """
    Progress stored as a single JSON file.

    Writes go to a temp file in the same directory and are moved into
    place with os.replace, so a crash mid-write leaves the previous
    document intact.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load(self) -> Optional[dict[str, Any]]:
        if not self.path.exists():
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceFailure(f"Cannot read progress from {self.path}: {e}", path=self.path) from e

        if not isinstance(data, dict):
            raise PersistenceFailure(
                f"Progress file {self.path} holds {type(data).__name__}, expected an object",
                path=self.path,
            )
        return data

    def save(self, document: dict[str, Any]) -> bool:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                json.dump(document, f, indent=2)
            os.replace(tmp_name, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceFailure(f"Cannot write progress to {self.path}: {e}", path=self.path) from e

        logger.debug(f"Progress saved to {self.path}")
        return True


class MemoryPersistence:
    """In-memory document. Copies on the way in and out."""

    def __init__(self, document: Optional[dict[str, Any]] = None):
        self.document = copy.deepcopy(document)

    def load(self) -> Optional[dict[str, Any]]:
        return copy.deepcopy(self.document)

    def save(self, document: dict[str, Any]) -> bool:
        self.document = copy.deepcopy(document)
        return True
