"""
JSON-file performance store.

Records are stored as ``{learner_id}.json`` in the store directory
(default ~/.wml/performance), in the same camelCase shape the web app
persists. Writes go through a temp file and ``os.replace`` so a crash
never leaves a half-written record.
"""

from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager, suppress
from pathlib import Path
from typing import Iterator

from loguru import logger

from wml.adaptive.models import PerformanceHistory
from wml.errors import StoreError
from wml.store.base import LearnerLocks, validate_learner_id

DEFAULT_STORE_DIR = Path.home() / ".wml" / "performance"


class JsonPerformanceStore:
    """
    Manages performance record persistence on disk.

    Corrupted files are logged and treated as missing; the workflow then
    starts the learner from the neutral default record.
    """

    def __init__(self, store_dir: Path | str | None = None):
        self.store_dir = Path(store_dir) if store_dir else DEFAULT_STORE_DIR
        try:
            self.store_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Cannot create store directory {self.store_dir}: {e}") from e
        self._locks = LearnerLocks()

    def _path(self, learner_id: str) -> Path:
        return self.store_dir / f"{validate_learner_id(learner_id)}.json"

    def load(self, learner_id: str) -> PerformanceHistory | None:
        """Load a learner's record, or None if absent or unreadable."""
        filepath = self._path(learner_id)
        if not filepath.exists():
            return None

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Unreadable performance record {filepath.name}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Performance record {filepath.name} is not a JSON object")
            return None
        return PerformanceHistory.from_document(data)

    def save(self, learner_id: str, history: PerformanceHistory) -> None:
        filepath = self._path(learner_id)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.store_dir, prefix=f".{learner_id}.", suffix=".tmp")
        except OSError as e:
            raise StoreError(f"Failed to write performance record for {learner_id}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(history.to_document(), f, indent=2)
            os.replace(tmp_name, filepath)
        except BaseException as e:
            with suppress(FileNotFoundError):
                os.unlink(tmp_name)
            if isinstance(e, OSError):
                raise StoreError(f"Failed to write performance record for {learner_id}: {e}") from e
            raise
        logger.debug(f"Saved performance record {filepath}")

    def delete(self, learner_id: str) -> bool:
        filepath = self._path(learner_id)
        try:
            filepath.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StoreError(f"Failed to delete performance record for {learner_id}: {e}") from e
        return True

    def list_learners(self) -> list[str]:
        return sorted(p.stem for p in self.store_dir.glob("*.json"))

    @contextmanager
    def transaction(self, learner_id: str) -> Iterator[None]:
        """Serialize read-modify-write for one learner within this process."""
        with self._locks.hold(learner_id):
            yield
