# File: freshlink/db/json_store.py

"""
Flat JSON document files.

Each store owns one file on disk. Reads tolerate a missing or corrupt
file (an empty default is returned and the problem is logged); writes
go through a temp file + replace so a crash never leaves half a document
behind.

A failed write is logged and the document is kept in memory instead, so
read-only deployments keep serving the latest state until the process
restarts.
"""

import copy
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

logger = logging.getLogger(__name__)


class JsonDocument:
    def __init__(self, path: Path, default_factory: Callable[[], Any], label: str = "store"):
        self.path = Path(path)
        self.default_factory = default_factory
        self.label = label
        # Re-entrant so store methods can nest read-modify-write helpers.
        self._lock = threading.RLock()
        self._unsaved: Optional[Any] = None

    @contextmanager
    def locked(self) -> Iterator[None]:
        with self._lock:
            yield

    def read(self) -> Any:
        with self._lock:
            if self._unsaved is not None:
                return copy.deepcopy(self._unsaved)
            if not self.path.exists():
                return self.default_factory()
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.error("[%s] Unable to read %s: %s", self.label, self.path, e)
                return self.default_factory()

    def write(self, document: Any) -> bool:
        """Persist ``document``. Returns False when it only lives in memory."""
        with self._lock:
            try:
                self._write_atomic(document)
            except OSError as e:
                logger.warning(
                    "[%s] Unable to persist %s (read-only environment?). "
                    "Changes will not survive restarts: %s",
                    self.label,
                    self.path,
                    e,
                )
                self._unsaved = copy.deepcopy(document)
                return False
            self._unsaved = None
            return True

    def _write_atomic(self, document: Any) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        finally:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
