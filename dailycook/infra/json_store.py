"""Single JSON document on disk with locked read-modify-write and atomic replace."""
import json
import logging
import os
import shutil
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)


class JsonStore:
    def __init__(self, path, default_factory=list):
        self.path = Path(path)
        self._default_factory = default_factory
        self._lock = threading.RLock()

    def load(self):
        if not self.path.exists():
            return self._default_factory()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in %s: %s", self.path, e)
            return self._default_factory()
        return data if data is not None else self._default_factory()

    def save(self, data):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=f".{self.path.stem}_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(data, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    @contextmanager
    def transaction(self):
        """Hold the lock across load and save; yields the loaded document for in-place mutation."""
        with self._lock:
            data = self.load()
            yield data
            self.save(data)

    def read(self):
        with self._lock:
            return self.load()
