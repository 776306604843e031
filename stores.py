# stores.py
# Flat-file record store: one pretty-printed JSON document per named collection.

import copy
import json
import os
import re
import tempfile
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List

import structlog
from fastapi import Request

from config import CorruptPolicy, Settings

logger = structlog.get_logger("stores")

# Collection names (document = <name>.json)
USERS = "users"
PROFILES = "profiles"
VIDEOS = "courseVideos"
TESTS = "tests"
TEST_RESULTS = "testResults"
QUESTIONS = "questions"

_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class CorruptDocument(Exception):
    """A stored document exists but is not valid JSON."""

    def __init__(self, name: str, path: Path, cause: Exception):
        super().__init__(f"corrupt document {name!r} at {path}: {cause}")
        self.name = name
        self.path = path
        self.cause = cause


class RecordStore:
    """
    Named collections persisted as whole JSON documents under ``data_dir``.

    Callers load a whole collection, compute the new value and save it back;
    the store has no partial updates or queries. Use ``edit`` to run that
    sequence under the collection's lock.
    """

    def __init__(self, data_dir: Path, corrupt_policy: CorruptPolicy = "fallback"):
        self.data_dir = Path(data_dir)
        self.corrupt_policy = corrupt_policy
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def path_for(self, name: str) -> Path:
        if not _NAME_RE.match(name or ""):
            raise ValueError(f"invalid collection name: {name!r}")
        return self.data_dir / f"{name}.json"

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def names(self) -> List[str]:
        if not self.data_dir.is_dir():
            return []
        return sorted(p.stem for p in self.data_dir.glob("*.json") if _NAME_RE.match(p.stem))

    # ----------------------------
    # Load / save
    # ----------------------------

    def load(self, name: str, fallback: Any) -> Any:
        """Return the stored value, or a copy of ``fallback`` when the document is absent."""
        path = self.path_for(name)
        if not path.is_file():
            return copy.deepcopy(fallback)
        try:
            raw = path.read_text(encoding="utf-8")
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return self._on_corrupt(CorruptDocument(name, path, e), fallback)

    def save(self, name: str, value: Any) -> None:
        """Overwrite the whole document; temp file + rename so readers never see half a file."""
        path = self.path_for(name)
        with self.lock(name):
            fd, tmp = tempfile.mkstemp(prefix=f".{name}.", suffix=".tmp", dir=self.data_dir)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(value, f, indent=2, ensure_ascii=False)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp, path)
            except OSError as e:
                logger.error("document_write_failed", collection=name, path=str(path), error=str(e))
                try:
                    os.unlink(tmp)
                except FileNotFoundError:
                    pass
                raise

    def _on_corrupt(self, err: CorruptDocument, fallback: Any) -> Any:
        if self.corrupt_policy == "raise":
            logger.error("document_corrupt", collection=err.name, path=str(err.path), policy="raise")
            raise err
        if self.corrupt_policy == "quarantine":
            target = err.path.with_name(f"{err.path.name}.corrupt-{int(time.time() * 1000)}")
            with self.lock(err.name):
                # A writer may have replaced the document since it was read.
                if not err.path.is_file():
                    return copy.deepcopy(fallback)
                try:
                    return json.loads(err.path.read_text(encoding="utf-8"))
                except (json.JSONDecodeError, UnicodeDecodeError):
                    os.replace(err.path, target)
            logger.error(
                "document_corrupt",
                collection=err.name,
                path=str(err.path),
                policy="quarantine",
                moved_to=str(target),
                error=str(err.cause),
            )
            return copy.deepcopy(fallback)
        # Stored data is lost on the next write to this collection.
        logger.error("document_corrupt", collection=err.name, path=str(err.path), policy="fallback", error=str(err.cause))
        return copy.deepcopy(fallback)

    # ----------------------------
    # Per-collection locking
    # ----------------------------

    def _lock_for(self, name: str) -> threading.RLock:
        with self._locks_guard:
            lk = self._locks.get(name)
            if lk is None:
                lk = self._locks[name] = threading.RLock()
            return lk

    @contextmanager
    def lock(self, name: str) -> Iterator[None]:
        """Hold the collection's lock for the duration of the block."""
        lk = self._lock_for(name)
        lk.acquire()
        try:
            yield
        finally:
            lk.release()

    @contextmanager
    def edit(self, name: str, fallback: Any) -> Iterator[Any]:
        """
        Load ``name``, hand the value to the block for in-place mutation, and save
        it when the block exits normally. Raising inside the block skips the save.
        """
        with self.lock(name):
            value = self.load(name, fallback)
            yield value
            self.save(name, value)


def init_store(settings: Settings) -> RecordStore:
    """Startup step: make sure the data directory exists and build the store."""
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    store = RecordStore(settings.data_dir, corrupt_policy=settings.corrupt_policy)
    logger.info("store_ready", data_dir=str(settings.data_dir), corrupt_policy=settings.corrupt_policy)
    return store


def get_store(request: Request) -> RecordStore:
    """FastAPI dependency: the store created at startup."""
    return request.app.state.store
