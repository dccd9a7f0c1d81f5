"""File-backed fingerprint store.

Holds identifier -> fingerprint in memory and checkpoints the whole table to one
JSON file. One lock guards the table, the dirty flag and every file operation, so
the in-memory state and the dirty transition never drift apart for other callers.

Durability happens exactly when save(), delete() or reset() returns; there is no
background flush. The store assumes it is the only writer of its file.

Fingerprint failures are fail-open: an entity that cannot be serialized is
reported as changed, never as unchanged, so updates are not hidden.
"""

from __future__ import annotations
import io
import json
import logging
import os
import threading
from typing import Any, BinaryIO, Dict, Optional

from ..config import StoreConfig
from ..errors import FingerprintError, StoreReadError, StoreWriteError
from ..utils.atomic import atomic_write_json
from ..utils.fingerprint import canonical_bytes
from ..utils.hashing import Checksum
from .base import ChangeCache
from .metrics import CacheMetrics
from .schema import Entity

log = logging.getLogger("pushstate.fingerprints.file_store")

_CHUNK_SIZE = 64 * 1024
_MISSING = object()


def _identifier(entity: Entity) -> str:
    identifier = entity.get_id()
    if not isinstance(identifier, str):
        raise TypeError(f"entity identifier must be str, got {type(identifier).__name__}")
    return identifier


class FileFingerprintStore(ChangeCache):
    """Change cache persisted to a single JSON file via temp-file-plus-rename."""

    def __init__(
        self,
        path: str,
        checksum: Optional[Checksum] = None,
        logger: Optional[logging.Logger] = None,
        file_mode: Optional[int] = 0o644,
        fsync: bool = True,
    ):
        """
        Args:
            path: State file. Its directory is created on first save.
            checksum: Content hash for fingerprints (default SHA-256).
            logger: Diagnostics sink (default: module logger).
            file_mode: Permissions applied after each commit; None leaves mkstemp's 0600.
            fsync: fsync the temp file and directory around the rename.
        """
        self._path = os.fspath(path)
        self.checksum = checksum or Checksum()
        self.logger = logger or log
        self.file_mode = file_mode
        self.fsync = fsync
        self.metrics = CacheMetrics()
        self._table: Dict[str, str] = {}
        self._dirty = False
        self._lock = threading.Lock()

    @classmethod
    def open(cls, path: str, **kwargs: Any) -> FileFingerprintStore:
        """Construct and load the persisted table."""
        store = cls(path, **kwargs)
        store.read()
        return store

    @classmethod
    def from_config(cls, cfg: StoreConfig, **kwargs: Any) -> FileFingerprintStore:
        return cls(
            cfg.path,
            checksum=Checksum(cfg.checksum),
            file_mode=cfg.file_mode,
            fsync=cfg.fsync,
            **kwargs,
        )

    @property
    def path(self) -> str:
        return self._path

    @property
    def is_dirty(self) -> bool:
        with self._lock:
            return self._dirty

    def _fingerprint(self, entity: Entity) -> str:
        return self.checksum.sum_bytes(canonical_bytes(entity))

    # ---- change detection -------------------------------------------------

    def is_changed(self, entity: Entity) -> bool:
        with self._lock:
            identifier = _identifier(entity)
            saved = self._table.get(identifier, "")
            if not saved:
                changed = True
            else:
                try:
                    generated = self._fingerprint(entity)
                except FingerprintError as exc:
                    self.metrics.fingerprint_failures += 1
                    self.logger.warning("fingerprint of %s failed, treating as changed: %s", identifier, exc)
                    changed = True
                else:
                    self.logger.debug("saved = %s; generated = %s", saved, generated)
                    changed = saved != generated
            self.metrics.record_check(changed)
            return changed

    def put(self, entity: Entity) -> None:
        with self._lock:
            identifier = _identifier(entity)
            try:
                self._table[identifier] = self._fingerprint(entity)
            except FingerprintError as exc:
                # Keep no fingerprint so the entity keeps reporting changed
                self.metrics.fingerprint_failures += 1
                self.logger.warning("fingerprint of %s failed, entry dropped: %s", identifier, exc)
                self._table.pop(identifier, None)
            self.metrics.puts += 1
            self._dirty = True

    def get(self, identifier: str) -> str:
        with self._lock:
            return self._table.get(identifier, "")

    def size(self) -> int:
        with self._lock:
            return len(self._table)

    def snapshot(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._table)

    # ---- persistence ------------------------------------------------------

    def _load(self) -> Dict[str, str]:
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                raw = f.read()
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreReadError(f"open {self._path} failed: {exc}", self._path) from exc

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StoreReadError(f"decode state-file {self._path} failed: {exc}", self._path) from exc
        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            raise StoreReadError(f"state-file {self._path} is not an object of string to string", self._path)
        return data

    def _persist(self, table: Dict[str, str]) -> None:
        try:
            atomic_write_json(
                self._path,
                table,
                file_mode=self.file_mode,
                fsync=self.fsync,
                logger=self.logger,
            )
        except StoreWriteError:
            self.metrics.record_save(False)
            raise
        self.metrics.record_save(True)
        self.logger.debug("saved state-cache to %s (%d entries)", self._path, len(table))

    def read(self) -> None:
        with self._lock:
            self._table = self._load()
            self._dirty = False

    def save(self) -> None:
        with self._lock:
            if not self._dirty:
                self.metrics.saves_skipped += 1
                return
            self._persist(self._table)
            self._dirty = False

    def delete(self, identifier: str) -> None:
        with self._lock:
            previous = self._table.pop(identifier, _MISSING)
            was_dirty = self._dirty
            self._dirty = True
            try:
                self._persist(self._table)
            except StoreWriteError:
                # Roll back so memory and file do not diverge
                if previous is not _MISSING:
                    self._table[identifier] = previous
                self._dirty = was_dirty
                raise
            self._dirty = False

    def reset(self) -> None:
        with self._lock:
            empty: Dict[str, str] = {}
            self._persist(empty)
            self._table = empty
            self._dirty = False

    # ---- raw export -------------------------------------------------------

    def _copy_file(self, sink: BinaryIO) -> int:
        try:
            f = open(self._path, "rb")
        except FileNotFoundError:
            return 0
        except OSError as exc:
            raise StoreReadError(f"open {self._path} failed: {exc}", self._path) from exc

        written = 0
        with f:
            try:
                while True:
                    chunk = f.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    sink.write(chunk)
                    written += len(chunk)
            except OSError as exc:
                raise StoreReadError(f"copy {self._path} failed: {exc}", self._path) from exc
        return written

    def dump(self) -> BinaryIO:
        with self._lock:
            buf = io.BytesIO()
            self._copy_file(buf)
            buf.seek(0)
            return buf

    def write_to(self, sink: BinaryIO) -> int:
        with self._lock:
            return self._copy_file(sink)

    def __repr__(self) -> str:
        return f"FileFingerprintStore(path={self._path!r}, checksum={self.checksum!r})"
