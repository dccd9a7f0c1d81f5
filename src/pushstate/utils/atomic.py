"""Durable JSON writes.

The target file is only ever replaced, never rewritten in place:

1. encode into a fresh temp file in the *same directory* as the target
2. flush + fsync + close (failure: remove temp, target untouched)
3. os.replace(temp, target)  <- the single commit point
4. best effort: chmod the target, fsync the directory (failure: warning only)

Readers therefore see either the previous complete file or the new complete file.
"""

from __future__ import annotations
import json
import logging
import os
import tempfile
from typing import Any, Optional

from ..errors import StoreWriteError

log = logging.getLogger("pushstate.utils.atomic")


def _discard(tmp_path: str, logger: logging.Logger) -> None:
    # Cleanup must not mask the write error being raised
    try:
        os.remove(tmp_path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("remove of temporary file %s failed: %s", tmp_path, exc)


def _fsync_dir(dirpath: str) -> None:
    # Directories cannot be opened for fsync on Windows
    if os.name == "nt":
        return
    fd = os.open(dirpath, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def atomic_write_json(
    path: str,
    obj: Any,
    *,
    file_mode: Optional[int] = 0o644,
    fsync: bool = True,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Replace `path` with the JSON encoding of `obj`, or raise StoreWriteError and leave it alone."""
    logger = logger or log
    dirpath = os.path.dirname(os.path.abspath(path))
    try:
        os.makedirs(dirpath, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=dirpath, prefix=os.path.basename(path) + ".", suffix=".tmp")
    except OSError as exc:
        raise StoreWriteError(f"create temporary file for {path} failed: {exc}", path) from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(obj, f, indent=2, sort_keys=True, ensure_ascii=False)
            f.write("\n")
            f.flush()
            if fsync:
                os.fsync(f.fileno())
    except (OSError, TypeError, ValueError) as exc:
        _discard(tmp_path, logger)
        raise StoreWriteError(f"write {tmp_path} failed: {exc}", path) from exc

    try:
        os.replace(tmp_path, path)
    except OSError as exc:
        _discard(tmp_path, logger)
        raise StoreWriteError(f"rename {tmp_path} to {path} failed: {exc}", path) from exc

    # Committed. Nothing below may fail the write.
    if file_mode is not None:
        try:
            os.chmod(path, file_mode)
        except OSError as exc:
            logger.warning("chmod %o on %s failed: %s", file_mode, path, exc)
    if fsync:
        try:
            _fsync_dir(dirpath)
        except OSError as exc:
            logger.warning("fsync of directory %s failed: %s", dirpath, exc)
