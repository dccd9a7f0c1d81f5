"""Canonical entity serialization.

Fingerprints are only comparable across runs if the bytes we hash are stable:
keys are sorted, separators are compact, NaN/Infinity are rejected.
"""

from __future__ import annotations
import dataclasses
import json
from collections.abc import Mapping
from typing import Any

from ..errors import FingerprintError
from .hashing import sha256_hex


def fingerprint_payload(entity: Any) -> Any:
    """Return the JSON-able value that represents `entity` for hashing."""
    hook = getattr(entity, "fingerprint_payload", None)
    if callable(hook):
        return hook()
    if dataclasses.is_dataclass(entity) and not isinstance(entity, type):
        return dataclasses.asdict(entity)
    if isinstance(entity, Mapping):
        return dict(entity)
    if hasattr(entity, "__dict__"):
        return {k: v for k, v in vars(entity).items() if not k.startswith("_")}
    return entity


def canonical_bytes(entity: Any) -> bytes:
    try:
        blob = json.dumps(
            fingerprint_payload(entity),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        ).encode("utf-8")
    except Exception as exc:
        # Any failure here is a fingerprint failure; callers fail open on it
        raise FingerprintError(f"cannot serialize {type(entity).__name__} for fingerprinting: {exc}") from exc
    return blob


def stable_fingerprint(obj: Any) -> str:
    """SHA-256 of the canonical serialization. Convenience for callers without a store."""
    return sha256_hex(canonical_bytes(obj))
