"""Error taxonomy.

Hard errors name the state file and chain the underlying cause, so callers can
diagnose without looking inside the store. The store never retries.
"""

from __future__ import annotations
from typing import Optional


class PushStateError(Exception):
    """Base class for all pushstate errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class StoreReadError(PushStateError):
    """Opening, reading or decoding the state file failed."""


class StoreWriteError(PushStateError):
    """Durable write failed before the commit point; the state file is untouched."""


class FingerprintError(PushStateError, ValueError):
    """An entity could not be serialized for fingerprinting."""
