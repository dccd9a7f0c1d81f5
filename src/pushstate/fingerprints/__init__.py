"""Fingerprint layer: change detection with a durable checkpoint."""

from .schema import Entity, PushRecord
from .base import ChangeCache
from .file_store import FileFingerprintStore
from .metrics import CacheMetrics

__all__ = [
    "Entity",
    "PushRecord",
    "ChangeCache",
    "FileFingerprintStore",
    "CacheMetrics",
]
