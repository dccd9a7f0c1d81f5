"""Base interface for change-detection caches.

A cache holds one fingerprint per entity identifier, answers "has this changed?",
and checkpoints the table to durable storage.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import BinaryIO, Dict

from .schema import Entity


class ChangeCache(ABC):
    """Abstract fingerprint cache. Implementations must be safe for concurrent callers."""

    @abstractmethod
    def is_changed(self, entity: Entity) -> bool:
        """True if the entity is new or its fingerprint differs from the stored one."""
        pass

    @abstractmethod
    def put(self, entity: Entity) -> None:
        """Record the entity's current fingerprint (in memory only)."""
        pass

    @abstractmethod
    def get(self, identifier: str) -> str:
        """Stored fingerprint for identifier, or "" if unknown."""
        pass

    @abstractmethod
    def size(self) -> int:
        pass

    @abstractmethod
    def delete(self, identifier: str) -> None:
        """Remove one entry and persist immediately."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """Remove all entries and persist immediately."""
        pass

    @abstractmethod
    def read(self) -> None:
        """Replace the in-memory table with the persisted one."""
        pass

    @abstractmethod
    def save(self) -> None:
        """Persist the table if it has unsaved changes."""
        pass

    @abstractmethod
    def dump(self) -> BinaryIO:
        """Raw persisted bytes as a readable stream."""
        pass

    @abstractmethod
    def write_to(self, sink: BinaryIO) -> int:
        """Copy the raw persisted bytes into sink; return bytes written."""
        pass

    @abstractmethod
    def snapshot(self) -> Dict[str, str]:
        """Copy of the table, never a live handle."""
        pass

    def __len__(self) -> int:
        return self.size()
