"""Table exporters.

Exporters turn a snapshot of the fingerprint table into files operators can
inspect or hand on. They never touch the live state file.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional


class StateWriter(ABC):
    """Writes an identifier -> fingerprint table in a chosen format."""
    name: str

    @abstractmethod
    def write(self, table: Mapping[str, str], path: str, *, metadata: Optional[Dict[str, Any]] = None) -> str:
        """Write the table and return the output path."""
        raise NotImplementedError
