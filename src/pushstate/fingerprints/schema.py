"""Entity contract and the ready-made push record.

The store never looks inside an entity beyond two capabilities:
- `get_id()`: stable, caller-meaningful identifier
- a deterministic serialization (see utils.fingerprint.fingerprint_payload)

Domain types of the surrounding pipeline implement `Entity` directly; callers
without their own types can wrap dicts in `PushRecord`.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Protocol, runtime_checkable


@runtime_checkable
class Entity(Protocol):
    def get_id(self) -> str:
        ...


@dataclass(frozen=True)
class PushRecord:
    """Identifier plus an arbitrary JSON-able payload. Only the payload is fingerprinted."""
    id: str
    payload: Dict[str, Any] = field(default_factory=dict)

    def get_id(self) -> str:
        return self.id

    def fingerprint_payload(self) -> Dict[str, Any]:
        return self.payload

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any], id_field: str = "id") -> PushRecord:
        if id_field not in row:
            raise KeyError(f"record has no '{id_field}' field")
        return cls(id=str(row[id_field]), payload=dict(row))
