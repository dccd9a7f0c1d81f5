"""Writer registry.

Add new export formats without touching the CLI by registering them here.
"""

from __future__ import annotations
from typing import Dict, List
from .base import StateWriter
from .jsonl import JSONLStateWriter
from .parquet import ParquetStateWriter

_WRITERS: Dict[str, StateWriter] = {
    "jsonl": JSONLStateWriter(),
    "parquet": ParquetStateWriter(),
}

def register_writer(name: str, writer: StateWriter) -> None:
    """Register a new state writer dynamically."""
    if name in _WRITERS:
        raise ValueError(f"State writer '{name}' already registered")
    _WRITERS[name] = writer

def get_writer(name: str) -> StateWriter:
    if name not in _WRITERS:
        raise KeyError(
            f"Unknown state writer: {name}. Available: {', '.join(sorted(_WRITERS))}"
        )
    return _WRITERS[name]

def list_writers() -> List[str]:
    return sorted(_WRITERS)
