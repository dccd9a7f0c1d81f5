"""Parquet export of the fingerprint table.

One row per identifier, sorted by id. The checksum algorithm and export time
travel as schema metadata so a table can be compared against a later export.
"""

from __future__ import annotations
import os
import time
from typing import Any, Dict, Mapping, Optional
import pyarrow as pa
import pyarrow.parquet as pq
from .base import StateWriter

def state_schema(metadata: Optional[Dict[str, Any]] = None) -> pa.Schema:
    meta = {"schema_version": "v1"}
    for k, v in (metadata or {}).items():
        meta[str(k)] = str(v)
    return pa.schema([
        ("id", pa.string()),
        ("fingerprint", pa.string()),
    ], metadata=meta)

class ParquetStateWriter(StateWriter):
    name = "parquet"

    def write(self, table: Mapping[str, str], path: str, *, metadata: Optional[Dict[str, Any]] = None) -> str:
        dirpath = os.path.dirname(path)
        if dirpath:
            os.makedirs(dirpath, exist_ok=True)
        meta = {"exported_at_ms": int(time.time() * 1000)}
        meta.update(metadata or {})
        ids = sorted(table)
        arrow_table = pa.Table.from_pydict(
            {"id": ids, "fingerprint": [table[i] for i in ids]},
            schema=state_schema(meta),
        )
        pq.write_table(arrow_table, path, compression="zstd")
        return path
