from __future__ import annotations
import json
import os
from .base import StateWriter

class JSONLStateWriter(StateWriter):
    name = "jsonl"
    def write(self, table, path, *, metadata=None):
        dirpath = os.path.dirname(path)
        if dirpath:
            os.makedirs(dirpath, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            for identifier in sorted(table):
                f.write(json.dumps({
                    "id": identifier,
                    "fingerprint": table[identifier],
                }, ensure_ascii=False) + "\n")
        return path
