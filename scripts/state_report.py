#!/usr/bin/env python3
"""Summarize a pushstate state file without loading it into a store.

Shows:
- entry count and file size
- digest lengths found (hints at the checksum algorithm in use)
- a few sample identifiers

Usage:
    python scripts/state_report.py [state_file]
"""

from __future__ import annotations
import sys
import os
import json
from collections import Counter
from typing import Dict

# hex digest length -> hashlib algorithms producing it
_DIGEST_HINTS = {
    32: "md5",
    40: "sha1",
    64: "sha256 / blake2s / sha3_256",
    128: "sha512 / blake2b / sha3_512",
}

def load_state(path: str) -> Dict[str, str]:
    with open(path, 'r', encoding='utf-8') as f:
        raw = f.read()
    return json.loads(raw) if raw.strip() else {}

def generate_report(path: str, samples: int = 5) -> None:
    if not os.path.exists(path):
        print(f"State file not found: {path}")
        print("   (a store treats a missing file as an empty table)")
        return

    state = load_state(path)
    size_bytes = os.path.getsize(path)

    print("=" * 60)
    print(f"State file: {path}")
    print(f"Entries:    {len(state)}")
    print(f"Size:       {size_bytes} bytes")

    lengths = Counter(len(v) for v in state.values())
    if lengths:
        print("\nDigest lengths:")
        for length, count in sorted(lengths.items()):
            hint = _DIGEST_HINTS.get(length, "unknown")
            print(f"  {length:>4} hex chars: {count} entries ({hint})")
    empty = sum(1 for v in state.values() if not v)
    if empty:
        print(f"\n[WARN] {empty} entries have an empty fingerprint (always reported as changed)")

    if state:
        print("\nSample identifiers:")
        for identifier in sorted(state)[:samples]:
            print(f"  {identifier}: {state[identifier][:16]}...")
    print("=" * 60)

if __name__ == "__main__":
    state_file = sys.argv[1] if len(sys.argv) > 1 else os.environ.get("PUSHSTATE_STATE_FILE", "state/pushstate.json")
    generate_report(state_file)
