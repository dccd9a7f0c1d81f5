"""Hashing utilities.

Fingerprints are hex digests so the state file stays human-readable.

Why SHA-256 by default:
- deterministic across machines and Python versions
- collision-resistant enough that a changed record is never mistaken for an old one
- always available in hashlib

Any hashlib algorithm can be configured instead (e.g. blake2b for speed).
This is change detection, not security; the algorithm is a tuning knob.
"""

from __future__ import annotations
import hashlib
from typing import Union

DEFAULT_ALGORITHM = "sha256"


def sha256_hex(data: Union[str, bytes]) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


class Checksum:
    """Content hash used to turn canonical bytes into a fingerprint string."""

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM):
        algorithm = (algorithm or DEFAULT_ALGORITHM).lower()
        if algorithm not in hashlib.algorithms_available:
            raise ValueError(f"Unknown checksum algorithm: {algorithm}")
        # shake_* digests need a length; keep the interface to fixed-size hashes
        if algorithm.startswith("shake_"):
            raise ValueError(f"Variable-length checksum not supported: {algorithm}")
        self.algorithm = algorithm

    def sum_bytes(self, data: bytes) -> str:
        h = hashlib.new(self.algorithm, usedforsecurity=False)
        h.update(data)
        return h.hexdigest()

    def __repr__(self) -> str:
        return f"Checksum({self.algorithm!r})"
