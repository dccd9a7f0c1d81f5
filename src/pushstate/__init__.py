"""pushstate

Change-detection cache for data-push pipelines.

Public API surface:
- pushstate.fingerprints.FileFingerprintStore : file-backed fingerprint store
- pushstate.fingerprints.PushRecord : ready-made entity
- pushstate.writers : export the fingerprint table (jsonl / parquet)
- pushstate.cli.main : CLI entrypoint
"""
__all__ = ["__version__"]
__version__ = "0.3.0"
