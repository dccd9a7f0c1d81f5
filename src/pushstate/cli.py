"""CLI entrypoint.

Commands:
- `pushstate size`                        number of fingerprints
- `pushstate get <id>`                    stored fingerprint (exit 1 if unknown)
- `pushstate delete <id>`                 drop one entry and persist
- `pushstate reset`                       drop everything and persist
- `pushstate dump [--out FILE]`           raw state file bytes
- `pushstate export --format parquet --out FILE`
- `pushstate diff records.jsonl [--update]`
                                          which records would be pushed

Every command accepts `--config configs/pushstate.yaml` and `--state-file PATH`.
Store errors exit with status 2.
"""

from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from dataclasses import replace
from typing import Iterator, List, Optional
import yaml

from .config import Settings, load_settings
from .errors import PushStateError
from .fingerprints import FileFingerprintStore, PushRecord
from .logging_ import setup_logging
from .writers import get_writer, list_writers

log = logging.getLogger("pushstate.cli")


def _iter_records(path: str, id_field: str) -> Iterator[PushRecord]:
    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                row = json.loads(line)
                yield PushRecord.from_mapping(row, id_field=id_field)
            except (json.JSONDecodeError, KeyError, TypeError) as exc:
                log.warning("%s:%d skipped: %s", path, line_no, exc)


def _resolve_settings(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.config)
    if args.state_file:
        settings = replace(settings, store=replace(settings.store, path=args.state_file))
    if args.log_level:
        settings = replace(settings, logging=replace(settings.logging, level=args.log_level.upper()))
    return settings


def _cmd_diff(store: FileFingerprintStore, args: argparse.Namespace) -> int:
    for record in _iter_records(args.records, args.id_field):
        if store.is_changed(record):
            print(f"changed\t{record.get_id()}")
            if args.update:
                store.put(record)
        elif args.verbose:
            print(f"unchanged\t{record.get_id()}")
    if args.update:
        store.save()
    print(store.metrics.summary(), file=sys.stderr)
    return 0


def _run(store: FileFingerprintStore, args: argparse.Namespace) -> int:
    if args.cmd == "size":
        print(store.size())
        return 0

    if args.cmd == "get":
        fingerprint = store.get(args.id)
        if not fingerprint:
            print(f"{args.id}: not found", file=sys.stderr)
            return 1
        print(fingerprint)
        return 0

    if args.cmd == "delete":
        store.delete(args.id)
        print(f"deleted {args.id}; {store.size()} entries left")
        return 0

    if args.cmd == "reset":
        store.reset()
        print(f"reset {store.path}")
        return 0

    if args.cmd == "dump":
        if args.out:
            # Opening the sink truncates it; never let that be the state file
            if os.path.realpath(args.out) == os.path.realpath(store.path):
                print(f"pushstate: refusing to dump {store.path} onto itself", file=sys.stderr)
                return 2
            with open(args.out, "wb") as f:
                n = store.write_to(f)
            log.info("wrote %d bytes to %s", n, args.out)
        else:
            store.write_to(sys.stdout.buffer)
            sys.stdout.flush()
        return 0

    if args.cmd == "export":
        writer = get_writer(args.format)
        path = writer.write(store.snapshot(), args.out, metadata={"checksum": store.checksum.algorithm})
        print(path)
        return 0

    if args.cmd == "diff":
        return _cmd_diff(store, args)

    raise ValueError(f"Unknown command: {args.cmd}")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=None, help="YAML config (see configs/pushstate.yaml)")
    common.add_argument("--state-file", default=None, help="State file path (overrides config/env)")
    common.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")

    p = argparse.ArgumentParser(prog="pushstate")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("size", parents=[common])

    pg = sub.add_parser("get", parents=[common])
    pg.add_argument("id")

    pdel = sub.add_parser("delete", parents=[common])
    pdel.add_argument("id")

    sub.add_parser("reset", parents=[common])

    pdump = sub.add_parser("dump", parents=[common])
    pdump.add_argument("--out", default=None, help="Write to file instead of stdout")

    pe = sub.add_parser("export", parents=[common])
    pe.add_argument("--format", choices=list_writers(), default="jsonl")
    pe.add_argument("--out", required=True)

    pd = sub.add_parser("diff", parents=[common])
    pd.add_argument("records", help="JSONL file, one record per line")
    pd.add_argument("--id-field", default="id")
    pd.add_argument("--update", action="store_true", help="Store fingerprints of changed records and save")
    pd.add_argument("--verbose", "-v", action="store_true", help="Also list unchanged records")

    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = _resolve_settings(args)
        setup_logging(settings.logging.level, settings.logging.log_dir)
        store = FileFingerprintStore.from_config(settings.store)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"pushstate: {exc}", file=sys.stderr)
        return 2

    try:
        store.read()
        return _run(store, args)
    except PushStateError as exc:
        print(f"pushstate: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
