import json

import pyarrow.parquet as pq
import pytest

from pushstate.cli import main
from pushstate.fingerprints import FileFingerprintStore, PushRecord


@pytest.fixture
def seeded(state_file):
    store = FileFingerprintStore(state_file)
    store.put(PushRecord("A", {"id": "A", "value": "v1"}))
    store.put(PushRecord("B", {"id": "B", "value": "v1"}))
    store.save()
    return store


def write_records(path, rows):
    with open(path, "w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row) + "\n")


def test_size(seeded, state_file, capsys):
    assert main(["size", "--state-file", state_file]) == 0
    assert capsys.readouterr().out.strip() == "2"


def test_size_of_missing_state_file(state_file, capsys):
    assert main(["size", "--state-file", state_file]) == 0
    assert capsys.readouterr().out.strip() == "0"


def test_get(seeded, state_file, capsys):
    assert main(["get", "A", "--state-file", state_file]) == 0
    assert capsys.readouterr().out.strip() == seeded.get("A")


def test_get_unknown_exits_1(seeded, state_file, capsys):
    assert main(["get", "Z", "--state-file", state_file]) == 1
    assert "not found" in capsys.readouterr().err


def test_delete(seeded, state_file):
    assert main(["delete", "A", "--state-file", state_file]) == 0
    assert FileFingerprintStore.open(state_file).snapshot() == {"B": seeded.get("B")}


def test_reset(seeded, state_file):
    assert main(["reset", "--state-file", state_file]) == 0
    assert FileFingerprintStore.open(state_file).size() == 0


def test_dump_to_file(seeded, state_file, tmp_path):
    out = str(tmp_path / "dump.json")
    assert main(["dump", "--out", out, "--state-file", state_file]) == 0
    assert open(out, "rb").read() == open(state_file, "rb").read()


def test_export_parquet(seeded, state_file, tmp_path, capsys):
    out = str(tmp_path / "state.parquet")
    assert main(["export", "--format", "parquet", "--out", out, "--state-file", state_file]) == 0
    assert capsys.readouterr().out.strip() == out
    table = pq.read_table(out)
    assert table.column("id").to_pylist() == ["A", "B"]
    assert table.schema.metadata[b"checksum"] == b"sha256"


def test_diff_then_update(state_file, tmp_path, capsys):
    records = str(tmp_path / "records.jsonl")
    write_records(records, [{"id": "A", "value": "v1"}, {"id": "B", "value": "v1"}])

    assert main(["diff", records, "--state-file", state_file]) == 0
    out = capsys.readouterr()
    assert out.out.splitlines() == ["changed\tA", "changed\tB"]
    assert "Total checked: 2" in out.err
    # without --update nothing is stored
    assert FileFingerprintStore.open(state_file).size() == 0

    assert main(["diff", records, "--update", "--state-file", state_file]) == 0
    capsys.readouterr()
    assert FileFingerprintStore.open(state_file).size() == 2

    write_records(records, [{"id": "A", "value": "v1"}, {"id": "B", "value": "v2"}])
    assert main(["diff", records, "-v", "--state-file", state_file]) == 0
    assert capsys.readouterr().out.splitlines() == ["unchanged\tA", "changed\tB"]


def test_diff_custom_id_field_skips_bad_lines(state_file, tmp_path, capsys):
    records = str(tmp_path / "records.jsonl")
    with open(records, "w", encoding="utf-8") as f:
        f.write('{"card": "c1", "v": 1}\n')
        f.write("not json\n")
        f.write('{"other": 1}\n')
        f.write("\n")
    assert main(["diff", records, "--id-field", "card", "--update", "--state-file", state_file]) == 0
    assert capsys.readouterr().out.splitlines() == ["changed\tc1"]
    assert FileFingerprintStore.open(state_file).get("c1") != ""


def test_corrupt_state_file_exits_2(state_file, capsys):
    import os
    os.makedirs(os.path.dirname(state_file))
    with open(state_file, "w", encoding="utf-8") as f:
        f.write("{broken")
    assert main(["size", "--state-file", state_file]) == 2
    assert state_file in capsys.readouterr().err


def test_bad_checksum_from_env_exits_2(state_file, monkeypatch, capsys):
    monkeypatch.setenv("PUSHSTATE_CHECKSUM", "no-such-hash")
    assert main(["size", "--state-file", state_file]) == 2
    assert "no-such-hash" in capsys.readouterr().err


def test_state_file_from_config(seeded, state_file, tmp_path, capsys):
    cfg = tmp_path / "pushstate.yaml"
    cfg.write_text(f"store:\n  path: {json.dumps(state_file)}\n", encoding="utf-8")
    assert main(["size", "--config", str(cfg)]) == 0
    assert capsys.readouterr().out.strip() == "2"


def test_dump_onto_state_file_refused(seeded, state_file, capsys):
    before = open(state_file, "rb").read()
    assert main(["dump", "--out", state_file, "--state-file", state_file]) == 2
    assert "onto itself" in capsys.readouterr().err
    assert open(state_file, "rb").read() == before


def test_missing_config_exits_2(tmp_path, capsys):
    assert main(["size", "--config", str(tmp_path / "absent.yaml")]) == 2
    assert "absent.yaml" in capsys.readouterr().err


@pytest.mark.parametrize("content", ["store: [unclosed\n", "store:\n  file_mode: abc\n"])
def test_bad_config_exits_2(state_file, tmp_path, capsys, content):
    cfg = tmp_path / "pushstate.yaml"
    cfg.write_text(content, encoding="utf-8")
    assert main(["size", "--config", str(cfg), "--state-file", state_file]) == 2
    assert capsys.readouterr().err.startswith("pushstate: ")
