from __future__ import annotations

import os
import tempfile

from hypothesis import assume, given, settings, strategies as st

from pushstate.fingerprints import FileFingerprintStore, PushRecord
from pushstate.utils.fingerprint import canonical_bytes


identifiers = st.text(
    alphabet=st.characters(blacklist_categories=("Cs",)),
    min_size=1,
    max_size=20,
)
scalars = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-(2 ** 53), max_value=2 ** 53),
    st.text(alphabet=st.characters(blacklist_categories=("Cs",)), max_size=20),
)
payloads = st.dictionaries(
    st.text(alphabet=st.characters(blacklist_categories=("Cs",)), max_size=10),
    st.one_of(scalars, st.lists(scalars, max_size=4)),
    max_size=6,
)


def _unsaved_store() -> FileFingerprintStore:
    # never saved, so the path is never touched
    return FileFingerprintStore(os.path.join(tempfile.gettempdir(), "pushstate-never-written.json"))


@given(identifier=identifiers, payload=payloads)
def test_fresh_entity_is_changed(identifier: str, payload: dict) -> None:
    assert _unsaved_store().is_changed(PushRecord(identifier, payload))


@given(identifier=identifiers, payload=payloads)
def test_put_then_unchanged(identifier: str, payload: dict) -> None:
    store = _unsaved_store()
    store.put(PushRecord(identifier, payload))
    assert store.is_changed(PushRecord(identifier, dict(payload))) is False


@given(identifier=identifiers, a=payloads, b=payloads)
def test_different_serialization_is_changed(identifier: str, a: dict, b: dict) -> None:
    assume(canonical_bytes(a) != canonical_bytes(b))
    store = _unsaved_store()
    store.put(PushRecord(identifier, a))
    assert store.is_changed(PushRecord(identifier, b)) is True


@settings(max_examples=25, deadline=None)
@given(table=st.dictionaries(identifiers, payloads, max_size=15))
def test_save_read_round_trip(table: dict) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "state.json")
        store = FileFingerprintStore(path)
        for identifier, payload in table.items():
            store.put(PushRecord(identifier, payload))
        store.save()

        restarted = FileFingerprintStore.open(path)
        assert restarted.size() == len(table)
        for identifier, payload in table.items():
            assert restarted.get(identifier) == store.get(identifier)
            assert restarted.is_changed(PushRecord(identifier, payload)) is False


@settings(max_examples=25, deadline=None)
@given(
    table=st.dictionaries(identifiers, payloads, min_size=1, max_size=10),
    data=st.data(),
)
def test_delete_shrinks_by_one_and_persists(table: dict, data) -> None:
    victim = data.draw(st.sampled_from(sorted(table)))
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "state.json")
        store = FileFingerprintStore(path)
        for identifier, payload in table.items():
            store.put(PushRecord(identifier, payload))

        store.delete(victim)
        assert store.size() == len(table) - 1
        assert FileFingerprintStore.open(path).snapshot() == store.snapshot()
