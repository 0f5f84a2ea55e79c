import json
import os

import pytest

from conftest import make_result
from verisight.formats.result_schema import encode_result
from verisight.storage.backends import JsonFileStore, MemoryStore
from verisight.storage.history import HISTORY_KEY, HISTORY_LIMIT, HistoryStore, push


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path):
    if request.param == "memory":
        return HistoryStore(MemoryStore())
    return HistoryStore(JsonFileStore(str(tmp_path / "store")))


def test_load_missing_returns_empty(store):
    assert store.load() == ()


@pytest.mark.parametrize(
    "blob",
    ["{not json", "", "42", '{"a": 1}', json.dumps([{"isDeepfake": "maybe"}])],
)
def test_load_corrupt_returns_empty(blob):
    backend = MemoryStore({HISTORY_KEY: blob})
    assert HistoryStore(backend).load() == ()


def test_record_places_newest_first(store):
    r1, r2 = make_result(1), make_result(2)
    history = store.record(r1, ())
    history = store.record(r2, history)
    assert history == (r2, r1)


def test_record_does_not_mutate_input(store):
    before = (make_result(1),)
    after = store.record(make_result(2), before)
    assert before == (make_result(1),)
    assert len(after) == 2


def test_history_never_exceeds_limit(store):
    history = ()
    for n in range(25):
        history = store.record(make_result(n), history)
        assert len(history) <= HISTORY_LIMIT
    assert len(store.load()) == HISTORY_LIMIT


def test_eleven_records_drop_the_oldest(store):
    results = [make_result(n) for n in range(1, 12)]
    history = ()
    for r in results:
        history = store.record(r, history)

    expected = tuple(reversed(results[1:]))
    assert history == expected
    assert results[0] not in history
    assert store.load() == expected


def test_shift_rule_on_full_history():
    full = tuple(make_result(n) for n in range(10))
    new = make_result(99)
    updated = push(full, new)
    assert updated[0] == new
    assert updated[1:] == full[:9]
    assert full[9] not in updated


def test_persist_then_load_round_trip(tmp_path):
    directory = str(tmp_path / "store")
    history = ()
    for n in range(4):
        history = HistoryStore(JsonFileStore(directory)).record(make_result(n), history)

    assert HistoryStore(JsonFileStore(directory)).load() == history


def test_persisted_blob_is_camel_case_array(tmp_path):
    backend = JsonFileStore(str(tmp_path))
    HistoryStore(backend).record(make_result(3), ())

    with open(os.path.join(str(tmp_path), f"{HISTORY_KEY}.json"), encoding="utf-8") as f:
        data = json.load(f)
    assert data == [encode_result(make_result(3))]


def test_overlong_blob_is_truncated_on_load():
    blob = json.dumps([encode_result(make_result(n)) for n in range(12)])
    loaded = HistoryStore(MemoryStore({HISTORY_KEY: blob})).load()
    assert loaded == tuple(make_result(n) for n in range(10))


def test_clear_removes_persisted_history(store):
    store.record(make_result(1), ())
    assert store.clear() == ()
    assert store.load() == ()
    store.clear()


def test_invalid_limit_rejected():
    with pytest.raises(ValueError):
        HistoryStore(MemoryStore(), limit=0)


def test_file_store_rejects_path_keys(tmp_path):
    with pytest.raises(ValueError):
        JsonFileStore(str(tmp_path)).get("../escape")


def test_file_store_leaves_no_temp_files(tmp_path):
    backend = JsonFileStore(str(tmp_path))
    backend.set("k", "v1")
    backend.set("k", "v2")
    assert backend.get("k") == "v2"
    assert os.listdir(str(tmp_path)) == ["k.json"]


def test_load_undecodable_file_returns_empty(tmp_path):
    directory = tmp_path / "store"
    directory.mkdir()
    (directory / f"{HISTORY_KEY}.json").write_bytes(b"\xff\xfe\x80garbage")

    assert HistoryStore(JsonFileStore(str(directory))).load() == ()


def test_load_deeply_nested_blob_returns_empty():
    blob = "[" * 100000 + "]" * 100000
    assert HistoryStore(MemoryStore({HISTORY_KEY: blob})).load() == ()
