"""Unit tests for the persisted state adapter and its backends.

Tests cover:
- Reading a hub slice
- Merging one key without dropping sibling or unrelated keys
- Error propagation from the underlying storage
- The JSON file backend
"""

import json

import pytest

from monitorpanel.config.schema import GLOBAL_STATE_NAME
from monitorpanel.state.store import JsonFileGlobalState, MemoryGlobalState, ViewStateStore


class FailingGlobalState(MemoryGlobalState):
    """Global state whose writes always fail."""

    async def update(self, name, value):
        raise OSError("disk full")


class TestViewStateStore:
    """Test hub-scoped read and merge."""

    def test_read_missing_hub_returns_none(self, state_store):
        assert state_store.read("my-hub") is None

    def test_read_returns_hub_slice(self):
        store = ViewStateStore(MemoryGlobalState({GLOBAL_STATE_NAME: {"my-hub": {"a": 1}}}))

        assert store.read("my-hub") == {"a": 1}

    @pytest.mark.asyncio
    async def test_write_creates_record(self, state_store, global_state):
        await state_store.write("my-hub", "k", "v")

        assert global_state.get(GLOBAL_STATE_NAME) == {"my-hub": {"k": "v"}}

    @pytest.mark.asyncio
    async def test_write_keeps_unrelated_keys(self):
        global_state = MemoryGlobalState({
            GLOBAL_STATE_NAME: {
                "someOtherField": "2023-05-01",
                "my-hub": {"existing": 1},
                "other-hub": {"x": True},
            },
            "anotherRecord": {"untouched": 1},
        })
        store = ViewStateStore(global_state)

        await store.write("my-hub", "my-field-key", "my-field-value")

        record = global_state.get(GLOBAL_STATE_NAME)
        assert record["someOtherField"] == "2023-05-01"
        assert record["other-hub"] == {"x": True}
        assert record["my-hub"] == {"existing": 1, "my-field-key": "my-field-value"}
        assert global_state.get("anotherRecord") == {"untouched": 1}

    @pytest.mark.asyncio
    async def test_write_overwrites_same_key(self, state_store):
        await state_store.write("my-hub", "k", 1)
        await state_store.write("my-hub", "k", 2)

        assert state_store.read("my-hub") == {"k": 2}

    @pytest.mark.asyncio
    async def test_read_returns_a_copy(self, state_store):
        await state_store.write("my-hub", "k", "v")

        state_store.read("my-hub")["k"] = "mutated"

        assert state_store.read("my-hub") == {"k": "v"}

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self):
        store = ViewStateStore(FailingGlobalState())

        with pytest.raises(OSError, match="disk full"):
            await store.write("my-hub", "k", "v")

        assert store.read("my-hub") is None

    @pytest.mark.asyncio
    async def test_clear_removes_only_the_hub(self, state_store):
        await state_store.write("my-hub", "k", "v")
        await state_store.write("other-hub", "k", "v")

        assert await state_store.clear("my-hub") is True
        assert await state_store.clear("my-hub") is False
        assert state_store.read("my-hub") is None
        assert state_store.read("other-hub") == {"k": "v"}


class TestJsonFileGlobalState:
    """Test the JSON file backend."""

    @pytest.mark.asyncio
    async def test_update_persists_to_disk(self, tmp_path):
        path = tmp_path / "state" / "global_state.json"
        state = JsonFileGlobalState(path)

        await state.update("record", {"a": 1})

        assert json.loads(path.read_text(encoding="utf-8")) == {"record": {"a": 1}}
        assert JsonFileGlobalState(path).get("record") == {"a": 1}

    @pytest.mark.asyncio
    async def test_update_keeps_other_records(self, tmp_path):
        path = tmp_path / "global_state.json"
        path.write_text(json.dumps({"other": [1, 2]}), encoding="utf-8")
        state = JsonFileGlobalState(path)

        await state.update("record", "x")

        assert json.loads(path.read_text(encoding="utf-8")) == {"other": [1, 2], "record": "x"}

    def test_corrupted_file_starts_empty(self, tmp_path):
        path = tmp_path / "global_state.json"
        path.write_text("{not json", encoding="utf-8")

        assert JsonFileGlobalState(path).get("record", "default") == "default"

    def test_get_returns_a_copy(self, tmp_path):
        path = tmp_path / "global_state.json"
        path.write_text(json.dumps({"record": {"a": 1}}), encoding="utf-8")
        state = JsonFileGlobalState(path)

        state.get("record")["a"] = 2

        assert state.get("record") == {"a": 1}

    @pytest.mark.asyncio
    async def test_no_temp_files_left_behind(self, tmp_path):
        state = JsonFileGlobalState(tmp_path / "global_state.json")

        await state.update("record", 1)
        await state.update("record", 2)

        assert [p.name for p in tmp_path.iterdir()] == ["global_state.json"]
