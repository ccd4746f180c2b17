"""Tests for key-value store adapters."""

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from meal_tracker.adapters.file_kv_store import JsonFileKeyValueStore
from meal_tracker.adapters.supabase_kv_store import SupabaseKeyValueStore
from meal_tracker.services.storage import StoreReadError


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    rows: dict[str, dict[str, object]] = field(default_factory=dict)
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_conflict: str | None = None

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        self.last_filters = []
        return self

    def upsert(  # type: ignore[no-untyped-def]
        self, payload, on_conflict: str = ""
    ) -> "FakeTable":
        self._action = "upsert"
        self._payload = payload
        self.last_conflict = on_conflict
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        if self._action == "upsert":
            self.rows[self._payload["key"]] = dict(self._payload)
            return FakeResponse(data=[self._payload])
        keys = [value for column, value in self.last_filters if column == "key"]
        data = [self.rows[key] for key in keys if key in self.rows]
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_supabase_store_roundtrip() -> None:
    client = FakeSupabaseClient()
    store = SupabaseKeyValueStore(client)

    store.set("referenceMeals", "[]")
    store.set("referenceMeals", '[{"id": "x"}]')

    assert store.get("referenceMeals") == '[{"id": "x"}]'
    table = client.tables["app_state"]
    assert table.last_conflict == "key"
    assert "updated_at" in table.rows["referenceMeals"]


def test_supabase_store_missing_key() -> None:
    store = SupabaseKeyValueStore(FakeSupabaseClient(), table="kv")

    assert store.get("dailyEntries") is None


def test_file_store_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "state.json"
    store = JsonFileKeyValueStore(path)

    store.set("referenceMeals", "[1]")
    store.set("dailyEntries", "[2]")

    reopened = JsonFileKeyValueStore(path)
    assert reopened.get("referenceMeals") == "[1]"
    assert reopened.get("dailyEntries") == "[2]"
    assert list(path.parent.glob("*.tmp")) == []


def test_file_store_missing_file(tmp_path: Path) -> None:
    store = JsonFileKeyValueStore(tmp_path / "absent.json")

    assert store.get("referenceMeals") is None


def test_file_store_refuses_to_read_damaged_file(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("not json", encoding="utf-8")
    store = JsonFileKeyValueStore(path)

    with pytest.raises(StoreReadError):
        store.get("referenceMeals")


def test_file_store_rejects_non_object_file(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(StoreReadError):
        JsonFileKeyValueStore(path).get("dailyEntries")


def test_file_store_moves_damaged_file_aside_before_writing(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("not json", encoding="utf-8")
    store = JsonFileKeyValueStore(path)

    store.set("referenceMeals", "[]")

    assert store.get("referenceMeals") == "[]"
    assert store.backup_path == tmp_path / "state.json.corrupt"
    assert store.backup_path.read_text(encoding="utf-8") == "not json"
