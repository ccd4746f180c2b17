"""Shared test fixtures."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from meal_tracker.config import Settings
from meal_tracker.containers import AppContainer
from meal_tracker.services.storage import KeyValueStore
from meal_tracker.services.tracker import MealTracker

UTC_ZONE = ZoneInfo("UTC")


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """In-memory key-value store for tests."""

    values: dict[str, str] = field(default_factory=dict)
    writes: list[str] = field(default_factory=list)

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value
        self.writes.append(key)


@dataclass
class FailingKeyValueStore(KeyValueStore):
    """Store whose writes always fail."""

    attempts: int = 0

    def get(self, key: str) -> str | None:
        return None

    def set(self, key: str, value: str) -> None:
        self.attempts += 1
        raise OSError("disk full")


@pytest.fixture(autouse=True)
def reset_app_logger() -> None:
    """Let caplog see records even after configure_logging ran."""
    logger = logging.getLogger("meal_tracker")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(data_dir=tmp_path, timezone="UTC")


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def tracker(store: InMemoryKeyValueStore) -> MealTracker:
    return MealTracker.load(store, UTC_ZONE)


@pytest.fixture
def container(
    settings: Settings, store: InMemoryKeyValueStore, tracker: MealTracker
) -> AppContainer:
    return AppContainer(settings=settings, store=store, tracker=tracker)
