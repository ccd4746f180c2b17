"""Key-value persistence for the catalog and the log."""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Protocol, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from meal_tracker.domain.meals import DailyMealEntry, ReferenceMeal
from meal_tracker.domain.storage import LoadResult, LoadStatus

REFERENCE_MEALS_KEY = "referenceMeals"
DAILY_ENTRIES_KEY = "dailyEntries"

T = TypeVar("T")

logger = logging.getLogger(__name__)


class StoreReadError(RuntimeError):
    """Raised when a store holds data it can no longer read back."""


class KeyValueStore(Protocol):
    """Durable string storage addressed by fixed keys."""

    def get(self, key: str) -> str | None:
        """Return the stored value for ``key``, if present.

        Raises ``StoreReadError`` when the backing data is damaged.
        """

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""


class StoredReferenceMeal(BaseModel):
    """Encoded reference meal."""

    id: UUID
    name: str
    calories: float
    protein: float
    fat: float
    carbs: float


class StoredDailyEntry(BaseModel):
    """Encoded daily entry with its embedded meal."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    date: datetime
    reference_meal: StoredReferenceMeal = Field(alias="referenceMeal")
    portions: float


_MEALS_ADAPTER = TypeAdapter(list[StoredReferenceMeal])
_ENTRIES_ADAPTER = TypeAdapter(list[StoredDailyEntry])


def encode_reference_meals(meals: list[ReferenceMeal]) -> str:
    """Encode the catalog as a JSON array."""
    stored = [_store_meal(meal) for meal in meals]
    return _MEALS_ADAPTER.dump_json(stored).decode()


def decode_reference_meals(raw: str) -> list[ReferenceMeal]:
    """Decode a JSON array produced by ``encode_reference_meals``."""
    return [_parse_meal(item) for item in _MEALS_ADAPTER.validate_json(raw)]


def encode_daily_entries(entries: list[DailyMealEntry]) -> str:
    """Encode the log as a JSON array."""
    stored = [
        StoredDailyEntry(
            id=entry.id,
            date=entry.date,
            reference_meal=_store_meal(entry.reference_meal),
            portions=entry.portions,
        )
        for entry in entries
    ]
    return _ENTRIES_ADAPTER.dump_json(stored, by_alias=True).decode()


def decode_daily_entries(raw: str) -> list[DailyMealEntry]:
    """Decode a JSON array produced by ``encode_daily_entries``."""
    return [
        DailyMealEntry(
            id=item.id,
            date=item.date,
            reference_meal=_parse_meal(item.reference_meal),
            portions=item.portions,
        )
        for item in _ENTRIES_ADAPTER.validate_json(raw)
    ]


def load_collection(
    store: KeyValueStore, key: str, decoder: Callable[[str], list[T]]
) -> LoadResult[T]:
    """Read and decode one collection, reporting missing or corrupt data."""
    try:
        raw = store.get(key)
    except StoreReadError as exc:
        logger.warning(
            "Store is unreadable, starting empty",
            extra={"key": key, "error": str(exc)},
        )
        return LoadResult(key=key, status=LoadStatus.CORRUPT, error=str(exc))
    if raw is None:
        return LoadResult(key=key, status=LoadStatus.MISSING)
    try:
        items = decoder(raw)
    except ValidationError as exc:
        logger.warning(
            "Stored collection is corrupt, starting empty",
            extra={"key": key, "error_count": exc.error_count()},
        )
        return LoadResult(key=key, status=LoadStatus.CORRUPT, error=str(exc))
    return LoadResult(key=key, status=LoadStatus.LOADED, items=items)


def _store_meal(meal: ReferenceMeal) -> StoredReferenceMeal:
    return StoredReferenceMeal(
        id=meal.id,
        name=meal.name,
        calories=meal.calories,
        protein=meal.protein,
        fat=meal.fat,
        carbs=meal.carbs,
    )


def _parse_meal(item: StoredReferenceMeal) -> ReferenceMeal:
    return ReferenceMeal(
        id=item.id,
        name=item.name,
        calories=item.calories,
        protein=item.protein,
        fat=item.fat,
        carbs=item.carbs,
    )
