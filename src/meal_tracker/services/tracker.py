"""Tracker service owning the meal catalog and the daily log."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import TypeVar
from uuid import UUID

from meal_tracker.domain.meals import (
    DailyMealEntry,
    DailyTotals,
    ReferenceMeal,
    local_day,
)
from meal_tracker.domain.storage import LoadResult
from meal_tracker.services.csv_io import (
    export_daily_entries_csv,
    parse_reference_meals_csv,
)
from meal_tracker.services.storage import (
    DAILY_ENTRIES_KEY,
    REFERENCE_MEALS_KEY,
    KeyValueStore,
    decode_daily_entries,
    decode_reference_meals,
    encode_daily_entries,
    encode_reference_meals,
    load_collection,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


class MealNotFoundError(LookupError):
    """Raised when a reference meal id is not in the catalog."""


class EntryNotFoundError(LookupError):
    """Raised when a daily entry id is not in the log."""


@dataclass
class MealTracker:
    """Single owner of the catalog and the log.

    Every mutation is applied in memory first and then both collections are
    written back to the store. Write failures are logged and otherwise
    ignored, so the in-memory state stays authoritative for the session.
    """

    store: KeyValueStore
    tz: tzinfo
    reference_meals: list[ReferenceMeal] = field(default_factory=list)
    daily_entries: list[DailyMealEntry] = field(default_factory=list)
    load_results: dict[str, LoadResult] = field(default_factory=dict)

    @classmethod
    def load(cls, store: KeyValueStore, tz: tzinfo) -> "MealTracker":
        """Create a tracker populated from the store."""
        meals = load_collection(store, REFERENCE_MEALS_KEY, decode_reference_meals)
        entries = load_collection(store, DAILY_ENTRIES_KEY, decode_daily_entries)
        logger.info(
            "Loaded tracker state",
            extra={
                "reference_meals": meals.status.value,
                "daily_entries": entries.status.value,
            },
        )
        return cls(
            store=store,
            tz=tz,
            reference_meals=list(meals.items),
            daily_entries=list(entries.items),
            load_results={meals.key: meals, entries.key: entries},
        )

    def add_reference_meal(self, meal: ReferenceMeal) -> ReferenceMeal:
        """Append a meal to the catalog."""
        self.reference_meals.append(meal)
        self._save()
        return meal

    def add_daily_entry(self, entry: DailyMealEntry) -> DailyMealEntry:
        """Append an entry to the log, detaching its meal from the catalog."""
        entry.reference_meal = entry.reference_meal.copy()
        self.daily_entries.append(entry)
        self._save()
        return entry

    def log_meal(self, meal_id: UUID, day: date, portions: float) -> DailyMealEntry:
        """Log ``portions`` of a catalog meal on ``day``."""
        meal = self.get_reference_meal(meal_id)
        logged_at = datetime.combine(day, datetime.now(tz=self.tz).time(), self.tz)
        return self.add_daily_entry(
            DailyMealEntry(date=logged_at, reference_meal=meal, portions=portions)
        )

    def get_reference_meal(self, meal_id: UUID) -> ReferenceMeal:
        """Return a catalog meal by id."""
        for meal in self.reference_meals:
            if meal.id == meal_id:
                return meal
        raise MealNotFoundError(f"Reference meal {meal_id} not found")

    def remove_reference_meal(self, indices: Iterable[int]) -> None:
        """Remove catalog meals at the given positions.

        Logged entries keep their own copy of the meal and are not touched.
        """
        self.reference_meals = _remove_at(self.reference_meals, indices)
        self._save()

    def remove_daily_entry(self, indices: Iterable[int]) -> None:
        """Remove log entries at the given positions."""
        self.daily_entries = _remove_at(self.daily_entries, indices)
        self._save()

    def remove_daily_entry_by_id(self, entry_id: UUID) -> None:
        """Remove a single log entry by id."""
        for index, entry in enumerate(self.daily_entries):
            if entry.id == entry_id:
                self.remove_daily_entry([index])
                return
        raise EntryNotFoundError(f"Daily entry {entry_id} not found")

    def entries_for_day(self, day: date) -> list[DailyMealEntry]:
        """Return entries logged on ``day``, in log order."""
        return [
            entry
            for entry in self.daily_entries
            if local_day(entry.date, self.tz) == day
        ]

    def day_summary(self, day: date) -> DailyTotals:
        """Return nutrition totals for ``day``."""
        entries = self.entries_for_day(day)
        return DailyTotals(
            day=day,
            calories=sum(entry.total_calories for entry in entries),
            protein=sum(entry.total_protein for entry in entries),
            fat=sum(entry.total_fat for entry in entries),
            carbs=sum(entry.total_carbs for entry in entries),
        )

    def export_to_csv(self) -> str:
        """Return the log as CSV text."""
        return export_daily_entries_csv(self.daily_entries, self.tz)

    def import_reference_meals_from_csv(self, text: str) -> list[ReferenceMeal]:
        """Add a catalog meal for every valid CSV row and return them."""
        imported = [
            self.add_reference_meal(meal) for meal in parse_reference_meals_csv(text)
        ]
        logger.info("Imported reference meals", extra={"count": len(imported)})
        return imported

    def _save(self) -> None:
        try:
            self.store.set(
                REFERENCE_MEALS_KEY, encode_reference_meals(self.reference_meals)
            )
            self.store.set(DAILY_ENTRIES_KEY, encode_daily_entries(self.daily_entries))
        except Exception:
            logger.exception("Failed to persist tracker state")


def _remove_at(items: list[T], indices: Iterable[int]) -> list[T]:
    targets = set(indices)
    for index in targets:
        if not 0 <= index < len(items):
            raise IndexError(f"Index {index} out of range")
    return [item for position, item in enumerate(items) if position not in targets]
