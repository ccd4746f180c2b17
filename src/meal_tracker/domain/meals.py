"""Domain models for reference meals and daily log entries."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime, tzinfo
from uuid import UUID, uuid4


@dataclass(eq=False)
class ReferenceMeal:
    """Reusable nutrition template, values are per one portion.

    Identity is the ``id``: two meals with the same name and macros are still
    different meals, and a meal keeps its identity when its fields change.
    """

    name: str
    calories: float
    protein: float
    fat: float
    carbs: float
    id: UUID = field(default_factory=uuid4)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReferenceMeal):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def copy(self) -> "ReferenceMeal":
        """Return an independent copy with the same id."""
        return replace(self)


@dataclass
class DailyMealEntry:
    """A logged portion of a reference meal on a given date."""

    date: datetime
    reference_meal: ReferenceMeal
    portions: float
    id: UUID = field(default_factory=uuid4)

    @property
    def total_calories(self) -> float:
        return self.reference_meal.calories * self.portions

    @property
    def total_protein(self) -> float:
        return self.reference_meal.protein * self.portions

    @property
    def total_fat(self) -> float:
        return self.reference_meal.fat * self.portions

    @property
    def total_carbs(self) -> float:
        return self.reference_meal.carbs * self.portions


@dataclass(frozen=True)
class DailyTotals:
    """Nutrition totals for one calendar day."""

    day: date
    calories: float
    protein: float
    fat: float
    carbs: float


def local_datetime(value: datetime, tz: tzinfo) -> datetime:
    """Return ``value`` as an aware datetime in ``tz``.

    Naive datetimes are taken to already be local to ``tz``.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def local_day(value: datetime, tz: tzinfo) -> date:
    """Return the calendar day of ``value`` in ``tz``."""
    return local_datetime(value, tz).date()
