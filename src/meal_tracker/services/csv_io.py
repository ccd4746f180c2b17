"""CSV export of the log and CSV import of reference meals.

Both directions use plain comma splitting with no quoting. A meal name that
contains a comma produces an export row with extra cells and is split apart
on import.
"""

import math
import re
from datetime import datetime, tzinfo

from meal_tracker.domain.meals import DailyMealEntry, ReferenceMeal, local_datetime

EXPORT_HEADER = "Date,Food Name,Calories,Protein,Fat,Carbs"
IMPORT_HEADER_CELL = "Name"
IMPORT_MIN_CELLS = 5

_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

# Month names stay fixed regardless of the process locale.
_MONTHS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


class CsvReadError(ValueError):
    """Raised when an uploaded CSV file can't be read as text."""


def export_daily_entries_csv(entries: list[DailyMealEntry], tz: tzinfo) -> str:
    """Render the log as CSV sorted by date, oldest first."""
    lines = [EXPORT_HEADER]
    for entry in sorted(entries, key=lambda item: local_datetime(item.date, tz)):
        row = [
            format_medium_date(local_datetime(entry.date, tz)),
            entry.reference_meal.name,
            f"{entry.total_calories:.1f}",
            f"{entry.total_protein:.1f}",
            f"{entry.total_fat:.1f}",
            f"{entry.total_carbs:.1f}",
        ]
        lines.append(",".join(row))
    return "".join(f"{line}\n" for line in lines)


def parse_reference_meals_csv(text: str) -> list[ReferenceMeal]:
    """Parse ``name,calories,protein,fat,carbs`` rows into new meals.

    Rows that are too short or have a value that is not a finite decimal
    number are skipped.
    """
    rows = [line.split(",") for line in text.splitlines() if line]
    if rows and rows[0][0] == IMPORT_HEADER_CELL:
        rows = rows[1:]

    meals = []
    for row in rows:
        if len(row) < IMPORT_MIN_CELLS:
            continue
        cells = [cell.strip() for cell in row]
        numbers = [_parse_number(cell) for cell in cells[1:5]]
        if None in numbers:
            continue
        calories, protein, fat, carbs = numbers
        meals.append(
            ReferenceMeal(
                name=cells[0],
                calories=calories,
                protein=protein,
                fat=fat,
                carbs=carbs,
            )
        )
    return meals


def _parse_number(cell: str) -> float | None:
    if not _NUMBER.fullmatch(cell):
        return None
    value = float(cell)
    return value if math.isfinite(value) else None


def read_csv_upload(raw: bytes) -> str:
    """Decode an uploaded CSV file as UTF-8 text."""
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise CsvReadError(f"Couldn't read the file: {exc}") from exc


def format_medium_date(value: datetime) -> str:
    """Format a date in the en-US medium style, e.g. ``Jan 2, 2024``."""
    return f"{_MONTHS[value.month - 1]} {value.day}, {value.year}"
