"""Domain models for persisted state."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class LoadStatus(StrEnum):
    """Outcome of reading a collection from the key-value store."""

    MISSING = "missing"
    LOADED = "loaded"
    CORRUPT = "corrupt"


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    """Decoded collection together with how it was obtained."""

    key: str
    status: LoadStatus
    items: list[T] = field(default_factory=list)
    error: str | None = None
