"""Dependency container wiring for the application."""

from dataclasses import dataclass
from zoneinfo import ZoneInfo

from supabase import create_client

from meal_tracker.adapters.file_kv_store import JsonFileKeyValueStore
from meal_tracker.adapters.supabase_kv_store import SupabaseKeyValueStore
from meal_tracker.config import Settings
from meal_tracker.services.storage import KeyValueStore
from meal_tracker.services.tracker import MealTracker


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: KeyValueStore
    tracker: MealTracker


def build_store(settings: Settings) -> KeyValueStore:
    """Create the configured key-value store."""
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase storage requires URL and service key")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(client, table=settings.supabase_table)
    return JsonFileKeyValueStore(settings.data_path)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = build_store(resolved_settings)
    tracker = MealTracker.load(store, ZoneInfo(resolved_settings.timezone))
    return AppContainer(settings=resolved_settings, store=store, tracker=tracker)
