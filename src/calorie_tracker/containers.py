"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from functools import partial
from pathlib import Path
from zoneinfo import ZoneInfo

from supabase import create_client

from calorie_tracker.adapters.json_file_store import JsonFileKeyValueStore
from calorie_tracker.adapters.openrouter_vision_client import OpenRouterVisionClient
from calorie_tracker.adapters.supabase_kv_store import SupabaseKeyValueStore
from calorie_tracker.config import Settings, parse_storage_backend
from calorie_tracker.services.ledger import LedgerService
from calorie_tracker.services.portions import PortionAdvisor
from calorie_tracker.services.profiles import ProfileService
from calorie_tracker.services.recognition import RecognitionService
from calorie_tracker.services.storage import InMemoryKeyValueStore, KeyValueStore
from calorie_tracker.services.tracker import TrackerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: KeyValueStore
    profile_service: ProfileService
    ledger_service: LedgerService
    recognition_service: RecognitionService
    tracker_service: TrackerService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = build_store(resolved_settings)
    profile_service = ProfileService(store)
    ledger_service = LedgerService(store)

    vision_client = None
    if resolved_settings.openrouter_api_key:
        vision_client = OpenRouterVisionClient.create(
            api_key=resolved_settings.openrouter_api_key,
            base_url=resolved_settings.openrouter_base_url,
            referer=resolved_settings.app_referer,
            title=resolved_settings.app_title,
        )
    recognition_service = RecognitionService(
        client=vision_client,
        model=resolved_settings.openrouter_model,
        max_image_bytes=resolved_settings.max_image_bytes,
    )
    tracker_service = TrackerService(
        profiles=profile_service,
        ledger=ledger_service,
        advisor=PortionAdvisor(),
        recognition=recognition_service,
        clock=build_clock(resolved_settings.timezone),
    )

    async def close_resources() -> None:
        if vision_client is not None:
            await vision_client.close()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        profile_service=profile_service,
        ledger_service=ledger_service,
        recognition_service=recognition_service,
        tracker_service=tracker_service,
        close_resources=close_resources,
    )


def build_store(settings: Settings) -> KeyValueStore:
    """Create the configured key-value store."""
    backend = parse_storage_backend(settings.storage_backend)
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase storage requires SUPABASE_URL and key")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(client, table=settings.supabase_table)
    return JsonFileKeyValueStore(Path(settings.storage_path))


def build_clock(timezone_name: str | None) -> Callable[[], datetime]:
    """Return a clock in the configured timezone, or local time if unset."""
    if not timezone_name:
        return datetime.now
    return partial(datetime.now, tz=ZoneInfo(timezone_name))
