"""Shared test fixtures."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from calorie_tracker.config import Settings
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.food import FoodEntry
from calorie_tracker.domain.profile import Profile
from calorie_tracker.services.ledger import LedgerService
from calorie_tracker.services.portions import PortionAdvisor
from calorie_tracker.services.profiles import ProfileService
from calorie_tracker.services.recognition import RecognitionService, VisionClient
from calorie_tracker.services.storage import InMemoryKeyValueStore
from calorie_tracker.services.tracker import TrackerService

NOW = datetime(2024, 5, 10, 12, 0, tzinfo=UTC)


def to_ms(moment: datetime) -> int:
    """Return a datetime as milliseconds since the epoch."""
    return int(moment.timestamp() * 1000)


def make_entry(name: str, calories: int, moment: datetime) -> FoodEntry:
    """Build an entry with fixed macros at the given instant."""
    return FoodEntry(
        name=name,
        calories=calories,
        protein=10.0,
        carbs=20.0,
        fat=5.0,
        timestamp=to_ms(moment),
    )


@dataclass
class FakeVisionClient(VisionClient):
    """Fake vision client returning a fixed reply and recording calls."""

    content: str = (
        '{"name": "Margherita pizza", "calories": 812.4, '
        '"protein": 34.26, "carbs": 98.04, "fat": 30.17}'
    )
    calls: list[dict[str, str]] = field(default_factory=list)

    async def complete(self, *, model: str, prompt: str, image_data_url: str) -> str:
        self.calls.append(
            {"model": model, "prompt": prompt, "image_data_url": image_data_url}
        )
        return self.content


@dataclass
class FixedClock:
    """Clock that returns a settable instant."""

    now: datetime = NOW

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(autouse=True)
def propagate_package_logs() -> None:
    # caplog listens on the root logger
    logging.getLogger("calorie_tracker").propagate = True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openrouter_api_key="openrouter-key",
        storage_backend="memory",
        timezone="UTC",
    )


@pytest.fixture
def profile() -> Profile:
    return Profile(
        name="Alex",
        age=30,
        weight=80,
        height=180,
        gender="male",
        activityLevel="medium",
        goal="maintain",
    )


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def vision_client() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def tracker(
    store: InMemoryKeyValueStore,
    vision_client: FakeVisionClient,
    clock: FixedClock,
) -> TrackerService:
    return TrackerService(
        profiles=ProfileService(store),
        ledger=LedgerService(store),
        advisor=PortionAdvisor(),
        recognition=RecognitionService(client=vision_client, model="test-model"),
        clock=clock,
    )


@pytest.fixture
def container(
    settings: Settings,
    store: InMemoryKeyValueStore,
    tracker: TrackerService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        store=store,
        profile_service=tracker.profiles,
        ledger_service=tracker.ledger,
        recognition_service=tracker.recognition,
        tracker_service=tracker,
        close_resources=close_resources,
    )
