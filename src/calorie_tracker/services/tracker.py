"""Application service tying profile, ledger and portion advice together."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime

from calorie_tracker.domain.errors import ProfileMissingError
from calorie_tracker.domain.food import FoodCandidate, FoodEntry
from calorie_tracker.domain.goals import compute_daily_goal
from calorie_tracker.domain.nutrition import DailyTotals, MacroBreakdown
from calorie_tracker.domain.portions import Decision
from calorie_tracker.domain.profile import Profile
from calorie_tracker.services.ledger import LedgerService
from calorie_tracker.services.portions import PortionAdvisor
from calorie_tracker.services.profiles import ProfileService
from calorie_tracker.services.recognition import RecognitionService

_logger = logging.getLogger(__name__)


@dataclass
class DashboardSummary:
    """Everything the dashboard shows for one day."""

    profile: Profile
    daily_goal: int
    totals: DailyTotals
    remaining: int
    progress_percent: float
    macros: MacroBreakdown
    entries: list[FoodEntry]

    @property
    def remaining_display(self) -> int:
        """Remaining calories clamped at zero."""
        return max(self.remaining, 0)


@dataclass
class TrackerService:
    """Runs user actions, saving each aggregate after it changes."""

    profiles: ProfileService
    ledger: LedgerService
    advisor: PortionAdvisor
    recognition: RecognitionService
    clock: Callable[[], datetime] = field(default=datetime.now)

    def onboard(self, payload: Profile | Mapping[str, object]) -> Profile:
        """Validate onboarding input and store it as the profile.

        Raises pydantic.ValidationError with field-level details on bad input.
        """
        if isinstance(payload, Profile):
            profile = payload
        else:
            profile = Profile.model_validate(dict(payload))
        self.profiles.save(profile)
        _logger.info(
            "Profile saved: goal=%s daily_goal=%s",
            profile.goal,
            compute_daily_goal(profile),
        )
        return profile

    def require_profile(self) -> Profile:
        """Return the stored profile or raise ProfileMissingError."""
        profile = self.profiles.load()
        if profile is None:
            raise ProfileMissingError
        return profile

    def daily_goal(self) -> int:
        """Return the calorie goal for the stored profile."""
        return compute_daily_goal(self.require_profile())

    def dashboard(self, reference: datetime | None = None) -> DashboardSummary:
        """Return today's progress against the goal."""
        profile = self.require_profile()
        goal = compute_daily_goal(profile)
        day = reference or self.clock()
        ledger = self.ledger.load()
        totals = ledger.today_totals(day)
        return DashboardSummary(
            profile=profile,
            daily_goal=goal,
            totals=totals,
            remaining=goal - totals.calories,
            progress_percent=totals.calories / goal * 100 if goal else 0.0,
            macros=ledger.macro_breakdown(goal, day),
            entries=ledger.today_entries(day),
        )

    def evaluate(
        self, candidate: FoodCandidate, reference: datetime | None = None
    ) -> Decision | None:
        """Check a candidate against what is left of today's goal."""
        goal = self.daily_goal()
        totals = self.ledger.load().today_totals(reference or self.clock())
        return self.advisor.evaluate(candidate, totals, goal)

    async def analyze_image(
        self, image_bytes: bytes
    ) -> tuple[FoodCandidate, Decision | None]:
        """Recognize the food in a photo and evaluate it."""
        goal = self.daily_goal()
        candidate = await self.recognition.recognize(image_bytes)
        totals = self.ledger.load().today_totals(self.clock())
        return candidate, self.advisor.evaluate(candidate, totals, goal)

    def log_food(self, candidate: FoodCandidate) -> FoodEntry | None:
        """Add a candidate to the ledger. Incomplete candidates are dropped."""
        if not candidate.is_complete:
            _logger.warning(
                "Invalid food data, not logging: %s", candidate.name or "<unnamed>"
            )
            return None
        ledger = self.ledger.load()
        entry = FoodEntry.from_candidate(
            candidate, timestamp=int(self.clock().timestamp() * 1000)
        )
        ledger.add_entry(entry)
        self.ledger.save(ledger)
        return entry

    def delete_entry(self, timestamp: int) -> None:
        """Remove a logged entry by timestamp."""
        ledger = self.ledger.load()
        ledger.remove_entry(timestamp)
        self.ledger.save(ledger)

    def reset_today(self, reference: datetime | None = None) -> None:
        """Remove every entry logged today."""
        ledger = self.ledger.load()
        ledger.reset_today(reference or self.clock())
        self.ledger.save(ledger)

    def factory_reset(self) -> None:
        """Clear the ledger and the profile."""
        ledger = self.ledger.load()
        ledger.reset_all()
        self.ledger.save(ledger)
        self.profiles.clear()
        _logger.info("Factory reset completed")
