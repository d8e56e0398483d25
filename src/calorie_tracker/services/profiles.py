"""Profile persistence."""

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from calorie_tracker.domain.profile import Profile
from calorie_tracker.services.storage import KeyValueStore

PROFILE_KEY = "userProfile"

_logger = logging.getLogger(__name__)


@dataclass
class ProfileService:
    """Loads and saves the user profile aggregate."""

    store: KeyValueStore

    def load(self) -> Profile | None:
        """Return the stored profile, or None when absent or unreadable."""
        raw = self.store.get(PROFILE_KEY)
        if raw is None:
            return None
        try:
            return Profile.model_validate_json(raw)
        except ValidationError as exc:
            _logger.warning("Stored profile is unreadable, ignoring it: %s", exc)
            return None

    def save(self, profile: Profile) -> None:
        """Persist the profile."""
        self.store.set(PROFILE_KEY, profile.to_json())

    def clear(self) -> None:
        """Remove the stored profile."""
        self.store.delete(PROFILE_KEY)
