"""Ledger persistence."""

import json
import logging
from dataclasses import dataclass

from pydantic import ValidationError

from calorie_tracker.domain.food import FoodEntry
from calorie_tracker.domain.ledger import Ledger
from calorie_tracker.services.storage import KeyValueStore

ENTRIES_KEY = "calorie-tracker-entries"

_logger = logging.getLogger(__name__)


@dataclass
class LedgerService:
    """Loads and saves the food entry ledger as one JSON list."""

    store: KeyValueStore

    def load(self) -> Ledger:
        """Return the stored ledger, dropping entries that fail validation."""
        raw = self.store.get(ENTRIES_KEY)
        if raw is None:
            return Ledger()
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            _logger.warning("Stored entries are not valid JSON: %s", exc)
            return Ledger()
        if not isinstance(payload, list):
            _logger.warning("Stored entries are not a list, starting empty")
            return Ledger()

        entries: list[FoodEntry] = []
        for item in payload:
            try:
                entries.append(FoodEntry.model_validate(item))
            except ValidationError:
                _logger.warning("Invalid entry found: %r", item)
        if len(entries) != len(payload):
            _logger.warning(
                "Filtered out %s invalid entries", len(payload) - len(entries)
            )
        return Ledger(entries=entries)

    def save(self, ledger: Ledger) -> None:
        """Write a full snapshot of the ledger."""
        snapshot = [entry.model_dump() for entry in ledger.entries]
        self.store.set(ENTRIES_KEY, json.dumps(snapshot))
