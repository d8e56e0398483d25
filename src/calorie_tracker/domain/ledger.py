"""Food entry ledger and daily aggregation."""

from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo

from calorie_tracker.domain.food import FoodEntry
from calorie_tracker.domain.nutrition import DailyTotals, MacroBreakdown, MacroProgress

# Share of daily calories and kcal per gram for each macro.
PROTEIN_RATIO = 0.3
CARBS_RATIO = 0.5
FAT_RATIO = 0.2
PROTEIN_KCAL_PER_G = 4
CARBS_KCAL_PER_G = 4
FAT_KCAL_PER_G = 9


@dataclass
class Ledger:
    """Logged food entries, newest first."""

    entries: list[FoodEntry] = field(default_factory=list)

    def add_entry(self, entry: FoodEntry) -> None:
        """Prepend an entry."""
        self.entries.insert(0, entry)

    def remove_entry(self, timestamp: int) -> None:
        """Remove the entry with the given timestamp, if any."""
        for index, entry in enumerate(self.entries):
            if entry.timestamp == timestamp:
                del self.entries[index]
                return

    def reset_today(self, reference: datetime) -> None:
        """Drop every entry logged on the reference calendar day."""
        day = reference.date()
        tz = reference.tzinfo
        self.entries = [
            entry for entry in self.entries if _entry_day(entry, tz) != day
        ]

    def reset_all(self) -> None:
        """Drop every entry."""
        self.entries = []

    def today_entries(self, reference: datetime) -> list[FoodEntry]:
        """Return entries on the reference calendar day, newest first."""
        day = reference.date()
        tz = reference.tzinfo
        return [entry for entry in self.entries if _entry_day(entry, tz) == day]

    def today_totals(self, reference: datetime) -> DailyTotals:
        """Sum calories and macros over the reference day."""
        calories = 0
        protein = carbs = fat = 0.0
        for entry in self.today_entries(reference):
            calories += entry.calories
            protein += entry.protein
            carbs += entry.carbs
            fat += entry.fat
        return DailyTotals(calories=calories, protein=protein, carbs=carbs, fat=fat)

    def macro_breakdown(self, daily_goal: int, reference: datetime) -> MacroBreakdown:
        """Return consumed grams against targets derived from the goal."""
        totals = self.today_totals(reference)
        return MacroBreakdown(
            protein=_progress(
                totals.protein, daily_goal * PROTEIN_RATIO / PROTEIN_KCAL_PER_G
            ),
            carbs=_progress(totals.carbs, daily_goal * CARBS_RATIO / CARBS_KCAL_PER_G),
            fat=_progress(totals.fat, daily_goal * FAT_RATIO / FAT_KCAL_PER_G),
        )


def _entry_day(entry: FoodEntry, tz: tzinfo | None) -> date:
    # Naive references compare in local time.
    return datetime.fromtimestamp(entry.timestamp / 1000, tz=tz).date()


def _progress(consumed: float, target: float) -> MacroProgress:
    if target <= 0:
        return MacroProgress(consumed=consumed, target=target, percent=0.0)
    percent = min(consumed / target * 100, 100.0)
    return MacroProgress(consumed=consumed, target=target, percent=percent)
