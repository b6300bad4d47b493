"""
Weekly availability template.

A dentist can only be available in fixed windows: Monday to Saturday, in
the morning (08:00-12:00) or in the afternoon (14:00-18:00). The edit form
always shows all twelve options; persisted slots only decide which of them
are checked.
"""

from dataclasses import dataclass
from datetime import time
from typing import Iterable, List

from .entities import AvailabilitySlot

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

DAILY_WINDOWS = (
    (time(8, 0), time(12, 0)),
    (time(14, 0), time(18, 0)),
)


@dataclass
class AvailabilityOption:
    """One checkbox of the availability form."""

    weekday: str
    start_time: time
    end_time: time
    selected: bool = False

    @property
    def key(self) -> str:
        """Stable form value, e.g. ``monday-0800-1200``."""
        return (
            f"{self.weekday.lower()}-"
            f"{self.start_time.strftime('%H%M')}-{self.end_time.strftime('%H%M')}"
        )

    @property
    def label(self) -> str:
        return (
            f"{self.weekday} {self.start_time.strftime('%H:%M')}"
            f" - {self.end_time.strftime('%H:%M')}"
        )

    def matches(self, slot) -> bool:
        """Equality on (weekday, start, end) only; ids are ignored."""
        return (
            getattr(slot, "weekday", None) == self.weekday
            and getattr(slot, "start_time", None) == self.start_time
            and getattr(slot, "end_time", None) == self.end_time
        )

    def to_slot(self) -> AvailabilitySlot:
        return AvailabilitySlot(
            weekday=self.weekday, start_time=self.start_time, end_time=self.end_time
        )


def default_availability() -> List[AvailabilityOption]:
    """Return the twelve canonical options, all unselected."""
    return [
        AvailabilityOption(weekday=day, start_time=start, end_time=end)
        for day in WEEKDAYS
        for start, end in DAILY_WINDOWS
    ]


def merge_existing_selections(existing: Iterable) -> List[AvailabilityOption]:
    """Mark each canonical option selected iff an existing slot matches it.

    Pure function: the input is not modified and identical persisted rows
    collapse into a single checked option.
    """
    existing = list(existing or [])
    options = default_availability()
    for option in options:
        option.selected = any(option.matches(slot) for slot in existing)
    return options


def select_by_keys(keys: Iterable[str]) -> List[AvailabilityOption]:
    """Canonical options with the given form keys checked; unknown keys ignored.

    Used to re-render a form with what the user had submitted.
    """
    wanted = {k.strip().lower() for k in keys or [] if k}
    options = default_availability()
    for option in options:
        option.selected = option.key in wanted
    return options


def parse_selection(keys: Iterable[str]) -> List[AvailabilitySlot]:
    """Translate submitted form keys into availability slots.

    Duplicate keys collapse. Raises ValueError naming every key that is not
    part of the template.
    """
    submitted = [k.strip().lower() for k in keys or [] if k and k.strip()]
    known = {option.key for option in default_availability()}
    unknown = sorted({k for k in submitted if k not in known})
    if unknown:
        raise ValueError(f"Unknown availability slot(s): {', '.join(unknown)}")
    return [option.to_slot() for option in select_by_keys(submitted) if option.selected]
