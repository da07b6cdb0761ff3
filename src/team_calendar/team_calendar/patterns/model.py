from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import IntEnum
from typing import Iterable, Iterator, List, Mapping, Optional

from ..core.enums import LocationKind
from ..core.exceptions import ValidationError


class Weekday(IntEnum):
    """Same numbering as ``date.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def parse(cls, value: "Weekday | int | str") -> "Weekday":
        if isinstance(value, Weekday):
            return value
        if isinstance(value, bool):
            raise ValidationError(f"Invalid weekday {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise ValidationError(f"Invalid weekday {value!r}")

        key = str(value or "").strip().upper()
        if key.isdigit():
            return cls.parse(int(key))
        for wd in cls:
            if wd.name == key or wd.name[:3] == key:
                return wd
        raise ValidationError(f"Invalid weekday {value!r}")


ALL_DAYS_MASK = 0b1111111


@dataclass(frozen=True)
class WeekdaySet:
    """Set of weekdays stored as a 7-bit mask (bit n = Weekday(n))."""

    mask: int = 0

    def __post_init__(self):
        if not 0 <= int(self.mask) <= ALL_DAYS_MASK:
            raise ValidationError(f"Invalid weekday mask {self.mask!r}")

    @classmethod
    def of(cls, days: Iterable["Weekday | int | str"]) -> "WeekdaySet":
        mask = 0
        for d in days:
            mask |= 1 << Weekday.parse(d)
        return cls(mask)

    @classmethod
    def from_flags(cls, flags: Mapping[str, object]) -> "WeekdaySet":
        """Build from per-day booleans (``{"monday": True, ...}``)."""
        return cls.of(wd for wd in Weekday if bool(flags.get(wd.name.lower())))

    def includes(self, day: date) -> bool:
        return bool(self.mask & (1 << day.weekday()))

    def __contains__(self, weekday: object) -> bool:
        if isinstance(weekday, date):
            return self.includes(weekday)
        if not isinstance(weekday, (int, str)):
            return False
        return bool(self.mask & (1 << Weekday.parse(weekday)))

    def __iter__(self) -> Iterator[Weekday]:
        return (wd for wd in Weekday if self.mask & (1 << wd))

    def __len__(self) -> int:
        return bin(self.mask).count("1")

    def __bool__(self) -> bool:
        return self.mask != 0

    def names(self) -> List[str]:
        return [wd.name.lower() for wd in self]


@dataclass(frozen=True)
class OneTimeEntry:
    """A single-day, explicitly stored work location for one owner."""

    entry_id: int
    owner_id: int
    work_date: date
    location: LocationKind
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class RecurringRule:
    """Weekly-repeating rule; virtual, never stored per day."""

    rule_id: int
    owner_id: int
    location: LocationKind
    days: WeekdaySet
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    def applies_to(self, day: date) -> bool:
        return self.days.includes(day)


@dataclass(frozen=True)
class RangeUpsert:
    """Outcome of a multi-day upsert.

    ``entries`` are the records stored or updated; ``skipped`` are the days
    a public holiday kept (computed holiday or a stored holiday entry).
    """

    entries: List[OneTimeEntry]
    skipped: List[date]
