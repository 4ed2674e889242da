"""
Central data model definitions used across the project.

This module defines the canonical structure of schedule records and of the
views derived from them, so that:
- parsing, storage, aggregation and the terminal views share the same fields
- records stay immutable once the parser created them
- the JSON layout of the store is defined in exactly one place
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, NamedTuple, Optional, Tuple

from unitime.locale_table import MONTHS_EN, WEEKDAYS_EN, PaletteColor


LOCATION_NOT_AVAILABLE = "N/A"

_CLOCK = re.compile(r"^(\d{1,2}):(\d{2})$")


def clock_minutes(hhmm: str) -> int:
    """
    Convert 'H:MM' or 'HH:MM' to minutes since midnight.
    Raises ValueError for anything else, 24:00 included.
    """
    m = _CLOCK.match(hhmm.strip())
    if not m:
        raise ValueError(f"invalid time {hhmm!r}")
    h, mm = int(m.group(1)), int(m.group(2))
    if not (0 <= h <= 23 and 0 <= mm <= 59):
        raise ValueError(f"invalid time {hhmm!r}")
    return h * 60 + mm


class RawRow(NamedTuple):
    """
    One data row of the session table, as text, before any validation.
    """

    position: int
    date_text: str
    time_text: str
    location_text: Optional[str]


@dataclass(frozen=True)
class ScheduleRecord:
    """
    Represents one lecture session (single date & time slot).

    Created only by the row normalizer; never mutated afterwards.
    """

    id: str
    course_name: str
    color_index: int
    day_name: str
    day_number: int
    month: str
    year: int
    start_time: str
    end_time: str
    location: str
    full_date: date
    duration_minutes: int

    @property
    def weekday_name(self) -> str:
        # day_name is the raw Italian token; display always derives from the date
        return WEEKDAYS_EN[self.full_date.weekday()]

    @property
    def start_minutes(self) -> int:
        return clock_minutes(self.start_time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "courseName": self.course_name,
            "colorIndex": self.color_index,
            "dayName": self.day_name,
            "dayNumber": self.day_number,
            "month": self.month,
            "year": self.year,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "location": self.location,
            "fullDate": self.full_date.isoformat(),
            "durationMinutes": self.duration_minutes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScheduleRecord":
        """
        Revive a record from its persisted form.

        `fullDate` may be a plain ISO date or a full ISO datetime; only the
        calendar part is kept. Times must follow the same H:MM rule the
        parser applies. Raises KeyError/ValueError/TypeError for malformed
        entries.
        """
        full_date = date.fromisoformat(str(data["fullDate"])[:10])
        start_time = str(data["startTime"])
        end_time = str(data["endTime"])
        clock_minutes(start_time)
        clock_minutes(end_time)

        return cls(
            id=str(data["id"]),
            course_name=str(data["courseName"]),
            color_index=int(data["colorIndex"]),
            day_name=str(data.get("dayName", "")),
            day_number=int(data.get("dayNumber", full_date.day)),
            month=str(data.get("month", "")),
            year=int(data.get("year", full_date.year)),
            start_time=start_time,
            end_time=end_time,
            location=str(data.get("location") or LOCATION_NOT_AVAILABLE),
            full_date=full_date,
            duration_minutes=int(data["durationMinutes"]),
        )


@dataclass(frozen=True)
class WeekBucket:
    """
    All records of one Monday-anchored week.
    """

    week_start: date
    records: Tuple[ScheduleRecord, ...]

    @property
    def week_end(self) -> date:
        return self.week_start + timedelta(days=6)

    @property
    def label(self) -> str:
        def short(d: date) -> str:
            return f"{MONTHS_EN[d.month - 1][:3]} {d.day}"

        return f"{short(self.week_start)} - {short(self.week_end)}"


@dataclass(frozen=True)
class CourseShare:
    name: str
    hours: float
    color: str


@dataclass(frozen=True)
class CourseStats:
    total_hours: float
    lecture_count: int
    month_distribution: Dict[str, int]
    course_breakdown: Tuple[CourseShare, ...]
    location_count: int


@dataclass(frozen=True)
class LegendEntry:
    name: str
    color: PaletteColor
