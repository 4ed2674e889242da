"""
Aggregated views over the record collection.

All functions are pure: they take a sequence of records and recompute
everything from scratch, so calling them twice gives identical results.
"""

from __future__ import annotations

import math
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Sequence

from unitime.locale_table import MONTHS_EN, palette_color
from unitime.model import CourseShare, CourseStats, LegendEntry, ScheduleRecord, WeekBucket


def week_start(d: date) -> date:
    """
    Monday of the week containing d. Sunday belongs to the week that started
    six days earlier.
    """
    return d - timedelta(days=d.weekday())


def minutes_to_hours(minutes: int) -> float:
    # One decimal, half-up (15 min -> 0.3, not 0.2)
    return math.floor(minutes / 60 * 10 + 0.5) / 10


def group_by_week(records: Iterable[ScheduleRecord]) -> List[WeekBucket]:
    grouped: Dict[date, List[ScheduleRecord]] = defaultdict(list)
    for r in records:
        grouped[week_start(r.full_date)].append(r)

    return [WeekBucket(week_start=k, records=tuple(grouped[k])) for k in sorted(grouped)]


def distinct_courses(records: Iterable[ScheduleRecord]) -> List[str]:
    """
    Course names in first-seen order.
    """
    seen: Dict[str, None] = {}
    for r in records:
        seen.setdefault(r.course_name, None)
    return list(seen)


def course_legend(records: Sequence[ScheduleRecord]) -> List[LegendEntry]:
    first_index: Dict[str, int] = {}
    for r in records:
        first_index.setdefault(r.course_name, r.color_index)

    return [LegendEntry(name=name, color=palette_color(idx)) for name, idx in first_index.items()]


def compute_stats(records: Sequence[ScheduleRecord]) -> CourseStats:
    total_minutes = 0
    month_distribution: Dict[str, int] = {}
    minutes_by_course: Dict[str, int] = {}
    index_by_course: Dict[str, int] = {}
    locations = set()

    for r in records:
        total_minutes += r.duration_minutes
        label = MONTHS_EN[r.full_date.month - 1]
        month_distribution[label] = month_distribution.get(label, 0) + 1

        index_by_course.setdefault(r.course_name, r.color_index)
        minutes_by_course[r.course_name] = minutes_by_course.get(r.course_name, 0) + r.duration_minutes
        locations.add(r.location)

    breakdown = tuple(
        CourseShare(
            name=name,
            hours=minutes_to_hours(mins),
            color=palette_color(index_by_course[name]).hex,
        )
        for name, mins in minutes_by_course.items()
    )

    return CourseStats(
        total_hours=minutes_to_hours(total_minutes),
        lecture_count=len(records),
        month_distribution=month_distribution,
        course_breakdown=breakdown,
        location_count=len(locations),
    )


def records_for_course(records: Iterable[ScheduleRecord], name: str) -> List[ScheduleRecord]:
    return [r for r in records if r.course_name == name]


def records_on_weekday(bucket: WeekBucket, weekday: int) -> List[ScheduleRecord]:
    """
    Sessions of one weekday (Monday = 0) in a week, ordered by start time.
    """
    day = [r for r in bucket.records if r.full_date.weekday() == weekday]
    return sorted(day, key=lambda r: r.start_minutes)
