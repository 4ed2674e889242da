"""
Terminal views of the schedule (rich tables).

The views only read records and aggregates; they never change the collection.
"""

from __future__ import annotations

from datetime import timedelta
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from unitime.aggregate import records_for_course, records_on_weekday
from unitime.locale_table import MONTHS_EN, WEEKDAYS_EN, palette_color
from unitime.model import CourseStats, LegendEntry, ScheduleRecord, WeekBucket


console = Console()


def _out(target: Optional[Console]) -> Console:
    return target if target is not None else console


def _session_cell(r: ScheduleRecord) -> str:
    color = palette_color(r.color_index).hex
    # Rooms are often "Aula 3 - Edificio B"; the grid only has space for the first part
    room = r.location.split("-", 1)[0].strip()
    return f"[bold {color}]{r.start_time}-{r.end_time}[/]\n{escape(r.course_name)}\n[dim]{escape(room)}[/]"


def render_legend(legend: Sequence[LegendEntry], target: Optional[Console] = None) -> None:
    out = _out(target)
    if not legend:
        out.print("No courses loaded.")
        return

    table = Table(title="Loaded courses", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Course")
    table.add_column("Color")
    for i, entry in enumerate(legend, start=1):
        table.add_row(str(i), escape(entry.name), f"[{entry.color.hex}]●[/] {entry.color.name}")
    out.print(table)


def render_weeks(buckets: Sequence[WeekBucket], target: Optional[Console] = None) -> None:
    out = _out(target)
    if not buckets:
        out.print("No sessions loaded.")
        return

    table = Table(title="Weeks", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Week")
    table.add_column("Sessions", justify="right")
    for i, bucket in enumerate(buckets, start=1):
        table.add_row(str(i), bucket.label, str(len(bucket.records)))
    out.print(table)


def render_week(bucket: WeekBucket, target: Optional[Console] = None) -> None:
    """
    Week grid: one column per weekday, sessions sorted by start time.

    Saturday and Sunday only get a column when that week has sessions on them.
    """
    out = _out(target)
    days: List[int] = [0, 1, 2, 3, 4]
    for weekend_day in (5, 6):
        if records_on_weekday(bucket, weekend_day):
            days.append(weekend_day)

    columns = {d: records_on_weekday(bucket, d) for d in days}

    table = Table(title=f"Week {bucket.label}", box=box.SIMPLE, show_lines=True)
    for d in days:
        table.add_column(f"{WEEKDAYS_EN[d]} {(bucket.week_start + timedelta(days=d)).day}")

    max_len = max(len(v) for v in columns.values())
    for i in range(max_len):
        row = [_session_cell(columns[d][i]) if i < len(columns[d]) else "" for d in days]
        table.add_row(*row)

    out.print(table)


def render_course_list(
    records: Sequence[ScheduleRecord],
    legend: Sequence[LegendEntry],
    target: Optional[Console] = None,
) -> None:
    out = _out(target)
    if not legend:
        out.print("No sessions loaded.")
        return

    for entry in legend:
        sessions = records_for_course(records, entry.name)
        table = Table(
            title=f"[{entry.color.hex}]{escape(entry.name)}[/] ({len(sessions)} sessions)",
            box=box.SIMPLE,
        )
        table.add_column("Date")
        table.add_column("Day")
        table.add_column("Time")
        table.add_column("Location")
        for r in sessions:
            table.add_row(
                f"{r.full_date.day} {MONTHS_EN[r.full_date.month - 1][:3]} {r.full_date.year}",
                r.weekday_name,
                r.start_time,
                escape(r.location),
            )
        out.print(table)


def render_stats(stats: CourseStats, target: Optional[Console] = None) -> None:
    out = _out(target)

    summary = Table(title="Overview", box=box.SIMPLE, show_header=False)
    summary.add_column("Metric")
    summary.add_column("Value", justify="right")
    summary.add_row("Total hours", f"{stats.total_hours}h")
    summary.add_row("Sessions", str(stats.lecture_count))
    summary.add_row("Active courses", str(len(stats.course_breakdown)))
    summary.add_row("Locations", str(stats.location_count))
    out.print(summary)

    if stats.course_breakdown:
        hours = Table(title="Hour distribution", box=box.SIMPLE)
        hours.add_column("Course")
        hours.add_column("Hours", justify="right")
        for share in stats.course_breakdown:
            hours.add_row(f"[{share.color}]●[/] {escape(share.name)}", f"{share.hours}h")
        out.print(hours)

    if stats.month_distribution:
        load = Table(title="Monthly session load", box=box.SIMPLE)
        load.add_column("Month")
        load.add_column("Sessions", justify="right")
        load.add_column("")
        for month, count in stats.month_distribution.items():
            load.add_row(month.upper(), str(count), "█" * count)
        out.print(load)
