"""
Parsing (exported timetable HTML -> schedule records).

- Locates the course title (<h1>) and the session table (id="elenco")
- Extracts EACH data row of that table as exactly ONE raw row
- Normalizes raw rows into immutable ScheduleRecord objects

Important rules:
- 1 table row = at most 1 record
- A bad row is skipped, it never aborts the rest of the document
- A bad file is skipped, it never aborts the rest of the batch
"""

from __future__ import annotations

import argparse
import json
import logging
import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from unitime.locale_table import month_index
from unitime.model import LOCATION_NOT_AVAILABLE, RawRow, ScheduleRecord, clock_minutes
from unitime.source import DocumentSource, SoupDocument, collapse_whitespace


logger = logging.getLogger(__name__)


SESSION_TABLE_ID = "elenco"

# Stripped from the <h1> text, whichever language the portal was set to
TITLE_PREFIXES = ("Orario delle lezioni di", "Lesson schedule for")

_YEAR_FRAGMENT = re.compile(r"\d{4}")


class RowRejected(ValueError):
    """
    Raised inside the normalizer when a row cannot become a record.
    """


@dataclass(frozen=True)
class Rejection:
    position: int
    reason: str


@dataclass(frozen=True)
class Extraction:
    course_name: str
    rows: Tuple[RawRow, ...]


@dataclass
class ParseResult:
    course_name: str
    records: List[ScheduleRecord] = field(default_factory=list)
    rejections: List[Rejection] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Document extraction
# ---------------------------------------------------------------------------


def clean_course_name(title: Optional[str], source_index: int) -> str:
    """
    Strip the portal prefix and any trailing "(...)" suffix from a title.

    Falls back to "Course <n>" so that every source has a display name.
    """
    name = title or ""
    for prefix in TITLE_PREFIXES:
        name = name.replace(prefix, "", 1)
    name = name.split("(", 1)[0].strip()
    return name or f"Course {source_index + 1}"


def extract_rows(doc: DocumentSource, table_id: str = SESSION_TABLE_ID) -> List[RawRow]:
    """
    Yield the raw data rows of the session table.

    Section header rows (no year in the first cell) and rows with fewer than
    two cells are skipped, but still count for the row position.
    """
    table = doc.find_table(table_id)
    if table is None:
        return []

    rows: List[RawRow] = []
    for position, row in enumerate(doc.rows(table)):
        cells = doc.cells(row)
        if len(cells) < 2:
            continue

        date_text = cells[0].strip()
        if not _YEAR_FRAGMENT.search(date_text):
            continue

        location_text = cells[2] if len(cells) > 2 else None
        rows.append(RawRow(position, date_text, cells[1].strip(), location_text))

    return rows


def extract(raw_document: str, source_index: int) -> Extraction:
    doc = SoupDocument(raw_document)
    course_name = clean_course_name(doc.find_title(), source_index)
    return Extraction(course_name=course_name, rows=tuple(extract_rows(doc)))


# ---------------------------------------------------------------------------
# Row normalization (CORE LOGIC)
# ---------------------------------------------------------------------------


def clock_to_minutes(hhmm: str) -> int:
    """
    Convert 'HH:MM' to minutes since midnight.
    Raises RowRejected for invalid formats.
    """
    try:
        return clock_minutes(hhmm)
    except ValueError as e:
        raise RowRejected(str(e)) from None


def _split_date_text(text: str) -> Tuple[str, int, str, int]:
    # "lunedì, 16 febbraio 2026" -> ("lunedì", 16, "febbraio", 2026)
    parts = collapse_whitespace(text.replace(",", " ")).split(" ")
    if len(parts) < 4:
        raise RowRejected(f"expected '<weekday> <day> <month> <year>', got {text!r}")

    day_name, day_s, month_s, year_s = parts[:4]
    try:
        day_number = int(day_s)
        year = int(year_s)
    except ValueError:
        raise RowRejected(f"day or year is not a number in {text!r}") from None

    return day_name, day_number, month_s.lower(), year


def _split_time_text(text: str) -> Tuple[str, str]:
    if "-" not in text:
        raise RowRejected(f"no time range in {text!r}")
    parts = [p.strip() for p in text.split("-")]
    start, end = parts[0], parts[1]
    if not start:
        raise RowRejected(f"missing start time in {text!r}")
    if not end:
        raise RowRejected(f"missing end time in {text!r}")
    return start, end


def _build_record(
    raw_row: RawRow,
    source_index: int,
    course_name: str,
    strict_months: bool,
    warnings: List[str],
) -> ScheduleRecord:
    day_name, day_number, month, year = _split_date_text(raw_row.date_text)

    idx = month_index(month)
    if idx is None:
        msg = f"row {raw_row.position}: unknown month {month!r} in {raw_row.date_text!r}"
        warnings.append(msg)
        logger.warning("%s: %s", course_name, msg)
        if strict_months:
            raise RowRejected(f"unknown month {month!r}")
        idx = 0

    start_time, end_time = _split_time_text(raw_row.time_text)
    duration = clock_to_minutes(end_time) - clock_to_minutes(start_time)
    if duration < 0:
        raise RowRejected(f"end time {end_time} is before start time {start_time}")

    try:
        full_date = date(year, idx + 1, day_number)
    except ValueError as e:
        raise RowRejected(f"invalid date {raw_row.date_text!r}: {e}") from None

    location = collapse_whitespace(raw_row.location_text or "") or LOCATION_NOT_AVAILABLE

    return ScheduleRecord(
        id=f"course-{source_index}-row-{raw_row.position}",
        course_name=course_name,
        color_index=source_index,
        day_name=day_name,
        day_number=day_number,
        month=month,
        year=year,
        start_time=start_time,
        end_time=end_time,
        location=location,
        full_date=full_date,
        duration_minutes=duration,
    )


def normalize_row(
    raw_row: RawRow,
    source_index: int,
    course_name: str,
    strict_months: bool = True,
) -> Optional[ScheduleRecord]:
    """
    Turn one raw row into a record, or None if the row is rejected.
    """
    try:
        return _build_record(raw_row, source_index, course_name, strict_months, [])
    except RowRejected as e:
        logger.debug("row %d skipped: %s", raw_row.position, e)
        return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_document(raw_document: str, source_index: int, strict_months: bool = True) -> ParseResult:
    """
    Parse one timetable document and report what was skipped and why.
    """
    return parse_extraction(extract(raw_document, source_index), source_index, strict_months=strict_months)


def parse_extraction(extraction: Extraction, source_index: int, strict_months: bool = True) -> ParseResult:
    """
    Normalize the rows of an already extracted document.

    Lets a caller look at the course name before it settles on the source
    index the records are built with.
    """
    result = ParseResult(course_name=extraction.course_name)

    for raw_row in extraction.rows:
        try:
            record = _build_record(
                raw_row, source_index, extraction.course_name, strict_months, result.warnings
            )
        except RowRejected as e:
            logger.debug("%s: row %d skipped: %s", extraction.course_name, raw_row.position, e)
            result.rejections.append(Rejection(raw_row.position, str(e)))
            continue
        result.records.append(record)

    return result


def parse(raw_text: str, source_index: int) -> List[ScheduleRecord]:
    return parse_document(raw_text, source_index).records


def is_html_file(path: Path) -> bool:
    return path.suffix.lower() in (".html", ".htm")


def read_document(path: Path) -> Optional[str]:
    """
    Read one timetable export, or None (with a warning) if it is not an
    HTML file or cannot be read as UTF-8.
    """
    if not is_html_file(path):
        logger.warning("skipping %s: not an HTML file", path)
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("skipping %s: %s", path, e)
        return None


def parse_files(
    paths: Sequence[Path],
    first_index: int = 0,
    strict_months: bool = True,
) -> List[ParseResult]:
    """
    Parse a batch of files. File i gets source index first_index + i.

    Non-HTML and unreadable files are skipped but keep their batch position,
    so the indices of their siblings do not shift.
    """
    results: List[ParseResult] = []

    for i, path in enumerate(paths):
        text = read_document(path)
        if text is None:
            continue

        result = parse_document(text, first_index + i, strict_months=strict_months)
        if not result.records:
            logger.info("%s: no sessions found", path)
        results.append(result)

    return results


# ---------------------------------------------------------------------------
# CLI connection
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="unitime.parse",
        description="Parse exported timetable HTML files and print the records as JSON",
    )
    p.add_argument("files", nargs="+", type=Path)
    p.add_argument("--first-index", type=int, default=0, help="Source index of the first file")
    p.add_argument("--lenient-months", action="store_true", help="Map unknown months to January")
    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    results = parse_files(args.files, first_index=args.first_index, strict_months=not args.lenient_months)
    records = [r.to_dict() for result in results for r in result.records]
    print(json.dumps(records, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
