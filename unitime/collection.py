"""
Merge policy for the record collection.

Every function returns a NEW list; the collection passed in is never touched.

A course name identifies a course: importing a document whose course is
already loaded replaces that course's sessions and keeps its colour.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Tuple

from unitime.aggregate import distinct_courses
from unitime.model import ScheduleRecord
from unitime.parse import ParseResult, extract, parse_extraction, read_document


logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    records: List[ScheduleRecord]
    parsed: List[ParseResult] = field(default_factory=list)
    added: int = 0
    replaced: List[str] = field(default_factory=list)


def next_color_index(existing: Sequence[ScheduleRecord]) -> int:
    """
    Colour index for the first document of a new batch: the number of
    distinct course names already loaded.
    """
    return len(distinct_courses(existing))


class _IndexAllocator:
    """
    Hands out one colour index per batch position.

    Starts at next_color_index(existing) and steps over indices a loaded
    course still holds (possible after a removal), so ids built from the
    index never collide with loaded ones.
    """

    def __init__(self, existing: Sequence[ScheduleRecord]) -> None:
        self._used: Set[int] = {r.color_index for r in existing}
        self._next = next_color_index(existing)

    def take(self) -> int:
        while self._next in self._used:
            self._next += 1
        index = self._next
        self._used.add(index)
        self._next += 1
        return index


def merge(existing: Sequence[ScheduleRecord], new_records: Sequence[ScheduleRecord]) -> List[ScheduleRecord]:
    """
    Append new_records to existing and sort by date.

    Imports never hand in colliding ids, so a duplicate here means the
    caller built the records itself; it is logged and both are kept.
    """
    # sorted() is stable: same-day records keep their previous relative order
    combined = sorted([*existing, *new_records], key=lambda r: r.full_date)

    dupes = [rid for rid, n in Counter(r.id for r in combined).items() if n > 1]
    if dupes:
        logger.warning("merged collection has %d duplicate record ids (e.g. %s)", len(dupes), dupes[0])

    return combined


def remove_course(existing: Sequence[ScheduleRecord], name: str) -> List[ScheduleRecord]:
    return [r for r in existing if r.course_name != name]


def clear() -> List[ScheduleRecord]:
    return []


def import_documents(
    existing: Sequence[ScheduleRecord],
    documents: Sequence[Tuple[str, str]],
    strict_months: bool = True,
) -> ImportResult:
    """
    Parse a batch of (name, html) documents and merge them into existing.

    Document i of the batch gets source index next_color_index(existing) + i,
    skipping indices still in use. A document for a course that is already
    loaded reuses that course's index instead.
    """
    return _import_batch(existing, documents, strict_months)


def import_files(
    existing: Sequence[ScheduleRecord],
    paths: Sequence[Path],
    strict_months: bool = True,
) -> ImportResult:
    """
    Same as import_documents, reading the documents from disk.

    Unreadable files are skipped but keep their batch position.
    """
    documents = [(str(p), read_document(p)) for p in paths]
    return _import_batch(existing, documents, strict_months)


def _import_batch(
    existing: Sequence[ScheduleRecord],
    documents: Sequence[Tuple[str, Optional[str]]],
    strict_months: bool,
) -> ImportResult:
    loaded: Dict[str, int] = {}
    for r in existing:
        loaded.setdefault(r.course_name, r.color_index)

    indices = _IndexAllocator(existing)
    parsed: List[ParseResult] = []

    for name, text in documents:
        position_index = indices.take()
        if text is None:
            continue

        extraction = extract(text, position_index)
        source_index = loaded.setdefault(extraction.course_name, position_index)
        result = parse_extraction(extraction, source_index, strict_months=strict_months)

        if result.rejections:
            logger.info("%s: %d rows skipped", name, len(result.rejections))
        if not result.records:
            logger.info("%s: no sessions found", name)
        parsed.append(result)

    return _combine(existing, parsed)


def _combine(existing: Sequence[ScheduleRecord], parsed: List[ParseResult]) -> ImportResult:
    # Last document per course wins, documents without sessions change nothing
    latest: Dict[str, List[ScheduleRecord]] = {}
    for result in parsed:
        if not result.records:
            continue
        if result.course_name in latest:
            logger.warning("%s imported twice in one batch, keeping the last document", result.course_name)
        latest[result.course_name] = result.records

    new_records = [r for records in latest.values() for r in records]
    if not new_records:
        return ImportResult(records=list(existing), parsed=parsed)

    replaced = [name for name in distinct_courses(existing) if name in latest]
    for name in replaced:
        logger.info("replacing the loaded sessions of %s", name)

    kept = [r for r in existing if r.course_name not in latest]
    return ImportResult(
        records=merge(kept, new_records),
        parsed=parsed,
        added=len(new_records),
        replaced=replaced,
    )
