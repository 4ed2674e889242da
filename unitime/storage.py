"""
Persistent storage for the loaded schedule.

This module manages the file:

    data/schedule.json

The file holds the whole record collection as a JSON list of flat objects
(camelCase keys, fullDate as an ISO date). The ScheduleStore object owns the
in-memory collection and its file mirror: every mutation installs a complete
new collection and saves it immediately.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from unitime.model import ScheduleRecord


logger = logging.getLogger(__name__)


def _default_store_path() -> Path:
    """
    Return the default path of schedule.json inside the package.

    Using a function instead of a constant makes testing easier,
    because tests can override the path.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data" / "schedule.json"


def load_records(path: str | Path | None = None) -> List[ScheduleRecord]:
    """
    Load the record collection.

    Returns an empty list if the file does not exist or is invalid.
    Entries that cannot be revived are skipped.
    """
    store_path = Path(path) if path is not None else _default_store_path()

    # First run: nothing persisted yet
    if not store_path.exists():
        return []

    try:
        data = json.loads(store_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("could not read %s: %s", store_path, e)
        return []

    if not isinstance(data, list):
        logger.warning("ignoring %s: expected a JSON list", store_path)
        return []

    out: List[ScheduleRecord] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        try:
            out.append(ScheduleRecord.from_dict(item))
        except (KeyError, ValueError, TypeError) as e:
            logger.warning("skipping stored record %r: %s", item.get("id"), e)
    return out


def save_records(records: Iterable[ScheduleRecord], path: str | Path | None = None) -> None:
    """
    Save the record collection, in order.

    An empty collection removes the file, so a cleared schedule looks
    exactly like a first run.
    """
    store_path = Path(path) if path is not None else _default_store_path()
    payload = [r.to_dict() for r in records]

    if not payload:
        store_path.unlink(missing_ok=True)
        return

    store_path.parent.mkdir(parents=True, exist_ok=True)
    store_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


class ScheduleStore:
    """
    Owner of the record collection. The only writer of the store file.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else _default_store_path()
        self._records: Tuple[ScheduleRecord, ...] = tuple(load_records(self.path))

    @property
    def records(self) -> Tuple[ScheduleRecord, ...]:
        return self._records

    def replace(self, records: Sequence[ScheduleRecord]) -> None:
        self._records = tuple(records)
        save_records(self._records, self.path)

    def __len__(self) -> int:
        return len(self._records)
