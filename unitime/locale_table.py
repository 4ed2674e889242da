"""
Static locale tables.

The exported timetables are written in Italian ("lunedì 16 febbraio 2026"),
while everything shown to the user uses English labels.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


# Italian month token -> zero-based month index
ITALIAN_MONTHS = {
    "gennaio": 0,
    "febbraio": 1,
    "marzo": 2,
    "aprile": 3,
    "maggio": 4,
    "giugno": 5,
    "luglio": 6,
    "agosto": 7,
    "settembre": 8,
    "ottobre": 9,
    "novembre": 10,
    "dicembre": 11,
}

# Indexed by date.weekday() (Monday = 0)
WEEKDAYS_EN = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

MONTHS_EN = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def month_index(token: str) -> Optional[int]:
    """
    Return the zero-based month index for an Italian month token, or None.
    """
    return ITALIAN_MONTHS.get(token.strip().lower())


# ---------------------------------------------------------------------------
# Display palette
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PaletteColor:
    name: str
    hex: str


COURSE_COLORS = (
    PaletteColor("indigo", "#4F46E5"),
    PaletteColor("emerald", "#10B981"),
    PaletteColor("rose", "#F43F5E"),
    PaletteColor("amber", "#F59E0B"),
    PaletteColor("violet", "#8B5CF6"),
    PaletteColor("cyan", "#06B6D4"),
)


def palette_color(color_index: int) -> PaletteColor:
    # More courses than colours: wrap around
    return COURSE_COLORS[color_index % len(COURSE_COLORS)]
