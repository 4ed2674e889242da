"""
Markup access for the document extractor.

The extractor only talks to the small `DocumentSource` interface below, so a
different HTML parser can be plugged in without touching the parsing rules.
`SoupDocument` is the BeautifulSoup implementation used everywhere.
"""

from __future__ import annotations

import re
from typing import Any, List, Optional, Protocol

from bs4 import BeautifulSoup, Tag


_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


class DocumentSource(Protocol):
    def find_title(self) -> Optional[str]:
        ...

    def find_table(self, table_id: str) -> Optional[Any]:
        ...

    def rows(self, table: Any) -> List[Any]:
        ...

    def cells(self, row: Any) -> List[str]:
        ...


class SoupDocument:
    """
    DocumentSource backed by BeautifulSoup's built-in html.parser.
    """

    def __init__(self, html: str) -> None:
        self._soup = BeautifulSoup(html, "html.parser")

    def find_title(self) -> Optional[str]:
        # First title-level element only
        h1 = self._soup.find("h1")
        if not h1:
            return None
        return h1.get_text(" ", strip=True)

    def find_table(self, table_id: str) -> Optional[Tag]:
        return self._soup.find(id=table_id)

    def rows(self, table: Tag) -> List[Tag]:
        """
        Body rows of the table.

        html.parser does not insert an implicit <tbody>, so fall back to all
        rows outside <thead> when the markup has none. Row positions then
        match what a browser would number.
        """
        bodies = table.find_all("tbody")
        if bodies:
            out: List[Tag] = []
            for body in bodies:
                out.extend(body.find_all("tr"))
            return out
        return [tr for tr in table.find_all("tr") if tr.find_parent("thead") is None]

    def cells(self, row: Tag) -> List[str]:
        return [td.get_text(" ", strip=True) for td in row.find_all("td", recursive=False)]
