"""Listing preprocessor – reads candidates out of a listing page and writes
visibility decisions back into it.

The listing is a ``#topic_list`` table whose ``tbody`` rows each carry a
``.title`` cell.  Row handles are the row's position in ``tbody`` (as a
string), so ``apply_visibility`` can find the same rows again.
"""

from __future__ import annotations

import re
from typing import Hashable, Mapping

from bs4 import BeautifulSoup, Tag

from titlefilter.pipeline.orchestrator import Candidate

TABLE_SELECTOR = "#topic_list"
TITLE_SELECTOR = ".title"

_WHITESPACE = re.compile(r"\s+")


class MissingElementsError(LookupError):
    """The markup does not contain the listing table."""


def _listing_rows(soup: BeautifulSoup) -> list[Tag]:
    table = soup.select_one(TABLE_SELECTOR)
    if table is None:
        raise MissingElementsError(f"No element matches {TABLE_SELECTOR!r}")
    tbody = table.find("tbody")
    if tbody is None:
        raise MissingElementsError(f"{TABLE_SELECTOR!r} has no <tbody>")
    return tbody.find_all("tr", recursive=False)


def extract_candidates(raw_html: str) -> list[Candidate]:
    """Return one ``Candidate`` per listing row that has a title cell."""
    soup = BeautifulSoup(raw_html, "html.parser")

    candidates: list[Candidate] = []
    for index, row in enumerate(_listing_rows(soup)):
        cell = row.select_one(TITLE_SELECTOR)
        if cell is None:
            continue
        title = _WHITESPACE.sub(" ", cell.get_text()).strip()
        candidates.append(Candidate(handle=str(index), title=title))
    return candidates


def _set_display(row: Tag, visible: bool) -> None:
    declarations = [
        decl.strip()
        for decl in row.get("style", "").split(";")
        if decl.strip() and not decl.strip().lower().startswith("display")
    ]
    if not visible:
        declarations.append("display: none")

    if declarations:
        row["style"] = "; ".join(declarations)
    elif row.has_attr("style"):
        del row["style"]


def apply_visibility(raw_html: str, results: Mapping[Hashable, bool]) -> str:
    """Hide or show listing rows according to *results*.

    Rows keep their document order; rows without an entry are untouched.
    """
    soup = BeautifulSoup(raw_html, "html.parser")

    for index, row in enumerate(_listing_rows(soup)):
        visible = results.get(str(index))
        if visible is not None:
            _set_display(row, visible)

    return str(soup)
