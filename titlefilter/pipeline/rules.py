"""Stage 2 – Rule parsing.

Grammar
-------
* ``;`` or ``；`` separates AND-groups.
* ``|`` separates OR-alternatives inside a plain group.
* ``/body/`` (at least one character of body) is a case-insensitive regex.
* Whitespace around separators and around the whole rule is ignored.

An empty rule parses to ``MATCH_ALL``.  Parsing never raises: a regex that
fails to compile is kept with ``compiled=None`` and later matched as a
literal.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Union

_log = logging.getLogger("titlefilter.rules")

AND_SEPARATORS = re.compile(r"[;；]")
OR_SEPARATOR = "|"
REGEX_DELIMITER = "/"


@dataclass(frozen=True)
class PlainTerm:
    """Literal alternatives joined by OR.  No alternatives matches nothing."""

    alternatives: tuple[str, ...]


@dataclass(frozen=True)
class RegexTerm:
    body: str
    compiled: re.Pattern[str] | None = field(default=None, compare=False)

    @property
    def valid(self) -> bool:
        return self.compiled is not None


Term = Union[PlainTerm, RegexTerm]


@dataclass(frozen=True)
class AndGroup:
    source: str
    terms: tuple[Term, ...]


@dataclass(frozen=True)
class Rule:
    groups: tuple[AndGroup, ...] = ()

    @property
    def match_all(self) -> bool:
        return not self.groups

    @property
    def fallback_count(self) -> int:
        """Number of regex terms that will be matched as literals."""
        return sum(
            1
            for group in self.groups
            for term in group.terms
            if isinstance(term, RegexTerm) and not term.valid
        )


MATCH_ALL = Rule()


def _parse_term(segment: str) -> Term:
    if (
        len(segment) > 2
        and segment.startswith(REGEX_DELIMITER)
        and segment.endswith(REGEX_DELIMITER)
    ):
        body = segment[1:-1]
        try:
            return RegexTerm(body, re.compile(body, re.IGNORECASE))
        except re.error as exc:
            _log.warning("Invalid regex %r (%s), matching as literal text", body, exc)
            return RegexTerm(body, None)

    parts = (part.strip() for part in segment.split(OR_SEPARATOR))
    return PlainTerm(tuple(part for part in parts if part))


def parse_rule(raw: str | None) -> Rule:
    """Parse a raw rule string into a ``Rule``."""
    if not raw or not raw.strip():
        return MATCH_ALL

    groups: list[AndGroup] = []
    for segment in AND_SEPARATORS.split(raw):
        segment = segment.strip()
        if segment:
            groups.append(AndGroup(segment, (_parse_term(segment),)))

    if not groups:
        return MATCH_ALL
    return Rule(tuple(groups))


def normalize_rule_display(raw: str) -> str:
    """Rewrite ASCII semicolons as full-width ones for echoing to the user."""
    return raw.replace(";", "；")


def describe_rule(rule: Rule) -> dict[str, Any]:
    """Render *rule* as plain data (used by ``POST /parse``)."""
    groups = []
    for group in rule.groups:
        terms = []
        for term in group.terms:
            if isinstance(term, RegexTerm):
                terms.append({"kind": "regex", "pattern": term.body, "valid": term.valid})
            else:
                terms.append({"kind": "plain", "alternatives": list(term.alternatives)})
        groups.append({"source": group.source, "terms": terms})
    return {"match_all": rule.match_all, "groups": groups}
