"""Pipeline orchestrator – one filtering pass over a list of candidates.

The rule is parsed once per pass, then every candidate is evaluated
independently.  Results come back as a mapping whose iteration order is the
candidates' order, so callers can write visibility back row by row.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Hashable, Iterable, Protocol

from titlefilter.config import settings
from titlefilter.logger import log_pass
from titlefilter.pipeline.evaluator import RuleEvaluator, VariantCache
from titlefilter.pipeline.rules import parse_rule

_log = logging.getLogger("titlefilter.orchestrator")


class CandidateLike(Protocol):
    handle: Hashable
    title: str


@dataclass(frozen=True)
class Candidate:
    """A title plus the opaque handle of the row it belongs to."""

    handle: Hashable
    title: str


@dataclass(frozen=True)
class PassSummary:
    total: int
    visible: int
    group_count: int
    fallback_count: int
    duration_ms: float

    @property
    def hidden(self) -> int:
        return self.total - self.visible


_default_evaluator: RuleEvaluator | None = None


def _get_evaluator() -> RuleEvaluator:
    global _default_evaluator
    if _default_evaluator is None:
        _default_evaluator = RuleEvaluator()
    return _default_evaluator


def filter_all(
    raw_rule: str | None,
    candidates: Iterable[CandidateLike],
    evaluator: RuleEvaluator | None = None,
) -> dict[Hashable, bool]:
    """Return ``{handle: visible}`` for every candidate, in candidate order.

    Raises ``ValueError`` if two candidates share a handle.
    """
    results, _ = _run(raw_rule, candidates, evaluator)
    return results


def run_pass(
    raw_rule: str | None,
    candidates: Iterable[CandidateLike],
    evaluator: RuleEvaluator | None = None,
) -> tuple[dict[Hashable, bool], PassSummary]:
    """Like ``filter_all`` but also returns and logs a ``PassSummary``."""
    results, summary = _run(raw_rule, candidates, evaluator)
    log_pass(
        rule=raw_rule or "",
        group_count=summary.group_count,
        fallback_count=summary.fallback_count,
        total=summary.total,
        visible=summary.visible,
        duration_ms=summary.duration_ms,
    )
    return results, summary


def _run(
    raw_rule: str | None,
    candidates: Iterable[CandidateLike],
    evaluator: RuleEvaluator | None,
) -> tuple[dict[Hashable, bool], PassSummary]:
    started = time.perf_counter()
    rule = parse_rule(raw_rule)
    # Match-all never touches the converter.
    if not rule.match_all and evaluator is None:
        evaluator = _get_evaluator()
    cache: VariantCache | None = {} if settings.variant_cache else None

    results: dict[Hashable, bool] = {}
    for candidate in candidates:
        if candidate.handle in results:
            raise ValueError(f"Duplicate candidate handle: {candidate.handle!r}")
        if rule.match_all:
            results[candidate.handle] = True
        else:
            results[candidate.handle] = evaluator.matches(rule, candidate.title, cache)

    visible = sum(1 for shown in results.values() if shown)
    summary = PassSummary(
        total=len(results),
        visible=visible,
        group_count=len(rule.groups),
        fallback_count=rule.fallback_count,
        duration_ms=(time.perf_counter() - started) * 1000,
    )
    _log.debug(
        "Filtered %d candidates with %d groups: %d visible",
        summary.total, summary.group_count, summary.visible,
    )
    return results, summary
