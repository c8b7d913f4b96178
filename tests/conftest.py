"""Shared fixtures.

A tiny table-driven converter stands in for OpenCC so the unit tests run
without loading conversion dictionaries.
"""

from __future__ import annotations

import os
import tempfile

# Keep the pass log out of the working tree
os.environ["LOG_PATH"] = os.path.join(tempfile.gettempdir(), "titlefilter-test.log")

import pytest

from titlefilter.pipeline.evaluator import RuleEvaluator
from titlefilter.pipeline.normalizer import VariantNormalizer

_SIMPLIFIED_TO_TRADITIONAL = {
    "简": "簡",
    "体": "體",
    "发": "發",
    "动": "動",
    "画": "畫",
    "语": "語",
    "国": "國",
}
_TRADITIONAL_TO_SIMPLIFIED = {t: s for s, t in _SIMPLIFIED_TO_TRADITIONAL.items()}


class TableConverter:
    """Character-table converter covering just the characters used in tests."""

    def __init__(self) -> None:
        self.calls = 0

    def to_variant_a(self, text: str) -> str:
        self.calls += 1
        return "".join(_SIMPLIFIED_TO_TRADITIONAL.get(ch, ch) for ch in text)

    def to_variant_b(self, text: str) -> str:
        self.calls += 1
        return "".join(_TRADITIONAL_TO_SIMPLIFIED.get(ch, ch) for ch in text)


@pytest.fixture
def converter() -> TableConverter:
    return TableConverter()


@pytest.fixture
def evaluator(converter: TableConverter) -> RuleEvaluator:
    return RuleEvaluator(VariantNormalizer(converter))
