"""End-to-end matching with the real OpenCC dictionaries."""

from __future__ import annotations

import pytest

from titlefilter.pipeline.evaluator import RuleEvaluator
from titlefilter.pipeline.normalizer import OpenCCConverter, VariantNormalizer
from titlefilter.pipeline.orchestrator import Candidate, filter_all


@pytest.fixture(scope="module")
def opencc_evaluator() -> RuleEvaluator:
    return RuleEvaluator(VariantNormalizer(OpenCCConverter("s2twp", "tw2s")))


def test_conversion_directions():
    conv = OpenCCConverter("s2twp", "tw2s")
    assert conv.to_variant_a("简体") == "簡體"
    assert conv.to_variant_b("繁體") == "繁体"


def test_traditional_term_finds_simplified_title(opencc_evaluator):
    candidates = [Candidate("a", "[繁体字幕] Show 01"), Candidate("b", "[Raw] Show 01")]
    assert filter_all("繁體", candidates, opencc_evaluator) == {"a": True, "b": False}


def test_simplified_term_finds_traditional_title(opencc_evaluator):
    candidates = [Candidate("a", "[簡體字幕] Show 01"), Candidate("b", "[繁體字幕] Show 01")]
    assert filter_all("简体", candidates, opencc_evaluator) == {"a": True, "b": False}


def test_help_text_example(opencc_evaluator):
    candidates = [
        Candidate("1", "[简体字幕] Show HEVC 01"),
        Candidate("2", "[簡體字幕] Show x265 01"),
        Candidate("3", "[简体字幕] Show AVC 01"),
    ]
    assert filter_all("HEVC|x265；简体", candidates, opencc_evaluator) == {
        "1": True, "2": True, "3": False,
    }
