"""Listing page extraction and visibility write-back."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from titlefilter.pipeline.orchestrator import Candidate, filter_all
from titlefilter.pipeline.preprocessor import (
    MissingElementsError,
    apply_visibility,
    extract_candidates,
)

LISTING_HTML = """
<html>
<body>
  <div class="quick_search"><input id="keyword" /></div>
  <table id="topic_list">
    <thead><tr><th>Title</th></tr></thead>
    <tbody>
      <tr class="even">
        <td class="title">
          <span class="tag"><a href="/team/1">動漫國字幕組</a></span>
          <a href="/view/1">[简体] Show   01 1080p HEVC</a>
        </td>
      </tr>
      <tr class="odd" style="color: red; display: none">
        <td class="title"><a href="/view/2">[繁體] Show 02 720p</a></td>
      </tr>
      <tr class="ad"><td colspan="3">sponsored</td></tr>
      <tr class="even">
        <td class="title"><a href="/view/3">[Raw] Show 03 1080p</a></td>
      </tr>
    </tbody>
  </table>
</body>
</html>
"""


def _row_styles(html: str) -> list[str | None]:
    soup = BeautifulSoup(html, "html.parser")
    return [row.get("style") for row in soup.select("#topic_list tbody tr")]


def test_extract_candidates_reads_title_cells():
    candidates = extract_candidates(LISTING_HTML)

    assert candidates == [
        Candidate("0", "動漫國字幕組 [简体] Show 01 1080p HEVC"),
        Candidate("1", "[繁體] Show 02 720p"),
        Candidate("3", "[Raw] Show 03 1080p"),
    ]


def test_apply_visibility_hides_and_restores_rows():
    html = apply_visibility(LISTING_HTML, {"0": False, "1": True, "3": True})

    assert _row_styles(html) == ["display: none", "color: red", None, None]
    assert "sponsored" in html
    assert 'id="keyword"' in html


def test_rows_stay_in_document_order(evaluator):
    candidates = extract_candidates(LISTING_HTML)
    results = filter_all("1080p", candidates, evaluator)
    html = apply_visibility(LISTING_HTML, results)

    soup = BeautifulSoup(html, "html.parser")
    titles = [cell.get_text(" ", strip=True) for cell in soup.select("#topic_list .title")]
    assert [t.split()[-1] for t in titles] == ["HEVC", "720p", "1080p"]
    assert _row_styles(html) == [None, "color: red; display: none", None, None]


@pytest.mark.parametrize("html", [
    "<html><body><p>nothing here</p></body></html>",
    '<table id="topic_list"><tr><td class="title">x</td></tr></table>',
])
def test_missing_listing_raises(html):
    with pytest.raises(MissingElementsError):
        extract_candidates(html)
    with pytest.raises(MissingElementsError):
        apply_visibility(html, {})
