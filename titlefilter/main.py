"""FastAPI application – title filter microservice.

Endpoints
---------
POST /filter       – filter a list of titles with one rule string
POST /filter-html  – filter the rows of a raw listing page
POST /parse        – show how a rule string is understood
GET  /health       – converter status and service info
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException

from titlefilter.config import settings
from titlefilter.models import (
    CandidateResult,
    FilterHtmlRequest,
    FilterHtmlResponse,
    FilterRequest,
    FilterResponse,
    HealthResponse,
    ParseRequest,
    ParseResponse,
)
from titlefilter.pipeline import normalizer
from titlefilter.pipeline.normalizer import ConversionError
from titlefilter.pipeline.orchestrator import run_pass
from titlefilter.pipeline.preprocessor import (
    MissingElementsError,
    apply_visibility,
    extract_candidates,
)
from titlefilter.pipeline.rules import describe_rule, normalize_rule_display, parse_rule

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
_log = logging.getLogger("titlefilter.main")

# ── Lifespan (converter loading at startup) ─────────────────────────────────

_start_time: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the OpenCC dictionaries once at startup."""
    global _start_time
    _start_time = time.time()

    normalizer.load_model()
    _log.info("Title filter service started")

    yield

    _log.info("Title filter service stopped")


# ── Application ─────────────────────────────────────────────────────────────

app = FastAPI(
    title="Title Filter",
    version="1.0.0",
    lifespan=lifespan,
)


@app.post("/filter", response_model=FilterResponse)
def filter_titles(request: FilterRequest) -> FilterResponse:
    """Return a visibility decision per candidate, in request order."""
    try:
        results, summary = run_pass(request.rule, request.candidates)
    except ConversionError as exc:
        _log.error("Conversion failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return FilterResponse(
        rule=request.rule,
        display_rule=normalize_rule_display(request.rule),
        results=[
            CandidateResult(handle=handle, visible=visible)
            for handle, visible in results.items()
        ],
        total=summary.total,
        visible_count=summary.visible,
    )


@app.post("/filter-html", response_model=FilterHtmlResponse)
def filter_html(request: FilterHtmlRequest) -> FilterHtmlResponse:
    """Hide the listing rows that do not match the rule."""
    try:
        candidates = extract_candidates(request.html)
        results, summary = run_pass(request.rule, candidates)
    except MissingElementsError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ConversionError as exc:
        _log.error("Conversion failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return FilterHtmlResponse(
        html=apply_visibility(request.html, results),
        total=summary.total,
        visible_count=summary.visible,
    )


@app.post("/parse", response_model=ParseResponse)
def parse(request: ParseRequest) -> ParseResponse:
    return ParseResponse(**describe_rule(parse_rule(request.rule)))


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Return service health and converter-load status."""
    return HealthResponse(
        status="ok",
        converter_loaded=normalizer.is_loaded(),
        variant_a_config=settings.variant_a_config,
        variant_b_config=settings.variant_b_config,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
