"""Pydantic v2 request/response models for the title filter service."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


# ── Request Models ──────────────────────────────────────────────────────────

class CandidateInput(BaseModel):
    """A single listing row: an opaque handle plus its title text."""

    handle: str = Field(..., description="Caller-chosen row identifier")
    title: str = Field(..., description="Title text to filter")


class FilterRequest(BaseModel):
    """Filter a list of candidates with one rule string.

    An empty ``rule`` shows every candidate.
    """

    rule: str = Field(default="", description="Raw filter rule as typed by the user")
    candidates: list[CandidateInput] = Field(default_factory=list)

    @field_validator("candidates")
    @classmethod
    def _unique_handles(cls, candidates: list[CandidateInput]) -> list[CandidateInput]:
        seen: set[str] = set()
        for candidate in candidates:
            if candidate.handle in seen:
                raise ValueError(f"duplicate handle: {candidate.handle!r}")
            seen.add(candidate.handle)
        return candidates


class FilterHtmlRequest(BaseModel):
    """Filter the rows of a raw listing page."""

    rule: str = Field(default="")
    html: str = Field(..., min_length=1, description="Listing page markup")


class ParseRequest(BaseModel):
    rule: str = Field(default="")


# ── Response Models ─────────────────────────────────────────────────────────

class CandidateResult(BaseModel):
    """Visibility decision for one candidate."""

    handle: str
    visible: bool


class FilterResponse(BaseModel):
    """Results in the same order as the request's candidates."""

    rule: str
    display_rule: str
    results: list[CandidateResult]
    total: int
    visible_count: int


class FilterHtmlResponse(BaseModel):
    html: str
    total: int
    visible_count: int


class TermDescription(BaseModel):
    kind: str  # "plain" or "regex"
    alternatives: list[str] | None = None
    pattern: str | None = None
    valid: bool | None = None


class GroupDescription(BaseModel):
    source: str
    terms: list[TermDescription]


class ParseResponse(BaseModel):
    match_all: bool
    groups: list[GroupDescription]


# ── Health ──────────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    """Response from /health endpoint."""

    status: str
    converter_loaded: bool
    variant_a_config: str
    variant_b_config: str
    uptime_seconds: float
