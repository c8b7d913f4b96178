"""Structured JSON logger for filtering passes.

Writes one JSON object per line to the configured log file.
Titles are *never* logged; only the rule and the pass counts are.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from titlefilter.config import settings

_logger: logging.Logger | None = None


def _get_logger() -> logging.Logger:
    """Lazily initialise the file-backed JSON logger."""
    global _logger
    if _logger is not None:
        return _logger

    log_path = Path(settings.log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    _logger = logging.getLogger("titlefilter.passes")
    _logger.setLevel(logging.INFO)
    _logger.propagate = False

    if not _logger.handlers:
        handler = logging.FileHandler(str(log_path), encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(message)s"))
        _logger.addHandler(handler)

    return _logger


def log_pass(
    rule: str,
    group_count: int,
    fallback_count: int,
    total: int,
    visible: int,
    duration_ms: float,
) -> None:
    """Append a structured JSON entry for one filtering pass."""
    entry: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "rule": rule,
        "group_count": group_count,
        "regex_fallbacks": fallback_count,
        "total": total,
        "visible": visible,
        "hidden": total - visible,
        "duration_ms": round(duration_ms, 3),
    }
    _get_logger().info(json.dumps(entry, ensure_ascii=False))
