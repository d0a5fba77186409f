"""Encoding helpers for JSON and timestamp columns."""

import json
from datetime import UTC, datetime
from typing import Any

from src.config import get_logger

logger = get_logger(__name__)


def dump_json(value: Any) -> str:
    """Compact JSON text; ``None`` is stored as an empty object."""
    return json.dumps({} if value is None else value, separators=(",", ":"))


def load_json(raw: str | None, default: Any = None) -> Any:
    """Decode a JSON column; empty or corrupt text yields ``default`` (or ``{}``)."""
    fallback = {} if default is None else default
    if not raw:
        return fallback
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("json_column_unreadable", preview=raw[:80])
        return fallback


def parse_timestamp(raw: str | None) -> datetime | None:
    """ISO-8601 text, including SQLite's ``datetime('now')`` format."""
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw)
    except (TypeError, ValueError):
        return None


def now_iso() -> str:
    return datetime.now(UTC).isoformat()
