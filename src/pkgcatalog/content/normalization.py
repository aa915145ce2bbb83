"""Text and date normalization helpers used by the narrative compiler."""

from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path
import re

_WHITESPACE_RE = re.compile(r"\s+")
_ISO_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

EXCERPT_LIMIT = 160
_EXCERPT_MIN_BREAK = 80


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def count_words(text: str) -> int:
    normalized = normalize_whitespace(text)
    if not normalized:
        return 0
    return len(normalized.split(" "))


def trim_excerpt(text: str, limit: int = EXCERPT_LIMIT) -> str:
    """Cut at the last space before ``limit`` when that keeps enough text, then add an ellipsis."""

    if not text or len(text) <= limit:
        return text
    cut = text[:limit]
    last_space = cut.rfind(" ")
    head = cut[:last_space] if last_space > _EXCERPT_MIN_BREAK else cut
    return f"{head}…"


def to_yyyymmdd(value: object) -> str | None:
    """Normalize a frontmatter date to ``YYYY-MM-DD`` in UTC; ``None`` when unparseable."""

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        return None

    raw = value.strip()
    if not raw:
        return None
    if _ISO_DAY_RE.match(raw):
        try:
            return date.fromisoformat(raw).isoformat()
        except ValueError:
            return None
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    return to_yyyymmdd(parsed)


def mtime_yyyymmdd(path: Path) -> str:
    modified = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    return modified.date().isoformat()
