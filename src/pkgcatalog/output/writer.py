"""JSON/text artifact writer with plain, atomic and change-gated modes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Iterable

logger = logging.getLogger(__name__)


class WriteMode(str, Enum):
    PLAIN = "plain"
    ATOMIC = "atomic"
    IF_CHANGED = "if-changed"


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    """One line of the human-readable build manifest."""

    artifact: str
    count: int


def serialize_json(data: object) -> str:
    """Pretty-print ``data`` the same way on every run, with a trailing newline."""

    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


def _write_plain(path: Path, payload: str) -> None:
    path.write_text(payload, encoding="utf-8")


def _write_atomic(path: Path, payload: str) -> None:
    handle = tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=str(path.parent),
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    )
    temp_path = Path(handle.name)
    try:
        with handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_path, path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


def _is_unchanged(path: Path, payload: str) -> bool:
    if not path.is_file():
        return False
    return path.read_bytes() == payload.encode("utf-8")


def write_text(path: str | Path, payload: str, mode: WriteMode = WriteMode.PLAIN) -> bool:
    """Write ``payload`` to ``path``; return False when a change-gated write was skipped."""

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    if mode is WriteMode.IF_CHANGED:
        if _is_unchanged(target, payload):
            logger.debug("Unchanged, skipped write: %s", target)
            return False
        _write_atomic(target, payload)
    elif mode is WriteMode.ATOMIC:
        _write_atomic(target, payload)
    else:
        _write_plain(target, payload)

    logger.debug("Wrote %s (%s)", target, mode.value)
    return True


def write_json(path: str | Path, data: object, mode: WriteMode = WriteMode.PLAIN) -> bool:
    """Serialize ``data`` as JSON and write it with the requested mode."""

    return write_text(path, serialize_json(data), mode)


def render_manifest(entries: Iterable[ManifestEntry]) -> str:
    """Plain-text summary of artifact counts, one artifact per line."""

    rows = sorted(entries, key=lambda entry: entry.artifact)
    width = max((len(entry.artifact) for entry in rows), default=0)
    lines = ["# Package catalog build manifest", ""]
    for entry in rows:
        lines.append(f"{entry.artifact.ljust(width)}  {entry.count}")
    lines.append("")
    lines.append(f"artifacts: {len(rows)}")
    return "\n".join(lines) + "\n"
