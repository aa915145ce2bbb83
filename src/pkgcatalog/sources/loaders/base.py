"""Shared loader contract for per-format source readers."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from pkgcatalog.sources.models import LoadWarning, RecordKind, SourceDocument


@runtime_checkable
class RecordLoader(Protocol):
    """Protocol that every source loader must implement."""

    def supports(self, path: Path) -> bool:
        """Return True when this loader can read the given file."""

    def load(self, path: Path, kind: RecordKind) -> SourceDocument | LoadWarning:
        """Load records for ``kind``, or explain why the file was skipped."""
