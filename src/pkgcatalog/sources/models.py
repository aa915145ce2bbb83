"""Canonical data structures shared by all source loaders."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class RecordKind(str, Enum):
    """Catalog domains; each one is aggregated independently."""

    PACKAGES = "packages"
    ADDONS = "addons"
    BUNDLES = "bundles"

    @property
    def identity_keys(self) -> tuple[str, ...]:
        """Keys an exported array's objects must carry to count as this kind."""

        if self is RecordKind.BUNDLES:
            return ("slug",)
        return ("id", "service", "name")

    @property
    def identity_field(self) -> str:
        return "slug" if self is RecordKind.BUNDLES else "id"


@dataclass(slots=True)
class ModuleDocument:
    """Records pulled out of one module or JSON source file."""

    path: Path
    export_name: str | None
    records: list[dict[str, object]] = field(default_factory=list)


@dataclass(slots=True)
class MarkdownDocument:
    """Metadata, labeled header fields and verbatim body of one markdown file.

    ``frontmatter`` holds the merged metadata: path defaults, header labels
    mapped to record fields, then the frontmatter block itself.
    """

    path: Path
    frontmatter: dict[str, object] = field(default_factory=dict)
    labels: dict[str, str] = field(default_factory=dict)
    body: str = ""
    missing_keys: list[str] = field(default_factory=list)

    def as_record(self) -> dict[str, object]:
        """Merged metadata as a record, without the compiled body."""

        return dict(self.frontmatter)


@dataclass(slots=True)
class LoadWarning:
    """A source file that was skipped without failing the build."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


SourceDocument = ModuleDocument | MarkdownDocument
