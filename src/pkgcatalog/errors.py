"""Fatal error taxonomy for catalog builds."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pkgcatalog.schema.validator import ValidationIssue


class CatalogError(Exception):
    """Base class for every fatal build failure."""


@dataclass(slots=True)
class SourceConfigurationError(CatalogError):
    """Required sources are missing before any work can start."""

    message: str
    patterns: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        if not self.patterns:
            return self.message
        return f"{self.message}: {', '.join(self.patterns)}"


@dataclass(slots=True)
class SourceReadError(CatalogError):
    """A source file could not be read, parsed or compiled."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


@dataclass(slots=True)
class SchemaValidationError(CatalogError):
    """Every schema violation collected during one run."""

    issues: list["ValidationIssue"]

    def __str__(self) -> str:
        lines = [f"{len(self.issues)} validation error(s):"]
        lines.extend(f"  - {issue}" for issue in self.issues)
        return "\n".join(lines)


@dataclass(slots=True)
class DuplicateIdentityError(CatalogError):
    """One or more identifiers were defined more than once in a domain."""

    duplicates: dict[str, list[str]]

    def __str__(self) -> str:
        parts = [
            f"duplicate {kind} ids ({len(ids)}): {', '.join(ids)}"
            for kind, ids in self.duplicates.items()
            if ids
        ]
        return "; ".join(parts)
