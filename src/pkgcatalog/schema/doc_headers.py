"""Lint governance documents that declare a labeled header block."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import re
from typing import Iterable

from pkgcatalog.sources.loaders.markdown_loader import parse_labeled_header
from pkgcatalog.sources.reading import read_source_text

REQUIRED_LABELS: tuple[str, ...] = (
    "Official Title",
    "Domain",
    "File Name",
    "Main Part",
    "Qualifier",
    "Date",
)
ALLOWED_QUALIFIERS = frozenset({"Plan", "Playbook", "Checklist", "Standard", "Spec", "Guide", "Readme", "README"})
EXPECTED_DOMAIN = "packages"

_FILE_NAME_RE = re.compile(r"^(.+)_([A-Za-z]+)_(\d{4}-\d{2}-\d{2}|Evergreen)\.md$")


@dataclass(frozen=True, slots=True)
class HeaderProblem:
    file: str
    severity: str
    message: str

    def __str__(self) -> str:
        return f"[{self.severity}] {self.file}: {self.message}"


def _name_matches(file_name: str, qualifier: str | None, date: str | None) -> bool:
    if file_name == "README.md":
        return True
    match = _FILE_NAME_RE.match(file_name)
    if match is None:
        return False
    if not qualifier or not date:
        return True
    _, name_qualifier, name_date = match.groups()
    if name_qualifier.casefold() == qualifier.casefold():
        return name_date == date
    return True


def check_document(path: Path, root: Path) -> list[HeaderProblem]:
    """Return every header problem found in one document."""

    try:
        relative = path.relative_to(root).as_posix()
    except ValueError:
        relative = path.as_posix()

    labels = parse_labeled_header(read_source_text(path))
    problems: list[HeaderProblem] = []

    for label in REQUIRED_LABELS:
        if label not in labels:
            problems.append(HeaderProblem(relative, "error", f'Missing header field: "{label}"'))

    domain = labels.get("Domain")
    if domain and domain.casefold() != EXPECTED_DOMAIN:
        problems.append(HeaderProblem(relative, "error", f'Domain must be "{EXPECTED_DOMAIN}" (got "{domain}")'))

    declared_name = labels.get("File Name")
    if declared_name and declared_name != path.name:
        problems.append(
            HeaderProblem(
                relative,
                "error",
                f'Header "File Name" ({declared_name}) does not match actual ({path.name})',
            )
        )

    qualifier = labels.get("Qualifier")
    if qualifier and qualifier not in ALLOWED_QUALIFIERS:
        problems.append(HeaderProblem(relative, "error", f'Qualifier "{qualifier}" not allowed'))

    if not _name_matches(path.name, qualifier, labels.get("Date")):
        problems.append(
            HeaderProblem(
                relative,
                "error",
                f'File name should match "<kebab>_<Qualifier>_<YYYY-MM-DD|Evergreen>.md" (got "{path.name}")',
            )
        )

    if "Spotlight Comments" not in labels:
        problems.append(HeaderProblem(relative, "warn", 'Missing "Spotlight Comments" section'))
    if "Summary" not in labels:
        problems.append(HeaderProblem(relative, "warn", 'Missing "Summary" section'))

    return problems


def check_document_headers(paths: Iterable[Path], root: Path) -> list[HeaderProblem]:
    """Check every document and return all problems in path order."""

    problems: list[HeaderProblem] = []
    for path in paths:
        problems.extend(check_document(path, root))
    return problems


def collect_documents(root: Path) -> list[Path]:
    """Markdown files under ``root``; ``_generated`` directories are skipped."""

    return sorted(
        path
        for path in root.rglob("*")
        if path.is_file() and path.suffix.lower() == ".md" and "_generated" not in path.relative_to(root).parts
    )
