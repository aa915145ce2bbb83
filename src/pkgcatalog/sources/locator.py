"""Glob expansion over the content tree."""

from __future__ import annotations

import glob
import logging
from pathlib import Path
import re
from typing import Iterable

from pkgcatalog.errors import SourceConfigurationError

logger = logging.getLogger(__name__)

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def split_globs(raw: str | None) -> tuple[str, ...]:
    """Parse a comma-separated ``--globs`` value; blank entries are dropped."""

    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives, which :mod:`glob` does not understand."""

    match = _BRACE_RE.search(pattern)
    if match is None:
        return [pattern]

    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def _match_pattern(pattern: str, root: Path) -> set[Path]:
    matched: set[Path] = set()
    for variant in expand_braces(pattern):
        if Path(variant).is_absolute():
            hits = [Path(hit) for hit in glob.glob(variant, recursive=True)]
        else:
            # root_dir keeps wildcard characters in the root literal
            hits = [root / hit for hit in glob.glob(variant, root_dir=root, recursive=True)]
        for path in hits:
            if path.is_file():
                matched.add(path.resolve())
    return matched


def locate_sources(
    patterns: Iterable[str],
    *,
    root: str | Path = ".",
    required: bool = True,
) -> list[Path]:
    """Return deduplicated, lexically sorted absolute paths matching ``patterns``.

    Dotfiles are skipped by :mod:`glob`. When ``required`` is set and nothing
    matches at all, the error names every pattern that matched no file.
    """

    base = Path(root)
    if not base.is_dir():
        raise SourceConfigurationError(f"Source root does not exist: {base}")

    pattern_list = [pattern for pattern in patterns if pattern]
    if required and not pattern_list:
        raise SourceConfigurationError("No source patterns configured")

    found: set[Path] = set()
    unmatched: list[str] = []
    for pattern in pattern_list:
        hits = _match_pattern(pattern, base)
        if not hits:
            unmatched.append(pattern)
        found.update(hits)

    if not found:
        if required:
            raise SourceConfigurationError("No files matched source patterns", unmatched)
        logger.warning("No files matched optional patterns: %s", ", ".join(pattern_list) or "(none)")
        return []

    for pattern in unmatched:
        logger.warning("Pattern matched no files: %s", pattern)
    return sorted(found, key=lambda path: path.as_posix())
