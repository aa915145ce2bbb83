"""TS/JS module loader that reads exported array literals without executing code."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import re

import json5

from pkgcatalog.sources.models import LoadWarning, ModuleDocument, RecordKind
from pkgcatalog.sources.reading import read_source_text

logger = logging.getLogger(__name__)

_SUFFIXES = {".ts", ".mts", ".cts", ".js", ".mjs", ".cjs"}

_DECLARATION_RE = re.compile(r"(?P<export>\bexport\s+)?\b(?:const|let|var)\s+(?P<name>[A-Za-z_$][\w$]*)\s*")
_DEFAULT_RE = re.compile(r"\bexport\s+default\s+")
_DEFAULT_NAME_RE = re.compile(r"(?P<name>[A-Za-z_$][\w$]*)\s*(?:as\s+const\s*)?;?")
_EXPORT_LIST_RE = re.compile(r"\bexport\s*\{(?P<names>[^}]*)\}")

_OPENERS = {"[": "]", "{": "}", "(": ")"}
_CLOSERS = {"]", "}", ")"}


@dataclass(slots=True)
class _Declaration:
    name: str
    exported: bool
    literal: str


def _skip_string(text: str, index: int) -> int:
    quote = text[index]
    index += 1
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            return index + 1
        index += 1
    raise ValueError("Unterminated string literal")


def _literal_end(text: str, start: int) -> int:
    """Return the index just past the bracketed literal opening at ``start``."""

    stack: list[str] = []
    index = start
    while index < len(text):
        char = text[index]
        if char in "'\"`":
            index = _skip_string(text, index)
            continue
        if text.startswith("//", index):
            newline = text.find("\n", index)
            index = len(text) if newline == -1 else newline + 1
            continue
        if text.startswith("/*", index):
            close = text.find("*/", index + 2)
            if close == -1:
                raise ValueError("Unterminated block comment")
            index = close + 2
            continue
        if char in _OPENERS:
            stack.append(_OPENERS[char])
        elif char in _CLOSERS:
            if not stack or stack.pop() != char:
                raise ValueError(f"Unbalanced '{char}' at offset {index}")
            if not stack:
                return index + 1
        index += 1
    raise ValueError("Unterminated array literal")


def _annotation_end(text: str, index: int) -> int | None:
    """Index of the `=` that ends a type annotation, or ``None`` when there is none."""

    depth = 0
    while index < len(text):
        char = text[index]
        if char in "'\"`":
            index = _skip_string(text, index)
            continue
        if text.startswith("=>", index):
            index += 2
            continue
        if char in "{[(<":
            depth += 1
        elif char in "}])>":
            depth -= 1
            if depth < 0:
                return None
        elif depth == 0 and char == "=":
            return index
        elif depth == 0 and char == ";":
            return None
        index += 1
    return None


def _initializer_start(text: str, index: int) -> int | None:
    if text.startswith(":", index):
        equals = _annotation_end(text, index + 1)
        if equals is None:
            return None
        index = equals
    if not text.startswith("=", index) or text.startswith("==", index):
        return None
    index += 1
    while index < len(text) and text[index].isspace():
        index += 1
    return index


def _scan_declarations(text: str) -> list[_Declaration]:
    declarations: list[_Declaration] = []
    for match in _DECLARATION_RE.finditer(text):
        try:
            start = _initializer_start(text, match.end())
            if start is None or start >= len(text) or text[start] != "[":
                continue
            end = _literal_end(text, start)
        except ValueError:
            continue
        declarations.append(
            _Declaration(
                name=match.group("name"),
                exported=bool(match.group("export")),
                literal=text[start:end],
            )
        )
    return declarations


def _exported_names(text: str) -> set[str]:
    names: set[str] = set()
    for match in _EXPORT_LIST_RE.finditer(text):
        for part in match.group("names").split(","):
            local = part.strip().split(" as ")[0].strip()
            if local:
                names.add(local)
    return names


def _default_literal(text: str, declarations: list[_Declaration]) -> tuple[str | None, str | None]:
    match = _DEFAULT_RE.search(text)
    if match is None:
        return None, None

    start = match.end()
    if start < len(text) and text[start] == "[":
        try:
            return "default", text[start : _literal_end(text, start)]
        except ValueError:
            return None, None

    name_match = _DEFAULT_NAME_RE.match(text, start)
    if name_match is None:
        return None, None
    name = name_match.group("name")
    for declaration in declarations:
        if declaration.name == name:
            return name, declaration.literal
    return None, None


def _parse_literal(literal: str) -> object | None:
    try:
        return json5.loads(literal)
    except ValueError as exc:
        logger.debug("Array literal is not static data: %s", exc)
        return None


def _is_record_array(value: object, kind: RecordKind) -> bool:
    if not isinstance(value, list):
        return False
    return all(
        isinstance(item, dict) and all(key in item for key in kind.identity_keys)
        for item in value
    )


class TypeScriptModuleLoader:
    """Pull the exported record array out of a ``*-packages.ts`` style module.

    Only static data is supported: the array must be a literal made of
    strings, numbers, booleans, nulls, arrays and objects (JSON5 syntax).
    """

    def supports(self, path: Path) -> bool:
        return path.suffix.lower() in _SUFFIXES and not path.name.endswith(".d.ts")

    def load(self, path: Path, kind: RecordKind) -> ModuleDocument | LoadWarning:
        text = read_source_text(path)
        declarations = _scan_declarations(text)

        default_name, default_literal = _default_literal(text, declarations)
        if default_literal is not None:
            value = _parse_literal(default_literal)
            if isinstance(value, list):
                return ModuleDocument(path=path, export_name=default_name, records=value)

        exported = _exported_names(text)
        for declaration in declarations:
            if not (declaration.exported or declaration.name in exported):
                continue
            value = _parse_literal(declaration.literal)
            if _is_record_array(value, kind):
                return ModuleDocument(path=path, export_name=declaration.name, records=value)

        return LoadWarning(path, f"No {kind.value} array export found")
