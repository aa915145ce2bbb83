"""Byte-level helpers for reading author-owned source files."""

from __future__ import annotations

import json
from pathlib import Path

from charset_normalizer import from_bytes

from pkgcatalog.errors import SourceReadError


def _detect_encoding(raw: bytes) -> str:
    try:
        raw.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    best = from_bytes(raw).best()
    if best and best.encoding:
        return best.encoding
    raise ValueError("Could not detect text encoding")


def read_source_text(path: Path) -> str:
    """Read a source file as text, tolerating non-UTF-8 legacy encodings."""

    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise SourceReadError(path, f"Failed to read source file: {exc}") from exc

    if raw.startswith(b"\xef\xbb\xbf"):
        raw = raw[3:]
    try:
        encoding = _detect_encoding(raw)
    except ValueError as exc:
        raise SourceReadError(path, str(exc)) from exc
    return raw.decode(encoding)


def read_json(path: Path) -> object:
    """Read and parse a JSON file, naming the file on failure."""

    text = read_source_text(path)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise SourceReadError(path, f"Failed to parse JSON: {exc}") from exc
