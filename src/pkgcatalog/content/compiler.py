"""Compile markdown/MDX narrative documents into a slug-keyed content map."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import re
from typing import Iterable, Sequence

import frontmatter
from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.anchors import anchors_plugin
from mdit_py_plugins.tasklists import tasklists_plugin
import yaml

from pkgcatalog.content.normalization import (
    count_words,
    mtime_yyyymmdd,
    normalize_whitespace,
    to_yyyymmdd,
    trim_excerpt,
)
from pkgcatalog.errors import DuplicateIdentityError, SourceReadError
from pkgcatalog.sources.reading import read_source_text

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^\s{0,3}(`{3,}|~{3,})")
_ESM_RE = re.compile(r"^(import|export)\s")
_JSX_LINE_RE = re.compile(r"^\s*(<[A-Z][\w.]*\b[^>]*/>|</?[A-Z][\w.]*\b[^>]*>|\{.*\})\s*$")

_TEXT_TOKENS = {"text", "code_inline"}


@dataclass(slots=True)
class Heading:
    depth: int
    text: str
    id: str | None = None

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {"depth": self.depth, "text": self.text}
        if self.id is not None:
            payload["id"] = self.id
        return payload


@dataclass(slots=True)
class ContentEntry:
    """One compiled document as it appears in ``content.map.json``."""

    slug: str
    title: str
    summary: str
    html: str
    excerpt: str
    word_count: int
    updated_at: str
    headings: list[Heading] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "slug": self.slug,
            "title": self.title,
            "summary": self.summary,
            "html": self.html,
            "excerpt": self.excerpt,
            "wordCount": self.word_count,
            "updatedAt": self.updated_at,
            "headings": [heading.to_dict() for heading in self.headings],
        }


def build_markdown() -> MarkdownIt:
    """CommonMark with raw HTML, GFM tables, strikethrough, task lists and heading ids."""

    md = MarkdownIt("commonmark", {"html": True})
    md.enable(["table", "strikethrough"])
    md.use(tasklists_plugin)
    md.use(anchors_plugin, min_level=1, max_level=6)
    return md


def strip_mdx(body: str) -> str:
    """Drop ESM statements and standalone JSX/expression lines outside code fences."""

    kept: list[str] = []
    fence: str | None = None
    depth = 0

    for line in body.splitlines():
        fence_match = _FENCE_RE.match(line)
        if fence is not None:
            kept.append(line)
            if fence_match and fence_match.group(1)[0] == fence[0] and len(fence_match.group(1)) >= len(fence):
                fence = None
            continue
        if fence_match:
            fence = fence_match.group(1)
            kept.append(line)
            continue

        if depth > 0:
            depth += line.count("{") - line.count("}")
            continue
        if _ESM_RE.match(line):
            depth = max(line.count("{") - line.count("}"), 0)
            continue
        if _JSX_LINE_RE.match(line):
            continue
        kept.append(line)

    return "\n".join(kept)


def _inline_text(token: Token, *, include_code: bool = True) -> str:
    parts: list[str] = []
    for child in token.children or []:
        if child.type in {"softbreak", "hardbreak"}:
            parts.append(" ")
        elif child.type == "text" or (include_code and child.type == "code_inline"):
            parts.append(child.content)
        elif child.children:
            parts.append(_inline_text(child, include_code=include_code))
    return "".join(parts)


def _first_text(tokens: Sequence[Token], open_type: str, tag: str | None = None) -> str:
    for position, token in enumerate(tokens[:-1]):
        if token.type != open_type or (tag is not None and token.tag != tag):
            continue
        text = normalize_whitespace(_inline_text(tokens[position + 1]))
        if text:
            return text
    return ""


def _headings(tokens: Sequence[Token]) -> list[Heading]:
    headings: list[Heading] = []
    for position, token in enumerate(tokens[:-1]):
        if token.type != "heading_open":
            continue
        text = normalize_whitespace(_inline_text(tokens[position + 1]))
        if not text:
            continue
        anchor = token.attrGet("id")
        headings.append(Heading(depth=int(token.tag[1:]), text=text, id=str(anchor) if anchor else None))
    return headings


def _word_count(tokens: Sequence[Token]) -> int:
    words = [_inline_text(token, include_code=False) for token in tokens if token.type == "inline"]
    return count_words(" ".join(words))


def _text_field(metadata: dict[str, object], key: str) -> str | None:
    value = metadata.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class NarrativeCompiler:
    """Markdown/MDX to HTML plus the derived fields the catalog needs."""

    def __init__(self, markdown: MarkdownIt | None = None) -> None:
        self._markdown = markdown or build_markdown()

    def compile(self, path: Path) -> ContentEntry:
        text = read_source_text(path)
        try:
            post = frontmatter.loads(text)
        except yaml.YAMLError as exc:
            raise SourceReadError(path, f"Invalid frontmatter: {exc}") from exc

        metadata = dict(post.metadata)
        body = post.content
        if path.suffix.lower() == ".mdx":
            body = strip_mdx(body)

        try:
            tokens = self._markdown.parse(body)
            html = self._markdown.renderer.render(tokens, self._markdown.options, {})
        except Exception as exc:
            raise SourceReadError(path, f"Failed to compile markdown: {exc}") from exc

        slug = _text_field(metadata, "slug") or path.stem.strip()
        if not slug:
            raise SourceReadError(path, "Missing resolvable slug")

        first_paragraph = _first_text(tokens, "paragraph_open")
        title = _text_field(metadata, "title") or _first_text(tokens, "heading_open", "h1") or slug
        summary = _text_field(metadata, "summary") or first_paragraph
        updated_at = to_yyyymmdd(metadata.get("lastUpdated")) or mtime_yyyymmdd(path)

        return ContentEntry(
            slug=slug,
            title=title,
            summary=summary,
            html=html,
            excerpt=trim_excerpt(first_paragraph or summary or title),
            word_count=_word_count(tokens),
            updated_at=updated_at,
            headings=_headings(tokens),
        )


def compile_content_map(
    paths: Iterable[Path],
    compiler: NarrativeCompiler | None = None,
) -> dict[str, dict[str, object]]:
    """Compile every file in order; any duplicated slug fails the whole map."""

    active = compiler or NarrativeCompiler()
    content_map: dict[str, dict[str, object]] = {}
    duplicates: list[str] = []

    for path in paths:
        entry = active.compile(path)
        if entry.slug in content_map:
            if entry.slug not in duplicates:
                duplicates.append(entry.slug)
            continue
        content_map[entry.slug] = entry.to_dict()
        logger.debug("Compiled %s -> %s", path, entry.slug)

    if duplicates:
        raise DuplicateIdentityError({"content": duplicates})

    logger.info("Compiled %d content document(s)", len(content_map))
    return content_map
