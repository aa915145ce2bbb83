"""Plain-text search documents for bundles and standalone narrative docs."""

from __future__ import annotations

from typing import Mapping, Sequence

from bs4 import BeautifulSoup

from pkgcatalog.content.normalization import normalize_whitespace, to_yyyymmdd


def html_to_text(html: str | None) -> str:
    """Visible text of an HTML fragment; scripts and styles are dropped."""

    if not html:
        return ""
    soup = BeautifulSoup(html, "lxml")
    for element in soup(["script", "style"]):
        element.decompose()
    return normalize_whitespace(soup.get_text(" ").replace("\xa0", " "))


def _heading_texts(entry: Mapping[str, object] | None) -> list[str]:
    if not entry or not isinstance(entry.get("headings"), list):
        return []
    texts = []
    for heading in entry["headings"]:
        if isinstance(heading, Mapping) and str(heading.get("text") or "").strip():
            texts.append(str(heading["text"]).strip())
    return texts


def _first(*values: object) -> object:
    for value in values:
        if value is not None:
            return value
    return None


def _compact(doc: dict[str, object]) -> dict[str, object]:
    return {key: value for key, value in doc.items() if value is not None}


def _bundle_doc(bundle: Mapping[str, object], compiled: Mapping[str, object] | None) -> dict[str, object]:
    slug = str(bundle["slug"])
    compiled = compiled or {}
    content = bundle.get("content") if isinstance(bundle.get("content"), Mapping) else {}
    tags = bundle.get("tags")
    return _compact(
        {
            "id": f"bundle:{slug}",
            "docType": "bundle",
            "slug": slug,
            "title": _first(bundle.get("title"), bundle.get("name"), compiled.get("title"), slug),
            "summary": _first(
                bundle.get("summary"),
                bundle.get("description"),
                compiled.get("summary"),
                compiled.get("excerpt"),
            ),
            "subtitle": bundle.get("subtitle"),
            "category": bundle.get("category"),
            "tags": list(tags) if isinstance(tags, list) else [],
            "excerpt": _first(content.get("excerpt"), compiled.get("excerpt")),
            "updatedAt": to_yyyymmdd(_first(content.get("updatedAt"), compiled.get("updatedAt"))),
            "wordCount": _first(content.get("wordCount"), compiled.get("wordCount")),
            "headings": _heading_texts(compiled),
            "contentText": html_to_text(_first(content.get("html"), compiled.get("html"), "")),
        }
    )


def _standalone_doc(entry: Mapping[str, object]) -> dict[str, object]:
    slug = str(entry["slug"])
    return _compact(
        {
            "id": f"doc:{slug}",
            "docType": "doc",
            "slug": slug,
            "title": _first(entry.get("title"), slug),
            "summary": _first(entry.get("summary"), entry.get("excerpt")),
            "excerpt": entry.get("excerpt"),
            "updatedAt": to_yyyymmdd(entry.get("updatedAt")),
            "wordCount": entry.get("wordCount"),
            "headings": _heading_texts(entry),
            "contentText": html_to_text(entry.get("html") if isinstance(entry.get("html"), str) else ""),
        }
    )


def _order(doc: Mapping[str, object]) -> tuple[int, str, str]:
    if doc["docType"] == "bundle":
        return (0, str(doc.get("category") or ""), str(doc.get("title") or ""))
    return (1, "", str(doc.get("title") or ""))


def build_search_index(
    bundles: Sequence[object],
    content_map: Mapping[str, object],
    include_docs: bool = True,
) -> list[dict[str, object]]:
    """Bundles first (by category, then title), then docs not already covered (by title)."""

    docs: list[dict[str, object]] = []
    seen: set[str] = set()
    bundle_slugs: set[str] = set()

    for bundle in bundles:
        if not isinstance(bundle, Mapping) or not isinstance(bundle.get("slug"), str):
            continue
        slug = bundle["slug"]
        bundle_slugs.add(slug)
        compiled = content_map.get(slug)
        doc = _bundle_doc(bundle, compiled if isinstance(compiled, Mapping) else None)
        if doc["id"] not in seen:
            seen.add(str(doc["id"]))
            docs.append(doc)

    if include_docs:
        for slug, entry in content_map.items():
            if not isinstance(entry, Mapping) or slug in bundle_slugs:
                continue
            doc = _standalone_doc({"slug": slug, **entry})
            if doc["id"] not in seen:
                seen.add(str(doc["id"]))
                docs.append(doc)

    return sorted(docs, key=_order)
