"""schema.org structured data for bundle listings and bundle detail pages."""

from __future__ import annotations

import json
from typing import Iterable, Mapping

from pkgcatalog.catalog.pricing import DEFAULT_CURRENCY, resolve_price

SCHEMA_CONTEXT = "https://schema.org"
IN_STOCK = "https://schema.org/InStock"
DEFAULT_NAME = "Package"


def _nested(record: Mapping[str, object], *keys: str) -> object:
    current: object = record
    for key in keys:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def _first_present(*values: object) -> object:
    for value in values:
        if value is not None:
            return value
    return None


def _price_text(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def bundle_url(bundle: Mapping[str, object], base_url: str = "") -> str | None:
    slug = bundle.get("slug")
    if not slug:
        return None
    return f"{base_url.rstrip('/')}/packages/{slug}"


def coerce_meta(bundle: Mapping[str, object], base_url: str = "") -> tuple[str, str, str | None]:
    """Best available name, description and url from mixed bundle shapes."""

    name = _first_present(
        bundle.get("name"),
        bundle.get("title"),
        _nested(bundle, "hero", "content", "title"),
        DEFAULT_NAME,
    )
    description = _first_present(
        bundle.get("description"),
        bundle.get("summary"),
        bundle.get("subtitle"),
        _nested(bundle, "hero", "content", "subtitle"),
        "",
    )
    return str(name), str(description), bundle_url(bundle, base_url)


def build_item_list(entries: Iterable[tuple[str, str]]) -> dict[str, object]:
    """``ItemList`` of ``(name, url)`` pairs with 1-based positions."""

    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "ItemList",
        "itemListElement": [
            {"@type": "ListItem", "position": position, "name": name, "url": url}
            for position, (name, url) in enumerate(entries, start=1)
        ],
    }


def build_service_jsonld(bundle: Mapping[str, object], base_url: str = "") -> dict[str, object]:
    """``Service`` object; ``offers`` is present only when a price resolves."""

    name, description, url = coerce_meta(bundle, base_url)
    price = resolve_price(bundle)
    currency = price.currency if price is not None else DEFAULT_CURRENCY

    offers: list[dict[str, object]] = []
    if price is not None:
        for amount, label in ((price.monthly, "monthly"), (price.one_time, "setup")):
            if amount is None:
                continue
            offer: dict[str, object] = {
                "@type": "Offer",
                "priceCurrency": currency,
                "price": _price_text(amount),
                "availability": IN_STOCK,
                "description": f"{name} — {label}",
            }
            if url:
                offer["url"] = url
            offers.append(offer)

    service: dict[str, object] = {
        "@context": SCHEMA_CONTEXT,
        "@type": "Service",
        "name": name,
        "description": description,
    }
    if url:
        service["url"] = url
    if offers:
        service["offers"] = offers
    return service


def build_catalog_jsonld(bundles: Iterable[Mapping[str, object]], base_url: str = "") -> dict[str, object]:
    """Listing plus one ``Service`` per bundle slug, for the ``jsonld.json`` artifact."""

    listed: list[tuple[str, str]] = []
    services: dict[str, dict[str, object]] = {}
    for bundle in bundles:
        name, _, url = coerce_meta(bundle, base_url)
        if url is None:
            continue
        listed.append((name, url))
        services[str(bundle["slug"])] = build_service_jsonld(bundle, base_url)
    return {"itemList": build_item_list(listed), "services": services}


def safe_jsonld_dumps(data: object) -> str:
    """Serialize for inline ``<script>`` embedding; ``<`` is escaped."""

    return json.dumps(data, ensure_ascii=False).replace("<", "\\u003c")
