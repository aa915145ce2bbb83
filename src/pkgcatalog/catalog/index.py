"""Small catalog index and per-service splits."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from pkgcatalog.catalog.pricing import resolve_price


@dataclass(slots=True)
class ServiceSplit:
    services: dict[str, dict[str, list[dict[str, object]]]] = field(default_factory=dict)
    cross_service: list[dict[str, object]] = field(default_factory=list)


def _index_row(kind: str, record: Mapping[str, object]) -> dict[str, object]:
    price = resolve_price(record)
    tags = record.get("tags")
    row: dict[str, object] = {
        "kind": kind,
        "slug": record.get("slug") or record.get("id"),
        "title": record.get("name") or record.get("title") or record.get("slug"),
        "service": record.get("service"),
    }
    if record.get("subservice"):
        row["subservice"] = record["subservice"]
    row["tags"] = list(tags) if isinstance(tags, list) else []
    row["hasPrice"] = price is not None
    if price is not None and price.monthly is not None:
        row["monthly"] = price.monthly
    if price is not None and price.one_time is not None:
        row["oneTime"] = price.one_time
    return row


def build_catalog_index(
    packages: Iterable[Mapping[str, object]],
    bundles: Iterable[Mapping[str, object]],
) -> dict[str, object]:
    """Rows for ``index.json``: packages first, then bundles, in catalog order."""

    items = [_index_row("package", record) for record in packages]
    items.extend(_index_row("bundle", record) for record in bundles)
    return {"items": items}


def _empty_service() -> dict[str, list[dict[str, object]]]:
    return {"packages": [], "addons": [], "bundles": []}


def split_by_service(
    packages: Sequence[Mapping[str, object]],
    addons: Sequence[Mapping[str, object]],
    bundles: Sequence[Mapping[str, object]],
) -> ServiceSplit:
    """Group records by service; multi-service or service-less bundles are kept apart."""

    grouped: dict[str, dict[str, list[dict[str, object]]]] = {}
    package_service = {str(record["id"]): str(record["service"]) for record in packages}

    for bucket, records in (("packages", packages), ("addons", addons)):
        for record in records:
            service = str(record["service"])
            grouped.setdefault(service, _empty_service())[bucket].append(dict(record))

    split = ServiceSplit()
    for bundle in bundles:
        service = bundle.get("service")
        components = bundle.get("components")
        spanned = {
            package_service[component]
            for component in (components if isinstance(components, list) else [])
            if component in package_service
        }
        if isinstance(service, str) and service and spanned <= {service}:
            grouped.setdefault(service, _empty_service())["bundles"].append(dict(bundle))
        else:
            split.cross_service.append(dict(bundle))

    split.services = {service: grouped[service] for service in sorted(grouped)}
    return split
