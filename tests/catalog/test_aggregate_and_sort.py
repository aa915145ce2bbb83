from __future__ import annotations

import pytest

from pkgcatalog.catalog.aggregate import CatalogAggregator, aggregate_records
from pkgcatalog.catalog.sorting import sort_records
from pkgcatalog.errors import DuplicateIdentityError
from pkgcatalog.sources.models import RecordKind


def test_aggregate_keeps_first_definition_in_insertion_order() -> None:
    records = [
        {"id": "b", "service": "seo", "name": "B"},
        {"id": "a", "service": "seo", "name": "A"},
    ]

    assert [record["id"] for record in aggregate_records(RecordKind.PACKAGES, records)] == ["b", "a"]


def test_duplicate_ids_are_listed_once_in_first_seen_order() -> None:
    records = [
        {"id": "seo-essential", "service": "seo", "name": "One"},
        {"id": "web-pro", "service": "web", "name": "Web"},
        {"id": "seo-essential", "service": "seo", "name": "Two"},
        {"id": "web-pro", "service": "web", "name": "Web again"},
        {"id": "seo-essential", "service": "seo", "name": "Three"},
    ]

    with pytest.raises(DuplicateIdentityError) as excinfo:
        aggregate_records(RecordKind.PACKAGES, records)

    assert excinfo.value.duplicates == {"packages": ["seo-essential", "web-pro"]}
    assert str(excinfo.value).count("seo-essential") == 1


def test_bundles_are_keyed_by_slug() -> None:
    records = [{"slug": "local", "id": "x"}, {"slug": "local", "id": "y"}]

    with pytest.raises(DuplicateIdentityError, match="duplicate bundles ids"):
        aggregate_records(RecordKind.BUNDLES, records)


def test_aggregator_reports_every_domain_together() -> None:
    aggregator = CatalogAggregator()
    aggregator.add_all(RecordKind.PACKAGES, [{"id": "p"}, {"id": "p"}])
    aggregator.add_all(RecordKind.ADDONS, [{"id": "a"}])
    aggregator.add_all(RecordKind.BUNDLES, [{"slug": "b"}, {"slug": "b"}])

    with pytest.raises(DuplicateIdentityError) as excinfo:
        aggregator.raise_for_duplicates()

    assert excinfo.value.duplicates == {"packages": ["p"], "bundles": ["b"]}
    assert aggregator.records(RecordKind.ADDONS) == [{"id": "a"}]


def test_sort_orders_by_service_tier_rank_then_name() -> None:
    records = [
        {"id": "1", "service": "web", "tier": "Essential", "name": "W"},
        {"id": "2", "service": "seo", "tier": "Enterprise", "name": "A"},
        {"id": "3", "service": "seo", "name": "Untiered"},
        {"id": "4", "service": "seo", "tier": "Essential", "name": "Z"},
        {"id": "5", "service": "seo", "tier": "Professional", "name": "M"},
        {"id": "6", "service": "seo", "tier": "Custom", "name": "B"},
        {"id": "7", "name": "No service"},
    ]

    assert [record["id"] for record in sort_records(records)] == ["7", "4", "5", "2", "6", "3", "1"]


def test_sort_is_stable_for_equal_keys() -> None:
    records = [
        {"id": "first", "service": "seo", "tier": "Essential", "name": "Same"},
        {"id": "second", "service": "seo", "tier": "Essential", "name": "Same"},
        {"id": "third", "service": "seo", "tier": "Essential", "name": "Same"},
    ]

    assert [record["id"] for record in sort_records(records)] == ["first", "second", "third"]
    assert [record["id"] for record in sort_records(list(reversed(records)))] == ["third", "second", "first"]
