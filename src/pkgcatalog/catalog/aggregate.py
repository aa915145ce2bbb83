"""Identity-keyed aggregation: first definition wins, repeats are collected."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from pkgcatalog.errors import DuplicateIdentityError
from pkgcatalog.sources.models import RecordKind

logger = logging.getLogger(__name__)


class IdentityRegistry:
    """In-memory registry of identities seen for one domain."""

    def __init__(self, kind: RecordKind) -> None:
        self.kind = kind
        self._records: dict[str, Mapping[str, object]] = {}
        self._duplicates: list[str] = []

    def add(self, record: Mapping[str, object]) -> bool:
        """Register one record; ``False`` when its identity was already taken."""

        identity = str(record.get(self.kind.identity_field))
        if identity in self._records:
            if identity not in self._duplicates:
                self._duplicates.append(identity)
            return False
        self._records[identity] = record
        return True

    @property
    def duplicates(self) -> list[str]:
        return list(self._duplicates)

    def records(self) -> list[dict[str, object]]:
        return [dict(record) for record in self._records.values()]


def aggregate_records(kind: RecordKind, records: Iterable[Mapping[str, object]]) -> list[dict[str, object]]:
    """Aggregate one domain and fail on any repeated identity."""

    aggregator = CatalogAggregator()
    aggregator.add_all(kind, records)
    aggregator.raise_for_duplicates()
    return aggregator.records(kind)


class CatalogAggregator:
    """Aggregates several domains so one run reports duplicates of all of them."""

    def __init__(self) -> None:
        self._registries: dict[RecordKind, IdentityRegistry] = {}

    def _registry(self, kind: RecordKind) -> IdentityRegistry:
        if kind not in self._registries:
            self._registries[kind] = IdentityRegistry(kind)
        return self._registries[kind]

    def add_all(self, kind: RecordKind, records: Iterable[Mapping[str, object]]) -> None:
        registry = self._registry(kind)
        for record in records:
            registry.add(record)

    def records(self, kind: RecordKind) -> list[dict[str, object]]:
        return self._registry(kind).records()

    def duplicates(self) -> dict[str, list[str]]:
        return {
            kind.value: registry.duplicates
            for kind, registry in self._registries.items()
            if registry.duplicates
        }

    def raise_for_duplicates(self) -> None:
        duplicates = self.duplicates()
        if not duplicates:
            return
        for kind, ids in duplicates.items():
            logger.error("Duplicate %s ids detected (%d): %s", kind, len(ids), ", ".join(ids))
        raise DuplicateIdentityError(duplicates)
