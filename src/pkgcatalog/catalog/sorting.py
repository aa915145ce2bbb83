"""Deterministic catalog ordering."""

from __future__ import annotations

from typing import Iterable, Mapping

TIER_RANK: dict[str, int] = {"Essential": 0, "Professional": 1, "Enterprise": 2}
UNRANKED = 99


def sort_key(record: Mapping[str, object]) -> tuple[str, int, str]:
    tier = record.get("tier")
    return (
        str(record.get("service") or ""),
        TIER_RANK.get(tier, UNRANKED) if isinstance(tier, str) else UNRANKED,
        str(record.get("name") or ""),
    )


def sort_records(records: Iterable[Mapping[str, object]]) -> list[dict[str, object]]:
    """Order by service, tier rank, then name; ties keep their input order."""

    return [dict(record) for record in sorted(records, key=sort_key)]
