"""Normalized price resolution across explicit and tiered pricing shapes."""

from __future__ import annotations

from dataclasses import dataclass
import math
import re
from typing import Mapping

DEFAULT_CURRENCY = "USD"

_NON_NUMERIC_RE = re.compile(r"[^\d.]")
_LEADING_MINUS_RE = re.compile(r"^[^\d]*-")


@dataclass(frozen=True, slots=True)
class DerivedPrice:
    """A starting price; at least one dimension is always set."""

    monthly: int | float | None = None
    one_time: int | float | None = None
    currency: str = DEFAULT_CURRENCY

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {}
        if self.monthly is not None:
            payload["monthly"] = self.monthly
        if self.one_time is not None:
            payload["oneTime"] = self.one_time
        payload["currency"] = self.currency
        return payload


def parse_money_like(value: object) -> int | float | None:
    """Parse ``"$1,200/mo"`` style strings; finite numbers pass through unchanged."""

    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if not isinstance(value, str):
        return None

    digits = _NON_NUMERIC_RE.sub("", value)
    if not digits:
        return None
    if _LEADING_MINUS_RE.match(value):
        digits = f"-{digits}"
    try:
        number = float(digits)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def _keep_min(current: int | float | None, candidate: int | float | None) -> int | float | None:
    if candidate is None:
        return current
    if current is None:
        return candidate
    return min(current, candidate)


def derive_price_from_tiers(record: Mapping[str, object]) -> DerivedPrice | None:
    """Scan ``pricing.tiers[]`` and keep the lowest value per price dimension."""

    pricing = record.get("pricing")
    if not isinstance(pricing, Mapping):
        return None
    tiers = pricing.get("tiers")
    if not isinstance(tiers, list):
        return None

    monthly: int | float | None = None
    one_time: int | float | None = None

    for tier in tiers:
        if not isinstance(tier, Mapping):
            continue
        price = tier.get("price")

        if isinstance(price, Mapping):
            monthly = _keep_min(monthly, parse_money_like(price.get("monthly")))
            setup = price.get("setup")
            one_time = _keep_min(
                one_time,
                parse_money_like(setup if setup is not None else price.get("oneTime")),
            )
            continue

        flat = parse_money_like(price)
        if flat is None:
            continue
        period = str(tier.get("period") or "").lower()
        if "month" in period:
            monthly = _keep_min(monthly, flat)
        if "one-time" in period or "one time" in period or "setup" in period:
            one_time = _keep_min(one_time, flat)

    if monthly is None and one_time is None:
        return None

    currency = pricing.get("currency")
    return DerivedPrice(
        monthly=monthly,
        one_time=one_time,
        currency=currency if isinstance(currency, str) and currency else DEFAULT_CURRENCY,
    )


def resolve_price(record: Mapping[str, object]) -> DerivedPrice | None:
    """Explicit ``price`` wins; otherwise derive a starting price from tiers.

    ``None`` means the record has no derivable price, which is not the same
    as a price of zero.
    """

    price = record.get("price")
    if isinstance(price, Mapping) and (price.get("monthly") is not None or price.get("oneTime") is not None):
        monthly = parse_money_like(price.get("monthly"))
        one_time = parse_money_like(price.get("oneTime"))
        if monthly is not None or one_time is not None:
            currency = price.get("currency")
            return DerivedPrice(
                monthly=monthly,
                one_time=one_time,
                currency=currency if isinstance(currency, str) and currency else DEFAULT_CURRENCY,
            )

    return derive_price_from_tiers(record)
