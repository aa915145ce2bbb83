from __future__ import annotations

import math

import pytest

from pkgcatalog.catalog.pricing import DerivedPrice, derive_price_from_tiers, parse_money_like, resolve_price


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("$1,200", 1200),
        ("$1,200/mo", 1200),
        ("99.50", 99.5),
        (450, 450),
        (12.5, 12.5),
        ("-$50", -50),
        ("call us", None),
        (True, None),
        (math.inf, None),
        (None, None),
    ],
)
def test_parse_money_like(raw: object, expected: object) -> None:
    assert parse_money_like(raw) == expected


def test_nested_tier_prices_keep_the_minimum_per_dimension() -> None:
    record = {"pricing": {"tiers": [{"price": {"monthly": "$1,200"}}, {"price": {"setup": 5000}}]}}

    price = derive_price_from_tiers(record)

    assert price == DerivedPrice(monthly=1200, one_time=5000, currency="USD")
    assert price.to_dict() == {"monthly": 1200, "oneTime": 5000, "currency": "USD"}


def test_flat_tier_prices_use_the_period_to_pick_a_dimension() -> None:
    record = {
        "pricing": {
            "currency": "EUR",
            "tiers": [
                {"price": "$900", "period": "per month"},
                {"price": 700, "period": "Monthly"},
                {"price": "$3,000", "period": "one-time"},
                {"price": 2500, "period": "Setup fee"},
                {"price": 10, "period": "weekly"},
            ],
        }
    }

    assert derive_price_from_tiers(record) == DerivedPrice(monthly=700, one_time=2500, currency="EUR")


def test_no_derivable_price_is_none_not_zero() -> None:
    assert derive_price_from_tiers({"pricing": {"tiers": [{"price": "contact us"}]}}) is None
    assert resolve_price({"name": "No price"}) is None
    assert resolve_price({"price": {"monthly": 0}}) == DerivedPrice(monthly=0)


def test_explicit_price_wins_over_tiers() -> None:
    record = {
        "price": {"oneTime": "$2,000", "currency": "GBP"},
        "pricing": {"tiers": [{"price": {"monthly": 10}}]},
    }

    assert resolve_price(record) == DerivedPrice(one_time=2000, currency="GBP")


def test_unparseable_explicit_price_falls_back_to_tiers() -> None:
    record = {"price": {"monthly": "ask"}, "pricing": {"tiers": [{"price": {"monthly": 300}}]}}

    assert resolve_price(record) == DerivedPrice(monthly=300)
