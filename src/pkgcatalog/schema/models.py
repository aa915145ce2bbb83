"""Declarative schema for catalog records."""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator, model_validator

from pkgcatalog.catalog.pricing import parse_money_like

Tier = Literal["Essential", "Professional", "Enterprise"]
TIERS: tuple[str, ...] = ("Essential", "Professional", "Enterprise")

SERVICE_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

Amount = Union[StrictInt, StrictFloat]


class Price(BaseModel):
    model_config = ConfigDict(extra="allow")

    monthly: Optional[Amount] = None
    oneTime: Optional[Amount] = None
    currency: Optional[str] = Field(default=None, pattern=r"^[A-Z]{3}$")

    @field_validator("monthly", "oneTime", mode="before")
    @classmethod
    def _coerce_money_like(cls, value: object) -> object:
        if isinstance(value, str):
            parsed = parse_money_like(value)
            if parsed is None:
                raise ValueError(f"not a money-like value: {value!r}")
            return parsed
        return value

    @field_validator("monthly", "oneTime")
    @classmethod
    def _non_negative(cls, value: Amount | None) -> Amount | None:
        if value is not None and value < 0:
            raise ValueError("must be >= 0")
        return value

    @property
    def is_empty(self) -> bool:
        return self.monthly is None and self.oneTime is None


class Feature(BaseModel):
    model_config = ConfigDict(extra="allow")

    label: str = Field(min_length=1)
    detail: Optional[str] = None


class FaqItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)


class CatalogRecord(BaseModel):
    """Fields shared by packages, add-ons and bundles; authoring extras are kept."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(min_length=1)
    service: str = Field(pattern=SERVICE_PATTERN)
    tier: Optional[Tier] = None
    name: str = Field(min_length=1)
    summary: Optional[str] = None
    slug: Optional[str] = Field(default=None, min_length=1)
    price: Optional[Price] = None
    tags: Optional[list[str]] = None
    features: Optional[list[Feature]] = None
    faqs: Optional[list[FaqItem]] = None


class Package(CatalogRecord):
    pass


class AddOn(CatalogRecord):
    description: Optional[str] = None
    deliverables: Optional[list[Feature]] = None


class Bundle(CatalogRecord):
    slug: str = Field(min_length=1)
    service: Optional[str] = Field(default=None, pattern=SERVICE_PATTERN)
    title: Optional[str] = None
    components: Optional[list[str]] = None

    @model_validator(mode="before")
    @classmethod
    def _fill_identity(cls, data: object) -> object:
        if not isinstance(data, dict):
            return data
        filled = dict(data)
        if not filled.get("name") and filled.get("title"):
            filled["name"] = filled["title"]
        if not filled.get("id") and filled.get("slug"):
            filled["id"] = filled["slug"]
        return filled
