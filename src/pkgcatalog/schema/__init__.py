"""Record schema and batched validation."""

from .models import AddOn, Bundle, CatalogRecord, FaqItem, Feature, Package, Price, TIERS
from .validator import ValidationIssue, ValidationReport, normalize_record, validate_records

__all__ = [
    "AddOn",
    "Bundle",
    "CatalogRecord",
    "FaqItem",
    "Feature",
    "Package",
    "Price",
    "TIERS",
    "ValidationIssue",
    "ValidationReport",
    "normalize_record",
    "validate_records",
]
