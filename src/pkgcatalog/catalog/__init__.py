"""Aggregation, ordering, pricing and derived catalog artifacts."""
