"""Reconciliation engine: normalization, reconciliation, aggregation, validation and insights."""
