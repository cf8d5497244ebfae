"""Prometheus metrics for schema maintenance."""
from __future__ import annotations

from prometheus_client import Counter


SCHEMA_OPERATIONS_TOTAL = Counter(
    "gallery_schema_operations_total",
    "Existence-guarded schema operations by outcome",
    ["operation", "outcome"],
)
