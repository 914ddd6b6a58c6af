"""
Observability module for filerelease.

Structured logging with correlation ids and per-operation log context.
"""

from filerelease.observability.structured_logging import (
    HumanReadableFormatter,
    StructuredFormatter,
    add_correlation_id,
    get_correlation_id,
    log_context,
    setup_structured_logging,
)

__all__ = [
    "StructuredFormatter",
    "HumanReadableFormatter",
    "setup_structured_logging",
    "add_correlation_id",
    "get_correlation_id",
    "log_context",
]
