"""Observability: structured logging and correlation ids."""

from arbiter.infrastructure.observability.correlation import (
    accept_correlation_id,
    correlation_id_processor,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from arbiter.infrastructure.observability.logging import configure_structlog, redact_payloads

__all__: list[str] = [
    "accept_correlation_id",
    "configure_structlog",
    "correlation_id_processor",
    "generate_correlation_id",
    "get_correlation_id",
    "redact_payloads",
    "set_correlation_id",
]
