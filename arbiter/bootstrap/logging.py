"""Logging bootstrap.

Configures structlog once per process for the configured environment.
"""

from __future__ import annotations

from arbiter.infrastructure.observability.logging import configure_structlog

_configured = False


def configure_logging(environment: str) -> None:
    """Configure structlog the first time it is called.

    Args:
        environment: "production" for JSON output, otherwise console output.
    """
    global _configured
    if _configured:
        return
    configure_structlog(environment=environment)
    _configured = True
