"""structlog setup for the arbiter service.

Production writes one JSON object per line, development writes coloured
console lines. LOG_LEVEL selects the threshold (default INFO).

Statements and recordings never reach the logs in full: values under
``TRUNCATED_KEYS`` are cut to ``MAX_LOGGED_TEXT`` characters and raw bytes
are replaced by their length.

Example production entry:
    {"event": "verdict_saved", "level": "info", "dispute_id": "...",
     "winner": "person_b", "correlation_id": "...",
     "timestamp": "2026-03-10T10:00:00.000000Z"}
"""

import logging
import os
from typing import Any, cast

import structlog
from structlog.typing import Processor

from arbiter.infrastructure.observability.correlation import correlation_id_processor

LOG_LEVEL_ENV = "LOG_LEVEL"
MAX_LOGGED_TEXT = 200
TRUNCATED_KEYS = frozenset({"text", "transcription", "rationale", "raw_text", "audio_base64"})


def _level_from_environment() -> int:
    name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def redact_payloads(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor shortening statements and hiding audio bytes."""
    for key, value in event_dict.items():
        if isinstance(value, (bytes, bytearray)):
            event_dict[key] = f"<{len(value)} bytes>"
        elif key in TRUNCATED_KEYS and isinstance(value, str) and len(value) > MAX_LOGGED_TEXT:
            event_dict[key] = f"{value[:MAX_LOGGED_TEXT]}... ({len(value)} chars)"
    return event_dict


def configure_structlog(environment: str = "production") -> None:
    """Install the processor chain. Call once at startup.

    Args:
        environment: "production" renders JSON; any other value renders
            console output.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        cast(Processor, correlation_id_processor),
        cast(Processor, redact_payloads),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if environment == "production":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_from_environment()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
