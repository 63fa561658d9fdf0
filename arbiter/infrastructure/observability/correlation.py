"""Request correlation ids.

The id is held in a ContextVar, so every ``await`` of an adjudication
(research, generation, narration, publish, store writes) logs under the id
of the request that started it. Clients may supply their own id in
``X-Correlation-ID``; anything that is not a short printable token is
replaced with a fresh UUID.
"""

import re
from contextvars import ContextVar
from typing import Any
from uuid import uuid4

MAX_CORRELATION_ID_LENGTH = 128

_ACCEPTABLE_ID = re.compile(r"[A-Za-z0-9._:-]+")

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    return str(uuid4())


def accept_correlation_id(supplied: str | None) -> str:
    """Return the client's id if it is usable, otherwise a new one."""
    if (
        supplied
        and len(supplied) <= MAX_CORRELATION_ID_LENGTH
        and _ACCEPTABLE_ID.fullmatch(supplied)
    ):
        return supplied
    return generate_correlation_id()


def get_correlation_id() -> str:
    """Return the current id, or "" outside a request."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id.set(correlation_id)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor stamping the current correlation id, when set."""
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict
