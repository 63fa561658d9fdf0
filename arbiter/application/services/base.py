"""Structured logging shared by the dispute services.

Services call ``_init_logger`` once with their component label, then
``_log_operation`` per call. Party and dispute identifiers are always bound
under the same keys so one dispute can be followed across components:

    log = self._log_operation("append_turn", party_id=party_id, dispute_id=dispute_id)
    log.info("turn_appended", order=turn.order)
"""

from uuid import UUID

import structlog

from arbiter.infrastructure.observability.correlation import get_correlation_id


class LoggingMixin:
    """Gives a service a component-scoped structlog logger.

    Attributes:
        _log: Logger bound with the service class and component.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str) -> None:
        self._log = structlog.get_logger(__name__).bind(
            service=type(self).__name__,
            component=component,
        )

    def _log_operation(
        self,
        operation: str,
        party_id: str | None = None,
        dispute_id: UUID | str | None = None,
        **context: object,
    ) -> structlog.BoundLogger:
        """Bind one operation, its correlation id and the ids it concerns.

        Ids left as None are not bound. Dispute ids are logged as strings.
        """
        ids: dict[str, str] = {}
        if party_id is not None:
            ids["party_id"] = party_id
        if dispute_id is not None:
            ids["dispute_id"] = str(dispute_id)
        return self._log.bind(
            operation=operation,
            correlation_id=get_correlation_id(),
            **ids,
            **context,
        )
