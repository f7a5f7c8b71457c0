"""
Audit Logger

DESIGN DECISION: Every change to the expense collection is logged.
This provides:
1. Complete traceability of edits and removals
2. Debugging capability when a month's totals look wrong
3. A trail of which legacy records were upgraded on load

The audit logger:
- Is synchronous, like everything else in FairSplit
- Always writes a structured log line
- Optionally keeps the events in memory for callers that want to show them
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from fairsplit.config import get_settings
from fairsplit.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def get_logger(name: str):
    """structlog logger bound to the configuration above."""
    return structlog.get_logger(name)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Route structlog output through the standard library at `level`.

    Falls back to the configured `FAIRSPLIT_LOG_LEVEL` when no level is given.
    """
    if level is None:
        level = get_settings().app.log_level

    logging.basicConfig(format="%(message)s", level=level.upper())
    logging.getLogger("fairsplit").setLevel(level.upper())


class AuditLogger:
    """
    Central audit logging service.

    Logs events to:
    1. Structured local log (always)
    2. An in-memory history (when keep_history is set)
    """

    def __init__(self, keep_history: bool = False):
        """
        Initialize audit logger.

        Args:
            keep_history: Retain logged events, readable via `history`.
        """
        self._keep_history = keep_history
        self._history: list[AuditEvent] = []
        self._logger = get_logger("fairsplit.audit")

    @property
    def history(self) -> tuple[AuditEvent, ...]:
        return tuple(self._history)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at its own severity."""
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._keep_history:
            self._history.append(event)

    def log_record_migrated(
        self,
        record_id: Optional[str],
        changes: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a legacy record upgrade."""
        self.log(AuditEventBuilder.record_migrated(
            record_id=record_id,
            changes=changes,
            correlation_id=correlation_id,
        ))

    def log_batch_loaded(
        self,
        record_count: int,
        migrated_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.batch_loaded(
            record_count=record_count,
            migrated_count=migrated_count,
            correlation_id=correlation_id,
        ))

    def log_validation_failed(
        self,
        record_id: Optional[str],
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected record."""
        self.log(AuditEventBuilder.validation_failed(
            record_id=record_id,
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_validation_warning(
        self,
        record_id: str,
        warnings: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.validation_warning(
            record_id=record_id,
            warnings=warnings,
            correlation_id=correlation_id,
        ))

    def log_expense_added(
        self,
        expense_id: str,
        title: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.expense_added(
            expense_id=expense_id,
            title=title,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_expense_replaced(
        self,
        expense_id: str,
        changed_fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.expense_replaced(
            expense_id=expense_id,
            changed_fields=changed_fields,
            correlation_id=correlation_id,
        ))

    def log_expense_removed(
        self,
        expense_id: str,
        title: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.expense_removed(
            expense_id=expense_id,
            title=title,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., loading a saved
    collection) and pass it through all subsequent operations.
    """
    return uuid4()
