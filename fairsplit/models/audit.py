"""
Audit Models for FairSplit

Every change to the expense collection is logged for audit purposes.
This provides:
1. Traceability of who added, edited or removed what
2. Debugging information when a month does not add up
3. A record of legacy data being upgraded on load

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ingestion
    RECORD_MIGRATED = "record_migrated"
    BATCH_LOADED = "batch_loaded"

    # Validation
    SCHEMA_VALIDATION_FAILED = "schema_validation_failed"
    SEMANTIC_VALIDATION_WARNING = "semantic_validation_warning"

    # Ledger changes
    EXPENSE_ADDED = "expense_added"
    EXPENSE_REPLACED = "expense_replaced"
    EXPENSE_REMOVED = "expense_removed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'batch')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one batch load)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, title, amount)
        event = AuditEventBuilder.expense_removed(expense_id, title)
    """

    @staticmethod
    def record_migrated(
        record_id: Optional[str],
        changes: list[str],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_MIGRATED,
            entity_type="expense",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"Legacy record upgraded ({len(changes)} changes)",
            details={"changes": changes},
        )

    @staticmethod
    def batch_loaded(
        record_count: int,
        migrated_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BATCH_LOADED,
            entity_type="batch",
            correlation_id=correlation_id,
            description=f"Loaded {record_count} expenses ({migrated_count} migrated)",
            details={
                "record_count": record_count,
                "migrated_count": migrated_count,
            },
        )

    @staticmethod
    def validation_failed(
        record_id: Optional[str],
        issues: list[dict],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCHEMA_VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"Expense rejected with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def validation_warning(
        record_id: str,
        warnings: list[str],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SEMANTIC_VALIDATION_WARNING,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"Expense accepted with {len(warnings)} warnings",
            details={"warnings": warnings},
        )

    @staticmethod
    def expense_added(
        expense_id: str,
        title: str,
        amount: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense added: {title} - {amount}",
            details={
                "title": title,
                "amount": amount,
            },
        )

    @staticmethod
    def expense_replaced(
        expense_id: str,
        changed_fields: list[str],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_REPLACED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense edited ({len(changed_fields)} fields changed)",
            details={"changed_fields": changed_fields},
        )

    @staticmethod
    def expense_removed(
        expense_id: str,
        title: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_REMOVED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense removed: {title}",
            details={"title": title},
        )
