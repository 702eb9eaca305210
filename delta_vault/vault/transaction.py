"""
Vault Transactions.

A mutating vault call either lands completely or leaves no trace. The vault
snapshots its own books when the transaction opens; each strategy or token
movement made along the way registers how to take it back, and events wait
in the transaction until it commits.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..core import get_logger
from .events import VaultEvent

logger = get_logger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TransactionStatus(Enum):
    """OPEN until closed as one of the three outcomes."""

    OPEN = "open"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    FAILED = "failed"  # some compensation raised


@dataclass
class Compensation:
    description: str
    action: Callable[[], Any]


@dataclass
class VaultTransaction:
    """
    One deposit, withdraw or rebalance in flight.

    ``snapshot`` is whatever the vault needs to restore its books; the
    transaction never looks inside it.
    """

    operation: str
    snapshot: Any = None
    transaction_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    status: TransactionStatus = TransactionStatus.OPEN
    started_at: datetime = field(default_factory=_now)
    finished_at: Optional[datetime] = None
    compensations: List[Compensation] = field(default_factory=list)
    pending_events: List[VaultEvent] = field(default_factory=list)
    reason: Optional[str] = None
    rollback_errors: List[Exception] = field(default_factory=list)

    @property
    def is_open(self) -> bool:
        return self.status is TransactionStatus.OPEN

    def on_rollback(self, description: str, action: Callable[[], Any]) -> None:
        """Register the undo action for an external effect that just happened."""
        self.compensations.append(Compensation(description, action))

    def emit(self, event: VaultEvent) -> None:
        """Hold an event back until commit."""
        self.pending_events.append(event)

    def unwind(self) -> List[Exception]:
        """
        Undo registered effects, newest first.

        A compensation that raises does not stop the ones registered before
        it. Held events are discarded.

        Returns:
            The exceptions raised by compensations, also kept on
            ``rollback_errors``
        """
        errors: List[Exception] = []
        while self.compensations:
            compensation = self.compensations.pop()
            try:
                compensation.action()
            except Exception as e:
                logger.error(f"[{self.operation}] undo '{compensation.description}' failed: {e}")
                errors.append(e)
            else:
                logger.debug(f"[{self.operation}] undone: {compensation.description}")
        self.pending_events.clear()
        self.rollback_errors = errors
        return errors

    def close(self, status: TransactionStatus, reason: Optional[str] = None) -> None:
        """Record the outcome. A transaction closes once."""
        if not self.is_open:
            raise RuntimeError(
                f"transaction {self.transaction_id} already closed as {self.status.value}"
            )
        self.status = status
        self.finished_at = _now()
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transaction_id": self.transaction_id,
            "operation": self.operation,
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "events": [e.name for e in self.pending_events],
            "reason": self.reason,
            "rollback_errors": [str(e) for e in self.rollback_errors],
        }
