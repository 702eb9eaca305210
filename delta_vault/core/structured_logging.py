"""
Structured vault logs.

Two JSON-lines channels sit beside the human-readable log: ``vault`` records
committed and rolled back operations, ``audit`` records administrative
actions and denied calls. Every line carries the correlation id of the vault
operation that produced it.
"""

import json
import logging
import os
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from enum import Enum
from functools import wraps
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TypeVar, Union

from .logger import get_log_dir

correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

F = TypeVar("F", bound=Callable[..., Any])


class LogChannel(Enum):
    """JSONL file a structured logger writes to."""

    VAULT = "vault"
    AUDIT = "audit"


class EventType(Enum):
    """Value of the ``event_type`` field."""

    # vault channel
    DEPOSIT = "vault.deposit"
    WITHDRAW = "vault.withdraw"
    REBALANCE = "vault.rebalance"
    SHARES_TRANSFERRED = "vault.shares_transferred"
    TX_ROLLED_BACK = "vault.tx_rolled_back"
    TX_ROLLBACK_FAILED = "vault.tx_rollback_failed"

    # audit channel
    PAUSE_CHANGED = "admin.pause_changed"
    REFERENCE_CHANGED = "admin.reference_changed"
    OWNERSHIP_TRANSFERRED = "admin.ownership_transferred"
    ACCESS_DENIED = "admin.access_denied"


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    Keys: timestamp, level, channel, event_type, message, logger, context
    (correlation_id, account) and data (the keyword fields of the call).
    """

    def __init__(self, channel: LogChannel):
        super().__init__()
        self._channel = channel

    def format(self, record: logging.LogRecord) -> str:
        context: Dict[str, Any] = {}
        correlation_id = correlation_id_var.get()
        if correlation_id:
            context["correlation_id"] = correlation_id
        account = getattr(record, "account", None)
        if account:
            context["account"] = account

        event_type = getattr(record, "event_type", "log.message")
        if isinstance(event_type, EventType):
            event_type = event_type.value

        return json.dumps(
            {
                "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
                "level": record.levelname,
                "channel": self._channel.value,
                "event_type": event_type,
                "message": record.getMessage(),
                "logger": record.name,
                "context": context,
                "data": getattr(record, "data", {}),
            },
            default=str,
        )


class StructuredLogger:
    """
    Writes JSON lines to <log dir>/<channel>.jsonl.

    Set VAULT_LOG_JSON_CONSOLE=true to mirror the lines on stderr.
    """

    def __init__(
        self,
        name: str,
        channel: LogChannel,
        level: int = logging.INFO,
        log_dir: Optional[Path] = None,
    ):
        self._channel = channel
        self._logger = logging.getLogger(f"delta_vault.structured.{channel.value}.{name}")
        self._logger.setLevel(level)
        self._logger.propagate = False

        if self._logger.handlers:
            return

        log_dir = log_dir or get_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / f"{channel.value}.jsonl",
            maxBytes=50 * 1024 * 1024,
            backupCount=10,
            encoding="utf-8",
        )
        file_handler.setFormatter(JSONFormatter(channel))
        self._logger.addHandler(file_handler)

        if os.getenv("VAULT_LOG_JSON_CONSOLE", "false").lower() == "true":
            mirror = logging.StreamHandler(sys.stderr)
            mirror.setFormatter(JSONFormatter(channel))
            self._logger.addHandler(mirror)

    def emit(
        self,
        level: int,
        event_type: Union[str, EventType],
        message: str,
        account: Optional[str] = None,
        **data: Any,
    ) -> None:
        """Write one record; data becomes the record's ``data`` object."""
        self._logger.log(
            level,
            message,
            extra={"event_type": event_type, "account": account, "data": data},
        )


class VaultLogger(StructuredLogger):
    """Vault channel: outcomes of deposit, withdraw, rebalance and share moves."""

    def __init__(self, name: str, log_dir: Optional[Path] = None):
        super().__init__(name, LogChannel.VAULT, log_dir=log_dir)

    def deposit(self, owner: str, assets: int, shares: int, spot: int, perp: int) -> None:
        self.emit(
            logging.INFO,
            EventType.DEPOSIT,
            f"Deposit: {owner} {assets} assets -> {shares} shares",
            account=owner,
            assets=assets,
            shares=shares,
            spot_amount=spot,
            perp_amount=perp,
        )

    def withdraw(self, owner: str, assets: int, shares: int, legs: Dict[str, int]) -> None:
        self.emit(
            logging.INFO,
            EventType.WITHDRAW,
            f"Withdraw: {owner} {shares} shares -> {assets} assets",
            account=owner,
            assets=assets,
            shares=shares,
            legs=legs,
        )

    def rebalance(
        self,
        old_delta: int,
        new_delta: int,
        spot_adjustment: int,
        perp_adjustment: int,
        applied: bool,
    ) -> None:
        self.emit(
            logging.INFO,
            EventType.REBALANCE,
            f"Rebalance: delta {old_delta} -> {new_delta}",
            old_delta=old_delta,
            new_delta=new_delta,
            spot_adjustment=spot_adjustment,
            perp_adjustment=perp_adjustment,
            applied=applied,
        )

    def shares_transferred(self, sender: str, recipient: str, shares: int) -> None:
        self.emit(
            logging.INFO,
            EventType.SHARES_TRANSFERRED,
            f"Shares: {sender} -> {recipient} {shares}",
            account=sender,
            recipient=recipient,
            shares=shares,
        )

    def rolled_back(self, operation: str, transaction_id: str, reason: str) -> None:
        self.emit(
            logging.WARNING,
            EventType.TX_ROLLED_BACK,
            f"Rolled back {operation} ({transaction_id[:8]}): {reason}",
            operation=operation,
            transaction_id=transaction_id,
            reason=reason,
        )

    def rollback_failed(self, operation: str, transaction_id: str, errors: list) -> None:
        """Compensations failed; on-chain-equivalent state may be inconsistent."""
        self.emit(
            logging.CRITICAL,
            EventType.TX_ROLLBACK_FAILED,
            f"Rollback of {operation} ({transaction_id[:8]}) incomplete",
            operation=operation,
            transaction_id=transaction_id,
            errors=[str(e) for e in errors],
        )


class AuditLogger(StructuredLogger):
    """Audit channel: who changed what, and who was turned away."""

    def __init__(self, name: str, log_dir: Optional[Path] = None):
        super().__init__(name, LogChannel.AUDIT, log_dir=log_dir)

    def reference_changed(
        self,
        reference: str,
        old_value: Any,
        new_value: Any,
        changed_by: Optional[str] = None,
    ) -> None:
        self.emit(
            logging.INFO,
            EventType.REFERENCE_CHANGED,
            f"Reference changed: {reference}",
            account=changed_by,
            reference=reference,
            old_value=repr(old_value),
            new_value=repr(new_value),
        )

    def pause_changed(self, paused: bool, changed_by: Optional[str] = None) -> None:
        self.emit(
            logging.WARNING,
            EventType.PAUSE_CHANGED,
            f"Vault {'paused' if paused else 'unpaused'}",
            account=changed_by,
            paused=paused,
        )

    def ownership_transferred(self, previous_owner: str, new_owner: str) -> None:
        self.emit(
            logging.INFO,
            EventType.OWNERSHIP_TRANSFERRED,
            f"Ownership transferred: {previous_owner} -> {new_owner}",
            account=previous_owner,
            previous_owner=previous_owner,
            new_owner=new_owner,
        )

    def access_denied(self, action: str, caller: Optional[str]) -> None:
        self.emit(
            logging.WARNING,
            EventType.ACCESS_DENIED,
            f"Access denied: {action} by {caller}",
            account=caller,
            action=action,
        )


# =============================================================================
# Correlation IDs
# =============================================================================


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Bind correlation_id (or a fresh uuid4) to the current context."""
    cid = correlation_id or str(uuid.uuid4())
    correlation_id_var.set(cid)
    return cid


def get_correlation_id() -> Optional[str]:
    return correlation_id_var.get()


def clear_request_context() -> None:
    correlation_id_var.set(None)


def with_correlation_id(func: F) -> F:
    """
    Run func under a correlation id.

    An id already bound by the caller is kept. Otherwise a fresh one is bound
    for the duration of the call, so each top-level vault operation gets its
    own.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if correlation_id_var.get():
            return func(*args, **kwargs)
        token = correlation_id_var.set(str(uuid.uuid4()))
        try:
            return func(*args, **kwargs)
        finally:
            correlation_id_var.reset(token)

    return wrapper  # type: ignore


# =============================================================================
# Shared instances
# =============================================================================

_vault_loggers: Dict[str, VaultLogger] = {}
_audit_loggers: Dict[str, AuditLogger] = {}


def get_vault_logger(name: str = "vault") -> VaultLogger:
    """Process-wide VaultLogger for name."""
    if name not in _vault_loggers:
        _vault_loggers[name] = VaultLogger(name)
    return _vault_loggers[name]


def get_audit_logger(name: str = "audit") -> AuditLogger:
    """Process-wide AuditLogger for name."""
    if name not in _audit_loggers:
        _audit_loggers[name] = AuditLogger(name)
    return _audit_loggers[name]
