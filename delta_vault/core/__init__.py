"""
Core module for the delta-neutral vault.

Provides logging utilities and the vault exception hierarchy.
"""

from .exceptions import (
    AccessError,
    DepositTooSmallError,
    InsufficientBalanceError,
    InvalidRebalanceSizingError,
    NotOwnerError,
    NotPositionManagerError,
    PositionManagerNotSetError,
    ReentrantCallError,
    RebalanceNotNeededError,
    RollbackError,
    StrategyDepositFailedError,
    StrategyNotSetError,
    VaultError,
    VaultPausedError,
    ZeroAddressError,
    ZeroAmountError,
)
from .logger import setup_logger, get_logger
from .structured_logging import (
    # Loggers
    StructuredLogger,
    VaultLogger,
    AuditLogger,
    # Logger factories
    get_vault_logger,
    get_audit_logger,
    # Types
    LogChannel,
    EventType,
    # Context management
    set_correlation_id,
    get_correlation_id,
    clear_request_context,
    with_correlation_id,
)

__all__ = [
    # Basic logging
    "setup_logger",
    "get_logger",
    # Structured logging
    "StructuredLogger",
    "VaultLogger",
    "AuditLogger",
    "get_vault_logger",
    "get_audit_logger",
    "LogChannel",
    "EventType",
    "set_correlation_id",
    "get_correlation_id",
    "clear_request_context",
    "with_correlation_id",
    # Exceptions
    "VaultError",
    "ZeroAmountError",
    "ZeroAddressError",
    "DepositTooSmallError",
    "StrategyNotSetError",
    "PositionManagerNotSetError",
    "InsufficientBalanceError",
    "StrategyDepositFailedError",
    "VaultPausedError",
    "RebalanceNotNeededError",
    "InvalidRebalanceSizingError",
    "AccessError",
    "NotOwnerError",
    "NotPositionManagerError",
    "ReentrantCallError",
    "RollbackError",
]
