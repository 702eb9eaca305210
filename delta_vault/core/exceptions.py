"""
Custom exceptions for the delta-neutral vault.

Exception hierarchy:
    VaultError (base)
    ├── ZeroAmountError
    ├── ZeroAddressError
    ├── DepositTooSmallError
    ├── StrategyNotSetError
    ├── PositionManagerNotSetError
    ├── InsufficientBalanceError
    ├── StrategyDepositFailedError
    ├── VaultPausedError
    ├── RebalanceNotNeededError
    ├── InvalidRebalanceSizingError
    ├── AccessError
    │   ├── NotOwnerError
    │   └── NotPositionManagerError
    ├── ReentrantCallError
    └── RollbackError

Every error aborts the whole operation; the vault restores its state before
the error reaches the caller.
"""

from typing import Any


class VaultError(Exception):
    """Base exception for all vault errors."""

    default_message = "Vault error occurred"
    default_code: str | None = None

    def __init__(
        self,
        message: str | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.code:
            parts.append(f"[{self.code}]")
        if self.details:
            parts.append(f"Details: {self.details}")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"details={self.details!r})"
        )


class ZeroAmountError(VaultError):
    """A zero amount was supplied or produced where a positive one is required."""

    default_message = "Amount must be greater than zero"
    default_code = "ZeroAmount"


class ZeroAddressError(VaultError):
    """A null reference was supplied where a live reference is required."""

    default_message = "Reference must not be empty"
    default_code = "ZeroAddress"


class DepositTooSmallError(VaultError):
    """Deposit below the dust floor."""

    default_message = "Deposit below minimum"
    default_code = "DepositTooSmall"

    def __init__(
        self,
        assets: int,
        min_deposit: int,
        message: str | None = None,
    ):
        super().__init__(
            message or f"Deposit of {assets} is below minimum {min_deposit}",
            details={"assets": assets, "min_deposit": min_deposit},
        )
        self.assets = assets
        self.min_deposit = min_deposit


class StrategyNotSetError(VaultError):
    """A required strategy reference is missing."""

    default_message = "Strategy not set"
    default_code = "StrategyNotSet"


class PositionManagerNotSetError(VaultError):
    """The position manager reference is missing."""

    default_message = "Position manager not set"
    default_code = "PositionManagerNotSet"


class InsufficientBalanceError(VaultError):
    """Requested amount exceeds the available balance, or an adapter short-filled."""

    default_message = "Insufficient balance"
    default_code = "InsufficientBalance"


class StrategyDepositFailedError(VaultError):
    """A strategy accepted less than requested on deposit."""

    default_message = "Strategy deposit failed"
    default_code = "StrategyDepositFailed"

    def __init__(
        self,
        leg: str,
        requested: int,
        accepted: Any,
        message: str | None = None,
    ):
        super().__init__(
            message or f"{leg} strategy accepted {accepted} of {requested}",
            details={"leg": leg, "requested": requested, "accepted": accepted},
        )
        self.leg = leg
        self.requested = requested
        self.accepted = accepted


class VaultPausedError(VaultError):
    """Mutating call attempted while the vault is paused."""

    default_message = "Vault is paused"
    default_code = "VaultPaused"


class RebalanceNotNeededError(VaultError):
    """Rebalance requested but the position manager reports it is not needed."""

    default_message = "Rebalance not needed"
    default_code = "RebalanceNotNeeded"


class InvalidRebalanceSizingError(VaultError):
    """Rebalance sizing cannot be applied as a transfer between legs."""

    default_message = "Rebalance sizing is not a transfer between legs"
    default_code = "InvalidRebalanceSizing"


class AccessError(VaultError):
    """Base exception for privileged calls from the wrong caller."""

    default_message = "Access denied"


class NotOwnerError(AccessError):
    """Owner-only call attempted by another account."""

    default_message = "Caller is not the owner"
    default_code = "NotOwner"


class NotPositionManagerError(AccessError):
    """Position-manager-gated call attempted by another account."""

    default_message = "Caller is not the position manager"
    default_code = "NotPositionManager"


class ReentrantCallError(VaultError):
    """A guarded entry point was entered while another one is executing."""

    default_message = "Reentrant call"
    default_code = "ReentrantCall"


class RollbackError(VaultError):
    """Compensating actions failed while unwinding an aborted operation."""

    default_message = "Rollback incomplete"
    default_code = "RollbackFailed"
