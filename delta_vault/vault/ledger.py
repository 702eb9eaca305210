"""
Share Ledger.

Fungible balance bookkeeping for vault shares.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..core import InsufficientBalanceError, ZeroAddressError, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class LedgerSnapshot:
    """Point-in-time copy of ledger state, used for rollback."""

    balances: Dict[str, int] = field(default_factory=dict)
    allowances: Dict[Tuple[str, str], int] = field(default_factory=dict)
    total_supply: int = 0


class ShareLedger:
    """
    Share balances and total supply.

    Accounts with a zero balance are dropped, so the ledger never holds
    dust entries: total_supply == 0 exactly when no account holds shares,
    and the balances always sum to total_supply.

    Example:
        >>> ledger = ShareLedger()
        >>> ledger.mint("alice", 100)
        >>> ledger.transfer("alice", "bob", 40)
        >>> ledger.balance_of("bob")
        40
    """

    def __init__(self) -> None:
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._total_supply: int = 0

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def total_supply(self) -> int:
        """Total shares outstanding."""
        return self._total_supply

    def balance_of(self, account: str) -> int:
        """Shares held by account."""
        return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        """Shares spender may move on behalf of owner."""
        return self._allowances.get((owner, spender), 0)

    def holders(self) -> List[str]:
        """Accounts with a positive balance."""
        return list(self._balances)

    # =========================================================================
    # Mutations
    # =========================================================================

    def mint(self, account: str, amount: int) -> None:
        """Create amount shares for account."""
        self._require_account(account)
        self._check_amount(amount)
        if amount == 0:
            return
        self._balances[account] = self.balance_of(account) + amount
        self._total_supply += amount
        logger.debug(f"Minted {amount} shares to {account}")

    def burn(self, account: str, amount: int) -> None:
        """Destroy amount shares held by account."""
        self._check_amount(amount)
        self._debit(account, amount)
        self._total_supply -= amount
        logger.debug(f"Burned {amount} shares from {account}")

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move amount shares from sender to recipient."""
        self._require_account(recipient)
        self._check_amount(amount)
        self._debit(sender, amount)
        if amount:
            self._balances[recipient] = self.balance_of(recipient) + amount

    def approve(self, owner: str, spender: str, amount: int) -> None:
        """Set the allowance of spender over owner's shares."""
        self._require_account(owner)
        self._require_account(spender)
        self._check_amount(amount)
        if amount:
            self._allowances[(owner, spender)] = amount
        else:
            self._allowances.pop((owner, spender), None)

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> None:
        """Move owner's shares to recipient, spending spender's allowance."""
        allowed = self.allowance(owner, spender)
        if allowed < amount:
            raise InsufficientBalanceError(
                f"Allowance {allowed} below {amount}",
                details={"owner": owner, "spender": spender},
            )
        self.transfer(owner, recipient, amount)
        self.approve(owner, spender, allowed - amount)

    # =========================================================================
    # Rollback support
    # =========================================================================

    def snapshot(self) -> LedgerSnapshot:
        """Capture the current ledger state."""
        return LedgerSnapshot(
            balances=dict(self._balances),
            allowances=dict(self._allowances),
            total_supply=self._total_supply,
        )

    def restore(self, snapshot: LedgerSnapshot) -> None:
        """Restore a previously captured ledger state."""
        self._balances = dict(snapshot.balances)
        self._allowances = dict(snapshot.allowances)
        self._total_supply = snapshot.total_supply

    # =========================================================================
    # Helpers
    # =========================================================================

    def _debit(self, account: str, amount: int) -> None:
        balance = self.balance_of(account)
        if balance < amount:
            raise InsufficientBalanceError(
                f"{account} holds {balance} shares, needs {amount}",
                details={"account": account, "balance": balance, "required": amount},
            )
        remaining = balance - amount
        if remaining:
            self._balances[account] = remaining
        else:
            self._balances.pop(account, None)

    @staticmethod
    def _check_amount(amount: int) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise ValueError(f"Share amount must be a non-negative int, got {amount!r}")

    @staticmethod
    def _require_account(account: str) -> None:
        if not account:
            raise ZeroAddressError("Account must not be empty")
