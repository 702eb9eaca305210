"""
In-memory base asset.
"""

from typing import Dict

from ..core import InsufficientBalanceError, ZeroAddressError


class InMemoryAsset:
    """
    Minimal fungible token for simulations and tests.

    Example:
        >>> usdc = InMemoryAsset("USDC")
        >>> usdc.mint("alice", 1_000)
        >>> usdc.transfer("alice", "vault", 400)
        >>> usdc.balance_of("vault")
        400
    """

    def __init__(self, symbol: str = "USDC"):
        self.symbol = symbol
        self._balances: Dict[str, int] = {}
        self._total_supply = 0

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def mint(self, account: str, amount: int) -> None:
        """Create amount tokens for account."""
        self._check(account, amount)
        self._balances[account] = self.balance_of(account) + amount
        self._total_supply += amount

    def burn(self, account: str, amount: int) -> None:
        """Destroy amount tokens held by account."""
        self._check(account, amount)
        self._debit(account, amount)
        self._total_supply -= amount

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move amount tokens from sender to recipient."""
        self._check(sender, amount)
        if not recipient:
            raise ZeroAddressError("Recipient must not be empty")
        self._debit(sender, amount)
        self._balances[recipient] = self.balance_of(recipient) + amount

    def _debit(self, account: str, amount: int) -> None:
        balance = self.balance_of(account)
        if balance < amount:
            raise InsufficientBalanceError(
                f"{account} holds {balance} {self.symbol}, needs {amount}",
                details={"account": account, "balance": balance, "required": amount},
            )
        self._balances[account] = balance - amount

    @staticmethod
    def _check(account: str, amount: int) -> None:
        if not account:
            raise ZeroAddressError("Account must not be empty")
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise ValueError(f"Token amount must be a non-negative int, got {amount!r}")

    def __repr__(self) -> str:
        return f"InMemoryAsset({self.symbol!r}, supply={self._total_supply})"
