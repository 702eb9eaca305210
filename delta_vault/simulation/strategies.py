"""
Simulated Strategy Adapter.

Holds its sub-allocation as a token balance under its own address and
pulls/pushes base asset from/to the vault, the way an on-chain adapter
pulls an approved amount.
"""

from ..core import InsufficientBalanceError, get_logger
from .token import InMemoryAsset

logger = get_logger(__name__)


class SimulatedStrategy:
    """
    In-memory strategy with manual yield and loss.

    Example:
        >>> spot = SimulatedStrategy(usdc, "spot-lending", vault.address)
        >>> spot.accrue_yield(15)
    """

    def __init__(self, asset: InMemoryAsset, address: str, vault_address: str):
        self._asset = asset
        self._address = address
        self._vault_address = vault_address

    @property
    def address(self) -> str:
        return self._address

    def deposit(self, amount: int) -> int:
        """Pull amount from the vault."""
        self._asset.transfer(self._vault_address, self._address, amount)
        return amount

    def withdraw(self, amount: int) -> int:
        """Push amount back to the vault."""
        balance = self.total_assets()
        if amount > balance:
            raise InsufficientBalanceError(
                f"{self._address} holds {balance}, asked for {amount}",
                details={"strategy": self._address, "balance": balance, "requested": amount},
            )
        self._asset.transfer(self._address, self._vault_address, amount)
        return amount

    def total_assets(self) -> int:
        return self._asset.balance_of(self._address)

    def accrue_yield(self, amount: int) -> None:
        """Grow the strategy balance by amount."""
        self._asset.mint(self._address, amount)
        logger.debug(f"{self._address} accrued {amount}")

    def realize_loss(self, amount: int) -> None:
        """Shrink the strategy balance by amount."""
        self._asset.burn(self._address, min(amount, self.total_assets()))
        logger.debug(f"{self._address} lost {amount}")

    def __repr__(self) -> str:
        return f"SimulatedStrategy({self._address!r})"
