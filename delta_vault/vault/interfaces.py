"""
Collaborator Interfaces.

Capability contracts the vault consumes but does not implement. Every
amount is an integer in base-asset units. The vault treats each call across
these boundaries as untrusted: reported amounts are verified against the
requested amounts before any state is committed.
"""

from typing import Protocol, Tuple, runtime_checkable


@runtime_checkable
class StrategyAdapter(Protocol):
    """
    A pluggable unit holding and growing a sub-allocation of the base asset.

    Obligations:
    - deposit() accepts the full amount or raises
    - withdraw() returns exactly the requested amount or raises
    - total_assets() only grows between calls absent a withdraw, and reflects
      the balance as soon as deposit()/withdraw() return
    """

    def deposit(self, amount: int) -> int:
        """Deploy amount of base asset, returning the accepted amount."""
        ...

    def withdraw(self, amount: int) -> int:
        """Return amount of base asset to the vault, returning the amount sent."""
        ...

    def total_assets(self) -> int:
        """Live balance held by the strategy, including accrued yield."""
        ...


@runtime_checkable
class PositionManager(Protocol):
    """
    Oracle/controller for net directional exposure.

    Delta sign convention: positive = net long, negative = net short,
    zero = neutral.
    """

    def is_rebalance_needed(self) -> bool:
        """Whether current delta is outside tolerance."""
        ...

    def get_current_delta(self) -> int:
        """Signed net directional exposure."""
        ...

    def calculate_rebalance_amounts(self) -> Tuple[int, int]:
        """Sizing as (spot_adjustment, perp_adjustment)."""
        ...

    def update_position(self, spot_amount: int, perp_amount: int) -> None:
        """Record a change of capital in each leg."""
        ...


@runtime_checkable
class AssetToken(Protocol):
    """Transfer primitive of the base asset."""

    def balance_of(self, account: str) -> int:
        """Balance held by account."""
        ...

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move amount from sender to recipient, raising on failure."""
        ...
