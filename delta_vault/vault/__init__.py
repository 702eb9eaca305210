"""
Vault Components.

Share accounting, capital allocation across strategy legs, and the guarded
state machine wrapping them.
"""

from .events import (
    DepositEvent,
    EmergencyPauseEvent,
    EventBus,
    OwnershipTransferredEvent,
    PositionManagerUpdatedEvent,
    RebalanceEvent,
    SharesTransferredEvent,
    StrategyUpdatedEvent,
    VaultEvent,
    WithdrawEvent,
)
from .guard import ReentrancyGuard
from .interfaces import AssetToken, PositionManager, StrategyAdapter
from .ledger import LedgerSnapshot, ShareLedger
from .pricing import (
    convert_to_assets,
    convert_to_shares,
    cover_shortfall,
    proportional_withdrawals,
    split_deposit,
)
from .transaction import TransactionStatus, VaultTransaction
from .vault import DeltaNeutralVault

__all__ = [
    # Vault
    "DeltaNeutralVault",
    # Ledger
    "ShareLedger",
    "LedgerSnapshot",
    # Interfaces
    "StrategyAdapter",
    "PositionManager",
    "AssetToken",
    # Pricing
    "convert_to_shares",
    "convert_to_assets",
    "split_deposit",
    "proportional_withdrawals",
    "cover_shortfall",
    # Guards and transactions
    "ReentrancyGuard",
    "VaultTransaction",
    "TransactionStatus",
    # Events
    "EventBus",
    "VaultEvent",
    "DepositEvent",
    "WithdrawEvent",
    "RebalanceEvent",
    "EmergencyPauseEvent",
    "StrategyUpdatedEvent",
    "PositionManagerUpdatedEvent",
    "OwnershipTransferredEvent",
    "SharesTransferredEvent",
]
