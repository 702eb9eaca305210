"""
Delta-Neutral Vault.

Share accounting and capital allocation for a vault that pools a base asset,
deploys it across a spot and a perp strategy, and keeps net directional
exposure near zero through an external position manager.

Includes:
- DeltaNeutralVault: deposit / withdraw / rebalance with rollback on failure
- ShareLedger: fungible share balances
- StrategyAdapter / PositionManager: collaborator contracts
"""

from .config import VaultConfig, load_config
from .vault import (
    DeltaNeutralVault,
    EventBus,
    PositionManager,
    ShareLedger,
    StrategyAdapter,
)

__version__ = "0.1.0"

__all__ = [
    "DeltaNeutralVault",
    "ShareLedger",
    "EventBus",
    "StrategyAdapter",
    "PositionManager",
    "VaultConfig",
    "load_config",
]
