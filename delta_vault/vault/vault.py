"""
Delta-Neutral Vault.

Accepts a base asset, issues shares against a pooled balance, deploys the
pool across a spot and a perp strategy, and triggers delta rebalances
through an external position manager.
"""

from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Deque, Dict, Iterator, List, Optional, Tuple

from ..config import RebalanceAccess, RebalancePolicy, VaultConfig
from ..constants import PERP_LEG, SPOT_LEG
from ..core import (
    DepositTooSmallError,
    InsufficientBalanceError,
    InvalidRebalanceSizingError,
    NotPositionManagerError,
    PositionManagerNotSetError,
    RebalanceNotNeededError,
    RollbackError,
    StrategyDepositFailedError,
    StrategyNotSetError,
    ZeroAddressError,
    ZeroAmountError,
    get_audit_logger,
    get_logger,
    get_vault_logger,
    with_correlation_id,
)
from .events import (
    DepositEvent,
    EmergencyPauseEvent,
    EventBus,
    OwnershipTransferredEvent,
    PositionManagerUpdatedEvent,
    RebalanceEvent,
    SharesTransferredEvent,
    StrategyUpdatedEvent,
    WithdrawEvent,
)
from .guard import ReentrancyGuard, non_reentrant, only_owner, when_not_paused
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

logger = get_logger(__name__)


@dataclass(frozen=True)
class VaultSnapshot:
    """Internal state restored when an operation is rolled back."""

    ledger: LedgerSnapshot
    idle_assets: int


def _is_amount(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class DeltaNeutralVault:
    """
    Multi-strategy vault with share accounting.

    Every mutating entry point takes the acting account as its first
    argument, runs under the reentrancy lock, and either commits in full or
    leaves all state as it was. Events are published only after commit.

    Example:
        >>> vault = DeltaNeutralVault(asset, VaultConfig(owner="admin", min_deposit=1))
        >>> vault.set_spot_strategy("admin", spot)
        >>> vault.set_perp_strategy("admin", perp)
        >>> shares = vault.deposit("alice", 100)
        >>> vault.preview_withdraw(shares)
        100
    """

    def __init__(
        self,
        asset: AssetToken,
        config: VaultConfig,
        address: str = "vault",
        event_bus: Optional[EventBus] = None,
    ):
        """
        Initialize the vault.

        Args:
            asset: Base asset transfer primitive
            config: Vault configuration (owner, dust floor, precision, policies)
            address: Account under which the vault holds base asset
            event_bus: Event bus to publish on (created if not provided)
        """
        if asset is None:
            raise ZeroAddressError("Asset must not be empty")
        if not address:
            raise ZeroAddressError("Vault address must not be empty")

        self._asset = asset
        self._config = config
        self._address = address
        self._owner = config.owner

        self._ledger = ShareLedger()
        self._idle_assets: int = 0
        self._paused: bool = False

        self._spot_strategy: Optional[StrategyAdapter] = None
        self._perp_strategy: Optional[StrategyAdapter] = None
        self._position_manager: Optional[PositionManager] = None

        self._guard = ReentrancyGuard()
        self._events = event_bus or EventBus(max_history=config.event_history_size)
        self._transactions: Deque[VaultTransaction] = deque(
            maxlen=config.transaction_history_size
        )

        self._vault_log = get_vault_logger()
        self._audit_log = get_audit_logger()

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def address(self) -> str:
        """Account holding the vault's idle base asset."""
        return self._address

    @property
    def owner(self) -> str:
        """Administrative owner."""
        return self._owner

    @property
    def config(self) -> VaultConfig:
        return self._config

    @property
    def asset(self) -> AssetToken:
        return self._asset

    @property
    def events(self) -> EventBus:
        """Bus on which committed events are published."""
        return self._events

    @property
    def idle_assets(self) -> int:
        """Base asset held by the vault and not deployed."""
        return self._idle_assets

    @property
    def spot_strategy(self) -> Optional[StrategyAdapter]:
        return self._spot_strategy

    @property
    def perp_strategy(self) -> Optional[StrategyAdapter]:
        return self._perp_strategy

    @property
    def position_manager(self) -> Optional[PositionManager]:
        return self._position_manager

    @property
    def transaction_history(self) -> List[VaultTransaction]:
        """Recent transactions, oldest first."""
        return list(self._transactions)

    # =========================================================================
    # Read-only Operations
    # =========================================================================

    def total_assets(self) -> int:
        """
        Live valuation: idle balance plus both strategies' balances.

        Degrades to the idle balance while either strategy is unset.
        """
        if self._spot_strategy is None or self._perp_strategy is None:
            return self._idle_assets
        return (
            self._idle_assets
            + self._spot_strategy.total_assets()
            + self._perp_strategy.total_assets()
        )

    def total_shares(self) -> int:
        """Shares outstanding."""
        return self._ledger.total_supply

    def shares_of(self, owner: str) -> int:
        """Shares held by owner."""
        return self._ledger.balance_of(owner)

    def share_allowance(self, owner: str, spender: str) -> int:
        """Shares spender may move on behalf of owner."""
        return self._ledger.allowance(owner, spender)

    def is_paused(self) -> bool:
        return self._paused

    def preview_deposit(self, assets: int) -> int:
        """
        Shares a deposit of assets would mint at the current valuation.

        Raises:
            ZeroAmountError: assets is not positive, or would mint zero shares
        """
        self._require_amount(assets, "assets")
        return convert_to_shares(assets, self._ledger.total_supply, self.total_assets())

    def preview_withdraw(self, shares: int) -> int:
        """
        Assets shares would redeem at the current valuation.

        Raises:
            ZeroAmountError: shares is not positive
        """
        self._require_amount(shares, "shares")
        if self._ledger.total_supply == 0:
            return 0
        return convert_to_assets(shares, self._ledger.total_supply, self.total_assets())

    def get_current_delta(self) -> int:
        """Net directional exposure reported by the position manager."""
        return self._require_position_manager().get_current_delta()

    def status(self) -> Dict[str, Any]:
        """Summary of vault state."""
        total_shares = self._ledger.total_supply
        total_assets = self.total_assets()
        legs = {}
        for leg, strategy in self._strategies().items():
            legs[leg] = strategy.total_assets() if strategy is not None else None
        return {
            "address": self._address,
            "owner": self._owner,
            "paused": self._paused,
            "total_assets": total_assets,
            "total_shares": total_shares,
            "idle_assets": self._idle_assets,
            "legs": legs,
            "position_manager_set": self._position_manager is not None,
            "holders": {h: self._ledger.balance_of(h) for h in self._ledger.holders()},
        }

    # =========================================================================
    # Deposit / Withdraw
    # =========================================================================

    @with_correlation_id
    @non_reentrant
    @when_not_paused
    def deposit(self, caller: str, assets: int) -> int:
        """
        Deposit assets and mint shares to caller.

        Shares are priced against the valuation before the transfer. The
        deposit is split 50/50 between the legs, any odd unit going to perp.

        Args:
            caller: Depositing account
            assets: Amount of base asset

        Returns:
            Shares minted

        Raises:
            ZeroAmountError: assets is zero, or would mint zero shares
            DepositTooSmallError: assets below the configured dust floor
            StrategyNotSetError: either strategy is unset
            VaultPausedError: vault is paused
            StrategyDepositFailedError: a strategy accepted less than requested
        """
        self._require_account(caller)
        self._require_amount(assets, "assets")
        if assets < self._config.min_deposit:
            raise DepositTooSmallError(assets, self._config.min_deposit)
        spot, perp = self._require_strategies()

        shares = convert_to_shares(assets, self._ledger.total_supply, self.total_assets())
        spot_amount, perp_amount = split_deposit(assets)

        with self._transaction("deposit") as tx:
            self._asset.transfer(caller, self._address, assets)
            tx.on_rollback(
                f"refund {assets} to {caller}",
                lambda: self._asset.transfer(self._address, caller, assets),
            )
            self._idle_assets += assets

            self._ledger.mint(caller, shares)

            self._deploy(tx, SPOT_LEG, spot, spot_amount)
            self._deploy(tx, PERP_LEG, perp, perp_amount)

            if self._position_manager is not None:
                self._position_manager.update_position(spot_amount, perp_amount)

            tx.emit(DepositEvent(owner=caller, assets=assets, shares=shares))

        self._vault_log.deposit(caller, assets, shares, spot_amount, perp_amount)
        logger.info(
            f"Deposit: {caller} {assets} -> {shares} shares "
            f"(spot={spot_amount}, perp={perp_amount})"
        )
        return shares

    @with_correlation_id
    @non_reentrant
    @when_not_paused
    def withdraw(self, caller: str, shares: int) -> int:
        """
        Burn shares and pay caller their value in base asset.

        Shares are burned before any strategy is touched. Capital is pulled
        from the legs in proportion to their balances.

        Args:
            caller: Withdrawing account
            shares: Shares to burn

        Returns:
            Assets paid out

        Raises:
            ZeroAmountError: shares is zero, or redeems zero assets
            InsufficientBalanceError: caller holds fewer shares, or a strategy
                returned less than requested
            VaultPausedError: vault is paused
        """
        self._require_account(caller)
        self._require_amount(shares, "shares")
        balance = self._ledger.balance_of(caller)
        if balance < shares:
            raise InsufficientBalanceError(
                f"{caller} holds {balance} shares, requested {shares}",
                details={"account": caller, "balance": balance, "requested": shares},
            )

        assets = self.preview_withdraw(shares)
        if assets == 0:
            raise ZeroAmountError(f"Withdrawal of {shares} shares redeems zero assets")

        with self._transaction("withdraw") as tx:
            self._ledger.burn(caller, shares)

            pulled = self._pull_proportional(tx, assets)

            if self._idle_assets < assets:
                raise InsufficientBalanceError(
                    f"Vault holds {self._idle_assets} idle, owes {assets}",
                    details={"idle_assets": self._idle_assets, "assets": assets},
                )
            self._idle_assets -= assets
            self._asset.transfer(self._address, caller, assets)

            tx.emit(WithdrawEvent(owner=caller, assets=assets, shares=shares))

        self._vault_log.withdraw(caller, assets, shares, pulled)
        logger.info(f"Withdraw: {caller} {shares} shares -> {assets} (legs={pulled})")
        return assets

    # =========================================================================
    # Rebalance
    # =========================================================================

    @with_correlation_id
    @non_reentrant
    @when_not_paused
    def rebalance(self, caller: str) -> None:
        """
        Apply the position manager's rebalance sizing.

        Under the record_only policy the sizing is queried and recorded in the
        event but no capital moves. Under transfer_between_legs the sizing is
        applied as a transfer from one leg to the other.

        Raises:
            PositionManagerNotSetError: no position manager
            NotPositionManagerError: rebalance access is restricted and caller
                is not the position manager
            RebalanceNotNeededError: position manager reports delta in tolerance
            VaultPausedError: vault is paused
            InvalidRebalanceSizingError: sizing is not a transfer between legs
        """
        manager = self._require_position_manager()
        if self._config.rebalance_access == RebalanceAccess.POSITION_MANAGER:
            if caller != getattr(manager, "address", None):
                self._audit_log.access_denied("rebalance", caller)
                raise NotPositionManagerError(
                    "rebalance is restricted to the position manager",
                    details={"caller": caller},
                )
        if not manager.is_rebalance_needed():
            raise RebalanceNotNeededError()

        with self._transaction("rebalance") as tx:
            old_delta = manager.get_current_delta()
            spot_adjustment, perp_adjustment = manager.calculate_rebalance_amounts()
            self._require_int_values(
                old_delta=old_delta,
                spot_adjustment=spot_adjustment,
                perp_adjustment=perp_adjustment,
            )

            applied = False
            if self._config.rebalance_policy == RebalancePolicy.TRANSFER_BETWEEN_LEGS:
                applied = self._transfer_between_legs(
                    tx, manager, spot_adjustment, perp_adjustment
                )

            new_delta = manager.get_current_delta()
            self._require_int_values(new_delta=new_delta)
            tx.emit(
                RebalanceEvent(
                    old_delta=old_delta,
                    new_delta=new_delta,
                    spot_adjustment=spot_adjustment,
                    perp_adjustment=perp_adjustment,
                    applied=applied,
                )
            )

        self._vault_log.rebalance(old_delta, new_delta, spot_adjustment, perp_adjustment, applied)
        logger.info(
            f"Rebalance: delta {old_delta} -> {new_delta} "
            f"(spot {spot_adjustment}, perp {perp_adjustment}, applied={applied})"
        )

    def _transfer_between_legs(
        self,
        tx: VaultTransaction,
        manager: PositionManager,
        spot_adjustment: Any,
        perp_adjustment: Any,
    ) -> bool:
        """Move capital from the shrinking leg to the growing leg."""
        spot, perp = self._require_strategies()
        self._require_int_values(
            spot_adjustment=spot_adjustment, perp_adjustment=perp_adjustment
        )
        if spot_adjustment + perp_adjustment != 0:
            raise InvalidRebalanceSizingError(
                f"Adjustments ({spot_adjustment}, {perp_adjustment}) do not net to zero",
                details={"spot": spot_adjustment, "perp": perp_adjustment},
            )
        if spot_adjustment == 0:
            return False

        if spot_adjustment < 0:
            source_leg, source, target_leg, target = SPOT_LEG, spot, PERP_LEG, perp
        else:
            source_leg, source, target_leg, target = PERP_LEG, perp, SPOT_LEG, spot
        amount = abs(spot_adjustment)

        available = source.total_assets()
        if available < amount:
            raise InsufficientBalanceError(
                f"{source_leg} strategy holds {available}, rebalance needs {amount}",
                details={"leg": source_leg, "available": available, "required": amount},
            )

        self._withdraw_leg(tx, source_leg, source, amount)
        self._deploy(tx, target_leg, target, amount)
        manager.update_position(spot_adjustment, perp_adjustment)
        return True

    # =========================================================================
    # Share Transfers
    # =========================================================================

    @with_correlation_id
    @non_reentrant
    @when_not_paused
    def transfer_shares(self, caller: str, recipient: str, shares: int) -> None:
        """Move shares from caller to recipient."""
        self._require_account(caller)
        self._require_account(recipient)
        self._require_amount(shares, "shares")
        self._ledger.transfer(caller, recipient, shares)
        self._vault_log.shares_transferred(caller, recipient, shares)
        self._events.publish(
            SharesTransferredEvent(sender=caller, recipient=recipient, shares=shares)
        )

    @non_reentrant
    @when_not_paused
    def approve_shares(self, caller: str, spender: str, shares: int) -> None:
        """Allow spender to move up to shares of caller's shares."""
        self._require_account(caller)
        self._require_account(spender)
        if not _is_amount(shares):
            raise ValueError(f"shares must be a non-negative int, got {shares!r}")
        self._ledger.approve(caller, spender, shares)

    @with_correlation_id
    @non_reentrant
    @when_not_paused
    def transfer_shares_from(
        self,
        caller: str,
        owner: str,
        recipient: str,
        shares: int,
    ) -> None:
        """Move owner's shares to recipient using caller's allowance."""
        self._require_account(caller)
        self._require_account(owner)
        self._require_account(recipient)
        self._require_amount(shares, "shares")
        self._ledger.transfer_from(caller, owner, recipient, shares)
        self._vault_log.shares_transferred(owner, recipient, shares)
        self._events.publish(
            SharesTransferredEvent(sender=owner, recipient=recipient, shares=shares)
        )

    # =========================================================================
    # Administrative Controls
    # =========================================================================

    @non_reentrant
    @only_owner
    def set_spot_strategy(self, caller: str, strategy: StrategyAdapter) -> None:
        """Replace the spot strategy reference."""
        self._set_strategy(caller, SPOT_LEG, strategy)

    @non_reentrant
    @only_owner
    def set_perp_strategy(self, caller: str, strategy: StrategyAdapter) -> None:
        """Replace the perp strategy reference."""
        self._set_strategy(caller, PERP_LEG, strategy)

    @non_reentrant
    @only_owner
    def set_position_manager(self, caller: str, manager: PositionManager) -> None:
        """Replace the position manager reference."""
        if manager is None:
            raise ZeroAddressError("Position manager must not be empty")
        if not isinstance(manager, PositionManager):
            raise TypeError(f"{manager!r} does not implement PositionManager")

        old = self._position_manager
        self._position_manager = manager
        self._audit_log.reference_changed("position_manager", old, manager, caller)
        self._events.publish(
            PositionManagerUpdatedEvent(
                old_manager=repr(old) if old is not None else None,
                new_manager=repr(manager),
            )
        )

    @non_reentrant
    @only_owner
    def emergency_pause(self, caller: str) -> None:
        """Stop all mutating entry points."""
        self._set_paused(caller, True)

    @non_reentrant
    @only_owner
    def emergency_unpause(self, caller: str) -> None:
        """Resume mutating entry points."""
        self._set_paused(caller, False)

    @non_reentrant
    @only_owner
    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        """Hand administrative control to new_owner."""
        if not new_owner:
            raise ZeroAddressError("New owner must not be empty")
        previous = self._owner
        self._owner = new_owner
        self._audit_log.ownership_transferred(previous, new_owner)
        self._events.publish(
            OwnershipTransferredEvent(previous_owner=previous, new_owner=new_owner)
        )

    def _set_strategy(self, caller: str, leg: str, strategy: StrategyAdapter) -> None:
        if strategy is None:
            raise ZeroAddressError(f"{leg} strategy must not be empty")
        if not isinstance(strategy, StrategyAdapter):
            raise TypeError(f"{strategy!r} does not implement StrategyAdapter")

        attr = "_spot_strategy" if leg == SPOT_LEG else "_perp_strategy"
        old = getattr(self, attr)
        if old is not None and old is not strategy:
            stranded = old.total_assets()
            if stranded:
                logger.warning(
                    f"Replacing {leg} strategy that still holds {stranded}; "
                    f"those assets leave the vault valuation"
                )
        setattr(self, attr, strategy)

        self._audit_log.reference_changed(f"{leg}_strategy", old, strategy, caller)
        self._events.publish(
            StrategyUpdatedEvent(
                leg=leg,
                old_strategy=repr(old) if old is not None else None,
                new_strategy=repr(strategy),
            )
        )

    def _set_paused(self, caller: str, paused: bool) -> None:
        self._paused = paused
        self._audit_log.pause_changed(paused, caller)
        logger.warning(f"Vault {'paused' if paused else 'unpaused'} by {caller}")
        self._events.publish(EmergencyPauseEvent(paused=paused))

    # =========================================================================
    # Strategy Interaction
    # =========================================================================

    def _deploy(
        self,
        tx: VaultTransaction,
        leg: str,
        strategy: StrategyAdapter,
        amount: int,
    ) -> None:
        """Hand amount of idle asset to a strategy, requiring full acceptance."""
        if amount == 0:
            return

        accepted = strategy.deposit(amount)
        if _is_amount(accepted) and accepted > 0:
            recall = min(accepted, amount)
            tx.on_rollback(
                f"recall {recall} from {leg}",
                lambda: self._expect_returned(leg, strategy.withdraw(recall), recall),
            )
        if accepted != amount:
            raise StrategyDepositFailedError(leg, amount, accepted)

        self._idle_assets -= amount

    def _withdraw_leg(
        self,
        tx: VaultTransaction,
        leg: str,
        strategy: StrategyAdapter,
        amount: int,
    ) -> None:
        """Pull amount back from a strategy, requiring the exact amount returned."""
        if amount == 0:
            return

        returned = strategy.withdraw(amount)
        if _is_amount(returned) and returned > 0:
            redeposit = min(returned, amount)
            tx.on_rollback(
                f"redeposit {redeposit} into {leg}",
                lambda: self._expect_accepted(leg, strategy.deposit(redeposit), redeposit),
            )
        self._expect_returned(leg, returned, amount)

        self._idle_assets += amount

    def _pull_proportional(self, tx: VaultTransaction, assets: int) -> Dict[str, int]:
        """
        Replenish the idle balance for a payout of assets.

        Each funded leg contributes in proportion to its share of the total
        measured once up front. Rounding leftovers the idle balance cannot
        absorb are drawn from the leg with the most headroom.
        """
        legs = self._funded_strategies()
        if not legs:
            return {}

        balances = {leg: strategy.total_assets() for leg, strategy in legs.items()}
        total = self._idle_assets + sum(balances.values())

        amounts = proportional_withdrawals(assets, total, balances, self._config.precision)
        shortfall = assets - self._idle_assets - sum(amounts.values())
        amounts = cover_shortfall(amounts, balances, shortfall)

        for leg, amount in amounts.items():
            self._withdraw_leg(tx, leg, legs[leg], amount)
        return amounts

    @staticmethod
    def _expect_returned(leg: str, returned: Any, requested: int) -> None:
        if returned != requested:
            raise InsufficientBalanceError(
                f"{leg} strategy returned {returned} of {requested}",
                details={"leg": leg, "requested": requested, "returned": returned},
            )

    @staticmethod
    def _expect_accepted(leg: str, accepted: Any, requested: int) -> None:
        if accepted != requested:
            raise StrategyDepositFailedError(leg, requested, accepted)

    # =========================================================================
    # Transactions
    # =========================================================================

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[VaultTransaction]:
        """
        Run an operation all-or-nothing.

        On any error the registered compensations run newest first, internal
        state is restored from the snapshot and the error is re-raised. If a
        compensation fails, RollbackError is raised from the original error.
        """
        tx = VaultTransaction(operation=operation, snapshot=self._snapshot())
        try:
            yield tx
        except Exception as e:
            errors = tx.unwind()
            self._restore(tx.snapshot)
            self._transactions.append(tx)
            if errors:
                tx.close(
                    TransactionStatus.FAILED,
                    f"{e}; rollback errors: {[str(err) for err in errors]}",
                )
                self._vault_log.rollback_failed(operation, tx.transaction_id, errors)
                logger.critical(
                    f"{operation} aborted and rollback incomplete: {e} "
                    f"({len(errors)} compensation(s) failed)"
                )
                raise RollbackError(
                    f"{operation} aborted and rollback incomplete",
                    details={
                        "transaction_id": tx.transaction_id,
                        "cause": str(e),
                        "errors": [str(err) for err in errors],
                    },
                ) from e
            tx.close(TransactionStatus.ROLLED_BACK, str(e))
            self._vault_log.rolled_back(operation, tx.transaction_id, str(e))
            logger.warning(f"{operation} rolled back: {e}")
            raise
        else:
            tx.close(TransactionStatus.COMMITTED)
            self._transactions.append(tx)
            for event in tx.pending_events:
                self._events.publish(event)

    def _snapshot(self) -> VaultSnapshot:
        return VaultSnapshot(ledger=self._ledger.snapshot(), idle_assets=self._idle_assets)

    def _restore(self, snapshot: VaultSnapshot) -> None:
        self._ledger.restore(snapshot.ledger)
        self._idle_assets = snapshot.idle_assets

    def last_transaction(self, status: Optional[TransactionStatus] = None) -> Optional[VaultTransaction]:
        """Most recent transaction, optionally filtered by status."""
        for tx in reversed(self._transactions):
            if status is None or tx.status == status:
                return tx
        return None

    # =========================================================================
    # Preconditions
    # =========================================================================

    def _strategies(self) -> Dict[str, Optional[StrategyAdapter]]:
        return {SPOT_LEG: self._spot_strategy, PERP_LEG: self._perp_strategy}

    def _funded_strategies(self) -> Dict[str, StrategyAdapter]:
        """Both strategies, or none while either is unset."""
        if self._spot_strategy is None or self._perp_strategy is None:
            return {}
        return {SPOT_LEG: self._spot_strategy, PERP_LEG: self._perp_strategy}

    def _require_strategies(self) -> Tuple[StrategyAdapter, StrategyAdapter]:
        if self._spot_strategy is None:
            raise StrategyNotSetError("Spot strategy not set")
        if self._perp_strategy is None:
            raise StrategyNotSetError("Perp strategy not set")
        return self._spot_strategy, self._perp_strategy

    def _require_position_manager(self) -> PositionManager:
        if self._position_manager is None:
            raise PositionManagerNotSetError()
        return self._position_manager

    @staticmethod
    def _require_account(account: str) -> None:
        if not account:
            raise ZeroAddressError("Account must not be empty")

    @staticmethod
    def _require_amount(value: Any, name: str) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{name} must be an int, got {type(value).__name__}")
        if value <= 0:
            raise ZeroAmountError(f"{name} must be greater than zero, got {value}")

    @staticmethod
    def _require_int_values(**values: Any) -> None:
        """Position manager answers must be plain ints."""
        for name, value in values.items():
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidRebalanceSizingError(
                    f"Position manager returned {name}={value!r}, expected an int",
                    details={name: repr(value)},
                )
