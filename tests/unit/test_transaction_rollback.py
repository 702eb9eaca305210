"""
Vault Transaction Unit Tests.

Tests for compensation ordering, event buffering and incomplete rollbacks.
"""

import pytest

from delta_vault.core import RollbackError, StrategyDepositFailedError
from delta_vault.vault import (
    DepositEvent,
    TransactionStatus,
    VaultTransaction,
)
from tests.mocks import FailingStrategy, ShortFillStrategy


class TestVaultTransaction:
    """Test VaultTransaction lifecycle."""

    def test_defaults(self):
        tx = VaultTransaction(operation="deposit")

        assert tx.status == TransactionStatus.OPEN
        assert tx.transaction_id
        assert tx.is_open

    def test_unwind_runs_newest_first(self):
        order = []
        tx = VaultTransaction(operation="deposit")
        tx.on_rollback("first", lambda: order.append(1))
        tx.on_rollback("second", lambda: order.append(2))
        tx.on_rollback("third", lambda: order.append(3))

        assert tx.unwind() == []
        assert order == [3, 2, 1]

    def test_unwind_continues_after_failure(self):
        order = []

        def boom():
            raise RuntimeError("compensation failed")

        tx = VaultTransaction(operation="withdraw")
        tx.on_rollback("first", lambda: order.append(1))
        tx.on_rollback("broken", boom)
        tx.on_rollback("third", lambda: order.append(3))

        errors = tx.unwind()

        assert order == [3, 1]
        assert len(errors) == 1
        assert tx.rollback_errors == errors

    def test_unwind_drops_pending_events(self):
        tx = VaultTransaction(operation="deposit")
        tx.emit(DepositEvent(owner="alice", assets=1, shares=1))
        tx.unwind()
        assert tx.pending_events == []

    def test_status_transitions(self):
        tx = VaultTransaction(operation="rebalance")
        assert tx.is_open

        tx.close(TransactionStatus.COMMITTED)
        assert not tx.is_open
        assert tx.finished_at is not None

    def test_close_twice_rejected(self):
        tx = VaultTransaction(operation="rebalance")
        tx.close(TransactionStatus.COMMITTED)

        with pytest.raises(RuntimeError):
            tx.close(TransactionStatus.ROLLED_BACK, "late")

    def test_to_dict(self):
        tx = VaultTransaction(operation="deposit")
        tx.close(TransactionStatus.ROLLED_BACK, "boom")
        data = tx.to_dict()

        assert data["operation"] == "deposit"
        assert data["status"] == "rolled_back"
        assert data["reason"] == "boom"


class TestVaultRollback:
    """Test rollback through the vault."""

    def test_committed_transactions_recorded(self, vault):
        vault.deposit("alice", 100)
        vault.withdraw("alice", 10)

        history = vault.transaction_history
        assert [tx.operation for tx in history] == ["deposit", "withdraw"]
        assert all(tx.status == TransactionStatus.COMMITTED for tx in history)

    def test_last_transaction_by_status(self, vault, asset):
        vault.deposit("alice", 100)
        vault.set_perp_strategy(
            "admin", ShortFillStrategy(asset, "short-perp", vault.address, short_deposit=True)
        )
        with pytest.raises(StrategyDepositFailedError):
            vault.deposit("alice", 100)

        assert vault.last_transaction().status == TransactionStatus.ROLLED_BACK
        assert vault.last_transaction(TransactionStatus.COMMITTED).operation == "deposit"

    def test_failed_compensation_raises_rollback_error(self, vault, asset):
        spot = FailingStrategy(asset, "stuck-spot", vault.address, fail_withdraw=True)
        perp = ShortFillStrategy(asset, "short-perp", vault.address, short_deposit=True)
        vault.set_spot_strategy("admin", spot)
        vault.set_perp_strategy("admin", perp)

        with pytest.raises(RollbackError) as exc_info:
            vault.deposit("alice", 100)

        assert isinstance(exc_info.value.__cause__, StrategyDepositFailedError)
        assert exc_info.value.code == "RollbackFailed"

        tx = vault.last_transaction()
        assert tx.status == TransactionStatus.FAILED
        # spot recall fails, and the refund then finds the vault short
        assert len(tx.rollback_errors) == 2
        assert vault.total_shares() == 0
        assert vault.idle_assets == 0

    def test_events_published_only_on_commit(self, vault, asset, recorded_events):
        vault.deposit("alice", 100)
        assert [e.name for e in recorded_events] == ["Deposit"]

        vault.set_spot_strategy(
            "admin", FailingStrategy(asset, "broken-spot", vault.address, fail_deposit=True)
        )
        recorded_events.clear()

        with pytest.raises(RuntimeError):
            vault.deposit("bob", 100)
        assert recorded_events == []
