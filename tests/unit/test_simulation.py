"""
Simulation Unit Tests.

Tests for the in-memory asset, simulated collaborators and scenario runner.
"""

import pytest

from delta_vault.config import AppConfig
from delta_vault.core import InsufficientBalanceError, VaultPausedError, ZeroAddressError
from delta_vault.simulation import (
    InMemoryAsset,
    SimulatedPositionManager,
    SimulatedStrategy,
    build_environment,
    run_scenario,
)
from delta_vault.vault import AssetToken, PositionManager, StrategyAdapter


def make_config(steps, accounts=None, **vault):
    return AppConfig(
        vault={"owner": "admin", "min_deposit": 1, **vault},
        simulation={
            "accounts": accounts or {"alice": 1_000, "bob": 1_000},
            "steps": steps,
        },
    )


class TestInMemoryAsset:
    """Test InMemoryAsset."""

    def test_transfer(self):
        token = InMemoryAsset()
        token.mint("alice", 100)
        token.transfer("alice", "bob", 30)

        assert token.balance_of("alice") == 70
        assert token.balance_of("bob") == 30
        assert token.total_supply == 100

    def test_overdraw(self):
        token = InMemoryAsset()
        token.mint("alice", 10)
        with pytest.raises(InsufficientBalanceError):
            token.transfer("alice", "bob", 11)

    def test_empty_recipient(self):
        token = InMemoryAsset()
        token.mint("alice", 10)
        with pytest.raises(ZeroAddressError):
            token.transfer("alice", "", 1)

    def test_negative_amount(self):
        with pytest.raises(ValueError):
            InMemoryAsset().mint("alice", -1)

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryAsset(), AssetToken)


class TestSimulatedCollaborators:
    """Test SimulatedStrategy and SimulatedPositionManager."""

    def test_strategy_round_trip(self):
        token = InMemoryAsset()
        token.mint("vault", 100)
        strategy = SimulatedStrategy(token, "spot", "vault")

        assert strategy.deposit(60) == 60
        assert strategy.total_assets() == 60
        assert strategy.withdraw(20) == 20
        assert token.balance_of("vault") == 60

    def test_strategy_overdraw(self):
        token = InMemoryAsset()
        strategy = SimulatedStrategy(token, "spot", "vault")
        with pytest.raises(InsufficientBalanceError):
            strategy.withdraw(1)

    def test_yield_and_loss(self):
        token = InMemoryAsset()
        strategy = SimulatedStrategy(token, "spot", "vault")
        strategy.accrue_yield(10)
        strategy.realize_loss(25)
        assert strategy.total_assets() == 0

    def test_protocols(self):
        token = InMemoryAsset()
        spot = SimulatedStrategy(token, "spot", "vault")
        perp = SimulatedStrategy(token, "perp", "vault")
        assert isinstance(spot, StrategyAdapter)
        assert isinstance(SimulatedPositionManager(spot, perp), PositionManager)

    def test_delta_and_sizing(self):
        token = InMemoryAsset()
        spot = SimulatedStrategy(token, "spot", "vault")
        perp = SimulatedStrategy(token, "perp", "vault")
        manager = SimulatedPositionManager(spot, perp, tolerance_bps=100)

        assert manager.is_rebalance_needed() is False  # empty legs

        spot.accrue_yield(90)
        perp.accrue_yield(75)
        assert manager.get_current_delta() == 15
        assert manager.is_rebalance_needed() is True
        assert manager.calculate_rebalance_amounts() == (-7, 7)

        perp.accrue_yield(30)
        assert manager.calculate_rebalance_amounts() == (7, -7)


class TestScenario:
    """Test the scenario runner."""

    def test_build_environment(self):
        env = build_environment(make_config([]))

        assert env.vault.spot_strategy is env.spot
        assert env.vault.perp_strategy is env.perp
        assert env.vault.position_manager is env.position_manager
        assert env.asset.balance_of("alice") == 1_000
        assert env.repository is None

    def test_yield_scenario(self):
        config = make_config([
            {"action": "deposit", "account": "alice", "amount": 100},
            {"action": "deposit", "account": "bob", "amount": 50},
            {"action": "accrue", "leg": "spot", "amount": 15},
            {"action": "rebalance"},
            {"action": "withdraw", "account": "bob", "amount": 50},
        ])

        env = run_scenario(config)

        assert [r.ok for r in env.results] == [True] * 5
        assert [r.result for r in env.results[:2]] == [100, 50]
        assert env.results[4].result == 55
        assert env.vault.total_assets() == 110
        assert env.asset.balance_of("bob") == 1_005

    def test_failures_recorded(self):
        config = make_config([
            {"action": "pause"},
            {"action": "deposit", "account": "alice", "amount": 100},
            {"action": "unpause"},
            {"action": "deposit", "account": "alice", "amount": 100},
        ])

        env = run_scenario(config)

        failed = env.results[1]
        assert not failed.ok
        assert failed.error_code == "VaultPaused"
        assert env.results[3].ok
        assert env.vault.total_shares() == 100

    def test_stop_on_error(self):
        config = AppConfig(
            vault={"owner": "admin", "min_deposit": 1},
            simulation={
                "stop_on_error": True,
                "accounts": {"alice": 100},
                "steps": [
                    {"action": "pause"},
                    {"action": "deposit", "account": "alice", "amount": 10},
                ],
            },
        )

        with pytest.raises(VaultPausedError):
            run_scenario(config)

    def test_event_db(self, tmp_path):
        db_path = tmp_path / "events.db"
        config = make_config(
            [{"action": "deposit", "account": "alice", "amount": 100}],
            event_db_path=str(db_path),
        )

        env = run_scenario(config)

        assert env.repository is not None
        assert env.repository.count_events("Deposit") == 1

    def test_restricted_rebalance_uses_manager(self):
        config = make_config(
            [
                {"action": "deposit", "account": "alice", "amount": 100},
                {"action": "loss", "leg": "perp", "amount": 20},
                {"action": "rebalance"},
                {"action": "rebalance", "account": "alice"},
            ],
            rebalance_access="position_manager",
            rebalance_policy="transfer_between_legs",
        )

        env = run_scenario(config)

        assert env.results[2].ok
        assert env.results[2].result == 0
        assert env.results[3].error_code == "NotPositionManager"
