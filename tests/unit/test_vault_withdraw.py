"""
Vault Withdraw Unit Tests.

Tests for share burning, proportional capital recall and payout.
"""

import pytest

from delta_vault.core import (
    InsufficientBalanceError,
    VaultPausedError,
    ZeroAmountError,
)
from delta_vault.vault import TransactionStatus
from tests.mocks import CallbackStrategy, ShortFillStrategy


@pytest.fixture
def funded_vault(vault, spot):
    """alice 100, bob 50, then 15 of yield on spot: 150 shares backed by 165."""
    vault.deposit("alice", 100)
    vault.deposit("bob", 50)
    spot.accrue_yield(15)
    return vault


class TestWithdraw:
    """Test successful withdrawals."""

    def test_yield_scenario(self, funded_vault, asset, spot, perp):
        """Worked example: bob's 50 shares redeem for 55 after 10% yield."""
        assert funded_vault.total_assets() == 165
        assert funded_vault.preview_withdraw(50) == 55

        before = asset.balance_of("bob")
        assert funded_vault.withdraw("bob", 50) == 55

        assert asset.balance_of("bob") == before + 55
        assert funded_vault.shares_of("bob") == 0
        assert funded_vault.total_shares() == 100
        assert funded_vault.total_assets() == 110
        assert spot.total_assets() == 60  # 90 - 30
        assert perp.total_assets() == 50  # 75 - 25

    def test_remaining_holder_unaffected(self, funded_vault):
        value_before = funded_vault.preview_withdraw(funded_vault.shares_of("alice"))
        funded_vault.withdraw("bob", 50)
        assert funded_vault.preview_withdraw(funded_vault.shares_of("alice")) == value_before

    @pytest.mark.parametrize("shares", [0, -50])
    def test_preview_rejects_non_positive(self, funded_vault, shares):
        with pytest.raises(ZeroAmountError):
            funded_vault.preview_withdraw(shares)

    def test_preview_rejects_fractional_shares(self, funded_vault):
        with pytest.raises(TypeError):
            funded_vault.preview_withdraw(1.5)

    def test_full_exit_empties_vault(self, vault, spot, perp):
        vault.deposit("alice", 101)
        assert vault.withdraw("alice", 101) == 101

        assert vault.total_shares() == 0
        assert vault.total_assets() == 0
        assert spot.total_assets() == 0
        assert perp.total_assets() == 0

    def test_after_loss(self, vault, spot):
        vault.deposit("alice", 100)
        spot.realize_loss(20)
        assert vault.withdraw("alice", 50) == 40

    def test_rounding_shortfall_covered(self, vault, perp):
        """Truncated per-leg pulls are topped up from the larger leg."""
        vault.deposit("alice", 3)  # spot 1, perp 2

        assert vault.withdraw("alice", 1) == 1
        assert perp.total_assets() == 1
        assert vault.idle_assets == 0

    def test_rounds_against_withdrawer(self, vault, perp):
        vault.deposit("alice", 3)
        perp.accrue_yield(1)  # 3 shares backed by 4

        # 1 * 4 / 3 = 1.33 -> 1
        assert vault.withdraw("alice", 1) == 1
        assert vault.total_assets() == 3

    def test_conservation(self, funded_vault, asset, spot, perp):
        """Base asset held by vault and legs always equals total_assets."""
        funded_vault.withdraw("alice", 37)
        funded_vault.deposit("carol", 11)
        funded_vault.withdraw("bob", 13)

        held = (
            asset.balance_of(funded_vault.address)
            + spot.total_assets()
            + perp.total_assets()
        )
        assert held == funded_vault.total_assets()
        assert funded_vault.idle_assets == asset.balance_of(funded_vault.address)

    def test_emits_event(self, funded_vault):
        funded_vault.withdraw("bob", 50)
        event = funded_vault.events.events_named("Withdraw")[-1]
        assert (event.owner, event.assets, event.shares) == ("bob", 55, 50)

    def test_shares_burned_before_strategy_call(self, vault, asset):
        seen = []
        spot = CallbackStrategy(
            asset,
            "callback-spot",
            vault.address,
            on_withdraw=lambda: seen.append(vault.shares_of("alice")),
        )
        vault.set_spot_strategy("admin", spot)
        vault.deposit("alice", 100)

        vault.withdraw("alice", 40)
        assert seen == [60]


class TestWithdrawPreconditions:
    """Test rejected withdrawals."""

    def test_more_than_held(self, funded_vault):
        with pytest.raises(InsufficientBalanceError) as exc_info:
            funded_vault.withdraw("bob", 51)
        assert exc_info.value.details["balance"] == 50

    def test_non_holder(self, funded_vault):
        with pytest.raises(InsufficientBalanceError):
            funded_vault.withdraw("carol", 1)

    def test_zero_shares(self, funded_vault):
        with pytest.raises(ZeroAmountError):
            funded_vault.withdraw("bob", 0)

    def test_worthless_shares(self, vault, spot, perp):
        vault.deposit("alice", 100)
        spot.realize_loss(50)
        perp.realize_loss(50)

        with pytest.raises(ZeroAmountError):
            vault.withdraw("alice", 10)
        assert vault.shares_of("alice") == 100

    def test_paused(self, funded_vault):
        funded_vault.emergency_pause("admin")
        with pytest.raises(VaultPausedError):
            funded_vault.withdraw("bob", 10)
        assert funded_vault.shares_of("bob") == 50


class TestWithdrawShortReturn:
    """Test strategies that return less than requested."""

    def test_short_return_reverts(self, vault, asset, spot):
        perp = ShortFillStrategy(asset, "short-perp", vault.address, short_withdraw=True)
        vault.set_perp_strategy("admin", perp)
        vault.deposit("alice", 100)
        before = asset.balance_of("alice")

        with pytest.raises(InsufficientBalanceError) as exc_info:
            vault.withdraw("alice", 10)

        assert exc_info.value.details == {"leg": "perp", "requested": 5, "returned": 4}
        assert vault.shares_of("alice") == 100
        assert asset.balance_of("alice") == before
        assert spot.total_assets() == 50
        assert perp.total_assets() == 50
        assert vault.idle_assets == 0
        assert vault.last_transaction().status == TransactionStatus.ROLLED_BACK
