"""
Share Pricing and Capital Split.

Integer arithmetic converting between assets and shares, and splitting
capital across strategy legs. Every division truncates, and truncation
always works against the caller: deposits never mint more shares than the
assets are worth, withdrawals never pay out more assets than the shares
are worth.
"""

from typing import Dict, Mapping, Tuple

from ..core import ZeroAmountError


def convert_to_shares(assets: int, total_shares: int, total_assets: int) -> int:
    """
    Shares minted for a deposit of assets.

    The first depositor (empty supply or worthless pool) is priced at one
    share per asset unit. Otherwise floor(assets * total_shares / total_assets).

    Raises:
        ZeroAmountError: assets is not positive, or rounds down to zero shares
    """
    if assets <= 0:
        raise ZeroAmountError("Deposit amount must be greater than zero")

    if total_shares == 0 or total_assets == 0:
        return assets

    shares = assets * total_shares // total_assets
    if shares == 0:
        raise ZeroAmountError(
            f"Deposit of {assets} mints zero shares",
            details={
                "assets": assets,
                "total_shares": total_shares,
                "total_assets": total_assets,
            },
        )
    return shares


def convert_to_assets(shares: int, total_shares: int, total_assets: int) -> int:
    """Assets redeemable for shares: floor(shares * total_assets / total_shares)."""
    if total_shares == 0:
        return 0
    return shares * total_assets // total_shares


def split_deposit(assets: int) -> Tuple[int, int]:
    """
    Split a deposit into (spot, perp) legs.

    Spot takes the floored half, perp takes the rest, so both legs always
    add up to assets.

    >>> split_deposit(101)
    (50, 51)
    """
    spot_amount = assets // 2
    return spot_amount, assets - spot_amount


def proportional_withdrawals(
    assets: int,
    total_assets: int,
    leg_balances: Mapping[str, int],
    precision: int,
) -> Dict[str, int]:
    """
    Amount to pull from each leg so legs contribute in proportion to their balance.

    Each leg gets floor(assets * balance * precision / (total_assets * precision)).
    Legs with no balance get 0.
    """
    if total_assets <= 0:
        return {leg: 0 for leg in leg_balances}

    amounts = {}
    for leg, balance in leg_balances.items():
        if balance <= 0:
            amounts[leg] = 0
            continue
        amounts[leg] = (assets * balance * precision) // (total_assets * precision)
    return amounts


def cover_shortfall(
    amounts: Dict[str, int],
    leg_balances: Mapping[str, int],
    shortfall: int,
) -> Dict[str, int]:
    """
    Add a rounding shortfall to the legs with the most balance left.

    Flooring each leg can leave the pulls plus the idle balance a few
    units short of the payout. The missing units are taken from the legs
    with the largest remaining balance. Amounts are returned unchanged when
    there is no shortfall; any part no leg can cover stays uncovered.
    """
    if shortfall <= 0:
        return dict(amounts)

    result = dict(amounts)
    remaining = shortfall
    by_headroom = sorted(
        leg_balances,
        key=lambda leg: leg_balances[leg] - result.get(leg, 0),
        reverse=True,
    )
    for leg in by_headroom:
        if remaining == 0:
            break
        headroom = leg_balances[leg] - result.get(leg, 0)
        if headroom <= 0:
            continue
        extra = min(headroom, remaining)
        result[leg] = result.get(leg, 0) + extra
        remaining -= extra
    return result
