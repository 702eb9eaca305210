"""
Simulated Position Manager.

Treats the spot leg as long exposure and the perp leg as an equal-notional
short hedge, so delta is the difference between the two leg balances.
"""

from typing import List, Tuple

from ..constants import BPS_DENOMINATOR, MAX_DELTA_TOLERANCE
from ..vault.interfaces import StrategyAdapter


class SimulatedPositionManager:
    """
    Delta oracle over two strategy legs.

    Rebalance is needed when |delta| exceeds tolerance_bps of the gross
    exposure. Sizing moves half the delta from the long leg to the hedge
    (or back), which brings delta to within one unit of zero.
    """

    def __init__(
        self,
        spot: StrategyAdapter,
        perp: StrategyAdapter,
        tolerance_bps: int = MAX_DELTA_TOLERANCE,
        address: str = "position-manager",
    ):
        self._spot = spot
        self._perp = perp
        self._tolerance_bps = tolerance_bps
        self.address = address
        self.updates: List[Tuple[int, int]] = []

    def get_current_delta(self) -> int:
        return self._spot.total_assets() - self._perp.total_assets()

    def is_rebalance_needed(self) -> bool:
        gross = self._spot.total_assets() + self._perp.total_assets()
        if gross == 0:
            return False
        return abs(self.get_current_delta()) * BPS_DENOMINATOR > self._tolerance_bps * gross

    def calculate_rebalance_amounts(self) -> Tuple[int, int]:
        delta = self.get_current_delta()
        half = abs(delta) // 2
        if delta > 0:
            return -half, half
        return half, -half

    def update_position(self, spot_amount: int, perp_amount: int) -> None:
        self.updates.append((spot_amount, perp_amount))

    def __repr__(self) -> str:
        return f"SimulatedPositionManager({self.address!r})"
