"""
Vault constants.

Amounts are integers in base-asset units.
"""

# Dust floor for deposits (1 unit of a 6-decimal stablecoin)
MIN_DEPOSIT = 1_000_000

# Fixed-point scale for intermediate rounding in proportional withdrawals
PRECISION = 10**18

# Delta tolerance in basis points, consumed by the position manager
MAX_DELTA_TOLERANCE = 100

BPS_DENOMINATOR = 10_000

SPOT_LEG = "spot"
PERP_LEG = "perp"
LEGS = (SPOT_LEG, PERP_LEG)
