"""
Pytest configuration and fixtures for delta vault tests.
"""

import os
import tempfile

# Log files go to a scratch directory rather than ./logs
os.environ.setdefault("VAULT_LOG_DIR", tempfile.mkdtemp(prefix="delta-vault-logs-"))

import pytest

from delta_vault.config import VaultConfig
from delta_vault.simulation import (
    InMemoryAsset,
    SimulatedPositionManager,
    SimulatedStrategy,
)
from delta_vault.vault import DeltaNeutralVault

OWNER = "admin"
ALICE = "alice"
BOB = "bob"
CAROL = "carol"


# =============================================================================
# Collaborator Fixtures
# =============================================================================


@pytest.fixture
def asset() -> InMemoryAsset:
    """Base asset with funded test accounts."""
    token = InMemoryAsset("USDC")
    for account in (ALICE, BOB, CAROL):
        token.mint(account, 1_000_000_000)
    return token


@pytest.fixture
def vault_config() -> VaultConfig:
    """Vault config with a one-unit dust floor so small amounts are testable."""
    return VaultConfig(owner=OWNER, min_deposit=1)


@pytest.fixture
def bare_vault(asset: InMemoryAsset, vault_config: VaultConfig) -> DeltaNeutralVault:
    """Vault with no strategies or position manager."""
    return DeltaNeutralVault(asset, vault_config)


@pytest.fixture
def spot(asset: InMemoryAsset, bare_vault: DeltaNeutralVault) -> SimulatedStrategy:
    return SimulatedStrategy(asset, "spot-strategy", bare_vault.address)


@pytest.fixture
def perp(asset: InMemoryAsset, bare_vault: DeltaNeutralVault) -> SimulatedStrategy:
    return SimulatedStrategy(asset, "perp-strategy", bare_vault.address)


@pytest.fixture
def position_manager(
    spot: SimulatedStrategy, perp: SimulatedStrategy
) -> SimulatedPositionManager:
    return SimulatedPositionManager(spot, perp, tolerance_bps=100)


@pytest.fixture
def vault(
    bare_vault: DeltaNeutralVault,
    spot: SimulatedStrategy,
    perp: SimulatedStrategy,
    position_manager: SimulatedPositionManager,
) -> DeltaNeutralVault:
    """Vault wired to both simulated strategies and a position manager."""
    bare_vault.set_spot_strategy(OWNER, spot)
    bare_vault.set_perp_strategy(OWNER, perp)
    bare_vault.set_position_manager(OWNER, position_manager)
    return bare_vault


@pytest.fixture
def recorded_events(vault: DeltaNeutralVault) -> list:
    """Events published on the vault bus after wiring."""
    events: list = []
    vault.events.subscribe(events.append)
    return events
