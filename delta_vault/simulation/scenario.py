"""
Scenario Runner.

Builds a vault wired to simulated collaborators from configuration and
replays a list of scenario steps against it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import AppConfig, ScenarioStep
from ..constants import SPOT_LEG
from ..core import VaultError, get_logger
from ..storage import EventRepository
from ..vault import DeltaNeutralVault
from .position_manager import SimulatedPositionManager
from .strategies import SimulatedStrategy
from .token import InMemoryAsset

logger = get_logger(__name__)


@dataclass
class StepResult:
    """Outcome of one scenario step."""

    index: int
    action: str
    ok: bool
    result: Any = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "action": self.action,
            "ok": self.ok,
            "result": self.result,
            "error": self.error,
            "error_code": self.error_code,
        }


@dataclass
class SimulationEnvironment:
    """A vault and the simulated collaborators wired into it."""

    asset: InMemoryAsset
    vault: DeltaNeutralVault
    spot: SimulatedStrategy
    perp: SimulatedStrategy
    position_manager: SimulatedPositionManager
    repository: Optional[EventRepository] = None
    results: List[StepResult] = field(default_factory=list)

    def strategy(self, leg: str) -> SimulatedStrategy:
        return self.spot if leg == SPOT_LEG else self.perp


def build_environment(config: AppConfig) -> SimulationEnvironment:
    """
    Create an asset, vault, both strategies and a position manager.

    Scenario accounts are funded with their initial asset balances. When
    the vault config names an event database, events are persisted to it.
    """
    vault_config = config.vault
    asset = InMemoryAsset()
    vault = DeltaNeutralVault(asset, vault_config)
    owner = vault_config.owner

    spot = SimulatedStrategy(asset, "spot-strategy", vault.address)
    perp = SimulatedStrategy(asset, "perp-strategy", vault.address)
    manager = SimulatedPositionManager(spot, perp, vault_config.max_delta_tolerance_bps)

    vault.set_spot_strategy(owner, spot)
    vault.set_perp_strategy(owner, perp)
    vault.set_position_manager(owner, manager)

    repository = None
    if vault_config.event_db_path:
        repository = EventRepository(vault_config.event_db_path)
        repository.attach(vault.events)

    for account, balance in config.simulation.accounts.items():
        asset.mint(account, balance)

    return SimulationEnvironment(
        asset=asset,
        vault=vault,
        spot=spot,
        perp=perp,
        position_manager=manager,
        repository=repository,
    )


def run_step(env: SimulationEnvironment, step: ScenarioStep) -> Any:
    """Apply a single step. Returns the operation's result."""
    vault = env.vault
    owner = vault.owner

    if step.action == "deposit":
        return vault.deposit(step.account, step.amount)
    if step.action == "withdraw":
        return vault.withdraw(step.account, step.amount)
    if step.action == "accrue":
        env.strategy(step.leg).accrue_yield(step.amount)
        return vault.total_assets()
    if step.action == "loss":
        env.strategy(step.leg).realize_loss(step.amount)
        return vault.total_assets()
    if step.action == "rebalance":
        vault.rebalance(step.account or env.position_manager.address)
        return vault.get_current_delta()
    if step.action == "pause":
        vault.emergency_pause(step.account or owner)
        return True
    if step.action == "unpause":
        vault.emergency_unpause(step.account or owner)
        return False
    raise ValueError(f"Unknown scenario action: {step.action}")


def run_scenario(config: AppConfig) -> SimulationEnvironment:
    """
    Replay every configured step.

    Vault errors are recorded on the step result; with stop_on_error the
    first one is re-raised.
    """
    env = build_environment(config)
    scenario = config.simulation

    for index, step in enumerate(scenario.steps):
        try:
            result = run_step(env, step)
            env.results.append(StepResult(index, step.action, True, result=result))
        except VaultError as e:
            logger.warning(f"Step {index} ({step.action}) failed: {e}")
            env.results.append(
                StepResult(index, step.action, False, error=e.message, error_code=e.code)
            )
            if scenario.stop_on_error:
                raise

    return env
