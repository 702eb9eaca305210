"""
Simulation Collaborators.

In-memory asset, strategies and position manager for exercising the vault
outside a live deployment, plus a scenario runner.
"""

from .position_manager import SimulatedPositionManager
from .scenario import (
    SimulationEnvironment,
    StepResult,
    build_environment,
    run_scenario,
    run_step,
)
from .strategies import SimulatedStrategy
from .token import InMemoryAsset

__all__ = [
    "InMemoryAsset",
    "SimulatedStrategy",
    "SimulatedPositionManager",
    "SimulationEnvironment",
    "StepResult",
    "build_environment",
    "run_scenario",
    "run_step",
]
