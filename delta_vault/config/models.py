"""
Vault Configuration Models.

Pydantic models for the vault, its rebalance behavior and simulation
scenarios. String values may reference the environment as ``${VAR}`` or
``${VAR:default}``; references are expanded before validation.
"""

import os
import re
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..constants import LEGS, MAX_DELTA_TOLERANCE, MIN_DEPOSIT, PRECISION

ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")

_TRUE = ("true", "yes", "on")
_FALSE = ("false", "no", "off")


def _lookup(match: re.Match) -> Optional[str]:
    name, default = match.groups()
    return os.environ.get(name, default)


def _typed(value: str) -> Any:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue
    return value


def expand_env(data: Any) -> Any:
    """
    Expand environment references in every string of a nested document.

    A string that is exactly one reference takes the type of what it resolves
    to (bool, int, float, else str), so ``min_deposit: ${MIN_DEPOSIT}``
    validates as an int. References to unset variables without a default
    are left as written.
    """
    if isinstance(data, dict):
        return {key: expand_env(value) for key, value in data.items()}
    if isinstance(data, list):
        return [expand_env(item) for item in data]
    if not isinstance(data, str):
        return data

    whole = ENV_VAR_PATTERN.fullmatch(data)
    if whole:
        value = _lookup(whole)
        return data if value is None else _typed(value)

    def resolve(match: re.Match) -> str:
        value = _lookup(match)
        return match.group(0) if value is None else value

    return ENV_VAR_PATTERN.sub(resolve, data)


class BaseConfig(BaseModel):
    """Frozen; unknown keys are ignored and env references expanded first."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        validate_default=True,
        str_strip_whitespace=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _expand_environment(cls, data: Any) -> Any:
        return expand_env(data) if isinstance(data, dict) else data


class RebalancePolicy(str, Enum):
    """How the vault applies position manager sizing."""

    RECORD_ONLY = "record_only"
    TRANSFER_BETWEEN_LEGS = "transfer_between_legs"


class RebalanceAccess(str, Enum):
    """Who may trigger a rebalance."""

    PUBLIC = "public"
    POSITION_MANAGER = "position_manager"


class VaultConfig(BaseConfig):
    """
    Vault configuration.

    Example:
        >>> config = VaultConfig(owner="treasury", min_deposit=1)
        >>> config.rebalance_policy
        <RebalancePolicy.RECORD_ONLY: 'record_only'>
    """

    owner: str = Field(min_length=1, description="Administrative owner account")
    min_deposit: int = Field(
        default=MIN_DEPOSIT,
        ge=1,
        description="Dust floor for deposits, in base-asset units",
    )
    precision: int = Field(
        default=PRECISION,
        ge=1,
        description="Fixed-point scale for proportional withdrawal math",
    )
    max_delta_tolerance_bps: int = Field(
        default=MAX_DELTA_TOLERANCE,
        ge=0,
        le=10_000,
        description="Delta tolerance handed to the position manager",
    )
    rebalance_policy: RebalancePolicy = RebalancePolicy.RECORD_ONLY
    rebalance_access: RebalanceAccess = RebalanceAccess.PUBLIC
    event_history_size: int = Field(default=1000, ge=1)
    transaction_history_size: int = Field(default=100, ge=1)
    event_db_path: Optional[str] = None


class ScenarioStep(BaseConfig):
    """A single step of a simulation scenario."""

    action: Literal[
        "deposit",
        "withdraw",
        "accrue",
        "loss",
        "rebalance",
        "pause",
        "unpause",
    ]
    account: Optional[str] = None
    amount: Optional[int] = Field(default=None, ge=0)
    leg: Optional[str] = None

    @model_validator(mode="after")
    def check_arguments(self) -> "ScenarioStep":
        """Validate the arguments each action needs."""
        if self.action in ("deposit", "withdraw"):
            if not self.account or self.amount is None:
                raise ValueError(f"{self.action} step needs account and amount")
        if self.action in ("accrue", "loss"):
            if self.leg not in LEGS or self.amount is None:
                raise ValueError(f"{self.action} step needs leg ({'/'.join(LEGS)}) and amount")
        return self


class ScenarioConfig(BaseConfig):
    """Simulation scenario: initial asset balances and a list of steps."""

    accounts: Dict[str, int] = Field(default_factory=dict)
    steps: List[ScenarioStep] = Field(default_factory=list)
    stop_on_error: bool = False


class AppConfig(BaseConfig):
    """Root configuration document."""

    vault: VaultConfig
    simulation: ScenarioConfig = Field(default_factory=ScenarioConfig)
