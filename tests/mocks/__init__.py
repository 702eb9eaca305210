"""Mock collaborators for testing."""

from .strategy_mock import (
    CallbackStrategy,
    FailingStrategy,
    ShortFillStrategy,
    StubPositionManager,
)

__all__ = [
    "ShortFillStrategy",
    "FailingStrategy",
    "CallbackStrategy",
    "StubPositionManager",
]
