"""
Vault Events.

Event records published after an operation commits, and the bus that
delivers them to subscribers.
"""

from collections import deque
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, ClassVar, Deque, Dict, List, Optional

from ..core import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class VaultEvent:
    """Base event record."""

    name: ClassVar[str] = "VaultEvent"

    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc),
        kw_only=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        data["name"] = self.name
        return data


@dataclass(frozen=True)
class DepositEvent(VaultEvent):
    """Shares minted for deposited assets."""

    name: ClassVar[str] = "Deposit"

    owner: str
    assets: int
    shares: int


@dataclass(frozen=True)
class WithdrawEvent(VaultEvent):
    """Shares burned for withdrawn assets."""

    name: ClassVar[str] = "Withdraw"

    owner: str
    assets: int
    shares: int


@dataclass(frozen=True)
class RebalanceEvent(VaultEvent):
    """Rebalance with delta before and after, and the sizing requested."""

    name: ClassVar[str] = "Rebalance"

    old_delta: int
    new_delta: int
    spot_adjustment: int = 0
    perp_adjustment: int = 0
    applied: bool = False


@dataclass(frozen=True)
class EmergencyPauseEvent(VaultEvent):
    """Pause flag toggled."""

    name: ClassVar[str] = "EmergencyPause"

    paused: bool


@dataclass(frozen=True)
class StrategyUpdatedEvent(VaultEvent):
    """Strategy reference replaced."""

    name: ClassVar[str] = "StrategyUpdated"

    leg: str
    old_strategy: Optional[str]
    new_strategy: str


@dataclass(frozen=True)
class PositionManagerUpdatedEvent(VaultEvent):
    """Position manager reference replaced."""

    name: ClassVar[str] = "PositionManagerUpdated"

    old_manager: Optional[str]
    new_manager: str


@dataclass(frozen=True)
class OwnershipTransferredEvent(VaultEvent):
    """Owner replaced."""

    name: ClassVar[str] = "OwnershipTransferred"

    previous_owner: str
    new_owner: str


@dataclass(frozen=True)
class SharesTransferredEvent(VaultEvent):
    """Shares moved between accounts."""

    name: ClassVar[str] = "SharesTransferred"

    sender: str
    recipient: str
    shares: int


EventCallback = Callable[[VaultEvent], None]


class EventBus:
    """
    Synchronous publisher for vault events.

    Subscriber failures are logged and never propagate: an event is only
    published once the operation that produced it has committed.

    Example:
        >>> bus = EventBus()
        >>> bus.subscribe(lambda event: print(event.name))
        >>> bus.publish(EmergencyPauseEvent(paused=True))
        EmergencyPause
    """

    def __init__(self, max_history: int = 1000):
        self._subscribers: List[EventCallback] = []
        self._history: Deque[VaultEvent] = deque(maxlen=max_history)

    @property
    def history(self) -> List[VaultEvent]:
        """Published events, oldest first."""
        return list(self._history)

    def subscribe(self, callback: EventCallback) -> None:
        """Register a callback for every published event."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: EventCallback) -> bool:
        """Remove a callback. Returns True if it was registered."""
        try:
            self._subscribers.remove(callback)
            return True
        except ValueError:
            return False

    def publish(self, event: VaultEvent) -> None:
        """Record event and deliver it to every subscriber."""
        self._history.append(event)
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Event subscriber failed on {event.name}: {e}")

    def events_named(self, name: str) -> List[VaultEvent]:
        """Published events with the given name."""
        return [e for e in self._history if e.name == name]
