"""
Entry-Point Guards.

Reentrancy lock, owner check and pause check applied to vault methods.
"""

import threading
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Iterator, Optional, TypeVar

from ..core import (
    NotOwnerError,
    ReentrantCallError,
    VaultPausedError,
    get_audit_logger,
)

F = TypeVar("F", bound=Callable[..., Any])


class ReentrancyGuard:
    """
    Per-instance lock for mutating entry points.

    Entry fails immediately while another guarded call is executing, whether
    the second call re-enters from a collaborator callback on the same
    thread or arrives from another thread. Nothing queues or blocks.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._operation: Optional[str] = None

    @property
    def entered(self) -> bool:
        """Whether a guarded call is executing."""
        return self._lock.locked()

    @property
    def operation(self) -> Optional[str]:
        """Name of the executing guarded call, if any."""
        return self._operation

    @contextmanager
    def enter(self, operation: str) -> Iterator[None]:
        """Hold the lock for the duration of operation."""
        if not self._lock.acquire(blocking=False):
            raise ReentrantCallError(
                f"{operation} called while {self._operation or 'another call'} is executing",
                details={"operation": operation, "in_flight": self._operation},
            )
        self._operation = operation
        try:
            yield
        finally:
            self._operation = None
            self._lock.release()


def non_reentrant(func: F) -> F:
    """Run the method under the instance's ReentrancyGuard (self._guard)."""

    @wraps(func)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
        with self._guard.enter(func.__name__):
            return func(self, *args, **kwargs)

    return wrapper  # type: ignore


def only_owner(func: F) -> F:
    """Reject the call unless its caller argument is the instance owner."""

    @wraps(func)
    def wrapper(self: Any, caller: str, *args: Any, **kwargs: Any) -> Any:
        if caller != self.owner:
            get_audit_logger().access_denied(func.__name__, caller)
            raise NotOwnerError(
                f"{func.__name__} is owner-only",
                details={"caller": caller},
            )
        return func(self, caller, *args, **kwargs)

    return wrapper  # type: ignore


def when_not_paused(func: F) -> F:
    """Reject the call while the instance is paused."""

    @wraps(func)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
        if self.is_paused():
            raise VaultPausedError(f"{func.__name__} rejected: vault is paused")
        return func(self, *args, **kwargs)

    return wrapper  # type: ignore
