"""Access and reentrancy guard.

One flag per pool instance: at most one mutating operation is in flight at a
time, across all pairs.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum

from pairpool.errors import NotAuthorized, Reentrant
from pairpool.models.types import normalize_address


class GuardState(str, Enum):
    """Whether an operation is currently executing."""

    IDLE = "idle"
    BUSY = "busy"


class ReentrancyGuard:
    """IDLE/BUSY state machine gating every mutating pool operation."""

    def __init__(self) -> None:
        self._state = GuardState.IDLE

    @property
    def state(self) -> GuardState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state is GuardState.BUSY

    @contextmanager
    def enter(self, operation: str) -> Iterator[None]:
        """Hold the guard for the duration of the block.

        The state returns to IDLE when the block exits, whether or not it
        raised.

        Raises:
            Reentrant: If the guard is already BUSY
        """
        if self._state is GuardState.BUSY:
            raise Reentrant(f"Reentrant call to {operation}")
        self._state = GuardState.BUSY
        try:
            yield
        finally:
            self._state = GuardState.IDLE


def require_creator(caller: str, creator: str, operation: str) -> None:
    """Raise NotAuthorized unless caller is the configured creator."""
    if not isinstance(caller, str) or normalize_address(caller) != creator:
        raise NotAuthorized(f"{operation} is restricted to the creator")
