"""Notifications emitted after successful pool operations."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import Any, Union

import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class PairAdded:
    low: str
    high: str
    fee_bps: int


@dataclass(frozen=True)
class PairRemoved:
    low: str
    high: str


@dataclass(frozen=True)
class LiquidityDeposited:
    low: str
    high: str
    amount_low: int
    amount_high: int


@dataclass(frozen=True)
class LiquidityWithdrawn:
    low: str
    high: str
    amount_low: int
    amount_high: int


@dataclass(frozen=True)
class Swapped:
    caller: str
    token_in: str
    token_out: str
    amount_in: int
    amount_out: int


PoolEvent = Union[PairAdded, PairRemoved, LiquidityDeposited, LiquidityWithdrawn, Swapped]

EventListener = Callable[[PoolEvent], Any]

# Log event names, keyed by notification type
_LOG_NAMES: dict[type, str] = {
    PairAdded: "pair_added",
    PairRemoved: "pair_removed",
    LiquidityDeposited: "liquidity_deposited",
    LiquidityWithdrawn: "liquidity_withdrawn",
    Swapped: "swapped",
}


class EventBus:
    """Fan-out of pool notifications to registered listeners."""

    def __init__(self) -> None:
        self._listeners: list[EventListener] = []

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: PoolEvent) -> None:
        """Log the event and deliver it to every listener.

        The operation has already committed, so a failing listener is logged
        and skipped; the remaining listeners still run and nothing is raised.
        """
        name = _LOG_NAMES[type(event)]
        logger.info(name, **asdict(event))
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("listener_failed", notification=name, listener=repr(listener))
