"""Value-transfer collaborator interface and an in-memory implementation.

The pool never moves balances itself. It calls a TokenTransfer, the
equivalent of the token contracts it holds custody in:

    transfer_from(token, owner, recipient, amount)  # pull, needs allowance
    transfer(token, recipient, amount)              # push from pool custody

Both raise TransferFailed when the move is refused. Collaborators that can
undo their own moves also implement TransactionalTransfer so the pool can
roll a failed operation back completely.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import structlog

from pairpool.errors import TransferFailed
from pairpool.models.types import normalize_address

logger = structlog.get_logger()


@runtime_checkable
class TokenTransfer(Protocol):
    """Capability to move token balances on behalf of the pool."""

    def transfer_from(self, token: str, owner: str, recipient: str, amount: int) -> None:
        """Move amount of token from owner to recipient using the pool's allowance.

        Raises:
            TransferFailed: On insufficient balance or allowance
        """
        ...

    def transfer(self, token: str, recipient: str, amount: int) -> None:
        """Move amount of token from pool custody to recipient.

        Raises:
            TransferFailed: On insufficient custody balance
        """
        ...


@runtime_checkable
class TransactionalTransfer(TokenTransfer, Protocol):
    """A TokenTransfer whose moves can be undone as a unit."""

    def transaction(self) -> AbstractContextManager[None]:
        """Context manager; moves made inside are reverted if it exits with an error."""
        ...


@dataclass(frozen=True)
class TransferRecord:
    """A completed balance move, passed to InMemoryTokenLedger.on_transfer."""

    token: str
    sender: str
    recipient: str
    amount: int


class InMemoryTokenLedger:
    """Balances and allowances for any number of tokens, held in dicts.

    Acts as every token contract at once. The pool's custody principal is
    the spender for transfer_from and the source for transfer.

    Usage:
        ledger = InMemoryTokenLedger(custody=POOL)
        ledger.mint(TOKEN_X, CREATOR, 1_000_000)
        ledger.approve(TOKEN_X, CREATOR, POOL, 1_000_000)

    Args:
        custody: The pool's own address
        on_transfer: Optional hook invoked after every move; lets tests play
            a token that calls back into the pool
    """

    def __init__(
        self,
        custody: str,
        on_transfer: Callable[[TransferRecord], None] | None = None,
    ) -> None:
        self.custody = normalize_address(custody, validate=True)
        self.on_transfer = on_transfer
        self._balances: defaultdict[tuple[str, str], int] = defaultdict(int)
        self._allowances: defaultdict[tuple[str, str, str], int] = defaultdict(int)
        self.history: list[TransferRecord] = []

    # --- Token-side administration ---

    def mint(self, token: str, holder: str, amount: int) -> None:
        """Credit holder with newly created tokens."""
        if amount < 0:
            raise ValueError(f"Cannot mint negative amount: {amount}")
        self._balances[(normalize_address(token), normalize_address(holder))] += amount

    def approve(self, token: str, owner: str, spender: str, amount: int) -> None:
        """Set the amount spender may pull from owner."""
        if amount < 0:
            raise ValueError(f"Cannot approve negative amount: {amount}")
        key = (normalize_address(token), normalize_address(owner), normalize_address(spender))
        self._allowances[key] = amount

    def balance_of(self, token: str, holder: str) -> int:
        return self._balances.get((normalize_address(token), normalize_address(holder)), 0)

    def allowance(self, token: str, owner: str, spender: str) -> int:
        key = (normalize_address(token), normalize_address(owner), normalize_address(spender))
        return self._allowances.get(key, 0)

    # --- TokenTransfer ---

    def transfer_from(self, token: str, owner: str, recipient: str, amount: int) -> None:
        token_norm = normalize_address(token)
        owner_norm = normalize_address(owner)
        allowance_key = (token_norm, owner_norm, self.custody)
        allowed = self._allowances.get(allowance_key, 0)
        if allowed < amount:
            raise TransferFailed(
                f"Allowance {allowed} below {amount} for {owner_norm} on {token_norm}"
            )
        self._move(token_norm, owner_norm, normalize_address(recipient), amount)
        self._allowances[allowance_key] = allowed - amount

    def transfer(self, token: str, recipient: str, amount: int) -> None:
        self._move(normalize_address(token), self.custody, normalize_address(recipient), amount)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Restore balances, allowances and history if the block raises."""
        balances = dict(self._balances)
        allowances = dict(self._allowances)
        history_len = len(self.history)
        try:
            yield
        except BaseException:
            reverted = len(self.history) - history_len
            self._balances = defaultdict(int, balances)
            self._allowances = defaultdict(int, allowances)
            del self.history[history_len:]
            logger.debug("token_ledger_rolled_back", reverted=reverted)
            raise

    def _move(self, token: str, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise TransferFailed(f"Negative transfer amount: {amount}")
        balance = self._balances.get((token, sender), 0)
        if balance < amount:
            raise TransferFailed(f"Balance {balance} below {amount} for {sender} on {token}")
        self._balances[(token, sender)] = balance - amount
        self._balances[(token, recipient)] += amount
        record = TransferRecord(token=token, sender=sender, recipient=recipient, amount=amount)
        self.history.append(record)
        if self.on_transfer is not None:
            self.on_transfer(record)
