from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from currency import Currency


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class DisputeStatus(Enum):
    CLEAN = "clean"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    CHARGED_BACK = "charged_back"

    def can_transition_to(self, status: "DisputeStatus") -> bool:
        return status in _DISPUTE_TRANSITIONS[self]


_DISPUTE_TRANSITIONS = {
    DisputeStatus.CLEAN: {DisputeStatus.DISPUTED},
    DisputeStatus.DISPUTED: {DisputeStatus.RESOLVED, DisputeStatus.CHARGED_BACK},
    DisputeStatus.RESOLVED: set(),
    DisputeStatus.CHARGED_BACK: set(),
}


class ProcessingResult(Enum):
    SUCCESS = "success"
    INVALID_AMOUNT = "invalid_amount"
    DUPLICATE_TRANSACTION = "duplicate_transaction"
    ACCOUNT_LOCKED = "account_locked"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    UNKNOWN_TRANSACTION = "unknown_transaction"
    CLIENT_MISMATCH = "client_mismatch"
    INVALID_DISPUTE_STATE = "invalid_dispute_state"

    @property
    def applied(self) -> bool:
        return self is ProcessingResult.SUCCESS


@dataclass
class Transaction:
    """A decoded input event. `amount` is only set for deposits and withdrawals."""

    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Currency] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(slots=True)
class LedgerEntry:
    """
    A stored deposit or withdrawal, kept so later events can dispute it.
    Most entries are never disputed and only ever carry the CLEAN status.
    """

    transaction_id: int
    client_id: int
    amount: Currency
    kind: TransactionType
    status: DisputeStatus = DisputeStatus.CLEAN


@dataclass
class ClientAccount:
    """
    Balances for one client.
    Every mutation computes all new values before assigning any, so an
    overflow leaves the account untouched.
    """

    client_id: int
    available: Currency = Currency.ZERO
    held: Currency = Currency.ZERO
    locked: bool = False

    @property
    def total(self) -> Currency:
        return self.available + self.held

    def credit(self, amount: Currency) -> None:
        available = self.available + amount
        # total must stay under the cap as well
        available.checked_add(self.held)
        self.available = available

    def debit(self, amount: Currency) -> None:
        self.available = self.available - amount

    def hold(self, amount: Currency) -> None:
        available = self.available - amount
        held = self.held + amount
        self.available, self.held = available, held

    def release_hold(self, amount: Currency) -> None:
        held = self.held - amount
        available = self.available + amount
        self.available, self.held = available, held

    def remove_held(self, amount: Currency) -> None:
        self.held = self.held - amount


@dataclass
class ProcessingStats:
    """Per-result counters for a single run."""

    results: Counter = field(default_factory=Counter)

    def record(self, result: ProcessingResult) -> None:
        self.results[result] += 1

    @property
    def processed(self) -> int:
        return self.results[ProcessingResult.SUCCESS]

    @property
    def dropped(self) -> int:
        return sum(count for result, count in self.results.items() if not result.applied)
