from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Union

from amounts import ZERO

MAX_CLIENT_ID = 65535
MAX_TRANSACTION_ID = 4294967295


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class ProcessingResult(Enum):
    SUCCESS = "success"
    DUPLICATE_TRANSACTION = "duplicate_transaction"
    ACCOUNT_LOCKED = "account_locked"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    CLIENT_MISMATCH = "client_mismatch"
    INVALID_STATE = "invalid_state"


@dataclass(frozen=True)
class Transaction:
    client_id: int
    transaction_id: int

    def __repr__(self) -> str:
        return f"{type(self).__name__}(client={self.client_id}, tx={self.transaction_id})"


@dataclass(frozen=True)
class Deposit(Transaction):
    amount: Decimal
    transaction_type = TransactionType.DEPOSIT

    def __repr__(self) -> str:
        return f"Deposit(client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(frozen=True)
class Withdrawal(Transaction):
    amount: Decimal
    transaction_type = TransactionType.WITHDRAWAL

    def __repr__(self) -> str:
        return f"Withdrawal(client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(frozen=True, repr=False)
class Dispute(Transaction):
    transaction_type = TransactionType.DISPUTE


@dataclass(frozen=True, repr=False)
class Resolve(Transaction):
    transaction_type = TransactionType.RESOLVE


@dataclass(frozen=True, repr=False)
class Chargeback(Transaction):
    transaction_type = TransactionType.CHARGEBACK


FUNDS_TRANSACTIONS = {
    TransactionType.DEPOSIT: Deposit,
    TransactionType.WITHDRAWAL: Withdrawal,
}

DISPUTE_TRANSACTIONS = {
    TransactionType.DISPUTE: Dispute,
    TransactionType.RESOLVE: Resolve,
    TransactionType.CHARGEBACK: Chargeback,
}


@dataclass(frozen=True)
class DecodeFailure:
    """A source record that could not be decoded into a Transaction."""
    line_number: int
    row: List[str]
    reason: str


TransactionRecord = Union[Transaction, DecodeFailure]


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = ZERO
    held: Decimal = ZERO
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held


@dataclass
class DisputableTransaction:
    """An accepted deposit, kept for the whole run so it can be disputed."""
    client_id: int
    amount: Decimal
    disputed: bool = False

    @property
    def can_dispute(self) -> bool:
        return not self.disputed


@dataclass
class ProcessingStats:
    """Counters for one engine run."""
    processed: int = 0
    applied: int = 0
    malformed: int = 0
    ignored: Dict[ProcessingResult, int] = field(default_factory=Counter)

    def record_result(self, result: ProcessingResult) -> None:
        self.processed += 1
        if result == ProcessingResult.SUCCESS:
            self.applied += 1
        else:
            self.ignored[result] += 1

    def record_malformed(self) -> None:
        self.malformed += 1

    @property
    def ignored_total(self) -> int:
        return sum(self.ignored.values())
