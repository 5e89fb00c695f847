from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import ClassVar, Optional, Union

from arithmetic import MAX_BALANCE, ZERO, checked_add, checked_sub, has_valid_scale, saturating_add
from errors import AmountError, BalanceOverflow, InsufficientFunds

MAX_CLIENT_ID = 0xFFFF
MAX_TRANSACTION_ID = 0xFFFFFFFF


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class DisputeState(Enum):
    NONE = "none"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


class IgnoreReason(Enum):
    DUPLICATE_TRANSACTION = "duplicate_transaction"
    ACCOUNT_LOCKED = "account_locked"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    BALANCE_OVERFLOW = "balance_overflow"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    CLIENT_MISMATCH = "client_mismatch"
    NOT_A_DEPOSIT = "not_a_deposit"
    NOT_DISPUTABLE = "not_disputable"
    NOT_DISPUTED = "not_disputed"


@dataclass(frozen=True, order=True)
class ClientId:
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"client id must be an integer, got {self.value!r}")
        if not 0 <= self.value <= MAX_CLIENT_ID:
            raise ValueError(f"client id out of range: {self.value}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class TransactionId:
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"transaction id must be an integer, got {self.value!r}")
        if not 0 <= self.value <= MAX_TRANSACTION_ID:
            raise ValueError(f"transaction id out of range: {self.value}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Amount:
    """
    A strictly positive monetary quantity with at most four fractional digits.
    Construction is the only validation point; holders can rely on it.
    Extra fractional digits are refused rather than rounded, so an input
    row such as 1.00001 is rejected instead of being silently truncated.
    """

    value: Decimal

    def __post_init__(self):
        if not isinstance(self.value, Decimal):
            raise AmountError(f"amount must be a Decimal, got {type(self.value).__name__}")
        if not self.value.is_finite():
            raise AmountError(f"amount must be finite: {self.value}")
        if self.value <= ZERO:
            raise AmountError(f"amount must be positive: {self.value}")
        if self.value > MAX_BALANCE:
            raise AmountError(f"amount exceeds maximum balance: {self.value}")
        if not has_valid_scale(self.value):
            raise AmountError(f"amount has more than 4 decimal places: {self.value}")

    @classmethod
    def parse(cls, text: str) -> "Amount":
        try:
            value = Decimal(text.strip())
        except InvalidOperation:
            raise AmountError(f"unparsable amount: {text!r}") from None
        return cls(value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Deposit:
    client: ClientId
    tx_id: TransactionId
    amount: Amount
    transaction_type: ClassVar[TransactionType] = TransactionType.DEPOSIT


@dataclass(frozen=True)
class Withdrawal:
    client: ClientId
    tx_id: TransactionId
    amount: Amount
    transaction_type: ClassVar[TransactionType] = TransactionType.WITHDRAWAL


@dataclass(frozen=True)
class Dispute:
    client: ClientId
    tx_id: TransactionId
    transaction_type: ClassVar[TransactionType] = TransactionType.DISPUTE


@dataclass(frozen=True)
class Resolve:
    client: ClientId
    tx_id: TransactionId
    transaction_type: ClassVar[TransactionType] = TransactionType.RESOLVE


@dataclass(frozen=True)
class Chargeback:
    client: ClientId
    tx_id: TransactionId
    transaction_type: ClassVar[TransactionType] = TransactionType.CHARGEBACK


Transaction = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]


@dataclass
class LoggedTransaction:
    client: ClientId
    amount: Amount
    kind: TransactionType
    dispute_state: DisputeState = DisputeState.NONE

    @property
    def is_deposit(self) -> bool:
        return self.kind == TransactionType.DEPOSIT


@dataclass
class ClientAccount:
    """
    Balance state for one client.

    Every mutation computes all new field values first and only then assigns
    them, so a refused mutation leaves the account exactly as it was.
    """

    client_id: ClientId
    available: Decimal = ZERO
    held: Decimal = ZERO
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return saturating_add(self.available, self.held)

    def credit(self, amount: Amount) -> None:
        available = checked_add(self.available, amount.value)
        if available is None:
            raise BalanceOverflow(f"client {self.client_id}: available would overflow")
        self.available = available

    def debit(self, amount: Amount) -> None:
        available = checked_sub(self.available, amount.value)
        if available is None:
            raise InsufficientFunds(f"client {self.client_id}: available {self.available} < {amount}")
        self.available = available

    def hold(self, amount: Amount) -> None:
        available = checked_sub(self.available, amount.value)
        if available is None:
            raise InsufficientFunds(f"client {self.client_id}: available {self.available} < {amount}")
        held = checked_add(self.held, amount.value)
        if held is None:
            raise BalanceOverflow(f"client {self.client_id}: held would overflow")
        self.available = available
        self.held = held

    def release_hold(self, amount: Amount) -> None:
        held = checked_sub(self.held, amount.value)
        if held is None:
            raise InsufficientFunds(f"client {self.client_id}: held {self.held} < {amount}")
        available = checked_add(self.available, amount.value)
        if available is None:
            raise BalanceOverflow(f"client {self.client_id}: available would overflow")
        self.held = held
        self.available = available

    def remove_held(self, amount: Amount) -> None:
        held = checked_sub(self.held, amount.value)
        if held is None:
            raise InsufficientFunds(f"client {self.client_id}: held {self.held} < {amount}")
        self.held = held

    def lock(self) -> None:
        self.locked = True


@dataclass(frozen=True)
class Outcome:
    applied: bool
    reason: Optional[IgnoreReason] = None

    @classmethod
    def success(cls) -> "Outcome":
        return cls(applied=True)

    @classmethod
    def ignored(cls, reason: IgnoreReason) -> "Outcome":
        return cls(applied=False, reason=reason)


@dataclass
class ProcessingStats:
    """Counters for tracking processing statistics."""

    applied: int = 0
    ignored: Counter = field(default_factory=Counter)
    rejected_rows: int = 0

    def record(self, outcome: Outcome) -> None:
        if outcome.applied:
            self.applied += 1
        else:
            self.ignored[outcome.reason] += 1

    def record_rejected_row(self) -> None:
        self.rejected_rows += 1

    @property
    def ignored_total(self) -> int:
        return sum(self.ignored.values())

    def report(self) -> str:
        return (
            f"Applied: {self.applied}, "
            f"Ignored: {self.ignored_total}, "
            f"Rejected rows: {self.rejected_rows}"
        )
