import csv
import logging
from typing import Callable, Dict, Iterable, Iterator, Optional, TextIO

from account_table import AccountSnapshot
from arithmetic import format_amount
from errors import AmountError, RowError
from models import (
    Amount,
    Chargeback,
    ClientId,
    Deposit,
    Dispute,
    Resolve,
    Transaction,
    TransactionId,
    TransactionType,
    Withdrawal,
)

logger = logging.getLogger(__name__)

OUTPUT_FIELDS = ["client", "available", "held", "total", "locked"]


def read_transactions(
    stream: TextIO, on_reject: Optional[Callable[[Dict[str, str], RowError], None]] = None
) -> Iterator[Transaction]:
    """
    Yield transactions parsed from a CSV stream with a type,client,tx,amount header.
    Rows that can't be parsed are logged and skipped; on_reject is told about each.
    """
    reader = csv.DictReader(stream)
    for row in reader:
        try:
            yield parse_row(row)
        except RowError as e:
            logger.warning(f"Skipping row {reader.line_num} {row}: {e}")
            if on_reject is not None:
                on_reject(row, e)


def parse_row(row: Dict[Optional[str], Optional[str]]) -> Transaction:
    """Parse CSV row into Transaction."""
    normalized = {
        k.strip().lower(): (v or "").strip()
        for k, v in row.items()
        if isinstance(k, str)
    }

    try:
        transaction_type = TransactionType(normalized["type"].lower())
        client = ClientId(_parse_int(normalized["client"], "client"))
        tx_id = TransactionId(_parse_int(normalized["tx"], "tx"))
    except KeyError as e:
        raise RowError(f"missing column {e}") from None
    except ValueError as e:
        raise RowError(str(e)) from None

    match transaction_type:
        case TransactionType.DEPOSIT:
            return Deposit(client, tx_id, _parse_amount(normalized))
        case TransactionType.WITHDRAWAL:
            return Withdrawal(client, tx_id, _parse_amount(normalized))
        case TransactionType.DISPUTE:
            return Dispute(client, tx_id)
        case TransactionType.RESOLVE:
            return Resolve(client, tx_id)
        case TransactionType.CHARGEBACK:
            return Chargeback(client, tx_id)


def _parse_int(text: str, column: str) -> int:
    # int() would also accept signs and underscore separators such as "1_0".
    if not (text.isascii() and text.isdigit()):
        raise RowError(f"{column} is not an unsigned integer: {text!r}")
    return int(text)


def _parse_amount(normalized: Dict[str, str]) -> Amount:
    amount_str = normalized.get("amount", "")
    if not amount_str:
        raise RowError(f"{normalized['type']} without an amount")
    try:
        return Amount.parse(amount_str)
    except AmountError as e:
        raise RowError(str(e)) from None


def write_accounts(snapshots: Iterable[AccountSnapshot], stream: TextIO) -> None:
    """Write the account table as CSV, four decimal places per balance."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_FIELDS)
    for snapshot in snapshots:
        writer.writerow([
            snapshot.client,
            format_amount(snapshot.available),
            format_amount(snapshot.held),
            format_amount(snapshot.total),
            str(snapshot.locked).lower(),
        ])
