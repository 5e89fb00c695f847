import logging
from typing import Dict, Iterable, TextIO

from account_table import AccountTable
from csv_io import read_transactions
from errors import RowError
from ledger import Ledger
from models import ProcessingStats, Transaction

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Feeds a transaction stream through a single Ledger, strictly in input order.
    Only I/O failures escape; every bad row or refused transaction is counted and skipped.
    """

    def __init__(self):
        self._ledger = Ledger()
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    @property
    def accounts(self) -> AccountTable:
        return self._ledger.accounts

    def process_file(self, filepath: str) -> AccountTable:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath}")
        with open(filepath, "r", encoding="utf-8-sig", newline="") as f:
            return self.process_stream(f)

    def process_stream(self, stream: TextIO) -> AccountTable:
        return self.process_transactions(read_transactions(stream, on_reject=self._reject_row))

    def process_transactions(self, transactions: Iterable[Transaction]) -> AccountTable:
        for transaction in transactions:
            self._stats.record(self._ledger.apply(transaction))

        logger.info(f"Processing complete: {self._stats.report()}")
        return self._ledger.accounts

    def _reject_row(self, row: Dict[str, str], error: RowError) -> None:
        self._stats.record_rejected_row()
