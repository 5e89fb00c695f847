import logging
from typing import Optional, Union

from account_table import AccountTable
from errors import BalanceOverflow, InsufficientFunds
from models import (
    Chargeback,
    ClientAccount,
    Deposit,
    Dispute,
    DisputeState,
    IgnoreReason,
    LoggedTransaction,
    Outcome,
    Resolve,
    Transaction,
    Withdrawal,
)
from transaction_log import TransactionLog

logger = logging.getLogger(__name__)


class Ledger:
    """
    Applies transactions, one at a time and in order, to client accounts.

    The ledger owns its AccountTable and TransactionLog for the whole run.
    A transaction that breaks a rule is ignored: apply() reports why and
    leaves every account and log entry as it was.
    """

    def __init__(self):
        self._accounts = AccountTable()
        self._log = TransactionLog()

    @property
    def accounts(self) -> AccountTable:
        return self._accounts

    @property
    def transaction_log(self) -> TransactionLog:
        return self._log

    def apply(self, transaction: Transaction) -> Outcome:
        account = self._accounts.get_or_create(transaction.client)

        match transaction:
            case Deposit():
                outcome = self._apply_deposit(account, transaction)
            case Withdrawal():
                outcome = self._apply_withdrawal(account, transaction)
            case Dispute():
                outcome = self._apply_dispute(account, transaction)
            case Resolve():
                outcome = self._apply_resolve(account, transaction)
            case Chargeback():
                outcome = self._apply_chargeback(account, transaction)
            case _:
                raise TypeError(f"not a transaction: {transaction!r}")

        if not outcome.applied:
            logger.debug(
                f"{transaction.transaction_type.value} tx {transaction.tx_id} "
                f"for client {transaction.client} ignored: {outcome.reason.value}"
            )
        return outcome

    def _apply_deposit(self, account: ClientAccount, transaction: Deposit) -> Outcome:
        if transaction.tx_id in self._log:
            return Outcome.ignored(IgnoreReason.DUPLICATE_TRANSACTION)
        if account.locked:
            return Outcome.ignored(IgnoreReason.ACCOUNT_LOCKED)

        try:
            account.credit(transaction.amount)
        except BalanceOverflow:
            # Not logged, so a retry under the same tx id is still accepted.
            return Outcome.ignored(IgnoreReason.BALANCE_OVERFLOW)

        self._log.record(transaction.tx_id, self._log_entry(transaction))
        return Outcome.success()

    def _apply_withdrawal(self, account: ClientAccount, transaction: Withdrawal) -> Outcome:
        if transaction.tx_id in self._log:
            return Outcome.ignored(IgnoreReason.DUPLICATE_TRANSACTION)
        if account.locked:
            return Outcome.ignored(IgnoreReason.ACCOUNT_LOCKED)

        try:
            account.debit(transaction.amount)
        except InsufficientFunds:
            return Outcome.ignored(IgnoreReason.INSUFFICIENT_FUNDS)

        self._log.record(transaction.tx_id, self._log_entry(transaction))
        return Outcome.success()

    def _apply_dispute(self, account: ClientAccount, transaction: Dispute) -> Outcome:
        original = self._find_original(transaction)
        if isinstance(original, Outcome):
            return original

        if not original.is_deposit:
            return Outcome.ignored(IgnoreReason.NOT_A_DEPOSIT)
        if original.dispute_state != DisputeState.NONE:
            return Outcome.ignored(IgnoreReason.NOT_DISPUTABLE)
        if account.locked:
            return Outcome.ignored(IgnoreReason.ACCOUNT_LOCKED)

        try:
            account.hold(original.amount)
        except InsufficientFunds:
            return Outcome.ignored(IgnoreReason.INSUFFICIENT_FUNDS)
        except BalanceOverflow:
            return Outcome.ignored(IgnoreReason.BALANCE_OVERFLOW)

        self._log.mark_disputed(transaction.tx_id)
        return Outcome.success()

    def _apply_resolve(self, account: ClientAccount, transaction: Resolve) -> Outcome:
        original = self._find_original(transaction)
        if isinstance(original, Outcome):
            return original

        if original.dispute_state != DisputeState.DISPUTED:
            return Outcome.ignored(IgnoreReason.NOT_DISPUTED)
        if account.locked:
            return Outcome.ignored(IgnoreReason.ACCOUNT_LOCKED)

        try:
            account.release_hold(original.amount)
        except BalanceOverflow:
            return Outcome.ignored(IgnoreReason.BALANCE_OVERFLOW)

        self._log.mark_resolved(transaction.tx_id)
        return Outcome.success()

    def _apply_chargeback(self, account: ClientAccount, transaction: Chargeback) -> Outcome:
        original = self._find_original(transaction)
        if isinstance(original, Outcome):
            return original

        if original.dispute_state != DisputeState.DISPUTED:
            return Outcome.ignored(IgnoreReason.NOT_DISPUTED)
        if account.locked:
            return Outcome.ignored(IgnoreReason.ACCOUNT_LOCKED)

        account.remove_held(original.amount)
        account.lock()
        self._log.mark_charged_back(transaction.tx_id)
        logger.info(f"Client {transaction.client} locked by chargeback of tx {transaction.tx_id}")
        return Outcome.success()

    def _find_original(
        self, transaction: Union[Dispute, Resolve, Chargeback]
    ) -> Union[LoggedTransaction, Outcome]:
        """Look up the disputed transaction, or the Outcome explaining why it can't be used."""
        original: Optional[LoggedTransaction] = self._log.get(transaction.tx_id)
        if original is None:
            return Outcome.ignored(IgnoreReason.TRANSACTION_NOT_FOUND)
        if original.client != transaction.client:
            return Outcome.ignored(IgnoreReason.CLIENT_MISMATCH)
        return original

    @staticmethod
    def _log_entry(transaction: Union[Deposit, Withdrawal]) -> LoggedTransaction:
        return LoggedTransaction(
            client=transaction.client,
            amount=transaction.amount,
            kind=transaction.transaction_type,
        )
