class AmountError(ValueError):
    """Raised when a value cannot be used as a transaction amount."""


class RowError(ValueError):
    """Raised when an input row cannot be turned into a transaction."""


class LedgerError(Exception):
    """Base class for balance mutations the ledger refuses to commit."""


class InsufficientFunds(LedgerError):
    pass


class BalanceOverflow(LedgerError):
    pass
