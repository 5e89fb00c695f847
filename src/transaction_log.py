from typing import Dict, Iterator, Optional

from models import DisputeState, LoggedTransaction, TransactionId


class TransactionLog:
    """
    Append-only history of accepted deposits and withdrawals.
    Stores what later dispute, resolve and chargeback lookups need.
    Entries are never removed; only their dispute state changes.
    """

    def __init__(self):
        self._entries: Dict[TransactionId, LoggedTransaction] = {}

    def record(self, tx_id: TransactionId, entry: LoggedTransaction) -> bool:
        """Store entry unless tx_id is already known. Returns True if stored."""
        if tx_id in self._entries:
            return False
        self._entries[tx_id] = entry
        return True

    def get(self, tx_id: TransactionId) -> Optional[LoggedTransaction]:
        """Retrieve a logged transaction by ID."""
        return self._entries.get(tx_id)

    def mark_disputed(self, tx_id: TransactionId) -> None:
        self._entries[tx_id].dispute_state = DisputeState.DISPUTED

    def mark_resolved(self, tx_id: TransactionId) -> None:
        """Clear the dispute so the transaction may be disputed again."""
        self._entries[tx_id].dispute_state = DisputeState.NONE

    def mark_charged_back(self, tx_id: TransactionId) -> None:
        """Terminal state: no further dispute-family transition applies."""
        self._entries[tx_id].dispute_state = DisputeState.CHARGED_BACK

    def __contains__(self, tx_id: TransactionId) -> bool:
        return tx_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TransactionId]:
        return iter(self._entries)
