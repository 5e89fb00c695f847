from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterator, List, Optional

from models import ClientAccount, ClientId


@dataclass(frozen=True)
class AccountSnapshot:
    client: ClientId
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool


class AccountTable:
    """Client accounts keyed by client id, created on first reference."""

    def __init__(self):
        self._accounts: Dict[ClientId, ClientAccount] = {}

    def get_or_create(self, client_id: ClientId) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get(self, client_id: ClientId) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def snapshot(self) -> List[AccountSnapshot]:
        """
        Read-only rows for output, in ascending client order.
        The total saturates at the maximum balance instead of failing.
        """
        return [
            AccountSnapshot(
                client=account.client_id,
                available=account.available,
                held=account.held,
                total=account.total,
                locked=account.locked,
            )
            for account in self
        ]

    def __contains__(self, client_id: ClientId) -> bool:
        return client_id in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def __iter__(self) -> Iterator[ClientAccount]:
        for client_id in sorted(self._accounts):
            yield self._accounts[client_id]
