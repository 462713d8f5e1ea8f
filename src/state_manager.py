from typing import Dict, List, Optional

from models import ClientAccount, DisputeStatus, LedgerEntry

MAX_CLIENT_ID = 65535


class StateManager:
    """
    Owns the account table and the transaction ledger for one run.

    Client ids are a small dense u16 domain, so accounts live in a list indexed
    by client id that grows on demand instead of a dict.
    Ledger entries carry their own dispute status; nothing else is tracked for
    transactions that are never disputed.
    """

    def __init__(self):
        self._accounts: List[Optional[ClientAccount]] = []
        self._transactions: Dict[int, LedgerEntry] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if not 0 <= client_id <= MAX_CLIENT_ID:
            raise ValueError(f"Client id {client_id} outside 0..{MAX_CLIENT_ID}")

        if client_id >= len(self._accounts):
            self._accounts.extend([None] * (client_id + 1 - len(self._accounts)))

        account = self._accounts[client_id]
        if account is None:
            account = ClientAccount(client_id=client_id)
            self._accounts[client_id] = account
        return account

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        if 0 <= client_id < len(self._accounts):
            return self._accounts[client_id]
        return None

    def store_transaction(self, entry: LedgerEntry) -> None:
        """Store transaction for future dispute lookups."""
        self._transactions[entry.transaction_id] = entry

    def get_transaction(self, transaction_id: int) -> Optional[LedgerEntry]:
        """Retrieve stored transaction by ID."""
        return self._transactions.get(transaction_id)

    def has_transaction(self, transaction_id: int) -> bool:
        return transaction_id in self._transactions

    def set_dispute_status(self, transaction_id: int, status: DisputeStatus) -> None:
        """Move a stored transaction along the dispute lifecycle."""
        entry = self._transactions[transaction_id]
        if not entry.status.can_transition_to(status):
            raise ValueError(f"Transaction {transaction_id}: cannot move from {entry.status.value} to {status.value}")
        entry.status = status

    def is_transaction_disputed(self, transaction_id: int) -> bool:
        """Check if transaction is currently disputed."""
        entry = self._transactions.get(transaction_id)
        return entry is not None and entry.status is DisputeStatus.DISPUTED

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts ordered by client id (for final output)."""
        return {account.client_id: account for account in self._accounts if account is not None}

    def transaction_count(self) -> int:
        return len(self._transactions)
