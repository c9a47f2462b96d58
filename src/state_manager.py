from decimal import Decimal
from typing import Dict, Optional

from models import ClientAccount, DisputableTransaction


class StateManager:
    """
    In-memory ledger state: client accounts and the deposits kept for dispute lookups.

    Performs the balance arithmetic for each event type. Business rules
    (uniqueness, ownership, dispute eligibility, locked accounts) are the
    caller's responsibility.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._transactions: Dict[int, DisputableTransaction] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def deposit(self, account: ClientAccount, amount: Decimal) -> None:
        account.available += amount

    def withdraw(self, account: ClientAccount, amount: Decimal) -> bool:
        """Debit available funds. Returns False and leaves the account untouched if funds are insufficient."""
        if account.available < amount:
            return False
        account.available -= amount
        return True

    def hold(self, account: ClientAccount, amount: Decimal) -> None:
        account.available -= amount
        account.held += amount

    def release(self, account: ClientAccount, amount: Decimal) -> None:
        account.held -= amount
        account.available += amount

    def chargeback(self, account: ClientAccount, amount: Decimal) -> None:
        """Remove held funds from the account and lock it permanently."""
        account.held -= amount
        account.locked = True

    def record_deposit(self, transaction_id: int, client_id: int, amount: Decimal) -> None:
        """Store deposit for future dispute lookups."""
        self._transactions[transaction_id] = DisputableTransaction(client_id=client_id, amount=amount)

    def get_transaction(self, transaction_id: int) -> Optional[DisputableTransaction]:
        """Retrieve stored deposit by ID."""
        return self._transactions.get(transaction_id)

    def mark_disputed(self, transaction_id: int) -> None:
        self._transactions[transaction_id].disputed = True

    def mark_resolved(self, transaction_id: int) -> None:
        self._transactions[transaction_id].disputed = False

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)
