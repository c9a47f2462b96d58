import logging
from typing import Optional, Set, Tuple

from models import (
    Chargeback,
    ClientAccount,
    Deposit,
    Dispute,
    DisputableTransaction,
    ProcessingResult,
    Resolve,
    Transaction,
    Withdrawal,
)
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to state, one at a time, in the order given.

    Returns ProcessingResult to indicate whether the transaction was applied
    or why it was ignored. An ignored transaction never changes state.
    """

    def __init__(self, state: StateManager):
        self._state = state
        self._seen_transaction_ids: Set[int] = set()

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            SUCCESS: Applied to the account
            DUPLICATE_TRANSACTION: Deposit/withdrawal reusing an earlier tx id
            ACCOUNT_LOCKED: Account was frozen by an earlier chargeback
            INSUFFICIENT_FUNDS: Withdrawal larger than available funds
            TRANSACTION_NOT_FOUND: Referenced deposit does not exist
            CLIENT_MISMATCH: Referenced deposit belongs to another client
            INVALID_STATE: Referenced deposit is not in a state that allows the action
        """
        match transaction:
            case Deposit() | Withdrawal():
                result = self._process_funds_transaction(transaction)
            case Dispute() | Resolve() | Chargeback():
                result = self._process_dispute_transaction(transaction)
            case _:
                raise TypeError(f"Unsupported transaction: {transaction!r}")

        if result != ProcessingResult.SUCCESS:
            logger.debug(f"Ignored {transaction!r}: {result.value}")
        return result

    def _process_funds_transaction(self, transaction: Transaction) -> ProcessingResult:
        if transaction.transaction_id in self._seen_transaction_ids:
            return ProcessingResult.DUPLICATE_TRANSACTION
        self._seen_transaction_ids.add(transaction.transaction_id)

        account = self._state.get_or_create_account(transaction.client_id)
        if account.locked:
            return ProcessingResult.ACCOUNT_LOCKED

        if isinstance(transaction, Deposit):
            return self._handle_deposit(account, transaction)
        return self._handle_withdrawal(account, transaction)

    def _handle_deposit(self, account: ClientAccount, transaction: Deposit) -> ProcessingResult:
        self._state.deposit(account, transaction.amount)
        self._state.record_deposit(transaction.transaction_id, transaction.client_id, transaction.amount)
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, account: ClientAccount, transaction: Withdrawal) -> ProcessingResult:
        # Withdrawals are not stored: funds already left the account, so they can't be disputed
        if not self._state.withdraw(account, transaction.amount):
            return ProcessingResult.INSUFFICIENT_FUNDS
        return ProcessingResult.SUCCESS

    def _process_dispute_transaction(self, transaction: Transaction) -> ProcessingResult:
        account = self._state.get_or_create_account(transaction.client_id)
        original, result = self._lookup_original(account, transaction)
        if original is None:
            return result

        match transaction:
            case Dispute():
                return self._handle_dispute(account, transaction, original)
            case Resolve():
                return self._handle_resolve(account, transaction, original)
            case Chargeback():
                return self._handle_chargeback(account, transaction, original)
            case _:
                raise TypeError(f"Unsupported transaction: {transaction!r}")

    def _lookup_original(
        self, account: ClientAccount, transaction: Transaction
    ) -> Tuple[Optional[DisputableTransaction], ProcessingResult]:
        """Find the deposit a dispute/resolve/chargeback refers to, applying ownership and lock checks."""
        original = self._state.get_transaction(transaction.transaction_id)

        if original is None:
            return None, ProcessingResult.TRANSACTION_NOT_FOUND

        if original.client_id != transaction.client_id:
            logger.debug(
                f"{transaction!r}: client mismatch (expected {original.client_id}, got {transaction.client_id})"
            )
            return None, ProcessingResult.CLIENT_MISMATCH

        if account.locked:
            return None, ProcessingResult.ACCOUNT_LOCKED

        return original, ProcessingResult.SUCCESS

    def _handle_dispute(
        self, account: ClientAccount, transaction: Dispute, original: DisputableTransaction
    ) -> ProcessingResult:
        if not original.can_dispute:
            return ProcessingResult.INVALID_STATE

        self._state.hold(account, original.amount)
        self._state.mark_disputed(transaction.transaction_id)
        return ProcessingResult.SUCCESS

    def _handle_resolve(
        self, account: ClientAccount, transaction: Resolve, original: DisputableTransaction
    ) -> ProcessingResult:
        if not original.disputed:
            return ProcessingResult.INVALID_STATE

        self._state.release(account, original.amount)
        self._state.mark_resolved(transaction.transaction_id)
        return ProcessingResult.SUCCESS

    def _handle_chargeback(
        self, account: ClientAccount, transaction: Chargeback, original: DisputableTransaction
    ) -> ProcessingResult:
        if not original.disputed:
            return ProcessingResult.INVALID_STATE

        # The deposit stays disputed: a charged-back transaction can't be disputed or resolved again
        self._state.chargeback(account, original.amount)
        return ProcessingResult.SUCCESS
