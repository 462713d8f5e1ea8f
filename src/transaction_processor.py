import logging
from typing import Optional, Tuple

from models import (
    ClientAccount,
    DisputeStatus,
    LedgerEntry,
    ProcessingResult,
    Transaction,
    TransactionType,
)
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions against state, one at a time, in input order.

    Rejected transactions leave state untouched and are reported through the
    returned ProcessingResult, never raised. Currency overflow is the exception:
    it propagates and aborts the run.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            SUCCESS: Applied
            anything else: Dropped, with the reason
        """
        account = self._state.get_or_create_account(transaction.client_id)

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(account, transaction)

        raise ValueError(f"Unsupported transaction type: {transaction.transaction_type}")

    def _check_transfer(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        name = transaction.transaction_type.value.capitalize()

        if transaction.amount is None or not transaction.amount.is_positive():
            logger.warning(f"{name} tx {transaction.transaction_id}: invalid amount {transaction.amount}")
            return ProcessingResult.INVALID_AMOUNT

        if self._state.has_transaction(transaction.transaction_id):
            logger.warning(f"{name} tx {transaction.transaction_id}: transaction id already used, skipping")
            return ProcessingResult.DUPLICATE_TRANSACTION

        if account.locked:
            logger.info(f"{name} tx {transaction.transaction_id}: account {account.client_id} is locked")
            return ProcessingResult.ACCOUNT_LOCKED

        return ProcessingResult.SUCCESS

    def _record(self, transaction: Transaction) -> None:
        self._state.store_transaction(LedgerEntry(
            transaction_id=transaction.transaction_id,
            client_id=transaction.client_id,
            amount=transaction.amount,
            kind=transaction.transaction_type,
        ))

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        result = self._check_transfer(account, transaction)
        if not result.applied:
            return result

        account.credit(transaction.amount)
        self._record(transaction)
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        result = self._check_transfer(account, transaction)
        if not result.applied:
            return result

        if account.available < transaction.amount:
            logger.info(f"Withdrawal tx {transaction.transaction_id}: insufficient funds ({account.available} < {transaction.amount})")
            return ProcessingResult.INSUFFICIENT_FUNDS

        account.debit(transaction.amount)
        self._record(transaction)
        return ProcessingResult.SUCCESS

    def _find_disputable(self, transaction: Transaction, expected: DisputeStatus) -> Tuple[Optional[LedgerEntry], ProcessingResult]:
        """Look up the referenced entry and check ownership and dispute status."""
        name = transaction.transaction_type.value.capitalize()
        original = self._state.get_transaction(transaction.transaction_id)

        if original is None:
            logger.warning(f"{name} for tx {transaction.transaction_id}: transaction not found")
            return None, ProcessingResult.UNKNOWN_TRANSACTION

        if original.client_id != transaction.client_id:
            logger.warning(f"{name} for tx {transaction.transaction_id}: client mismatch (expected {original.client_id}, got {transaction.client_id})")
            return None, ProcessingResult.CLIENT_MISMATCH

        if original.status is not expected:
            logger.warning(f"{name} for tx {transaction.transaction_id}: transaction is {original.status.value}")
            return None, ProcessingResult.INVALID_DISPUTE_STATE

        return original, ProcessingResult.SUCCESS

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original, result = self._find_disputable(transaction, DisputeStatus.CLEAN)
        if original is None:
            return result

        if account.locked:
            logger.info(f"Dispute for tx {transaction.transaction_id}: account {account.client_id} is locked")
            return ProcessingResult.ACCOUNT_LOCKED

        if account.available < original.amount:
            logger.info(f"Dispute for tx {transaction.transaction_id}: available {account.available} cannot cover {original.amount}")
            return ProcessingResult.INSUFFICIENT_FUNDS

        account.hold(original.amount)
        self._state.set_dispute_status(original.transaction_id, DisputeStatus.DISPUTED)
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original, result = self._find_disputable(transaction, DisputeStatus.DISPUTED)
        if original is None:
            return result

        account.release_hold(original.amount)
        self._state.set_dispute_status(original.transaction_id, DisputeStatus.RESOLVED)
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original, result = self._find_disputable(transaction, DisputeStatus.DISPUTED)
        if original is None:
            return result

        account.remove_held(original.amount)
        account.locked = True
        self._state.set_dispute_status(original.transaction_id, DisputeStatus.CHARGED_BACK)
        return ProcessingResult.SUCCESS
