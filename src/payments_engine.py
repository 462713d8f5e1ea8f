import logging
import sys
from typing import Dict, Iterable

from models import ClientAccount, ProcessingResult, ProcessingStats, Transaction
from state_manager import StateManager
from transaction_processor import TransactionProcessor
from transaction_reader import read_transactions

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Feeds transactions to the processor strictly in input order.
    Each instance is one isolated run: accounts, ledger and stats start empty.
    """

    def __init__(self):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath}")

        with open(filepath, "r", newline="") as f:
            self.process_transactions(read_transactions(f))

        # Print final processing report to stderr
        print(
            f"Processed: {self._stats.processed}, "
            f"Dropped: {self._stats.dropped}",
            file=sys.stderr
        )

        return self.get_accounts()

    def process_transactions(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        for transaction in transactions:
            self.process_transaction(transaction)
        return self.get_accounts()

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        result = self._processor.process_transaction(transaction)
        self._stats.record(result)
        if not result.applied:
            logger.debug(f"Dropped {transaction}: {result.value}")
        return result

    def get_accounts(self) -> Dict[int, ClientAccount]:
        return self._state.get_all_accounts()
