import logging
from typing import Dict, Iterable, Optional, TextIO

from models import ClientAccount, DecodeFailure, ProcessingStats, TransactionRecord
from state_manager import StateManager
from transaction_processor import TransactionProcessor
from transaction_reader import TransactionReader

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Replays a transaction log into final account states.

    Transactions are applied strictly in input order, one at a time: a dispute
    can only see deposits that appeared earlier in the same log. Malformed
    records and rejected transactions are skipped and processing continues.
    """

    def __init__(self, state: Optional[StateManager] = None):
        self._state = state if state is not None else StateManager()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states. Raises OSError if the file can't be read."""
        logger.info(f"Processing transactions from {filepath}")
        with TransactionReader.from_file(filepath) as reader:
            return self.process(reader.records())

    def process_stream(self, stream: TextIO) -> Dict[int, ClientAccount]:
        """Process CSV from an already open text stream."""
        return self.process(TransactionReader(stream).records())

    def process(self, records: Iterable[TransactionRecord]) -> Dict[int, ClientAccount]:
        """Apply each decoded record in order, skipping decode failures."""
        for record in records:
            if isinstance(record, DecodeFailure):
                self._stats.record_malformed()
                continue
            self._stats.record_result(self._processor.process_transaction(record))

        logger.info(
            f"Processed: {self._stats.processed}, "
            f"Applied: {self._stats.applied}, "
            f"Ignored: {self._stats.ignored_total}, "
            f"Malformed: {self._stats.malformed}"
        )
        return self._state.get_all_accounts()
