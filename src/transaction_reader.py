import csv
import logging
from typing import Dict, Iterator, List, Optional, TextIO

from amounts import parse_amount
from models import (
    DISPUTE_TRANSACTIONS,
    FUNDS_TRANSACTIONS,
    MAX_CLIENT_ID,
    MAX_TRANSACTION_ID,
    DecodeFailure,
    Transaction,
    TransactionRecord,
    TransactionType,
)

logger = logging.getLogger(__name__)


class TransactionReader:
    """
    Streams transactions out of a CSV source with a `type, client, tx, amount` header.

    Records are decoded lazily, one row at a time. Rows that can't be decoded
    are yielded as DecodeFailure so the caller can skip them and keep going.
    """

    def __init__(self, stream: TextIO):
        self._stream = stream

    @classmethod
    def from_file(cls, filepath: str) -> "TransactionReader":
        """
        Open a CSV file for reading. Raises OSError if the file can't be opened.

        A leading BOM is dropped. Bytes that aren't valid UTF-8 are replaced, so
        only the rows holding them fail to decode.
        """
        return cls(open(filepath, "r", newline="", encoding="utf-8-sig", errors="replace"))

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> "TransactionReader":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def records(self) -> Iterator[TransactionRecord]:
        """Yield a Transaction or a DecodeFailure for every data row, in file order."""
        reader = csv.DictReader(self._stream)
        try:
            fieldnames = reader.fieldnames
        except csv.Error as e:
            logger.debug(f"Failed to read header: {e}")
            yield DecodeFailure(line_number=reader.line_num, row=[], reason=f"unreadable header: {e}")
            return
        if fieldnames is None:
            return
        reader.fieldnames = [name.replace("\ufeff", "").strip().lower() for name in fieldnames]

        while True:
            try:
                row = next(reader)
            except StopIteration:
                return
            except csv.Error as e:
                logger.debug(f"Failed to read line {reader.line_num}: {e}")
                yield DecodeFailure(line_number=reader.line_num, row=[], reason=str(e))
                continue

            try:
                yield parse_row(row)
            except ValueError as e:
                logger.debug(f"Failed to parse row {row} at line {reader.line_num}: {e}")
                yield DecodeFailure(line_number=reader.line_num, row=_raw_fields(row), reason=str(e))


def parse_row(row: Dict[Optional[str], object]) -> Transaction:
    """Parse CSV row into Transaction. Raises ValueError if the row is malformed."""
    extra = row.get(None) or []
    if any(value.strip() for value in extra):
        raise ValueError(f"unexpected extra fields {extra}")

    transaction_type_str = _field(row, "type").lower()
    try:
        transaction_type = TransactionType(transaction_type_str)
    except ValueError:
        raise ValueError(f"unknown transaction type {transaction_type_str!r}") from None

    client_id = _parse_id(_field(row, "client"), "client", MAX_CLIENT_ID)
    transaction_id = _parse_id(_field(row, "tx"), "tx", MAX_TRANSACTION_ID)
    amount_str = _field(row, "amount")

    if transaction_type in FUNDS_TRANSACTIONS:
        if not amount_str:
            raise ValueError(f"{transaction_type.value} requires an amount")
        return FUNDS_TRANSACTIONS[transaction_type](
            client_id=client_id,
            transaction_id=transaction_id,
            amount=parse_amount(amount_str),
        )

    # Disputes, resolves and chargebacks refer to the original deposit's amount
    return DISPUTE_TRANSACTIONS[transaction_type](client_id=client_id, transaction_id=transaction_id)


def _field(row: Dict[Optional[str], object], name: str) -> str:
    value = row.get(name)
    if value is None:
        return ""
    return value.strip()


def _parse_id(text: str, name: str, maximum: int) -> int:
    if not text.isascii() or not text.isdigit():
        raise ValueError(f"{name} {text!r} is not an unsigned integer")
    value = int(text)
    if value > maximum:
        raise ValueError(f"{name} {value} is out of range (max {maximum})")
    return value


def _raw_fields(row: Dict[Optional[str], object]) -> List[str]:
    fields = [value for key, value in row.items() if key is not None and value is not None]
    return fields + list(row.get(None) or [])
