import csv
from typing import Dict, Iterable, Iterator, Optional

from currency import Currency, CurrencyError
from models import Transaction, TransactionType
from state_manager import MAX_CLIENT_ID

MAX_TRANSACTION_ID = 4294967295

REQUIRED_COLUMNS = ("type", "client", "tx")
AMOUNT_TYPES = {TransactionType.DEPOSIT, TransactionType.WITHDRAWAL}


class TransactionParseError(ValueError):
    """Input that cannot be decoded into a transaction. Aborts the run."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


def read_transactions(lines: Iterable[str]) -> Iterator[Transaction]:
    """
    Decode CSV rows into Transactions, lazily and in input order.

    The first row is the header (type, client, tx, amount). Whitespace around
    names and values is ignored and the amount column may be left off for
    dispute, resolve and chargeback rows.
    """
    reader = csv.DictReader(lines)

    if reader.fieldnames is None:
        return

    columns = [name.strip().lower() for name in reader.fieldnames]
    missing = [name for name in REQUIRED_COLUMNS if name not in columns]
    if missing:
        raise TransactionParseError(f"header is missing columns: {', '.join(missing)}", 1)

    for row in reader:
        if _is_blank(row):
            continue
        yield parse_row(row, reader.line_num)


def _is_blank(row: Dict[Optional[str], Optional[str]]) -> bool:
    return None not in row and all(not (value or "").strip() for value in row.values())


def parse_row(row: Dict[Optional[str], Optional[str]], line_number: Optional[int] = None) -> Transaction:
    """Parse CSV row into Transaction."""
    normalized = {
        key.strip().lower(): (value or "").strip()
        for key, value in row.items()
        if key is not None
    }

    type_str = normalized["type"].lower()
    try:
        transaction_type = TransactionType(type_str)
    except ValueError:
        raise TransactionParseError(f"unknown transaction type '{type_str}'", line_number) from None

    client_id = _parse_id(normalized["client"], "client", MAX_CLIENT_ID, line_number)
    transaction_id = _parse_id(normalized["tx"], "tx", MAX_TRANSACTION_ID, line_number)

    amount = None
    if transaction_type in AMOUNT_TYPES:
        amount_str = normalized.get("amount", "")
        if not amount_str:
            raise TransactionParseError(f"{type_str} requires an amount", line_number)
        try:
            amount = Currency.parse(amount_str)
        except CurrencyError as e:
            raise TransactionParseError(str(e), line_number) from e

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_id(value: str, column: str, maximum: int, line_number: Optional[int]) -> int:
    if not value.isdecimal():
        raise TransactionParseError(f"{column} '{value}' is not an integer", line_number)

    parsed = int(value)
    if not 0 <= parsed <= maximum:
        raise TransactionParseError(f"{column} {parsed} outside 0..{maximum}", line_number)
    return parsed
