import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from currency import Currency, CurrencyOverflowError
from models import TransactionType
from transaction_reader import TransactionParseError, read_transactions


def read(*lines):
    return list(read_transactions(["type, client, tx, amount", *lines]))


class TestReadTransactions:
    def test_parses_all_types(self):
        transactions = read(
            "deposit, 1, 1, 1.0",
            "withdrawal, 1, 2, 0.5",
            "dispute, 1, 1,",
            "resolve, 1, 1,",
            "chargeback, 1, 1,",
        )

        assert [t.transaction_type for t in transactions] == [
            TransactionType.DEPOSIT,
            TransactionType.WITHDRAWAL,
            TransactionType.DISPUTE,
            TransactionType.RESOLVE,
            TransactionType.CHARGEBACK,
        ]
        assert transactions[0].amount == Currency.parse("1")
        assert transactions[1].amount == Currency.parse("0.5")
        assert transactions[2].amount is None

    def test_missing_trailing_amount_column(self):
        transactions = read("dispute, 3, 7")
        assert transactions[0].client_id == 3
        assert transactions[0].transaction_id == 7
        assert transactions[0].amount is None

    def test_dispute_amount_ignored(self):
        assert read("dispute, 1, 1, 5.0")[0].amount is None

    def test_whitespace_and_case(self):
        transactions = list(read_transactions(["type,client,tx,amount", "  Deposit ,  2 ,3 ,  4.25  "]))
        assert transactions[0].transaction_type == TransactionType.DEPOSIT
        assert transactions[0].client_id == 2
        assert transactions[0].amount == Currency.parse("4.25")

    def test_blank_lines_skipped(self):
        assert len(read("deposit, 1, 1, 1.0", "", "deposit, 1, 2, 1.0")) == 2

    def test_whitespace_only_lines_skipped(self):
        transactions = list(read_transactions(["type,client,tx,amount\n", "deposit,1,1,1.0\n", "   \n", " , , , \n"]))
        assert len(transactions) == 1
        assert transactions[0].amount == Currency.parse("1")

    def test_empty_input(self):
        assert list(read_transactions([])) == []

    def test_header_only(self):
        assert read() == []

    def test_is_lazy(self):
        transactions = read_transactions(["type, client, tx, amount", "deposit, 1, 1, 1.0", "bogus, 1, 2,"])
        assert next(transactions).transaction_id == 1
        with pytest.raises(TransactionParseError):
            next(transactions)

    def test_negative_amount_decodes(self):
        assert read("deposit, 1, 1, -3")[0].amount == Currency.parse("-3")

    def test_id_limits(self):
        transaction = read("deposit, 65535, 4294967295, 1")[0]
        assert transaction.client_id == 65535
        assert transaction.transaction_id == 4294967295


class TestReadTransactionsErrors:
    def test_missing_header_column(self):
        with pytest.raises(TransactionParseError, match="tx"):
            list(read_transactions(["type, client, amount", "deposit, 1, 1.0"]))

    def test_unknown_type(self):
        with pytest.raises(TransactionParseError, match="unknown transaction type") as exc_info:
            read("deposit, 1, 1, 1.0", "transfer, 1, 2, 1.0")
        assert exc_info.value.line_number == 3

    @pytest.mark.parametrize("row", [
        "deposit, 65536, 1, 1.0",
        "deposit, -1, 1, 1.0",
        "deposit, one, 1, 1.0",
        "deposit, 1, 4294967296, 1.0",
        "deposit, 1, , 1.0",
        "deposit, 1_0, 1, 1.0",
        "deposit, 1, +2, 1.0",
    ])
    def test_bad_ids(self, row):
        with pytest.raises(TransactionParseError):
            read(row)

    def test_missing_amount(self):
        with pytest.raises(TransactionParseError, match="requires an amount"):
            read("withdrawal, 1, 1,")

    def test_too_precise_amount(self):
        with pytest.raises(TransactionParseError) as exc_info:
            read("deposit, 1, 1, 1.00001")
        assert exc_info.value.line_number == 2

    def test_amount_over_cap(self):
        with pytest.raises(TransactionParseError) as exc_info:
            read("deposit, 1, 1, 1000000000000000")
        assert isinstance(exc_info.value.__cause__, CurrencyOverflowError)
