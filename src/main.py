import csv
import sys
import logging
from typing import Dict, TextIO

from currency import CurrencyError
from models import ClientAccount
from payments_engine import PaymentsEngine
from transaction_reader import TransactionParseError

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)

HEADER = "client,available,held,total,locked"


def format_account(account: ClientAccount) -> str:
    """One output row; amounts always carry 4 decimal places."""
    return (
        f"{account.client_id},"
        f"{account.available},"
        f"{account.held},"
        f"{account.total},"
        f"{str(account.locked).lower()}"
    )


def write_accounts(accounts: Dict[int, ClientAccount], stream: TextIO) -> None:
    print(HEADER, file=stream)
    for client_id in sorted(accounts.keys()):
        print(format_account(accounts[client_id]), file=stream)


def main():
    if len(sys.argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        sys.exit(1)

    filepath = sys.argv[1]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except (TransactionParseError, CurrencyError, csv.Error) as e:
        logger.error(f"Aborting, malformed input in {filepath}: {e}")
        sys.exit(1)
    except OSError as e:
        logger.error(f"Cannot read {filepath}: {e}")
        sys.exit(1)

    write_accounts(accounts, sys.stdout)


if __name__ == "__main__":
    main()
