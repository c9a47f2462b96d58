import csv
from typing import Dict, TextIO

from amounts import format_amount
from models import ClientAccount

FIELDNAMES = ["client", "available", "held", "total", "locked"]


def write_accounts(accounts: Dict[int, ClientAccount], stream: TextIO) -> None:
    """Write final account states as CSV, one row per client, ordered by client id."""
    # Every row is formatted before the header is written
    rows = [
        [
            client_id,
            format_amount(account.available),
            format_amount(account.held),
            format_amount(account.total),
            str(account.locked).lower(),
        ]
        for client_id, account in sorted(accounts.items())
    ]

    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(FIELDNAMES)
    writer.writerows(rows)
