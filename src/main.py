import logging
import os
import sys

from account_writer import write_accounts
from payments_engine import PaymentsEngine

LOG_LEVEL_ENV_VAR = "PAYMENTS_ENGINE_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.WARNING


def get_log_level() -> int:
    """Log level from the environment, falling back to WARNING for unknown names."""
    name = os.environ.get(LOG_LEVEL_ENV_VAR, "").strip().upper()
    level = logging.getLevelName(name) if name else DEFAULT_LOG_LEVEL
    return level if isinstance(level, int) else DEFAULT_LOG_LEVEL


def configure_logging() -> None:
    logging.basicConfig(
        level=get_log_level(),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: payments-engine <transactions.csv>", file=sys.stderr)
        return 1

    configure_logging()

    filepath = args[0]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except OSError as e:
        print(f"Error processing transactions: {e}", file=sys.stderr)
        return 1

    try:
        write_accounts(accounts, sys.stdout)
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
