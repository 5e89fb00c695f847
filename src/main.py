import logging
import sys

from config import get_settings
from csv_io import write_accounts
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format=settings.log_format,
        stream=sys.stderr,
    )

    if len(argv) != 1:
        print("Usage: payments-ledger <input.csv>", file=sys.stderr)
        return 2

    filepath = argv[0]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
        write_accounts(accounts.snapshot(), sys.stdout)
        sys.stdout.flush()
    except OSError as e:
        logger.error(f"Aborting: {e}")
        return 1

    if settings.report_stats:
        print(engine.stats.report(), file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
