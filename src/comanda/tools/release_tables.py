"""Release every occupied table, whether or not its order is still live.

Order and table writes are not atomic, so a crash between them can leave a
table occupied with no order holding it. This is the manual remedy; run it
when the floor is clear, since tables of open orders are freed too.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from comanda.domain.common.ids import CompanyId
from comanda.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository
from comanda.infrastructure.db.session import get_engine
from comanda.infrastructure.observability.logging_config import configure_logging

logger = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Release every occupied table.")
    parser.add_argument(
        "--company-id",
        default=None,
        help="Only release tables of this company. Defaults to all companies.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    configure_logging()
    args = _parse_args(argv)
    company_id = CompanyId(args.company_id) if args.company_id else None

    repository = SqlAlchemyTableRepository(engine=get_engine(timeout_seconds=2.0))
    released = repository.release_all(company_id)
    logger.info(
        "tables_released",
        extra={"company_id": args.company_id, "released_count": released},
    )
    print(f"released {released} tables")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
