#!/usr/bin/env python3
"""Generate a sample buyer import CSV.

Rows are in the import vocabulary (``bhk=2``, ``timeline=0-3m``) so the file
can be fed straight back into ``import_csv``. Use ``--invalid-rate`` to mix
in rows that fail validation.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from buyer_leads.config import BuyerLeadsConfig
from buyer_leads.csvio.importer import IMPORT_COLUMNS
from buyer_leads.csvio.serialization import quote_cell
from buyer_leads.generators import BuyerLeadGenerator
from buyer_leads.logging import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Generate a sample buyer import CSV")
    parser.add_argument(
        "--rows",
        type=int,
        default=50,
        help="Number of data rows to generate (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility (default: SEED, else 42)",
    )
    parser.add_argument(
        "--invalid-rate",
        type=float,
        default=0.0,
        help="Share of rows that break a validation rule (default: 0.0)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("local/buyers_sample.csv"),
        help="Output file (default: local/buyers_sample.csv)",
    )
    args = parser.parse_args()

    config = BuyerLeadsConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    seed = args.seed
    if seed is None:
        seed = config.seed if config.seed is not None else 42
    generator = BuyerLeadGenerator(seed=seed, invalid_rate=args.invalid_rate)

    lines = [",".join(IMPORT_COLUMNS)]
    for row in generator.generate_rows(args.rows):
        lines.append(",".join(quote_cell(row[column]) for column in IMPORT_COLUMNS))

    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text("\n".join(lines) + "\n", encoding="utf-8")
    logger.info("Wrote %d rows to %s", args.rows, args.output)


if __name__ == "__main__":
    main()
