#!/usr/bin/env python3
"""Seed and query the pediatric reference knowledge base.

Usage:
    # Load the built-in sample data into the SQLite store
    python scripts/demo_reference.py --seed

    # Calculate a dose
    python scripts/demo_reference.py --dose Acetaminophen --weight 12.5 --age 24

    # Dose for a specific indication
    python scripts/demo_reference.py --dose Amoxicillin --weight 15 --age 36 --indication "acute otitis media"

    # Emergency protocols for a condition, optionally for an age
    python scripts/demo_reference.py --protocol "status epilepticus" --age 0

    # Search textbook passages
    python scripts/demo_reference.py --search "epinephrine anaphylaxis" --limit 3

    # Use an alternate database
    python scripts/demo_reference.py --db-path /tmp/reference.db --seed
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path for common module imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.pediatric_reference import (
    ContentRanker,
    DosageResolver,
    NotFound,
    PediatricReferenceError,
    ProtocolResolver,
    SQLiteKnowledgeStore,
)
from common.pediatric_reference.config import config
from common.pediatric_reference.sample_data import load_sample_data

logger = logging.getLogger(__name__)


def print_json(data):
    print(json.dumps(data, indent=2))


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Pediatric reference demo - dosing, emergency protocols, textbook search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument("--seed", action="store_true", help="Load sample data into the store")
    parser.add_argument("--dose", metavar="DRUG", help="Drug name for dose calculation")
    parser.add_argument("--weight", type=float, help="Patient weight in kg")
    parser.add_argument("--age", type=int, help="Patient age in months")
    parser.add_argument("--indication", help="Indication the dosing rule must match")
    parser.add_argument("--rule-selection", choices=["first_match", "narrowest_range"],
                        help=f"Rule selection policy (default: {config.DOSAGE_RULE_SELECTION})")
    parser.add_argument("--protocol", metavar="CONDITION", help="Condition to look up protocols for")
    parser.add_argument("--search", metavar="QUERY", help="Free-text query for textbook passages")
    parser.add_argument("--citations", action="store_true",
                        help="With --search, print citation records instead of passages")
    parser.add_argument("--limit", type=int, default=None,
                        help=f"Max passages to return (default: {config.SEARCH_LIMIT})")
    parser.add_argument("--db-path", type=str, default=None,
                        help=f"Database path (default: {config.DB_PATH})")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    log_level = logging.DEBUG if args.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.db_path:
        config.DB_PATH = args.db_path

    if not (args.seed or args.dose or args.protocol or args.search):
        parser.print_help()
        return 1

    store = SQLiteKnowledgeStore(db_path=config.DB_PATH)

    try:
        if args.seed:
            try:
                load_sample_data(store)
                print(f"Seeded sample data into {store.db_path}")
            except ValueError as e:
                # Drugs load first, so a repeat seed stops before writing anything
                print(f"Seed skipped ({e}); database already has sample data")

        if args.dose:
            if args.weight is None or args.age is None:
                parser.error("--dose requires --weight and --age")
            resolver = DosageResolver(store, selection=args.rule_selection)
            result = resolver.resolve(args.dose, args.weight, args.age, args.indication)
            print_json(result.to_dict())

        if args.protocol:
            protocols = ProtocolResolver(store).resolve(args.protocol, args.age)
            if not protocols:
                print(f"No protocols on file for '{args.protocol}'")
            print_json([p.to_dict() for p in protocols])

        if args.search:
            ranker = ContentRanker(store)
            if args.citations:
                print_json([c.to_dict() for c in ranker.cite(args.search, args.limit)])
            else:
                print_json([p.to_dict() for p in ranker.rank(args.search, args.limit)])

    except NotFound as e:
        print(f"Not found: {e}")
        return 2
    except PediatricReferenceError as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
