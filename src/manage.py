"""Shipping database management CLI.

Only meaningful when ``domain.toml`` points the shipping domain at a
relational provider; the in-memory default needs no schema.

Usage:
    python src/manage.py setup-db   # Create delivery tables
    python src/manage.py drop-db    # Drop delivery tables
"""

import argparse
import sys

from shipping.domain import shipping
from shipping.utils.db import drop_db, setup_db


def setup_database():
    print("Initializing shipping domain...")
    shipping.init()
    prepared = setup_db(shipping)
    if prepared:
        print(f"  schema ready on: {', '.join(prepared)}")
    else:
        print("  no relational provider configured, nothing to create.")


def drop_database():
    print("Initializing shipping domain...")
    shipping.init()
    dropped = drop_db(shipping)
    if dropped:
        print(f"  schema dropped on: {', '.join(dropped)}")
    else:
        print("  no relational provider configured, nothing to drop.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Shipping database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create delivery tables")
    subparsers.add_parser("drop-db", help="Drop delivery tables")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
