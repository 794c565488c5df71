"""Shipment tracking database management CLI.

Creates or drops the Shipment and Milestone tables on the configured SQL
provider. The memory provider needs neither; both commands are no-ops there.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db
    PROTEAN_ENV=production python src/manage.py drop-db --yes
"""

import argparse
import sys


def _load_domain():
    from shipping.domain import shipping

    print("Initializing shipping domain...")
    shipping.init()
    return shipping


def setup_database():
    from shipping.utils.db import setup_db

    domain = _load_domain()
    print("Creating shipping database schema...")
    setup_db(domain)
    print("Done.")


def drop_database(confirmed: bool = False):
    from shipping.utils.db import drop_db

    if not confirmed:
        print("Refusing to drop tables without --yes.")
        sys.exit(1)

    domain = _load_domain()
    print("Dropping shipping database schema...")
    drop_db(domain)
    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Shipment tracking database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    drop_parser = subparsers.add_parser("drop-db", help="Drop all database tables")
    drop_parser.add_argument("--yes", action="store_true", help="Confirm dropping every table")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database(args.yes)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
