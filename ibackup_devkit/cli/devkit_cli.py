"""
Command-line interface for ibackup database maintenance.

Usage:
    ibackup-devkit bolt --database <path> [--lock-all-sets] [--hide-readonly]
    ibackup-devkit convert --bolt <path> [--sqlite <path>]
"""

import argparse
import sys
from contextlib import ExitStack

from ibackup_devkit.batch import SetMigrator, update_flags
from ibackup_devkit.observability.logger import LOG_FORMATS, get_logger, log_operation, setup_logger
from ibackup_devkit.observability.reporting import LoggingReporter
from ibackup_devkit.stores import SourceStore
from ibackup_devkit.warehouse import (
    DatabaseConnectionPool,
    DatabaseSettings,
    SetRepository,
    SQLiteConnection,
)


logger = get_logger(__name__)


def bolt_command(args):
    """
    Lock and/or hide every set in the key-value database.

    Per-set write failures are logged and do not fail the command.

    Args:
        args: Command line arguments
    """
    try:
        with log_operation("bolt", logger=logger, database=args.database):
            with SourceStore.open(args.database) as store:
                sets = store.get_all()
                update_flags(
                    store,
                    sets,
                    LoggingReporter(logger),
                    lock_all_sets=args.lock_all_sets,
                    hide_read_only=args.hide_readonly,
                )
    except Exception as e:
        logger.error(f"Error updating sets: {e}")
        sys.exit(1)


def open_target(args) -> SetRepository:
    """
    Build the target repository without connecting.

    Uses SQLite when --sqlite is given, otherwise PostgreSQL configured from
    the DB_* environment variables.

    Raises:
        MissingCredentialsError: If PostgreSQL settings are incomplete
    """
    if args.sqlite:
        return SetRepository(SQLiteConnection(args.sqlite))

    return SetRepository(DatabaseConnectionPool(DatabaseSettings.from_env()))


def convert_command(args):
    """
    Migrate every set from the key-value database to the relational one.

    Stops at the first set that cannot be migrated.

    Args:
        args: Command line arguments
    """
    try:
        with log_operation("convert", logger=logger, bolt=args.bolt):
            repository = open_target(args)

            with ExitStack() as stack:
                source = stack.enter_context(SourceStore.open(args.bolt))
                sets = source.get_all()

                stack.enter_context(repository)
                summary = SetMigrator(repository, logger).migrate(sets)

            logger.info(
                "conversion complete",
                extra={
                    "migrated": summary.total,
                    "read_only": summary.read_only,
                    "hidden": summary.hidden,
                },
            )
    except Exception as e:
        logger.error(f"Error converting sets: {e}")
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ibackup-devkit",
        description="Toolkit to work with the ibackup database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Make every set read-only, then hide all read-only sets
  ibackup-devkit bolt --database /path/to/ibackup.db --lock-all-sets --hide-readonly

  # Migrate to PostgreSQL (DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD)
  ibackup-devkit convert --bolt /path/to/ibackup.db

  # Migrate to a local SQLite file instead
  ibackup-devkit convert --bolt /path/to/ibackup.db --sqlite /path/to/sets.sqlite
        """
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: LOG_LEVEL env var, then INFO)"
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=LOG_FORMATS,
        help="Log output format (default: LOG_FORMAT env var, then json)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    bolt_parser = subparsers.add_parser(
        "bolt",
        help="Update records in the bolt database",
        description="Carries out alterations to all sets in the database.",
    )
    bolt_parser.add_argument(
        "--database",
        required=True,
        help="Path to the ibackup database file"
    )
    bolt_parser.add_argument(
        "--lock-all-sets",
        action="store_true",
        help="Make all sets in the database read-only"
    )
    bolt_parser.add_argument(
        "--hide-readonly",
        action="store_true",
        help="Make all read-only sets in the database hidden"
    )
    bolt_parser.set_defaults(func=bolt_command)

    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert the bolt database to the relational schema",
    )
    convert_parser.add_argument(
        "--bolt",
        required=True,
        help="Path to the bolt database file"
    )
    convert_parser.add_argument(
        "--sqlite",
        default=None,
        help="Path to a SQLite database to use instead of PostgreSQL"
    )
    convert_parser.set_defaults(func=convert_command)

    return parser


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logger(level=args.log_level, format_type=args.log_format)

    try:
        args.func(args)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
