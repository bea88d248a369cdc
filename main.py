"""
=========================================================
Command-line maintenance tasks for the table accessor.
=========================================================

Thin CLI over TableAccessor for the whole-table operations that are useful
outside application code: merging one table into another, taking a backup,
describing column types, truncating and dropping.

Connection settings come from core.config (DB_HOST, DB_PORT, DB_NAME,
DB_USER, DB_PASS, or a .env file).

Usage:
    # Merge import rows into a table, skipping isbns already present
    python main.py --merge book_import book --key isbn

    # Back up a table into nightly_backup
    python main.py --backup book nightly

    # Show reduced column types
    python main.py --columns book

    # Wait for the database before doing anything
    python main.py --wait --columns book

Exit Codes:
    0: Success
    1: Error
    130: User interrupt (Ctrl+C)
"""

import argparse
import sys

from accessor.table_accessor import TableAccessor
from core.config import config
from core.errors import TableAccessorError
from core.logger import get_logger, setup_logging
from utils.database_utils import wait_for_database

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the maintenance CLI."""
    parser = argparse.ArgumentParser(
        description="Table accessor - maintenance tasks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Append rows of book_import missing from book (by isbn)
  python main.py --merge book_import book --key isbn

  # Copy book (structure and rows) into nightly_backup
  python main.py --backup book nightly

  # Remove every row of a staging table (DANGEROUS!)
  python main.py --truncate book_import
        """
    )

    operations = parser.add_mutually_exclusive_group()
    operations.add_argument(
        '--merge',
        nargs=2,
        metavar=('SOURCE', 'TARGET'),
        help='Append rows of SOURCE to TARGET'
    )
    operations.add_argument(
        '--backup',
        nargs=2,
        metavar=('TABLE', 'NAME'),
        help='Copy TABLE into NAME_backup'
    )
    operations.add_argument(
        '--columns',
        metavar='TABLE',
        help='Print column names with reduced types'
    )
    operations.add_argument(
        '--truncate',
        metavar='TABLE',
        help='Remove every row of TABLE (DANGEROUS!)'
    )
    operations.add_argument(
        '--drop',
        metavar='TABLE',
        help='Drop TABLE if it exists (DANGEROUS!)'
    )

    parser.add_argument(
        '--key',
        metavar='COLUMN',
        help='Merge column: skip source rows whose value already exists in TARGET'
    )
    parser.add_argument(
        '--wait',
        action='store_true',
        help='Wait for the database to accept connections first'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging (DEBUG level, includes SQL)'
    )
    return parser


def run(args: argparse.Namespace, accessor: TableAccessor) -> int:
    """Dispatch the parsed arguments to the accessor and return an exit code."""
    if args.merge:
        source, target = args.merge
        accessor.merge_tables(source, target, merge_column=args.key)
        logger.info(f"✅ Merged {source} into {target}")
    elif args.backup:
        table, name = args.backup
        accessor.backup(table, name)
        logger.info(f"✅ Backed up {table}")
    elif args.columns:
        for column, column_type in accessor.get_column_names_with_mapped_types(args.columns).items():
            print(f"{column}\t{column_type}")
    elif args.truncate:
        accessor.truncate_table(args.truncate)
    elif args.drop:
        accessor.drop_table(args.drop)
    return 0


def main(argv=None) -> int:
    """
    Command-line interface entry point.

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(log_level='DEBUG' if args.verbose else None)

    if not (args.merge or args.backup or args.columns or args.truncate or args.drop):
        parser.print_help()
        logger.warning("⚠️  No operation specified. Use --merge, --backup, --columns, ...")
        return 1

    if args.key and not args.merge:
        parser.error("--key only applies to --merge")

    try:
        if args.wait:
            wait_for_database()

        logger.info(f"Connecting to {config.db_host}:{config.db_port}/{config.db_name}")
        with TableAccessor() as accessor:
            return run(args, accessor)

    except TableAccessorError as e:
        logger.error(f"❌ Operation failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("⚠️  Operation interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"❌ Unexpected error: {e}", exc_info=True)
        return 1


if __name__ == '__main__':
    sys.exit(main())
