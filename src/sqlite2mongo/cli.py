"""Command-line interface for the migration tool."""

import asyncio
import argparse
import logging
import sys
from typing import Any, Dict, List, Optional, TextIO

from .core.errors import MigrationError
from .core.mongo_migrator import MongoMigrator
from .models.config import UnrecognizedTypePolicy
from .models.migration import MigrationReport
from .utils.config_loader import load_config_from_env, create_sample_env_file, validate_config

CONFIRM_PROMPT = "Confirm delete the existing database (type 'yes' to continue)?"


def confirm_replace(
    collections: List[str],
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None
) -> bool:
    """Ask the operator to confirm dropping the existing collections.

    Only the exact answer "yes" (trailing whitespace ignored) confirms.
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    print(f"Existing collections: {', '.join(collections)}", file=stdout)
    print(CONFIRM_PROMPT, file=stdout)
    answer = stdin.readline()
    return answer.rstrip() == "yes"


class MigrationCLI:
    """Main CLI interface for migration operations."""

    def __init__(self, config_file: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None):
        try:
            self.config = load_config_from_env(config_file, overrides)
        except ValueError as e:
            print(f"Failed to load configuration: {e}")
            sys.exit(1)

        # Validate configuration
        config_errors = validate_config(self.config)
        if config_errors:
            print("Configuration errors:")
            for error in config_errors:
                print(f"  - {error}")
            sys.exit(1)

    async def run_migration(self) -> Optional[MigrationReport]:
        """Run the complete migration process."""

        print("=== Starting SQLite to MongoDB Migration ===")
        print(f"Source: {self.config.sqlite.path}")
        print(f"Destination database: {self.config.mongo.database}")
        print(f"Dry run mode: {self.config.dry_run}")

        migrator = MongoMigrator(self.config, confirm=confirm_replace)
        return await migrator.run()


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""

    parser = argparse.ArgumentParser(
        prog="sqlite2mongo",
        description="Copy every table of a SQLite database into a MongoDB database"
    )
    parser.add_argument(
        "sqlite_path",
        nargs="?",
        help="SQLite data file path (defaults to SQLITE_PATH)"
    )
    parser.add_argument(
        "mongodb_uri",
        nargs="?",
        help="MongoDB URI (defaults to MONGODB_URI)"
    )
    parser.add_argument(
        "mongo_database",
        nargs="?",
        help="Database name to save the imported data (defaults to MONGO_DATABASE)"
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        help="Path to configuration file (defaults to .env in current directory)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Test reading SQLite data, do not create MongoDB collections"
    )
    parser.add_argument(
        "--lower-camel",
        action="store_true",
        help="Convert field names to lower camel case"
    )
    parser.add_argument(
        "--on-unrecognized",
        choices=[policy.value for policy in UnrecognizedTypePolicy],
        help="What to do with values of an unrecognized type (default: abort)"
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not display progress bars"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log skipped values and type fallbacks"
    )
    parser.add_argument(
        "--init",
        action="store_true",
        help="Create sample configuration file and exit"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""

    args = build_parser().parse_args(argv)

    if args.init:
        create_sample_env_file()
        print("Sample configuration created. Edit .env.example and rename to .env")
        return

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    if args.verbose:
        logging.getLogger("sqlite2mongo").setLevel(logging.DEBUG)

    overrides = {
        "sqlite_path": args.sqlite_path,
        "mongodb_uri": args.mongodb_uri,
        "mongo_database": args.mongo_database,
        "dry_run": args.dry_run,
        "lower_camel": args.lower_camel,
        "on_unrecognized": args.on_unrecognized,
        "no_progress": args.no_progress,
    }
    cli = MigrationCLI(args.config, overrides)

    try:
        asyncio.run(cli.run_migration())
    except MigrationError as e:
        print(f"Migration failed: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted; the destination may be partially migrated")
        sys.exit(130)


if __name__ == "__main__":
    main()
