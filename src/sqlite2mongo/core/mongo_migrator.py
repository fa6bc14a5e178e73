"""MongoDB data migration functionality."""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

import aiosqlite
from pymongo import AsyncMongoClient
from pymongo.errors import ConfigurationError, PyMongoError
from tqdm import tqdm

from ..models.config import MigrationConfig, MongoConfig, UnrecognizedTypePolicy
from ..models.migration import MigrationReport, TableReport
from .document_builder import build_document
from .errors import DatabaseConnectionError, UnrecognizedTypeError, WriteError
from .sqlite_reader import fetch_table, list_tables, open_source

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[List[str]], bool]


def open_destination(config: MongoConfig) -> AsyncMongoClient:
    """Create the MongoDB client. No network I/O happens until first use."""
    try:
        return AsyncMongoClient(config.uri, serverSelectionTimeoutMS=config.server_selection_timeout_ms)
    except ConfigurationError as e:
        raise DatabaseConnectionError(f"Invalid MongoDB URI: {e}") from e


class MongoMigrator:
    """Migrates every table of a SQLite database into MongoDB."""

    def __init__(
        self,
        config: MigrationConfig,
        confirm: Optional[ConfirmCallback] = None,
        mongo_client: Optional[Any] = None
    ):
        """
        Initialize the migrator.

        Args:
            config: Migration configuration
            confirm: Called in a worker thread with the existing collection
                names before the database is dropped; the run only proceeds
                if it returns True
            mongo_client: Client to use instead of one built from config
        """
        self.config = config
        self.confirm = confirm
        self.mongo_client = mongo_client
        self.report = MigrationReport(dry_run=config.dry_run)

    async def run(self) -> Optional[MigrationReport]:
        """Run the migration. Returns None if the operator declined."""

        source = await open_source(self.config.sqlite)
        try:
            client = self.mongo_client if self.mongo_client is not None else open_destination(self.config.mongo)
            try:
                database = client[self.config.mongo.database]

                if not await self.prepare_destination(client, database):
                    print("Abort")
                    return None

                for table in await list_tables(source):
                    print(f"Table: {table}")
                    table_report = await self.migrate_table(source, database, table)
                    self.report.add(table_report)
                    print(f"Imported {table_report.rows_imported} rows.")
            finally:
                if self.mongo_client is None:
                    await client.close()
        finally:
            await source.close()

        self.print_summary()
        return self.report

    async def prepare_destination(self, client: Any, database: Any) -> bool:
        """Drop the destination database, asking first if it holds anything."""

        try:
            existing = await database.list_collection_names()
        except PyMongoError as e:
            raise DatabaseConnectionError(f"Cannot reach MongoDB: {e}") from e

        if not existing:
            return True

        if self.config.dry_run:
            print(f"DRY RUN: Would replace {len(existing)} existing collections in {self.config.mongo.database}")
            return True

        if self.confirm is None:
            return False

        # the prompt blocks on stdin
        if not await asyncio.to_thread(self.confirm, existing):
            return False

        try:
            await client.drop_database(self.config.mongo.database)
        except PyMongoError as e:
            raise WriteError(f"Cannot drop database {self.config.mongo.database}: {e}") from e

        return True

    async def migrate_table(
        self,
        source: aiosqlite.Connection,
        database: Any,
        table: str
    ) -> TableReport:
        """Copy one table into the collection of the same name."""

        data = await fetch_table(source, table)
        report = TableReport(table=table, rows_read=len(data), dry_run=self.config.dry_run)
        policy = self.config.on_unrecognized
        skipped_columns = set()

        try:
            collection = database[table]
        except PyMongoError as e:
            raise WriteError(f"Cannot use {table!r} as a collection name: {e}", table=table) from e

        with tqdm(total=len(data), desc=f"Migrating {table}", disable=not self.config.show_progress) as pbar:
            for row in data.iter_rows():
                try:
                    document, skipped = build_document(
                        row,
                        lower_camel=self.config.lower_camel,
                        table=table,
                        skip_unrecognized=policy == UnrecognizedTypePolicy.SKIP_COLUMN
                    )
                except UnrecognizedTypeError as e:
                    if policy != UnrecognizedTypePolicy.SKIP_ROW:
                        raise
                    logger.warning("Skipping row: %s", e)
                    report.rows_skipped += 1
                    pbar.update(1)
                    continue

                for column in skipped:
                    if column not in skipped_columns:
                        logger.warning("Skipping column %s.%s with unrecognized values", table, column)
                        skipped_columns.add(column)

                if not self.config.dry_run:
                    await self.insert_document(collection, table, document)
                    report.rows_inserted += 1
                pbar.update(1)

        report.columns_skipped = len(skipped_columns)
        return report

    async def insert_document(self, collection: Any, table: str, document: Dict[str, Any]) -> None:
        """Insert a single document."""

        try:
            await collection.insert_one(document)
        except PyMongoError as e:
            raise WriteError(f"Insert failed for {table}: {e}", table=table) from e

    def print_summary(self) -> None:
        """Print per-table row counts."""

        mode = "DRY RUN " if self.config.dry_run else ""
        print(f"\n=== {mode}Migration Summary ===")
        for name, table_report in self.report.tables.items():
            line = f"  {name}: {table_report.rows_imported} rows"
            if table_report.rows_skipped:
                line += f" ({table_report.rows_skipped} skipped)"
            if table_report.columns_skipped:
                line += f" ({table_report.columns_skipped} columns skipped)"
            print(line)
        print(f"Total: {self.report.total_rows} rows in {len(self.report.tables)} tables")
