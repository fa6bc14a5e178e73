"""Migration data models."""

from typing import Any, Dict, Iterator, List, Tuple
from pydantic import BaseModel, Field


class Column(BaseModel):
    """A result column and the type name declared for it in the schema."""
    name: str
    declared_type: str = ""


class TableData(BaseModel):
    """Fully materialized contents of one source table."""
    table: str
    columns: List[Column]
    rows: List[Tuple[Any, ...]] = Field(default_factory=list)
    
    def iter_rows(self) -> Iterator[List[Tuple[Column, Any]]]:
        """Yield each row as ordered (column, raw cell) pairs."""
        for values in self.rows:
            yield list(zip(self.columns, values))
    
    def __len__(self) -> int:
        return len(self.rows)


class TableReport(BaseModel):
    """Row counts for one migrated table."""
    table: str
    rows_read: int = 0
    rows_inserted: int = 0
    rows_skipped: int = 0
    columns_skipped: int = 0
    dry_run: bool = False
    
    @property
    def rows_imported(self) -> int:
        """Rows converted into documents (inserted, or would be in dry-run)."""
        return self.rows_read - self.rows_skipped


class MigrationReport(BaseModel):
    """Migration statistics model."""
    dry_run: bool = False
    tables: Dict[str, TableReport] = Field(default_factory=dict)
    
    def add(self, report: TableReport) -> None:
        """Record the outcome of one table."""
        self.tables[report.table] = report
    
    @property
    def total_rows(self) -> int:
        """Total rows converted across all tables."""
        return sum(report.rows_imported for report in self.tables.values())
    
    def row_counts(self) -> Dict[str, int]:
        """Per-table converted row counts, in migration order."""
        return {name: report.rows_imported for name, report in self.tables.items()}
