"""Error types raised during a migration run."""

from typing import Optional


class MigrationError(Exception):
    """Base class for all migration failures."""


class DatabaseConnectionError(MigrationError):
    """The SQLite source or the MongoDB destination could not be opened."""


class QueryError(MigrationError):
    """Listing tables or scanning a table failed."""
    
    def __init__(self, message: str, table: Optional[str] = None):
        super().__init__(message)
        self.table = table


class WriteError(MigrationError):
    """Inserting a document or dropping a collection failed."""
    
    def __init__(self, message: str, table: Optional[str] = None):
        super().__init__(message)
        self.table = table


class UnrecognizedTypeError(MigrationError):
    """Neither the declared type nor the storage class of a cell is known."""
    
    def __init__(
        self,
        type_name: str,
        declared_type: Optional[str] = None,
        column: Optional[str] = None,
        table: Optional[str] = None
    ):
        self.type_name = type_name
        self.declared_type = declared_type
        self.column = column
        self.table = table
        super().__init__(self._describe())
    
    def _describe(self) -> str:
        location = ".".join(part for part in (self.table, self.column) if part)
        message = f"Column type {self.type_name!r} is not supported"
        if self.declared_type is not None:
            message += f" (declared as {self.declared_type!r})"
        if location:
            message += f" in {location}"
        return message
    
    def with_context(self, column: Optional[str] = None, table: Optional[str] = None) -> "UnrecognizedTypeError":
        """Return a copy of this error that names where the cell came from."""
        return UnrecognizedTypeError(
            self.type_name,
            declared_type=self.declared_type,
            column=column or self.column,
            table=table or self.table
        )


class DuplicateFieldError(MigrationError):
    """Two columns of a row map to the same document field name."""
    
    def __init__(self, field: str, column: str, table: Optional[str] = None):
        self.field = field
        self.column = column
        self.table = table
        where = f" in table {table}" if table else ""
        super().__init__(f"Column {column!r} maps to field {field!r}, which is already present{where}")
