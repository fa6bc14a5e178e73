"""Configuration models for migration system."""

from enum import Enum
from pathlib import Path
from pydantic import BaseModel, Field


class UnrecognizedTypePolicy(str, Enum):
    """What to do with a cell whose type cannot be classified."""
    ABORT = "abort"
    SKIP_ROW = "skip-row"
    SKIP_COLUMN = "skip-column"


class SQLiteConfig(BaseModel):
    """SQLite source configuration."""
    path: str
    
    def connection_uri(self) -> str:
        """Generate a read-only URI so a mistyped path never creates a new file."""
        return f"{Path(self.path).resolve().as_uri()}?mode=ro"


class MongoConfig(BaseModel):
    """MongoDB destination configuration."""
    uri: str = "mongodb://localhost:27017"
    database: str
    server_selection_timeout_ms: int = 5000


class MigrationConfig(BaseModel):
    """Complete migration configuration."""
    sqlite: SQLiteConfig
    mongo: MongoConfig
    dry_run: bool = Field(default=False, description="Read and convert rows without writing to MongoDB")
    lower_camel: bool = Field(default=False, description="Convert field names to lowerCamelCase")
    on_unrecognized: UnrecognizedTypePolicy = Field(
        default=UnrecognizedTypePolicy.ABORT,
        description="Policy for cells whose type cannot be classified"
    )
    show_progress: bool = Field(default=True, description="Display a progress bar per table")
