"""Configuration loading utilities."""

import os
from typing import Any, Dict, Optional, List
from pathlib import Path
from dotenv import load_dotenv

from ..models.config import MigrationConfig, SQLiteConfig, MongoConfig, UnrecognizedTypePolicy


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def load_config_from_env(
    env_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> MigrationConfig:
    """Load migration configuration from environment variables.

    Values in ``overrides`` (typically parsed command-line arguments) win
    over the environment. Keys whose value is None are ignored.
    """

    if env_file:
        load_dotenv(env_file)
    else:
        # Try to load from .env file in current directory
        env_path = Path(".env")
        if env_path.exists():
            load_dotenv(env_path)

    values = {key: value for key, value in (overrides or {}).items() if value is not None}

    # SQLite Configuration
    sqlite_config = SQLiteConfig(
        path=values.get("sqlite_path", os.getenv("SQLITE_PATH", ""))
    )

    # MongoDB Configuration
    mongo_config = MongoConfig(
        uri=values.get("mongodb_uri", os.getenv("MONGODB_URI", "mongodb://localhost:27017")),
        database=values.get("mongo_database", os.getenv("MONGO_DATABASE", "")),
        server_selection_timeout_ms=int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000"))
    )

    # Migration settings; command-line flags can only switch these on
    dry_run = values.get("dry_run") or _env_flag("MIGRATION_DRY_RUN")
    lower_camel = values.get("lower_camel") or _env_flag("MIGRATION_LOWER_CAMEL")
    show_progress = _env_flag("MIGRATION_SHOW_PROGRESS", "true") and not values.get("no_progress", False)
    on_unrecognized = values.get(
        "on_unrecognized",
        os.getenv("MIGRATION_ON_UNRECOGNIZED", UnrecognizedTypePolicy.ABORT.value)
    )

    return MigrationConfig(
        sqlite=sqlite_config,
        mongo=mongo_config,
        dry_run=dry_run,
        lower_camel=lower_camel,
        on_unrecognized=UnrecognizedTypePolicy(on_unrecognized),
        show_progress=show_progress
    )


def create_sample_env_file(file_path: str = ".env.example") -> None:
    """Create a sample environment file with all required variables."""

    sample_content = """# SQLite Source
SQLITE_PATH=/path/to/data.sqlite

# MongoDB Destination
MONGODB_URI=mongodb://localhost:27017
MONGO_DATABASE=imported
MONGO_SERVER_SELECTION_TIMEOUT_MS=5000

# Migration Settings
MIGRATION_DRY_RUN=false
MIGRATION_LOWER_CAMEL=false
# abort, skip-row or skip-column
MIGRATION_ON_UNRECOGNIZED=abort
MIGRATION_SHOW_PROGRESS=true
"""

    with open(file_path, "w") as f:
        f.write(sample_content)

    print(f"Sample environment file created: {file_path}")


def validate_config(config: MigrationConfig) -> List[str]:
    """Validate that all required configuration values are present."""

    errors = []

    # Check SQLite config
    if not config.sqlite.path:
        errors.append("SQLITE_PATH is required")
    elif not Path(config.sqlite.path).is_file():
        errors.append(f"SQLite database file not found: {config.sqlite.path}")

    # Check MongoDB config
    if not config.mongo.uri:
        errors.append("MONGODB_URI is required")
    elif not config.mongo.uri.startswith(("mongodb://", "mongodb+srv://")):
        errors.append("MONGODB_URI must start with mongodb:// or mongodb+srv://")
    if not config.mongo.database:
        errors.append("MONGO_DATABASE is required")

    return errors
