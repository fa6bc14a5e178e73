"""Conversion of SQLite cells into BSON values.

SQLite stores a storage class per cell, not per column, so the type declared
in the schema is only a hint. Each cell is converted in two passes: first by
its declared column type, then, when that yields nothing, by the storage class
the value actually has.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from bson.binary import Binary, BINARY_SUBTYPE
from bson.int64 import Int64

from .errors import UnrecognizedTypeError

logger = logging.getLogger(__name__)

UNIX_EPOCH_JULIAN_DAY = 2440587.5
SECONDS_PER_DAY = 86400

# Python value type returned by the sqlite3 driver -> SQLite storage class
STORAGE_CLASSES = {
    type(None): "NULL",
    int: "INTEGER",
    float: "REAL",
    str: "TEXT",
    bytes: "BLOB",
}

Reader = Callable[[Any], Any]
Pass = Callable[[Any, str], Any]


def storage_class_of(value: Any) -> str:
    """Return the SQLite storage class name of a raw cell."""
    return STORAGE_CLASSES.get(type(value), type(value).__name__)


def canonical_type_name(declared_type: Optional[str]) -> str:
    """Map a free-form declared column type onto a dispatch table name.

    Follows SQLite's affinity rules, with BOOLEAN, DATETIME, DATE and TIME
    recognised by their exact names first. Text that fits no rule, such as
    NUMERIC or DECIMAL(10,2), maps to NULL so the storage class decides.
    """
    if not declared_type or not declared_type.strip():
        return "NULL"

    lowered = declared_type.strip().lower()
    if lowered in ("bool", "boolean"):
        return "BOOLEAN"
    if lowered in ("datetime", "timestamp"):
        return "DATETIME"
    if lowered == "date":
        return "DATE"
    if lowered == "time":
        return "TIME"
    if "int" in lowered:
        return "INTEGER"
    if "char" in lowered or "clob" in lowered or "text" in lowered:
        return "TEXT"
    if "blob" in lowered:
        return "BLOB"
    if "real" in lowered or "floa" in lowered or "doub" in lowered:
        return "REAL"
    return "NULL"


def read_boolean(value: Any) -> Optional[bool]:
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, bytes):
        return value == b"t"
    # text flags: only "t" is true
    return value == "t"


def read_integer(value: Any) -> Optional[Int64]:
    if isinstance(value, int):
        return Int64(value)
    return None


def read_real(value: Any) -> Optional[float]:
    if isinstance(value, float):
        return value
    return None


def read_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    return None


def read_datetime(value: Any) -> Optional[datetime]:
    """Parse ISO-8601 text, Unix seconds or a Julian day number as UTC."""
    try:
        if isinstance(value, str):
            parsed = datetime.fromisoformat(value.strip())
            if parsed.tzinfo is None:
                return parsed.replace(tzinfo=timezone.utc)
            return parsed.astimezone(timezone.utc)
        if isinstance(value, int):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        if isinstance(value, float):
            seconds = (value - UNIX_EPOCH_JULIAN_DAY) * SECONDS_PER_DAY
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return None
    return None


def read_blob(value: Any) -> Optional[Binary]:
    if isinstance(value, bytes):
        return Binary(value, BINARY_SUBTYPE)
    return None


def read_null(value: Any) -> None:
    return None


TYPE_READERS: Dict[str, Reader] = {
    "BOOLEAN": read_boolean,
    "INTEGER": read_integer,
    "REAL": read_real,
    "TEXT": read_text,
    "DATETIME": read_datetime,
    "BLOB": read_blob,
    "NULL": read_null,
}


def read_by_declared_type(value: Any, declared_type: str) -> Any:
    """First pass: convert using the column's declared type.

    Returns None when the declared type does not fit the storage class of
    this particular cell. A declared type that is recognised but has no
    conversion (DATE, TIME) raises UnrecognizedTypeError.
    """
    type_name = canonical_type_name(declared_type)
    reader = TYPE_READERS.get(type_name)
    if reader is None:
        raise UnrecognizedTypeError(type_name, declared_type=declared_type)
    return reader(value)


def read_by_storage_class(value: Any, declared_type: str) -> Any:
    """Second pass: convert using the cell's own storage class."""
    storage_class = storage_class_of(value)
    reader = TYPE_READERS.get(storage_class)
    if reader is None:
        raise UnrecognizedTypeError(storage_class, declared_type=declared_type)
    logger.debug("Declared type %r did not match %s cell, using storage class", declared_type, storage_class)
    return reader(value)


def with_fallback(primary: Pass, secondary: Pass) -> Pass:
    """Compose two passes so the second runs only when the first yields None."""

    def combined(value: Any, declared_type: str) -> Any:
        result = primary(value, declared_type)
        if result is None:
            return secondary(value, declared_type)
        return result

    return combined


_coerce_non_null = with_fallback(read_by_declared_type, read_by_storage_class)


def coerce_value(value: Any, declared_type: str = "") -> Any:
    """Convert one raw SQLite cell into a BSON-native value.

    Args:
        value: Cell as returned by the sqlite3 driver
        declared_type: Declared type of the cell's column, possibly empty

    Returns:
        None, bool, Int64, float, str, UTC datetime or Binary

    Raises:
        UnrecognizedTypeError: if the declared type has no conversion, or
            neither pass knows the cell's type
    """
    if value is None:
        return None
    return _coerce_non_null(value, declared_type)
