"""Assembly of MongoDB documents from SQLite rows."""

import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..models.migration import Column
from .errors import DuplicateFieldError, UnrecognizedTypeError
from .type_coercion import coerce_value

WORD_SEPARATOR = re.compile(r"[\W_]+")


def split_words(name: str) -> List[str]:
    """Split a field name on separators and case changes.

    "user_id" -> ["user", "id"], "HTTPServer" -> ["HTTP", "Server"],
    "createdAt" -> ["created", "At"], "sha256Hash" -> ["sha256", "Hash"].
    """
    words = []
    for part in WORD_SEPARATOR.split(name):
        if not part:
            continue
        start = 0
        for i in range(1, len(part)):
            prev, cur = part[i - 1], part[i]
            nxt = part[i + 1] if i + 1 < len(part) else ""
            lower_to_upper = (prev.islower() or prev.isdigit()) and cur.isupper()
            acronym_end = prev.isupper() and cur.isupper() and nxt.islower()
            if lower_to_upper or acronym_end:
                words.append(part[start:i])
                start = i
        words.append(part[start:])
    return words


def to_lower_camel_case(name: str) -> str:
    """Convert a column name to lowerCamelCase."""
    words = split_words(name)
    if not words:
        return name
    head, tail = words[0], words[1:]
    return head.lower() + "".join(word[:1].upper() + word[1:].lower() for word in tail)


def build_document(
    row: Sequence[Tuple[Column, Any]],
    lower_camel: bool = False,
    table: Optional[str] = None,
    skip_unrecognized: bool = False
) -> Tuple[Dict[str, Any], List[str]]:
    """Convert one row into a document.

    Args:
        row: Ordered (column, raw cell) pairs
        lower_camel: Rename fields to lowerCamelCase
        table: Source table name, used in error messages
        skip_unrecognized: Leave out columns whose type cannot be classified
            instead of raising

    Returns:
        The document, in column order, and the names of any skipped columns

    Raises:
        UnrecognizedTypeError: if a cell cannot be classified and
            skip_unrecognized is False
        DuplicateFieldError: if two columns map to the same field name
    """
    document: Dict[str, Any] = {}
    skipped: List[str] = []

    for column, raw_value in row:
        field = to_lower_camel_case(column.name) if lower_camel else column.name
        if field in document:
            raise DuplicateFieldError(field, column.name, table=table)

        try:
            document[field] = coerce_value(raw_value, column.declared_type)
        except UnrecognizedTypeError as e:
            if not skip_unrecognized:
                raise e.with_context(column=column.name, table=table) from e
            skipped.append(column.name)

    return document, skipped
