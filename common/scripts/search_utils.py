# common/scripts/search_utils.py
"""
Search helpers shared by the patient, doctor and medical-record listings.

Two flavours exist:
- SQL-side: ``sanitize_search_input`` makes user text safe inside a LIKE/ILIKE
  pattern (used with ``escape="\\"``).
- In-memory: ``filter_records`` is a plain substring filter over already
  loaded rows, matching dotted field paths such as ``patient.full_name``.
"""

from typing import Any, Iterable, Mapping, Sequence, TypeVar

T = TypeVar("T")

LIKE_ESCAPE_CHAR = "\\"


def sanitize_search_input(text: Any) -> str:
    """
    Escape LIKE wildcards so user input matches literally.

    The backslash is escaped first, otherwise the escapes added for ``%``
    and ``_`` would be doubled. ``50%`` becomes ``50\\%``.
    """
    if not text or not isinstance(text, str):
        return ""

    return (
        text.replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )


def is_valid_search_term(
    text: Any,
    min_length: int = 2,
    max_length: int = 100,
) -> bool:
    """Bounds check on the stripped term."""
    if not text or not isinstance(text, str):
        return False

    trimmed = text.strip()
    return min_length <= len(trimmed) <= max_length


def get_nested_value(item: Any, path: str) -> Any:
    """
    Resolve ``a.b.c`` against mappings or attributes.

    Returns ``""`` as soon as any hop is missing or None.
    """
    value = item
    for key in path.split("."):
        if value is None:
            return ""
        if isinstance(value, Mapping):
            value = value.get(key)
        else:
            value = getattr(value, key, None)

    return "" if value is None else value


def filter_records(
    records: Sequence[T],
    fields: Iterable[str],
    term: str,
    *,
    case_sensitive: bool = False,
    min_chars: int = 0,
) -> list[T]:
    """
    Keep the records where any of ``fields`` contains ``term``.

    An empty term, or one shorter than ``min_chars``, returns every record.
    Order is preserved.
    """
    if not term or len(term) < min_chars:
        return list(records)

    field_list = list(fields)
    needle = term if case_sensitive else term.lower()

    def _matches(record: T) -> bool:
        for field in field_list:
            haystack = str(get_nested_value(record, field))
            if not case_sensitive:
                haystack = haystack.lower()
            if needle in haystack:
                return True
        return False

    return [record for record in records if _matches(record)]


__all__ = [
    "LIKE_ESCAPE_CHAR",
    "sanitize_search_input",
    "is_valid_search_term",
    "get_nested_value",
    "filter_records",
]
