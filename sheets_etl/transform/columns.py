"""Column tables: output order and per-column defaults in one place.

A column table is an ordered list of Column entries. Each getter reads
from a typed model and returns None when the value is absent; the
renderer then substitutes that column's default.
"""

from dataclasses import dataclass
from typing import Any, Callable, NamedTuple


@dataclass(frozen=True)
class Column:
    """One output column.

    Attributes:
        header: Header text written to row 1 of the sheet
        getter: Reads the cell value from the row source, None if absent
        default: Value written when the getter returns None
    """

    header: str
    getter: Callable[[Any], Any]
    default: Any = ""


class SheetRow(NamedTuple):
    """A rendered row and the 1-based sheet row it belongs at."""

    index: int
    values: list


def headers(columns: list[Column]) -> list[str]:
    """Header row for a column table."""
    return [c.header for c in columns]


def render_row(columns: list[Column], source: Any) -> list:
    """Render one row from a column table."""
    row = []
    for column in columns:
        value = column.getter(source)
        row.append(column.default if value is None else value)
    return row
