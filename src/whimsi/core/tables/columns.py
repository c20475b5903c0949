from __future__ import annotations

"""
Table Column Definitions.

Describes the package database columns the layout is projected into and
enforces their constraints on each value before it leaves the core.
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

from whimsi.core.services.identifiers import ensure_legal_identifier
from whimsi.domain.errors import TableConstraintError

# Column kinds
IDENTIFIER = "identifier"
STRING = "string"
INT16 = "int16"
INT32 = "int32"

_INT_RANGES = {
    INT16: (-(2 ** 15), 2 ** 15 - 1),
    INT32: (-(2 ** 31), 2 ** 31 - 1),
}


@dataclass(frozen=True)
class Column:
    """
    One column of a package database table.

    Attributes:
        name: Column name.
        kind: One of IDENTIFIER, STRING, INT16, INT32.
        width: Maximum length for identifier and string columns.
        nullable: Whether None is accepted.
        primary_key: Whether the column is part of the primary key.
    """
    name: str
    kind: str
    width: Optional[int] = None
    nullable: bool = False
    primary_key: bool = False

    def check(self, table: str, value: Any) -> Any:
        """Validate a value for this column and return it unchanged."""
        if value is None:
            if not self.nullable:
                raise TableConstraintError(table, self.name, value, "must not be null")
            return value

        if self.kind == IDENTIFIER:
            return ensure_legal_identifier(value, table, self.name)

        if self.kind == STRING:
            if not isinstance(value, str):
                raise TableConstraintError(table, self.name, value, "must be a string")
            if self.width is not None and len(value) > self.width:
                raise TableConstraintError(
                    table, self.name, value, f"exceeds {self.width} characters"
                )
            return value

        low, high = _INT_RANGES[self.kind]
        if isinstance(value, bool) or not isinstance(value, int):
            raise TableConstraintError(table, self.name, value, "must be an integer")
        if not low <= value <= high:
            raise TableConstraintError(
                table, self.name, value, f"is outside the range [{low}, {high}]"
            )
        return value


def check_row(table: str, columns: Sequence[Column], row: Tuple[Any, ...]) -> Tuple[Any, ...]:
    """
    Validate every value of a row against its column.

    Args:
        table: Table name used in error reports.
        columns: Column definitions in row order.
        row: Values in column order.

    Returns:
        Tuple[Any, ...]: The unchanged row.
    """
    if len(row) != len(columns):
        raise ValueError(f"{table} row has {len(row)} values, expected {len(columns)}")
    return tuple(column.check(table, value) for column, value in zip(columns, row))


def check_primary_keys(table: str, columns: Sequence[Column], rows: Sequence[Tuple[Any, ...]]) -> None:
    """
    Reject rows that repeat the value of the table's primary key columns.

    Raises:
        TableConstraintError: Naming the first key column and the repeated value.
    """
    key_positions = [i for i, column in enumerate(columns) if column.primary_key]
    if not key_positions:
        return
    seen = set()
    for row in rows:
        key = tuple(row[i] for i in key_positions)
        if key in seen:
            value = key[0] if len(key) == 1 else key
            raise TableConstraintError(table, columns[key_positions[0]].name, value, "is not unique")
        seen.add(key)
