from __future__ import annotations

"""Projection of file records into the File table."""

import logging
from typing import Any, List, Tuple

from whimsi.core.tables.columns import IDENTIFIER, INT16, INT32, STRING, Column, check_primary_keys, check_row
from whimsi.domain.constants import (
    FILE_ATTRIBUTE_VITAL,
    MAX_FILENAME_LENGTH,
    MAX_IDENTIFIER_LENGTH,
    MAX_LANGUAGE_LENGTH,
    MAX_VERSION_LENGTH,
)
from whimsi.domain.errors import TableConstraintError
from whimsi.domain.layout_models import Layout

logger = logging.getLogger(__name__)

TABLE_NAME = "File"

COLUMNS = (
    Column("File", IDENTIFIER, MAX_IDENTIFIER_LENGTH, primary_key=True),
    Column("Component_", IDENTIFIER, MAX_IDENTIFIER_LENGTH),
    Column("FileName", STRING, MAX_FILENAME_LENGTH),
    Column("FileSize", INT32),
    Column("Version", STRING, MAX_VERSION_LENGTH, nullable=True),
    Column("Language", STRING, MAX_LANGUAGE_LENGTH, nullable=True),
    Column("Attributes", INT16, nullable=True),
    Column("Sequence", INT32),
)


def build_file_rows(layout: Layout) -> List[Tuple[Any, ...]]:
    """
    Map every file record onto a File table row.

    Args:
        layout: An assembled layout.

    Returns:
        List[Tuple[Any, ...]]: File rows in sequence order.

    Raises:
        TableConstraintError: On a column violation or a repeated sequence number.
    """
    rows: List[Tuple[Any, ...]] = []
    last_sequence = None
    for f in layout.files:
        if last_sequence is not None and f.sequence <= last_sequence:
            raise TableConstraintError(TABLE_NAME, "Sequence", f.sequence, "is not ascending")
        last_sequence = f.sequence

        attributes = FILE_ATTRIBUTE_VITAL if f.vital else None
        rows.append(
            check_row(
                TABLE_NAME,
                COLUMNS,
                (f.file_id, f.component_id, f.name, f.size, f.version, f.language, attributes, f.sequence),
            )
        )

    check_primary_keys(TABLE_NAME, COLUMNS, rows)
    logger.debug(f"Projected {len(rows)} rows into the {TABLE_NAME} table")
    return rows
