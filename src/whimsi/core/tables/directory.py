from __future__ import annotations

"""Projection of directory records into the Directory table."""

import logging
from typing import Any, List, Tuple

from whimsi.core.tables.columns import IDENTIFIER, STRING, Column, check_primary_keys, check_row
from whimsi.domain.constants import MAX_DEFAULT_DIR_LENGTH, MAX_IDENTIFIER_LENGTH
from whimsi.domain.errors import TableConstraintError
from whimsi.domain.layout_models import Layout

logger = logging.getLogger(__name__)

TABLE_NAME = "Directory"

COLUMNS = (
    Column("Directory", IDENTIFIER, MAX_IDENTIFIER_LENGTH, primary_key=True),
    Column("Directory_Parent", IDENTIFIER, MAX_IDENTIFIER_LENGTH, nullable=True),
    Column("DefaultDir", STRING, MAX_DEFAULT_DIR_LENGTH),
)


def build_directory_rows(layout: Layout) -> List[Tuple[Any, ...]]:
    """
    Map every directory record onto a Directory table row.

    Args:
        layout: An assembled layout.

    Returns:
        List[Tuple[Any, ...]]: (Directory, Directory_Parent, DefaultDir) rows.

    Raises:
        TableConstraintError: On a column violation, a duplicate key or a
            parent that is not part of the layout.
    """
    known_ids = layout.directory_ids()
    rows: List[Tuple[Any, ...]] = []
    for directory in layout.directories:
        if directory.parent_id is not None and directory.parent_id not in known_ids:
            raise TableConstraintError(
                TABLE_NAME, "Directory_Parent", directory.parent_id, "references an unknown directory"
            )
        rows.append(check_row(TABLE_NAME, COLUMNS, (directory.id, directory.parent_id, directory.name)))

    check_primary_keys(TABLE_NAME, COLUMNS, rows)
    logger.debug(f"Projected {len(rows)} rows into the {TABLE_NAME} table")
    return rows
