from __future__ import annotations

"""Projection of file records into the Component table (one component per file)."""

import logging
from typing import Any, List, Tuple

from whimsi.core.services.identifiers import component_guid
from whimsi.core.tables.columns import IDENTIFIER, INT16, STRING, Column, check_primary_keys, check_row
from whimsi.domain.constants import GUID_LENGTH, MAX_IDENTIFIER_LENGTH
from whimsi.domain.layout_models import Layout

logger = logging.getLogger(__name__)

TABLE_NAME = "Component"

COLUMNS = (
    Column("Component", IDENTIFIER, MAX_IDENTIFIER_LENGTH, primary_key=True),
    Column("ComponentId", STRING, GUID_LENGTH, nullable=True),
    Column("Directory_", IDENTIFIER, MAX_IDENTIFIER_LENGTH),
    Column("Attributes", INT16),
    Column("Condition", STRING, 255, nullable=True),
    Column("KeyPath", IDENTIFIER, MAX_IDENTIFIER_LENGTH, nullable=True),
)


def build_component_rows(layout: Layout) -> List[Tuple[Any, ...]]:
    """
    Map every file record onto the Component row that controls it.

    The file is the component's key path; components install locally
    (Attributes 0) and carry no condition.

    Args:
        layout: An assembled layout.

    Returns:
        List[Tuple[Any, ...]]: Component rows in file sequence order.
    """
    rows = [
        check_row(
            TABLE_NAME,
            COLUMNS,
            (
                f.component_id,
                component_guid(f.component_id),
                f.directory_id,
                0,
                None,
                f.file_id,
            ),
        )
        for f in layout.files
    ]
    check_primary_keys(TABLE_NAME, COLUMNS, rows)
    logger.debug(f"Projected {len(rows)} rows into the {TABLE_NAME} table")
    return rows
