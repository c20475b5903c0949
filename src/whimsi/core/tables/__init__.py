from __future__ import annotations

from typing import Any, Dict, List, Tuple

from whimsi.domain.layout_models import Layout

from . import component, directory, file


def build_tables(layout: Layout) -> Dict[str, List[Tuple[Any, ...]]]:
    """Project a layout into the Directory, Component and File tables."""
    return {
        directory.TABLE_NAME: directory.build_directory_rows(layout),
        component.TABLE_NAME: component.build_component_rows(layout),
        file.TABLE_NAME: file.build_file_rows(layout),
    }


def table_columns() -> Dict[str, List[str]]:
    """Column names of each projected table, in row order."""
    return {
        module.TABLE_NAME: [c.name for c in module.COLUMNS]
        for module in (directory, component, file)
    }


__all__ = ["build_tables", "table_columns"]
