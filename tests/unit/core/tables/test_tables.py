from __future__ import annotations

"""
Unit tests for the Table Projections.

Verifies that layouts map onto Directory, Component and File rows and that
column constraints are enforced before rows leave the core.
"""

import re

import pytest

from whimsi.core.services.identifiers import fresh_identifier
from whimsi.core.tables import build_tables, table_columns
from whimsi.core.tables.columns import IDENTIFIER, INT16, STRING, Column, check_primary_keys, check_row
from whimsi.core.tables.component import build_component_rows
from whimsi.core.tables.directory import build_directory_rows
from whimsi.core.tables.file import build_file_rows
from whimsi.domain.constants import FILE_ATTRIBUTE_VITAL, TARGETDIR
from whimsi.domain.errors import TableConstraintError
from whimsi.domain.layout_models import DirectoryRecord, FileRecord, Layout


def _file(name: str, sequence: int, directory_id: str = TARGETDIR, **kwargs) -> FileRecord:
    return FileRecord(
        component_id=fresh_identifier(),
        file_id=fresh_identifier(),
        directory_id=directory_id,
        source=f"/src/{name}",
        name=name,
        size=len(name),
        sequence=sequence,
        **kwargs,
    )


@pytest.fixture
def small_layout() -> Layout:
    root = DirectoryRecord(TARGETDIR, None, "SourceDir")
    sub = DirectoryRecord(fresh_identifier(), TARGETDIR, "sub", "/src/sub")
    return Layout(
        directories=[root, sub],
        files=[_file("a.txt", 1), _file("b.txt", 2, sub.id, vital=True, version="1.0.0")],
    )

# -----------------------------------------------------------------------------
# PROJECTIONS
# -----------------------------------------------------------------------------

def test_directory_rows(small_layout: Layout) -> None:
    rows = build_directory_rows(small_layout)
    sub = small_layout.directories[1]

    assert rows == [(TARGETDIR, None, "SourceDir"), (sub.id, TARGETDIR, "sub")]


def test_component_rows(small_layout: Layout) -> None:
    rows = build_component_rows(small_layout)
    first = small_layout.files[0]

    component, guid, directory, attributes, condition, key_path = rows[0]
    assert component == first.component_id
    assert re.fullmatch(r"\{[0-9A-F-]{36}\}", guid)
    assert directory == TARGETDIR
    assert attributes == 0
    assert condition is None
    assert key_path == first.file_id


def test_file_rows(small_layout: Layout) -> None:
    rows = build_file_rows(small_layout)
    plain, vital = small_layout.files

    assert rows[0] == (plain.file_id, plain.component_id, "a.txt", 5, None, None, None, 1)
    assert rows[1][6] == FILE_ATTRIBUTE_VITAL
    assert rows[1][4] == "1.0.0"
    assert rows[1][7] == 2


def test_build_tables_matches_columns(small_layout: Layout) -> None:
    tables = build_tables(small_layout)
    columns = table_columns()

    assert set(tables) == {"Directory", "Component", "File"}
    for name, rows in tables.items():
        assert all(len(row) == len(columns[name]) for row in rows)


def test_empty_layout_projects_empty_tables() -> None:
    tables = build_tables(Layout(directories=[DirectoryRecord(TARGETDIR, None, "SourceDir")]))
    assert tables["File"] == []
    assert tables["Component"] == []
    assert len(tables["Directory"]) == 1

# -----------------------------------------------------------------------------
# CONSTRAINTS
# -----------------------------------------------------------------------------

def test_duplicate_directory_id_is_rejected() -> None:
    layout = Layout(directories=[
        DirectoryRecord(TARGETDIR, None, "SourceDir"),
        DirectoryRecord("_A", TARGETDIR, "x"),
        DirectoryRecord("_A", TARGETDIR, "y"),
    ])
    with pytest.raises(TableConstraintError, match="is not unique"):
        build_directory_rows(layout)


def test_dangling_parent_is_rejected() -> None:
    layout = Layout(directories=[
        DirectoryRecord(TARGETDIR, None, "SourceDir"),
        DirectoryRecord("_A", "_MISSING", "x"),
    ])
    with pytest.raises(TableConstraintError) as exc_info:
        build_directory_rows(layout)
    assert exc_info.value.column == "Directory_Parent"


def test_illegal_identifier_is_rejected() -> None:
    layout = Layout(directories=[DirectoryRecord("1-bad", None, "SourceDir")])
    with pytest.raises(TableConstraintError):
        build_directory_rows(layout)


def test_non_ascending_sequence_is_rejected() -> None:
    layout = Layout(files=[_file("a", 2), _file("b", 2)])
    with pytest.raises(TableConstraintError, match="not ascending"):
        build_file_rows(layout)


def test_long_file_name_is_rejected() -> None:
    layout = Layout(files=[_file("n" * 300, 1)])
    with pytest.raises(TableConstraintError) as exc_info:
        build_file_rows(layout)
    assert exc_info.value.column == "FileName"


def test_column_checks() -> None:
    flag = Column("Flags", INT16)
    with pytest.raises(TableConstraintError, match="outside the range"):
        flag.check("T", 40000)
    with pytest.raises(TableConstraintError, match="must be an integer"):
        flag.check("T", True)
    with pytest.raises(TableConstraintError, match="must not be null"):
        flag.check("T", None)
    assert Column("Note", STRING, 4, nullable=True).check("T", None) is None


def test_check_row_arity() -> None:
    with pytest.raises(ValueError):
        check_row("T", (Column("Key", IDENTIFIER, 72),), ("_A", "extra"))


def test_duplicate_file_key_is_rejected() -> None:
    first = _file("a", 1)
    clash = FileRecord(
        component_id=fresh_identifier(),
        file_id=first.file_id,
        directory_id=TARGETDIR,
        source="/src/b",
        name="b",
        size=1,
        sequence=2,
    )
    with pytest.raises(TableConstraintError) as exc_info:
        build_file_rows(Layout(files=[first, clash]))
    assert exc_info.value.column == "File"


def test_primary_keys_only_compare_key_columns() -> None:
    columns = (Column("Key", IDENTIFIER, 72, primary_key=True), Column("Note", STRING, 10))
    check_primary_keys("T", columns, [("_A", "same"), ("_B", "same")])
    with pytest.raises(TableConstraintError, match="is not unique"):
        check_primary_keys("T", columns, [("_A", "x"), ("_A", "y")])
