from __future__ import annotations

"""
Unit tests for the Recursive Filesystem Scanner.

Verifies directory/file record production, parent linkage, sequence
numbering independent of listing order, skipping of non-regular entries
and the all-or-nothing failure policy.
"""

import os
import sys
from pathlib import Path
from typing import List
from unittest.mock import MagicMock, patch

import pytest

from whimsi.core.services.scanner import scan_directory
from whimsi.core.services.sequencer import Sequencer
from whimsi.domain.constants import MAX_FILE_SIZE
from whimsi.domain.errors import FileSizeOverflowError, ScanError

_REAL_SCANDIR = os.scandir
ROOT_ID = "ROOT"


class _ReversedScandir:
    """Stand-in for os.scandir that lists entries in reverse name order."""

    def __init__(self, path: str) -> None:
        with _REAL_SCANDIR(path) as it:
            self._entries = sorted(it, key=lambda e: e.name, reverse=True)

    def __enter__(self):
        return iter(self._entries)

    def __exit__(self, *exc) -> bool:
        return False


def _fake_listing(entries: List[MagicMock]) -> MagicMock:
    cm = MagicMock()
    cm.__enter__.return_value = iter(entries)
    cm.__exit__.return_value = False
    return cm


def _fake_entry(name: str, *, is_dir: bool = False, is_file: bool = True) -> MagicMock:
    entry = MagicMock()
    entry.name = name
    entry.path = f"/virtual/{name}"
    entry.is_dir.return_value = is_dir
    entry.is_file.return_value = is_file
    return entry


@pytest.fixture
def two_level_tree(tmp_path: Path) -> Path:
    """root/{a.txt (10 bytes), sub/{b.txt (5 bytes)}}"""
    root = tmp_path / "root"
    (root / "sub").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"x" * 10)
    (root / "sub" / "b.txt").write_bytes(b"y" * 5)
    return root


# -----------------------------------------------------------------------------
# Record production
# -----------------------------------------------------------------------------

def test_two_level_tree_records(two_level_tree: Path) -> None:
    dirs, files = scan_directory(str(two_level_tree), Sequencer(1), ROOT_ID)

    assert [d.name for d in dirs] == ["sub"]
    assert dirs[0].parent_id == ROOT_ID
    assert dirs[0].source == str(two_level_tree / "sub")

    by_name = {f.name: f for f in files}
    assert by_name["a.txt"].sequence == 1
    assert by_name["b.txt"].sequence == 2
    assert by_name["a.txt"].size == 10
    assert by_name["b.txt"].size == 5


def test_two_level_tree_ordering_ignores_listing_order(two_level_tree: Path) -> None:
    """Sequence numbers must not depend on how the OS enumerates entries."""
    with patch("whimsi.core.services.scanner.os.scandir", side_effect=_ReversedScandir):
        dirs, files = scan_directory(str(two_level_tree), Sequencer(5), ROOT_ID)

    by_name = {f.name: f for f in files}
    assert by_name["a.txt"].sequence == 5
    assert by_name["b.txt"].sequence == 6
    assert [d.name for d in dirs] == ["sub"]


def test_files_link_to_their_directory(two_level_tree: Path) -> None:
    dirs, files = scan_directory(str(two_level_tree), Sequencer(), ROOT_ID)
    sub = dirs[0]
    by_name = {f.name: f for f in files}

    assert by_name["a.txt"].directory_id == ROOT_ID
    assert by_name["b.txt"].directory_id == sub.id
    assert by_name["b.txt"].source == str(two_level_tree / "sub" / "b.txt")


def test_file_record_defaults(two_level_tree: Path) -> None:
    _, files = scan_directory(str(two_level_tree), Sequencer(), ROOT_ID)
    for f in files:
        assert f.vital is False
        assert f.version is None
        assert f.language is None
        assert f.component_id != f.file_id

    ids = [f.file_id for f in files] + [f.component_id for f in files]
    assert len(set(ids)) == len(ids)


def test_empty_directory_yields_nothing(tmp_path: Path) -> None:
    dirs, files = scan_directory(str(tmp_path), Sequencer(), ROOT_ID)
    assert dirs == []
    assert files == []


def test_only_subdirectories(tmp_path: Path) -> None:
    for name in ("one", "two", "three"):
        (tmp_path / name).mkdir()

    dirs, files = scan_directory(str(tmp_path), Sequencer(), ROOT_ID)

    assert files == []
    assert sorted(d.name for d in dirs) == ["one", "three", "two"]
    assert all(d.parent_id == ROOT_ID for d in dirs)


def test_deep_nesting_links_parents(tmp_path: Path) -> None:
    deep = tmp_path / "a" / "b" / "c"
    deep.mkdir(parents=True)
    (deep / "leaf.bin").write_bytes(b"\x00" * 3)

    dirs, files = scan_directory(str(tmp_path), Sequencer(), ROOT_ID)

    by_name = {d.name: d for d in dirs}
    assert by_name["a"].parent_id == ROOT_ID
    assert by_name["b"].parent_id == by_name["a"].id
    assert by_name["c"].parent_id == by_name["b"].id
    assert files[0].directory_id == by_name["c"].id


def test_shared_sequencer_spans_calls(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    (first / "1.txt").write_text("1", encoding="utf-8")
    (second / "2.txt").write_text("2", encoding="utf-8")
    (second / "3.txt").write_text("3", encoding="utf-8")

    seq = Sequencer()
    _, files_a = scan_directory(str(first), seq, "A")
    _, files_b = scan_directory(str(second), seq, "B")

    assert [f.sequence for f in files_a + files_b] == [1, 2, 3]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_symlinks_are_skipped(tmp_path: Path) -> None:
    target_dir = tmp_path / "real"
    target_dir.mkdir()
    (target_dir / "file.txt").write_text("data", encoding="utf-8")

    scanned = tmp_path / "scanned"
    scanned.mkdir()
    try:
        os.symlink(target_dir, scanned / "dir_link", target_is_directory=True)
        os.symlink(target_dir / "file.txt", scanned / "file_link")
    except (OSError, NotImplementedError):
        pytest.skip("symlink creation not permitted")

    dirs, files = scan_directory(str(scanned), Sequencer(), ROOT_ID)

    assert dirs == []
    assert files == []


# -----------------------------------------------------------------------------
# Failure policy
# -----------------------------------------------------------------------------

def test_missing_directory_raises_scan_error(tmp_path: Path) -> None:
    missing = tmp_path / "nope"
    with pytest.raises(ScanError) as exc_info:
        scan_directory(str(missing), Sequencer(), ROOT_ID)
    assert exc_info.value.path == str(missing)


def test_listing_failure_raises_scan_error(tmp_path: Path) -> None:
    with patch("whimsi.core.services.scanner.os.scandir", side_effect=PermissionError("denied")):
        with pytest.raises(ScanError) as exc_info:
            scan_directory(str(tmp_path), Sequencer(), ROOT_ID)

    assert exc_info.value.path == str(tmp_path)
    assert isinstance(exc_info.value.__cause__, PermissionError)


def test_nested_listing_failure_aborts_whole_scan(two_level_tree: Path) -> None:
    """A failure deep in the tree propagates; no partial result is returned."""
    sub_path = str(two_level_tree / "sub")

    def _scandir(path):
        if os.fspath(path) == sub_path:
            raise PermissionError("denied")
        return _REAL_SCANDIR(path)

    with patch("whimsi.core.services.scanner.os.scandir", side_effect=_scandir):
        with pytest.raises(ScanError) as exc_info:
            scan_directory(str(two_level_tree), Sequencer(), ROOT_ID)

    assert exc_info.value.path == sub_path


def test_entry_type_failure_raises_scan_error() -> None:
    entry = _fake_entry("broken")
    entry.is_dir.side_effect = OSError("stale handle")

    with patch("whimsi.core.services.scanner.os.scandir", return_value=_fake_listing([entry])):
        with pytest.raises(ScanError) as exc_info:
            scan_directory("/virtual", Sequencer(), ROOT_ID)

    assert exc_info.value.path == "/virtual/broken"


def test_size_failure_raises_scan_error() -> None:
    entry = _fake_entry("vanished.txt")
    entry.stat.side_effect = FileNotFoundError("gone")

    with patch("whimsi.core.services.scanner.os.scandir", return_value=_fake_listing([entry])):
        with pytest.raises(ScanError) as exc_info:
            scan_directory("/virtual", Sequencer(), ROOT_ID)

    assert exc_info.value.path == "/virtual/vanished.txt"


def test_oversized_file_raises_overflow_error() -> None:
    entry = _fake_entry("huge.iso")
    entry.stat.return_value = MagicMock(st_size=MAX_FILE_SIZE + 1)

    with patch("whimsi.core.services.scanner.os.scandir", return_value=_fake_listing([entry])):
        with pytest.raises(FileSizeOverflowError) as exc_info:
            scan_directory("/virtual", Sequencer(), ROOT_ID)

    assert exc_info.value.size == MAX_FILE_SIZE + 1
    assert exc_info.value.path == "/virtual/huge.iso"


def test_special_entries_are_skipped() -> None:
    fifo = _fake_entry("pipe", is_dir=False, is_file=False)
    regular = _fake_entry("data.txt")
    regular.stat.return_value = MagicMock(st_size=4)

    with patch("whimsi.core.services.scanner.os.scandir", return_value=_fake_listing([fifo, regular])):
        dirs, files = scan_directory("/virtual", Sequencer(), ROOT_ID)

    assert dirs == []
    assert [f.name for f in files] == ["data.txt"]
    assert files[0].size == 4


def test_undecodable_name_raises_scan_error() -> None:
    # Name as produced by os.fsdecode for the raw bytes b"bad\xff.txt"
    entry = _fake_entry("bad\udcff.txt")
    entry.path = "/virtual/bad\udcff.txt"

    with patch("whimsi.core.services.scanner.os.scandir", return_value=_fake_listing([entry])):
        with pytest.raises(ScanError) as exc_info:
            scan_directory("/virtual", Sequencer(), ROOT_ID)

    assert exc_info.value.path == "/virtual/bad\udcff.txt"
    assert isinstance(exc_info.value.__cause__, UnicodeEncodeError)
    entry.stat.assert_not_called()


def test_undecodable_directory_name_raises_scan_error() -> None:
    entry = _fake_entry("sub\udcfe", is_dir=True, is_file=False)

    with patch("whimsi.core.services.scanner.os.scandir", return_value=_fake_listing([entry])):
        with pytest.raises(ScanError, match="not valid UTF-8"):
            scan_directory("/virtual", Sequencer(), ROOT_ID)

# -----------------------------------------------------------------------------
# Traversal shape
# -----------------------------------------------------------------------------

@pytest.mark.skipif(sys.platform == "win32", reason="path length limits")
def test_tree_deeper_than_recursion_limit(tmp_path: Path) -> None:
    depth = 1100
    assert depth > sys.getrecursionlimit()
    current = tmp_path
    for _ in range(depth):
        current = current / "a"
        current.mkdir()
    (current / "leaf.txt").write_bytes(b"z")

    dirs, files = scan_directory(str(tmp_path), Sequencer(), ROOT_ID)

    assert len(dirs) == depth
    assert dirs[0].parent_id == ROOT_ID
    assert all(child.parent_id == parent.id for parent, child in zip(dirs, dirs[1:]))
    assert [f.name for f in files] == ["leaf.txt"]
    assert files[0].directory_id == dirs[-1].id


def test_directories_are_listed_depth_first(tmp_path: Path) -> None:
    for rel in ("a/x", "a/y", "b"):
        (tmp_path / rel).mkdir(parents=True)
    (tmp_path / "a" / "x" / "1.txt").write_text("1", encoding="utf-8")
    (tmp_path / "a" / "2.txt").write_text("2", encoding="utf-8")
    (tmp_path / "b" / "3.txt").write_text("3", encoding="utf-8")
    (tmp_path / "0.txt").write_text("0", encoding="utf-8")

    dirs, files = scan_directory(str(tmp_path), Sequencer(), ROOT_ID)

    assert [d.name for d in dirs] == ["a", "x", "y", "b"]
    assert [(f.name, f.sequence) for f in files] == [
        ("0.txt", 1),
        ("2.txt", 2),
        ("1.txt", 3),
        ("3.txt", 4),
    ]
