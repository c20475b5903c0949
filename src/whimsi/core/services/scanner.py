from __future__ import annotations

"""
Depth-first Filesystem Scanner.

Walks a build host directory depth-first and turns every subdirectory and
regular file into layout records. Symbolic links and special entries are
never followed. Any I/O failure aborts the whole scan; there are no
partial results.
"""

import logging
import os
from typing import List, Optional, Tuple

from whimsi.core.services.identifiers import fresh_identifier
from whimsi.core.services.sequencer import Sequencer
from whimsi.domain.constants import MAX_FILE_SIZE
from whimsi.domain.errors import FileSizeOverflowError, ScanError
from whimsi.domain.layout_models import DirectoryRecord, FileRecord

logger = logging.getLogger(__name__)

ScanResult = Tuple[List[DirectoryRecord], List[FileRecord]]


# ==============================================================================
# PUBLIC API
# ==============================================================================

def scan_directory(path: str, sequencer: Sequencer, parent_id: str) -> ScanResult:
    """
    Produce every descendant directory and file record of a directory.

    Files of a directory are numbered before its subdirectories are entered,
    and siblings are visited in name order, so numbering is deterministic
    for an unchanged tree. The walk keeps its own stack, so tree depth is
    not bounded by the interpreter's recursion limit.

    Args:
        path: Absolute path of the directory to scan.
        sequencer: Shared counter assigning install sequence numbers.
        parent_id: Identifier of the directory record mirroring 'path'.

    Returns:
        ScanResult: (directories below 'path', files at and below 'path').
        The record for 'path' itself is not included.

    Raises:
        ScanError: If a directory cannot be listed, an entry cannot be
            inspected or an entry name is not valid UTF-8.
        FileSizeOverflowError: If a file is too large for the package database.
    """
    directories: List[DirectoryRecord] = []
    files: List[FileRecord] = []

    # Children are pushed in reverse so siblings pop in name order
    pending: List[Tuple[str, str, Optional[DirectoryRecord]]] = [(path, parent_id, None)]
    while pending:
        current_path, current_id, record = pending.pop()
        if record is not None:
            directories.append(record)
        logger.debug(f"Scanning directory path [{current_path}]")

        entries = _list_entries(current_path)
        dir_paths, file_entries = _classify_entries(current_path, entries)

        for entry in file_entries:
            files.append(_build_file_record(entry, sequencer, current_id))

        children = [(p, DirectoryRecord.from_path(p, current_id)) for p in dir_paths]
        for dir_path, child in reversed(children):
            pending.append((dir_path, child.id, child))

    return directories, files


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _list_entries(path: str) -> List[os.DirEntry]:
    """List the immediate entries of a directory, sorted by name."""
    try:
        with os.scandir(path) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.error(f"Failed to read directory [{path}]")
        raise ScanError(f"Failed to read directory: {e}", path) from e


def _classify_entries(
        path: str,
        entries: List[os.DirEntry],
) -> Tuple[List[str], List[os.DirEntry]]:
    """
    Split entries into subdirectory paths and regular files.

    Entries that are neither (symlinks, sockets, devices) are dropped.
    """
    dir_paths: List[str] = []
    file_entries: List[os.DirEntry] = []
    for entry in entries:
        # Undecodable bytes surface as lone surrogates, which no table can hold
        try:
            entry.name.encode("utf-8")
        except UnicodeEncodeError as e:
            logger.error(f"Entry name inside [{path}] is not valid UTF-8")
            raise ScanError(f"Entry name is not valid UTF-8: {e}", entry.path) from e

        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = not is_dir and entry.is_file(follow_symlinks=False)
        except OSError as e:
            logger.error(f"Failed to determine the type of [{entry.path}] inside [{path}]")
            raise ScanError(f"Failed to read entry type: {e}", entry.path) from e

        if is_dir:
            dir_paths.append(entry.path)
        elif is_file:
            file_entries.append(entry)
        else:
            logger.debug(f"Skipping non-regular entry [{entry.path}]")
    return dir_paths, file_entries


def _build_file_record(entry: os.DirEntry, sequencer: Sequencer, directory_id: str) -> FileRecord:
    try:
        size = entry.stat(follow_symlinks=False).st_size
    except OSError as e:
        logger.error(f"Couldn't get metadata from file [{entry.path}]")
        raise ScanError(f"Failed to read file size: {e}", entry.path) from e

    if size > MAX_FILE_SIZE:
        logger.error(f"File [{entry.path}] is too large ({size} bytes)")
        raise FileSizeOverflowError(entry.path, size, MAX_FILE_SIZE)

    return FileRecord(
        component_id=fresh_identifier(),
        file_id=fresh_identifier(),
        directory_id=directory_id,
        source=entry.path,
        name=entry.name,
        size=size,
        sequence=sequencer.next(),
    )
