from __future__ import annotations

"""
Package Layout Data Models.

Defines the immutable records that describe the install-time directory
hierarchy and the files placed into it. Parent relationships are expressed
as string identifiers because the package database addresses directories
by key, not by reference.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from whimsi.core.services.identifiers import fresh_identifier

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class DirectoryRecord:
    """
    One node of the install-time directory hierarchy.

    Attributes:
        id: Unique identifier of the directory.
        parent_id: Identifier of the containing directory. None only for
            the install root.
        name: Directory name on the target system ('.' for folders resolved
            by the installer).
        source: Build host directory mirrored by this node. None for
            structural nodes such as 'ProgramFilesFolder'.
    """
    id: str
    parent_id: Optional[str]
    name: str
    source: Optional[str] = None

    @classmethod
    def from_path(cls, source: str, parent_id: str) -> DirectoryRecord:
        """
        Build a record for a scanned directory with a freshly generated id.

        Args:
            source: Absolute path of the directory on the build host.
            parent_id: Identifier of the directory being scanned.

        Returns:
            DirectoryRecord: Record named after the final path component.
        """
        name = os.path.basename(os.path.normpath(source))
        if not name or name in (".", ".."):
            raise ValueError(f"Cannot derive a directory name from '{source}'")
        return cls(id=fresh_identifier(), parent_id=parent_id, name=name, source=source)

    @property
    def is_structural(self) -> bool:
        return self.source is None


@dataclass(frozen=True)
class FileRecord:
    """
    A discovered file to be copied to the target system.

    Attributes:
        component_id: Identifier of the component that controls the file.
        file_id: Unique identifier of the file.
        directory_id: Identifier of the directory that receives the file.
        source: Absolute path of the file on the build host.
        name: File name on the target system.
        size: Byte length of the source at scan time.
        vital: Whether the installation fails if this file fails to install.
        version: Version string for versioned files.
        language: Comma-separated decimal language ids.
        sequence: Install order position, starting at the configured base.
    """
    component_id: str
    file_id: str
    directory_id: str
    source: str
    name: str
    size: int
    sequence: int
    vital: bool = False
    version: Optional[str] = None
    language: Optional[str] = None


@dataclass(frozen=True)
class ScanAnchor:
    """
    Marks the directory record whose source roots a recursive scan.

    Attributes:
        location: Config key that declared the location (e.g. 'desktop').
        directory: The anchoring directory record.
    """
    location: str
    directory: DirectoryRecord

    @property
    def source(self) -> str:
        # Anchors are only ever built from records that carry a source
        return self.directory.source or ""


@dataclass(frozen=True)
class ResolvedLocations:
    """Output of the well-known path resolver."""
    directories: List[DirectoryRecord] = field(default_factory=list)
    anchors: List[ScanAnchor] = field(default_factory=list)


# -----------------------------------------------------------------------------
# AGGREGATE
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Layout:
    """
    The complete set of directory and file records of one assembly run.

    Attributes:
        directories: Directory records, well-known chain first.
        files: File records in discovery (sequence) order.
    """
    directories: List[DirectoryRecord] = field(default_factory=list)
    files: List[FileRecord] = field(default_factory=list)

    def root(self) -> DirectoryRecord:
        """Return the single directory without a parent."""
        roots = [d for d in self.directories if d.parent_id is None]
        if len(roots) != 1:
            raise ValueError(f"Layout must have exactly one root directory, found {len(roots)}")
        return roots[0]

    def directory_ids(self) -> Set[str]:
        return {d.id for d in self.directories}

    def total_size(self) -> int:
        return sum(f.size for f in self.files)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the layout into JSON-compatible primitives."""
        return {
            "directories": [
                {
                    "id": d.id,
                    "parent_id": d.parent_id,
                    "name": d.name,
                    "source": d.source,
                }
                for d in self.directories
            ],
            "files": [
                {
                    "component_id": f.component_id,
                    "file_id": f.file_id,
                    "directory_id": f.directory_id,
                    "source": f.source,
                    "name": f.name,
                    "size": f.size,
                    "vital": f.vital,
                    "version": f.version,
                    "language": f.language,
                    "sequence": f.sequence,
                }
                for f in self.files
            ],
        }
