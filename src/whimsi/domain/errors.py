from __future__ import annotations

"""
Domain Failure Hierarchy.

Typed exceptions raised while loading configuration and assembling a
package layout. Path-carrying errors expose the offending path so that
interface layers can report it without parsing messages.
"""

from typing import Optional


class WhimsiError(RuntimeError):
    """Base class for every failure surfaced by the layout builder."""


class ConfigError(WhimsiError):
    """Raised when the configuration cannot be read, parsed or is incomplete."""


class PathError(WhimsiError):
    """Base class for failures tied to a specific filesystem path."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(f"{message} [{path}]")
        self.path = path


class PathResolutionError(PathError):
    """Raised when a declared path cannot be normalized to an absolute path."""


class MissingLocationError(PathError):
    """Raised when a declared source location does not exist or is not a directory."""


class ScanError(PathError):
    """Raised when a directory cannot be listed or an entry cannot be inspected."""


class FileSizeOverflowError(PathError):
    """Raised when a file is too large for the File table's FileSize column."""

    def __init__(self, path: str, size: int, limit: int) -> None:
        super().__init__(f"File size {size} exceeds the maximum of {limit} bytes", path)
        self.size = size
        self.limit = limit


class UnsupportedFeatureError(WhimsiError):
    """Raised for features that are declared in the config but not implemented."""

    def __init__(self, feature: str, hint: Optional[str] = None) -> None:
        message = f"{feature} are currently not supported."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)
        self.feature = feature


class TableConstraintError(WhimsiError):
    """Raised when a projected table row violates a column constraint."""

    def __init__(self, table: str, column: str, value: object, reason: str) -> None:
        super().__init__(f"{table}.{column} value {value!r} {reason}")
        self.table = table
        self.column = column
        self.value = value
