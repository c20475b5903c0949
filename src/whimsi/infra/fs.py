from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization and location validation on top of the 'os'
module so that the layout core can rely on absolute, existing paths.
"""

import logging
import os
from typing import Optional

from whimsi.domain.errors import MissingLocationError, PathResolutionError

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Handles user home shortcuts (~/) and relative segments.

    Args:
        path: Raw input path string.

    Returns:
        str: Normalized absolute path.

    Raises:
        PathResolutionError: If the path is empty or cannot be made absolute.
    """
    p = (path or "").strip()
    if not p:
        raise PathResolutionError("Cannot resolve an empty path", path or "")
    try:
        return os.path.abspath(os.path.expanduser(p))
    except (OSError, ValueError) as e:
        logger.error(f"Failed to get full path for [{path}]")
        raise PathResolutionError(f"Failed to get full path: {e}", path) from e


def resolve_declared_path(declared: str, input_directory: str) -> str:
    """
    Resolve a config-declared source location against the input directory.

    Relative locations are interpreted from the input directory; absolute
    ones are kept as declared.

    Args:
        declared: Path as written in the configuration.
        input_directory: Directory holding the files to package.

    Returns:
        str: Absolute path of the declared location.
    """
    if not declared.strip():
        raise PathResolutionError("Declared location is empty", declared)
    return normalize_path(os.path.join(input_directory, declared))


# -----------------------------------------------------------------------------
# FILESYSTEM VALIDATION API
# -----------------------------------------------------------------------------

def ensure_directory(path: str, label: Optional[str] = None) -> str:
    """
    Verify that a path exists and is a directory.

    Args:
        path: Absolute path to check.
        label: Human description used in the error message.

    Returns:
        str: The unchanged path.

    Raises:
        MissingLocationError: If the path is missing or not a directory.
    """
    what = label or "Source location"
    if not os.path.exists(path):
        logger.error(f"{what} {path} does not exist")
        raise MissingLocationError(f"{what} does not exist", path)
    if not os.path.isdir(path):
        logger.error(f"{what} {path} is not a directory")
        raise MissingLocationError(f"{what} is not a directory", path)
    return path
