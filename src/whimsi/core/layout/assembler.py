from __future__ import annotations

"""
Layout Assembler.

Orchestrates one assembly run: resolve the well-known locations, verify
every scan anchor, scan each anchor with a single shared sequencer and
concatenate the results. The run is atomic; a failure anywhere raises and
no partial layout escapes.
"""

import logging
from typing import Any, Dict, List

from whimsi.core.layout.resolver import resolve_default_locations
from whimsi.core.services.scanner import scan_directory
from whimsi.core.services.sequencer import Sequencer
from whimsi.domain.config import MsiConfig
from whimsi.domain.constants import DEFAULT_SEQUENCE_START
from whimsi.domain.errors import UnsupportedFeatureError
from whimsi.domain.layout_models import DirectoryRecord, FileRecord, Layout
from whimsi.infra.fs import ensure_directory

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def assemble_layout(
        config: MsiConfig,
        input_directory: str,
        *,
        sequence_start: int = DEFAULT_SEQUENCE_START,
        prune_empty: bool = False,
) -> Layout:
    """
    Assemble the complete directory and file layout for a package.

    Args:
        config: Parsed configuration that already passed the completeness check.
        input_directory: Directory holding the files to package.
        sequence_start: First file sequence number.
        prune_empty: Drop structural directories left without content.

    Returns:
        Layout: Directories (well-known chain first) and files in sequence order.

    Raises:
        UnsupportedFeatureError: For explicit file paths or pruning.
        PathResolutionError: If a declared location cannot be made absolute.
        MissingLocationError: If a declared location is missing or not a directory.
        ScanError: On any filesystem read failure.
        FileSizeOverflowError: If a file is too large for the package database.
    """
    logger.info("Scanning paths to include in the MSI")

    if config.explicit_files is not None:
        logger.warning("Sorry! Explicit paths are currently not implemented.")
        raise UnsupportedFeatureError(
            "Explicit paths",
            "Remove the [explicit_files] section and use [default_files] instead.",
        )

    if prune_empty:
        raise UnsupportedFeatureError("Pruning empty directories")

    resolved = resolve_default_locations(config, input_directory)

    # Validate every anchor up front so a bad location fails before any scan work
    for anchor in resolved.anchors:
        ensure_directory(anchor.source, label=f"Source location '{anchor.location}'")

    sequencer = Sequencer(sequence_start)
    directories: List[DirectoryRecord] = list(resolved.directories)
    files: List[FileRecord] = []

    for anchor in resolved.anchors:
        logger.info(f"Scanning '{anchor.location}' from {anchor.source}")
        scanned_dirs, scanned_files = scan_directory(anchor.source, sequencer, anchor.directory.id)
        directories.extend(scanned_dirs)
        files.extend(scanned_files)

    logger.info(f"Assembled {len(directories)} directories and {sequencer.issued} files")
    return Layout(directories=directories, files=files)


def summarize_layout(layout: Layout) -> Dict[str, Any]:
    """
    Compute the statistics shown by interface layers.

    Args:
        layout: An assembled layout.

    Returns:
        Dict[str, Any]: Directory and file counts, total size and sequence range.
    """
    sequences = [f.sequence for f in layout.files]
    return {
        "directories": len(layout.directories),
        "structural_directories": sum(1 for d in layout.directories if d.is_structural),
        "files": len(layout.files),
        "total_size": layout.total_size(),
        "first_sequence": min(sequences) if sequences else None,
        "last_sequence": max(sequences) if sequences else None,
    }
