from __future__ import annotations

"""
Well-Known Path Resolver.

Translates the '[default_files]' shorthand locations into the fixed
directory chain required by the package database's root source directory
convention:

    TARGETDIR (SourceDir)
    +-- ProgramFiles64Folder / ProgramFilesFolder (.)
    |   +-- [Manufacturer]
    |       +-- [ProductName]   <- scan anchor
    +-- DesktopFolder (.)       <- scan anchor
"""

import logging
from typing import List

from whimsi.core.services.identifiers import fresh_identifier
from whimsi.domain.config import MsiConfig
from whimsi.domain.constants import (
    DEFAULT_LOCATION_LABELS,
    DESKTOP_FOLDER,
    PLACEHOLDER_NAME,
    SOURCEDIR,
    TARGETDIR,
)
from whimsi.domain.layout_models import DirectoryRecord, ResolvedLocations, ScanAnchor
from whimsi.infra.fs import resolve_declared_path

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def resolve_default_locations(config: MsiConfig, input_directory: str) -> ResolvedLocations:
    """
    Build the well-known directory records for every declared default location.

    Args:
        config: Parsed package configuration.
        input_directory: Directory that relative source locations are resolved from.

    Returns:
        ResolvedLocations: Ordered directory records and the scan anchor of
        each declared location.

    Raises:
        PathResolutionError: If a declared location cannot be made absolute.
    """
    directories: List[DirectoryRecord] = [
        DirectoryRecord(id=TARGETDIR, parent_id=None, name=SOURCEDIR),
    ]
    anchors: List[ScanAnchor] = []

    section = config.default_files
    if section is None:
        logger.debug("No [default_files] section declared")
        return ResolvedLocations(directories=directories, anchors=anchors)

    manufacturer = config.product_info.manufacturer
    product_name = config.product_info.product_name

    for location in ("program_files", "program_files_32"):
        declared = getattr(section, location)
        if declared is None:
            continue
        chain = program_files_chain(
            DEFAULT_LOCATION_LABELS[location],
            manufacturer,
            product_name,
            resolve_declared_path(declared, input_directory),
        )
        directories.extend(chain)
        anchors.append(ScanAnchor(location=location, directory=chain[-1]))

    if section.desktop is not None:
        # The desktop maps straight onto the folder, without manufacturer/product nesting
        desktop = DirectoryRecord(
            id=DESKTOP_FOLDER,
            parent_id=TARGETDIR,
            name=PLACEHOLDER_NAME,
            source=resolve_declared_path(section.desktop, input_directory),
        )
        directories.append(desktop)
        anchors.append(ScanAnchor(location="desktop", directory=desktop))

    logger.debug(
        f"Resolved {len(directories)} well-known directories with {len(anchors)} scan anchors"
    )
    return ResolvedLocations(directories=directories, anchors=anchors)


def program_files_chain(
        program_files_label: str,
        manufacturer: str,
        product_name: str,
        source_dir: str,
) -> List[DirectoryRecord]:
    """
    Build the 'ProgramFiles -> Manufacturer -> Product' chain under the root.

    Args:
        program_files_label: Well-known folder label for the platform variant.
        manufacturer: Manufacturer folder name.
        product_name: Product folder name.
        source_dir: Absolute build host directory mirrored by the product folder.

    Returns:
        List[DirectoryRecord]: The three records, product folder last.
    """
    manufacturer_folder_id = fresh_identifier()
    product_folder_id = fresh_identifier()
    return [
        DirectoryRecord(id=program_files_label, parent_id=TARGETDIR, name=PLACEHOLDER_NAME),
        DirectoryRecord(
            id=manufacturer_folder_id,
            parent_id=program_files_label,
            name=manufacturer,
        ),
        DirectoryRecord(
            id=product_folder_id,
            parent_id=manufacturer_folder_id,
            name=product_name,
            source=source_dir,
        ),
    ]
