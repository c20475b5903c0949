from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the Windows Installer labels recognized by the target format,
column width limits of the package database tables, and application-wide
defaults.
"""

from typing import Dict

APP_NAME = "whimsi"
DEFAULT_SEQUENCE_START = 1

# -----------------------------------------------------------------------------
# WELL-KNOWN DIRECTORY LABELS
# -----------------------------------------------------------------------------

# The DefaultDir of the root entry must be the SourceDir property:
# https://learn.microsoft.com/en-us/windows/win32/msi/directory-table#root-source-directory
TARGETDIR = "TARGETDIR"
SOURCEDIR = "SourceDir"

PROGRAM_FILES_64_FOLDER = "ProgramFiles64Folder"
PROGRAM_FILES_FOLDER = "ProgramFilesFolder"
DESKTOP_FOLDER = "DesktopFolder"

# Placeholder name for folders resolved by the installer at install time
PLACEHOLDER_NAME = "."

# Config key -> platform folder label
DEFAULT_LOCATION_LABELS: Dict[str, str] = {
    "program_files": PROGRAM_FILES_64_FOLDER,
    "program_files_32": PROGRAM_FILES_FOLDER,
    "desktop": DESKTOP_FOLDER,
}

# -----------------------------------------------------------------------------
# PACKAGE DATABASE LIMITS
# -----------------------------------------------------------------------------

MAX_IDENTIFIER_LENGTH = 72
MAX_DEFAULT_DIR_LENGTH = 255
MAX_FILENAME_LENGTH = 255
MAX_VERSION_LENGTH = 72
MAX_LANGUAGE_LENGTH = 20
GUID_LENGTH = 38

# FileSize is a DoubleInteger column (signed 32-bit)
MAX_FILE_SIZE = 2 ** 31 - 1

# https://learn.microsoft.com/en-us/windows/win32/msi/file-table
FILE_ATTRIBUTE_VITAL = 512
