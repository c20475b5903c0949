from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper run before assembly: verifies that the paths handed to a build
are usable and that the parsed configuration declares at least one file
location.
"""

import logging
import os
from typing import Optional

from whimsi.domain.config import MsiConfig
from whimsi.domain.errors import ConfigError
from whimsi.infra.fs import ensure_directory, normalize_path

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def check_config(config: MsiConfig, *, allow_no_files: bool = False) -> None:
    """
    Check the configuration for common errors.

    Args:
        config: Parsed configuration.
        allow_no_files: Accept configurations that declare no file locations.

    Raises:
        ConfigError: If neither [default_files] nor [explicit_files] is declared.
    """
    if allow_no_files:
        return

    if config.default_files is None and config.explicit_files is None:
        logger.error("No files specified for MSI.")
        logger.error(
            "Files should be specified under `[default_files]` and `[explicit_files]` sections."
        )
        logger.error("To disable this error use the `--no-files` flag.")
        raise ConfigError(
            "No files specified for MSI. Declare a [default_files] or [explicit_files] section."
        )

    if config.default_files is not None and not config.default_files.declared():
        logger.warning("[default_files] section declares no locations; no files will be added.")


def validate_paths(
        config_path: str,
        input_directory: str,
        output_path: Optional[str] = None,
) -> None:
    """
    Validate the paths of a build invocation before any work is done.

    Args:
        config_path: Path of the TOML configuration.
        input_directory: Directory holding the files to package.
        output_path: Optional destination file of the build.

    Raises:
        ConfigError: If the config path is missing or not a file, or the
            output path has no usable parent directory.
        MissingLocationError: If the input directory is missing or not a directory.
        PathResolutionError: If the output path cannot be made absolute.
    """
    if not os.path.exists(config_path):
        logger.error(f"Config path {config_path} does not exist")
        raise ConfigError(f"Config path {config_path} does not exist")
    if not os.path.isfile(config_path):
        logger.error(f"Config path {config_path} is not a file")
        raise ConfigError(f"Config path {config_path} is not a file")

    ensure_directory(input_directory, label="Input directory")

    if output_path is None:
        return

    full_path = normalize_path(output_path)
    if os.path.basename(full_path) == "":
        raise ConfigError(f"Output path {output_path} is not a valid file path")

    # At the filesystem root dirname() returns the root itself, which is valid
    output_parent_dir = os.path.dirname(full_path) or full_path
    if not os.path.isdir(output_parent_dir):
        logger.error(f"Output parent directory {output_parent_dir} is not a valid directory")
        raise ConfigError(f"Output parent directory {output_parent_dir} is not a valid directory")
    if os.path.isdir(full_path):
        raise ConfigError(f"Output path {output_path} is a directory")
