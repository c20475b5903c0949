from __future__ import annotations

"""
Configuration Domain Management.

Parses the TOML document describing an installer package into immutable
section models. Only structural parsing and type checking happen here;
completeness rules live in the validator stage.
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from typing import Any, Dict, Optional

from whimsi.domain.constants import APP_NAME
from whimsi.domain.errors import ConfigError

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# CONFIGURATION MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ProductInfo:
    """
    Product information properties required by every installation.

    Attributes:
        product_name: Name of the application to be installed.
        product_version: Version in MAJOR.MINOR.BUILD format.
        manufacturer: Name of the manufacturer of the application.
        product_language: Numeric language identifier (e.g. 1033).
        product_code: GUID for the product release, or '*' to generate one.
    """
    product_name: str
    product_version: str
    manufacturer: str
    product_language: int
    product_code: str


@dataclass(frozen=True)
class SummaryInfo:
    """
    Summary information stream properties.

    Attributes:
        page_count: Minimum installer version required by the package.
        revision_number: Package code GUID, or '*' to generate one.
        template: Platform and languages compatible with the package.
        word_count: Type of the source file image.
        author: Name of the author publishing the package.
        code_page: ANSI code page used by the summary strings.
        comments: General purpose of the package.
        generating_application: Software used to author the package.
    """
    page_count: int
    revision_number: str
    template: str
    word_count: Optional[int] = None
    author: Optional[str] = None
    code_page: Optional[str] = None
    comments: Optional[str] = None
    generating_application: str = APP_NAME


@dataclass(frozen=True)
class DefaultFiles:
    """
    Shorthand install locations.

    Attributes:
        program_files: Source directory copied to
            'Program Files\\[Manufacturer]\\[ProductName]'.
        program_files_32: Source directory copied to
            'Program Files (x86)\\[Manufacturer]\\[ProductName]'.
        desktop: Source directory copied to the user's desktop.
    """
    program_files: Optional[str] = None
    program_files_32: Optional[str] = None
    desktop: Optional[str] = None

    def declared(self) -> Dict[str, str]:
        """Return the declared locations keyed by config name, in resolution order."""
        pairs = (
            ("program_files", self.program_files),
            ("program_files_32", self.program_files_32),
            ("desktop", self.desktop),
        )
        return {key: value for key, value in pairs if value is not None}


@dataclass(frozen=True)
class ExplicitFiles:
    """Fine grained placement of source files. Declared but not implemented."""
    raw: Dict[str, Any]


@dataclass(frozen=True)
class MsiConfig:
    """Root configuration document for a package build."""
    product_info: ProductInfo
    summary_info: SummaryInfo
    default_files: Optional[DefaultFiles] = None
    explicit_files: Optional[ExplicitFiles] = None


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def load_config(config_path: str) -> MsiConfig:
    """
    Read and parse a TOML configuration file.

    Args:
        config_path: Path to the TOML document.

    Returns:
        MsiConfig: The parsed configuration.

    Raises:
        ConfigError: If the file cannot be read or does not match the schema.
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        logger.error(f"Failed to open config {config_path}")
        raise ConfigError(f"Failed to open config {config_path}: {e}") from e

    return parse_config(text, source=config_path)


def parse_config(text: str, source: str = "<string>") -> MsiConfig:
    """
    Parse TOML text into an MsiConfig.

    Args:
        text: Raw TOML document.
        source: Label used in error messages.

    Returns:
        MsiConfig: The parsed configuration.

    Raises:
        ConfigError: On TOML syntax errors, missing sections or type mismatches.
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        logger.error(f"Failed to parse config toml {source}")
        raise ConfigError(f"Failed to parse TOML data from config file {source}: {e}") from e

    product = _require_section(data, "product_info", source)
    summary = _require_section(data, "summary_info", source)

    product_info = ProductInfo(
        product_name=_req_str(product, "product_info", "product_name", source),
        product_version=_req_str(product, "product_info", "product_version", source),
        manufacturer=_req_str(product, "product_info", "manufacturer", source),
        product_language=_req_int(product, "product_info", "product_language", source),
        product_code=_req_str(product, "product_info", "product_code", source),
    )

    summary_info = SummaryInfo(
        page_count=_req_int(summary, "summary_info", "page_count", source),
        revision_number=_req_str(summary, "summary_info", "revision_number", source),
        template=_req_str(summary, "summary_info", "template", source),
        word_count=_opt_int(summary, "summary_info", "word_count", source),
        author=_opt_str(summary, "summary_info", "author", source),
        code_page=_opt_str(summary, "summary_info", "code_page", source),
        comments=_opt_str(summary, "summary_info", "comments", source),
        generating_application=(
            _opt_str(summary, "summary_info", "generating_application", source) or APP_NAME
        ),
    )

    default_files = None
    if "default_files" in data:
        section = _as_section(data["default_files"], "default_files", source)
        default_files = DefaultFiles(
            program_files=_opt_str(section, "default_files", "program_files", source),
            program_files_32=_opt_str(section, "default_files", "program_files_32", source),
            desktop=_opt_str(section, "default_files", "desktop", source),
        )

    explicit_files = None
    if "explicit_files" in data:
        section = _as_section(data["explicit_files"], "explicit_files", source)
        explicit_files = ExplicitFiles(raw=dict(section))

    logger.debug(f"Parsed configuration from {os.path.basename(source)}")
    return MsiConfig(
        product_info=product_info,
        summary_info=summary_info,
        default_files=default_files,
        explicit_files=explicit_files,
    )


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: SCHEMA COERCION
# -----------------------------------------------------------------------------

def _require_section(data: Dict[str, Any], name: str, source: str) -> Dict[str, Any]:
    if name not in data:
        raise ConfigError(f"Missing [{name}] section in config {source}")
    return _as_section(data[name], name, source)


def _as_section(value: Any, name: str, source: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"[{name}] in config {source} must be a table")
    return value


def _req_str(section: Dict[str, Any], name: str, key: str, source: str) -> str:
    value = _opt_str(section, name, key, source)
    if value is None:
        raise ConfigError(f"Missing required field '{name}.{key}' in config {source}")
    return value


def _opt_str(section: Dict[str, Any], name: str, key: str, source: str) -> Optional[str]:
    value = section.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(
            f"Invalid field '{name}.{key}' in config {source}: "
            f"expected string, received {type(value).__name__}"
        )
    return value


def _req_int(section: Dict[str, Any], name: str, key: str, source: str) -> int:
    value = _opt_int(section, name, key, source)
    if value is None:
        raise ConfigError(f"Missing required field '{name}.{key}' in config {source}")
    return value


def _opt_int(section: Dict[str, Any], name: str, key: str, source: str) -> Optional[int]:
    value = section.get(key)
    if value is None:
        return None
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(
            f"Invalid field '{name}.{key}' in config {source}: "
            f"expected integer, received {type(value).__name__}"
        )
    return value
