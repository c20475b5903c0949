from __future__ import annotations

"""
CLI Argument Definition.

Defines the command-line schema of the 'whimsi' tool: global logging
options and the 'build' subcommand.
"""

import argparse

from whimsi import __version__
from whimsi.domain.constants import APP_NAME, DEFAULT_SEQUENCE_START
from whimsi.infra.logging import LEVEL_NAMES

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the whimsi CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Assemble the directory and file layout of a Windows Installer package.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # --- Diagnostics ---
    p.add_argument(
        "--log-level",
        dest="log_level",
        type=str.upper,
        choices=LEVEL_NAMES,
        default=None,
        help="Minimum severity printed to stderr (default: INFO).",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Shortcut for --log-level DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this rotating file.",
    )

    sub = p.add_subparsers(dest="command", required=True)

    # --- Build ---
    build = sub.add_parser("build", help="Assemble a package layout from a config and input directory.")
    build.add_argument(
        "-c", "--config",
        dest="config_path",
        required=True,
        help="Path to the TOML config to build from.",
    )
    build.add_argument(
        "-i", "--input-directory",
        dest="input_directory",
        required=True,
        help="Directory storing the files to add to the package.",
    )
    build.add_argument(
        "-o", "--output-path",
        dest="output_path",
        default=None,
        help="Write the layout and table rows as JSON to this file.",
    )
    build.add_argument(
        "--sequence-start",
        dest="sequence_start",
        type=_positive_int,
        default=DEFAULT_SEQUENCE_START,
        help="First file install sequence number (default: 1).",
    )
    build.add_argument(
        "--no-files",
        dest="no_files",
        action="store_true",
        help="Allow configs that declare no file locations.",
    )
    build.add_argument(
        "--prune-empty",
        dest="prune_empty",
        action="store_true",
        help="Drop structural directories left without content (not supported yet).",
    )
    build.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the layout and table rows as JSON instead of a summary.",
    )

    return p


def resolve_log_level(args: argparse.Namespace) -> str:
    """Pick the effective log level from --debug and --log-level."""
    if args.debug:
        return "DEBUG"
    return args.log_level or "INFO"

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: '{value}'")
    if number < 1:
        raise argparse.ArgumentTypeError("sequence numbers must be equal or greater than 1")
    return number
