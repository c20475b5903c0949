from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, path preflight,
configuration loading, layout assembly, table projection and result
rendering. Domain failures are turned into exit codes here and nowhere else.
"""

import json
import sys
from typing import Any, Dict, List, Optional

from whimsi.core.layout.assembler import assemble_layout, summarize_layout
from whimsi.core.pipeline.stages.validator import check_config, validate_paths
from whimsi.core.tables import build_tables, table_columns
from whimsi.domain.config import load_config
from whimsi.domain.errors import WhimsiError
from whimsi.domain.layout_models import Layout
from whimsi.infra.logging import LoggingConfig, configure_logging, get_logger
from whimsi.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 build failure, 2 invalid input).
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    logging_conf = LoggingConfig(
        level=cli_args.resolve_log_level(args),
        console=True,
        log_file=args.log_file,
    )
    configure_logging(logging_conf)

    if args.command == "build":
        return run_build(args)

    parser.error(f"Unknown command {args.command}")
    return EXIT_USAGE


def run_build(args: Any) -> int:
    """
    Run the 'build' subcommand.

    Args:
        args: Parsed 'build' arguments.

    Returns:
        int: Process exit code.
    """
    logger.info(f"Building MSI layout from {args.input_directory}")

    # 1. Preflight and configuration
    try:
        validate_paths(args.config_path, args.input_directory, args.output_path)
        config = load_config(args.config_path)
        check_config(config, allow_no_files=bool(args.no_files))
    except WhimsiError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE

    # 2. Assembly and projection
    try:
        layout = assemble_layout(
            config,
            args.input_directory,
            sequence_start=args.sequence_start,
            prune_empty=bool(args.prune_empty),
        )
        tables = build_tables(layout)
    except KeyboardInterrupt:
        logger.warning("Build interrupted by user")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except WhimsiError as e:
        logger.error(f"Failed while scanning file system: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    document = _build_document(layout, tables)

    # 3. Serialization, complete before anything touches the output file
    try:
        payload = json.dumps(document, ensure_ascii=False, indent=2)
        encoded = payload.encode("utf-8")
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to serialize layout: {e}")
        print(f"ERROR: Failed to serialize layout: {e}", file=sys.stderr)
        return EXIT_FAILURE

    # 4. Persistence
    if args.output_path:
        try:
            with open(args.output_path, "wb") as f:
                f.write(encoded)
        except OSError as e:
            logger.error(f"Failed to write layout to location {args.output_path}")
            print(f"ERROR: Failed to write {args.output_path}: {e}", file=sys.stderr)
            return EXIT_FAILURE
        logger.info(f"Wrote layout to {args.output_path}")

    # 5. Rendering
    if args.json_output:
        print(payload)
    else:
        _print_human_summary(document["summary"], args.output_path)

    return EXIT_OK

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _build_document(layout: Layout, tables: Dict[str, List[tuple]]) -> Dict[str, Any]:
    return {
        "summary": summarize_layout(layout),
        "layout": layout.to_dict(),
        "columns": table_columns(),
        "tables": {name: [list(row) for row in rows] for name, rows in tables.items()},
    }


def _print_human_summary(summary: Dict[str, Any], output_path: Optional[str]) -> None:
    print("Layout assembled successfully.")
    print(f"Directories: {summary['directories']} ({summary['structural_directories']} structural)")
    print(f"Files: {summary['files']}")
    print(f"Total size: {summary['total_size']:,} bytes")
    if summary["files"]:
        print(f"Sequence: {summary['first_sequence']}..{summary['last_sequence']}")
    if output_path:
        print(f"Output: {output_path}")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
