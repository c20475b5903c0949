from __future__ import annotations

"""
Handler factories for the whimsi logging core.

Handlers installed here carry a tag attribute so reconfiguration and
shutdown only ever remove whimsi's own handlers, leaving those of test
harnesses or embedding applications in place.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from whimsi.infra.logging.config import CONSOLE_FORMAT, FILE_DATE_FORMAT, FILE_FORMAT

_HANDLER_TAG_ATTR: str = "_whimsi_handler"


def _tag_handler(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG_ATTR, True)
    return handler


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def _create_console_handler(level_int: int) -> logging.Handler:
    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(level_int)
    sh.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return _tag_handler(sh)


def _create_rotating_file_handler(
        log_file: str,
        level_int: int,
        max_bytes: int,
        backup_count: int,
) -> Optional[RotatingFileHandler]:
    """
    Open the rotating log file, or warn on stderr and return None.

    Scanned paths may hold undecodable bytes; they are written
    backslash-escaped instead of failing the record.
    """
    try:
        parent = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(parent, exist_ok=True)
        fh = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
            errors="backslashreplace",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: Cannot open log file '{log_file}': {e}\n")
        return None

    fh.setLevel(level_int)
    fh.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
    return _tag_handler(fh)
