from __future__ import annotations

"""
Logging settings for a whimsi run.

The CLI builds one LoggingConfig from '--log-level', '--debug' and
'--log-file'; everything else is fixed.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_LEVEL_MAP: Dict[str, int] = {name: getattr(logging, name) for name in LEVEL_NAMES}
_LEVEL_MAP["WARN"] = logging.WARNING

CONSOLE_FORMAT = "%(levelname)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Attributes:
        level: Minimum severity name; unknown names fall back to INFO.
        console: Echo records to stderr.
        log_file: Rotating log file, created with its parent directories.
        max_bytes: Size at which the log file rolls over.
        backup_count: Rolled over files kept next to the log file.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None
    max_bytes: int = 2 * 1024 * 1024
    backup_count: int = 3
