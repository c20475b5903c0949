from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for configuration documents and source trees.
"""

import os
import sys
from pathlib import Path
from typing import Callable, Optional

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from whimsi.domain.config import MsiConfig, parse_config  # noqa: E402

# -----------------------------------------------------------------------------
# Shared Data
# -----------------------------------------------------------------------------
BASE_CONFIG = """
[product_info]
product_name = "Test Application"
product_version = "22.1.15"
manufacturer = "Myself"
product_language = 1033
product_code = "*"

[summary_info]
page_count = 200
revision_number = "*"
template = "x64;1033"
author = "Test Name"
"""


def make_config_text(
        program_files: Optional[str] = None,
        program_files_32: Optional[str] = None,
        desktop: Optional[str] = None,
        explicit: bool = False,
) -> str:
    """Render a TOML config with the requested [default_files] entries."""
    text = BASE_CONFIG
    entries = [
        ("program_files", program_files),
        ("program_files_32", program_files_32),
        ("desktop", desktop),
    ]
    declared = [(k, v) for k, v in entries if v is not None]
    if declared:
        text += "\n[default_files]\n"
        for key, value in declared:
            text += f"{key} = '{value}'\n"
    if explicit:
        text += "\n[explicit_files]\n"
    return text


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def config_factory() -> Callable[..., MsiConfig]:
    """Return a factory building parsed configs from [default_files] entries."""

    def _factory(**kwargs) -> MsiConfig:
        return parse_config(make_config_text(**kwargs))

    return _factory


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """
    Create a small input directory.

    Structure:
    /input
      /app
        a.txt            (10 bytes)
        /sub
          b.txt          (5 bytes)
      /desk
        shortcut.txt     (3 bytes)
    """
    input_dir = tmp_path / "input"
    app = input_dir / "app"
    sub = app / "sub"
    desk = input_dir / "desk"
    sub.mkdir(parents=True)
    desk.mkdir()

    (app / "a.txt").write_bytes(b"0123456789")
    (sub / "b.txt").write_bytes(b"abcde")
    (desk / "shortcut.txt").write_bytes(b"xyz")
    return input_dir


@pytest.fixture
def base_config_text() -> str:
    """Return the TOML text of a config without file locations."""
    return BASE_CONFIG


@pytest.fixture
def config_text_factory() -> Callable[..., str]:
    """Return the TOML renderer behind config_factory."""
    return make_config_text
