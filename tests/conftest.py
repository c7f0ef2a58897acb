from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for installation base paths and structure descriptions.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """
    Return an existing, empty installation base path.

    Returns:
        Path: Absolute path of a fresh temporary directory.
    """
    root = tmp_path / "site"
    root.mkdir()
    return root


@pytest.fixture
def sample_description() -> Dict[str, Any]:
    """
    Return a small structure description with explicit permissions.

    Layout:
    /var
      /cache
      README.txt  (content 'hello')
    /config
    """
    return {
        "children": [
            {
                "name": "var",
                "type": "directory",
                "targetPermission": "0775",
                "children": [
                    {"name": "cache", "type": "directory", "targetPermission": "0775"},
                    {
                        "name": "README.txt",
                        "type": "file",
                        "targetPermission": "0644",
                        "targetContent": "hello",
                    },
                ],
            },
            {"name": "config", "type": "directory", "targetPermission": "0775"},
        ],
    }
