from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path resolution, platform detection and the
probe-based writability test used by directory nodes. Acts as an
abstraction over the 'os' module so the structure engine can be tested
by patching a single seam.
"""

import os
import tempfile
from typing import Optional

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "fsreconcile"
UNIX_APP_DIR_NAME = ".fsreconcile"
PROBE_FILE_PREFIX = ".fsreconcile-probe-"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/fsreconcile
    - Linux/Mac: ~/.fsreconcile

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if is_windows_os():
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)

# -----------------------------------------------------------------------------
# PLATFORM AND PROBING API
# -----------------------------------------------------------------------------

def is_windows_os() -> bool:
    """Return True on platforms without a POSIX permission model."""
    return os.name == "nt"


def can_create_file_in(directory: str) -> bool:
    """
    Check whether a file can actually be created inside a directory.

    Creates and immediately removes a hidden probe file, so ACLs, read-only
    mounts and root overrides apply exactly as they would to a repair.

    Args:
        directory: Absolute path of an existing directory.

    Returns:
        bool: True if the probe file was created.
    """
    try:
        with tempfile.NamedTemporaryFile(dir=directory, prefix=PROBE_FILE_PREFIX):
            pass
    except OSError:
        return False
    return True
