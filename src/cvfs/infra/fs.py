from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Host filesystem helpers: where CVFS keeps its configuration and logs, and
how user-supplied snapshot paths are normalized. The virtual disk itself
never touches the host filesystem except through snapshots.
"""

import os
from typing import Optional

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "CVFS"
UNIX_APP_DIR_NAME = ".cvfs"
DATA_DIR_ENV = "CVFS_HOME"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the directory for persistent application data.

    Resolution order:
    - $CVFS_HOME when set (used by tests and portable installs)
    - Windows: %LOCALAPPDATA%/CVFS
    - Linux/Mac: ~/.cvfs

    The directory is created if missing.

    Returns:
        str: Absolute path to the application data directory.
    """
    path = os.environ.get(DATA_DIR_ENV, "").strip()

    if not path and os.name == "nt":
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
    Expand ~ and environment variables and make `path` absolute.

    Args:
        path: Raw user input.
        fallback: Used when `path` is empty.
    """
    p = (path or "").strip() or fallback
    return os.path.abspath(os.path.expandvars(os.path.expanduser(p)))
