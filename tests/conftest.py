from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Isolation of the user data directory (config, logs) per test.
3. Shared fixtures for sessions and sample trees used across unit tests.
"""

import io
import os
import sys
from pathlib import Path

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from cvfs.core.session import Session  # noqa: E402
from cvfs.interface.shell.dispatcher import Shell  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the user data directory at a per-test temp folder."""
    data_dir = tmp_path / "cvfs_home"
    monkeypatch.setenv("CVFS_HOME", str(data_dir))
    return data_dir


@pytest.fixture
def session() -> Session:
    """A session with an empty 1000-byte disk."""
    s = Session()
    s.new_store(1000)
    return s


@pytest.fixture
def sample_session(session: Session) -> Session:
    """
    A small populated tree:

    root
      'a' (txt, "hello")                     size 50
      'd' (dir)
        'page' (html, "")                    size 40
        'e' (dir, empty)                     size 40
      'b' (java, "x")                        size 42
    """
    session.create_document("a", "txt", "hello")
    session.create_directory("d")
    session.move_cursor("d")
    session.create_document("page", "html", "")
    session.create_directory("e")
    session.move_cursor("..")
    session.create_document("b", "java", "x")
    return session


@pytest.fixture
def shell_io() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def shell(shell_io: io.StringIO) -> Shell:
    """A shell without a disk, writing into an in-memory buffer."""
    return Shell(Session(), out=shell_io)
