from __future__ import annotations

"""
Domain Constants.

Centralizes the sizing rules, naming patterns and vocabularies shared by
the node model, the criterion engine and the command shell.
"""

import re
from typing import FrozenSet, Pattern, Tuple

# -----------------------------------------------------------------------------
# SIZING
# -----------------------------------------------------------------------------
BASE_FILE_SIZE: int = 40
CONTENT_CHAR_SIZE: int = 2

# -----------------------------------------------------------------------------
# NAMING
# -----------------------------------------------------------------------------
MAX_FILE_NAME_LENGTH: int = 10
NAME_PATTERN: Pattern[str] = re.compile(r"^[A-Za-z0-9]{1,10}$")
CRI_NAME_PATTERN: Pattern[str] = re.compile(r"^[A-Za-z]{2}$")

ROOT_DIRECTORY_NAME = "root"
PARENT_TOKEN = ".."

# -----------------------------------------------------------------------------
# VOCABULARIES
# -----------------------------------------------------------------------------
ALLOWED_DOC_TYPES: FrozenSet[str] = frozenset({"txt", "java", "html", "css"})

ATTR_NAME = "name"
ATTR_TYPE = "type"
ATTR_SIZE = "size"

OP_CONTAINS = "contains"
OP_EQUALS = "equals"
SIZE_OPERATORS: Tuple[str, ...] = (">", "<", ">=", "<=", "==", "!=")

IS_DOCUMENT_NAME = "IsDocument"

# Snapshot format identity
SNAPSHOT_FORMAT = "cvfs-snapshot"
SNAPSHOT_VERSION = 1


def is_valid_name(name: object) -> bool:
    """Check a file or directory name against the naming rule."""
    return isinstance(name, str) and NAME_PATTERN.fullmatch(name) is not None


def is_valid_criterion_name(name: object) -> bool:
    """Check a user-defined criterion name against the two-letter rule."""
    return isinstance(name, str) and CRI_NAME_PATTERN.fullmatch(name) is not None
