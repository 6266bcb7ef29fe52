from __future__ import annotations

"""
Domain Error Taxonomy.

Every failure the file store can report is a subclass of CVFSError, so the
command shell can render them uniformly while callers still match on the
specific category they care about.
"""


class CVFSError(Exception):
    """Base class for all recoverable file store failures."""


# -----------------------------------------------------------------------------
# VALIDATION
# -----------------------------------------------------------------------------

class ValidationError(CVFSError):
    """Malformed input: bad name, disallowed type or malformed criterion."""


class InvalidNameError(ValidationError):
    """A node or criterion name does not match its naming rule."""

    def __init__(self, name: str, kind: str = "file") -> None:
        super().__init__(f"Invalid {kind} name: '{name}'.")
        self.name = name
        self.kind = kind


class DisallowedTypeError(ValidationError):
    """A document type outside the allowed vocabulary."""

    def __init__(self, doc_type: str) -> None:
        super().__init__(f"Document type not allowed: '{doc_type}'.")
        self.doc_type = doc_type


class CriterionError(ValidationError):
    """A criterion could not be constructed from the given parts."""


# -----------------------------------------------------------------------------
# STRUCTURE
# -----------------------------------------------------------------------------

class DuplicateError(CVFSError):
    """Name collision among siblings or registry keys."""

    def __init__(self, name: str, where: str = "directory") -> None:
        super().__init__(f"'{name}' already exists in this {where}.")
        self.name = name


class NotFoundError(CVFSError):
    """A file, directory or criterion does not exist."""

    def __init__(self, name: str, kind: str = "File") -> None:
        super().__init__(f"{kind} not found: '{name}'.")
        self.name = name


class NotDirectoryError(CVFSError):
    """The cursor was asked to move into something that is not a directory."""

    def __init__(self, name: str) -> None:
        super().__init__(f"'{name}' is not a directory.")
        self.name = name


class AtRootError(CVFSError):
    """Parent navigation requested while the cursor is at the root."""

    def __init__(self) -> None:
        super().__init__("Already at the root directory.")


class CapacityExceededError(CVFSError):
    """A structural change would push the disk past its capacity."""

    def __init__(self, required: int, capacity: int) -> None:
        super().__init__(
            f"Disk space exceeded: {required} required, capacity is {capacity}."
        )
        self.required = required
        self.capacity = capacity


# -----------------------------------------------------------------------------
# SESSION
# -----------------------------------------------------------------------------

class EmptyHistoryError(CVFSError):
    """Undo or redo requested with an empty stack."""

    def __init__(self, action: str) -> None:
        super().__init__(f"Nothing to {action}.")
        self.action = action


class NoStoreError(CVFSError):
    """An operation needs a virtual disk but none has been created or loaded."""

    def __init__(self) -> None:
        super().__init__("No virtual disk loaded.")


class SnapshotError(CVFSError):
    """A snapshot could not be written, read or decoded."""
