from __future__ import annotations

"""
Tree Engine.

Owns one virtual disk: its capacity, its root directory and the cursor (the
active directory). Every structural change goes through this class, which
enforces sibling name uniqueness and the capacity bound.

Capacity policy: a structural change is applied, the root size is measured,
and if the bound is violated the change is rolled back before
CapacityExceededError is raised. A failed operation therefore never leaves
the tree mutated.
"""

import logging
from typing import Iterator, Optional, Tuple

from cvfs.domain.constants import PARENT_TOKEN, ROOT_DIRECTORY_NAME, is_valid_name
from cvfs.domain.errors import (
    AtRootError,
    CapacityExceededError,
    DuplicateError,
    InvalidNameError,
    NotDirectoryError,
    NotFoundError,
    ValidationError,
)
from cvfs.domain.listing import Listing, build_listing
from cvfs.domain.nodes import Directory, Document, Node

logger = logging.getLogger(__name__)


def size(node: Node) -> int:
    """Size of `node` computed from the live tree (never cached)."""
    return node.size


class Store:
    """
    A capacity-bounded tree of directories and documents with a cursor.

    Attributes:
        capacity: Maximum allowed size of the root directory.
        root: The root directory, owned by the store.
        cursor: The currently active directory.
    """

    def __init__(self, capacity: int, root: Optional[Directory] = None) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0:
            raise ValidationError("Disk size should be a non-negative integer.")
        self.capacity = capacity
        self.root = root if root is not None else Directory(ROOT_DIRECTORY_NAME)
        self.cursor: Directory = self.root

    # -------------------------------------------------------------------------
    # Accounting
    # -------------------------------------------------------------------------

    @property
    def used(self) -> int:
        return self.root.size

    @property
    def free(self) -> int:
        return self.capacity - self.used

    def check_capacity(self) -> None:
        """
        Raises:
            CapacityExceededError: If the root size exceeds the capacity.
        """
        used = self.used
        if used > self.capacity:
            raise CapacityExceededError(used, self.capacity)

    # -------------------------------------------------------------------------
    # Low-level structural primitives
    # -------------------------------------------------------------------------

    def attach(self, parent: Directory, node: Node, index: Optional[int] = None) -> int:
        """
        Insert `node` under `parent`, rolling back if capacity is exceeded.

        Returns:
            int: The position of `node` in `parent`.
        """
        position = parent.insert(node, index)
        try:
            self.check_capacity()
        except CapacityExceededError:
            parent.detach(node)
            logger.debug(f"Rolled back attach of '{node.name}': capacity {self.capacity} exceeded.")
            raise
        return position

    def detach(self, parent: Directory, node: Node) -> int:
        """Remove `node` from `parent` by identity and return its old position."""
        return parent.detach(node)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create_document(self, parent: Directory, name: str, doc_type: str, content: str) -> Document:
        """
        Append a new document to `parent`.

        Raises:
            InvalidNameError, DisallowedTypeError, DuplicateError,
            CapacityExceededError.
        """
        doc = Document(name, doc_type, content)
        self.attach(parent, doc)
        return doc

    def create_directory(self, parent: Directory, name: str) -> Directory:
        """
        Append a new empty directory to `parent`.

        Raises:
            InvalidNameError, DuplicateError, CapacityExceededError.
        """
        directory = Directory(name)
        self.attach(parent, directory)
        return directory

    def child(self, parent: Directory, name: str) -> Node:
        """
        Raises:
            NotFoundError: If `parent` has no child called `name`.
        """
        node = parent.get_child(name)
        if node is None:
            raise NotFoundError(name)
        return node

    def remove(self, parent: Directory, name: str) -> Tuple[Node, int]:
        """
        Detach the child called `name`.

        Returns:
            (node, index): The detached node and the position it occupied.
        """
        node = self.child(parent, name)
        return node, parent.detach(node)

    def rename(self, node: Node, new_name: str) -> None:
        """
        Rename `node` in place.

        The new name is checked against the node's current siblings, the node
        itself included, so renaming to the current name is a duplicate.
        """
        if not is_valid_name(new_name):
            raise InvalidNameError(str(new_name))
        parent = node.parent
        if parent is not None and parent.has_child_named(new_name):
            raise DuplicateError(new_name)
        node.rename(new_name)

    # -------------------------------------------------------------------------
    # Cursor
    # -------------------------------------------------------------------------

    def move_cursor(self, target: str) -> Directory:
        """
        Move the cursor to a child directory or, with '..', to the parent.

        Returns:
            Directory: The new cursor.
        """
        if target == PARENT_TOKEN:
            parent = self.cursor.parent
            if parent is None:
                raise AtRootError()
            self.cursor = parent
            return parent

        node = self.child(self.cursor, target)
        if not isinstance(node, Directory):
            raise NotDirectoryError(target)
        self.cursor = node
        return node

    def set_cursor(self, directory: Directory) -> None:
        self.cursor = directory

    def path_of(self, directory: Optional[Directory] = None) -> str:
        """Slash-joined path from the root to `directory` (default: cursor)."""
        current: Optional[Directory] = directory if directory is not None else self.cursor
        parts = []
        while current is not None:
            parts.append(current.name)
            current = current.parent
        return "/" + "/".join(reversed(parts))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def walk(self, directory: Directory, depth: int = 0) -> Iterator[Tuple[int, Node]]:
        """
        Depth-first, parent-before-children traversal below `directory`.

        Yields:
            (depth, node) pairs; direct children have depth 0.
        """
        for node in list(directory.children):
            yield depth, node
            if isinstance(node, Directory):
                yield from self.walk(node, depth + 1)

    def list_children(self, directory: Optional[Directory] = None, recursive: bool = False) -> Listing:
        """Ordered entries of `directory` (default: cursor)."""
        target = directory if directory is not None else self.cursor
        if recursive:
            return build_listing(self.walk(target))
        return build_listing((0, node) for node in target.children)
