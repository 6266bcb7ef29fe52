from __future__ import annotations

"""
File Store Node Models.

Defines the two entities that make up a virtual disk tree: documents (leaves
with typed text content) and directories (ordered, uniquely named children).
Parent links are weak references so that a detached node kept alive by the
command history never keeps its former tree alive, and ownership always
flows from the root downward.
"""

import weakref
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from cvfs.domain.constants import (
    ALLOWED_DOC_TYPES,
    BASE_FILE_SIZE,
    CONTENT_CHAR_SIZE,
    is_valid_name,
)
from cvfs.domain.errors import (
    DisallowedTypeError,
    DuplicateError,
    InvalidNameError,
    NotFoundError,
)

KIND_DOCUMENT = "document"
KIND_DIRECTORY = "directory"


# -----------------------------------------------------------------------------
# BASE NODE
# -----------------------------------------------------------------------------

@dataclass(eq=False)
class Node(ABC):
    """
    Common behaviour of every entry in the tree.

    Attributes:
        name: Alphanumeric name, 1 to 10 characters, unique among siblings.
    """
    name: str

    def __post_init__(self) -> None:
        if not is_valid_name(self.name):
            raise InvalidNameError(str(self.name))
        self._parent_ref: Optional[weakref.ReferenceType[Directory]] = None

    @property
    def parent(self) -> Optional[Directory]:
        """The directory currently holding this node, if any."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def _set_parent(self, parent: Optional[Directory]) -> None:
        self._parent_ref = weakref.ref(parent) if parent is not None else None

    @property
    @abstractmethod
    def kind(self) -> str:
        """Tag identifying the node variant."""

    @property
    @abstractmethod
    def size(self) -> int:
        """Size in bytes, always computed from the live tree."""

    def rename(self, new_name: str) -> None:
        """
        Change the name in place.

        Sibling uniqueness is the caller's responsibility; only the naming
        rule is enforced here.
        """
        if not is_valid_name(new_name):
            raise InvalidNameError(str(new_name))
        self.name = new_name


# -----------------------------------------------------------------------------
# LEAF: DOCUMENT
# -----------------------------------------------------------------------------

@dataclass(eq=False)
class Document(Node):
    """
    A typed text document.

    Attributes:
        doc_type: One of txt, java, html, css.
        content: Text body. Each character costs two bytes.
    """
    doc_type: str
    content: str = ""

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.doc_type not in ALLOWED_DOC_TYPES:
            raise DisallowedTypeError(str(self.doc_type))

    @property
    def kind(self) -> str:
        return KIND_DOCUMENT

    @property
    def size(self) -> int:
        return BASE_FILE_SIZE + CONTENT_CHAR_SIZE * len(self.content)


# -----------------------------------------------------------------------------
# CONTAINER: DIRECTORY
# -----------------------------------------------------------------------------

@dataclass(eq=False)
class Directory(Node):
    """
    An ordered container of uniquely named nodes.

    Attributes:
        children: Child nodes in insertion order.
    """
    children: List[Node] = field(default_factory=list)

    def __post_init__(self) -> None:
        super().__post_init__()
        initial = list(self.children)
        self.children = []
        for child in initial:
            self.insert(child)

    @property
    def kind(self) -> str:
        return KIND_DIRECTORY

    @property
    def size(self) -> int:
        return BASE_FILE_SIZE + sum(child.size for child in self.children)

    def get_child(self, name: str) -> Optional[Node]:
        """Return the child called `name`, or None."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def has_child_named(self, name: str) -> bool:
        return self.get_child(name) is not None

    def index_of(self, node: Node) -> int:
        """
        Locate a child by identity.

        Raises:
            NotFoundError: If `node` is not a child of this directory.
        """
        for i, child in enumerate(self.children):
            if child is node:
                return i
        raise NotFoundError(node.name)

    def insert(self, node: Node, index: Optional[int] = None) -> int:
        """
        Attach `node` as a child, appending unless `index` is given.

        Args:
            node: Node to attach. Any previous parent link is replaced.
            index: Position in the child list; clamped to the valid range.

        Returns:
            int: The position the node now occupies.

        Raises:
            DuplicateError: If a sibling already uses the node's name.
        """
        if self.has_child_named(node.name):
            raise DuplicateError(node.name)
        if index is None or index >= len(self.children):
            index = len(self.children)
        elif index < 0:
            index = 0
        self.children.insert(index, node)
        node._set_parent(self)
        return index

    def detach(self, node: Node) -> int:
        """
        Remove `node` (by identity) from the child list.

        Returns:
            int: The position the node occupied before removal.
        """
        index = self.index_of(node)
        del self.children[index]
        node._set_parent(None)
        return index
