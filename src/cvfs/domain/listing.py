from __future__ import annotations

"""
Query Result Models.

Immutable value objects returned by the non-mutating operations (listing and
searching) so that the shell, tests and any other caller consume the same
shape regardless of how it is later rendered.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from cvfs.domain.nodes import Document, Node


@dataclass(frozen=True)
class NodeEntry:
    """
    One row of a listing.

    Attributes:
        name: Node name at the time of the query.
        kind: 'document' or 'directory'.
        size: Computed size at the time of the query.
        doc_type: Document type, None for directories.
        depth: Nesting level relative to the listed directory (0 = direct child).
    """
    name: str
    kind: str
    size: int
    doc_type: Optional[str] = None
    depth: int = 0

    @classmethod
    def from_node(cls, node: Node, depth: int = 0) -> NodeEntry:
        doc_type = node.doc_type if isinstance(node, Document) else None
        return cls(name=node.name, kind=node.kind, size=node.size, doc_type=doc_type, depth=depth)

    def as_triple(self) -> Tuple[str, str, int]:
        """The (name, kind, size) view of this entry."""
        return self.name, self.kind, self.size


@dataclass(frozen=True)
class Listing:
    """
    Ordered listing with aggregate counters.

    `total_size` is the sum of the listed entries' sizes. In recursive
    listings a nested node counts both on its own row and inside its
    ancestors' sizes.
    """
    entries: List[NodeEntry] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return len(self.entries)

    @property
    def total_size(self) -> int:
        return sum(e.size for e in self.entries)

    def names(self) -> List[str]:
        return [e.name for e in self.entries]

    def triples(self) -> List[Tuple[str, str, int]]:
        return [e.as_triple() for e in self.entries]


def build_listing(items: Iterable[Tuple[int, Node]]) -> Listing:
    """Create a Listing from (depth, node) pairs."""
    return Listing(entries=[NodeEntry.from_node(node, depth) for depth, node in items])
