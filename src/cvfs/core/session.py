from __future__ import annotations

"""
Session Service.

The explicit context every file store operation runs against: the active
disk (if any), the criterion registry and the command log. Mutating
operations apply their change through the tree engine or the registry and
then commit a Command; queries never touch the log. Creating or loading a
disk replaces disk, registry and both history stacks together.
"""

import logging
from typing import List, Optional, Tuple

from cvfs.core.history import (
    Command,
    CommandLog,
    CreateNodeCommand,
    CursorCommand,
    RegisterCriterionCommand,
    RemoveNodeCommand,
    RenameCommand,
)
from cvfs.core.registry import CriterionRegistry
from cvfs.core.store import Store
from cvfs.domain.criteria import AttributeComparator, Binary, Criterion, Negation
from cvfs.domain.errors import NoStoreError
from cvfs.domain.listing import Listing, build_listing
from cvfs.domain.nodes import Directory, Document, Node
from cvfs.infra import snapshot as snapshot_io

logger = logging.getLogger(__name__)


class Session:
    """
    One logical user session over a virtual disk.

    Attributes:
        registry: Named criteria available for search.
        history: Undo/redo log.
    """

    def __init__(self) -> None:
        self._store: Optional[Store] = None
        self.registry = CriterionRegistry()
        self.history = CommandLog()

    # -------------------------------------------------------------------------
    # Disk lifecycle
    # -------------------------------------------------------------------------

    @property
    def has_store(self) -> bool:
        return self._store is not None

    @property
    def store(self) -> Store:
        """
        Raises:
            NoStoreError: If no disk has been created or loaded.
        """
        if self._store is None:
            raise NoStoreError()
        return self._store

    def _install(self, store: Store, registry: CriterionRegistry) -> None:
        self._store = store
        self.registry = registry
        self.history.clear()

    def new_store(self, capacity: int) -> Store:
        """Replace the current disk with an empty one of the given capacity."""
        store = Store(capacity)
        self._install(store, CriterionRegistry())
        logger.info(f"New virtual disk created with capacity {capacity}")
        return store

    def snapshot(self) -> bytes:
        return snapshot_io.snapshot(self.store, self.registry)

    def restore(self, blob: bytes) -> Store:
        """Replace disk and registry with the decoded snapshot; history is emptied."""
        store, registry = snapshot_io.restore(blob)
        self._install(store, registry)
        return store

    def save(self, path: str) -> str:
        return snapshot_io.save_snapshot(path, self.store, self.registry)

    def load(self, path: str) -> Store:
        store, registry = snapshot_io.load_snapshot(path)
        self._install(store, registry)
        return store

    # -------------------------------------------------------------------------
    # Tree mutations (cursor-relative)
    # -------------------------------------------------------------------------

    @property
    def cursor(self) -> Directory:
        return self.store.cursor

    def cwd_path(self) -> str:
        return self.store.path_of()

    def create_document(self, name: str, doc_type: str, content: str) -> Document:
        store = self.store
        parent = store.cursor
        doc = store.create_document(parent, name, doc_type, content)
        self.history.commit(CreateNodeCommand(parent, doc, parent.index_of(doc)))
        return doc

    def create_directory(self, name: str) -> Directory:
        store = self.store
        parent = store.cursor
        directory = store.create_directory(parent, name)
        self.history.commit(CreateNodeCommand(parent, directory, parent.index_of(directory)))
        return directory

    def remove(self, name: str) -> Node:
        store = self.store
        parent = store.cursor
        node, index = store.remove(parent, name)
        self.history.commit(RemoveNodeCommand(parent, node, index))
        return node

    def rename(self, old_name: str, new_name: str) -> Node:
        store = self.store
        node = store.child(store.cursor, old_name)
        store.rename(node, new_name)
        self.history.commit(RenameCommand(node, old_name, new_name))
        return node

    def move_cursor(self, target: str) -> Directory:
        store = self.store
        previous = store.cursor
        current = store.move_cursor(target)
        self.history.commit(CursorCommand(previous, current))
        return current

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_children(self, recursive: bool = False) -> Listing:
        return self.store.list_children(recursive=recursive)

    def search(self, criterion_name: str, recursive: bool = False) -> Listing:
        """
        Nodes under the cursor matching a registered criterion.

        Recursive mode visits the whole subtree depth-first, each directory
        before its children, siblings in insertion order.
        """
        criterion = self.registry.resolve(criterion_name)
        store = self.store
        if recursive:
            candidates = store.walk(store.cursor)
        else:
            candidates = ((0, node) for node in store.cursor.children)
        return build_listing((depth, node) for depth, node in candidates if criterion.evaluate(node))

    # -------------------------------------------------------------------------
    # Criteria
    # -------------------------------------------------------------------------

    def _define(self, name: str, criterion: Criterion) -> Criterion:
        self.registry.register(name, criterion)
        self.history.commit(RegisterCriterionCommand(name, criterion))
        return criterion

    def define_comparator(self, name: str, attr: str, op: str, value: str) -> Criterion:
        self.registry.ensure_available(name)
        return self._define(name, AttributeComparator(attr, op, value))

    def define_negation(self, name: str, of: str) -> Criterion:
        self.registry.ensure_available(name)
        return self._define(name, Negation(self.registry.resolve(of)))

    def define_binary(self, name: str, left: str, op: str, right: str) -> Criterion:
        self.registry.ensure_available(name)
        left_criterion = self.registry.resolve(left)
        right_criterion = self.registry.resolve(right)
        return self._define(name, Binary(left_criterion, op, right_criterion))

    def list_criteria(self) -> List[Tuple[str, str]]:
        return self.registry.list()

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def undo(self) -> Command:
        return self.history.undo(self)

    def redo(self) -> Command:
        return self.history.redo(self)
