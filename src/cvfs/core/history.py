from __future__ import annotations

"""
Command Log (Undo/Redo).

Every committed mutation is reified as a Command that captures the exact
objects it touched (the node, its owning directory, its position) so it can
be inverted or replayed without re-resolving names against the current tree.
The log keeps two LIFO stacks with linear history semantics: committing a
new command discards the redo branch.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Protocol

from cvfs.core.registry import CriterionRegistry
from cvfs.core.store import Store
from cvfs.domain.criteria import Criterion
from cvfs.domain.errors import CVFSError, EmptyHistoryError
from cvfs.domain.nodes import Directory, Node

logger = logging.getLogger(__name__)


class HistoryContext(Protocol):
    """The state a command acts upon."""

    store: Store
    registry: CriterionRegistry


# -----------------------------------------------------------------------------
# COMMANDS
# -----------------------------------------------------------------------------

class Command(ABC):
    """A reversible record of one committed mutation."""

    @property
    @abstractmethod
    def label(self) -> str:
        """Short human-readable description used in logs."""

    @abstractmethod
    def undo(self, ctx: HistoryContext) -> None:
        """Apply the inverse of the mutation."""

    @abstractmethod
    def redo(self, ctx: HistoryContext) -> None:
        """Apply the mutation again."""


class CreateNodeCommand(Command):
    """Creation of a document or directory."""

    def __init__(self, parent: Directory, node: Node, index: int) -> None:
        self.parent = parent
        self.node = node
        self.index = index

    @property
    def label(self) -> str:
        return f"create {self.node.kind} '{self.node.name}'"

    def undo(self, ctx: HistoryContext) -> None:
        ctx.store.detach(self.parent, self.node)

    def redo(self, ctx: HistoryContext) -> None:
        ctx.store.attach(self.parent, self.node, self.index)


class RemoveNodeCommand(Command):
    """Deletion of a node (and its subtree) from its directory."""

    def __init__(self, parent: Directory, node: Node, index: int) -> None:
        self.parent = parent
        self.node = node
        self.index = index

    @property
    def label(self) -> str:
        return f"delete '{self.node.name}'"

    def undo(self, ctx: HistoryContext) -> None:
        ctx.store.attach(self.parent, self.node, self.index)

    def redo(self, ctx: HistoryContext) -> None:
        ctx.store.detach(self.parent, self.node)


class RenameCommand(Command):
    """In-place rename of a node."""

    def __init__(self, node: Node, old_name: str, new_name: str) -> None:
        self.node = node
        self.old_name = old_name
        self.new_name = new_name

    @property
    def label(self) -> str:
        return f"rename '{self.old_name}' -> '{self.new_name}'"

    def undo(self, ctx: HistoryContext) -> None:
        ctx.store.rename(self.node, self.old_name)

    def redo(self, ctx: HistoryContext) -> None:
        ctx.store.rename(self.node, self.new_name)


class CursorCommand(Command):
    """A change of the active directory."""

    def __init__(self, previous: Directory, target: Directory) -> None:
        self.previous = previous
        self.target = target

    @property
    def label(self) -> str:
        return f"changeDir '{self.previous.name}' -> '{self.target.name}'"

    def undo(self, ctx: HistoryContext) -> None:
        ctx.store.set_cursor(self.previous)

    def redo(self, ctx: HistoryContext) -> None:
        ctx.store.set_cursor(self.target)


class RegisterCriterionCommand(Command):
    """Registration of a named criterion."""

    def __init__(self, name: str, criterion: Criterion) -> None:
        self.name = name
        self.criterion = criterion

    @property
    def label(self) -> str:
        return f"define criterion '{self.name}'"

    def undo(self, ctx: HistoryContext) -> None:
        ctx.registry.unregister(self.name)

    def redo(self, ctx: HistoryContext) -> None:
        ctx.registry.restore_entry(self.name, self.criterion)


# -----------------------------------------------------------------------------
# LOG
# -----------------------------------------------------------------------------

class CommandLog:
    """
    Two-stack linear history.

    A command whose inverse or forward action fails is put back on the stack
    it was popped from, so the log always mirrors the tree.
    """

    def __init__(self) -> None:
        self._undo: List[Command] = []
        self._redo: List[Command] = []

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def peek_undo(self) -> Optional[Command]:
        return self._undo[-1] if self._undo else None

    def peek_redo(self) -> Optional[Command]:
        return self._redo[-1] if self._redo else None

    def commit(self, command: Command) -> None:
        """Record a freshly applied mutation and discard the redo branch."""
        self._undo.append(command)
        if self._redo:
            logger.debug(f"History: discarding {len(self._redo)} redoable command(s).")
        self._redo.clear()
        logger.debug(f"History: committed {command.label}")

    def undo(self, ctx: HistoryContext) -> Command:
        """
        Invert the most recent command.

        Raises:
            EmptyHistoryError: If there is nothing to undo.
        """
        if not self._undo:
            raise EmptyHistoryError("undo")
        command = self._undo.pop()
        try:
            command.undo(ctx)
        except CVFSError:
            self._undo.append(command)
            logger.warning(f"History: undo of {command.label} failed; log left unchanged.")
            raise
        self._redo.append(command)
        logger.debug(f"History: undid {command.label}")
        return command

    def redo(self, ctx: HistoryContext) -> Command:
        """
        Replay the most recently undone command.

        Raises:
            EmptyHistoryError: If there is nothing to redo.
        """
        if not self._redo:
            raise EmptyHistoryError("redo")
        command = self._redo.pop()
        try:
            command.redo(ctx)
        except CVFSError:
            self._redo.append(command)
            logger.warning(f"History: redo of {command.label} failed; log left unchanged.")
            raise
        self._undo.append(command)
        logger.debug(f"History: redid {command.label}")
        return command

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
