from __future__ import annotations

"""
Criterion (Predicate) Engine.

Immutable boolean predicates over file store nodes. A criterion is one of
four variants: an attribute comparison, the built-in document test, a
negation, or a binary AND/OR combination. Criteria are validated when they
are built and never change afterwards, so composite criteria share their
operands by reference.
"""

import operator
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict

from cvfs.domain.constants import (
    ATTR_NAME,
    ATTR_SIZE,
    ATTR_TYPE,
    IS_DOCUMENT_NAME,
    OP_CONTAINS,
    OP_EQUALS,
    SIZE_OPERATORS,
)
from cvfs.domain.errors import CriterionError
from cvfs.domain.nodes import Document, Node

_SIZE_COMPARATORS: Dict[str, Callable[[int, int], bool]] = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
    "==": operator.eq,
    "!=": operator.ne,
}


class LogicOp(str, Enum):
    """Binary connectives. Values are the shell spelling."""

    AND = "&&"
    OR = "||"

    @classmethod
    def parse(cls, token: str) -> LogicOp:
        """
        Accept either the shell spelling (&&, ||) or the word (AND, OR).

        Raises:
            CriterionError: For any other token.
        """
        if isinstance(token, LogicOp):
            return token
        raw = str(token).strip()
        for member in cls:
            if raw == member.value or raw.upper() == member.name:
                return member
        raise CriterionError(f"Invalid logical operator: '{token}'.")


# -----------------------------------------------------------------------------
# CRITERION VARIANTS
# -----------------------------------------------------------------------------

class Criterion(ABC):
    """Abstract predicate over a node."""

    @abstractmethod
    def evaluate(self, node: Node) -> bool:
        """Return True when `node` satisfies this criterion."""

    @abstractmethod
    def describe(self) -> str:
        """Deterministic textual rendering of the criterion structure."""

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class AttributeComparator(Criterion):
    """
    Compare one node attribute against a literal value.

    Attributes:
        attr: 'name', 'type' or 'size'.
        op: 'contains' for name, 'equals' for type, a comparison for size.
        value: The literal operand, kept as written.
    """
    attr: str
    op: str
    value: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", str(self.value))
        if self.attr == ATTR_NAME:
            if self.op != OP_CONTAINS:
                raise CriterionError("Invalid operator for name attribute.")
        elif self.attr == ATTR_TYPE:
            if self.op != OP_EQUALS:
                raise CriterionError("Invalid operator for type attribute.")
        elif self.attr == ATTR_SIZE:
            if self.op not in SIZE_OPERATORS:
                raise CriterionError("Invalid operator for size attribute.")
            try:
                int(self.value)
            except (TypeError, ValueError):
                raise CriterionError("Value must be an integer.") from None
        else:
            raise CriterionError(f"Invalid attribute name: '{self.attr}'.")

    def evaluate(self, node: Node) -> bool:
        if self.attr == ATTR_NAME:
            return self.value in node.name
        if self.attr == ATTR_TYPE:
            return isinstance(node, Document) and node.doc_type == self.value
        return _SIZE_COMPARATORS[self.op](node.size, int(self.value))

    def describe(self) -> str:
        return f"attrName: {self.attr}, op: {self.op}, val: {self.value}"


@dataclass(frozen=True)
class IsDocument(Criterion):
    """True exactly for documents."""

    def evaluate(self, node: Node) -> bool:
        return isinstance(node, Document)

    def describe(self) -> str:
        return IS_DOCUMENT_NAME


@dataclass(frozen=True)
class Negation(Criterion):
    """Logical NOT of an existing criterion."""
    inner: Criterion

    def evaluate(self, node: Node) -> bool:
        return not self.inner.evaluate(node)

    def describe(self) -> str:
        return f"!( {self.inner.describe()} )"


@dataclass(frozen=True)
class Binary(Criterion):
    """
    Short-circuiting conjunction or disjunction of two criteria.

    Attributes:
        left: Evaluated first.
        op: LogicOp.AND or LogicOp.OR (shell tokens are accepted).
        right: Evaluated only when `left` does not decide the result.
    """
    left: Criterion
    op: LogicOp
    right: Criterion

    def __post_init__(self) -> None:
        object.__setattr__(self, "op", LogicOp.parse(self.op))

    def evaluate(self, node: Node) -> bool:
        if self.op is LogicOp.AND:
            return self.left.evaluate(node) and self.right.evaluate(node)
        return self.left.evaluate(node) or self.right.evaluate(node)

    def describe(self) -> str:
        return f"( {self.left.describe()} ) {self.op.value} ( {self.right.describe()} )"


# -----------------------------------------------------------------------------
# FUNCTIONAL API
# -----------------------------------------------------------------------------

def evaluate(criterion: Criterion, node: Node) -> bool:
    """Evaluate `criterion` against `node`."""
    return criterion.evaluate(node)
