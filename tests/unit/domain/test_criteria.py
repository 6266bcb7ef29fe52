from __future__ import annotations

"""
Unit tests for the Criterion Engine.

Verifies:
1. Attribute comparisons on name, type and size.
2. Construction-time validation of attributes, operators and values.
3. Negation and short-circuit binary composition.
4. Deterministic textual descriptions.
"""

from typing import List

import pytest

from cvfs.domain.criteria import (
    AttributeComparator,
    Binary,
    Criterion,
    IsDocument,
    LogicOp,
    Negation,
    evaluate,
)
from cvfs.domain.errors import CriterionError, ValidationError
from cvfs.domain.nodes import Directory, Document, Node


class _Exploding(Criterion):
    """Fails the test if evaluated."""

    def evaluate(self, node: Node) -> bool:
        raise AssertionError("right operand must not be evaluated")

    def describe(self) -> str:
        return "boom"


@pytest.fixture
def nodes() -> List[Node]:
    return [
        Document("empty", "txt", ""),
        Document("full", "txt", "abc"),
        Document("style", "css", "x" * 10),
        Directory("dir"),
        Directory("fulldir", [Document("k", "html", "zz")]),
    ]


# -----------------------------------------------------------------------------
# Attribute comparisons
# -----------------------------------------------------------------------------

def test_name_contains_is_case_sensitive() -> None:
    c = AttributeComparator("name", "contains", "ul")
    assert c.evaluate(Document("full", "txt"))
    assert c.evaluate(Directory("fulldir"))
    assert not c.evaluate(Document("FULL", "txt"))


def test_type_equals_never_matches_directories() -> None:
    c = AttributeComparator("type", "equals", "txt")
    assert c.evaluate(Document("a", "txt"))
    assert not c.evaluate(Document("a", "css"))
    assert not c.evaluate(Directory("txt"))


@pytest.mark.parametrize("op, value, expected", [
    (">", "40", True),
    (">", "42", False),
    ("<", "43", True),
    (">=", "42", True),
    ("<=", "41", False),
    ("==", "42", True),
    ("!=", "42", False),
])
def test_size_operators(op: str, value: str, expected: bool) -> None:
    doc = Document("a", "txt", "x")  # size 42
    assert AttributeComparator("size", op, value).evaluate(doc) is expected


def test_size_applies_to_directories() -> None:
    d = Directory("d", [Document("a", "txt", "")])
    assert AttributeComparator("size", "==", "80").evaluate(d)


def test_value_kept_as_text() -> None:
    assert AttributeComparator("size", ">", 10).value == "10"


@pytest.mark.parametrize("attr, op, value", [
    ("colour", "equals", "red"),
    ("name", "equals", "a"),
    ("type", "contains", "txt"),
    ("size", "=", "10"),
    ("size", ">", "ten"),
    ("size", ">", "1.5"),
])
def test_invalid_comparators(attr: str, op: str, value: str) -> None:
    with pytest.raises(CriterionError):
        AttributeComparator(attr, op, value)


def test_criterion_error_is_validation_error() -> None:
    assert issubclass(CriterionError, ValidationError)


# -----------------------------------------------------------------------------
# Composition
# -----------------------------------------------------------------------------

def test_is_document(nodes: List[Node]) -> None:
    assert [IsDocument().evaluate(n) for n in nodes] == [True, True, True, False, False]


def test_negation(nodes: List[Node]) -> None:
    c = Negation(IsDocument())
    assert [evaluate(c, n) for n in nodes] == [False, False, False, True, True]


def test_document_with_content_combination(nodes: List[Node]) -> None:
    c = Binary(IsDocument(), LogicOp.AND, AttributeComparator("size", ">", "40"))
    matched = [n.name for n in nodes if c.evaluate(n)]
    assert matched == ["full", "style"]


def test_or_combination(nodes: List[Node]) -> None:
    c = Binary(AttributeComparator("type", "equals", "css"), "||", Negation(IsDocument()))
    assert [n.name for n in nodes if c.evaluate(n)] == ["style", "dir", "fulldir"]


def test_and_short_circuits() -> None:
    c = Binary(Negation(IsDocument()), "&&", _Exploding())
    assert c.evaluate(Document("a", "txt")) is False


def test_or_short_circuits() -> None:
    c = Binary(IsDocument(), "||", _Exploding())
    assert c.evaluate(Document("a", "txt")) is True


@pytest.mark.parametrize("token, expected", [
    ("&&", LogicOp.AND), ("||", LogicOp.OR), ("AND", LogicOp.AND), ("or", LogicOp.OR),
])
def test_logic_op_parse(token: str, expected: LogicOp) -> None:
    assert LogicOp.parse(token) is expected
    assert Binary(IsDocument(), token, IsDocument()).op is expected


@pytest.mark.parametrize("token", ["&", "XOR", "", "|"])
def test_logic_op_rejects_unknown(token: str) -> None:
    with pytest.raises(CriterionError):
        Binary(IsDocument(), token, IsDocument())


def test_criteria_are_immutable() -> None:
    c = AttributeComparator("name", "contains", "a")
    with pytest.raises(AttributeError):
        c.value = "b"  # type: ignore[misc]


# -----------------------------------------------------------------------------
# Description
# -----------------------------------------------------------------------------

def test_descriptions() -> None:
    sz = AttributeComparator("size", ">", "40")
    assert sz.describe() == "attrName: size, op: >, val: 40"
    assert IsDocument().describe() == "IsDocument"
    assert Negation(sz).describe() == "!( attrName: size, op: >, val: 40 )"
    assert str(Binary(IsDocument(), "AND", sz)) == "( IsDocument ) && ( attrName: size, op: >, val: 40 )"
    assert Binary(sz, "||", IsDocument()).describe() == "( attrName: size, op: >, val: 40 ) || ( IsDocument )"
