from __future__ import annotations

"""
Unit tests for the Node Model.

Verifies:
1. Size rules for documents (40 + 2 per char) and directories (40 + children).
2. Name and document type validation at construction and rename.
3. Ordered, uniquely named children with positional insert/detach.
4. Weak parent links that never keep a detached tree alive.
"""

import gc

import pytest

from cvfs.domain.errors import DisallowedTypeError, DuplicateError, InvalidNameError, NotFoundError
from cvfs.domain.nodes import KIND_DIRECTORY, KIND_DOCUMENT, Directory, Document


# -----------------------------------------------------------------------------
# Sizing
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("content, expected", [("", 40), ("a", 42), ("hello", 50), ("x" * 100, 240)])
def test_document_size(content: str, expected: int) -> None:
    assert Document("doc", "txt", content).size == expected


def test_directory_size_is_recursive() -> None:
    inner = Directory("inner", [Document("x", "css", "abc"), Directory("leaf")])
    outer = Directory("outer", [inner, Document("y", "java", "")])

    assert inner.size == 40 + 46 + 40
    assert outer.size == 40 + inner.size + 40


def test_directory_size_tracks_mutation() -> None:
    d = Directory("d")
    doc = Document("a", "txt", "")
    d.insert(doc)
    assert d.size == 80

    doc.content = "four"
    assert d.size == 88

    d.detach(doc)
    assert d.size == 40


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("name", ["", "abcdefghijk", "has space", "dot.txt", "ümlaut", "a\n"])
def test_invalid_names_rejected(name: str) -> None:
    with pytest.raises(InvalidNameError):
        Document(name, "txt")
    with pytest.raises(InvalidNameError):
        Directory(name)


@pytest.mark.parametrize("name", ["a", "A1", "abcdefghij", "0123456789"])
def test_valid_names_accepted(name: str) -> None:
    assert Directory(name).name == name


@pytest.mark.parametrize("doc_type", ["txt", "java", "html", "css"])
def test_allowed_types(doc_type: str) -> None:
    assert Document("a", doc_type).doc_type == doc_type


@pytest.mark.parametrize("doc_type", ["pdf", "TXT", "", "py"])
def test_disallowed_types(doc_type: str) -> None:
    with pytest.raises(DisallowedTypeError):
        Document("a", doc_type)


def test_rename_validates_name() -> None:
    doc = Document("a", "txt")
    with pytest.raises(InvalidNameError):
        doc.rename("bad name")
    assert doc.name == "a"

    doc.rename("b")
    assert doc.name == "b"


def test_kind_tags() -> None:
    assert Document("a", "txt").kind == KIND_DOCUMENT
    assert Directory("a").kind == KIND_DIRECTORY


# -----------------------------------------------------------------------------
# Children
# -----------------------------------------------------------------------------

def test_insert_appends_in_order_and_sets_parent() -> None:
    d = Directory("d")
    a, b = Document("a", "txt"), Directory("b")
    assert d.insert(a) == 0
    assert d.insert(b) == 1

    assert [c.name for c in d.children] == ["a", "b"]
    assert a.parent is d
    assert b.parent is d


def test_insert_at_index_is_clamped() -> None:
    d = Directory("d", [Document("a", "txt"), Document("b", "txt")])
    assert d.insert(Document("c", "txt"), 1) == 1
    assert d.insert(Document("z", "txt"), 99) == 3
    assert d.insert(Document("f", "txt"), -5) == 0
    assert [c.name for c in d.children] == ["f", "a", "c", "b", "z"]


def test_insert_duplicate_name_rejected() -> None:
    d = Directory("d", [Document("a", "txt")])
    with pytest.raises(DuplicateError):
        d.insert(Directory("a"))
    assert len(d.children) == 1


def test_initial_children_must_be_unique() -> None:
    with pytest.raises(DuplicateError):
        Directory("d", [Document("a", "txt"), Document("a", "css")])


def test_detach_is_by_identity() -> None:
    a = Document("a", "txt")
    d = Directory("d", [Document("x", "txt"), a])

    assert d.detach(a) == 1
    assert a.parent is None
    with pytest.raises(NotFoundError):
        d.index_of(a)

    # Same name, different object
    with pytest.raises(NotFoundError):
        d.detach(Document("x", "txt"))


def test_empty_directory_is_truthy() -> None:
    assert Directory("d")


def test_parent_link_is_weak() -> None:
    child = Document("a", "txt")
    Directory("d", [child])
    gc.collect()
    assert child.parent is None


def test_get_child() -> None:
    a = Document("a", "txt")
    d = Directory("d", [a])
    assert d.get_child("a") is a
    assert d.get_child("b") is None
    assert d.has_child_named("a")
    assert not d.has_child_named("A")
