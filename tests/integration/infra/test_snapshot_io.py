from __future__ import annotations

"""
Integration tests for Snapshot Persistence.

Verifies:
1. Save/load through real files, including nested target directories.
2. The on-disk JSON layout.
3. Rejection of corrupted, foreign or rule-violating snapshots.
"""

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from cvfs.core.registry import CriterionRegistry
from cvfs.core.store import Store
from cvfs.domain.criteria import AttributeComparator, Binary, IsDocument, Negation
from cvfs.domain.errors import SnapshotError
from cvfs.infra.snapshot import load_snapshot, restore, save_snapshot, snapshot


@pytest.fixture
def populated() -> tuple:
    store = Store(600)
    docs = store.create_directory(store.root, "docs")
    store.create_document(docs, "readme", "txt", "hi there")
    store.create_document(store.root, "main", "java", "")
    store.set_cursor(docs)

    registry = CriterionRegistry()
    sz = AttributeComparator("size", ">=", "50")
    registry.register("sz", sz)
    registry.register("nd", Negation(IsDocument()))
    registry.register("bb", Binary(sz, "||", IsDocument()))
    return store, registry


def _payload(store: Store, registry: CriterionRegistry) -> Dict[str, Any]:
    return json.loads(snapshot(store, registry).decode("utf-8"))


def test_json_layout(populated) -> None:
    store, registry = populated
    data = _payload(store, registry)

    assert data["format"] == "cvfs-snapshot"
    assert data["version"] == 1
    assert data["capacity"] == 600
    assert data["root"]["kind"] == "directory"
    assert data["root"]["children"][0]["children"][0] == {
        "kind": "document", "name": "readme", "type": "txt", "content": "hi there",
    }
    assert [c["name"] for c in data["criteria"]] == ["IsDocument", "sz", "nd", "bb"]
    assert data["criteria"][3]["criterion"]["op"] == "||"


def test_file_roundtrip(populated, tmp_path: Path) -> None:
    store, registry = populated
    target = tmp_path / "deep" / "dir" / "disk.cvfs"

    written = save_snapshot(str(target), store, registry)
    assert Path(written) == target

    loaded_store, loaded_registry = load_snapshot(str(target))
    assert loaded_store.capacity == 600
    assert loaded_store.cursor is loaded_store.root
    assert loaded_store.list_children(recursive=True).triples() == store.list_children(
        store.root, recursive=True
    ).triples()
    assert loaded_registry.list() == registry.list()


def test_load_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SnapshotError):
        load_snapshot(str(tmp_path / "missing.cvfs"))


def test_save_into_unwritable_location(populated, tmp_path: Path) -> None:
    store, registry = populated
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(SnapshotError):
        save_snapshot(str(blocker / "disk.cvfs"), store, registry)


@pytest.mark.parametrize("blob", [
    b"\xff\xfe not utf8",
    b"{ not json",
    b"[]",
    b'{"format": "other", "version": 1}',
    b'{"format": "cvfs-snapshot", "version": 99}',
    b'{"format": "cvfs-snapshot", "version": 1}',
])
def test_restore_rejects_garbage(blob: bytes) -> None:
    with pytest.raises(SnapshotError):
        restore(blob)


def _mutated(populated, mutate) -> bytes:
    store, registry = populated
    data = _payload(store, registry)
    mutate(data)
    return json.dumps(data).encode("utf-8")


@pytest.mark.parametrize("mutate", [
    lambda d: d["root"]["children"][0].__setitem__("name", "bad name"),
    lambda d: d["root"]["children"][1].__setitem__("type", "exe"),
    lambda d: d["root"]["children"].append({"kind": "directory", "name": "docs", "children": []}),
    lambda d: d["root"]["children"].append({"kind": "symlink", "name": "x"}),
    lambda d: d.__setitem__("capacity", 10),
    lambda d: d.__setitem__("capacity", -1),
    lambda d: d.__setitem__("root", {"kind": "document", "name": "r", "type": "txt", "content": ""}),
    lambda d: d["criteria"][1]["criterion"].__setitem__("op", "~"),
    lambda d: d["criteria"][1].__setitem__("name", "toolong"),
    lambda d: d["criteria"].append(d["criteria"][1]),
    lambda d: d["criteria"].append({"name": "qq", "criterion": {"kind": "regex"}}),
    lambda d: d["criteria"].append({"name": "qq"}),
])
def test_restore_validates_content(populated, mutate) -> None:
    with pytest.raises(SnapshotError):
        restore(_mutated(populated, mutate))


@pytest.mark.parametrize("capacity", [0, 10, 39])
def test_empty_disk_below_root_size_roundtrips(capacity: int) -> None:
    store = Store(capacity)
    loaded_store, loaded_registry = restore(snapshot(store, CriterionRegistry()))
    assert loaded_store.capacity == capacity
    assert loaded_store.root.children == []
    assert loaded_registry.list() == CriterionRegistry().list()
