from __future__ import annotations

"""
Snapshot Persistence Layer.

Serializes a virtual disk (capacity, directory tree) together with the
criterion registry into a self-describing UTF-8 JSON document, and rebuilds
both from it. Decoding goes through the regular node and criterion
constructors, so a snapshot can never smuggle in a state that violates the
naming, type or operator rules.
"""

import json
import logging
import os
from typing import Any, Dict, List, Tuple

from cvfs.core.registry import CriterionRegistry
from cvfs.core.store import Store
from cvfs.domain.constants import IS_DOCUMENT_NAME, SNAPSHOT_FORMAT, SNAPSHOT_VERSION
from cvfs.domain.criteria import AttributeComparator, Binary, Criterion, IsDocument, Negation
from cvfs.domain.errors import CVFSError, SnapshotError
from cvfs.domain.nodes import Directory, Document, Node
from cvfs.infra.fs import normalize_path

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_NAME = "disk.cvfs"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def snapshot(store: Store, registry: CriterionRegistry) -> bytes:
    """
    Encode the disk and the registry into an opaque blob.

    Args:
        store: Disk to encode. The cursor and command history are not part of
            a snapshot.
        registry: Criterion catalog to encode, in registration order.

    Returns:
        bytes: UTF-8 encoded JSON document.
    """
    payload = {
        "format": SNAPSHOT_FORMAT,
        "version": SNAPSHOT_VERSION,
        "capacity": store.capacity,
        "root": _encode_node(store.root),
        "criteria": [
            {"name": name, "criterion": _encode_criterion(criterion)}
            for name, criterion in registry.items()
        ],
    }
    return json.dumps(payload, ensure_ascii=False, indent=2).encode("utf-8")


def restore(blob: bytes) -> Tuple[Store, CriterionRegistry]:
    """
    Rebuild a disk and its registry from a blob produced by `snapshot`.

    The returned store has its cursor at the root. The registry always
    contains the built-in IsDocument entry.

    Raises:
        SnapshotError: If the blob is not a valid snapshot.
    """
    try:
        payload = json.loads(blob.decode("utf-8") if isinstance(blob, (bytes, bytearray)) else blob)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e

    if not isinstance(payload, dict) or payload.get("format") != SNAPSHOT_FORMAT:
        raise SnapshotError("Unrecognized snapshot format.")
    if payload.get("version") != SNAPSHOT_VERSION:
        raise SnapshotError(f"Unsupported snapshot version: {payload.get('version')!r}.")

    try:
        root = _decode_node(payload["root"])
        if not isinstance(root, Directory):
            raise SnapshotError("Snapshot root must be a directory.")
        store = Store(payload["capacity"], root=root)
        # An empty disk is valid at any capacity, as on creation.
        if root.children:
            store.check_capacity()

        registry = CriterionRegistry()
        for entry in payload.get("criteria", []):
            name = entry["name"]
            if name == IS_DOCUMENT_NAME:
                continue
            registry.register(name, _decode_criterion(entry["criterion"]))
    except SnapshotError:
        raise
    except CVFSError as e:
        raise SnapshotError(f"Snapshot content is invalid: {e}") from e
    except (KeyError, TypeError, AttributeError) as e:
        raise SnapshotError(f"Snapshot is malformed: {e!r}") from e

    return store, registry


def save_snapshot(path: str, store: Store, registry: CriterionRegistry) -> str:
    """
    Write a snapshot to `path`, creating parent directories as needed.

    Returns:
        str: The absolute path written.

    Raises:
        SnapshotError: On any I/O failure.
    """
    target = normalize_path(path, DEFAULT_SNAPSHOT_NAME)
    blob = snapshot(store, registry)
    try:
        parent = os.path.dirname(target)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(target, "wb") as f:
            f.write(blob)
    except OSError as e:
        raise SnapshotError(f"Failed to save virtual disk: {e}") from e
    logger.info(f"Snapshot written to {target} ({len(blob)} bytes)")
    return target


def load_snapshot(path: str) -> Tuple[Store, CriterionRegistry]:
    """
    Read and decode a snapshot file.

    Raises:
        SnapshotError: On I/O failure or invalid content.
    """
    target = normalize_path(path, DEFAULT_SNAPSHOT_NAME)
    try:
        with open(target, "rb") as f:
            blob = f.read()
    except OSError as e:
        raise SnapshotError(f"Failed to load virtual disk: {e}") from e
    result = restore(blob)
    logger.info(f"Snapshot loaded from {target}")
    return result


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: NODES
# -----------------------------------------------------------------------------

def _encode_node(node: Node) -> Dict[str, Any]:
    if isinstance(node, Document):
        return {"kind": "document", "name": node.name, "type": node.doc_type, "content": node.content}
    if isinstance(node, Directory):
        return {
            "kind": "directory",
            "name": node.name,
            "children": [_encode_node(child) for child in node.children],
        }
    raise SnapshotError(f"Cannot encode node of type {type(node).__name__}.")


def _decode_node(data: Dict[str, Any]) -> Node:
    kind = data["kind"]
    if kind == "document":
        return Document(data["name"], data["type"], data["content"])
    if kind == "directory":
        children: List[Node] = [_decode_node(child) for child in data.get("children", [])]
        return Directory(data["name"], children)
    raise SnapshotError(f"Unknown node kind: {kind!r}.")


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: CRITERIA
# -----------------------------------------------------------------------------

def _encode_criterion(criterion: Criterion) -> Dict[str, Any]:
    if isinstance(criterion, AttributeComparator):
        return {"kind": "comparator", "attr": criterion.attr, "op": criterion.op, "value": criterion.value}
    if isinstance(criterion, IsDocument):
        return {"kind": "is_document"}
    if isinstance(criterion, Negation):
        return {"kind": "negation", "inner": _encode_criterion(criterion.inner)}
    if isinstance(criterion, Binary):
        return {
            "kind": "binary",
            "left": _encode_criterion(criterion.left),
            "op": criterion.op.value,
            "right": _encode_criterion(criterion.right),
        }
    raise SnapshotError(f"Cannot encode criterion of type {type(criterion).__name__}.")


def _decode_criterion(data: Dict[str, Any]) -> Criterion:
    kind = data["kind"]
    if kind == "comparator":
        return AttributeComparator(data["attr"], data["op"], data["value"])
    if kind == "is_document":
        return IsDocument()
    if kind == "negation":
        return Negation(_decode_criterion(data["inner"]))
    if kind == "binary":
        return Binary(_decode_criterion(data["left"]), data["op"], _decode_criterion(data["right"]))
    raise SnapshotError(f"Unknown criterion kind: {kind!r}.")
