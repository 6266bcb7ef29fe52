from __future__ import annotations

"""
Shell View Rendering.

Turns listing and registry query results into the text lines the shell
prints. Nested entries of recursive listings are indented four spaces per
level.
"""

from typing import Iterable, List, Tuple

from cvfs.domain.listing import Listing, NodeEntry
from cvfs.domain.nodes import KIND_DOCUMENT
from cvfs.utils.i18n import i18n

INDENT_UNIT = "    "


def render_entry(entry: NodeEntry) -> str:
    indent = INDENT_UNIT * entry.depth
    if entry.kind == KIND_DOCUMENT:
        return i18n.t(
            "shell.render.document",
            indent=indent, name=entry.name, type=entry.doc_type, size=entry.size,
        )
    return i18n.t("shell.render.directory", indent=indent, name=entry.name, size=entry.size)


def render_listing(listing: Listing) -> List[str]:
    """One line per entry followed by the totals line."""
    lines = [render_entry(e) for e in listing.entries]
    lines.append(i18n.t("shell.render.totals", count=listing.total_count, size=listing.total_size))
    return lines


def render_criteria(pairs: Iterable[Tuple[str, str]]) -> List[str]:
    return [i18n.t("shell.render.criterion", name=name, description=desc) for name, desc in pairs]
