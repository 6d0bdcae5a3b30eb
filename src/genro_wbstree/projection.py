# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Visible row projection.

The projection is the flat, depth-first list of rows a renderer shows: a
collapsed node is listed, its descendants are not. It is also the order
the drag interpreter uses to tell whether the dragged row sits above or
below the row under the pointer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Hashable

from .collapse import CollapseState
from .node import WbsNode, WbsTree
from .numbering import NumberingEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisibleRow:
    """A row of the projection."""

    node: WbsNode
    depth: int
    wbs_code: str

    @property
    def id(self) -> Hashable:
        return self.node.id


def project(
    tree: WbsTree,
    collapsed: frozenset[Hashable] | set[Hashable],
    codes: dict[Hashable, str],
) -> list[VisibleRow]:
    """Flatten tree into visible rows.

    Args:
        tree: Tree to flatten.
        collapsed: Ids whose descendants are hidden.
        codes: WBS codes by id.
    """
    rows: list[VisibleRow] = []

    def _emit(children: tuple[WbsNode, ...], depth: int) -> None:
        for node in children:
            rows.append(VisibleRow(node, depth, codes[node.id]))
            if node.id not in collapsed:
                _emit(node.children, depth + 1)

    _emit(tree.roots, 0)
    return rows


class ViewProjector:
    """Keeps the projection in step with the tree and the collapse state.

    The cached rows are tied to a tree value and a collapse version, so a
    new tree or any collapse change always produces a fresh list.

    Example:
        >>> projector = ViewProjector(numbering)
        >>> [row.id for row in projector.rows(store.tree, collapse)]
        ['A', 'B', 'C']
    """

    __slots__ = (
        '_numbering', '_tree', '_collapse', '_version', '_rows', '_positions',
    )

    def __init__(self, numbering: NumberingEngine | None = None) -> None:
        self._numbering = numbering or NumberingEngine()
        self._tree: WbsTree | None = None
        self._collapse: CollapseState | None = None
        self._version = -1
        self._rows: list[VisibleRow] = []
        self._positions: dict[Hashable, int] = {}

    def rows(self, tree: WbsTree, collapse: CollapseState) -> list[VisibleRow]:
        """Return the visible rows for tree under collapse."""
        collapse.sync()
        stale = (
            tree is not self._tree
            or collapse is not self._collapse
            or collapse.version != self._version
        )
        if stale:
            self._rows = project(
                tree, collapse.collapsed_ids(), self._numbering.codes(tree)
            )
            self._positions = {row.id: i for i, row in enumerate(self._rows)}
            self._tree = tree
            self._collapse = collapse
            self._version = collapse.version
            logger.debug("Projection recomputed: %d visible rows", len(self._rows))
        return list(self._rows)

    def index_of(self, tree: WbsTree, collapse: CollapseState, node_id: Hashable) -> int | None:
        """Return the row position of node_id, or None if it is hidden."""
        self.rows(tree, collapse)
        return self._positions.get(node_id)
