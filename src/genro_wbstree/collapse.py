# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Collapse/expand state of internal nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Hashable, Iterable

if TYPE_CHECKING:
    from .node import WbsTree
    from .store import TreeStore


class CollapseState:
    """Set of collapsed node ids, kept apart from the tree structure.

    Flags survive moves: a collapsed node stays collapsed wherever it is
    dropped. A leaf has no meaningful collapsed state, so toggling one does
    nothing, and a collapsed node that loses its last child loses its flag
    too. ``version`` increases on every effective change and lets the
    projector notice stale views.

    Example:
        >>> state = CollapseState(store)
        >>> state.toggle('B')
        True
        >>> state.is_collapsed('B')
        True
    """

    __slots__ = ('_store', '_collapsed', '_tree', 'version')

    def __init__(self, store: TreeStore, collapsed: Iterable[Hashable] = ()) -> None:
        """Initialize a CollapseState, fully expanded unless ids are given.

        Args:
            store: The store whose nodes are tracked.
            collapsed: Ids collapsed from the start. Ids that are unknown or
                have no children are ignored.
        """
        self._store = store
        self._collapsed: set[Hashable] = set(collapsed)
        self._tree: WbsTree | None = None
        self.version = 0
        self._prune()

    def __repr__(self) -> str:
        return f"CollapseState({sorted(map(repr, self.collapsed_ids()))})"

    def __contains__(self, node_id: Hashable) -> bool:
        return self.is_collapsed(node_id)

    def _prune(self) -> bool:
        """Drop ids that are gone or no longer internal, return True if any were."""
        store = self._store
        self._tree = store.tree
        stale = {i for i in self._collapsed if i not in store or not store.is_internal(i)}
        self._collapsed -= stale
        return bool(stale)

    def sync(self) -> None:
        """Bring the flags in line with the current tree of the store."""
        if self._store.tree is not self._tree and self._prune():
            self.version += 1

    def is_collapsed(self, node_id: Hashable) -> bool:
        self.sync()
        return node_id in self._collapsed

    def collapsed_ids(self) -> frozenset[Hashable]:
        self.sync()
        return frozenset(self._collapsed)

    def toggle(self, node_id: Hashable) -> bool:
        """Flip the collapsed flag of an internal node.

        Args:
            node_id: Node to toggle.

        Returns:
            The new flag. Always False for leaves.

        Raises:
            NodeNotFoundError: If the id is not in the store.
        """
        self.sync()
        if not self._store.is_internal(node_id):
            return False
        if node_id in self._collapsed:
            self._collapsed.discard(node_id)
        else:
            self._collapsed.add(node_id)
        self.version += 1
        return node_id in self._collapsed

    def set_all(self, collapsed: bool) -> None:
        """Collapse or expand every internal node."""
        if collapsed:
            self._collapsed = set(self._store.internal_ids())
        else:
            self._collapsed = set()
        self._tree = self._store.tree
        self.version += 1

    def is_all_expanded(self) -> bool:
        """True if no internal node is collapsed."""
        self.sync()
        return not self._collapsed

    def toggle_all(self) -> bool:
        """Collapse everything if all is expanded, expand everything otherwise.

        Returns:
            True if the nodes are now collapsed.
        """
        collapse = self.is_all_expanded()
        self.set_all(collapse)
        return collapse

    def reset(self, collapsed: Iterable[Hashable] = ()) -> None:
        """Replace the whole set, e.g. after the store was reset."""
        self._collapsed = set(collapsed)
        self._prune()
        self.version += 1
