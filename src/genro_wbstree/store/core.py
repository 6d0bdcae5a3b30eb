# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeStore - canonical owner of a work breakdown hierarchy.

This module provides the TreeStore class, which holds the current WbsTree
value, the lookup indices derived from it, and the move primitive that is
the only way the hierarchy changes.

Key Features:
    - **Immutable tree values**: every commit swaps in a new WbsTree that
      shares all untouched subtrees with the previous one
    - **O(1) lookup**: id -> node, id -> parent, id -> position, id -> depth
      indices rebuilt on every commit, never edited by hand
    - **Atomic moves**: detach and attach happen on a new value, the live
      tree is replaced only once the result is complete
    - **Reset**: rebuild from a private deep copy of the initial snapshot
    - **Code navigation**: positional lookup by WBS code ('2.1')

Example:
    Basic usage::

        store = TreeStore([
            {'id': 'A', 'children': [
                {'id': 'B', 'children': [{'id': 'D'}, {'id': 'E'}]},
                {'id': 'C'},
            ]},
        ])
        store.move_node('D', 'C', 0)
        store.tree.shape()
        # [('A', [('B', [('E', [])]), ('C', [('D', [])])])]

        store.parent_of('D')          # 'C'
        store.get_node_by_code('1.2.1').id  # 'D'
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Hashable, Iterator, Sequence

from ..exceptions import (
    CyclicMoveError,
    InvariantViolationError,
    NodeNotFoundError,
    SelfMoveError,
)
from ..node import WbsNode, WbsTree
from ..numbering import parse_code
from .loading import dump_forest, load_forest

logger = logging.getLogger(__name__)

ChildrenUpdate = Callable[[tuple[WbsNode, ...]], tuple[WbsNode, ...]]


class TreeStore:
    """Owner of a WbsTree and of the indices derived from it.

    TreeStore provides:
    - get_node(id) / get(id): node lookup
    - parent_of, children_of, index_of, depth_of: structural queries
    - is_ancestor(candidate, node): subtree membership
    - plan_move(source, parent, index): pure move, returns a new tree
    - move_node(source, parent, index): move and commit
    - reset(): restore the initial snapshot

    Callers never mutate the tree directly. Readers (numbering, projection,
    drag interpretation) take ``store.tree`` and work on that value.

    Attributes:
        children_key: Key holding child lists in snapshot literals.
        check_invariants: Verify count and id set after every commit.
    """

    __slots__ = (
        '_tree', '_nodes', '_parents', '_positions', '_depths',
        '_snapshot', '_payload_factory', '_initial_collapsed',
        'children_key', 'check_invariants',
    )

    def __init__(
        self,
        source: Sequence[dict[str, Any]] | WbsTree | None = None,
        children_key: str = 'children',
        payload_factory: Callable[[Any], Any] | None = None,
        check_invariants: bool = True,
    ) -> None:
        """Initialize a TreeStore.

        Args:
            source: Initial data. Can be:
                - list: forest literal (see ``store.loading``)
                - WbsTree: an existing tree value
                - None: empty forest
            children_key: Key holding child lists in the literal.
            payload_factory: Optional callable converting raw payloads,
                e.g. ``WbsItem.from_dict``.
            check_invariants: If True (default), every commit verifies that
                no node was created, dropped or duplicated.

        Raises:
            SnapshotError: If the literal is malformed or repeats an id.

        Example:
            >>> TreeStore([{'id': 'a'}, {'id': 'b', 'children': [{'id': 'c'}]}])
            >>> TreeStore(payload_factory=WbsItem.from_dict, source=[...])
        """
        self.children_key = children_key
        self.check_invariants = check_invariants
        self._payload_factory = payload_factory

        if source is None:
            source = []
        if isinstance(source, WbsTree):
            source = dump_forest(source, children_key=children_key)
        self._snapshot = copy.deepcopy(list(source))

        self._tree = WbsTree()
        self._nodes: dict[Hashable, WbsNode] = {}
        self._parents: dict[Hashable, Hashable | None] = {}
        self._positions: dict[Hashable, int] = {}
        self._depths: dict[Hashable, int] = {}
        self._initial_collapsed: frozenset[Hashable] = frozenset()
        self._load_snapshot()

    def _load_snapshot(self) -> None:
        tree, collapsed = load_forest(
            copy.deepcopy(self._snapshot),
            children_key=self.children_key,
            payload_factory=self._payload_factory,
        )
        self._initial_collapsed = frozenset(collapsed)
        self._tree = tree
        self._reindex()

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"TreeStore({[node.id for node in self._tree]})"

    def __len__(self) -> int:
        """Return the total number of nodes in the tree."""
        return len(self._nodes)

    def __iter__(self) -> Iterator[WbsNode]:
        """Iterate over root nodes in order."""
        return iter(self._tree)

    def __contains__(self, node_id: Hashable) -> bool:
        return node_id in self._nodes

    @property
    def tree(self) -> WbsTree:
        """The current tree value."""
        return self._tree

    @property
    def snapshot(self) -> list[dict[str, Any]]:
        """A deep copy of the literal the store was built from."""
        return copy.deepcopy(self._snapshot)

    @property
    def initial_collapsed(self) -> frozenset[Hashable]:
        """Ids flagged as collapsed in the initial snapshot."""
        return self._initial_collapsed

    # ==================== Indices ====================

    def _reindex(self) -> None:
        """Rebuild every lookup index from the current tree."""
        nodes: dict[Hashable, WbsNode] = {}
        parents: dict[Hashable, Hashable | None] = {}
        positions: dict[Hashable, int] = {}
        depths: dict[Hashable, int] = {}
        duplicates: list[Hashable] = []

        def _index(children: tuple[WbsNode, ...], parent_id: Hashable | None, depth: int) -> None:
            for i, node in enumerate(children):
                if node.id in nodes:
                    duplicates.append(node.id)
                nodes[node.id] = node
                parents[node.id] = parent_id
                positions[node.id] = i
                depths[node.id] = depth
                _index(node.children, node.id, depth + 1)

        _index(self._tree.roots, None, 0)
        if duplicates:
            raise InvariantViolationError(f"Duplicate node ids in tree: {duplicates!r}")

        self._nodes = nodes
        self._parents = parents
        self._positions = positions
        self._depths = depths

    def _commit(self, tree: WbsTree) -> None:
        """Swap in a new tree value and rebuild the indices."""
        previous_ids = set(self._nodes) if self.check_invariants else None
        previous_tree = self._tree
        self._tree = tree
        try:
            self._reindex()
            if previous_ids is not None and set(self._nodes) != previous_ids:
                lost = previous_ids - set(self._nodes)
                extra = set(self._nodes) - previous_ids
                raise InvariantViolationError(
                    f"Commit changed the id set: lost={sorted(map(repr, lost))} "
                    f"extra={sorted(map(repr, extra))}"
                )
        except InvariantViolationError:
            logger.error("Invariant violation, previous tree restored", exc_info=True)
            self._tree = previous_tree
            self._reindex()
            raise

    # ==================== Queries ====================

    def get_node(self, node_id: Hashable) -> WbsNode:
        """Get a node by id.

        Raises:
            NodeNotFoundError: If the id is not in the tree.
        """
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    def get(self, node_id: Hashable, default: Any = None) -> WbsNode | None:
        """Get a node by id, with default."""
        return self._nodes.get(node_id, default)

    def parent_of(self, node_id: Hashable) -> Hashable | None:
        """Return the parent id of a node, None for root nodes.

        Raises:
            NodeNotFoundError: If the id is not in the tree.
        """
        self.get_node(node_id)
        return self._parents[node_id]

    def children_of(self, node_id: Hashable | None) -> tuple[WbsNode, ...]:
        """Return the children of a node, or the roots when node_id is None."""
        if node_id is None:
            return self._tree.roots
        return self.get_node(node_id).children

    def index_of(self, node_id: Hashable) -> int:
        """Return the position of a node among its siblings."""
        self.get_node(node_id)
        return self._positions[node_id]

    def depth_of(self, node_id: Hashable) -> int:
        """Return the depth of a node (roots are at depth 0)."""
        self.get_node(node_id)
        return self._depths[node_id]

    def ancestors_of(self, node_id: Hashable) -> list[Hashable]:
        """Return the ancestor ids of a node, nearest parent first."""
        self.get_node(node_id)
        chain = []
        parent = self._parents[node_id]
        while parent is not None:
            chain.append(parent)
            parent = self._parents[parent]
        return chain

    def is_ancestor(
        self,
        candidate_ancestor_id: Hashable,
        node_id: Hashable,
        inclusive: bool = False,
    ) -> bool:
        """Check whether node_id lies in the subtree of candidate_ancestor_id.

        Args:
            candidate_ancestor_id: Root of the subtree to test.
            node_id: Node to look for.
            inclusive: If True, a node counts as its own ancestor.

        Raises:
            NodeNotFoundError: If either id is not in the tree.
        """
        self.get_node(candidate_ancestor_id)
        self.get_node(node_id)
        if candidate_ancestor_id == node_id:
            return inclusive
        parent = self._parents[node_id]
        while parent is not None:
            if parent == candidate_ancestor_id:
                return True
            parent = self._parents[parent]
        return False

    def subtree_ids(self, node_id: Hashable) -> list[Hashable]:
        """Return the ids of a node and all its descendants, pre-order."""
        return [node.id for _, node in self.get_node(node_id).walk()]

    def is_internal(self, node_id: Hashable) -> bool:
        """True if the node has at least one child."""
        return self.get_node(node_id).is_branch

    def internal_ids(self) -> list[Hashable]:
        """Return the ids of every node with children, pre-order."""
        return [node.id for _, node in self._tree.walk() if node.is_branch]

    def walk(self) -> Iterator[tuple[int, WbsNode]]:
        """Yield (depth, node) pairs, depth-first pre-order."""
        return self._tree.walk()

    def get_node_by_code(self, code: str) -> WbsNode:
        """Get a node from its WBS code.

        Args:
            code: Dot-separated 1-based path, e.g. '2.1'.

        Raises:
            NodeNotFoundError: If the code does not address a node.
            ValueError: If the code is not made of positive integers.

        Example:
            >>> store.get_node_by_code('1.2').id
            'C'
        """
        children = self._tree.roots
        node = None
        for segment in parse_code(code):
            if segment > len(children):
                raise NodeNotFoundError(code)
            node = children[segment - 1]
            children = node.children
        if node is None:
            raise NodeNotFoundError(code)
        return node

    # ==================== Moves ====================

    def validate_move(self, source_id: Hashable, new_parent_id: Hashable | None) -> None:
        """Raise if moving source under new_parent would break the tree.

        Raises:
            NodeNotFoundError: If either id is absent.
            SelfMoveError: If source and new parent are the same node.
            CyclicMoveError: If the new parent is a descendant of source.
        """
        self.get_node(source_id)
        if new_parent_id is None:
            return
        self.get_node(new_parent_id)
        if new_parent_id == source_id:
            raise SelfMoveError(source_id, new_parent_id)
        if self.is_ancestor(source_id, new_parent_id):
            raise CyclicMoveError(source_id, new_parent_id)

    def insertion_index(
        self,
        source_id: Hashable,
        parent_id: Hashable | None,
        anchor_id: Hashable,
        after: bool = False,
    ) -> int:
        """Index of anchor in the destination list once source is detached.

        Args:
            source_id: The node that will be moved.
            parent_id: Destination parent (None for the root list).
            anchor_id: Sibling to insert next to.
            after: Insert after the anchor instead of before it.

        Raises:
            NodeNotFoundError: If the anchor is not a child of parent_id.
        """
        siblings = [n.id for n in self.children_of(parent_id) if n.id != source_id]
        try:
            idx = siblings.index(anchor_id)
        except ValueError:
            raise NodeNotFoundError(anchor_id) from None
        return idx + 1 if after else idx

    def plan_move(
        self,
        source_id: Hashable,
        new_parent_id: Hashable | None,
        index: int,
    ) -> WbsTree:
        """Return the tree that results from moving source, without committing.

        The subtree rooted at source is detached from its parent and inserted
        at ``index`` in the children of new_parent (or in the root list when
        new_parent is None). The index refers to the destination list after
        detachment and is clamped to ``[0, len]``.

        Args:
            source_id: Root of the subtree to move.
            new_parent_id: Destination parent, None for the root list.
            index: Insertion position in the destination list.

        Returns:
            A new WbsTree sharing every untouched subtree with the current one.

        Raises:
            NodeNotFoundError: If either id is absent.
            SelfMoveError: If source_id == new_parent_id.
            CyclicMoveError: If new_parent is a descendant of source.
        """
        self.validate_move(source_id, new_parent_id)
        source = self._nodes[source_id]
        old_parent_id = self._parents[source_id]

        def _detach(children: tuple[WbsNode, ...]) -> tuple[WbsNode, ...]:
            return tuple(n for n in children if n.id != source_id)

        def _attach(children: tuple[WbsNode, ...]) -> tuple[WbsNode, ...]:
            idx = max(0, min(index, len(children)))
            return children[:idx] + (source,) + children[idx:]

        roots = self._update_children(self._tree.roots, old_parent_id, _detach)
        roots = self._update_children(roots, new_parent_id, _attach)
        return WbsTree(roots)

    def move_node(
        self,
        source_id: Hashable,
        new_parent_id: Hashable | None,
        index: int,
    ) -> WbsTree:
        """Move a subtree and commit the result.

        Same arguments and errors as :meth:`plan_move`. On error the store
        is left untouched.

        Returns:
            The new current tree.
        """
        old_parent_id = self._parents.get(source_id)
        tree = self.plan_move(source_id, new_parent_id, index)
        self._commit(tree)
        logger.info(
            "Edit OK: move node=%r from=%r to=%r index=%d",
            source_id, old_parent_id, new_parent_id, self._positions[source_id],
        )
        return tree

    def _update_children(
        self,
        roots: tuple[WbsNode, ...],
        parent_id: Hashable | None,
        update: ChildrenUpdate,
    ) -> tuple[WbsNode, ...]:
        """Rebuild the path from the roots to parent_id with updated children.

        Only nodes on the ancestor chain of parent_id are recreated. The chain
        comes from the parent index, which is still valid for the second
        update of a move because moving a node never changes the ancestors of
        a node outside its subtree.
        """
        if parent_id is None:
            return update(roots)
        chain = [parent_id] + self.ancestors_of(parent_id)
        chain.reverse()
        return self._rebuild(roots, chain, update)

    def _rebuild(
        self,
        children: tuple[WbsNode, ...],
        chain: list[Hashable],
        update: ChildrenUpdate,
    ) -> tuple[WbsNode, ...]:
        head, rest = chain[0], chain[1:]
        for i, node in enumerate(children):
            if node.id == head:
                break
        else:
            raise InvariantViolationError(f"Node {head!r} missing from its parent")
        if rest:
            new_children = self._rebuild(node.children, rest, update)
        else:
            new_children = update(node.children)
        return children[:i] + (node.replace(children=new_children),) + children[i + 1:]

    # ==================== Reset / Conversion ====================

    def reset(self) -> None:
        """Discard every move and rebuild the tree from the initial snapshot."""
        self._load_snapshot()
        logger.info("Edit OK: reset nodes=%d", len(self._nodes))

    def as_list(self, collapsed: Any = ()) -> list[dict[str, Any]]:
        """Export the current tree as a forest literal.

        Args:
            collapsed: Ids to flag as collapsed in the output.
        """
        return dump_forest(self._tree, collapsed, children_key=self.children_key)
