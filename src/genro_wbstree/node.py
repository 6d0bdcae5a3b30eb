# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""WbsTree node and tree value classes.

Nodes are immutable values. A structural edit never touches an existing
node: it builds new nodes along the changed ancestor chains and shares
every untouched subtree with the previous tree.
"""

from __future__ import annotations

from typing import Any, Hashable, Iterator


class WbsNode:
    """A node in a work breakdown structure.

    Each node has:
    - id: Caller-assigned identifier, unique in the whole tree
    - payload: Arbitrary application data (name, status, progress...)
    - children: Ordered tuple of child nodes, the authoritative sibling order
    - can_have_children: False for nodes that refuse dropped children

    Example:
        >>> leaf = WbsNode('wbs-1-1', {'name': 'Requirements'})
        >>> node = WbsNode('wbs-1', {'name': 'Planning'}, (leaf,))
        >>> node.is_branch
        True
        >>> node.children[0].id
        'wbs-1-1'
    """

    __slots__ = ('_id', '_payload', '_children', '_can_have_children')

    def __init__(
        self,
        id: Hashable,
        payload: Any = None,
        children: tuple[WbsNode, ...] | list[WbsNode] = (),
        can_have_children: bool = True,
    ) -> None:
        """Initialize a WbsNode.

        Args:
            id: The node's unique identifier.
            payload: Application data carried by the node.
            children: Child nodes in sibling order.
            can_have_children: Whether drops inside this node are allowed.
        """
        object.__setattr__(self, '_id', id)
        object.__setattr__(self, '_payload', payload)
        object.__setattr__(self, '_children', tuple(children))
        object.__setattr__(self, '_can_have_children', can_have_children)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"'{type(self).__name__}' is immutable")

    def __repr__(self) -> str:
        return f"WbsNode({self._id!r}, children={len(self._children)})"

    def __eq__(self, other: object) -> bool:
        """Structural equality: same id, payload, flags and children."""
        if self is other:
            return True
        if not isinstance(other, WbsNode):
            return NotImplemented
        return (
            self._id == other._id
            and self._can_have_children == other._can_have_children
            and self._payload == other._payload
            and self._children == other._children
        )

    def __hash__(self) -> int:
        return hash(self._id)

    @property
    def id(self) -> Hashable:
        return self._id

    @property
    def payload(self) -> Any:
        return self._payload

    @property
    def children(self) -> tuple[WbsNode, ...]:
        return self._children

    @property
    def can_have_children(self) -> bool:
        return self._can_have_children

    @property
    def is_branch(self) -> bool:
        """True if this node has at least one child."""
        return bool(self._children)

    @property
    def is_leaf(self) -> bool:
        """True if this node has no children."""
        return not self._children

    def replace(self, **changes: Any) -> WbsNode:
        """Return a copy with the given fields replaced.

        Args:
            **changes: Any of payload, children, can_have_children.

        Returns:
            A new WbsNode with the same id.
        """
        return WbsNode(
            self._id,
            changes.get('payload', self._payload),
            changes.get('children', self._children),
            changes.get('can_have_children', self._can_have_children),
        )

    def walk(self, depth: int = 0) -> Iterator[tuple[int, WbsNode]]:
        """Yield (depth, node) for this node and its descendants, pre-order."""
        yield depth, self
        for child in self._children:
            yield from child.walk(depth + 1)

    def count(self) -> int:
        """Return the number of nodes in this subtree, itself included."""
        return 1 + sum(child.count() for child in self._children)


class WbsTree:
    """An immutable forest of WbsNode.

    Example:
        >>> tree = WbsTree([WbsNode('a'), WbsNode('b')])
        >>> [node.id for node in tree]
        ['a', 'b']
        >>> tree.count()
        2
    """

    __slots__ = ('_roots',)

    def __init__(self, roots: tuple[WbsNode, ...] | list[WbsNode] = ()) -> None:
        object.__setattr__(self, '_roots', tuple(roots))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"'{type(self).__name__}' is immutable")

    def __repr__(self) -> str:
        return f"WbsTree({[node.id for node in self._roots]})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WbsTree):
            return NotImplemented
        return self._roots == other._roots

    def __hash__(self) -> int:
        return hash(tuple(node.id for node in self._roots))

    def __iter__(self) -> Iterator[WbsNode]:
        return iter(self._roots)

    def __len__(self) -> int:
        """Return the number of root nodes."""
        return len(self._roots)

    @property
    def roots(self) -> tuple[WbsNode, ...]:
        return self._roots

    def walk(self) -> Iterator[tuple[int, WbsNode]]:
        """Yield (depth, node) for every node, depth-first pre-order.

        Example:
            >>> for depth, node in tree.walk():
            ...     print('  ' * depth + str(node.id))
        """
        for root in self._roots:
            yield from root.walk(0)

    def count(self) -> int:
        """Return the total number of nodes."""
        return sum(root.count() for root in self._roots)

    def ids(self) -> list[Hashable]:
        """Return every node id in pre-order."""
        return [node.id for _, node in self.walk()]

    def shape(self) -> list[Any]:
        """Return a nested ``(id, [children...])`` structure for comparisons.

        Example:
            >>> tree.shape()
            [('A', [('B', [('D', []), ('E', [])]), ('C', [])])]
        """
        def _shape(node: WbsNode) -> tuple[Hashable, list[Any]]:
            return node.id, [_shape(child) for child in node.children]

        return [_shape(root) for root in self._roots]
