# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Loading and exporting forest literals.

A forest literal is a list of mappings, one per root node::

    [
        {'id': 'wbs-1', 'name': 'Planning', 'children': [
            {'id': 'wbs-1-1', 'name': 'Requirements'},
        ]},
        {'id': 'wbs-2', 'name': 'Development', 'collapsed': True, 'children': [...]},
    ]

Reserved keys:
    - id: required, unique in the whole forest
    - children (or the configured children key, or subRows): child literals
    - collapsed: initial collapse flag
    - canHaveChildren / can_have_children: refuse dropped children if False
    - payload: explicit payload; when absent all remaining keys form a dict
"""

from __future__ import annotations

from typing import Any, Callable, Hashable, Iterable, Mapping

from ..exceptions import SnapshotError
from ..node import WbsNode, WbsTree

ALT_CHILDREN_KEYS = ('subRows',)
_FLAG_KEYS = ('collapsed', 'canHaveChildren', 'can_have_children')


def load_forest(
    source: Iterable[Mapping[str, Any]],
    children_key: str = 'children',
    payload_factory: Callable[[Any], Any] | None = None,
) -> tuple[WbsTree, set[Hashable]]:
    """Build a WbsTree from a forest literal.

    Args:
        source: List of node mappings.
        children_key: Key holding child lists.
        payload_factory: Optional callable converting each raw payload.

    Returns:
        Tuple of (tree, ids flagged as collapsed).

    Raises:
        SnapshotError: If a node has no id, ids repeat, or the shape is wrong.
    """
    seen: set[Hashable] = set()
    collapsed: set[Hashable] = set()
    reserved = {'id', 'payload', children_key, *ALT_CHILDREN_KEYS, *_FLAG_KEYS}

    def _children_of(item: Mapping[str, Any]) -> Any:
        if children_key in item:
            return item[children_key]
        for key in ALT_CHILDREN_KEYS:
            if key in item:
                return item[key]
        return None

    def _load(items: Any, where: str) -> tuple[WbsNode, ...]:
        if isinstance(items, (str, bytes, Mapping)) or not isinstance(items, Iterable):
            raise SnapshotError(f"{where}: expected a list of nodes, got {type(items).__name__}")
        nodes = []
        for position, item in enumerate(items):
            if not isinstance(item, Mapping):
                raise SnapshotError(f"{where}[{position}]: expected a mapping, got {type(item).__name__}")
            if 'id' not in item:
                raise SnapshotError(f"{where}[{position}]: missing 'id'")
            node_id = item['id']
            try:
                hash(node_id)
            except TypeError:
                raise SnapshotError(
                    f"{where}[{position}]: id {node_id!r} is not hashable"
                ) from None
            if node_id in seen:
                raise SnapshotError(f"Duplicate node id {node_id!r}")
            seen.add(node_id)

            if 'payload' in item:
                payload = item['payload']
            else:
                payload = {k: v for k, v in item.items() if k not in reserved}
            if payload_factory is not None:
                payload = payload_factory(payload)

            if item.get('collapsed'):
                collapsed.add(node_id)
            can_have_children = item.get(
                'canHaveChildren', item.get('can_have_children', True)
            )

            raw_children = _children_of(item)
            children = _load(raw_children, f"{node_id!r}") if raw_children is not None else ()
            nodes.append(WbsNode(node_id, payload, children, bool(can_have_children)))
        return tuple(nodes)

    tree = WbsTree(_load(source, 'root'))
    return tree, collapsed


def dump_forest(
    tree: WbsTree,
    collapsed: Iterable[Hashable] = (),
    children_key: str = 'children',
) -> list[dict[str, Any]]:
    """Convert a WbsTree back into a forest literal.

    Dict payloads and payloads with an ``as_dict()`` method are merged into
    the node mapping, any other payload is stored under 'payload'. Leaves
    get no children key.

    Args:
        tree: The tree to export.
        collapsed: Ids to flag as collapsed.
        children_key: Key for child lists.

    Returns:
        List of node mappings.
    """
    collapsed = set(collapsed)

    def _dump(node: WbsNode) -> dict[str, Any]:
        result: dict[str, Any] = {'id': node.id}
        payload = node.payload
        if hasattr(payload, 'as_dict'):
            result.update(payload.as_dict())
        elif isinstance(payload, Mapping):
            result.update(payload)
        elif payload is not None:
            result['payload'] = payload
        if node.id in collapsed:
            result['collapsed'] = True
        if not node.can_have_children:
            result['canHaveChildren'] = False
        if node.children:
            result[children_key] = [_dump(child) for child in node.children]
        return result

    return [_dump(root) for root in tree]
