# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""WBS code numbering.

A WBS code is the dot-separated, 1-based position path of a node: the
second root's first child is '2.1'. Codes depend only on the shape of the
tree, never on ids or payloads.
"""

from __future__ import annotations

import logging
from typing import Hashable

from .node import WbsNode, WbsTree

logger = logging.getLogger(__name__)


def compute_wbs_codes(tree: WbsTree) -> dict[Hashable, str]:
    """Map every node id to its WBS code.

    Example:
        >>> compute_wbs_codes(store.tree)
        {'A': '1', 'B': '1.1', 'D': '1.1.1', 'E': '1.1.2', 'C': '1.2'}
    """
    codes: dict[Hashable, str] = {}

    def _number(children: tuple[WbsNode, ...], prefix: str) -> None:
        for i, node in enumerate(children, start=1):
            code = f"{prefix}.{i}" if prefix else str(i)
            codes[node.id] = code
            _number(node.children, code)

    _number(tree.roots, '')
    return codes


def parse_code(code: str) -> tuple[int, ...]:
    """Split a WBS code into its 1-based positions.

    Raises:
        ValueError: If a segment is not a positive integer.

    Example:
        >>> parse_code('2.1.3')
        (2, 1, 3)
    """
    parts = code.strip().split('.')
    if not all(part.isdigit() and int(part) > 0 for part in parts):
        raise ValueError(f"Invalid WBS code: {code!r}")
    return tuple(int(part) for part in parts)


class NumberingEngine:
    """Derives WBS codes for the current tree value.

    Trees are immutable, so the codes of the last tree seen are kept and
    reused until a different tree value comes in.
    """

    __slots__ = ('_tree', '_codes')

    def __init__(self) -> None:
        self._tree: WbsTree | None = None
        self._codes: dict[Hashable, str] = {}

    def codes(self, tree: WbsTree) -> dict[Hashable, str]:
        """Return the id -> code mapping for tree."""
        if tree is not self._tree:
            self._codes = compute_wbs_codes(tree)
            self._tree = tree
            logger.debug("Numbering recomputed for %d nodes", len(self._codes))
        return dict(self._codes)

    def code_of(self, tree: WbsTree, node_id: Hashable) -> str:
        """Return the code of one node.

        Raises:
            KeyError: If the id is not in tree.
        """
        if tree is not self._tree:
            self.codes(tree)
        return self._codes[node_id]
