# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""WbsBoard - event facade for the work breakdown views.

The board wires the store, numbering, collapse state, projection and drag
handling together and exposes the events an interaction layer sends:

- ``drag_end(source_id, over_id, offset_x, pointer_ratio)``
- ``toggle_collapse(node_id)``
- ``toggle_collapse_all('expanded' | 'collapsed')``
- ``reset()``

and the data a renderer reads: ``visible_rows`` and ``wbs_codes``. Both are
derived on access from the current tree and collapse state, so changes made
through ``store`` or ``collapse`` directly show up too. Each event runs to
completion before subscribers are notified with a reason string:
'dropped', 'collapsed', 'expanded' or 'reset'.

Example:
    >>> board = WbsBoard(ITEMS, payload_factory=WbsItem.from_dict)
    >>> board.drag_end('wbs-2-3', 'wbs-3', offset_x=30).applied
    True
    >>> [(row.wbs_code, row.node.payload.name) for row in board.visible_rows][:2]
    [('1', 'Project Planning'), ('1.1', 'Requirements Gathering')]
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Hashable, Literal, Mapping, Sequence

from .collapse import CollapseState
from .config import WbsTreeConfig
from .drag import DragInterpreter, DragSession, MutationPolicy, get_policy
from .node import WbsTree
from .numbering import NumberingEngine
from .outcome import MutationOutcome
from .projection import ViewProjector, VisibleRow
from .store import SubscriptionMixin, TreeStore

logger = logging.getLogger(__name__)

ExpandTarget = Literal['expanded', 'collapsed']


class WbsBoard(SubscriptionMixin):
    """Interactive work breakdown structure.

    Attributes:
        config: The WbsTreeConfig in use.
        store: The TreeStore owning the hierarchy.
        collapse: The CollapseState of the view.
        session: The DragSession driving start/move/end gestures.
    """

    def __init__(
        self,
        source: Sequence[Mapping[str, Any]] | None = None,
        config: WbsTreeConfig | Mapping[str, Any] | None = None,
        payload_factory: Callable[[Any], Any] | None = None,
    ) -> None:
        """Initialize a WbsBoard.

        Args:
            source: Forest literal of the initial tree.
            config: WbsTreeConfig, or a mapping of settings.
            payload_factory: Optional callable converting raw payloads.

        Raises:
            SnapshotError: If source is malformed.
            ValueError: If a setting is invalid.
        """
        if not isinstance(config, WbsTreeConfig):
            config = WbsTreeConfig.from_mapping(config)
        self.config = config
        self._subscribers = {}

        self.store = TreeStore(
            source,
            children_key=config.children_key,
            payload_factory=payload_factory,
            check_invariants=config.check_invariants,
        )
        self.collapse = CollapseState(self.store, self.store.initial_collapsed)
        self.numbering = NumberingEngine()
        self.projector = ViewProjector(self.numbering)
        self.interpreter = DragInterpreter(
            self.store,
            self.collapse,
            self.projector,
            policy=config.policy,
            indentation_width=config.indentation_width,
        )
        self.session = DragSession(self.interpreter, on_applied=self._on_dropped)

    def __repr__(self) -> str:
        return f"WbsBoard(nodes={len(self.store)}, policy={self.policy.name})"

    # ==================== Derived data ====================

    @property
    def tree(self) -> WbsTree:
        return self.store.tree

    @property
    def visible_rows(self) -> list[VisibleRow]:
        """Rows to render, in display order."""
        return self.projector.rows(self.store.tree, self.collapse)

    @property
    def wbs_codes(self) -> dict[Hashable, str]:
        """WBS code of every node, hidden ones included."""
        return self.numbering.codes(self.store.tree)

    def code_of(self, node_id: Hashable) -> str:
        return self.numbering.code_of(self.store.tree, node_id)

    @property
    def policy(self) -> MutationPolicy:
        return self.interpreter.policy

    @policy.setter
    def policy(self, policy: str | MutationPolicy) -> None:
        if self.session.is_dragging:
            self.session.cancel()
        self.interpreter.policy = get_policy(policy)

    # ==================== Events ====================

    def drag_end(
        self,
        source_id: Hashable,
        over_id: Hashable | None,
        offset_x: float = 0.0,
        pointer_ratio: float | None = None,
    ) -> MutationOutcome:
        """Apply a complete drag gesture.

        Args:
            source_id: Dragged node.
            over_id: Node under the pointer on release, None if outside.
            offset_x: Horizontal pointer offset (free policy only).
            pointer_ratio: Vertical pointer position in the over row (0-1).

        Returns:
            Applied with the new tree, or Rejected with the reason.
        """
        self.session.start(source_id)
        self.session.move(over_id, offset_x, pointer_ratio)
        return self.session.end()

    def start_drag(self, source_id: Hashable) -> None:
        self.session.start(source_id)

    def drag_over(
        self,
        over_id: Hashable | None,
        offset_x: float = 0.0,
        pointer_ratio: float | None = None,
    ) -> None:
        self.session.move(over_id, offset_x, pointer_ratio)

    def end_drag(self) -> MutationOutcome:
        return self.session.end()

    def cancel_drag(self) -> None:
        self.session.cancel()

    def _on_dropped(self, outcome: MutationOutcome) -> None:
        self._notify('dropped')

    def toggle_collapse(self, node_id: Hashable) -> bool:
        """Collapse or expand one node.

        Returns:
            True if the node is now collapsed.

        Raises:
            NodeNotFoundError: If the id is not in the tree.
        """
        self.collapse.sync()
        version = self.collapse.version
        collapsed = self.collapse.toggle(node_id)
        if self.collapse.version != version:
            self._notify('collapsed' if collapsed else 'expanded')
        return collapsed

    def toggle_collapse_all(self, target: ExpandTarget | None = None) -> None:
        """Expand or collapse every node.

        Args:
            target: 'expanded' or 'collapsed'. When None, collapse all if
                everything is expanded, expand all otherwise.

        Raises:
            ValueError: If target is not a known state.
        """
        if target is None:
            collapsed = self.collapse.toggle_all()
        elif target in ('expanded', 'collapsed'):
            collapsed = target == 'collapsed'
            self.collapse.set_all(collapsed)
        else:
            raise ValueError(f"target must be 'expanded' or 'collapsed', not {target!r}")
        self._notify('collapsed' if collapsed else 'expanded')

    def reset(self) -> None:
        """Restore the initial snapshot, collapse flags included."""
        self.session.cancel()
        self.store.reset()
        self.collapse.reset(self.store.initial_collapsed)
        self._notify('reset')

    # ==================== Export ====================

    def as_list(self) -> list[dict[str, Any]]:
        """Export the current tree, with collapse flags, as a forest literal."""
        return self.store.as_list(self.collapse.collapsed_ids())
