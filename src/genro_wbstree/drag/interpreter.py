# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""DragInterpreter - turns a finished drag into a move.

The interpreter is the shared core both policies run through:

1. resolve the gesture (ids exist, the over row is visible)
2. let the policy decide an intent
3. validate the intent against the store (self and cyclic moves)
4. apply it, or report why not

Every failure comes back as a :class:`Rejected` outcome and leaves the
store untouched.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Hashable

from ..exceptions import MoveError, NodeNotFoundError
from ..outcome import (
    Applied,
    MutationIntent,
    MutationOutcome,
    Rejected,
    RejectReason,
    reject,
)
from .policies import DragContext, MutationPolicy, get_policy

if TYPE_CHECKING:
    from ..collapse import CollapseState
    from ..projection import ViewProjector
    from ..store import TreeStore

logger = logging.getLogger(__name__)


class DragInterpreter:
    """Resolve and apply drops under a mutation policy.

    Example:
        >>> interpreter = DragInterpreter(store, collapse, projector, 'free')
        >>> interpreter.interpret('D', 'C', offset_x=30)
        MutationIntent(kind=<IntentKind.MOVE_INSIDE: 'inside'>, source_id='D', ...)
        >>> interpreter.drop('D', 'C', offset_x=30).applied
        True
    """

    __slots__ = ('_store', '_collapse', '_projector', 'policy', 'indentation_width')

    def __init__(
        self,
        store: TreeStore,
        collapse: CollapseState,
        projector: ViewProjector,
        policy: str | MutationPolicy = 'free',
        indentation_width: float = 24.0,
    ) -> None:
        """Initialize a DragInterpreter.

        Args:
            store: The store to move nodes in.
            collapse: Collapse state, needed to know which rows are droppable.
            projector: Source of the visible rows.
            policy: Policy instance or name ('free' or 'sibling').
            indentation_width: Horizontal offset worth one indentation level.
        """
        self._store = store
        self._collapse = collapse
        self._projector = projector
        self.policy = get_policy(policy)
        self.indentation_width = indentation_width

    def interpret(
        self,
        source_id: Hashable,
        over_id: Hashable | None,
        offset_x: float = 0.0,
        pointer_ratio: float | None = None,
    ) -> MutationIntent | Rejected:
        """Resolve a drop into an intent without applying it.

        Args:
            source_id: Dragged node.
            over_id: Node under the pointer, None if released outside rows.
            offset_x: Horizontal pointer offset since the drag started.
            pointer_ratio: Vertical pointer position inside the over row (0-1).

        Returns:
            A MutationIntent ready for :meth:`apply`, or a Rejected outcome.
        """
        store = self._store
        if over_id is None:
            return reject(RejectReason.AMBIGUOUS_DROP, "released outside any row")
        offset_x = float(offset_x or 0.0)
        if not math.isfinite(offset_x):
            return reject(RejectReason.AMBIGUOUS_DROP, f"offset {offset_x!r} is not finite")
        for node_id in (source_id, over_id):
            if node_id not in store:
                return reject(RejectReason.NOT_FOUND, node_id)

        rows = self._projector.rows(store.tree, self._collapse)
        positions = {row.id: i for i, row in enumerate(rows)}
        if over_id not in positions:
            return reject(RejectReason.AMBIGUOUS_DROP, f"{over_id!r} is not visible")

        context = DragContext(
            store=store,
            source_id=source_id,
            over_id=over_id,
            offset_x=offset_x,
            pointer_ratio=pointer_ratio,
            indentation_width=self.indentation_width,
            row_positions=positions,
        )
        decision = self.policy.decide(context)
        if isinstance(decision, Rejected):
            return decision

        try:
            store.validate_move(decision.source_id, decision.parent_id)
        except (MoveError, NodeNotFoundError) as exc:
            return Rejected(exc.reason, str(exc))
        return decision

    def apply(self, intent: MutationIntent) -> MutationOutcome:
        """Commit an intent produced by :meth:`interpret`."""
        try:
            tree = self._store.move_node(intent.source_id, intent.parent_id, intent.index)
        except (MoveError, NodeNotFoundError) as exc:
            return Rejected(exc.reason, str(exc))
        self._collapse.sync()
        return Applied(tree, intent)

    def drop(
        self,
        source_id: Hashable,
        over_id: Hashable | None,
        offset_x: float = 0.0,
        pointer_ratio: float | None = None,
    ) -> MutationOutcome:
        """Interpret and apply a drop in one step."""
        decision = self.interpret(source_id, over_id, offset_x, pointer_ratio)
        if isinstance(decision, Rejected):
            logger.info(
                "Edit FAIL: drop source=%r over=%r policy=%s reason=%s",
                source_id, over_id, self.policy.name, decision,
            )
            return decision
        outcome = self.apply(decision)
        if outcome.applied:
            logger.info(
                "Edit OK: drop source=%r %s %r policy=%s",
                source_id, decision.kind.value, decision.anchor_id, self.policy.name,
            )
        return outcome
