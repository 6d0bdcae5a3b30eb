# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Mutation policies - how a drop is turned into a move.

A policy is a strategy object. It receives a :class:`DragContext` with
everything the interpreter resolved about the gesture and returns either a
:class:`MutationIntent` or a :class:`Rejected` outcome. Policies only read
the store; the interpreter validates and applies what they decide.

Two policies are provided:

- ``FreeReparentPolicy`` ('free'): drop before/after any visible row, drag
  right to drop inside the row, drag left to move out to the level of the
  row's parent.
- ``SiblingOnlyPolicy`` ('sibling'): reorder among siblings only, any drop
  on a row with a different parent is rejected.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Hashable, Union

from ..outcome import IntentKind, MutationIntent, Rejected, RejectReason, reject

if TYPE_CHECKING:
    from ..node import WbsNode
    from ..store import TreeStore

Decision = Union[MutationIntent, Rejected]


@dataclass(frozen=True)
class DragContext:
    """Resolved drag gesture handed to a policy.

    Attributes:
        store: The store, read-only for policies.
        source_id: Dragged node.
        over_id: Node under the pointer when the drag ended.
        offset_x: Horizontal pointer offset since the drag started.
        pointer_ratio: Vertical pointer position inside the over row, from
            0 (top edge) to 1 (bottom edge), None when unknown.
        indentation_width: Offset that counts as one indentation level.
        row_positions: Visible row index by id.
    """

    store: TreeStore
    source_id: Hashable
    over_id: Hashable
    offset_x: float
    pointer_ratio: float | None
    indentation_width: float
    row_positions: dict[Hashable, int]

    @property
    def over_node(self) -> WbsNode:
        return self.store.get_node(self.over_id)

    @property
    def levels(self) -> int:
        """Whole indentation levels covered by offset_x, truncated toward zero."""
        return math.trunc(self.offset_x / self.indentation_width)

    def drops_after(self) -> bool:
        """Decide between before and after the over row.

        The half of the over row holding the pointer wins. Without a pointer
        position, a row dragged downwards lands after the over row and a row
        dragged upwards lands before it.
        """
        if self.pointer_ratio is not None:
            return self.pointer_ratio >= 0.5
        source_pos = self.row_positions.get(self.source_id)
        over_pos = self.row_positions[self.over_id]
        if source_pos is None:
            order = self.store.tree.ids()
            return order.index(self.source_id) < order.index(self.over_id)
        return source_pos < over_pos


class MutationPolicy(ABC):
    """Base class for mutation policies."""

    name: str = ''

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    @abstractmethod
    def decide(self, context: DragContext) -> Decision:
        """Turn a drag context into an intent or a rejection."""

    def sibling_intent(
        self,
        context: DragContext,
        anchor_id: Hashable,
        after: bool,
    ) -> MutationIntent:
        """Intent placing the source next to anchor, in anchor's parent."""
        store = context.store
        parent_id = store.parent_of(anchor_id)
        index = store.insertion_index(context.source_id, parent_id, anchor_id, after=after)
        return MutationIntent(
            IntentKind.MOVE_AFTER if after else IntentKind.MOVE_BEFORE,
            context.source_id,
            anchor_id,
            parent_id,
            index,
        )

    def inside_intent(self, context: DragContext, parent_id: Hashable) -> MutationIntent:
        """Intent making the source the first child of parent_id."""
        return MutationIntent(
            IntentKind.MOVE_INSIDE, context.source_id, parent_id, parent_id, 0
        )


class SiblingOnlyPolicy(MutationPolicy):
    """Reorder within the shared parent, reject everything else.

    The source takes the position the over row had, shifting the rows in
    between by one, so dragging down lands after the over row and dragging
    up lands before it.
    """

    name = 'sibling'

    def decide(self, context: DragContext) -> Decision:
        store = context.store
        source_id, over_id = context.source_id, context.over_id
        if source_id == over_id:
            return reject(RejectReason.SELF_MOVE, source_id)
        parent_id = store.parent_of(source_id)
        if parent_id != store.parent_of(over_id):
            return reject(
                RejectReason.DIFFERENT_LEVEL,
                f"{source_id!r} and {over_id!r} have different parents",
            )
        after = store.index_of(source_id) < store.index_of(over_id)
        return self.sibling_intent(context, over_id, after)


class FreeReparentPolicy(MutationPolicy):
    """Drop anywhere, with horizontal offset choosing the depth.

    - ``levels >= 1``: become the first child of the over row
    - ``levels <= -1``: become the sibling following the over row's parent
    - otherwise: become a sibling before or after the over row

    A row dropped on itself changes depth in place: indented, it becomes
    the last child of its previous sibling; outdented, it follows its
    parent. Outdenting a root row falls back to a plain sibling drop.
    """

    name = 'free'

    def decide(self, context: DragContext) -> Decision:
        store = context.store
        source_id, over_id = context.source_id, context.over_id
        levels = context.levels
        over_parent = store.parent_of(over_id)

        if source_id == over_id:
            return self._self_drop(context, levels, over_parent)

        if store.is_ancestor(source_id, over_id):
            return reject(
                RejectReason.CYCLIC_MOVE,
                f"{over_id!r} is inside {source_id!r}",
            )

        if levels >= 1:
            if not context.over_node.can_have_children:
                return reject(
                    RejectReason.AMBIGUOUS_DROP,
                    f"{over_id!r} cannot have children",
                )
            return self.inside_intent(context, over_id)

        if levels <= -1 and over_parent is not None:
            return self.sibling_intent(context, over_parent, after=True)

        return self.sibling_intent(context, over_id, context.drops_after())

    def _self_drop(
        self,
        context: DragContext,
        levels: int,
        parent_id: Hashable | None,
    ) -> Decision:
        source_id = context.source_id
        if levels < 0 and parent_id is not None:
            return self.sibling_intent(context, parent_id, after=True)
        if levels >= 1:
            index = context.store.index_of(source_id)
            if index > 0:
                previous = context.store.children_of(parent_id)[index - 1]
                if not previous.can_have_children:
                    return reject(
                        RejectReason.AMBIGUOUS_DROP,
                        f"{previous.id!r} cannot have children",
                    )
                return MutationIntent(
                    IntentKind.MOVE_INSIDE,
                    source_id,
                    previous.id,
                    previous.id,
                    len(previous.children),
                )
        return reject(RejectReason.SELF_MOVE, source_id)


POLICIES: dict[str, type[MutationPolicy]] = {
    FreeReparentPolicy.name: FreeReparentPolicy,
    SiblingOnlyPolicy.name: SiblingOnlyPolicy,
}


def get_policy(policy: str | MutationPolicy) -> MutationPolicy:
    """Return a policy instance from its name, or the instance itself.

    Raises:
        ValueError: If the name is unknown.
    """
    if isinstance(policy, MutationPolicy):
        return policy
    try:
        return POLICIES[policy]()
    except KeyError:
        raise ValueError(
            f"Unknown policy {policy!r}, expected one of {', '.join(POLICIES)}"
        ) from None
