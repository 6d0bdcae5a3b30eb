# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Mutation intents and outcomes exchanged between drag handling and the store.

A drag gesture is first turned into a :class:`MutationIntent` (what should
happen, bound to a destination parent and index) and then applied. The result
reported back to the interaction layer is always one of two values:

- :class:`Applied`: the move was committed, carries the new tree value.
- :class:`Rejected`: nothing changed, carries a :class:`RejectReason`.

Example:
    >>> outcome = board.drag_end('wbs-2-1', 'wbs-3')
    >>> if outcome.applied:
    ...     print(outcome.tree.count())
    ... else:
    ...     print(outcome.reason.value)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Hashable, Union

if TYPE_CHECKING:
    from .node import WbsTree


class RejectReason(str, Enum):
    """Why a drag was turned down."""

    NOT_FOUND = 'not-found'
    SELF_MOVE = 'self-move'
    CYCLIC_MOVE = 'cyclic-move'
    DIFFERENT_LEVEL = 'different-level'
    AMBIGUOUS_DROP = 'ambiguous-drop'


class IntentKind(str, Enum):
    """Placement of the dragged node relative to the anchor node."""

    MOVE_BEFORE = 'before'
    MOVE_AFTER = 'after'
    MOVE_INSIDE = 'inside'


@dataclass(frozen=True)
class MutationIntent:
    """A resolved move request.

    Attributes:
        kind: Placement relative to ``anchor_id``.
        source_id: Id of the dragged node.
        anchor_id: Node the placement refers to (a sibling for before/after,
            the new parent for inside).
        parent_id: Destination parent, ``None`` for the root list.
        index: Insertion index in the destination children, computed as if
            the source were already detached.
    """

    kind: IntentKind
    source_id: Hashable
    anchor_id: Hashable
    parent_id: Hashable | None
    index: int


@dataclass(frozen=True)
class Applied:
    """Outcome of a committed move."""

    tree: WbsTree
    intent: MutationIntent | None = None

    applied = True


@dataclass(frozen=True)
class Rejected:
    """Outcome of a drag that left everything untouched."""

    reason: RejectReason
    detail: str = ''

    applied = False

    def __str__(self) -> str:
        if self.detail:
            return f"{self.reason.value}: {self.detail}"
        return self.reason.value


MutationOutcome = Union[Applied, Rejected]


def reject(reason: RejectReason, detail: Any = '') -> Rejected:
    """Shortcut used by policies to build a :class:`Rejected` outcome."""
    return Rejected(reason, str(detail) if detail else '')
