# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Drag session state machine.

States and transitions::

    IDLE --start--> DRAGGING --move--> DRAGGING
    DRAGGING --end--> APPLYING --> IDLE
    DRAGGING --cancel--> CANCELLED --> IDLE

Only discrete events drive the machine. ``end`` and ``cancel`` outside a
drag are harmless no-ops, so a stray drop notification never moves a node.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable, Hashable

from ..outcome import MutationOutcome, RejectReason, reject

if TYPE_CHECKING:
    from .interpreter import DragInterpreter

logger = logging.getLogger(__name__)


class DragState(str, Enum):
    IDLE = 'idle'
    DRAGGING = 'dragging'
    APPLYING = 'applying'
    CANCELLED = 'cancelled'


class DragSession:
    """Tracks one drag gesture at a time and applies it on end.

    Example:
        >>> session = DragSession(interpreter)
        >>> session.start('D')
        >>> session.move('C', offset_x=30)
        >>> session.end().applied
        True
        >>> session.state
        <DragState.IDLE: 'idle'>
    """

    __slots__ = (
        '_interpreter', '_on_applied', 'state', 'source_id', 'over_id',
        'offset_x', 'pointer_ratio', 'last_state',
    )

    def __init__(
        self,
        interpreter: DragInterpreter,
        on_applied: Callable[[MutationOutcome], None] | None = None,
    ) -> None:
        """Initialize a DragSession.

        Args:
            interpreter: Resolves and applies the drop.
            on_applied: Called with the outcome after a move is committed.
        """
        self._interpreter = interpreter
        self._on_applied = on_applied
        self.state = DragState.IDLE
        self.last_state: DragState | None = None
        self._clear()

    def __repr__(self) -> str:
        return f"DragSession(state={self.state.value}, source={self.source_id!r})"

    def _clear(self) -> None:
        self.source_id: Hashable | None = None
        self.over_id: Hashable | None = None
        self.offset_x = 0.0
        self.pointer_ratio: float | None = None

    def _finish(self, final_state: DragState) -> None:
        self.last_state = final_state
        self.state = DragState.IDLE
        self._clear()

    @property
    def is_dragging(self) -> bool:
        return self.state is DragState.DRAGGING

    def start(self, source_id: Hashable) -> None:
        """Begin dragging source_id. A drag already in progress is cancelled."""
        if self.state is DragState.APPLYING:
            raise RuntimeError("Cannot start a drag while a drop is being applied")
        if self.is_dragging:
            logger.warning("Drag of %r restarted before it ended", self.source_id)
            self.cancel()
        self._clear()
        self.source_id = source_id
        self.state = DragState.DRAGGING

    def move(
        self,
        over_id: Hashable | None,
        offset_x: float = 0.0,
        pointer_ratio: float | None = None,
    ) -> None:
        """Record the row under the pointer and the pointer offsets.

        Ignored when no drag is in progress.
        """
        if not self.is_dragging:
            return
        self.over_id = over_id
        self.offset_x = offset_x
        self.pointer_ratio = pointer_ratio

    def end(self) -> MutationOutcome:
        """Finish the drag and apply the drop.

        Returns:
            The outcome. Without a drag in progress, a Rejected outcome and
            no change.
        """
        if not self.is_dragging:
            return reject(RejectReason.AMBIGUOUS_DROP, "no drag in progress")
        self.state = DragState.APPLYING
        try:
            outcome = self._interpreter.drop(
                self.source_id, self.over_id, self.offset_x, self.pointer_ratio
            )
        finally:
            self._finish(DragState.APPLYING)
        if outcome.applied and self._on_applied is not None:
            self._on_applied(outcome)
        return outcome

    def cancel(self) -> None:
        """Abort the drag without touching the tree."""
        if not self.is_dragging:
            return
        self.state = DragState.CANCELLED
        logger.debug("Drag of %r cancelled", self.source_id)
        self._finish(DragState.CANCELLED)
