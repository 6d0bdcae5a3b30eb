# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""WbsTree exceptions."""

from __future__ import annotations

from typing import Any

from .outcome import RejectReason


class WbsTreeError(Exception):
    """Base exception for WbsTree errors."""

    pass


class NodeNotFoundError(WbsTreeError, KeyError):
    """Raised when a referenced node id is not in the tree."""

    reason = RejectReason.NOT_FOUND

    def __init__(self, node_id: Any) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"Node {self.node_id!r} not found"


class MoveError(WbsTreeError):
    """Base class for structurally invalid moves."""

    reason: RejectReason

    def __init__(self, source_id: Any, parent_id: Any) -> None:
        super().__init__(source_id, parent_id)
        self.source_id = source_id
        self.parent_id = parent_id


class SelfMoveError(MoveError):
    """Raised when a node is moved inside itself."""

    reason = RejectReason.SELF_MOVE

    def __str__(self) -> str:
        return f"Cannot move {self.source_id!r} inside itself"


class CyclicMoveError(MoveError):
    """Raised when a node is moved under one of its own descendants."""

    reason = RejectReason.CYCLIC_MOVE

    def __str__(self) -> str:
        return (
            f"Cannot move {self.source_id!r} under its descendant "
            f"{self.parent_id!r}"
        )


class SnapshotError(WbsTreeError, ValueError):
    """Raised when an initial snapshot literal is malformed."""

    pass


class InvariantViolationError(WbsTreeError, AssertionError):
    """Raised when a committed tree breaks a structural invariant.

    This always points at a defect in the mutation primitives, never at
    bad user input, and is not converted into a rejected outcome.
    """

    pass
