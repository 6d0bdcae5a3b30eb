# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-WbsTree - Work breakdown structures with drag-driven editing.

A lightweight, zero-dependency library providing an ordered hierarchical
tree with reorder/reparent/indent moves, WBS numbering and collapse-aware
row projection for the Genro ecosystem (Genro Kyō).
"""

__version__ = "0.1.0"

from .board import WbsBoard
from .collapse import CollapseState
from .config import WbsTreeConfig
from .drag import (
    DragInterpreter,
    DragSession,
    DragState,
    FreeReparentPolicy,
    MutationPolicy,
    SiblingOnlyPolicy,
)
from .exceptions import (
    CyclicMoveError,
    InvariantViolationError,
    MoveError,
    NodeNotFoundError,
    SelfMoveError,
    SnapshotError,
    WbsTreeError,
)
from .node import WbsNode, WbsTree
from .numbering import NumberingEngine, compute_wbs_codes, parse_code
from .outcome import (
    Applied,
    IntentKind,
    MutationIntent,
    MutationOutcome,
    Rejected,
    RejectReason,
)
from .payload import WbsItem, WbsStatus
from .projection import ViewProjector, VisibleRow
from .store import TreeStore

__all__ = [
    # Core classes
    "TreeStore",
    "WbsNode",
    "WbsTree",
    "WbsBoard",
    "WbsTreeConfig",
    # Derived views
    "NumberingEngine",
    "compute_wbs_codes",
    "parse_code",
    "CollapseState",
    "ViewProjector",
    "VisibleRow",
    # Drag handling
    "DragInterpreter",
    "DragSession",
    "DragState",
    "MutationPolicy",
    "FreeReparentPolicy",
    "SiblingOnlyPolicy",
    # Outcomes
    "Applied",
    "Rejected",
    "RejectReason",
    "IntentKind",
    "MutationIntent",
    "MutationOutcome",
    # Payload
    "WbsItem",
    "WbsStatus",
    # Exceptions
    "WbsTreeError",
    "NodeNotFoundError",
    "MoveError",
    "SelfMoveError",
    "CyclicMoveError",
    "SnapshotError",
    "InvariantViolationError",
]
