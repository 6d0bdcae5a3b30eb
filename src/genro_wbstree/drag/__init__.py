# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Drag handling - policies, interpreter and the drag state machine."""

from .interpreter import DragInterpreter
from .policies import (
    POLICIES,
    DragContext,
    FreeReparentPolicy,
    MutationPolicy,
    SiblingOnlyPolicy,
    get_policy,
)
from .session import DragSession, DragState

__all__ = [
    'DragInterpreter',
    'DragContext',
    'MutationPolicy',
    'FreeReparentPolicy',
    'SiblingOnlyPolicy',
    'POLICIES',
    'get_policy',
    'DragSession',
    'DragState',
]
