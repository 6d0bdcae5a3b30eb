# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""WbsTree configuration."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

POLICY_FREE = 'free'
POLICY_SIBLING = 'sibling'

_POLICIES = (POLICY_FREE, POLICY_SIBLING)


@dataclass
class WbsTreeConfig:
    """Settings shared by the store, the drag interpreter and the board.

    Attributes:
        indentation_width: Horizontal pointer offset that counts as one
            indentation level when dragging with the free policy.
        policy: Default mutation policy, 'free' or 'sibling'.
        children_key: Key holding child lists in snapshot literals.
        check_invariants: Verify node count and id set after every commit.

    Example:
        >>> config = WbsTreeConfig.from_mapping({'policy': 'sibling'})
        >>> config.indentation_width
        24.0
    """

    indentation_width: float = 24.0
    policy: str = POLICY_FREE
    children_key: str = 'children'
    check_invariants: bool = True

    def __post_init__(self) -> None:
        self.indentation_width = float(self.indentation_width)
        if self.indentation_width <= 0:
            raise ValueError(
                f"indentation_width must be positive, not {self.indentation_width}"
            )
        if self.policy not in _POLICIES:
            raise ValueError(
                f"policy must be one of {', '.join(_POLICIES)}, not {self.policy!r}"
            )
        if not self.children_key:
            raise ValueError("children_key cannot be empty")

    @classmethod
    def from_mapping(cls, source: Mapping[str, Any] | None) -> WbsTreeConfig:
        """Build a config from a mapping, ignoring unknown keys.

        Args:
            source: Mapping of setting names to values, or None for defaults.

        Returns:
            A validated WbsTreeConfig.

        Raises:
            ValueError: If a known setting has an invalid value.
        """
        if not source:
            return cls()
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in source.items() if k in known})
