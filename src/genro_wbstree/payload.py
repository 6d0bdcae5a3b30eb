# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Work item payload carried by WBS nodes.

Any object can be a node payload. WbsItem is the one used by the work
breakdown views: a task name, a status and a completion percentage.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class WbsStatus(str, Enum):
    NOT_STARTED = 'not-started'
    IN_PROGRESS = 'in-progress'
    COMPLETED = 'completed'

    @property
    def label(self) -> str:
        """Human readable status, e.g. 'In Progress'."""
        return self.value.replace('-', ' ').title()


@dataclass(frozen=True)
class WbsItem:
    """A task in the work breakdown structure.

    Example:
        >>> item = WbsItem.from_dict({'name': 'QA', 'status': 'in-progress', 'progress': 40})
        >>> item.status.label
        'In Progress'
    """

    name: str
    status: WbsStatus = WbsStatus.NOT_STARTED
    progress: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.status, WbsStatus):
            object.__setattr__(self, 'status', WbsStatus(self.status))
        if not 0 <= self.progress <= 100:
            raise ValueError(f"progress must be within 0-100, not {self.progress}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WbsItem:
        """Build a WbsItem from a snapshot payload mapping.

        Unknown keys are ignored.
        """
        return cls(
            name=data['name'],
            status=data.get('status', WbsStatus.NOT_STARTED),
            progress=int(data.get('progress', 0)),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            'name': self.name,
            'status': self.status.value,
            'progress': self.progress,
        }
