# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeStore package - owner of the work breakdown hierarchy.

The package is organized into:
- core: TreeStore class with queries, the move primitive and reset
- loading: Functions converting forest literals to and from WbsTree values
- subscription: Change notification mixin

Example:
    >>> from genro_wbstree import TreeStore
    >>> store = TreeStore([{'id': 'a', 'children': [{'id': 'b'}]}, {'id': 'c'}])
    >>> store.move_node('b', None, 1)
    >>> [node.id for node in store]
    ['a', 'b', 'c']
"""

from .core import TreeStore
from .loading import dump_forest, load_forest
from .subscription import SubscriberCallback, SubscriptionMixin

__all__ = [
    "TreeStore",
    "load_forest",
    "dump_forest",
    "SubscriptionMixin",
    "SubscriberCallback",
]
