from __future__ import annotations

"""
Structure Facade.

Single entry point for whole-tree status and fix passes. Holds the root
anchor and the top-level nodes, which it owns.
"""

import logging
from typing import List, Sequence

from fsreconcile.core.services.status_utility import count_by_severity
from fsreconcile.core.structure.node import Node
from fsreconcile.core.structure.root_node import RootNode
from fsreconcile.domain.status_models import StatusMessage

logger = logging.getLogger(__name__)


class StructureFacade:
    """
    Aggregates status and fix reports over a complete structure tree.

    Args:
        root: Root anchor of the tree.
        children: Top-level nodes, in the order they are checked and fixed.
    """

    def __init__(self, root: RootNode, children: Sequence[Node] = ()) -> None:
        self._root = root
        self._children: List[Node] = list(children)

    @property
    def root(self) -> RootNode:
        return self._root

    @property
    def children(self) -> List[Node]:
        return list(self._children)

    def get_status(self) -> List[StatusMessage]:
        """Root status followed by every top-level subtree's status."""
        result = self._root.get_status()
        for child in self._children:
            result.extend(child.get_status())
        logger.info(f"Status of {self._root.get_absolute_path()}: {_summary(result)}")
        return result

    def fix(self) -> List[StatusMessage]:
        """Fix every top-level subtree in order; the root itself is left alone."""
        result = self._root.fix()
        for child in self._children:
            result.extend(child.fix())
        logger.info(f"Fix of {self._root.get_absolute_path()}: {_summary(result)}")
        return result


def _summary(messages: List[StatusMessage]) -> str:
    counts = count_by_severity(messages)
    return ", ".join(f"{name}={n}" for name, n in counts.items() if n) or "no messages"
