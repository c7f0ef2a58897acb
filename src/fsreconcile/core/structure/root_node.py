from __future__ import annotations

"""
Root Structure Node.

Terminal ancestor of every tree. Its absolute path is the externally
supplied installation base path; it has no parent, no target permission
and is never repaired.
"""

import logging
import os
from typing import List

from fsreconcile.core.structure.node import Node
from fsreconcile.domain import status_models
from fsreconcile.domain.constants import ERR_ROOT_PATH_INVALID
from fsreconcile.domain.exceptions import RootNodeError
from fsreconcile.domain.status_models import StatusMessage
from fsreconcile.infra import fs

logger = logging.getLogger(__name__)


class RootNode(Node):
    """
    Anchor of a structure tree.

    Args:
        base_path: Absolute installation base path.

    Raises:
        RootNodeError: If the base path is empty or not absolute.
    """

    def __init__(self, base_path: str) -> None:
        path = (base_path or "").strip()
        if not path or not os.path.isabs(path):
            raise RootNodeError(
                f"Root node path '{base_path}' must be an absolute path",
                ERR_ROOT_PATH_INVALID,
            )
        if len(path) > 1:
            path = path.rstrip("/") or "/"
        self._name = path
        self._target_permission = None

    def get_absolute_path(self) -> str:
        return self._name

    def get_root(self) -> Node:
        return self

    def is_writable(self) -> bool:
        """Real probe on the base path; ends every writability delegation."""
        path = self.get_absolute_path()
        if not os.path.isdir(path):
            return False
        return fs.can_create_file_in(path)

    def get_status(self) -> List[StatusMessage]:
        path = self.get_absolute_path()

        if not self.exists():
            return [status_models.error(
                f"Base path {path} does not exist",
                "The installation base path must exist before its structure can be checked.",
            )]
        if not os.path.isdir(path):
            return [status_models.error(
                f"Base path {path} is not a directory",
                "The installation base path must be a directory.",
            )]
        if os.path.islink(path):
            return [status_models.ok(
                f"Base path {path} exists",
                "The base path is a symbolic link to a directory.",
            )]
        return [status_models.ok(f"Base path {path} exists")]

    def fix(self) -> List[StatusMessage]:
        logger.debug(f"Base path {self.get_absolute_path()} is never repaired")
        return []
