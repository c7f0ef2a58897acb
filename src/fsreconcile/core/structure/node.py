from __future__ import annotations

"""
Abstract Structure Node.

Models one entry of the expected filesystem tree. Holds the state shared
by every node kind (name, parent, target permission) and implements the
operations that do not depend on the entry type: path resolution, the
permission comparison and the permission repair.

Ownership flows strictly downward: a directory owns its children, while
each child keeps only a weak reference to its parent directory for path
computation. A root anchor owns nothing, so nodes attached directly to a
root hold it strongly.
"""

import logging
import os
import stat
import weakref
from abc import ABC, abstractmethod
from typing import List, Optional

from fsreconcile.domain import status_models
from fsreconcile.domain.constants import (
    ERR_PATH_NOT_BELOW_ROOT,
    ERR_PERMISSION_ALREADY_CORRECT,
)
from fsreconcile.domain.exceptions import InvalidArgumentError, StructureError
from fsreconcile.domain.status_models import StatusMessage
from fsreconcile.infra import fs

logger = logging.getLogger(__name__)


class Node(ABC):
    """
    Capability interface and shared behavior of every structure node.

    Concrete kinds set '_name', '_target_permission' and attach their
    parent through '_set_parent' during construction. Nodes are immutable
    afterwards: every check re-reads the filesystem.
    """

    _name: str = ""
    _target_permission: Optional[str] = None
    _parent_ref: Optional["weakref.ReferenceType[Node]"] = None
    _anchor: Optional[Node] = None

    # -------------------------------------------------------------------------
    # STATE ACCESSORS
    # -------------------------------------------------------------------------

    def get_name(self) -> str:
        return self._name

    @property
    def name(self) -> str:
        return self._name

    def get_target_permission(self) -> Optional[str]:
        return self._target_permission

    def get_parent(self) -> Optional[Node]:
        """
        Resolve the parent reference.

        Raises:
            ReferenceError: If the owning directory was already released.
        """
        if self._anchor is not None:
            return self._anchor
        if self._parent_ref is None:
            return None
        parent = self._parent_ref()
        if parent is None:
            raise ReferenceError(f"Parent of node '{self._name}' is no longer alive.")
        return parent

    def get_children(self) -> List[Node]:
        return []

    def _set_parent(self, parent: Node) -> None:
        # Anchors have no parent and hold no children: a strong link cannot cycle
        if parent.get_parent() is None:
            self._anchor = parent
        else:
            self._parent_ref = weakref.ref(parent)

    # -------------------------------------------------------------------------
    # PATH RESOLUTION
    # -------------------------------------------------------------------------

    def get_absolute_path(self) -> str:
        """Parent's absolute path joined with this node's name."""
        return self.get_parent().get_absolute_path().rstrip("/") + "/" + self._name

    def get_root(self) -> Node:
        """Walk up the parent chain to the anchoring root node."""
        return self.get_parent().get_root()

    def get_relative_path_below_site_root(self, path: Optional[str] = None) -> str:
        """
        Express a path relative to the installation base path.

        Args:
            path: Absolute path to convert. Defaults to this node's path.

        Returns:
            str: '/' for the base path itself, otherwise '/sub/path'.

        Raises:
            InvalidArgumentError: If the path does not lie below the base path.
        """
        if path is None:
            path = self.get_absolute_path()
        base = self.get_root().get_absolute_path().rstrip("/")

        if path != base and not path.startswith(base + "/"):
            raise InvalidArgumentError(
                f"Path {path} is not below the base path {base or '/'}",
                ERR_PATH_NOT_BELOW_ROOT,
            )

        relative = path[len(base):]
        if not relative or relative == "/":
            return "/"
        return relative

    # -------------------------------------------------------------------------
    # FILESYSTEM STATE
    # -------------------------------------------------------------------------

    def is_writable(self) -> bool:
        """
        Delegate the writability question to the containing node.

        Whether a node can be created or modified depends on its parent
        directory. Directory and root nodes terminate the chain with a
        real probe.
        """
        return self.get_parent().is_writable()

    def exists(self) -> bool:
        """True for any existing entry, including a dangling symlink."""
        return os.path.lexists(self.get_absolute_path())

    def is_windows_os(self) -> bool:
        return fs.is_windows_os()

    def get_current_permission(self) -> str:
        """Return the low four octal digits of the mode, e.g. '2775'."""
        mode = os.stat(self.get_absolute_path()).st_mode
        return format(stat.S_IMODE(mode), "04o")

    def is_permission_correct(self) -> bool:
        """
        Exact comparison of current and target permission strings.

        Always true without a POSIX permission model, and for nodes that
        declare no target permission.
        """
        if self.is_windows_os():
            return True
        if self.get_target_permission() is None:
            return True
        return self.get_current_permission() == self.get_target_permission()

    def fix_permission(self) -> StatusMessage:
        """
        Apply the target permission to the node's path.

        Never call this on a node whose permission is already correct.

        Returns:
            StatusMessage: OK if the target mode is in effect afterwards,
                           NOTICE if it could not be (fully) applied.

        Raises:
            StructureError: If the permission is already correct.
        """
        if self.is_permission_correct():
            raise StructureError(
                f"Permission on {self.get_absolute_path()} is already ok",
                ERR_PERMISSION_ALREADY_CORRECT,
            )

        path = self.get_absolute_path()
        target = self.get_target_permission() or ""
        relative = self.get_relative_path_below_site_root()

        try:
            os.chmod(path, int(target, 8))
            current = self.get_current_permission()
        except (OSError, ValueError) as e:
            logger.warning(f"Permission change on {path} to {target} failed: {e}")
            current = ""

        if current == target:
            logger.info(f"Fixed permission on {path} ({target})")
            return status_models.ok(f"Fixed permission on {relative}.")

        logger.warning(f"Permission on {path} is {current or 'unknown'} instead of {target}")
        return status_models.notice(
            f"Permission change on {relative} not successful",
            "Permissions of the path could not be changed. Current permission is "
            f"{current or 'unknown'}, target permission is {target}. This is not a "
            "problem as long as the web server user can write to the path; "
            "ownership or ACL restrictions may prevent the change.",
        )

    # -------------------------------------------------------------------------
    # STATUS / REPAIR CONTRACT
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_status(self) -> List[StatusMessage]:
        """Report discrepancies between expected and actual state."""

    @abstractmethod
    def fix(self) -> List[StatusMessage]:
        """Attempt to repair discrepancies and report what happened."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"


def is_single_segment(name: str) -> bool:
    """True if a node name denotes exactly one entry inside its parent."""
    if name in ("", ".", ".."):
        return False
    return "/" not in name and os.sep not in name
