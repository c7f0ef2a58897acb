from __future__ import annotations

"""
Directory Structure Node.

Owns an ordered collection of child nodes and composes their reports
with its own existence, type, writability and permission checks. A
missing directory is created before its children are repaired, since
nothing can be created inside a missing parent.
"""

import logging
import os
from typing import Any, Dict, List, Mapping, Optional, Sequence, Type, Union

from fsreconcile.core.structure.file_node import FileNode
from fsreconcile.core.structure.node import Node, is_single_segment
from fsreconcile.domain import status_models
from fsreconcile.domain.constants import (
    ERR_CHILD_NAME_MISSING,
    ERR_CHILD_NAME_NOT_UNIQUE,
    ERR_CHILD_TYPE_MISSING,
    ERR_CHILD_TYPE_UNKNOWN,
    ERR_DIRECTORY_ALREADY_EXISTS,
    ERR_DIRECTORY_NAME_HAS_SEPARATOR,
    ERR_DIRECTORY_PARENT_MISSING,
    NODE_TYPE_DIRECTORY,
    NODE_TYPE_FILE,
)
from fsreconcile.domain.exceptions import InvalidArgumentError
from fsreconcile.domain.status_models import Severity, StatusMessage
from fsreconcile.infra import fs

logger = logging.getLogger(__name__)

NodeType = Union[str, Type[Node]]


class DirectoryNode(Node):
    """
    Expected directory with optional target permission and children.

    Args:
        structure: Description with 'name' and optional 'targetPermission'
                   and 'children' (each child carrying a 'type').
        parent: Containing directory or root node.
    """

    def __init__(self, structure: Mapping[str, Any], parent: Optional[Node] = None) -> None:
        if parent is None:
            raise InvalidArgumentError(
                "Directory node must have parent", ERR_DIRECTORY_PARENT_MISSING
            )
        self._set_parent(parent)

        name = str(structure.get("name", ""))
        if not is_single_segment(name):
            raise InvalidArgumentError(
                f"Directory name '{name}' must be a single path segment",
                ERR_DIRECTORY_NAME_HAS_SEPARATOR,
            )
        self._name = name
        self._target_permission = structure.get("targetPermission")

        self._children: List[Node] = build_children(structure.get("children") or [], self)

    def get_children(self) -> List[Node]:
        return list(self._children)

    # -------------------------------------------------------------------------
    # STATUS
    # -------------------------------------------------------------------------

    def get_status(self) -> List[StatusMessage]:
        result: List[StatusMessage] = []
        if not self.exists():
            result.append(status_models.warning(
                f"Directory {self.get_relative_path_below_site_root()} does not exist",
                "The directory does not exist. It can be created by a fix pass.",
            ))
        else:
            result.extend(self._get_self_status())
        result.extend(self._get_children_status())
        return result

    def _get_self_status(self) -> List[StatusMessage]:
        relative = self.get_relative_path_below_site_root()

        if not self.is_directory():
            return [status_models.error(
                f"Path {relative} is not a directory",
                f"The target {relative} should be a directory, but is of another type. "
                "This cannot be fixed automatically, manual action is required.",
            )]
        if not self.is_writable():
            return [status_models.error(
                f"Directory {relative} is not writable",
                "Files can not be created inside this directory.",
            )]
        if not self.is_permission_correct():
            return [status_models.notice(
                f"Permission mismatch on {relative}",
                f"Target permission is {self.get_target_permission()}, "
                f"current permission is {self.get_current_permission()}.",
            )]
        return [status_models.ok(
            f"Directory {relative}",
            "Is a directory with the expected permission and is writable.",
        )]

    def _get_children_status(self) -> List[StatusMessage]:
        result: List[StatusMessage] = []
        for child in self._children:
            result.extend(child.get_status())
        return result

    # -------------------------------------------------------------------------
    # REPAIR
    # -------------------------------------------------------------------------

    def fix(self) -> List[StatusMessage]:
        result = self.fix_self()
        for child in self._children:
            result.extend(child.fix())
        return result

    def fix_self(self) -> List[StatusMessage]:
        result: List[StatusMessage] = []

        if not self.exists():
            created = self.create_directory()
            result.append(created)
            if created.severity == Severity.OK and not self.is_permission_correct():
                result.append(self.fix_permission())
        elif not self.is_directory():
            relative = self.get_relative_path_below_site_root()
            result.append(status_models.error(
                f"Path {relative} is not a directory",
                "The path exists but is not a directory. Remove or rename the "
                "entry manually, then run the fix again.",
            ))
        elif not self.is_permission_correct():
            result.append(self.fix_permission())
        elif not self.is_writable():
            relative = self.get_relative_path_below_site_root()
            result.append(status_models.error(
                f"Directory {relative} is not writable",
                "The directory has the expected permission, but the process can "
                "still not write to it. Check ownership and mount options.",
            ))

        return result

    def create_directory(self) -> StatusMessage:
        """
        Create the directory (single level, the parent must exist).

        Raises:
            InvalidArgumentError: If the path already exists.
        """
        path = self.get_absolute_path()
        if self.exists():
            raise InvalidArgumentError(
                f"Directory {path} already exists", ERR_DIRECTORY_ALREADY_EXISTS
            )

        relative = self.get_relative_path_below_site_root()
        try:
            os.mkdir(path)
        except OSError as e:
            logger.warning(f"Creating directory {path} failed: {e}")
            return status_models.error(
                f"Directory {relative} not created",
                "The directory could not be created. Check the permissions of "
                "the parent directory.",
            )

        logger.info(f"Created directory {path}")
        return status_models.ok(f"Directory {relative} successfully created.")

    # -------------------------------------------------------------------------
    # CHECKS
    # -------------------------------------------------------------------------

    def is_directory(self) -> bool:
        """True for a real directory; a symlink to one does not count."""
        path = self.get_absolute_path()
        return os.path.isdir(path) and not os.path.islink(path)

    def is_writable(self) -> bool:
        """
        Terminate the writability delegation with a real probe.

        A missing directory, or one that is not a directory, is never
        writable.
        """
        if not self.exists() or not self.is_directory():
            return False
        return fs.can_create_file_in(self.get_absolute_path())


# -----------------------------------------------------------------------------
# NODE TYPE REGISTRY
# -----------------------------------------------------------------------------

NODE_TYPES: Dict[str, Type[Node]] = {
    NODE_TYPE_DIRECTORY: DirectoryNode,
    NODE_TYPE_FILE: FileNode,
}


def build_children(structure: Sequence[Mapping[str, Any]], parent: Node) -> List[Node]:
    """
    Build child nodes in declaration order, enforcing unique names.

    Args:
        structure: Child descriptions, each with at least "type" and "name".
        parent: Node the children are attached to.

    Raises:
        InvalidArgumentError: On a missing type or name, a duplicate name
                              or an unknown type.
    """
    children: List[Node] = []
    for child in structure:
        if "type" not in child:
            raise InvalidArgumentError("Child must have type", ERR_CHILD_TYPE_MISSING)
        if "name" not in child:
            raise InvalidArgumentError("Child must have name", ERR_CHILD_NAME_MISSING)

        name = child["name"]
        if any(existing.get_name() == name for existing in children):
            raise InvalidArgumentError(
                f"Child name '{name}' must be unique in {parent.get_name()}",
                ERR_CHILD_NAME_NOT_UNIQUE,
            )

        node_class = resolve_node_type(child["type"])
        children.append(node_class(child, parent))
    return children


def resolve_node_type(node_type: NodeType) -> Type[Node]:
    """
    Map a description 'type' value to a concrete node class.

    Accepts a registry key ('directory', 'file') or a Node subclass.

    Raises:
        InvalidArgumentError: If the type is not known.
    """
    if isinstance(node_type, type) and issubclass(node_type, Node):
        return node_type
    if isinstance(node_type, str) and node_type.strip().lower() in NODE_TYPES:
        return NODE_TYPES[node_type.strip().lower()]
    raise InvalidArgumentError(f"Unknown node type '{node_type}'", ERR_CHILD_TYPE_UNKNOWN)
