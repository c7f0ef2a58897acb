from __future__ import annotations

"""
Structure Factory.

Turns a declarative structure description into a node tree anchored at
the installation base path. Fills in default permissions for nodes that
do not declare one and provides the stock runtime layout used when no
description file is configured.
"""

import copy
import json
import logging
import os
from typing import Any, Dict, List, Mapping, Optional

from fsreconcile.core.structure.directory_node import build_children
from fsreconcile.core.structure.facade import StructureFacade
from fsreconcile.core.structure.root_node import RootNode
from fsreconcile.domain.constants import (
    DEFAULT_DIRECTORY_PERMISSION,
    DEFAULT_FILE_PERMISSION,
    ERR_DESCRIPTION_INVALID,
    NODE_TYPE_DIRECTORY,
    NODE_TYPE_FILE,
)
from fsreconcile.domain.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# STOCK LAYOUT
# -----------------------------------------------------------------------------

DENY_PAGE = (
    "<!DOCTYPE html>\n"
    "<html>\n"
    "<head><title>Forbidden</title></head>\n"
    "<body><p>Directory listing is not allowed.</p></body>\n"
    "</html>\n"
)

DENY_HTACCESS = (
    "# Deny all direct access to temporary files\n"
    "<IfModule mod_authz_core.c>\n"
    "\tRequire all denied\n"
    "</IfModule>\n"
)


def default_description() -> Dict[str, Any]:
    """
    Return the stock runtime layout of an installation.

    Writable caches, logs and locks below 'var', a 'config' directory and
    a protected temporary directory below the public document root.
    """
    return {
        "children": [
            {
                "name": "var",
                "type": NODE_TYPE_DIRECTORY,
                "children": [
                    {"name": "cache", "type": NODE_TYPE_DIRECTORY},
                    {"name": "log", "type": NODE_TYPE_DIRECTORY},
                    {"name": "lock", "type": NODE_TYPE_DIRECTORY},
                ],
            },
            {"name": "config", "type": NODE_TYPE_DIRECTORY},
            {
                "name": "public",
                "type": NODE_TYPE_DIRECTORY,
                "children": [
                    {
                        "name": "_temp_",
                        "type": NODE_TYPE_DIRECTORY,
                        "children": [
                            {
                                "name": "index.html",
                                "type": NODE_TYPE_FILE,
                                "targetContent": DENY_PAGE,
                            },
                            {
                                "name": ".htaccess",
                                "type": NODE_TYPE_FILE,
                                "targetContent": DENY_HTACCESS,
                            },
                        ],
                    },
                ],
            },
        ],
    }


def load_description(path: str) -> Dict[str, Any]:
    """
    Load a structure description from a JSON file.

    Relative 'targetContentFile' references are resolved against the
    directory holding the description file.

    Args:
        path: Path to the JSON description.

    Returns:
        Dict[str, Any]: The description, ready for StructureFactory.build.

    Raises:
        InvalidArgumentError: If the file is unreadable or not a JSON object.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidArgumentError(
            f"Structure description {path} could not be loaded: {e}",
            ERR_DESCRIPTION_INVALID,
        ) from e

    if not isinstance(data, dict):
        raise InvalidArgumentError(
            f"Structure description {path} must be a JSON object",
            ERR_DESCRIPTION_INVALID,
        )

    base_dir = os.path.dirname(os.path.abspath(path))
    _resolve_content_files(data.get("children") or [], base_dir)
    logger.debug(f"Loaded structure description from {path}")
    return data


# -----------------------------------------------------------------------------
# FACTORY
# -----------------------------------------------------------------------------

class StructureFactory:
    """
    Builds structure trees below a fixed installation base path.

    Args:
        base_path: Absolute installation base path.
        file_permission: Target permission for files that declare none.
        directory_permission: Target permission for directories that declare none.
    """

    def __init__(
            self,
            base_path: str,
            file_permission: str = DEFAULT_FILE_PERMISSION,
            directory_permission: str = DEFAULT_DIRECTORY_PERMISSION,
    ) -> None:
        self._base_path = base_path
        self._file_permission = file_permission
        self._directory_permission = directory_permission

    def build(self, description: Optional[Mapping[str, Any]] = None) -> StructureFacade:
        """
        Construct the node tree for a description.

        Args:
            description: Mapping with a 'children' list. Defaults to the
                         stock runtime layout.

        Returns:
            StructureFacade: Facade owning the root and the top-level nodes.

        Raises:
            InvalidArgumentError: On a malformed description.
            RootNodeError: If the base path cannot anchor a tree.
        """
        if description is None:
            description = default_description()
        if not isinstance(description, Mapping):
            raise InvalidArgumentError(
                "Structure description must be a mapping", ERR_DESCRIPTION_INVALID
            )
        children = description.get("children", [])
        if not isinstance(children, list):
            raise InvalidArgumentError(
                "Structure description 'children' must be a list", ERR_DESCRIPTION_INVALID
            )

        root = RootNode(self._base_path)
        nodes = build_children(self._apply_defaults(children), root)
        logger.debug(f"Built structure with {len(nodes)} top-level nodes below {root.get_absolute_path()}")
        return StructureFacade(root, nodes)

    def _apply_defaults(self, children: List[Any]) -> List[Dict[str, Any]]:
        """Return a copy of the children with default target permissions filled in."""
        out: List[Dict[str, Any]] = []
        for child in children:
            if not isinstance(child, Mapping):
                raise InvalidArgumentError(
                    f"Structure node must be a mapping, received {type(child).__name__}",
                    ERR_DESCRIPTION_INVALID,
                )
            node = copy.deepcopy(dict(child))
            kind = str(node.get("type", "")).strip().lower()
            if kind == NODE_TYPE_DIRECTORY:
                node.setdefault("targetPermission", self._directory_permission)
                node["children"] = self._apply_defaults(node.get("children") or [])
            elif kind == NODE_TYPE_FILE:
                node.setdefault("targetPermission", self._file_permission)
            out.append(node)
        return out


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _resolve_content_files(children: List[Any], base_dir: str) -> None:
    for child in children:
        if not isinstance(child, dict):
            continue
        source = child.get("targetContentFile")
        if isinstance(source, str) and not os.path.isabs(source):
            child["targetContentFile"] = os.path.join(base_dir, source)
        _resolve_content_files(child.get("children") or [], base_dir)
