from __future__ import annotations

"""
File Structure Node.

A leaf of the expected tree. Adds regular-file type checking and the
optional target content on top of the shared node behavior, together with
the repair state machine for missing files, foreign entries, wrong
permissions and wrong content.
"""

import logging
import os
from typing import Any, List, Mapping, Optional, Union

from fsreconcile.core.structure.node import Node, is_single_segment
from fsreconcile.domain import status_models
from fsreconcile.domain.constants import (
    ERR_CONTENT_CHECK_NOT_A_FILE,
    ERR_FILE_ALREADY_EXISTS,
    ERR_FILE_BOTH_CONTENT_SOURCES,
    ERR_FILE_CONTENT_SOURCE_MISSING,
    ERR_FILE_NAME_HAS_SEPARATOR,
    ERR_FILE_PARENT_MISSING,
    ERR_SET_CONTENT_NO_TARGET,
    ERR_SET_CONTENT_NOT_A_FILE,
)
from fsreconcile.domain.exceptions import InvalidArgumentError, StructureError
from fsreconcile.domain.status_models import Severity, StatusMessage

logger = logging.getLogger(__name__)


class FileNode(Node):
    """
    Expected regular file with optional target permission and content.

    Args:
        structure: Description with 'name' and optional 'targetPermission',
                   'targetContent' or 'targetContentFile'.
        parent: Containing directory or root node.
    """

    def __init__(self, structure: Mapping[str, Any], parent: Optional[Node] = None) -> None:
        if parent is None:
            raise InvalidArgumentError("File node must have parent", ERR_FILE_PARENT_MISSING)
        self._set_parent(parent)

        name = str(structure.get("name", ""))
        if not is_single_segment(name):
            raise InvalidArgumentError(
                f"File name '{name}' must be a single path segment",
                ERR_FILE_NAME_HAS_SEPARATOR,
            )
        self._name = name
        self._target_permission = structure.get("targetPermission")

        content = structure.get("targetContent")
        content_file = structure.get("targetContentFile")
        if content is not None and content_file is not None:
            raise InvalidArgumentError(
                "Either targetContent or targetContentFile can be set, but not both",
                ERR_FILE_BOTH_CONTENT_SOURCES,
            )

        self._target_content: Optional[bytes] = None
        if content is not None:
            self._target_content = _as_bytes(content)
        elif content_file is not None:
            if not os.path.isfile(content_file):
                raise InvalidArgumentError(
                    f"targetContentFile {content_file} does not exist",
                    ERR_FILE_CONTENT_SOURCE_MISSING,
                )
            with open(content_file, "rb") as f:
                self._target_content = f.read()

    def get_target_content(self) -> Optional[bytes]:
        return self._target_content

    # -------------------------------------------------------------------------
    # STATUS
    # -------------------------------------------------------------------------

    def get_status(self) -> List[StatusMessage]:
        """
        Report the file state.

        Existence and type short-circuit every other check. An existing
        regular file gets one NOTICE per failing check (writability,
        permission, content) or a single OK.
        """
        if not self.exists():
            return [status_models.warning(
                f"File {self.get_relative_path_below_site_root()} does not exist",
                "By default this file should exist. It can be created by a fix pass.",
            )]
        return self._get_self_status()

    def _get_self_status(self) -> List[StatusMessage]:
        relative = self.get_relative_path_below_site_root()

        if not self.is_file():
            return [status_models.error(
                f"Path {relative} is not a file",
                f"The target {relative} should be a file, but is of another type. "
                "This cannot be fixed automatically, manual action is required.",
            )]

        result: List[StatusMessage] = []
        if not self.is_writable():
            result.append(status_models.notice(
                f"File {relative} is not writable",
                "The file exists, but its containing directory does not allow changes.",
            ))
        if not self.is_permission_correct():
            result.append(status_models.notice(
                f"Permission mismatch on {relative}",
                f"Target permission is {self.get_target_permission()}, "
                f"current permission is {self.get_current_permission()}.",
            ))
        if not self.is_content_correct():
            result.append(status_models.notice(
                f"File content of {relative} not as expected",
                "The file exists, but its content differs from the expected content. "
                "It may have been changed manually.",
            ))

        if not result:
            result.append(status_models.ok(
                f"File {relative}",
                "Is a file with the expected permission and content.",
            ))
        return result

    # -------------------------------------------------------------------------
    # REPAIR
    # -------------------------------------------------------------------------

    def fix(self) -> List[StatusMessage]:
        return self.fix_self()

    def fix_self(self) -> List[StatusMessage]:
        """
        Repair the file itself.

        Missing files are created (and filled when target content is set),
        wrong permissions are fixed. Foreign entries at the path are
        reported and left untouched.
        """
        result: List[StatusMessage] = []

        if not self.exists():
            created = self.create_file()
            result.append(created)
            if created.severity != Severity.ERROR:
                if self._target_content is not None:
                    result.append(self.set_content())
                if not self.is_permission_correct():
                    result.append(self.fix_permission())
        elif not self.is_file():
            relative = self.get_relative_path_below_site_root()
            result.append(status_models.error(
                f"Path {relative} is not a file",
                "The path exists but is not a regular file. Remove or rename the "
                "entry manually, then run the fix again.",
            ))
        elif not self.is_permission_correct():
            result.append(self.fix_permission())

        return result

    def create_file(self) -> StatusMessage:
        """
        Create an empty file at the node's path.

        Raises:
            InvalidArgumentError: If the path already exists.
        """
        path = self.get_absolute_path()
        if self.exists():
            raise InvalidArgumentError(f"File {path} already exists", ERR_FILE_ALREADY_EXISTS)

        relative = self.get_relative_path_below_site_root()
        try:
            with open(path, "xb"):
                pass
        except OSError as e:
            logger.warning(f"Creating file {path} failed: {e}")
            return status_models.error(
                f"File {relative} not created",
                "The file could not be created. Check the permissions of the "
                "containing directory.",
            )

        logger.info(f"Created file {path}")
        return status_models.ok(f"File {relative} successfully created.")

    def set_content(self) -> StatusMessage:
        """
        Overwrite the file with the target content.

        Raises:
            StructureError: If the path is not a file or no content is expected.
        """
        path = self.get_absolute_path()
        if not self.is_file():
            raise StructureError(
                f"File {path} must exist to set its content",
                ERR_SET_CONTENT_NOT_A_FILE,
            )
        if self._target_content is None:
            raise StructureError(
                f"Target content of {path} is not set",
                ERR_SET_CONTENT_NO_TARGET,
            )

        relative = self.get_relative_path_below_site_root()
        try:
            with open(path, "wb") as f:
                f.write(self._target_content)
        except OSError as e:
            logger.warning(f"Writing content to {path} failed: {e}")
            return status_models.error(
                f"Setting content to file {relative} failed",
                "The file exists but its content could not be written.",
            )

        logger.info(f"Set content of {path} ({len(self._target_content)} bytes)")
        return status_models.ok(f"Set content to {relative}")

    # -------------------------------------------------------------------------
    # CHECKS
    # -------------------------------------------------------------------------

    def is_file(self) -> bool:
        """True for a regular file; a symlink never counts, whatever its target."""
        path = self.get_absolute_path()
        return os.path.isfile(path) and not os.path.islink(path)

    def is_content_correct(self) -> bool:
        """
        Compare the file's bytes with the target content. A file that
        cannot be read counts as mismatching.

        Raises:
            StructureError: If the path is not a regular file.
        """
        path = self.get_absolute_path()
        if not self.is_file():
            raise StructureError(
                f"File {path} can not be checked for content, it is not a file",
                ERR_CONTENT_CHECK_NOT_A_FILE,
            )
        if self._target_content is None:
            return True
        try:
            with open(path, "rb") as f:
                return f.read() == self._target_content
        except OSError as e:
            logger.warning(f"Reading {path} for content comparison failed: {e}")
            return False


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _as_bytes(content: Union[str, bytes]) -> bytes:
    if isinstance(content, bytes):
        return content
    return str(content).encode("utf-8")
