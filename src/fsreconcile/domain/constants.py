from __future__ import annotations

"""
Domain Constants.

Centralizes the numeric failure codes raised by the structure engine,
the default permission masks applied to newly declared nodes and the
application identity used for persistent data.
"""

from typing import Dict

APP_VERSION = "1.0.0"
CURRENT_CONFIG_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# DEFAULT PERMISSIONS
# -----------------------------------------------------------------------------

DEFAULT_FILE_PERMISSION = "0664"
DEFAULT_DIRECTORY_PERMISSION = "2775"

# -----------------------------------------------------------------------------
# NODE TYPE REGISTRY KEYS
# -----------------------------------------------------------------------------

NODE_TYPE_DIRECTORY = "directory"
NODE_TYPE_FILE = "file"

# -----------------------------------------------------------------------------
# FAILURE CODES
# -----------------------------------------------------------------------------

# Node (shared)
ERR_PERMISSION_ALREADY_CORRECT = 1366744035
ERR_PATH_NOT_BELOW_ROOT = 1366398198

# FileNode
ERR_FILE_PARENT_MISSING = 1366927513
ERR_FILE_NAME_HAS_SEPARATOR = 1366222207
ERR_FILE_BOTH_CONTENT_SOURCES = 1380364361
ERR_FILE_CONTENT_SOURCE_MISSING = 1380364362
ERR_FILE_ALREADY_EXISTS = 1366398198
ERR_CONTENT_CHECK_NOT_A_FILE = 1367056363
ERR_SET_CONTENT_NOT_A_FILE = 1367060201
ERR_SET_CONTENT_NO_TARGET = 1367060202

# DirectoryNode
ERR_DIRECTORY_PARENT_MISSING = 1366222203
ERR_DIRECTORY_NAME_HAS_SEPARATOR = 1366226639
ERR_CHILD_TYPE_MISSING = 1366222204
ERR_CHILD_NAME_MISSING = 1366222205
ERR_CHILD_NAME_NOT_UNIQUE = 1366222206
ERR_CHILD_TYPE_UNKNOWN = 1366222208
ERR_DIRECTORY_ALREADY_EXISTS = 1366740091

# RootNode
ERR_ROOT_PATH_INVALID = 1366141329

# Factory
ERR_DESCRIPTION_INVALID = 1366975001

ERROR_CODE_NAMES: Dict[int, str] = {
    ERR_PERMISSION_ALREADY_CORRECT: "permission_already_correct",
    ERR_PATH_NOT_BELOW_ROOT: "path_not_below_root",
    ERR_FILE_PARENT_MISSING: "file_parent_missing",
    ERR_FILE_NAME_HAS_SEPARATOR: "file_name_has_separator",
    ERR_FILE_BOTH_CONTENT_SOURCES: "file_both_content_sources",
    ERR_FILE_CONTENT_SOURCE_MISSING: "file_content_source_missing",
    ERR_CONTENT_CHECK_NOT_A_FILE: "content_check_not_a_file",
    ERR_SET_CONTENT_NOT_A_FILE: "set_content_not_a_file",
    ERR_SET_CONTENT_NO_TARGET: "set_content_no_target",
    ERR_DIRECTORY_PARENT_MISSING: "directory_parent_missing",
    ERR_DIRECTORY_NAME_HAS_SEPARATOR: "directory_name_has_separator",
    ERR_CHILD_TYPE_MISSING: "child_type_missing",
    ERR_CHILD_NAME_MISSING: "child_name_missing",
    ERR_CHILD_NAME_NOT_UNIQUE: "child_name_not_unique",
    ERR_CHILD_TYPE_UNKNOWN: "child_type_unknown",
    ERR_DIRECTORY_ALREADY_EXISTS: "directory_already_exists",
    ERR_ROOT_PATH_INVALID: "root_path_invalid",
    ERR_DESCRIPTION_INVALID: "description_invalid",
}
