from __future__ import annotations

"""
Unit tests for DirectoryNode.

Verifies child validation, composition of child reports in declaration
order and the create-before-descend repair order.
"""

import os
from pathlib import Path
from typing import Any, Dict, List
from unittest.mock import patch

import pytest

from fsreconcile.core.structure.directory_node import (
    DirectoryNode,
    resolve_node_type,
)
from fsreconcile.core.structure.file_node import FileNode
from fsreconcile.core.structure.root_node import RootNode
from fsreconcile.domain.constants import (
    ERR_CHILD_NAME_MISSING,
    ERR_CHILD_NAME_NOT_UNIQUE,
    ERR_CHILD_TYPE_MISSING,
    ERR_CHILD_TYPE_UNKNOWN,
    ERR_DIRECTORY_ALREADY_EXISTS,
    ERR_DIRECTORY_NAME_HAS_SEPARATOR,
    ERR_DIRECTORY_PARENT_MISSING,
)
from fsreconcile.domain.exceptions import InvalidArgumentError
from fsreconcile.domain.status_models import Severity

posix_only = pytest.mark.skipif(os.name == "nt", reason="Requires POSIX permissions.")


def _tree(children: List[Dict[str, Any]] | None = None, permission: str | None = "0775") -> Dict[str, Any]:
    return {"name": "var", "targetPermission": permission, "children": children or []}


# -----------------------------------------------------------------------------
# CONSTRUCTION
# -----------------------------------------------------------------------------

def test_requires_parent() -> None:
    """TC-01: A directory node cannot exist without a parent."""
    with pytest.raises(InvalidArgumentError) as exc:
        DirectoryNode(_tree())
    assert exc.value.code == ERR_DIRECTORY_PARENT_MISSING


def test_rejects_name_with_separator() -> None:
    """TC-02: Directory names are single path segments."""
    with pytest.raises(InvalidArgumentError) as exc:
        DirectoryNode({"name": "var/cache"}, RootNode("/srv/site"))
    assert exc.value.code == ERR_DIRECTORY_NAME_HAS_SEPARATOR


@pytest.mark.parametrize(
    "children, code",
    [
        ([{"name": "cache"}], ERR_CHILD_TYPE_MISSING),
        ([{"type": "directory"}], ERR_CHILD_NAME_MISSING),
        (
            [{"name": "cache", "type": "directory"}, {"name": "cache", "type": "file"}],
            ERR_CHILD_NAME_NOT_UNIQUE,
        ),
        ([{"name": "cache", "type": "socket"}], ERR_CHILD_TYPE_UNKNOWN),
    ],
)
def test_rejects_malformed_children(children: List[Dict[str, Any]], code: int) -> None:
    """TC-03: Malformed child descriptions fail construction with a stable code."""
    with pytest.raises(InvalidArgumentError) as exc:
        DirectoryNode(_tree(children), RootNode("/srv/site"))
    assert exc.value.code == code


def test_children_keep_declaration_order() -> None:
    """TC-04: Children are built in the order they are described."""
    root = RootNode("/srv/site")
    node = DirectoryNode(_tree([
        {"name": "log", "type": "directory"},
        {"name": "cache", "type": "directory"},
        {"name": "index.html", "type": "file"},
    ]), root)

    children = node.get_children()
    assert [c.get_name() for c in children] == ["log", "cache", "index.html"]
    assert isinstance(children[2], FileNode)
    assert children[0].get_parent() is node
    assert children[0].get_absolute_path() == "/srv/site/var/log"


def test_resolve_node_type() -> None:
    """TC-05: Types resolve from case-insensitive keys or node classes."""
    assert resolve_node_type("Directory") is DirectoryNode
    assert resolve_node_type("file") is FileNode
    assert resolve_node_type(FileNode) is FileNode
    with pytest.raises(InvalidArgumentError):
        resolve_node_type(dict)


# -----------------------------------------------------------------------------
# STATUS
# -----------------------------------------------------------------------------

def test_status_missing_directory_reports_children(site_root: Path) -> None:
    """TC-06: A missing directory is a WARNING, followed by its children."""
    root = RootNode(str(site_root))
    node = DirectoryNode(_tree([
        {"name": "cache", "type": "directory"},
        {"name": "a.txt", "type": "file"},
    ]), root)

    messages = node.get_status()

    assert [m.severity for m in messages] == [Severity.WARNING] * 3
    assert [m.title for m in messages] == [
        "Directory /var does not exist",
        "Directory /var/cache does not exist",
        "File /var/a.txt does not exist",
    ]


@posix_only
def test_status_existing_directory(site_root: Path) -> None:
    """TC-07: An existing writable directory with the right mode is OK."""
    target = site_root / "var"
    target.mkdir()
    os.chmod(target, 0o775)
    root = RootNode(str(site_root))
    node = DirectoryNode(_tree(), root)

    assert node.get_parent() is root
    assert [m.severity for m in node.get_status()] == [Severity.OK]


def test_status_file_at_directory_path(site_root: Path) -> None:
    """TC-08: A file where a directory belongs is an ERROR."""
    (site_root / "var").write_text("x")
    root = RootNode(str(site_root))
    node = DirectoryNode(_tree([{"name": "cache", "type": "directory"}]), root)

    messages = node.get_status()

    assert messages[0].severity == Severity.ERROR
    assert messages[0].title == "Path /var is not a directory"
    assert messages[1].severity == Severity.WARNING


def test_status_not_writable(site_root: Path) -> None:
    """TC-09: A directory that fails the probe is an ERROR."""
    (site_root / "var").mkdir()
    root = RootNode(str(site_root))
    node = DirectoryNode(_tree(permission=None), root)

    with patch("fsreconcile.infra.fs.can_create_file_in", return_value=False):
        messages = node.get_status()

    assert [m.severity for m in messages] == [Severity.ERROR]
    assert "not writable" in messages[0].title


@posix_only
def test_status_permission_mismatch(site_root: Path) -> None:
    """TC-10: A wrong mode on a writable directory is a NOTICE."""
    target = site_root / "var"
    target.mkdir()
    os.chmod(target, 0o755)
    root = RootNode(str(site_root))
    node = DirectoryNode(_tree(permission="0775"), root)

    messages = node.get_status()

    assert [m.severity for m in messages] == [Severity.NOTICE]
    assert "0775" in messages[0].message


# -----------------------------------------------------------------------------
# REPAIR
# -----------------------------------------------------------------------------

@posix_only
def test_fix_creates_directory_before_children(site_root: Path) -> None:
    """TC-11: The directory is created first, then its children in order."""
    root = RootNode(str(site_root))
    node = DirectoryNode(_tree([
        {"name": "cache", "type": "directory", "targetPermission": "0775"},
        {"name": "a.txt", "type": "file", "targetPermission": "0644", "targetContent": "x"},
    ]), root)

    messages = node.fix()

    assert all(m.severity == Severity.OK for m in messages)
    assert messages[0].title == "Directory /var successfully created."
    assert (site_root / "var" / "cache").is_dir()
    assert (site_root / "var" / "a.txt").read_text() == "x"
    assert all(m.severity == Severity.OK for m in node.get_status())


def test_fix_leaves_foreign_entry_untouched(site_root: Path) -> None:
    """TC-12: A file at a directory path is reported and kept."""
    (site_root / "var").write_text("keep")
    root = RootNode(str(site_root))
    node = DirectoryNode(_tree(), root)

    messages = node.fix()

    assert [m.severity for m in messages] == [Severity.ERROR]
    assert (site_root / "var").read_text() == "keep"


@posix_only
def test_fix_repairs_permission(site_root: Path) -> None:
    """TC-13: A wrong mode is repaired."""
    target = site_root / "var"
    target.mkdir()
    os.chmod(target, 0o700)
    root = RootNode(str(site_root))
    node = DirectoryNode(_tree(permission="0775"), root)

    messages = node.fix()

    assert [m.severity for m in messages] == [Severity.OK]
    assert node.get_current_permission() == "0775"


def test_fix_not_writable_is_error(site_root: Path) -> None:
    """TC-14: A correct but unwritable directory cannot be repaired."""
    (site_root / "var").mkdir()
    root = RootNode(str(site_root))
    node = DirectoryNode(_tree(permission=None), root)

    with patch("fsreconcile.infra.fs.can_create_file_in", return_value=False):
        messages = node.fix()

    assert [m.severity for m in messages] == [Severity.ERROR]


def test_create_failure_is_error(site_root: Path) -> None:
    """TC-15: A refused mkdir is an ERROR."""
    root = RootNode(str(site_root))
    node = DirectoryNode(_tree(permission=None), root)

    with patch("os.mkdir", side_effect=PermissionError("denied")):
        messages = node.fix()

    assert [m.severity for m in messages] == [Severity.ERROR]
    assert messages[0].title == "Directory /var not created"


def test_create_directory_on_existing_path_raises(site_root: Path) -> None:
    """TC-16: create_directory requires a missing path."""
    (site_root / "var").mkdir()
    root = RootNode(str(site_root))
    node = DirectoryNode(_tree(), root)
    with pytest.raises(InvalidArgumentError) as exc:
        node.create_directory()
    assert exc.value.code == ERR_DIRECTORY_ALREADY_EXISTS


@pytest.mark.parametrize("name", ["", ".", ".."])
def test_rejects_non_segment_names(name: str) -> None:
    """TC-17: Empty, '.' and '..' do not name a directory of their own."""
    with pytest.raises(InvalidArgumentError) as exc:
        DirectoryNode({"name": name}, RootNode("/srv/site"))
    assert exc.value.code == ERR_DIRECTORY_NAME_HAS_SEPARATOR


@posix_only
def test_fix_permission_refused_keeps_mode(site_root: Path) -> None:
    """TC-18: A refused chmod on a directory is a NOTICE and the mode is unchanged."""
    (site_root / "var").mkdir()
    os.chmod(site_root / "var", 0o700)
    root = RootNode(str(site_root))
    node = DirectoryNode(_tree(), root)

    with patch("os.chmod", side_effect=PermissionError("denied")):
        msg = node.fix_permission()

    assert msg.severity == Severity.NOTICE
    assert node.get_current_permission() == "0700"
