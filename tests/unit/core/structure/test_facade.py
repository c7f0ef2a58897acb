from __future__ import annotations

"""
Unit tests for the StructureFacade aggregation.
"""

import logging
from pathlib import Path
from typing import Any, Dict

import pytest

from fsreconcile.core.structure.factory import StructureFactory
from fsreconcile.domain.status_models import Severity


def test_status_starts_with_root(site_root: Path, sample_description: Dict[str, Any]) -> None:
    """TC-01: The root report comes first, then each subtree in order."""
    facade = StructureFactory(str(site_root)).build(sample_description)

    messages = facade.get_status()

    assert messages[0].severity == Severity.OK
    assert messages[0].title.startswith("Base path")
    assert [m.title for m in messages[1:]] == [
        "Directory /var does not exist",
        "Directory /var/cache does not exist",
        "File /var/README.txt does not exist",
        "Directory /config does not exist",
    ]


def test_fix_with_missing_base_path_reports_errors(tmp_path: Path, sample_description: Dict[str, Any]) -> None:
    """TC-02: Nothing is created outside a missing base path."""
    base = tmp_path / "missing"
    facade = StructureFactory(str(base)).build(sample_description)

    messages = facade.fix()

    assert messages
    assert messages[0].severity == Severity.ERROR
    assert not base.exists()


def test_passes_are_logged(site_root: Path, sample_description: Dict[str, Any], caplog: pytest.LogCaptureFixture) -> None:
    """TC-03: Each pass logs a severity summary."""
    facade = StructureFactory(str(site_root)).build(sample_description)

    with caplog.at_level(logging.INFO, logger="fsreconcile"):
        facade.get_status()

    assert any("WARNING=4" in r.getMessage() for r in caplog.records)


def test_facade_owns_the_tree(site_root: Path, sample_description: Dict[str, Any]) -> None:
    """TC-04: Nodes stay resolvable for as long as the facade lives."""
    facade = StructureFactory(str(site_root)).build(sample_description)
    cache = facade.children[0].get_children()[0]
    assert cache.get_absolute_path() == str(site_root / "var" / "cache")
    assert facade.root.get_absolute_path() == str(site_root)
