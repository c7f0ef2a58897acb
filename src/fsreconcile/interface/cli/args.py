from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema of the reconciler and translates the
parsed namespace into configuration overrides.
"""

import argparse
from typing import Any, Dict

from fsreconcile.domain.constants import APP_VERSION

COMMAND_STATUS = "status"
COMMAND_FIX = "fix"


# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the fsreconcile CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="fsreconcile",
        description=(
            "Compare an installation directory against its expected file and "
            "directory structure, and repair what can be repaired."
        ),
    )

    p.add_argument(
        "command",
        nargs="?",
        choices=(COMMAND_STATUS, COMMAND_FIX),
        default=COMMAND_STATUS,
        help="'status' reports discrepancies (default), 'fix' repairs them.",
    )

    # --- Target Selection ---
    p.add_argument(
        "-b", "--base-path",
        dest="base_path",
        default=None,
        help="Absolute installation base path. Defaults to the configured path.",
    )
    p.add_argument(
        "-s", "--structure",
        dest="structure_file",
        default=None,
        help="JSON structure description. Defaults to the stock runtime layout.",
    )

    # --- Default Permissions ---
    p.add_argument(
        "--file-permission",
        dest="file_permission",
        default=None,
        help="Octal permission for files that declare none (e.g. 0664).",
    )
    p.add_argument(
        "--directory-permission",
        dest="directory_permission",
        default=None,
        help="Octal permission for directories that declare none (e.g. 2775).",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write the log to this file ('default' for the user data directory).",
    )
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the persisted configuration file.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the report as JSON.",
    )

    p.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")

    return p


# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Options that were not given map to None and leave the base
    configuration untouched.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {
        "base_path": args.base_path,
        "structure_file": args.structure_file,
        "file_permission": args.file_permission,
        "directory_permission": args.directory_permission,
        "log_file": args.log_file,
    }
    if args.debug:
        overrides["log_level"] = "DEBUG"
    return overrides
