from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, resolution of the
configuration hierarchy (defaults, persisted file, command-line
overrides), construction of the structure tree, the status or fix pass
and rendering of the report.
"""

import json
import sys
from typing import Any, Dict, List, Optional

from fsreconcile.core.services.status_utility import (
    count_by_severity,
    highest_severity,
)
from fsreconcile.core.services.validator import validate_config
from fsreconcile.core.structure.factory import StructureFactory, load_description
from fsreconcile.domain.config import get_default_config, load_config
from fsreconcile.domain.exceptions import StructureError
from fsreconcile.domain.status_models import Severity, StatusMessage
from fsreconcile.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    get_logger,
)
from fsreconcile.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_PRECONDITION = 2
EXIT_INTERRUPTED = 130


# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on a clean result, 1 when the report demands attention,
             2 when the structure could not be built.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 1. Resolve base configuration (defaults vs persisted state)
    base_conf = get_default_config() if args.use_defaults else load_config()

    # 2. Merge command-line overrides and validate
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    clean_conf, warnings = validate_config(raw_conf, strict=False)

    # 3. Logging bootstrap (console on stderr, optional persistent file)
    log_file = clean_conf["log_file"]
    if log_file == "default":
        log_file = get_default_log_path()
    configure_logging(LoggingConfig(
        level=clean_conf["log_level"],
        console=True,
        log_file=log_file or None,
    ))
    for w in warnings:
        logger.warning(f"Configuration constraint: {w}")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    # 4. Build the structure tree
    try:
        description = None
        if clean_conf["structure_file"]:
            description = load_description(clean_conf["structure_file"])
        facade = StructureFactory(
            clean_conf["base_path"],
            file_permission=clean_conf["file_permission"],
            directory_permission=clean_conf["directory_permission"],
        ).build(description)
    except StructureError as e:
        logger.error(f"Structure could not be built: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_PRECONDITION

    # 5. Status or fix pass
    logger.debug(f"Running '{args.command}' below {clean_conf['base_path']}")
    try:
        if args.command == cli_args.COMMAND_FIX:
            messages = facade.fix()
        else:
            messages = facade.get_status()
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED

    # 6. Output rendering
    if args.json_output:
        print(json.dumps(_to_payload(args.command, messages), ensure_ascii=False, indent=2))
    else:
        _print_human_report(messages)

    return exit_code_for(args.command, messages)


def exit_code_for(command: str, messages: List[StatusMessage]) -> int:
    """
    Map a report to a process exit code.

    A status pass fails on any WARNING or ERROR; a fix pass only fails when
    something could not be repaired (ERROR).
    """
    worst = highest_severity(messages)
    if command == cli_args.COMMAND_FIX:
        return EXIT_FINDINGS if worst >= Severity.ERROR else EXIT_OK
    return EXIT_FINDINGS if worst >= Severity.WARNING else EXIT_OK


# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow merge of the non-None overrides whose keys the base knows."""
    out = dict(base)
    for k, v in overrides.items():
        if k in base and v is not None:
            out[k] = v
    return out


# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _to_payload(command: str, messages: List[StatusMessage]) -> Dict[str, Any]:
    return {
        "command": command,
        "highest_severity": highest_severity(messages).name,
        "counts": count_by_severity(messages),
        "messages": [m.to_dict() for m in messages],
    }


def _print_human_report(messages: List[StatusMessage]) -> None:
    """Print one line per message followed by a severity summary."""
    for m in messages:
        print(str(m))

    counts = count_by_severity(messages)
    summary = ", ".join(f"{n} {name.lower()}" for name, n in counts.items() if n)
    print("")
    print(f"Summary: {summary or 'nothing to report'}")
