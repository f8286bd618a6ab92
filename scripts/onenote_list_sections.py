#!/usr/bin/env python3
"""List the sections of one or more OneNote notebooks."""

import argparse
import os
import sys

# Auto-detect venv and re-exec if needed
_script_dir = os.path.dirname(os.path.abspath(__file__))
_repo_root = os.path.dirname(_script_dir)
_venv_python = os.path.join(_repo_root, ".venv", "bin", "python3")
if os.path.exists(_venv_python) and sys.executable != _venv_python:
    os.execv(_venv_python, [_venv_python] + sys.argv)

sys.path.insert(0, os.path.join(_repo_root, "src"))

from graph_commands.cli import add_common_args, emit_error, emit_report, owner_context, read_targets, setup_logging
from graph_commands.errors import GraphCommandError
from graph_commands.onenote import sections
from graph_commands.transport import GraphTransport


def main() -> None:
    parser = argparse.ArgumentParser(description="List sections in notebooks")
    parser.add_argument("--name", help="Only sections whose name starts with this (case-insensitive)")
    add_common_args(parser, targets="notebooks")
    args = parser.parse_args()
    setup_logging(args.verbose)

    try:
        with GraphTransport() as transport:
            report = sections.list_sections(transport, read_targets(args), name=args.name, context=owner_context(args))
        sys.exit(emit_report(report))
    except GraphCommandError as exc:
        emit_error(exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
