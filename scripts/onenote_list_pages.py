#!/usr/bin/env python3
"""List the pages of one or more OneNote sections."""

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
from graph_commands.onenote import pages
from graph_commands.transport import GraphTransport


def main() -> None:
    parser = argparse.ArgumentParser(description="List pages in sections")
    parser.add_argument("--title", help="Only pages whose title starts with this (case-insensitive)")
    add_common_args(parser, targets="sections")
    args = parser.parse_args()
    setup_logging(args.verbose)

    try:
        with GraphTransport() as transport:
            report = pages.list_pages(transport, read_targets(args), name=args.title, context=owner_context(args))
        sys.exit(emit_report(report))
    except GraphCommandError as exc:
        emit_error(exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
