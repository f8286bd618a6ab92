#!/usr/bin/env python3
"""List OneNote notebooks."""

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

from graph_commands.cli import add_common_args, emit, emit_error, owner_context, setup_logging
from graph_commands.errors import GraphCommandError
from graph_commands.onenote import notebooks
from graph_commands.transport import GraphTransport


def main() -> None:
    parser = argparse.ArgumentParser(description="List OneNote notebooks")
    parser.add_argument("--name", help="Only notebooks whose name starts with this (case-insensitive)")
    parser.add_argument("--sections", action="store_true", help="Include each notebook's sections")
    add_common_args(parser)
    args = parser.parse_args()
    setup_logging(args.verbose)

    try:
        with GraphTransport() as transport:
            result = notebooks.list_notebooks(
                transport, owner_context(args), name=args.name, expand_sections=args.sections
            )
        emit(result)
    except GraphCommandError as exc:
        emit_error(exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
