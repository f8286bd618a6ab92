#!/usr/bin/env python3
"""Create a new section in a OneNote notebook."""

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
from graph_commands.onenote import sections
from graph_commands.transport import GraphTransport


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a section in a OneNote notebook")
    parser.add_argument("--notebook", required=True, help="Notebook link or name")
    parser.add_argument("--name", required=True, help="Section name")
    add_common_args(parser)
    args = parser.parse_args()
    setup_logging(args.verbose)

    try:
        with GraphTransport() as transport:
            result = sections.create_section(transport, args.notebook, args.name, owner_context(args))
        emit(result)
    except GraphCommandError as exc:
        emit_error(exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
