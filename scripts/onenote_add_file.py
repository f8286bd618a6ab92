#!/usr/bin/env python3
"""Create a OneNote page holding a file: images inline, anything else as an attachment."""

import argparse
import logging
import os
import sys
from pathlib import Path

# Auto-detect venv and re-exec if needed
_script_dir = os.path.dirname(os.path.abspath(__file__))
_repo_root = os.path.dirname(_script_dir)
_venv_python = os.path.join(_repo_root, ".venv", "bin", "python3")
if os.path.exists(_venv_python) and sys.executable != _venv_python:
    os.execv(_venv_python, [_venv_python] + sys.argv)

sys.path.insert(0, os.path.join(_repo_root, "src"))

from graph_commands import config
from graph_commands.cli import add_common_args, emit, emit_error, owner_context, setup_logging
from graph_commands.errors import AmbiguousMimeTypeError, GraphCommandError
from graph_commands.onenote import pages
from graph_commands.transport import GraphTransport


def main() -> None:
    parser = argparse.ArgumentParser(description="Add a file to OneNote as a new page")
    parser.add_argument("path", type=Path, help="File to attach")
    parser.add_argument("--section", default=None, help="Section link or name (default: MSGRAPH_DEFAULT_SECTION)")
    parser.add_argument("--title", help="Page title (default: file name without extension)")
    parser.add_argument("--mime-type", help="MIME type when it cannot be guessed from the file name")
    add_common_args(parser)
    args = parser.parse_args()
    setup_logging(args.verbose)

    try:
        with GraphTransport() as transport:
            result = pages.add_file_page(
                transport,
                args.path,
                section=args.section,
                title=args.title,
                mime_type=args.mime_type,
                default_section=config.default_section(),
                context=owner_context(args),
            )
        emit(result)
    except AmbiguousMimeTypeError as exc:
        logging.getLogger("onenote_add_file").warning("%s", exc)
        sys.exit(1)
    except (GraphCommandError, OSError) as exc:
        emit_error(exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
