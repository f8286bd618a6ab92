#!/usr/bin/env python3
"""Create a new page in a OneNote section."""

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

from graph_commands import config
from graph_commands.cli import add_common_args, emit, emit_error, owner_context, setup_logging
from graph_commands.errors import GraphCommandError
from graph_commands.onenote import pages
from graph_commands.transport import GraphTransport


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a page in a OneNote section")
    parser.add_argument("--section", default=None, help="Section link or name (default: MSGRAPH_DEFAULT_SECTION)")
    parser.add_argument("--title", help="Page title (Markdown content only)")
    parser.add_argument("--content", default=None, help="Page content in Markdown")
    parser.add_argument("--html", default=None, help="Path to a full HTML document; the title comes from <title>")
    parser.add_argument("--stdin", action="store_true", help="Read content from stdin")
    add_common_args(parser)
    args = parser.parse_args()
    setup_logging(args.verbose)

    content = args.content or ""
    if args.stdin:
        content = sys.stdin.read()

    try:
        with GraphTransport() as transport:
            if args.html:
                with open(args.html, encoding="utf-8") as f:
                    html = f.read()
                result = pages.create_page(
                    transport, html, args.section, config.default_section(), owner_context(args)
                )
            else:
                if not args.title:
                    parser.error("--title is required unless --html is given")
                result = pages.create_page_from_markdown(
                    transport, args.title, content, args.section, config.default_section(), owner_context(args)
                )
        emit(result)
    except (GraphCommandError, OSError) as exc:
        emit_error(exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
