#!/usr/bin/env python3
"""Read OneNote pages: metadata, HTML, HTML with element ids, or Markdown."""

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
from graph_commands.html_convert import html_to_markdown
from graph_commands.onenote import pages
from graph_commands.transport import GraphTransport


def main() -> None:
    parser = argparse.ArgumentParser(description="Read pages")
    parser.add_argument("--content", action="store_true", help="Include the page HTML")
    parser.add_argument("--include-ids", action="store_true", help="Include HTML with element ids for updates")
    parser.add_argument("--markdown", action="store_true", help="Return the content as Markdown")
    add_common_args(parser, targets="pages")
    args = parser.parse_args()
    setup_logging(args.verbose)

    try:
        with GraphTransport() as transport:
            report = pages.get_pages(
                transport,
                read_targets(args),
                content=args.content or args.markdown,
                include_ids=args.include_ids,
                context=owner_context(args),
            )
        if args.markdown:
            for page in report.results:
                if page.content:
                    page.content = html_to_markdown(page.content)
        sys.exit(emit_report(report))
    except GraphCommandError as exc:
        emit_error(exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
