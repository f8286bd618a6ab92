#!/usr/bin/env python3
"""Update (patch) the content of one or more OneNote pages."""

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

from graph_commands.cli import (
    add_common_args,
    emit_error,
    emit_report,
    owner_context,
    prompt_confirm,
    read_targets,
    setup_logging,
)
from graph_commands.errors import GraphCommandError
from graph_commands.html_convert import PATCH_ACTIONS, PATCH_POSITIONS
from graph_commands.onenote import pages
from graph_commands.transport import GraphTransport


def main() -> None:
    parser = argparse.ArgumentParser(description="Update OneNote pages")
    parser.add_argument("--action", default="append", choices=PATCH_ACTIONS, help="Patch action")
    parser.add_argument("--target", default="body", help="Element to change: 'body' or an element id")
    parser.add_argument("--position", choices=PATCH_POSITIONS, help="Where to insert, relative to the target")
    parser.add_argument("--content", default="", help="HTML or text to apply")
    parser.add_argument("--markdown", action="store_true", help="Treat --content as Markdown")
    parser.add_argument("--force", action="store_true", help="Do not ask for confirmation")
    add_common_args(parser, targets="pages")
    args = parser.parse_args()
    setup_logging(args.verbose)

    try:
        with GraphTransport() as transport:
            report = pages.update_pages(
                transport,
                read_targets(args),
                args.content,
                action=args.action,
                target=args.target,
                position=args.position,
                confirm=prompt_confirm(args.force),
                markdown=args.markdown,
                context=owner_context(args),
            )
        sys.exit(emit_report(report))
    except GraphCommandError as exc:
        emit_error(exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
