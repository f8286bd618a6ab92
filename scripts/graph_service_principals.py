#!/usr/bin/env python3
"""Look up service principals, optionally expanding their app roles or scopes."""

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

from graph_commands import service_principals
from graph_commands.cli import emit, emit_error, parse_piped, setup_logging
from graph_commands.errors import GraphCommandError
from graph_commands.transport import GraphTransport


def main() -> None:
    parser = argparse.ArgumentParser(description="Get service principals")
    select = parser.add_mutually_exclusive_group()
    select.add_argument("--id", dest="ids", action="append", help="Object id or display name prefix (repeatable)")
    select.add_argument("--stdin", action="store_true", help="Read ids, names or JSON records from stdin")
    select.add_argument("--name", help="Display name prefix")
    select.add_argument("--managed-identity", action="store_true", help="Only managed identities")
    select.add_argument("--application", action="store_true", help="Only applications")
    select.add_argument("--o365", action="store_true", help="Only first-party Office 365 services")
    parser.add_argument("--filter", help="Extra OData filter, ANDed with the selector")
    expand = parser.add_mutually_exclusive_group()
    expand.add_argument("--app-roles", action="store_true", help="Return app roles instead of principals")
    expand.add_argument("--app-role-filter", help="Return app roles whose value or name starts with this")
    expand.add_argument("--scopes", action="store_true", help="Return delegated scopes instead of principals")
    expand.add_argument("--scope-filter", help="Return scopes whose value or name starts with this")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()
    setup_logging(args.verbose)

    ids = args.ids
    if args.stdin:
        ids = parse_piped(sys.stdin.read())

    try:
        with GraphTransport() as transport:
            report = service_principals.get_service_principals(
                transport,
                ids=ids,
                name=args.name,
                managed_identity=args.managed_identity,
                application=args.application,
                o365=args.o365,
                filter=args.filter,
            )
        emit(
            service_principals.expand(
                report.results,
                app_roles=args.app_roles,
                role_filter=args.app_role_filter,
                scopes=args.scopes,
                scope_filter=args.scope_filter,
            )
        )
        sys.exit(0 if report.ok else 1)
    except GraphCommandError as exc:
        emit_error(exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
