"""Argument parsing and output helpers shared by the scripts/ commands."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Callable

from .batch import BatchReport
from .handles import ME, OwnerContext

logger = logging.getLogger(__name__)

TTY = "/dev/tty"


def setup_logging(verbose: bool = False) -> None:
    """Log to stderr so stdout stays valid JSON."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def add_common_args(parser: argparse.ArgumentParser, targets: str | None = None) -> None:
    """Add --verbose, owner selection and, if ``targets`` is set, target input."""
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    owner = parser.add_mutually_exclusive_group()
    owner.add_argument("--user", help="Work in this user's OneNote (id or UPN) instead of /me")
    owner.add_argument("--group", help="Work in this group's OneNote")
    owner.add_argument("--site", help="Work in this SharePoint site's OneNote")
    if targets:
        parser.add_argument("targets", nargs="*", help=f"{targets}: link, name prefix, or JSON record")
        parser.add_argument(
            "--stdin",
            action="store_true",
            help=f"Read {targets} from stdin (JSON output of another command, or one per line)",
        )


def owner_context(args: argparse.Namespace) -> OwnerContext:
    if getattr(args, "user", None):
        return OwnerContext.user(args.user)
    if getattr(args, "group", None):
        return OwnerContext.group(args.group)
    if getattr(args, "site", None):
        return OwnerContext.site(args.site)
    return ME


def read_targets(args: argparse.Namespace, stdin=None) -> list[Any]:
    """Targets from the command line followed by any piped in on stdin."""
    targets: list[Any] = list(args.targets or [])
    if args.stdin:
        targets.extend(parse_piped(((stdin or sys.stdin).read())))
    return targets


def parse_piped(text: str) -> list[Any]:
    """Records from another command's JSON output, else one target per line."""
    text = text.strip()
    if not text:
        return []
    try:
        data = json.loads(text)
    except ValueError:
        return [line.strip() for line in text.splitlines() if line.strip()]
    if isinstance(data, list):
        return data
    return [data]


def to_jsonable(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, list):
        return [to_jsonable(v) for v in value]
    return value


def emit(value: Any) -> None:
    print(json.dumps(to_jsonable(value), indent=2))


def emit_report(report: BatchReport) -> int:
    """Print the results and return the process exit status."""
    emit(report.results)
    return 0 if report.ok else 1


def emit_error(exc: Exception) -> None:
    print(json.dumps({"error": str(exc), "type": type(exc).__name__}), file=sys.stderr)


def prompt_confirm(force: bool) -> Callable[[str], bool] | None:
    """None when --force is set, else a yes/no prompt on the terminal."""
    if force:
        return None

    def confirm(message: str) -> bool:
        print(f"{message}? [y/N] ", end="", file=sys.stderr, flush=True)
        if sys.stdin.isatty():
            answer = sys.stdin.readline()
        else:
            # stdin carries piped targets; ask on the terminal instead
            try:
                with open(TTY) as tty:
                    answer = tty.readline()
            except OSError as exc:
                logger.warning("No terminal to confirm on (%s); not confirmed", exc)
                return False
        return answer.strip().lower() in ("y", "yes")

    return confirm
