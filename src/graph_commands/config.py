"""Load configuration from .env file."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Walk up from this file to find .env at the repo root
_repo_root = Path(__file__).resolve().parent.parent.parent
load_dotenv(_repo_root / ".env")

CLIENT_ID: str = os.environ.get("MSGRAPH_CLIENT_ID", "")
TENANT_ID: str = os.environ.get("MSGRAPH_TENANT_ID", "common")

GRAPH_BASE: str = os.environ.get("MSGRAPH_BASE_URL", "https://graph.microsoft.com/v1.0").rstrip("/")
TIMEOUT: float = float(os.environ.get("MSGRAPH_TIMEOUT", "30"))

# Where to store auth artifacts (non-sensitive account record)
AUTH_DIR: Path = Path.home() / ".graph-commands"

# Microsoft Graph scopes for OneNote and service principal lookups
SCOPES: list[str] = [
    "User.Read",
    "Notes.Read",
    "Notes.ReadWrite",
    "Notes.Create",
    "Application.Read.All",
]


def default_section() -> str | None:
    """Section link or name used when a page command is given no section."""
    value = os.environ.get("MSGRAPH_DEFAULT_SECTION", "").strip()
    return value or None


def validate() -> None:
    """Raise if required config is missing."""
    if not CLIENT_ID:
        raise SystemExit(
            "MSGRAPH_CLIENT_ID not set. "
            "Copy .env.example to .env and fill in your Azure app registration values."
        )
