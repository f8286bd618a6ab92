"""Shared authentication for Microsoft Graph.

Uses DeviceCodeCredential with persistent token caching and
AuthenticationRecord persistence for silent re-authentication.
"""

import logging
import sys

from azure.core.exceptions import ClientAuthenticationError
from azure.identity import AuthenticationRecord, DeviceCodeCredential, TokenCachePersistenceOptions

from . import config

logger = logging.getLogger(__name__)

_AUTH_RECORD_PATH = config.AUTH_DIR / "auth_record.json"
_CACHE_NAME = "graph-commands"


def _load_auth_record() -> AuthenticationRecord | None:
    """Load a previously saved AuthenticationRecord, if any."""
    if not _AUTH_RECORD_PATH.exists():
        return None
    try:
        return AuthenticationRecord.deserialize(_AUTH_RECORD_PATH.read_text())
    except (OSError, ValueError, KeyError) as exc:
        logger.warning("Ignoring unreadable auth record %s: %s", _AUTH_RECORD_PATH, exc)
        return None


def _save_auth_record(record: AuthenticationRecord) -> None:
    """Persist AuthenticationRecord for future silent auth."""
    config.AUTH_DIR.mkdir(parents=True, exist_ok=True)
    _AUTH_RECORD_PATH.write_text(record.serialize())


def _make_credential(
    *,
    disable_automatic_authentication: bool = False,
) -> DeviceCodeCredential:
    """Build a DeviceCodeCredential with token cache and optional saved record."""
    kwargs: dict = {
        "client_id": config.CLIENT_ID,
        "tenant_id": config.TENANT_ID,
        "cache_persistence_options": TokenCachePersistenceOptions(name=_CACHE_NAME),
        "disable_automatic_authentication": disable_automatic_authentication,
        "prompt_callback": _prompt_callback,
    }
    auth_record = _load_auth_record()
    if auth_record:
        kwargs["authentication_record"] = auth_record

    return DeviceCodeCredential(**kwargs)


def _prompt_callback(verification_uri: str, user_code: str, expires_on) -> None:
    print(
        f"\nTo sign in, open: {verification_uri}\n"
        f"Enter the code: {user_code}\n",
        file=sys.stderr,
    )


def authenticate() -> AuthenticationRecord:
    """Run the device code flow interactively and persist the result.

    The device code prompt goes to stderr so stdout stays valid JSON.
    """
    config.validate()
    credential = _make_credential()
    record = credential.authenticate(scopes=config.SCOPES)
    _save_auth_record(record)
    logger.info("Authenticated as %s", record.username)
    return record


def check_auth_status() -> dict:
    """Check whether we can authenticate silently.

    Returns a dict with 'authenticated' bool and details.
    """
    auth_record = _load_auth_record()
    if not auth_record:
        return {"authenticated": False, "reason": "No saved authentication record. Run auth_login.py first."}

    try:
        credential = _make_credential(disable_automatic_authentication=True)
        credential.get_token(*config.SCOPES)
        return {
            "authenticated": True,
            "username": auth_record.username,
            "tenant_id": auth_record.tenant_id,
            "authority": auth_record.authority,
        }
    except ClientAuthenticationError as exc:
        return {
            "authenticated": False,
            "reason": f"Token expired or invalid: {exc}. Run auth_login.py to re-authenticate.",
            "username": auth_record.username,
        }


def get_headers() -> dict[str, str]:
    """Bearer authorization header for a Graph request.

    Tries silent auth first; if that fails, triggers device code flow.
    """
    config.validate()
    token = _make_credential().get_token(*config.SCOPES)
    return {"Authorization": f"Bearer {token.token}"}


def logout() -> None:
    """Remove the saved authentication record."""
    if _AUTH_RECORD_PATH.exists():
        _AUTH_RECORD_PATH.unlink()
