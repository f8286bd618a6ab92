"""Service principal lookups via Microsoft Graph API.

Selectors (ids, name, managed identity, application, first-party Office 365)
are mutually exclusive and become one $filter, ANDed with any filter the
caller passes. App role and scope expansion happen locally on the fetched
principals and are never sent to Graph.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Mapping

from .batch import BatchReport, run_batch
from .errors import ParameterError, UnresolvableTargetError
from .handles import prefix_matches, prefix_predicate, with_query
from .models import AppRole, PermissionScope, ServicePrincipal, attach_parent
from .transport import GraphTransport

logger = logging.getLogger(__name__)

COLLECTION = "/servicePrincipals"

# advanced queries ($count, tolower, in) need eventual consistency
ADVANCED_QUERY_HEADERS = {"ConsistencyLevel": "eventual"}

GUID_RE = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")

# Well-known app ids of Microsoft first-party Office 365 services
O365_APP_IDS = frozenset({
    "00000002-0000-0ff1-ce00-000000000000",  # Office 365 Exchange Online
    "00000003-0000-0ff1-ce00-000000000000",  # Office 365 SharePoint Online
    "00000004-0000-0ff1-ce00-000000000000",  # Skype for Business Online
    "00000005-0000-0ff1-ce00-000000000000",  # Yammer
    "00000003-0000-0000-c000-000000000000",  # Microsoft Graph
    "00000009-0000-0000-c000-000000000000",  # Power BI Service
    "2d4d3d8e-2be3-4bef-9f87-7875a61c29de",  # OneNote
    "cc15fd57-2c6c-4117-a88c-83b1d56b4bbe",  # Microsoft Teams Services
    "09abbdfd-ed23-44ee-a2d9-a627aa1c90f3",  # Microsoft Planner
    "c5393580-f805-4401-95e8-94b7a6ef2fc2",  # Office 365 Management APIs
    "c9a559d2-7aab-4f13-a6ed-e7e9c52aec87",  # Microsoft Forms
    "2634dd23-5e5a-431c-81ca-11710d9079f4",  # Microsoft Stream Service
})


def is_guid(value: str) -> bool:
    return bool(GUID_RE.match(value.strip()))


def _and(*predicates: str | None) -> str | None:
    parts = [p for p in predicates if p]
    return " and ".join(parts) if parts else None


def build_filter(
    name: str | None = None,
    managed_identity: bool = False,
    application: bool = False,
    o365: bool = False,
    filter: str | None = None,
) -> str | None:
    """Combine one selector with the caller's filter into a $filter predicate."""
    chosen = [s for s, on in (("name", name), ("managed_identity", managed_identity),
                              ("application", application), ("o365", o365)) if on]
    if len(chosen) > 1:
        raise ParameterError(f"Choose only one of: {', '.join(chosen)}")

    selector = None
    if name:
        selector = prefix_predicate(name)
    elif managed_identity:
        selector = "servicePrincipalType eq 'ManagedIdentity'"
    elif application:
        selector = "servicePrincipalType eq 'Application'"
    elif o365:
        app_ids = ", ".join(f"'{app_id}'" for app_id in sorted(O365_APP_IDS))
        selector = f"appId in ({app_ids})"
    return _and(selector, filter)


def list_service_principals(transport: GraphTransport, filter: str | None = None) -> list[ServicePrincipal]:
    """List service principals matching an OData predicate (all when None)."""
    if filter:
        url = with_query(COLLECTION, f"$filter={filter}", "$count=true")
        items = transport.get_collection(url, headers=ADVANCED_QUERY_HEADERS)
    else:
        items = transport.get_collection(COLLECTION)
    return [ServicePrincipal.from_json(sp) for sp in items]


def principal_key(item: Any) -> str:
    """Lookup key for one ids entry.

    Records piped from an earlier command are looked up by object id; an
    expanded app role or scope by the id of the principal it came from.
    Anything else is used as text.
    """
    if isinstance(item, ServicePrincipal):
        item = item.to_dict()
    if isinstance(item, Mapping):
        owner = item.get("servicePrincipal")
        key = owner.get("id") if isinstance(owner, Mapping) else item.get("id")
        if not key:
            raise UnresolvableTargetError(f"Service principal record without an id: {item!r}")
        return str(key)
    return str(item)


def get_service_principal(transport: GraphTransport, principal_id: str) -> ServicePrincipal:
    return ServicePrincipal.from_json(transport.get(f"{COLLECTION}/{principal_id}"))


def get_service_principals(
    transport: GraphTransport,
    ids: Iterable[Any] | None = None,
    name: str | None = None,
    managed_identity: bool = False,
    application: bool = False,
    o365: bool = False,
    filter: str | None = None,
) -> BatchReport:
    """Look service principals up by id/name list or by one selector.

    Each entry of ``ids`` is looked up on its own, in order: a GUID is fetched
    directly, anything else is treated as a display name prefix. Entries may be
    principal records (as piped from an earlier command); their id is used.
    """
    if ids is None:
        predicate = build_filter(name, managed_identity, application, o365, filter)
        return run_batch([predicate], lambda p: list_service_principals(transport, p), label="query")

    if name or managed_identity or application or o365:
        raise ParameterError("ids cannot be combined with name, managed_identity, application or o365")

    def lookup(item):
        identifier = principal_key(item)
        if is_guid(identifier):
            return get_service_principal(transport, identifier.strip())
        found = list_service_principals(transport, _and(prefix_predicate(identifier), filter))
        if not found:
            logger.warning("No service principal named %r", identifier)
        return found

    return run_batch(ids, lookup, label="id")


def expand_app_roles(principals: Iterable[ServicePrincipal], role_filter: str | None = None) -> list[AppRole]:
    """App roles of each principal, optionally limited to a value/name prefix."""
    roles = []
    for sp in principals:
        matched = [r for r in sp.app_roles if _role_matches(r, role_filter)]
        roles.extend(attach_parent(matched, sp, "service_principal"))
    return roles


def expand_scopes(principals: Iterable[ServicePrincipal], scope_filter: str | None = None) -> list[PermissionScope]:
    """Delegated permission scopes of each principal, optionally prefix-filtered."""
    scopes = []
    for sp in principals:
        matched = [s for s in sp.oauth2_permission_scopes if _role_matches(s, scope_filter)]
        scopes.extend(attach_parent(matched, sp, "service_principal"))
    return scopes


def expand(
    principals: Iterable[ServicePrincipal],
    app_roles: bool = False,
    role_filter: str | None = None,
    scopes: bool = False,
    scope_filter: str | None = None,
) -> list:
    """Apply at most one of role or scope expansion; return principals untouched otherwise."""
    want_roles = app_roles or role_filter is not None
    want_scopes = scopes or scope_filter is not None
    if want_roles and want_scopes:
        raise ParameterError("App role and scope expansion cannot be combined")
    if want_roles:
        return expand_app_roles(principals, role_filter)
    if want_scopes:
        return expand_scopes(principals, scope_filter)
    return list(principals)


def _role_matches(item: AppRole | PermissionScope, pattern: str | None) -> bool:
    if not pattern:
        return True
    return prefix_matches(item.value, pattern) or prefix_matches(item.display_name, pattern)
