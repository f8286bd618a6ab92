"""Typed records for the Graph resources the commands return."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, TypeVar

T = TypeVar("T")


def strip_bookkeeping(data: dict) -> dict:
    """Drop @odata.* annotations Graph adds to every payload."""
    return {k: v for k, v in data.items() if "@odata." not in k and not k.startswith("@")}


def _link(data: dict, key: str) -> str | None:
    links = data.get("links") or {}
    value = links.get(key) or {}
    return value.get("href")


@dataclass
class Notebook:
    id: str | None = None
    display_name: str | None = None
    created: str | None = None
    last_modified: str | None = None
    is_shared: bool | None = None
    self_url: str | None = None
    sections_url: str | None = None
    web_url: str | None = None
    sections: list[Section] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: dict) -> Notebook:
        data = strip_bookkeeping(data)
        notebook = cls(
            id=data.get("id"),
            display_name=data.get("displayName"),
            created=data.get("createdDateTime"),
            last_modified=data.get("lastModifiedDateTime"),
            is_shared=data.get("isShared"),
            self_url=data.get("self"),
            sections_url=data.get("sectionsUrl"),
            web_url=_link(data, "oneNoteWebUrl"),
        )
        notebook.sections = [Section.from_json(s) for s in data.get("sections") or []]
        attach_parent(notebook.sections, notebook, "parent_notebook")
        return notebook

    @classmethod
    def stub(cls, self_url: str) -> Notebook:
        """Minimal record for a notebook known only by its link."""
        return cls(self_url=self_url)

    def to_dict(self, with_children: bool = True) -> dict:
        result = {
            "id": self.id,
            "displayName": self.display_name,
            "createdDateTime": self.created,
            "lastModifiedDateTime": self.last_modified,
            "isShared": self.is_shared,
            "self": self.self_url,
            "sectionsUrl": self.sections_url,
            "webUrl": self.web_url,
        }
        if with_children and self.sections:
            result["sections"] = [s.to_dict(with_parent=False) for s in self.sections]
        return result


@dataclass
class Section:
    id: str | None = None
    display_name: str | None = None
    created: str | None = None
    last_modified: str | None = None
    self_url: str | None = None
    pages_url: str | None = None
    parent_notebook: Notebook | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_json(cls, data: dict) -> Section:
        data = strip_bookkeeping(data)
        parent = data.get("parentNotebook")
        return cls(
            id=data.get("id"),
            display_name=data.get("displayName"),
            created=data.get("createdDateTime"),
            last_modified=data.get("lastModifiedDateTime"),
            self_url=data.get("self"),
            pages_url=data.get("pagesUrl"),
            parent_notebook=Notebook.from_json(parent) if parent else None,
        )

    @classmethod
    def stub(cls, self_url: str) -> Section:
        """Minimal record for a section known only by its link."""
        return cls(self_url=self_url)

    def to_dict(self, with_parent: bool = True) -> dict:
        result = {
            "id": self.id,
            "displayName": self.display_name,
            "createdDateTime": self.created,
            "lastModifiedDateTime": self.last_modified,
            "self": self.self_url,
            "pagesUrl": self.pages_url,
        }
        if with_parent and self.parent_notebook is not None:
            result["parentNotebook"] = _parent_ref(self.parent_notebook)
        return result


@dataclass
class Page:
    id: str | None = None
    title: str | None = None
    created: str | None = None
    last_modified: str | None = None
    self_url: str | None = None
    content_url: str | None = None
    parent_section: Section | None = field(default=None, compare=False, repr=False)
    content: str | None = None

    @classmethod
    def from_json(cls, data: dict) -> Page:
        data = strip_bookkeeping(data)
        parent = data.get("parentSection")
        return cls(
            id=data.get("id"),
            title=data.get("title"),
            created=data.get("createdDateTime"),
            last_modified=data.get("lastModifiedDateTime"),
            self_url=data.get("self"),
            content_url=data.get("contentUrl"),
            parent_section=Section.from_json(parent) if parent else None,
        )

    def to_dict(self) -> dict:
        result = {
            "id": self.id,
            "title": self.title,
            "createdDateTime": self.created,
            "lastModifiedDateTime": self.last_modified,
            "self": self.self_url,
            "contentUrl": self.content_url,
        }
        if self.parent_section is not None:
            result["parentSection"] = _parent_ref(self.parent_section)
        if self.content is not None:
            result["content"] = self.content
        return result


@dataclass
class AppRole:
    id: str | None = None
    value: str | None = None
    display_name: str | None = None
    description: str | None = None
    is_enabled: bool | None = None
    allowed_member_types: list[str] = field(default_factory=list)
    service_principal: ServicePrincipal | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_json(cls, data: dict) -> AppRole:
        return cls(
            id=data.get("id"),
            value=data.get("value"),
            display_name=data.get("displayName"),
            description=data.get("description"),
            is_enabled=data.get("isEnabled"),
            allowed_member_types=list(data.get("allowedMemberTypes") or []),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "value": self.value,
            "displayName": self.display_name,
            "description": self.description,
            "isEnabled": self.is_enabled,
            "allowedMemberTypes": self.allowed_member_types,
            "servicePrincipal": _principal_ref(self.service_principal),
        }


@dataclass
class PermissionScope:
    id: str | None = None
    value: str | None = None
    display_name: str | None = None
    description: str | None = None
    is_enabled: bool | None = None
    type: str | None = None
    service_principal: ServicePrincipal | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_json(cls, data: dict) -> PermissionScope:
        return cls(
            id=data.get("id"),
            value=data.get("value"),
            display_name=data.get("adminConsentDisplayName"),
            description=data.get("adminConsentDescription"),
            is_enabled=data.get("isEnabled"),
            type=data.get("type"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "value": self.value,
            "displayName": self.display_name,
            "description": self.description,
            "isEnabled": self.is_enabled,
            "type": self.type,
            "servicePrincipal": _principal_ref(self.service_principal),
        }


@dataclass
class ServicePrincipal:
    id: str | None = None
    app_id: str | None = None
    display_name: str | None = None
    service_principal_type: str | None = None
    app_roles: list[AppRole] = field(default_factory=list)
    oauth2_permission_scopes: list[PermissionScope] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: dict) -> ServicePrincipal:
        data = strip_bookkeeping(data)
        return cls(
            id=data.get("id"),
            app_id=data.get("appId"),
            display_name=data.get("displayName"),
            service_principal_type=data.get("servicePrincipalType"),
            app_roles=[AppRole.from_json(r) for r in data.get("appRoles") or []],
            oauth2_permission_scopes=[
                PermissionScope.from_json(s) for s in data.get("oauth2PermissionScopes") or []
            ],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "appId": self.app_id,
            "displayName": self.display_name,
            "servicePrincipalType": self.service_principal_type,
            "appRoles": [r.value for r in self.app_roles],
            "oauth2PermissionScopes": [s.value for s in self.oauth2_permission_scopes],
        }


def attach_parent(children: Iterable[T], parent: Any, field_name: str) -> list[T]:
    """Set ``field_name`` on each child to ``parent`` where it is still empty.

    A back-reference the API already returned is left alone, so calling this
    again with the same parent changes nothing.
    """
    children = list(children)
    for child in children:
        if getattr(child, field_name) is None:
            setattr(child, field_name, parent)
    return children


def _parent_ref(parent: Notebook | Section) -> dict:
    return {
        "id": parent.id,
        "displayName": parent.display_name,
        "self": parent.self_url,
    }


def _principal_ref(principal: ServicePrincipal | None) -> dict | None:
    if principal is None:
        return None
    return {"id": principal.id, "displayName": principal.display_name}
