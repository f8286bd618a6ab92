"""Turn loosely typed command targets into Graph paths and query strings.

A target ("handle") is one of:

* a record returned by an earlier command, or its JSON form, carrying a
  ``self`` link and possibly a precomputed collection link;
* a raw Graph URL;
* a display name, matched as a case-insensitive prefix.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping
from urllib.parse import quote

from .errors import MissingTargetError, UnresolvableTargetError
from .models import Notebook, Page, Section

logger = logging.getLogger(__name__)


class Capability(enum.Enum):
    """What the caller wants to reach from a handle."""

    NOTEBOOK_SECTIONS = "notebook-sections"
    SECTION_PAGES = "section-pages"
    PAGE_CONTENT = "page-content"
    PAGE_CONTENT_WITH_IDS = "page-content-with-ids"
    ITEM_SELF = "item-self"


# suffix appended to a self link, and the precomputed link that replaces it
_SUFFIXES = {
    Capability.NOTEBOOK_SECTIONS: "/sections",
    Capability.SECTION_PAGES: "/pages",
    Capability.PAGE_CONTENT: "/content",
    Capability.PAGE_CONTENT_WITH_IDS: "/content",
    Capability.ITEM_SELF: "",
}
_COLLECTION_LINKS = {
    Capability.NOTEBOOK_SECTIONS: "sectionsUrl",
    Capability.SECTION_PAGES: "pagesUrl",
    Capability.PAGE_CONTENT: "contentUrl",
    Capability.PAGE_CONTENT_WITH_IDS: "contentUrl",
}
# flat collection searched when the handle is a name
_NAME_COLLECTIONS = {
    Capability.NOTEBOOK_SECTIONS: ("notebooks", "displayName"),
    Capability.SECTION_PAGES: ("sections", "displayName"),
    Capability.PAGE_CONTENT: ("pages", "title"),
    Capability.PAGE_CONTENT_WITH_IDS: ("pages", "title"),
    Capability.ITEM_SELF: ("pages", "title"),
}

INCLUDE_IDS = "includeIDs=true"


@dataclass(frozen=True)
class OwnerContext:
    """Whose OneNote tree a relative path is rooted in."""

    kind: str = "me"
    id: str | None = None

    @classmethod
    def me(cls) -> OwnerContext:
        return cls()

    @classmethod
    def user(cls, user_id: str) -> OwnerContext:
        return cls("users", user_id)

    @classmethod
    def group(cls, group_id: str) -> OwnerContext:
        return cls("groups", group_id)

    @classmethod
    def site(cls, site_id: str) -> OwnerContext:
        return cls("sites", site_id)

    @property
    def base(self) -> str:
        if self.kind == "me":
            return "/me/onenote"
        return f"/{self.kind}/{self.id}/onenote"


ME = OwnerContext.me()


@dataclass(frozen=True)
class ObjectHandle:
    self_url: str | None
    links: Mapping[str, str] = field(default_factory=dict)
    target: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class LinkHandle:
    url: str


@dataclass(frozen=True)
class NameHandle:
    name: str


Handle = ObjectHandle | LinkHandle | NameHandle


def to_handle(value: Any) -> Handle:
    """Classify a command target.

    Raises MissingTargetError for None or an empty string and
    UnresolvableTargetError for anything that is not a record, a mapping
    with a link, or a string.
    """
    if isinstance(value, (ObjectHandle, LinkHandle, NameHandle)):
        return value
    if value is None:
        raise MissingTargetError("No target given")
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise MissingTargetError("No target given")
        if text.startswith(("http://", "https://")):
            return LinkHandle(text)
        return NameHandle(text)
    if isinstance(value, Notebook):
        return _object_handle(value.self_url, {"sectionsUrl": value.sections_url}, value)
    if isinstance(value, Section):
        return _object_handle(value.self_url, {"pagesUrl": value.pages_url}, value)
    if isinstance(value, Page):
        return _object_handle(value.self_url, {"contentUrl": value.content_url}, value)
    if isinstance(value, Mapping):
        links = {key: value.get(key) for key in ("sectionsUrl", "pagesUrl", "contentUrl")}
        return _object_handle(value.get("self") or value.get("selfUrl"), links, value)
    raise UnresolvableTargetError(f"Cannot use {type(value).__name__} as a target")


def _object_handle(self_url: str | None, links: dict, target: Any) -> ObjectHandle:
    links = {k: v for k, v in links.items() if v}
    if not self_url and not links:
        raise UnresolvableTargetError(f"Target {target!r} has no self link")
    return ObjectHandle(self_url, links, target)


def resolve(handle: Handle, capability: Capability, context: OwnerContext = ME) -> tuple[str, str]:
    """Return ``(path, query)`` for reaching ``capability`` from ``handle``.

    A name handle resolves to the owner's flat collection of the parent kind
    plus a prefix filter; ``lookup_by_name`` expands it into object handles.
    """
    query = INCLUDE_IDS if capability is Capability.PAGE_CONTENT_WITH_IDS else ""
    suffix = _SUFFIXES[capability]

    match handle:
        case ObjectHandle(self_url=self_url, links=links):
            precomputed = links.get(_COLLECTION_LINKS.get(capability, ""))
            if precomputed:
                return precomputed, query
            if not self_url:
                raise UnresolvableTargetError(f"Target has no link for {capability.value}")
            return _with_suffix(self_url, suffix), query
        case LinkHandle(url=url):
            return _with_suffix(url, suffix), query
        case NameHandle(name=name):
            collection, field_name = _NAME_COLLECTIONS[capability]
            return f"{context.base}/{collection}", name_filter(name, field_name)
    raise UnresolvableTargetError(f"Unknown handle {handle!r}")


def _with_suffix(url: str, suffix: str) -> str:
    url = url.rstrip("/")
    if not suffix:
        # an item link never carries the content suffix
        return url.removesuffix("/content")
    if url.endswith(suffix):
        return url
    return url + suffix


def _prefix(name: str) -> str:
    return name.strip().lower().rstrip("*")


def prefix_predicate(name: str, field_name: str = "displayName") -> str:
    """OData starts-with predicate, lower-cased on both sides."""
    escaped = _prefix(name).replace("'", "''")
    return f"startswith(tolower({field_name}),'{escaped}')"


def name_filter(name: str, field_name: str = "displayName") -> str:
    """Case-insensitive starts-with $filter fragment for ``name``.

    Only prefix matching is supported; a trailing ``*`` is dropped.
    """
    return f"$filter={prefix_predicate(name, field_name)}"


def prefix_matches(text: str | None, name: str) -> bool:
    """Local equivalent of ``prefix_predicate`` for records already fetched."""
    return text is not None and text.lower().startswith(_prefix(name))


def with_query(path: str, *fragments: str) -> str:
    """Append non-empty ``key=value`` fragments to ``path``, percent-encoding the values."""
    parts = [_encode_fragment(f) for f in fragments if f]
    if not parts:
        return path
    joiner = "&" if "?" in path else "?"
    return path + joiner + "&".join(parts)


def _encode_fragment(fragment: str) -> str:
    key, sep, value = fragment.partition("=")
    return key + sep + quote(value, safe="(),'")


def lookup_by_name(transport, handle: NameHandle, capability: Capability, context: OwnerContext = ME) -> list[Handle]:
    """Expand a name handle into one object handle per matching record."""
    path, query = resolve(handle, capability, context)
    record_type = {"notebooks": Notebook, "sections": Section, "pages": Page}[path.rsplit("/", 1)[-1]]
    matches = [record_type.from_json(item) for item in transport.get_collection(with_query(path, query))]
    if not matches:
        logger.warning("Nothing named %r in %s", handle.name, path)
    return [to_handle(record) for record in matches]


def expand(transport, value: Any, capability: Capability, context: OwnerContext = ME) -> Iterator[Handle]:
    """Yield resolvable handles for a target, looking names up first."""
    handle = to_handle(value)
    if isinstance(handle, NameHandle):
        yield from lookup_by_name(transport, handle, capability, context)
    else:
        yield handle


def parent_record(handle: Handle, record_type: type) -> Any:
    """The record to attach as a back-reference for children fetched via ``handle``."""
    if isinstance(handle, ObjectHandle):
        if isinstance(handle.target, record_type):
            return handle.target
        if isinstance(handle.target, Mapping):
            return record_type.from_json(dict(handle.target))
        return record_type.stub(handle.self_url)
    if isinstance(handle, LinkHandle):
        url = handle.url.rstrip("/")
        for suffix in ("/sections", "/pages"):
            url = url.removesuffix(suffix)
        return record_type.stub(url)
    return None
