"""OneNote page operations via Microsoft Graph API.

Update and delete fetch the page first: a 404 there means the page is already
gone and is reported as a warning, and no PATCH or DELETE is sent.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Iterable

from .. import handles
from ..batch import BatchReport, run_batch
from ..errors import MissingTargetError, NotFoundError, ParameterError, UnresolvableTargetError
from ..handles import ME, Capability, OwnerContext, name_filter, resolve, with_query
from ..html_convert import (
    PATCH_ACTIONS,
    PATCH_POSITIONS,
    extract_title,
    make_patch_content,
    markdown_to_html,
    markdown_to_onenote_html,
)
from ..models import Page, Section, attach_parent
from ..multipart import build_file_page_from_path
from ..transport import GraphTransport

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


def list_pages(
    transport: GraphTransport,
    sections: Iterable[Any],
    name: str | None = None,
    context: OwnerContext = ME,
) -> BatchReport:
    """List pages of each section handle, optionally filtered by title prefix."""

    def pages_of(section) -> list[Page]:
        found = []
        for handle in handles.expand(transport, section, Capability.SECTION_PAGES, context):
            path, query = resolve(handle, Capability.SECTION_PAGES)
            url = with_query(path, query, name_filter(name, "title") if name else "")
            pages = [Page.from_json(p) for p in transport.get_collection(url)]
            found.extend(attach_parent(pages, handles.parent_record(handle, Section), "parent_section"))
        return found

    return run_batch(sections, pages_of, label="section")


def get_page(
    transport: GraphTransport,
    page: Any,
    content: bool = False,
    include_ids: bool = False,
    context: OwnerContext = ME,
) -> Page:
    """Fetch page metadata, plus its HTML when ``content`` or ``include_ids`` is set.

    ``include_ids`` wins over ``content``: the HTML then carries the element
    ids that update targets refer to.
    """
    handle = _single(transport, page, Capability.ITEM_SELF, context)
    path, _ = resolve(handle, Capability.ITEM_SELF)
    result = Page.from_json(transport.get(path))

    if include_ids or content:
        capability = Capability.PAGE_CONTENT_WITH_IDS if include_ids else Capability.PAGE_CONTENT
        content_path, query = resolve(handle, capability)
        result.content = transport.get(with_query(content_path, query), raw=True)
    return result


def get_pages(
    transport: GraphTransport,
    pages: Iterable[Any],
    content: bool = False,
    include_ids: bool = False,
    context: OwnerContext = ME,
) -> BatchReport:
    def fetch(page) -> list[Page]:
        return [
            get_page(transport, handle, content=content, include_ids=include_ids)
            for handle in handles.expand(transport, page, Capability.ITEM_SELF, context)
        ]

    return run_batch(pages, fetch, label="page")


def create_page(
    transport: GraphTransport,
    html: str,
    section: Any = None,
    default_section: str | None = None,
    context: OwnerContext = ME,
) -> Page:
    """Create a page from a full HTML document; the title comes from <title>."""
    handle = _section_handle(transport, section, default_section, context)
    path, _ = resolve(handle, Capability.SECTION_PAGES)
    data = transport.invoke("POST", path, content=html.encode("utf-8"), headers={"Content-Type": "text/html"})
    return _created(data, handle, extract_title(html))


def create_page_from_markdown(
    transport: GraphTransport,
    title: str,
    content_md: str,
    section: Any = None,
    default_section: str | None = None,
    context: OwnerContext = ME,
) -> Page:
    html = markdown_to_onenote_html(title, content_md)
    return create_page(transport, html, section=section, default_section=default_section, context=context)


def add_file_page(
    transport: GraphTransport,
    path: Path,
    section: Any = None,
    title: str | None = None,
    mime_type: str | None = None,
    default_section: str | None = None,
    context: OwnerContext = ME,
) -> Page:
    """Create a page holding one file: inline for images, as an attachment otherwise."""
    handle = _section_handle(transport, section, default_section, context)
    body = build_file_page_from_path(Path(path), title=title, mime_type=mime_type)
    pages_path, _ = resolve(handle, Capability.SECTION_PAGES)
    data = transport.invoke("POST", pages_path, files=body.files, headers=body.headers)
    return _created(data, handle, title or Path(path).stem)


def update_page(
    transport: GraphTransport,
    page: Any,
    content: str,
    action: str = "append",
    target: str = "body",
    position: str | None = None,
    confirm: Confirm | None = None,
    markdown: bool = False,
    context: OwnerContext = ME,
) -> dict:
    """Apply one partial update to a page's content.

    Args:
        page: record, link or title of the page.
        content: HTML or text, sent as given.
        action: one of replace, append, delete, insert, prepend.
        target: 'body' or the data-id / id of an element on the page.
        position: 'before' or 'after', only with insert.
        confirm: called with the page title; returning False skips the update.
        markdown: treat content as Markdown and convert it to HTML first.
    """
    _check_patch(action, position)
    handle = _single(transport, page, Capability.ITEM_SELF, context)
    current = _prefetch(transport, handle)
    if current is None:
        return {"status": "not_found", "page": _describe(handle)}

    if confirm is not None and not confirm(f"Update page '{current.title}'"):
        return {"status": "skipped", "pageId": current.id, "title": current.title}

    if markdown and content:
        content = markdown_to_html(content)

    path, _ = resolve(handle, Capability.PAGE_CONTENT)
    transport.invoke(
        "PATCH",
        path,
        content=make_patch_content(action, content, target=target, position=position),
        headers={"Content-Type": "application/json"},
    )
    logger.info("Updated page %r (%s %s)", current.title, action, target)
    return {"status": "updated", "pageId": current.id, "title": current.title, "action": action}


def delete_page(
    transport: GraphTransport,
    page: Any,
    confirm: Confirm | None = None,
    context: OwnerContext = ME,
) -> dict:
    """Delete a page; a page that is already gone is not an error."""
    handle = _single(transport, page, Capability.ITEM_SELF, context)
    current = _prefetch(transport, handle)
    if current is None:
        return {"status": "already_deleted", "page": _describe(handle)}

    if confirm is not None and not confirm(f"Delete page '{current.title}'"):
        return {"status": "skipped", "pageId": current.id, "title": current.title}

    path, _ = resolve(handle, Capability.ITEM_SELF)
    transport.invoke("DELETE", path)
    logger.info("Deleted page %r", current.title)
    return {"status": "deleted", "pageId": current.id, "title": current.title}


def update_pages(transport: GraphTransport, pages: Iterable[Any], content: str, **kwargs) -> BatchReport:
    _check_patch(kwargs.get("action", "append"), kwargs.get("position"))
    return run_batch(pages, lambda page: update_page(transport, page, content, **kwargs), label="page")


def delete_pages(transport: GraphTransport, pages: Iterable[Any], **kwargs) -> BatchReport:
    return run_batch(pages, lambda page: delete_page(transport, page, **kwargs), label="page")


def _check_patch(action: str, position: str | None) -> None:
    if action not in PATCH_ACTIONS:
        raise ParameterError(f"Unknown action {action!r}; expected one of {', '.join(PATCH_ACTIONS)}")
    if position is None:
        return
    if position not in PATCH_POSITIONS:
        raise ParameterError(f"Unknown position {position!r}; expected before or after")
    if action != "insert":
        raise ParameterError("position can only be used with the insert action")


def _prefetch(transport: GraphTransport, handle) -> Page | None:
    """Current page, or None (with a warning) when it does not exist."""
    path, _ = resolve(handle, Capability.ITEM_SELF)
    try:
        return Page.from_json(transport.get(path))
    except NotFoundError:
        logger.warning("Page %s not found", path)
        return None


def _single(transport: GraphTransport, value: Any, capability: Capability, context: OwnerContext):
    matches = list(handles.expand(transport, value, capability, context))
    if len(matches) != 1:
        raise UnresolvableTargetError(f"Expected one match for {value!r}, found {len(matches)}")
    return matches[0]


def _section_handle(transport: GraphTransport, section: Any, default_section: str | None, context: OwnerContext):
    if section is None or section == "":
        section = default_section
    if section is None or section == "":
        raise MissingTargetError("No section given and MSGRAPH_DEFAULT_SECTION is not set")
    return _single(transport, section, Capability.SECTION_PAGES, context)


def _created(data: dict, section_handle, fallback_title: str | None) -> Page:
    page = Page.from_json(data or {})
    if page.title is None:
        page.title = fallback_title
    attach_parent([page], handles.parent_record(section_handle, Section), "parent_section")
    logger.info("Created page %r", page.title)
    return page


def _describe(handle) -> str:
    path, _ = resolve(handle, Capability.ITEM_SELF)
    return path
