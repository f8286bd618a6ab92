"""OneNote section operations via Microsoft Graph API."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from .. import handles
from ..batch import BatchReport, run_batch
from ..errors import MissingTargetError, UnresolvableTargetError
from ..handles import ME, Capability, OwnerContext, name_filter, resolve, with_query
from ..models import Notebook, Section, attach_parent
from ..transport import GraphTransport

logger = logging.getLogger(__name__)


def list_sections(
    transport: GraphTransport,
    notebooks: Iterable[Any],
    name: str | None = None,
    context: OwnerContext = ME,
) -> BatchReport:
    """List sections of each notebook handle, in input order.

    A bad handle is reported and skipped; the remaining notebooks still run.
    """

    def sections_of(notebook) -> list[Section]:
        found = []
        for handle in handles.expand(transport, notebook, Capability.NOTEBOOK_SECTIONS, context):
            found.extend(_sections_for_handle(transport, handle, name))
        return found

    return run_batch(notebooks, sections_of, label="notebook")


def _sections_for_handle(transport: GraphTransport, handle, name: str | None) -> list[Section]:
    path, query = resolve(handle, Capability.NOTEBOOK_SECTIONS)
    url = with_query(path, query, name_filter(name) if name else "")
    sections = [Section.from_json(s) for s in transport.get_collection(url)]
    return attach_parent(sections, handles.parent_record(handle, Notebook), "parent_notebook")


def create_section(
    transport: GraphTransport,
    notebook: Any,
    display_name: str,
    context: OwnerContext = ME,
) -> Section:
    """Create a new section in a notebook.

    The notebook is mandatory; a name must match exactly one notebook.
    """
    if notebook is None or notebook == "":
        raise MissingTargetError("A notebook is required to create a section")
    matches = list(handles.expand(transport, notebook, Capability.NOTEBOOK_SECTIONS, context))
    if len(matches) != 1:
        raise UnresolvableTargetError(f"Expected one notebook matching {notebook!r}, found {len(matches)}")
    handle = matches[0]

    path, _ = resolve(handle, Capability.NOTEBOOK_SECTIONS)
    data = transport.invoke("POST", path, json={"displayName": display_name})
    section = Section.from_json(data)
    attach_parent([section], handles.parent_record(handle, Notebook), "parent_notebook")
    logger.info("Created section %r", display_name)
    return section
