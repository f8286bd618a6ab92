"""OneNote notebook operations via Microsoft Graph API."""

from __future__ import annotations

import logging

from ..errors import UnresolvableTargetError
from ..handles import ME, Capability, NameHandle, OwnerContext, name_filter, resolve, to_handle, with_query
from ..models import Notebook
from ..transport import GraphTransport

logger = logging.getLogger(__name__)


def list_notebooks(
    transport: GraphTransport,
    context: OwnerContext = ME,
    name: str | None = None,
    expand_sections: bool = False,
) -> list[Notebook]:
    """List notebooks, optionally filtered by name prefix.

    With ``expand_sections`` the sections come back in the same response and
    each gets its ``parent_notebook`` back-reference.
    """
    url = with_query(
        f"{context.base}/notebooks",
        name_filter(name) if name else "",
        "$expand=sections" if expand_sections else "",
    )
    return [Notebook.from_json(nb) for nb in transport.get_collection(url)]


def get_notebook(transport: GraphTransport, notebook, context: OwnerContext = ME) -> Notebook:
    """Get a single notebook from a record, link or unique name prefix."""
    handle = to_handle(notebook)
    if isinstance(handle, NameHandle):
        matches = list_notebooks(transport, context, name=handle.name)
        if len(matches) != 1:
            raise UnresolvableTargetError(f"Expected one notebook named {handle.name!r}, found {len(matches)}")
        return matches[0]
    path, _ = resolve(handle, Capability.ITEM_SELF)
    return Notebook.from_json(transport.get(path))


def create_notebook(transport: GraphTransport, display_name: str, context: OwnerContext = ME) -> Notebook:
    """Create a new notebook."""
    data = transport.invoke("POST", f"{context.base}/notebooks", json={"displayName": display_name})
    logger.info("Created notebook %r", display_name)
    return Notebook.from_json(data)
