"""Convert between HTML (Graph API) and Markdown, and build page bodies."""

import json
import re

import markdown
import markdownify

PATCH_ACTIONS = ("replace", "append", "delete", "insert", "prepend")
PATCH_POSITIONS = ("before", "after")

_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)


def html_to_markdown(html: str) -> str:
    """Convert OneNote HTML content to Markdown.

    Strips OneNote-specific metadata attributes and converts to clean Markdown.
    """
    # Remove OneNote-specific data attributes and style tags
    cleaned = re.sub(r'\s+data-[\w-]+="[^"]*"', "", html)
    cleaned = re.sub(r'\s+style="[^"]*"', "", cleaned)

    result = markdownify.markdownify(
        cleaned,
        heading_style="ATX",
        bullets="-",
        strip=["img"],  # binary data not useful in CLI output
    )

    result = re.sub(r"\n{3,}", "\n\n", result)
    return result.strip()


def markdown_to_html(md_content: str) -> str:
    return markdown.markdown(md_content, extensions=["tables", "fenced_code"])


def page_document(title: str, body_html: str) -> str:
    """Wrap body HTML in the document structure OneNote expects."""
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        f"  <head><title>{_escape_html(title)}</title></head>\n"
        f"  <body>{body_html}</body>\n"
        "</html>"
    )


def markdown_to_onenote_html(title: str, md_content: str) -> str:
    """Convert Markdown to OneNote-compatible HTML for page creation."""
    return page_document(title, markdown_to_html(md_content))


def extract_title(html: str) -> str | None:
    """Text of the first <title> element, or None."""
    match = _TITLE_RE.search(html)
    if not match:
        return None
    return match.group(1).strip() or None


def make_patch_content(
    action: str,
    html_content: str,
    target: str = "body",
    position: str | None = None,
) -> str:
    """Create a JSON PATCH body for updating a OneNote page.

    Args:
        action: one of PATCH_ACTIONS
        html_content: HTML content for the patch
        target: element id or 'body'
        position: 'before' or 'after', only meaningful for insert

    Returns:
        JSON string for the PATCH request body.
    """
    change = {
        "target": target,
        "action": action,
        "content": html_content,
    }
    if position:
        change["position"] = position
    return json.dumps([change])


def _escape_html(text: str) -> str:
    """Escape HTML special characters in text."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )
