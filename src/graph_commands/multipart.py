"""Multipart request body for a OneNote page that carries one file."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path

from .errors import AmbiguousMimeTypeError
from .html_convert import _escape_html, page_document

BOUNDARY = "GraphCommandsPartBoundary"
FILE_PART = "fileBlock1"
PRESENTATION_PART = "Presentation"
CONTENT_TYPE = f"multipart/form-data; boundary={BOUNDARY}"

# (part name, (file name or None, data, content type)), in send order
Part = tuple[str, tuple[str | None, bytes, str]]


@dataclass
class MultipartBody:
    """Parts and headers ready to pass to httpx as ``files=`` and ``headers=``.

    httpx takes the boundary from the Content-Type header, so the body always
    uses BOUNDARY.
    """

    files: list[Part]
    headers: dict[str, str] = field(default_factory=lambda: {"Content-Type": CONTENT_TYPE})


def guess_mime_type(file_name: str, mime_type: str | None = None) -> str:
    """Explicit MIME type if given, else a guess from the file extension."""
    if mime_type:
        return mime_type
    guessed, _ = mimetypes.guess_type(file_name)
    if not guessed:
        raise AmbiguousMimeTypeError(f"Cannot tell the MIME type of {file_name!r}; pass one explicitly")
    return guessed


def file_block_html(file_name: str, mime_type: str) -> str:
    """HTML that shows the attached part on the page.

    Images are drawn inline; other files become an attachment object with a
    rendered preview.
    """
    name = _escape_html(file_name)
    if mime_type.startswith("image/"):
        return f'<img src="name:{FILE_PART}" alt="{name}" />'
    return (
        f'<object data-attachment="{name}" data="name:{FILE_PART}" type="{_escape_html(mime_type)}" />'
        f'<img data-render-src="name:{FILE_PART}" alt="{name}" />'
    )


def build_file_page(title: str, file_name: str, data: bytes, mime_type: str) -> MultipartBody:
    """Presentation part first, then the file part."""
    html = page_document(title, file_block_html(file_name, mime_type))
    return MultipartBody(
        files=[
            (PRESENTATION_PART, (None, html.encode("utf-8"), "text/html")),
            (FILE_PART, (file_name, data, mime_type)),
        ]
    )


def build_file_page_from_path(
    path: Path,
    title: str | None = None,
    mime_type: str | None = None,
) -> MultipartBody:
    mime_type = guess_mime_type(path.name, mime_type)
    return build_file_page(title or path.stem, path.name, path.read_bytes(), mime_type)
