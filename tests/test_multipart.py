"""Tests for the file attachment page body."""

import httpx
import pytest

from graph_commands.errors import AmbiguousMimeTypeError
from graph_commands.multipart import (
    BOUNDARY,
    CONTENT_TYPE,
    FILE_PART,
    build_file_page,
    build_file_page_from_path,
    file_block_html,
    guess_mime_type,
)

PNG = b"\x89PNG\r\n\x1a\nfake"


def _encode(body) -> bytes:
    request = httpx.Request("POST", "https://graph.test/pages", headers=body.headers, files=body.files)
    return request.read()


def _parts(body) -> list[bytes]:
    """Encode, then split on the boundary, dropping the preamble and the closing marker."""
    chunks = _encode(body).split(b"--" + BOUNDARY.encode())
    assert chunks[0] == b""
    assert chunks[-1] == b"--\r\n"
    return chunks[1:-1]


class TestBuildFilePage:
    def test_image_page_has_two_ordered_parts(self):
        presentation, file_block = _parts(build_file_page("Demo", "chart.png", PNG, "image/png"))

        assert b'name="Presentation"' in presentation
        assert b"Content-Type: text/html" in presentation
        assert b"<title>Demo</title>" in presentation
        assert f'<img src="name:{FILE_PART}"'.encode() in presentation
        assert b"<object" not in presentation

        assert f'name="{FILE_PART}"'.encode() in file_block
        assert b"Content-Type: image/png" in file_block
        assert PNG in file_block

    def test_binary_data_is_untouched(self):
        data = bytes(range(256))
        _, file_block = _parts(build_file_page("Bin", "blob.bin", data, "application/octet-stream"))
        assert file_block.endswith(data + b"\r\n")

    def test_non_image_is_embedded_with_thumbnail(self):
        presentation, _ = _parts(build_file_page("Report", "q3.pdf", b"%PDF-1.7", "application/pdf"))
        assert b'<object data-attachment="q3.pdf"' in presentation
        assert f'data="name:{FILE_PART}"'.encode() in presentation
        assert f'<img data-render-src="name:{FILE_PART}"'.encode() in presentation

    def test_content_type_names_boundary(self):
        body = build_file_page("t", "a.png", b"", "image/png")
        assert body.headers["Content-Type"] == CONTENT_TYPE
        assert CONTENT_TYPE.endswith(f"boundary={BOUNDARY}")
        assert _encode(body).count(f"--{BOUNDARY}".encode()) == 3

    def test_from_path_defaults_title_to_stem(self, tmp_path):
        path = tmp_path / "diagram.png"
        path.write_bytes(PNG)
        encoded = _encode(build_file_page_from_path(path))
        assert b"<title>diagram</title>" in encoded
        assert b"Content-Type: image/png" in encoded


class TestFileBlockHtml:
    def test_attribute_values_are_escaped(self):
        html = file_block_html('a"b.bin', 'application/x-"odd"')
        assert 'data-attachment="a&quot;b.bin"' in html
        assert 'type="application/x-&quot;odd&quot;"' in html


class TestGuessMimeType:
    def test_explicit_wins(self):
        assert guess_mime_type("notes.weird", "text/plain") == "text/plain"

    def test_guess_from_extension(self):
        assert guess_mime_type("photo.jpg") == "image/jpeg"

    def test_unknown_extension(self):
        with pytest.raises(AmbiguousMimeTypeError):
            guess_mime_type("archive.unknownext")
