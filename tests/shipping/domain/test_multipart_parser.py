import pytest
from protean.exceptions import ValidationError
from shipping.uploads.multipart import UploadedFile, extract_boundary, parse_multipart

BOUNDARY = "----TrackerBoundary7MA4YWxkTrZu0gW"
CONTENT_TYPE = f"multipart/form-data; boundary={BOUNDARY}"


def _part(headers: list[str], body: bytes) -> bytes:
    return f"--{BOUNDARY}\r\n".encode() + "\r\n".join(headers).encode() + b"\r\n\r\n" + body + b"\r\n"


def _file_part(content: bytes, filename="proof.jpg", content_type="image/jpeg", name="file") -> bytes:
    return _part(
        [
            f'Content-Disposition: form-data; name="{name}"; filename="{filename}"',
            f"Content-Type: {content_type}",
        ],
        content,
    )


def _field_part(name: str, value: str) -> bytes:
    return _part([f'Content-Disposition: form-data; name="{name}"'], value.encode())


def _close() -> bytes:
    return f"--{BOUNDARY}--\r\n".encode()


class TestBoundary:
    def test_unquoted_boundary(self):
        assert extract_boundary("multipart/form-data; boundary=abc123") == "abc123"

    def test_quoted_boundary(self):
        assert extract_boundary('multipart/form-data; boundary="a b;c"') == "a b;c"

    def test_boundary_followed_by_other_params(self):
        assert extract_boundary("multipart/form-data; boundary=xyz; charset=utf-8") == "xyz"

    def test_missing_boundary(self):
        assert extract_boundary("multipart/form-data") is None


class TestParseMultipart:
    def test_file_and_field(self):
        content = b"\xff\xd8\xff\xe0fake-jpeg-bytes"
        body = _file_part(content) + _field_part("recipient_signature_name", "Jane Doe") + _close()

        form = parse_multipart(CONTENT_TYPE, body)

        assert isinstance(form.file, UploadedFile)
        assert form.file.content == content
        assert form.file.filename == "proof.jpg"
        assert form.file.content_type == "image/jpeg"
        assert form.file.size == len(content)
        assert form.fields == {"recipient_signature_name": "Jane Doe"}

    def test_binary_content_preserved_exactly(self):
        content = bytes(range(256)) + b"\r\n\r\n--not-a-boundary\r\n" + b"\x00" * 10
        form = parse_multipart(CONTENT_TYPE, _file_part(content) + _close())
        assert form.file.content == content

    def test_content_with_trailing_crlf_loses_only_one(self):
        content = b"line one\r\n"
        form = parse_multipart(CONTENT_TYPE, _file_part(content) + _close())
        assert form.file.content == content

    def test_fields_only(self):
        body = _field_part("recipient_signature_name", "Jane") + _field_part("note", "left at door") + _close()
        form = parse_multipart(CONTENT_TYPE, body)
        assert form.file is None
        assert form.fields == {"recipient_signature_name": "Jane", "note": "left at door"}

    def test_last_file_wins(self):
        body = _file_part(b"first", filename="a.png") + _file_part(b"second", filename="b.png") + _close()
        form = parse_multipart(CONTENT_TYPE, body)
        assert form.file.filename == "b.png"
        assert form.file.content == b"second"

    def test_empty_filename_defaults(self):
        form = parse_multipart(CONTENT_TYPE, _file_part(b"data", filename="") + _close())
        assert form.file.filename == "upload"

    def test_missing_part_content_type_defaults(self):
        part = _part(['Content-Disposition: form-data; name="file"; filename="x.bin"'], b"abc")
        form = parse_multipart(CONTENT_TYPE, part + _close())
        assert form.file.content_type == "application/octet-stream"

    def test_preamble_ignored(self):
        body = b"this is a preamble\r\n" + _field_part("a", "1") + _close()
        form = parse_multipart(CONTENT_TYPE, body)
        assert form.fields == {"a": "1"}

    def test_epilogue_ignored(self):
        body = _field_part("a", "1") + _close() + _field_part("b", "2")
        form = parse_multipart(CONTENT_TYPE, body)
        assert form.fields == {"a": "1"}

    def test_part_without_header_terminator_skipped(self):
        body = f"--{BOUNDARY}\r\ngarbage without headers".encode() + b"\r\n" + _field_part("a", "1") + _close()
        form = parse_multipart(CONTENT_TYPE, body)
        assert form.fields == {"a": "1"}

    def test_utf8_field_value(self):
        form = parse_multipart(CONTENT_TYPE, _field_part("recipient_signature_name", "Zoë Ñúñez") + _close())
        assert form.fields["recipient_signature_name"] == "Zoë Ñúñez"

    def test_quoted_boundary_in_header(self):
        content_type = f'multipart/form-data; boundary="{BOUNDARY}"'
        form = parse_multipart(content_type, _field_part("a", "1") + _close())
        assert form.fields == {"a": "1"}


class TestNonMultipart:
    @pytest.mark.parametrize("content_type", [None, "", "application/json", "text/plain"])
    def test_non_multipart_yields_empty_form(self, content_type):
        form = parse_multipart(content_type, b'{"file": "nope"}')
        assert form.file is None
        assert form.fields == {}

    def test_missing_boundary_is_malformed(self):
        with pytest.raises(ValidationError):
            parse_multipart("multipart/form-data", b"whatever")

    def test_empty_body(self):
        form = parse_multipart(CONTENT_TYPE, b"")
        assert form.file is None
        assert form.fields == {}
