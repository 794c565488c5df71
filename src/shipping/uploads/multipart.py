"""Minimal ``multipart/form-data`` parser for delivery-proof uploads.

Extracts at most one file part and any number of text fields from a raw
request body. File bytes are returned exactly as received. The parser is
not a general RFC 7578 implementation: nested multiparts, per-part
transfer encodings and streaming are not supported.
"""

import re
from dataclasses import dataclass, field

from protean.exceptions import ValidationError

_BOUNDARY_RE = re.compile(r'boundary=(?:"([^"]+)"|([^;\s]+))', re.IGNORECASE)
_DISPOSITION_PARAM_RE = re.compile(r'(\w+)="([^"]*)"')

CRLF = b"\r\n"
HEADER_TERMINATOR = b"\r\n\r\n"
DEFAULT_FILENAME = "upload"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class UploadedFile:
    content: bytes
    filename: str
    content_type: str = DEFAULT_CONTENT_TYPE

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class MultipartForm:
    fields: dict[str, str] = field(default_factory=dict)
    file: UploadedFile | None = None


def extract_boundary(content_type: str) -> str | None:
    match = _BOUNDARY_RE.search(content_type)
    if match is None:
        return None
    return match.group(1) or match.group(2)


def _parse_headers(block: bytes) -> dict[str, str]:
    headers = {}
    for line in block.decode("utf-8", errors="replace").split("\r\n"):
        name, sep, value = line.partition(":")
        if sep:
            headers[name.strip().lower()] = value.strip()
    return headers


def _parse_part(segment: bytes, form: MultipartForm) -> None:
    if segment.startswith(CRLF):
        segment = segment[len(CRLF) :]

    header_block, sep, body = segment.partition(HEADER_TERMINATOR)
    if not sep:
        return
    if body.endswith(CRLF):
        body = body[: -len(CRLF)]

    headers = _parse_headers(header_block)
    params = dict(_DISPOSITION_PARAM_RE.findall(headers.get("content-disposition", "")))

    if "filename" in params:
        form.file = UploadedFile(
            content=body,
            filename=params["filename"] or DEFAULT_FILENAME,
            content_type=headers.get("content-type", DEFAULT_CONTENT_TYPE),
        )
    elif "name" in params:
        form.fields[params["name"]] = body.decode("utf-8", errors="replace")


def parse_multipart(content_type: str | None, body: bytes) -> MultipartForm:
    """Parse a raw ``multipart/form-data`` body.

    A missing or non-multipart content type yields an empty form; the caller
    decides whether a missing file is an error. A multipart content type
    without a boundary is a malformed request.

    When several file parts are present the last one wins.
    """
    form = MultipartForm()
    if not content_type or not content_type.lower().startswith("multipart/form-data"):
        return form

    boundary = extract_boundary(content_type)
    if not boundary:
        raise ValidationError({"content_type": ["Multipart boundary missing"]})

    delimiter = b"--" + boundary.encode("latin-1")
    for segment in body.split(delimiter)[1:]:
        if segment.startswith(b"--"):
            break
        _parse_part(segment, form)

    return form
