"""HTTP request parsing and response serialisation."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from minihttpd.fieldmap import FieldMap

CRLF = b"\r\n"
_SP = b" "
_COLON = b":"
_FIELD_WHITESPACE = b" \t"
HTTP_VERSION = b"HTTP/1.1"


class ParseError(ValueError):
    """Raised when bytes do not form a request this server understands."""


class Method(enum.Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"


_METHODS = {m.value.encode("ascii"): m for m in Method}


@dataclass
class Request:
    method: Method
    target: bytes
    version: bytes
    fields: FieldMap = field(default_factory=FieldMap)
    body: bytes = b""


@dataclass
class Response:
    status: bytes
    body: bytes = b""
    version: bytes = HTTP_VERSION
    fields: FieldMap = field(default_factory=FieldMap)

    def to_bytes(self) -> bytes:
        """Serialise the status line, header fields, blank line and body."""
        parts = [self.version, _SP, self.status, CRLF]
        for key, value in self.fields.items():
            parts += [key, b": ", value, CRLF]
        parts.append(CRLF)
        parts.append(self.body)
        return b"".join(parts)


def trim(data: bytes, chars: bytes) -> bytes:
    """Strip any of ``chars`` from both ends of ``data``."""
    return data.strip(chars)


def parse_start_line(line: bytes) -> tuple[Method, bytes, bytes]:
    """Split a request line into method, target and version."""
    end = line.find(_SP)
    if end <= 0:
        raise ParseError("request line has no method")
    method_name = line[:end]

    start = end + len(_SP)
    end = line.find(_SP, start)
    if end == -1 or end == start:
        raise ParseError("request line has no target")
    target = line[start:end]

    end += len(_SP)
    if end == len(line):
        raise ParseError("request line has no version")
    version = line[end:]

    try:
        method = _METHODS[method_name]
    except KeyError:
        raise ParseError(f"unknown method {method_name!r}") from None
    return method, target, version


def parse_field_line(line: bytes) -> tuple[bytes, bytes]:
    """Split a header line into its key and its whitespace-trimmed value."""
    end = line.find(_COLON)
    if end <= 0:
        raise ParseError("field line has no key")
    key = line[:end]
    end += len(_COLON)
    if end == len(line):
        raise ParseError("field line has no value")
    return key, trim(line[end:], _FIELD_WHITESPACE)


def parse_request(data: bytes) -> Request:
    """Parse a complete request; leading empty lines are skipped."""
    start = 0
    end = data.find(CRLF)
    if end == -1:
        raise ParseError("request has no line terminator")
    while start == end:
        start = end = end + len(CRLF)
        end = data.find(CRLF, start)
        if end == -1:
            raise ParseError("request has no request line")
    method, target, version = parse_start_line(data[start:end])
    request = Request(method, target, version)

    while True:
        start = end = end + len(CRLF)
        end = data.find(CRLF, start)
        if end == -1:
            raise ParseError("header section is not terminated")
        if start == end:
            break
        key, value = parse_field_line(data[start:end])
        request.fields[key] = value

    request.body = data[end + len(CRLF):]
    return request