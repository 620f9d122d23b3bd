"""Handling of GET requests."""

from __future__ import annotations

from minihttpd.message import Request, Response

EXIT_TARGET = b"/exit"


def handle_get(request: Request) -> Response | None:
    """Answer a GET request.

    Returns ``None`` when the request asks the server to shut down,
    otherwise a ``200 OK`` response.
    """
    if request.target == EXIT_TARGET:
        return None
    return Response(b"200 OK", b"OK")