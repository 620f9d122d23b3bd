# minihttpd

A small threaded HTTP/1.1 server. The accept loop puts each connection on a
queue, and a pool of worker threads takes connections off it. A worker reads
one request, parses the request line and header fields, writes back one
response and closes the connection.

## Behaviour

- `GET` of any target answers `200 OK` with the body `OK`.
- `GET /exit` answers `200 OK` with the body `SHUTTING DOWN ...` and stops the
  server. Workers finish the connection they are on and exit. The server then
  prints how many worker threads it created and how large its queue grew.
- Any other known method (`HEAD`, `POST`, `PUT`, `DELETE`, `CONNECT`,
  `OPTIONS`, `TRACE`) answers `501 Not Implemented` with an empty body.
- If a request cannot be parsed (unknown method, malformed request line or
  header line, missing blank line after the headers), the connection is closed
  without a reply and `ERROR: req_new` is written to standard error.
- A request is read in 4096-byte chunks until a read returns less than a full
  chunk.
- If a connection arrives while the queue is full, the queue capacity doubles
  and so does the number of worker threads. The pool starts with 256 workers
  and a queue capacity of 256.

## Installing

```
pip install .
```

## Running

```
minihttpd
```

Options:

- `--host ADDRESS` – address to bind (default: all interfaces)
- `--port PORT` – port to bind (default: 8080)

The listen backlog is 32. If binding or listening fails, the error is printed
and the command exits with status 1. Ctrl-C also stops the server.

Try it with:

```
curl http://localhost:8080/
curl http://localhost:8080/exit
```

## Using it as a library

```python
from minihttpd.message import parse_request, Response, Method
from minihttpd.handler import handle_get

request = parse_request(b"GET /hello HTTP/1.1\r\nHost: localhost\r\n\r\n")
assert request.method is Method.GET
assert request.fields["Host"] == b"localhost"

response = handle_get(request)
print(response.to_bytes())
```

Modules:

- `minihttpd.message` – `parse_request`, `parse_start_line`,
  `parse_field_line` and `trim`; the `Method` enum; the `Request` and
  `Response` dataclasses (`Response.to_bytes()` serialises a response with
  version `HTTP/1.1`); and `ParseError`, a `ValueError` raised for requests
  that cannot be parsed. Leading empty lines before the request line are
  skipped; header values have spaces and tabs trimmed from both ends.
- `minihttpd.handler` – `handle_get(request)` returns a `200 OK` `Response`,
  or `None` when the target is `/exit`.
- `minihttpd.fieldmap` – `FieldMap`, the open-addressing map holding header
  fields, and `djb2`, its 64-bit hash. Keys may be `bytes` or `str`; two keys
  whose hashes are equal count as the same entry, so field names are
  case-sensitive. Iteration follows slot order, which is also the order in
  which `Response.to_bytes()` writes header fields. The table starts at 256
  slots and doubles when three quarters full.
- `minihttpd.server` – `WorkerPool` (`submit`, `shutdown`, `join`,
  `is_shutting_down`, `report`), `read_request`, `respond`,
  `serve_connection`, `create_listener`, `serve` and `main`.

## What it does not do

It serves no files and has no routing beyond the rules above. There is no
keep-alive: each connection carries exactly one request. Request bodies are
parsed but never used, and no `Content-Length` or other header is added to
responses. There is no TLS and no IPv6 listener.

## Tests

```
pip install .[test]
pytest
```