"""Threaded HTTP server: a growable worker pool fed by an accept loop."""

from __future__ import annotations

import argparse
import socket
import sys
import threading
from collections import deque

from minihttpd.handler import handle_get
from minihttpd.message import Method, ParseError, Response, parse_request

DEFAULT_PORT = 8080
DEFAULT_BACKLOG = 32
DEFAULT_WORKERS = 256
DEFAULT_QUEUE_CAPACITY = 256
REQUEST_WINDOW = 4096


class WorkerPool:
    """Worker threads pulling accepted connections from a shared queue.

    When a connection is submitted while the queue is full, both the queue
    capacity and the number of worker threads are doubled.
    """

    def __init__(
        self,
        workers: int = DEFAULT_WORKERS,
        queue_capacity: int = DEFAULT_QUEUE_CAPACITY,
    ) -> None:
        if workers < 1:
            raise ValueError("a pool needs at least one worker")
        if queue_capacity < 1:
            raise ValueError("the queue needs room for at least one connection")
        self._cond = threading.Condition()
        self._queue: deque = deque()
        self._queue_capacity = queue_capacity
        self._threads: list[threading.Thread] = []
        self._shutdown = False
        with self._cond:
            self._spawn(workers)

    def _spawn(self, count: int) -> None:
        for _ in range(count):
            thread = threading.Thread(
                target=self._run,
                name=f"minihttpd-worker-{len(self._threads)}",
                daemon=True,
            )
            self._threads.append(thread)
            thread.start()

    def _run(self) -> None:
        while True:
            with self._cond:
                while not self._shutdown and not self._queue:
                    self._cond.wait()
                if self._shutdown:
                    return
                conn = self._queue.popleft()
            serve_connection(conn, self)

    def submit(self, conn) -> bool:
        """Queue a connection; return True if the pool is shutting down instead."""
        with self._cond:
            if self._shutdown:
                return True
            if len(self._queue) == self._queue_capacity:
                self._queue_capacity *= 2
                self._spawn(len(self._threads))
            self._queue.append(conn)
            self._cond.notify()
        return False

    def shutdown(self) -> None:
        """Ask every worker to stop once it finishes its current connection."""
        with self._cond:
            self._shutdown = True
            self._cond.notify_all()

    def join(self) -> None:
        """Wait for every worker thread to finish."""
        for thread in list(self._threads):
            thread.join()

    def is_shutting_down(self) -> bool:
        with self._cond:
            return self._shutdown

    def report(self) -> str:
        """Describe how many threads were created and how large the queue grew."""
        with self._cond:
            threads = len(self._threads)
            capacity = self._queue_capacity
        return f"Created `{threads}` threads.\nCreated `{capacity}` large queue."


def read_request(conn, window: int = REQUEST_WINDOW) -> bytes:
    """Read from ``conn`` until a read returns less than a full window."""
    chunks = []
    while True:
        chunk = conn.recv(window)
        chunks.append(chunk)
        if len(chunk) != window:
            break
    return b"".join(chunks)


def respond(data: bytes) -> tuple[bytes, bool]:
    """Build the reply to raw request bytes.

    Returns the response bytes and whether the server should shut down.
    Raises ``ParseError`` when the request cannot be parsed.
    """
    request = parse_request(data)
    if request.method is Method.GET:
        response = handle_get(request)
        if response is None:
            return Response(b"200 OK", b"SHUTTING DOWN ...").to_bytes(), True
        return response.to_bytes(), False
    return Response(b"501 Not Implemented", b"").to_bytes(), False


def serve_connection(conn, pool: WorkerPool) -> None:
    """Answer one request on ``conn`` and close it."""
    try:
        try:
            data = read_request(conn)
        except OSError as exc:
            print(f"ERROR: recv: {exc}", file=sys.stderr)
            return
        try:
            payload, stop = respond(data)
        except ParseError:
            print("ERROR: req_new", file=sys.stderr)
            return
        if stop:
            pool.shutdown()
        try:
            conn.sendall(payload)
        except OSError as exc:
            print(f"ERROR: send: {exc}", file=sys.stderr)
    finally:
        conn.close()


def create_listener(
    host: str = "",
    port: int = DEFAULT_PORT,
    backlog: int = DEFAULT_BACKLOG,
) -> socket.socket:
    """Open an IPv4 TCP socket bound to ``host:port`` and listening."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    for step, action in (
        ("bind", lambda: sock.bind((host, port))),
        ("listen", lambda: sock.listen(backlog)),
    ):
        try:
            action()
        except OSError as exc:
            sock.close()
            raise OSError(exc.errno, f"{step}: {exc.strerror}") from exc
    return sock


def serve(listener: socket.socket, pool: WorkerPool) -> None:
    """Accept connections and hand them to ``pool`` until it shuts down."""
    while True:
        try:
            conn, _ = listener.accept()
        except OSError as exc:
            if listener.fileno() == -1:
                raise
            print(f"ERROR: accept: {exc}", file=sys.stderr)
            continue
        if pool.submit(conn):
            conn.close()
            break


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="minihttpd",
        description="Serve HTTP until a GET /exit arrives.",
    )
    parser.add_argument("--host", default="", help="address to bind (default: all)")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to bind")
    args = parser.parse_args(argv)

    try:
        listener = create_listener(args.host, args.port, DEFAULT_BACKLOG)
    except OSError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    pool = WorkerPool()
    try:
        serve(listener, pool)
    except KeyboardInterrupt:
        pool.shutdown()
    finally:
        listener.close()
    pool.join()
    print(pool.report())
    return 0