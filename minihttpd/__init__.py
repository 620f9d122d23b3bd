"""A small threaded HTTP/1.1 server with a request parser and a worker pool."""

__version__ = "0.1.0"
__all__ = ["fieldmap", "message", "handler", "server"]