"""Networking building blocks: byte buffers, timers, sendable messages, HTTP formatting, SHA-1, socket helpers and a non-blocking connector."""

__version__ = "0.1.0"

__all__ = [
    "buffer",
    "connector",
    "http_format",
    "sendable_msg",
    "sha1",
    "socketlib",
    "timer",
]