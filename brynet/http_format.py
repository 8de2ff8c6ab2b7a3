"""Builders for HTTP/1.1 request and response text."""

from __future__ import annotations

from enum import Enum, IntEnum


class HttpQueryParameter:
    """Accumulates ``key=value`` pairs joined by ``&``."""

    def __init__(self) -> None:
        self._parameter = ""

    def add(self, key: str, value: str) -> None:
        if self._parameter:
            self._parameter += "&"
        self._parameter += f"{key}={value}"

    @property
    def result(self) -> str:
        return self._parameter


class HttpMethod(Enum):
    HEAD = "HEAD"
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


def _content_length(body: str) -> str:
    return str(len(body.encode("utf-8")))


def _render_headers(headers: dict[str, str]) -> str:
    return "".join(f"{field}: {headers[field]}\r\n" for field in sorted(headers))


class HttpRequest:
    """An HTTP request; headers are emitted sorted by field name."""

    def __init__(self) -> None:
        self._url = ""
        self._query = ""
        self._body = ""
        self._method = HttpMethod.GET
        self._headers: dict[str, str] = {}

    def set_method(self, method: HttpMethod | str) -> None:
        """Set the method; an unknown method raises ValueError."""
        self._method = HttpMethod(method)

    def set_host(self, host: str) -> None:
        self.add_head_value("Host", host)

    def set_url(self, url: str) -> None:
        self._url = url

    def set_cookie(self, value: str) -> None:
        self.add_head_value("Cookie", value)

    def set_content_type(self, value: str) -> None:
        self.add_head_value("Content-Type", value)

    def set_query(self, query: str) -> None:
        self._query = query

    def set_body(self, body: str) -> None:
        """Set the body and its Content-Length header."""
        self.add_head_value("Content-Length", _content_length(body))
        self._body = body

    def add_head_value(self, field: str, value: str) -> None:
        self._headers[field] = value

    def build(self) -> str:
        """Return the full request text."""
        target = f"{self._url}?{self._query}" if self._query else self._url
        return (
            f"{self._method.value} {target} HTTP/1.1\r\n"
            f"{_render_headers(self._headers)}\r\n"
            f"{self._body}"
        )


class HttpResponseStatus(IntEnum):
    NONE = 0
    OK = 200


class HttpResponse:
    """An HTTP response; headers are emitted sorted by field name."""

    def __init__(self) -> None:
        self._status = HttpResponseStatus.OK
        self._headers: dict[str, str] = {}
        self._body = ""

    def set_status(self, status: HttpResponseStatus | int) -> None:
        self._status = HttpResponseStatus(status)

    def set_content_type(self, value: str) -> None:
        self.add_head_value("Content-Type", value)

    def add_head_value(self, field: str, value: str) -> None:
        self._headers[field] = value

    def set_body(self, body: str) -> None:
        """Set the body and its Content-Length header."""
        self.add_head_value("Content-Length", _content_length(body))
        self._body = body

    def build(self) -> str:
        """Return the full response text."""
        reason = " OK" if self._status is HttpResponseStatus.OK else "UNKNOWN"
        return (
            f"HTTP/1.1 {int(self._status)}{reason}\r\n"
            f"{_render_headers(self._headers)}\r\n"
            f"{self._body}"
        )