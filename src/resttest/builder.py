"""Immutable, chainable construction of Requests.

Every operation returns a new builder, the original is never altered, so a
partially configured builder can be shared between tests::

    persons = EMPTY_BUILDER.with_url("http://api.rest.org/person").add_headers(("Accept", "application/json"))

    list_all = persons.with_method(GET).to_request()
    get_one = (persons / "42").with_method(GET).to_request()
"""

from __future__ import annotations

import logging
import string
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Optional, Tuple, Union
from urllib.parse import urlsplit

from resttest import serde
from resttest.api import Method, Request, to_headers, to_query_string
from resttest.errors import IncompleteRequest, MalformedUrl, MissingUrl

if TYPE_CHECKING:
    from resttest._protocols import AsyncTransport, Transport
    from resttest.api import Response

logger = logging.getLogger(__name__)

_FORBIDDEN_URL_CHARS = frozenset(string.whitespace) | {chr(c) for c in range(0x20)} | {"\x7f"}


def parse_url(url: str) -> str:
    """Validate that ``url`` is an absolute ``scheme://host[...]`` URL and return it unchanged.

    Raises:
        MalformedUrl: If the string is not a usable absolute URL
    """
    if not isinstance(url, str):
        raise MalformedUrl(str(url), f"expected str, got {type(url).__name__}")
    bad = sorted({c for c in url if c in _FORBIDDEN_URL_CHARS})
    if bad:
        raise MalformedUrl(url, f"contains illegal character(s) {bad!r}")
    try:
        parts = urlsplit(url)
        _ = parts.port  # raises ValueError for a non numeric or out of range port
    except ValueError as e:
        raise MalformedUrl(url, str(e)) from e
    if not parts.scheme:
        raise MalformedUrl(url, "missing scheme")
    if not parts.netloc or not parts.hostname:
        raise MalformedUrl(url, "missing host")
    return url


@dataclass(frozen=True)
class RequestBuilder:
    method: Optional[Method] = None
    url: Optional[str] = None
    paths: Tuple[str, ...] = ()
    headers: Tuple[Tuple[str, str], ...] = ()
    query: Tuple[Tuple[str, str], ...] = ()
    body: Optional[str] = None

    @classmethod
    def empty(cls) -> RequestBuilder:
        """Return the canonical empty builder."""
        return EMPTY_BUILDER

    def with_method(self, method: Union[Method, str]) -> RequestBuilder:
        if not isinstance(method, Method):
            method = Method.parse(method)
        return replace(self, method=method)

    def with_url(self, url: str) -> RequestBuilder:
        """Set the base url, replacing any previous url.

        Raises:
            MalformedUrl: If url is not an absolute url
        """
        return replace(self, url=parse_url(url))

    def with_body(self, body: str) -> RequestBuilder:
        return replace(self, body=body)

    def with_json(self, obj: Any) -> RequestBuilder:
        """Set the body to ``obj`` serialized as JSON and add the matching Content-Type header."""
        return replace(self, body=serde.dumps(obj)).add_headers(("Content-Type", "application/json"))

    def add_path(self, path: str) -> RequestBuilder:
        """Append a path segment to the url, separated by exactly one slash.

        Raises:
            MissingUrl: If no url has been set yet
        """
        if self.url is None:
            raise MissingUrl(path)
        base = self.url if self.url.endswith("/") else self.url + "/"
        url = parse_url(base + path.lstrip("/"))
        return replace(self, url=url, paths=self.paths + (path,))

    def __truediv__(self, path: Any) -> RequestBuilder:
        return self.add_path(str(path))

    def add_headers(self, *headers: Tuple[str, str]) -> RequestBuilder:
        return replace(self, headers=self.headers + tuple(headers))

    def add_query(self, *query: Tuple[str, str]) -> RequestBuilder:
        return replace(self, query=self.query + tuple(query))

    def to_request(self) -> Request:
        """Materialize the builder into a Request.

        Raises:
            IncompleteRequest: If method or url (or both) are not set
        """
        missing = [name for name in ("method", "url") if getattr(self, name) is None]
        if missing:
            raise IncompleteRequest(missing)

        query_string = to_query_string(*self.query)
        if query_string and "?" in self.url:
            query_string = "&" + query_string[1:]
        return Request(self.method, self.url + query_string, to_headers(*self.headers), self.body)

    def execute(self, transport: Transport) -> Response:
        """Materialize the request and send it through ``transport``.

        Every call performs a new request, transport errors propagate unchanged.
        """
        request = self.to_request()
        logger.debug(f"Executing {request.method} {request.url}")
        return transport.execute(request)

    async def execute_async(self, transport: AsyncTransport) -> Response:
        request = self.to_request()
        logger.debug(f"Executing {request.method} {request.url}")
        return await transport.execute(request)


EMPTY_BUILDER = RequestBuilder()
