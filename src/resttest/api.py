"""Request/Response value model and the header/query helpers used to build them.

Example::

    from resttest import GET, Request, to_headers

    request = Request(GET, "http://api.rest.org/person", to_headers(("Accept", "application/json")))
    response = transport.execute(request)
    assert response.status_code == Status.OK
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

Headers = Dict[str, List[str]]


class Method(str, Enum):
    """The HTTP methods used to make a request."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "Method":
        try:
            return cls(name.upper())
        except ValueError:
            raise ValueError(f"Unsupported HTTP method '{name}', expected one of {[m.value for m in cls]}") from None


GET = Method.GET
POST = Method.POST
PUT = Method.PUT
DELETE = Method.DELETE


class Status:
    """Constants for HTTP status codes."""

    OK = 200
    Created = 201
    Accepted = 202
    NoContent = 204
    BadRequest = 400
    Unauthorized = 401
    PaymentRequired = 402
    Forbidden = 403
    NotFound = 404
    Conflict = 409
    InternalServerError = 500


@dataclass(frozen=True)
class Request:
    method: Method
    url: str
    headers: Headers = field(default_factory=dict)
    body: Optional[str] = None


@dataclass(frozen=True)
class Response:
    """The HTTP response.

    ``_outcomes`` caches extraction outcomes for this instance only, keyed by
    extractor. It is excluded from equality and repr and is collected together
    with the response. Copies start with an empty cache.

    ``headers`` must not be mutated once the response has been checked, cached
    outcomes would no longer match it. Derive a new response instead with
    ``dataclasses.replace(response, headers=...)``.
    """

    status_code: int
    headers: Headers = field(default_factory=dict)
    body: Optional[str] = None
    _outcomes: Dict[Any, Any] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __copy__(self) -> "Response":
        return Response(self.status_code, self.headers, self.body)

    def __deepcopy__(self, memo: Dict[int, Any]) -> "Response":
        return Response(self.status_code, copy.deepcopy(self.headers, memo), self.body)


def to_headers(*pairs: Tuple[str, str]) -> Headers:
    """Convert a sequence of ``(name, value)`` tuples into a map of headers.

    Each tuple creates an entry in the map, duplicate names add the value to
    the list in the order they were given. An empty value adds nothing to the
    list but still creates the entry.

    >>> to_headers(("A", "1"), ("B", ""), ("A", "2"))
    {'A': ['1', '2'], 'B': []}
    """
    headers: Headers = {}
    for name, value in pairs:
        values = headers.setdefault(name, [])
        if value != "":
            values.append(value)
    return headers


def to_query_string(*pairs: Tuple[str, str]) -> str:
    """Percent-encode ``(name, value)`` pairs into a query string starting with ``?``.

    Returns the empty string when there are no pairs.
    """
    if not pairs:
        return ""
    return "?" + "&".join(f"{_encode(name)}={_encode(value)}" for name, value in pairs)


def _encode(s: str) -> str:
    return quote(s, safe="", encoding="utf-8")
