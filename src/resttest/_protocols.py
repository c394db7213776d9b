"""Protocol definitions for transports and assertions."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from resttest.api import Request, Response
    from resttest.matchers import Verdict


@runtime_checkable
class Transport(Protocol):
    """Anything that turns a Request into a Response (requests, httpx, fakes)."""

    def execute(self, request: "Request") -> "Response":
        raise NotImplementedError


@runtime_checkable
class AsyncTransport(Protocol):
    """Async counterpart of Transport."""

    async def execute(self, request: "Request") -> "Response":
        raise NotImplementedError


@runtime_checkable
class Assertable(Protocol):
    """Something that can be checked against a response, producing a Verdict."""

    def check(self, response: "Response") -> "Verdict":
        raise NotImplementedError
