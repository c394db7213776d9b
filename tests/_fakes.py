"""Fake transports shared by the tests."""

from typing import Callable, List, Optional, Union

from resttest.api import Request, Response

Responder = Union[Response, Callable[[Request], Response]]


class StubTransport:
    """Records every request and answers with a fixed response (or a function of the request)."""

    def __init__(self, responder: Optional[Responder] = None):
        self.responder = responder if responder is not None else Response(200)
        self.requests: List[Request] = []

    def _respond(self, request: Request) -> Response:
        self.requests.append(request)
        if isinstance(self.responder, Response):
            return self.responder
        return self.responder(request)

    def execute(self, request: Request) -> Response:
        return self._respond(request)


class AsyncStubTransport(StubTransport):
    async def execute(self, request: Request) -> Response:
        return self._respond(request)


class FailingTransport:
    def __init__(self, error: Exception):
        self.error = error

    def execute(self, request: Request) -> Response:
        raise self.error
