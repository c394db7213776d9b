"""Transport drivers backed by httpx, sync and async."""

import logging
from typing import Optional

import httpx

from resttest._user_agent import AUTO, user_agent_for
from resttest.api import Headers, Request, Response
from resttest.errors import TransportError
from resttest.requests.driver import flatten_headers

logger = logging.getLogger(__name__)


def _header_lists(resp: httpx.Response) -> Headers:
    headers: Headers = {}
    encoding = resp.headers.encoding
    for name, value in resp.headers.raw:
        headers.setdefault(name.decode(encoding), []).append(value.decode(encoding))
    return headers


def to_response(resp: httpx.Response) -> Response:
    """Convert an httpx Response into a resttest Response."""
    return Response(
        status_code=resp.status_code,
        headers=_header_lists(resp),
        body=resp.text if resp.content else None,
    )


def _client_kwargs(driver: object, client_name: Optional[str], kwargs: dict) -> dict:
    headers = dict(kwargs.pop("headers", None) or {})
    headers.setdefault("User-Agent", user_agent_for(driver, httpx, client_name))
    kwargs["headers"] = headers
    return kwargs


def _request_kwargs(request: Request) -> dict:
    return dict(
        method=request.method.value,
        url=request.url,
        headers=flatten_headers(request.headers),
        content=request.body.encode("utf-8") if request.body is not None else None,
    )


class HttpxDriver:
    """Executes Requests with an httpx Client.

    HTTP error statuses are returned as Responses, httpx errors are raised as
    TransportError.
    """

    def __init__(self, client: Optional[httpx.Client] = None, *, client_name: Optional[str] = AUTO, **kwargs):
        """Initialize the driver.

        Args:
            client: Client to send requests with. When omitted the driver creates and owns one.
            client_name: Name added to User-Agent. Use "auto" for class name, None for no name.
            **kwargs: Arguments for the owned httpx.Client (e.g. timeout, verify, transport).
        """
        self._owns_client = client is None
        self.client = client if client is not None else httpx.Client(**_client_kwargs(self, client_name, kwargs))

    def execute(self, request: Request) -> Response:
        logger.debug(f"Sending {request.method} {request.url}")
        try:
            resp = self.client.request(**_request_kwargs(request))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Request {request.method} {request.url} failed: {e}")
            raise TransportError(f"{request.method} {request.url} failed: {e}") from e
        logger.debug(f"Got status={resp.status_code} for {request.method} {request.url}")
        return to_response(resp)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "HttpxDriver":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class AsyncHttpxDriver:
    """Async counterpart of HttpxDriver using httpx.AsyncClient.

    Example:
        async with AsyncHttpxDriver(timeout=10) as driver:
            verdicts = await check_async(builder, status_code.equals(Status.OK), transport=driver)
    """

    def __init__(
        self, client: Optional[httpx.AsyncClient] = None, *, client_name: Optional[str] = AUTO, **kwargs
    ):
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(**_client_kwargs(self, client_name, kwargs))
        self.client = client

    async def execute(self, request: Request) -> Response:
        logger.debug(f"Sending {request.method} {request.url}")
        try:
            resp = await self.client.request(**_request_kwargs(request))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Request {request.method} {request.url} failed: {e}")
            raise TransportError(f"{request.method} {request.url} failed: {e}") from e
        logger.debug(f"Got status={resp.status_code} for {request.method} {request.url}")
        return to_response(resp)

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "AsyncHttpxDriver":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
