"""Transport driver backed by a requests Session."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Union

import requests
from requests import Session
from requests.adapters import HTTPAdapter, Retry

from resttest._user_agent import AUTO, user_agent_for
from resttest.api import Headers, Request, Response
from resttest.errors import TransportError

logger = logging.getLogger(__name__)


def flatten_headers(headers: Headers) -> Dict[str, str]:
    """Join multi-valued headers with ", ", dropping headers without values."""
    return {name: ", ".join(values) for name, values in headers.items() if values}


def _header_lists(resp: requests.Response) -> Headers:
    raw_headers = getattr(resp.raw, "headers", None)
    if raw_headers is not None and callable(getattr(raw_headers, "getlist", None)):
        # urllib3 keeps repeated headers apart, requests joins them
        return {name: list(raw_headers.getlist(name)) for name in raw_headers.keys()}
    return {name: [value] for name, value in resp.headers.items()}


def to_response(resp: requests.Response) -> Response:
    """Convert a requests Response into a resttest Response."""
    return Response(
        status_code=resp.status_code,
        headers=_header_lists(resp),
        body=resp.text if resp.content else None,
    )


class RequestsDriver:
    """Executes Requests with a requests Session.

    HTTP error statuses are returned as Responses. Connection failures,
    timeouts and other requests exceptions are raised as TransportError.

    Example:
        with RequestsDriver(timeout=10) as driver:
            response = driver.execute(EMPTY_BUILDER.with_method(GET).with_url(url).to_request())
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        *,
        timeout: Optional[Union[float, tuple]] = None,
        client_name: Optional[str] = AUTO,
        max_retries: Optional[Retry] = None,
    ):
        """Initialize the driver.

        Args:
            session: Session to send requests with. When omitted the driver creates and owns one.
            timeout: Timeout passed to every request
            client_name: Name added to User-Agent. Use "auto" for class name, None for no name.
            max_retries: urllib3 Retry mounted on an owned session. No retries by default.
        """
        self._owns_session = session is None
        if session is None:
            session = requests.Session()
            if max_retries is not None:
                session.mount("http://", HTTPAdapter(max_retries=max_retries))
                session.mount("https://", HTTPAdapter(max_retries=max_retries))
        self.session = session
        self._timeout = timeout

        self._user_agent = user_agent_for(self, requests, client_name)

    def execute(self, request: Request) -> Response:
        headers = flatten_headers(request.headers)
        if not any(name.lower() == "user-agent" for name in headers):
            headers["User-Agent"] = self._user_agent

        logger.debug(f"Sending {request.method} {request.url}")
        try:
            resp = self.session.request(
                method=request.method.value,
                url=request.url,
                headers=headers,
                data=request.body.encode("utf-8") if request.body is not None else None,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"Request {request.method} {request.url} failed: {e}")
            raise TransportError(f"{request.method} {request.url} failed: {e}") from e

        logger.debug(f"Got status={resp.status_code} for {request.method} {request.url}")
        return to_response(resp)

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> RequestsDriver:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
