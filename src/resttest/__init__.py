import logging
import os
from logging import NullHandler
from pathlib import Path

logging.getLogger(__name__).addHandler(NullHandler())

try:
    from ._version import __version__
except ImportError:
    __version__ = "0.0.0"

DEFAULT_ENV_CONFIG_FILE_PATH = Path(
    os.environ.get(
        "RESTTEST_ENV_CONFIG",
        Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "resttest" / "environments.json",
    )
)

from resttest._protocols import Assertable, AsyncTransport, Transport  # noqa: E402
from resttest.api import (  # noqa: E402
    DELETE,
    GET,
    POST,
    PUT,
    Method,
    Request,
    Response,
    Status,
    to_headers,
    to_query_string,
)
from resttest.builder import EMPTY_BUILDER, RequestBuilder  # noqa: E402
from resttest.errors import (  # noqa: E402
    ExtractionError,
    IncompleteRequest,
    MalformedUrl,
    MissingUrl,
    RestTestError,
    TransportError,
)
from resttest.extractors import (  # noqa: E402
    Absent,
    Error,
    Extractor,
    Value,
    body,
    body_option,
    extractor,
    header,
    header_list,
    header_option,
    json_body,
    json_body_as,
    status_code,
)
from resttest.matchers import (  # noqa: E402
    AssertionFailedError,
    Equals,
    IsDefined,
    Verdict,
    check,
    check_async,
    have,
    returning,
    should_have,
)

__all__ = [
    "Transport",
    "AsyncTransport",
    "Assertable",
    "Method",
    "GET",
    "POST",
    "PUT",
    "DELETE",
    "Request",
    "Response",
    "Status",
    "to_headers",
    "to_query_string",
    "EMPTY_BUILDER",
    "RequestBuilder",
    "RestTestError",
    "MalformedUrl",
    "MissingUrl",
    "IncompleteRequest",
    "TransportError",
    "ExtractionError",
    "Extractor",
    "Value",
    "Absent",
    "Error",
    "extractor",
    "status_code",
    "body",
    "body_option",
    "header",
    "header_list",
    "header_option",
    "json_body",
    "json_body_as",
    "Verdict",
    "Equals",
    "IsDefined",
    "AssertionFailedError",
    "have",
    "check",
    "check_async",
    "should_have",
    "returning",
]
