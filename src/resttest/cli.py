from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from resttest import DEFAULT_ENV_CONFIG_FILE_PATH
from resttest.api import Method
from resttest.builder import EMPTY_BUILDER, RequestBuilder
from resttest.env_config import builder_for, load_env_config, resolve_environment
from resttest.errors import RestTestError
from resttest.extractors import body, header, status_code
from resttest.matchers import check
from resttest.requests.driver import RequestsDriver

METHODS = [m.value for m in Method]


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resttest",
        description="Send an HTTP request and check the response",
    )
    parser.add_argument(
        "method",
        metavar="METHOD",
        type=str.upper,
        choices=METHODS,
        help=f"HTTP method ({', '.join(METHODS)})",
    )
    parser.add_argument(
        "url",
        metavar="URL",
        help="Full URL, or a path relative to the base url when --env is used",
    )
    parser.add_argument("-d", "--data", help="Request body")
    parser.add_argument(
        "-H",
        "--header",
        action="append",
        dest="headers",
        default=[],
        metavar="HEADER",
        help="Header in 'Key: Value' format (repeatable)",
    )
    parser.add_argument(
        "-q",
        "--query",
        action="append",
        default=[],
        metavar="PARAM",
        help="Query parameter in 'name=value' format (repeatable)",
    )
    parser.add_argument(
        "--env-config-file-path",
        default=DEFAULT_ENV_CONFIG_FILE_PATH,
        help=f"Environment config file path (default: {DEFAULT_ENV_CONFIG_FILE_PATH})",
    )
    parser.add_argument("--env", dest="env_name", help="Use the base url and headers of this environment")
    parser.add_argument("--expect-status", type=int, metavar="CODE", help="Expected status code")
    parser.add_argument(
        "--expect-header",
        action="append",
        default=[],
        metavar="HEADER",
        help="Expected header in 'Key: Value' format (repeatable)",
    )
    parser.add_argument("--expect-body", action="store_true", default=False, help="Expect a response body")
    parser.add_argument("--timeout", type=float, default=30.0, help="Request timeout in seconds (default: 30)")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Enable debug logging")
    return parser


def _configure_logging(verbose: bool = False) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logging.getLogger("resttest").addHandler(handler)
    logging.getLogger("resttest").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _split_header(h: str) -> tuple[str, str]:
    if ": " not in h:
        raise ValueError(f"Invalid header format '{h}'. Expected 'Key: Value'.")
    key, value = h.split(": ", 1)
    return key, value


def _split_query(q: str) -> tuple[str, str]:
    if "=" not in q:
        raise ValueError(f"Invalid query format '{q}'. Expected 'name=value'.")
    name, value = q.split("=", 1)
    return name, value


def build_request_builder(parsed: argparse.Namespace) -> RequestBuilder:
    if parsed.env_name:
        config = load_env_config(parsed.env_config_file_path)
        builder = builder_for(resolve_environment(config, parsed.env_name))
        if not parsed.url.startswith(("http://", "https://")):
            builder = builder.add_path(parsed.url)
        else:
            builder = builder.with_url(parsed.url)
    else:
        builder = EMPTY_BUILDER.with_url(parsed.url)

    builder = builder.with_method(parsed.method)
    builder = builder.add_headers(*(_split_header(h) for h in parsed.headers))
    builder = builder.add_query(*(_split_query(q) for q in parsed.query))
    if parsed.data is not None:
        builder = builder.with_body(parsed.data)
    return builder


def build_assertions(parsed: argparse.Namespace) -> list[Any]:
    assertions: list[Any] = []
    if parsed.expect_status is not None:
        assertions.append(status_code.equals(parsed.expect_status))
    for h in parsed.expect_header:
        name, value = _split_header(h)
        assertions.append(header(name).equals(value))
    if parsed.expect_body:
        assertions.append(body)
    return assertions


def _print_body(text: str | None) -> None:
    if text is None:
        return
    try:
        print(json.dumps(json.loads(text), indent=2))
    except ValueError:
        print(text)


def run(parsed: argparse.Namespace) -> int:
    try:
        builder = build_request_builder(parsed)
        assertions = build_assertions(parsed)

        with RequestsDriver(timeout=parsed.timeout, client_name="cli") as driver:
            response = builder.execute(driver)

        if not assertions:
            _print_body(response.body)
            return 0 if response.status_code < 400 else 1

        verdicts = check(response, *assertions)
        for v in verdicts:
            print(f"{'PASS' if v.passed else 'FAIL'} {v.describe()}")
        return 0 if all(verdicts) else 1

    except (FileNotFoundError, ValueError, RestTestError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main(args: list[str] | None = None) -> int:
    parser = create_parser()
    parsed = parser.parse_args(args)
    _configure_logging(verbose=parsed.verbose)
    return run(parsed)


if __name__ == "__main__":
    sys.exit(main())
