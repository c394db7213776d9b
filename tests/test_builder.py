"""Unit tests for RequestBuilder."""

import json
import unittest

from _fakes import StubTransport

from resttest.api import GET, POST, PUT, Request, Response
from resttest.builder import EMPTY_BUILDER, RequestBuilder, parse_url
from resttest.errors import IncompleteRequest, MalformedUrl, MissingUrl


class TestEmptyBuilder(unittest.TestCase):
    def test_all_fields_unset(self):
        self.assertIsNone(EMPTY_BUILDER.method)
        self.assertIsNone(EMPTY_BUILDER.url)
        self.assertEqual(EMPTY_BUILDER.headers, ())
        self.assertEqual(EMPTY_BUILDER.query, ())
        self.assertIsNone(EMPTY_BUILDER.body)

    def test_empty_returns_canonical_builder(self):
        self.assertIs(RequestBuilder.empty(), EMPTY_BUILDER)


class TestBuilderImmutability(unittest.TestCase):
    def test_operations_return_new_builders(self):
        base = EMPTY_BUILDER.with_url("http://api.test")
        with_method = base.with_method(GET)
        with_header = base.add_headers(("A", "1"))
        with_query = base.add_query(("q", "1"))
        with_body = base.with_body("x")
        with_path = base.add_path("p")

        self.assertIsNone(base.method)
        self.assertEqual(base.headers, ())
        self.assertEqual(base.query, ())
        self.assertIsNone(base.body)
        self.assertEqual(base.url, "http://api.test")
        for derived in (with_method, with_header, with_query, with_body, with_path):
            self.assertIsNot(derived, base)

    def test_empty_builder_unchanged(self):
        EMPTY_BUILDER.with_method(GET).with_url("http://api.test").add_headers(("A", "1"))
        self.assertEqual(EMPTY_BUILDER, RequestBuilder())

    def test_branches_do_not_alias(self):
        base = EMPTY_BUILDER.with_method(GET).with_url("http://api.test").add_headers(("A", "1"))
        left = base.add_headers(("A", "2")).to_request()
        right = base.add_headers(("A", "3")).to_request()
        self.assertEqual(left.headers["A"], ["1", "2"])
        self.assertEqual(right.headers["A"], ["1", "3"])


class TestWithFields(unittest.TestCase):
    def test_with_method_overrides(self):
        self.assertEqual(EMPTY_BUILDER.with_method(GET).with_method(POST).method, POST)

    def test_with_method_accepts_name(self):
        self.assertEqual(EMPTY_BUILDER.with_method("put").method, PUT)

    def test_with_method_rejects_unknown_name(self):
        with self.assertRaises(ValueError):
            EMPTY_BUILDER.with_method("TRACE")

    def test_with_body_overrides(self):
        self.assertEqual(EMPTY_BUILDER.with_body("a").with_body("b").body, "b")

    def test_with_url_overrides(self):
        self.assertEqual(EMPTY_BUILDER.with_url("http://a").with_url("http://b").url, "http://b")

    def test_with_json(self):
        builder = EMPTY_BUILDER.with_json({"name": "Jason", "age": 27})
        self.assertEqual(json.loads(builder.body), {"name": "Jason", "age": 27})
        self.assertEqual(builder.headers, (("Content-Type", "application/json"),))


class TestWithUrl(unittest.TestCase):
    def test_malformed_urls(self):
        for url in ("not a url", "http://exa mple.com", "/relative/path", "http://", "http://host:notaport/", ""):
            with self.subTest(url=url):
                with self.assertRaises(MalformedUrl):
                    EMPTY_BUILDER.with_url(url)

    def test_malformed_url_is_value_error(self):
        with self.assertRaises(ValueError):
            EMPTY_BUILDER.with_url("nope")

    def test_valid_urls_kept_verbatim(self):
        for url in ("http://h/p", "https://api.test:8443/v1/", "http://127.0.0.1/x?y=1"):
            with self.subTest(url=url):
                self.assertEqual(parse_url(url), url)


class TestAddPath(unittest.TestCase):
    def test_requires_url(self):
        with self.assertRaises(MissingUrl):
            EMPTY_BUILDER.add_path("x")

    def test_single_slash_without_trailing_slash(self):
        self.assertEqual(EMPTY_BUILDER.with_url("http://h/p").add_path("x").url, "http://h/p/x")

    def test_single_slash_with_trailing_slash(self):
        self.assertEqual(EMPTY_BUILDER.with_url("http://h/p/").add_path("x").url, "http://h/p/x")

    def test_leading_slash_in_segment(self):
        self.assertEqual(EMPTY_BUILDER.with_url("http://h/p/").add_path("/x").url, "http://h/p/x")

    def test_repeated_paths(self):
        builder = EMPTY_BUILDER.with_url("http://h").add_path("person").add_path("42")
        self.assertEqual(builder.url, "http://h/person/42")
        self.assertEqual(builder.paths, ("person", "42"))

    def test_div_operator(self):
        builder = EMPTY_BUILDER.with_url("http://h/person") / 42
        self.assertEqual(builder.url, "http://h/person/42")


class TestAccumulators(unittest.TestCase):
    def test_add_headers_appends(self):
        builder = EMPTY_BUILDER.add_headers(("A", "1"), ("B", "2")).add_headers(("A", "3"))
        self.assertEqual(builder.headers, (("A", "1"), ("B", "2"), ("A", "3")))

    def test_add_query_appends(self):
        builder = EMPTY_BUILDER.add_query(("a", "1")).add_query(("b", "2"), ("a", "3"))
        self.assertEqual(builder.query, (("a", "1"), ("b", "2"), ("a", "3")))


class TestToRequest(unittest.TestCase):
    def test_scenario_get_with_query(self):
        request = (
            EMPTY_BUILDER.with_method(GET)
            .with_url("http://api.test/person")
            .add_query(("active", "true"))
            .to_request()
        )
        self.assertEqual(request.url, "http://api.test/person?active=true")
        self.assertEqual(request.method, GET)
        self.assertEqual(request.headers, {})
        self.assertIsNone(request.body)

    def test_missing_method(self):
        with self.assertRaises(IncompleteRequest) as cm:
            EMPTY_BUILDER.with_url("http://api.test").to_request()
        self.assertEqual(cm.exception.missing, ("method",))
        self.assertIn("method", str(cm.exception))

    def test_missing_url(self):
        with self.assertRaises(IncompleteRequest) as cm:
            EMPTY_BUILDER.with_method(GET).to_request()
        self.assertEqual(cm.exception.missing, ("url",))

    def test_missing_both(self):
        with self.assertRaises(IncompleteRequest) as cm:
            EMPTY_BUILDER.to_request()
        self.assertEqual(cm.exception.missing, ("method", "url"))

    def test_repeatable(self):
        builder = (
            EMPTY_BUILDER.with_method(POST)
            .with_url("http://api.test")
            .add_headers(("A", "1"), ("A", "2"))
            .add_query(("q", "a b"))
            .with_body("{}")
        )
        first = builder.to_request()
        second = builder.to_request()
        self.assertEqual(first, second)
        self.assertEqual(first, Request(POST, "http://api.test?q=a%20b", {"A": ["1", "2"]}, "{}"))

    def test_query_appended_to_existing_query(self):
        request = EMPTY_BUILDER.with_method(GET).with_url("http://api.test/x?a=1").add_query(("b", "2")).to_request()
        self.assertEqual(request.url, "http://api.test/x?a=1&b=2")


class TestExecute(unittest.TestCase):
    def test_execute_sends_materialized_request(self):
        transport = StubTransport(Response(201))
        builder = EMPTY_BUILDER.with_method(POST).with_url("http://api.test/person").with_body("{}")

        response = builder.execute(transport)

        self.assertEqual(response.status_code, 201)
        self.assertEqual(transport.requests, [builder.to_request()])

    def test_each_execute_is_a_new_call(self):
        transport = StubTransport()
        builder = EMPTY_BUILDER.with_method(GET).with_url("http://api.test")
        builder.execute(transport)
        builder.execute(transport)
        self.assertEqual(len(transport.requests), 2)

    def test_incomplete_builder_does_not_call_transport(self):
        transport = StubTransport()
        with self.assertRaises(IncompleteRequest):
            EMPTY_BUILDER.with_url("http://api.test").execute(transport)
        self.assertEqual(transport.requests, [])


if __name__ == "__main__":
    unittest.main()
