"""Unit tests for User-Agent handling."""

import platform
import unittest
from types import SimpleNamespace

from resttest import __version__
from resttest._user_agent import user_agent_for


class FakeDriver:
    pass


FAKE_LIB = SimpleNamespace(__name__="fakehttp", __version__="1.2.3")


class TestUserAgentFor(unittest.TestCase):
    def setUp(self):
        self.prefix = f"resttest/{__version__} python/{platform.python_version()} fakehttp/1.2.3"

    def test_driver_class_name_by_default(self):
        self.assertEqual(user_agent_for(FakeDriver(), FAKE_LIB), f"{self.prefix} FakeDriver")

    def test_explicit_client_name(self):
        self.assertEqual(user_agent_for(FakeDriver(), FAKE_LIB, "cli"), f"{self.prefix} cli")

    def test_no_client_name(self):
        for client_name in (None, ""):
            with self.subTest(client_name=client_name):
                self.assertEqual(user_agent_for(FakeDriver(), FAKE_LIB, client_name), self.prefix)

    def test_library_without_version(self):
        ua = user_agent_for(FakeDriver(), SimpleNamespace(__name__="bare"), None)
        self.assertTrue(ua.endswith(" bare/unknown"))


if __name__ == "__main__":
    unittest.main()
