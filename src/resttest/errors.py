"""Error taxonomy for request building, transport and extraction."""

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from resttest.extractors import ExtractionOutcome


class RestTestError(Exception):
    """Base class for all resttest errors."""


class MalformedUrl(RestTestError, ValueError):
    """Raised when a string cannot be parsed as an absolute URL."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Malformed url '{url}': {reason}")
        self.url = url
        self.reason = reason


class MissingUrl(RestTestError, ValueError):
    """Raised when a path is added to a builder that has no url yet."""

    def __init__(self, path: str):
        super().__init__(f"Cannot add path '{path}' before a url is set, call with_url first")
        self.path = path


class IncompleteRequest(RestTestError, ValueError):
    """Raised when a builder is materialized without method and/or url."""

    def __init__(self, missing: Sequence[str]):
        self.missing = tuple(missing)
        super().__init__(f"Cannot build request, missing required field(s): {', '.join(self.missing)}")


class TransportError(RestTestError):
    """Raised by transport drivers when no response could be obtained.

    The originating library exception is chained as ``__cause__``.
    """


class ExtractionError(RestTestError):
    """Raised when an extraction outcome that is not a value gets unwrapped."""

    def __init__(self, label: str, outcome: "ExtractionOutcome"):
        super().__init__(f"Could not extract '{label}': {outcome.describe()}")
        self.label = label
        self.outcome = outcome
