"""Turn extractor outcomes into verdicts.

A :class:`Verdict` is the structured result of one assertion (passed, label,
expected, actual); how it is rendered is up to the caller's test runner.

Example::

    should_have(
        EMPTY_BUILDER.with_method(GET).with_url("http://api.rest.org/person"),
        status_code.equals(Status.OK),
        header("Content-Type").equals("application/json"),
        body,  # a bare extractor checks that the value is defined
        transport=driver,
    )

Passing a RequestBuilder as the source performs a real request through the
transport every time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Tuple, Union

from resttest.api import Response
from resttest.builder import RequestBuilder
from resttest.extractors import Error, Extractor, Value

if TYPE_CHECKING:
    from resttest._protocols import Assertable, AsyncTransport, Transport

logger = logging.getLogger(__name__)

DEFINED = "defined"
NOT_DEFINED = "not defined"

Source = Union[Response, RequestBuilder]


@dataclass(frozen=True)
class Verdict:
    passed: bool
    label: str
    expected: str
    actual: str

    def __bool__(self) -> bool:
        return self.passed

    def describe(self) -> str:
        if self.passed:
            return f"{self.label}: {self.actual}"
        return f"{self.label}: expected {self.expected} but was {self.actual}"


@dataclass(frozen=True)
class IsDefined:
    """Passes when the extractor yields a value (and, for optional extractors, a non-None one)."""

    extractor: Extractor[Any]

    def check(self, response: Response) -> Verdict:
        if self.extractor.is_present(response):
            return Verdict(True, self.extractor.label, DEFINED, DEFINED)
        outcome = self.extractor.evaluate(response)
        actual = f"{NOT_DEFINED} ({outcome.describe()})" if isinstance(outcome, Error) else NOT_DEFINED
        return Verdict(False, self.extractor.label, DEFINED, actual)


@dataclass(frozen=True)
class Equals:
    """Passes when the extractor yields a value equal to ``expected``."""

    extractor: Extractor[Any]
    expected: Any

    def check(self, response: Response) -> Verdict:
        outcome = self.extractor.evaluate(response)
        passed = isinstance(outcome, Value) and outcome.value == self.expected
        return Verdict(passed, self.extractor.label, str(self.expected), outcome.describe())


_MISSING = object()


def have(extractor: Extractor[Any], expected: Any = _MISSING) -> Union[Equals, IsDefined]:
    """``have(ex)`` checks that ``ex`` is defined, ``have(ex, value)`` that it equals ``value``."""
    if expected is _MISSING:
        return IsDefined(extractor)
    return Equals(extractor, expected)


class AssertionFailedError(AssertionError):
    """Raised by should_have when at least one verdict failed."""

    def __init__(self, verdicts: Sequence[Verdict]):
        self.verdicts = list(verdicts)
        failed = [v for v in self.verdicts if not v.passed]
        lines = "\n".join(f"  {v.describe()}" for v in failed)
        super().__init__(f"{len(failed)} of {len(self.verdicts)} assertion(s) failed:\n{lines}")

    @property
    def failures(self) -> List[Verdict]:
        return [v for v in self.verdicts if not v.passed]


def _resolve(source: Source, transport: Optional[Transport]) -> Response:
    if isinstance(source, Response):
        return source
    if isinstance(source, RequestBuilder):
        if transport is None:
            raise ValueError("A transport is required to check a RequestBuilder")
        return source.execute(transport)
    raise TypeError(f"Expected Response or RequestBuilder, got {type(source).__name__}")


def evaluate(response: Response, assertables: Sequence[Assertable]) -> List[Verdict]:
    verdicts = [a.check(response) for a in assertables]
    for v in verdicts:
        if not v.passed:
            logger.debug(f"Assertion failed: {v.describe()}")
    return verdicts


def check(source: Source, *assertables: Assertable, transport: Optional[Transport] = None) -> List[Verdict]:
    """Evaluate assertions against a response, executing ``source`` first when it is a builder."""
    return evaluate(_resolve(source, transport), assertables)


async def check_async(
    source: Source, *assertables: Assertable, transport: Optional[AsyncTransport] = None
) -> List[Verdict]:
    if isinstance(source, RequestBuilder):
        if transport is None:
            raise ValueError("A transport is required to check a RequestBuilder")
        source = await source.execute_async(transport)
    return evaluate(_resolve(source, None), assertables)


def should_have(source: Source, *assertables: Assertable, transport: Optional[Transport] = None) -> Response:
    """Like check, but raise AssertionFailedError on any failed verdict.

    Returns:
        The response the assertions were evaluated against
    """
    response = _resolve(source, transport)
    verdicts = evaluate(response, assertables)
    if not all(verdicts):
        raise AssertionFailedError(verdicts)
    return response


def returning(source: Source, *extractors: Extractor[Any], transport: Optional[Transport] = None) -> Any:
    """Extract values from a response.

    A single extractor returns its value, several return a tuple in the same order.

    Raises:
        ExtractionError: If any extractor yields no value
    """
    response = _resolve(source, transport)
    values: Tuple[Any, ...] = tuple(e.value(response) for e in extractors)
    if len(values) == 1:
        return values[0]
    return values
