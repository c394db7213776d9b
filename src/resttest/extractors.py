"""Named, typed extraction of values from a Response.

An :class:`Extractor` wraps a function ``Response -> T`` together with a label
used in assertion diagnostics. Evaluating it never raises, it returns one of
three outcomes:

- :class:`Value` - the computation produced a value
- :class:`Absent` - the computation produced ``None`` (for optional extractors
  ``None`` is a value, see ``body_option``)
- :class:`Error` - the computation raised, the exception is kept as ``cause``

Outcomes are cached on the response they were computed from, so checking the
same extractor twice against the same response observes the same outcome.

Custom extractors::

    person_id = extractor("personId", lambda r: int(r.headers["X-Person-Id"][0]))
    location = header("Location").named("location")
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Generic, List, Optional, Type, TypeVar, Union

from resttest import serde
from resttest.errors import ExtractionError

if TYPE_CHECKING:
    from resttest.api import Headers, Response
    from resttest.matchers import Equals, IsDefined, Verdict

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Value(Generic[T]):
    value: T

    is_value = True

    def get(self, label: str = "value") -> T:
        return self.value

    def describe(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Absent:
    is_value = False

    def get(self, label: str = "value") -> Any:
        raise ExtractionError(label, self)

    def describe(self) -> str:
        return "<absent>"


@dataclass(frozen=True)
class Error:
    cause: BaseException

    is_value = False

    def get(self, label: str = "value") -> Any:
        raise ExtractionError(label, self) from self.cause

    def describe(self) -> str:
        return f"error: {type(self.cause).__name__}: {self.cause}"


ExtractionOutcome = Union[Value[T], Absent, Error]

ABSENT = Absent()


class _NotPresent(Exception):
    """Raised by an extraction function when there is nothing to extract."""


@dataclass(frozen=True)
class Extractor(Generic[T]):
    """A labelled function from a Response to a value of type ``T``.

    Args:
        label: Name shown in verdicts and error messages
        fn: The computation, may raise or return None
        optional: When True, ``None`` is a legitimate value (``Value(None)``)
            rather than ``Absent``; presence checks then look at the inner value
    """

    label: str
    fn: Callable[[Response], T] = field(repr=False)
    optional: bool = False

    def evaluate(self, response: Response) -> ExtractionOutcome[T]:
        """Evaluate against ``response``, reusing the outcome cached on that response."""
        cache = response._outcomes
        try:
            return cache[self]
        except KeyError:
            pass
        outcome = self._compute(response)
        cache[self] = outcome
        return outcome

    def _compute(self, response: Response) -> ExtractionOutcome[T]:
        try:
            result = self.fn(response)
        except _NotPresent:
            return ABSENT
        except Exception as e:
            logger.debug(f"Extractor '{self.label}' failed: {type(e).__name__}: {e}")
            return Error(e)
        if result is None and not self.optional:
            return ABSENT
        return Value(result)

    def value(self, response: Response) -> T:
        """Return the extracted value or raise ExtractionError."""
        return self.evaluate(response).get(self.label)

    def is_present(self, response: Response) -> bool:
        outcome = self.evaluate(response)
        if not isinstance(outcome, Value):
            return False
        return not self.optional or outcome.value is not None

    def named(self, label: str) -> Extractor[T]:
        return Extractor(label, self.fn, self.optional)

    def map(self, fn: Callable[[T], U], label: Optional[str] = None) -> Extractor[U]:
        """Derive an extractor that applies ``fn`` to this extractor's value.

        Absence and errors of this extractor carry through unchanged.
        """
        return Extractor(label or self.label, _Mapped(self, fn))

    def equals(self, expected: T) -> Equals:
        from resttest.matchers import Equals

        return Equals(self, expected)

    def is_defined(self) -> IsDefined:
        from resttest.matchers import IsDefined

        return IsDefined(self)

    def check(self, response: Response) -> Verdict:
        """A bare extractor asserts that its value is defined."""
        return self.is_defined().check(response)


def extractor(label: str, fn: Callable[[Response], T], *, optional: bool = False) -> Extractor[T]:
    return Extractor(label, fn, optional)


@dataclass(frozen=True)
class _Mapped:
    source: Extractor[Any]
    fn: Callable[[Any], Any]

    def __call__(self, response: Response) -> Any:
        outcome = self.source.evaluate(response)
        if isinstance(outcome, Error):
            raise outcome.cause
        if isinstance(outcome, Absent):
            raise _NotPresent
        return self.fn(outcome.value)


def find_header(headers: Headers, name: str) -> Optional[List[str]]:
    """Look a header up by exact name, falling back to a case-insensitive match."""
    if name in headers:
        return headers[name]
    lowered = name.lower()
    for key, values in headers.items():
        if key.lower() == lowered:
            return values
    return None


@dataclass(frozen=True)
class _HeaderText:
    name: str

    def __call__(self, response: Response) -> str:
        values = find_header(response.headers, self.name)
        if values is None:
            raise KeyError(f"Header '{self.name}' not found")
        return ",".join(values)


@dataclass(frozen=True)
class _HeaderList:
    name: str

    def __call__(self, response: Response) -> List[str]:
        return list(find_header(response.headers, self.name) or [])


@dataclass(frozen=True)
class _HeaderOption:
    name: str

    def __call__(self, response: Response) -> Optional[str]:
        values = find_header(response.headers, self.name)
        return None if values is None else ",".join(values)


@dataclass(frozen=True)
class _JsonBodyAs:
    cls: Any

    def __call__(self, response: Response) -> Any:
        return serde.deserialize(_parse_json(response), self.cls)


def _parse_json(response: Response) -> Any:
    if response.body is None:
        raise _NotPresent
    return json.loads(response.body)


status_code: Extractor[int] = Extractor("status_code", lambda r: r.status_code)

body: Extractor[str] = Extractor("body", lambda r: r.body)

body_option: Extractor[Optional[str]] = Extractor("body_option", lambda r: r.body, optional=True)

# A JSON null body is Value(None), a response without a body is Absent.
json_body: Extractor[Any] = Extractor("json_body", _parse_json, optional=True)


def header(name: str) -> Extractor[str]:
    """All values of header ``name`` joined with commas.

    A header missing from the response is an ``Error`` outcome (KeyError), a
    header present with no values is ``Value("")``.
    """
    return Extractor(f"header({name})", _HeaderText(name))


def header_list(name: str) -> Extractor[List[str]]:
    """The values of header ``name`` in order, an empty list when it is missing."""
    return Extractor(f"header_list({name})", _HeaderList(name))


def header_option(name: str) -> Extractor[Optional[str]]:
    return Extractor(f"header_option({name})", _HeaderOption(name), optional=True)


def json_body_as(cls: Type[T], label: Optional[str] = None) -> Extractor[T]:
    """Parse the body as JSON and convert it to ``cls`` (pydantic model, ``List[Model]``, dict, ...)."""
    name = getattr(cls, "__name__", None) or str(cls)
    return Extractor(label or f"json_body_as({name})", _JsonBodyAs(cls), optional=True)
