"""Error types: the wrapper error, partial-result aggregate errors and their struct variants.

Aggregate errors follow a dual struct+exception layout: the exception is what the
collectors raise, the frozen ``msgspec.Struct`` is a value snapshot of the same
data for code that would rather pass failures around than re-raise them.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import msgspec

__all__ = [
    'BulkyError',
    'CollectError',
    'ConfigurationError',
    'FailAtEndCollect',
    'FailAtEndCollectError',
    'FailFastCollect',
    'FailFastCollectError',
    'WrappedError',
]


class BulkyError(Exception):
    """Base class for every error raised by bulky."""


class ConfigurationError(BulkyError, ValueError):
    """A collector was built with an invalid set of failure kinds."""


# --- Wrapper Error ---


class WrappedError(BulkyError):
    """Marks a deferred computation that failed; the real error is the cause.

    Raised by functions adapted with ``sneaky``. Collectors built by the
    ``*_failure(s)`` factories recognize this type and nothing else.
    """

    __slots__ = ('_cause',)

    def __init__(self, cause: BaseException) -> None:
        self._cause = cause
        super().__init__(f'{type(cause).__name__}: {cause}')
        self.__cause__ = cause

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self._cause,))

    @property
    def cause(self) -> BaseException:
        """The error raised by the wrapped function."""
        return self._cause


# --- Aggregate Errors ---


class CollectError(BulkyError):
    """A collection stopped or finished with failures; carries the partial results.

    Attributes:
        causes: The recognized failures, in the order they occurred.
        results: The successfully computed values, in input order.
    """

    def __init__(self, causes: Iterable[BaseException], results: Iterable[Any]) -> None:
        self.causes: tuple[BaseException, ...] = tuple(causes)
        self.results: tuple[Any, ...] = tuple(results)
        super().__init__(self._message())
        if self.causes:
            self.__cause__ = self.causes[0]

    def _message(self) -> str:
        return f'{len(self.causes)} failure(s), {len(self.results)} result(s) collected'

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.causes, self.results))

    def with_prefix(self, results: Iterable[Any]) -> CollectError:
        """Return a copy of this error with ``results`` placed before its own."""
        return type(self)(self.causes, (*results, *self.results))

    @property
    def cause(self) -> BaseException | None:
        """The first recognized failure, or None if there is none."""
        return self.causes[0] if self.causes else None

    @property
    def partial_result(self) -> tuple[Any, ...]:
        """Alias of ``results``."""
        return self.results


class FailFastCollect(msgspec.Struct, frozen=True):
    """Collection stopped at its first failure - struct variant."""

    cause: BaseException
    results: tuple[Any, ...] = ()

    def to_exception(self) -> FailFastCollectError:
        """Convert to exception for raise-based code."""
        return FailFastCollectError(self.cause, self.results)


class FailFastCollectError(CollectError):
    """Collection stopped at its first failure - exception variant.

    Raised eagerly by ``up_to_and_raise`` collectors. ``results`` holds exactly
    the values computed before the failing element.
    """

    def __init__(self, cause: BaseException, results: Iterable[Any]) -> None:
        super().__init__((cause,), results)

    def _message(self) -> str:
        cause = self.causes[0]
        return f'collection failed after {len(self.results)} result(s): {type(cause).__name__}: {cause}'

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.causes[0], self.results))

    def with_prefix(self, results: Iterable[Any]) -> FailFastCollectError:
        return type(self)(self.causes[0], (*results, *self.results))

    def to_struct(self) -> FailFastCollect:
        """Convert to struct for value-based code."""
        return FailFastCollect(self.causes[0], self.results)


class FailAtEndCollect(msgspec.Struct, frozen=True):
    """Collection finished with failures - struct variant."""

    causes: tuple[BaseException, ...]
    results: tuple[Any, ...] = ()

    def to_exception(self) -> FailAtEndCollectError:
        """Convert to exception for raise-based code."""
        return FailAtEndCollectError(self.causes, self.results)


class FailAtEndCollectError(CollectError):
    """Collection finished with failures - exception variant.

    Raised by ``raising_at_end`` collectors once the whole input has been
    consumed. ``results`` holds every successful value of the run.
    """

    def _message(self) -> str:
        return f'{len(self.causes)} failure(s) while collecting, {len(self.results)} result(s) computed'

    def to_struct(self) -> FailAtEndCollect:
        """Convert to struct for value-based code."""
        return FailAtEndCollect(self.causes, self.results)

