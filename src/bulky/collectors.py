"""Collectors: terminal steps that invoke thunks and apply a failure policy.

A ``Collector`` is a strategy object made of four functions, in the style of a
mutable reduction: ``supplier`` creates an accumulator, ``accumulator`` feeds it
one thunk, ``combiner`` merges two partial accumulators and ``finisher`` turns
the final accumulator into a list of results (or raises). The factories in this
module build the four failure policies:

| Factory            | On a recognized failure                              |
|--------------------|------------------------------------------------------|
| ``discarding``     | skip the element and continue                        |
| ``up_to``          | stop, return what was computed before                |
| ``up_to_and_raise``| raise FailFastCollectError with the partial results  |
| ``raising_at_end`` | record it, raise FailAtEndCollectError at the end    |

Errors that are not recognized always propagate untouched.

Example:
    ```python
    from bulky import FailAtEndCollectError, lazy, raising_at_end

    try:
        raising_at_end(ValueError).collect(map(lazy(int), ['1', 'x', '3']))
    except FailAtEndCollectError as e:
        e.results  # (1, 3)
        e.causes   # (ValueError("invalid literal for int() with base 10: 'x'"),)
    ```
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

import msgspec

from bulky._logging import get_logger
from bulky.errors import (
    CollectError,
    ConfigurationError,
    FailAtEndCollectError,
    FailFastCollectError,
    WrappedError,
)
from bulky.thunks import Thunk

__all__ = [
    'Collector',
    'FailAtEndAccumulator',
    'ResultsAccumulator',
    'discarding',
    'discarding_failures',
    'raising_at_end',
    'raising_failures_at_end',
    'up_to',
    'up_to_and_raise',
    'up_to_failure',
    'up_to_failure_and_raise',
]

logger = get_logger(__name__)

type FailureKinds = tuple[type[BaseException], ...]


# ---------------------------------------------------------------------
# Accumulators
# ---------------------------------------------------------------------


class ResultsAccumulator(msgspec.Struct):
    """Ordered results of one partition, plus whether collection halted.

    Attributes:
        results: Successfully computed values, in input order.
        halted: True once a policy decided to stop invoking thunks.
    """

    results: list[Any] = msgspec.field(default_factory=list)
    halted: bool = False

    def add_result(self, result: Any) -> ResultsAccumulator:
        self.results.append(result)
        return self

    def combine(self, other: ResultsAccumulator) -> ResultsAccumulator:
        """Append ``other``'s results after this one's."""
        self.results.extend(other.results)
        self.halted = self.halted or other.halted
        return self

    def combine_prefix(self, other: ResultsAccumulator) -> ResultsAccumulator:
        """Like ``combine``, but a halted accumulator ignores what comes after it."""
        if not self.halted:
            self.results.extend(other.results)
            self.halted = other.halted
        return self


class FailAtEndAccumulator(msgspec.Struct):
    """Results and failures of one partition for the fail-at-end policy.

    Attributes:
        results: Successfully computed values, in input order.
        failures: Recognized failures, in the order they were raised.
        has_failures: True once any failure has been recorded.
    """

    results: list[Any] = msgspec.field(default_factory=list)
    failures: list[BaseException] = msgspec.field(default_factory=list)
    has_failures: bool = False

    def add_result(self, result: Any) -> FailAtEndAccumulator:
        self.results.append(result)
        return self

    def add_failure(self, failure: BaseException) -> FailAtEndAccumulator:
        self.has_failures = True
        self.failures.append(failure)
        return self

    def combine(self, other: FailAtEndAccumulator) -> FailAtEndAccumulator:
        """Concatenate ``other``'s results and failures after this one's."""
        self.results.extend(other.results)
        self.failures.extend(other.failures)
        self.has_failures = self.has_failures or other.has_failures
        return self

    def unload_into[R](self, target: Callable[[tuple[BaseException, ...], tuple[Any, ...]], R]) -> R:
        """Pass the failures and results, as tuples, to ``target``."""
        return target(tuple(self.failures), tuple(self.results))


# ---------------------------------------------------------------------
# Collector
# ---------------------------------------------------------------------


def _never_halted(acc: Any) -> bool:
    return False


def _is_halted(acc: ResultsAccumulator) -> bool:
    return acc.halted


@dataclass(frozen=True, slots=True)
class Collector[A, R]:
    """A failure policy packaged as a mutable reduction over thunks.

    Attributes:
        supplier: Creates a fresh, empty accumulator.
        accumulator: Invokes one thunk and records its outcome in the accumulator.
        combiner: Merges a right-hand accumulator into a left-hand one and returns it.
        finisher: Produces the results from the final accumulator, or raises.
        is_halted: Reports whether the accumulator accepts no further thunks.
        policy: Name of the policy, used in log events.
    """

    supplier: Callable[[], A]
    accumulator: Callable[[A, Thunk[R]], None]
    combiner: Callable[[A, A], A]
    finisher: Callable[[A], list[R]]
    is_halted: Callable[[A], bool] = _never_halted
    policy: str = 'custom'

    @classmethod
    def of(
        cls,
        supplier: Callable[[], A],
        accumulator: Callable[[A, Thunk[R]], None],
        combiner: Callable[[A, A], A],
        finisher: Callable[[A], list[R]],
        *,
        is_halted: Callable[[A], bool] | None = None,
        policy: str = 'custom',
    ) -> Collector[A, R]:
        """Build a collector from its functions."""
        return cls(
            supplier=supplier,
            accumulator=accumulator,
            combiner=combiner,
            finisher=finisher,
            is_halted=is_halted if is_halted is not None else _never_halted,
            policy=policy,
        )

    def accumulate(self, acc: A, thunks: Iterable[Thunk[R]]) -> A:
        """Feed ``thunks`` into ``acc`` until they run out or the accumulator halts.

        No further item is pulled from ``thunks`` once the accumulator halted.
        """
        if self.is_halted(acc):
            return acc
        for thunk in thunks:
            self.accumulator(acc, thunk)
            if self.is_halted(acc):
                break
        return acc

    def collect(self, thunks: Iterable[Thunk[R]]) -> list[R]:
        """Run the policy over ``thunks`` and return the results.

        Args:
            thunks: The deferred computations, typically ``map(lazy(f), values)``.

        Returns:
            The successfully computed values, in input order.

        Raises:
            CollectError: Depending on the policy, when a recognized failure occurs.
        """
        return self.finisher(self.accumulate(self.supplier(), thunks))

    def collect_partitioned(self, partitions: Iterable[Iterable[Thunk[R]]]) -> list[R]:
        """Run the policy over partitions, each in its own accumulator, then merge.

        Partitions are accumulated one after the other and folded left to right
        with ``combiner``. Once the merged accumulator has halted, the
        remaining partitions are not invoked. A CollectError raised while a
        partition is accumulated is re-raised with the results of the earlier
        partitions in front of its own.

        Args:
            partitions: Ordered chunks of the thunk sequence.

        Returns:
            The successfully computed values, in partition order.
        """
        merged: A | None = None
        for partition in partitions:
            if merged is not None and self.is_halted(merged):
                break
            try:
                acc = self.accumulate(self.supplier(), partition)
            except CollectError as e:
                if not isinstance(merged, ResultsAccumulator) or not merged.results:
                    raise
                raise e.with_prefix(merged.results) from e.cause
            merged = acc if merged is None else self.combiner(merged, acc)
        if merged is None:
            merged = self.supplier()
        return self.finisher(merged)


# ---------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------


def _failure_kinds(factory: str, kinds: tuple[Any, ...]) -> FailureKinds:
    """Validate the exception classes a collector should recognize."""
    if not kinds:
        msg = f'{factory}() needs at least one exception class to recognize as a failure'
        raise ConfigurationError(msg)
    for kind in kinds:
        if not (isinstance(kind, type) and issubclass(kind, BaseException)):
            msg = f'{factory}() expects exception classes, got {kind!r}'
            raise ConfigurationError(msg)
    return kinds


def _results(acc: ResultsAccumulator) -> list[Any]:
    return list(acc.results)


def discarding[T](*failures: type[BaseException]) -> Collector[ResultsAccumulator, T]:
    """Collector that skips computations failing with one of ``failures``.

    Args:
        *failures: Exception classes to discard. At least one is required.

    Returns:
        A collector returning every successfully computed value.

    Raises:
        ConfigurationError: If no exception class is given.
    """
    kinds = _failure_kinds('discarding', failures)

    def accumulate(acc: ResultsAccumulator, thunk: Thunk[T]) -> None:
        try:
            acc.add_result(thunk())
        except kinds as e:
            logger.debug('failure_discarded', policy='discarding', error=repr(e))

    return Collector.of(
        ResultsAccumulator,
        accumulate,
        ResultsAccumulator.combine,
        _results,
        policy='discarding',
    )


def discarding_failures[T]() -> Collector[ResultsAccumulator, T]:
    """Same as ``discarding`` with WrappedError as the only failure; pairs with ``sneaky``."""
    return discarding(WrappedError)


def up_to[T](*failures: type[BaseException]) -> Collector[ResultsAccumulator, T]:
    """Collector that computes results until one fails with one of ``failures``.

    The failure is swallowed and the results computed before it are returned.
    Thunks after the failing one are never invoked.

    Args:
        *failures: Exception classes that stop the collection. At least one is required.

    Returns:
        A collector returning the successful prefix of the input.

    Raises:
        ConfigurationError: If no exception class is given.
    """
    kinds = _failure_kinds('up_to', failures)

    def accumulate(acc: ResultsAccumulator, thunk: Thunk[T]) -> None:
        if acc.halted:
            return
        try:
            acc.add_result(thunk())
        except kinds as e:
            acc.halted = True
            logger.debug('collection_halted', policy='up_to', error=repr(e), collected=len(acc.results))

    return Collector.of(
        ResultsAccumulator,
        accumulate,
        ResultsAccumulator.combine_prefix,
        _results,
        is_halted=_is_halted,
        policy='up_to',
    )


def up_to_failure[T]() -> Collector[ResultsAccumulator, T]:
    """Same as ``up_to`` with WrappedError as the only failure; pairs with ``sneaky``."""
    return up_to(WrappedError)


def up_to_and_raise[T](*failures: type[BaseException]) -> Collector[ResultsAccumulator, T]:
    """Collector that raises as soon as a computation fails with one of ``failures``.

    The failure is wrapped in a FailFastCollectError that also carries the
    results computed before it. If nothing fails, all results are returned.

    Args:
        *failures: Exception classes that abort the collection. At least one is required.

    Returns:
        A collector returning every result when no failure occurs.

    Raises:
        ConfigurationError: If no exception class is given.
    """
    kinds = _failure_kinds('up_to_and_raise', failures)

    def accumulate(acc: ResultsAccumulator, thunk: Thunk[T]) -> None:
        if acc.halted:
            return
        try:
            result = thunk()
        except kinds as e:
            acc.halted = True
            logger.debug('collection_failed', policy='up_to_and_raise', error=repr(e), collected=len(acc.results))
            raise FailFastCollectError(e, acc.results) from e
        acc.add_result(result)

    return Collector.of(
        ResultsAccumulator,
        accumulate,
        ResultsAccumulator.combine,
        _results,
        is_halted=_is_halted,
        policy='up_to_and_raise',
    )


def up_to_failure_and_raise[T]() -> Collector[ResultsAccumulator, T]:
    """Same as ``up_to_and_raise`` with WrappedError as the only failure."""
    return up_to_and_raise(WrappedError)


def raising_at_end[T](*failures: type[BaseException]) -> Collector[FailAtEndAccumulator, T]:
    """Collector that consumes everything, then raises if anything failed.

    Every failure matching ``failures`` is recorded and collection goes on. At
    the end, a FailAtEndCollectError carrying all causes and all successful
    results is raised if at least one failure was recorded; otherwise the
    results are returned.

    Args:
        *failures: Exception classes to record. At least one is required.

    Returns:
        A collector returning every result when no failure occurs.

    Raises:
        ConfigurationError: If no exception class is given.
    """
    kinds = _failure_kinds('raising_at_end', failures)

    def accumulate(acc: FailAtEndAccumulator, thunk: Thunk[T]) -> None:
        try:
            result = thunk()
        except kinds as e:
            acc.add_failure(e)
            logger.debug('failure_recorded', policy='raising_at_end', error=repr(e))
            return
        acc.add_result(result)

    def finish(acc: FailAtEndAccumulator) -> list[T]:
        if acc.has_failures:
            logger.debug(
                'collection_failed',
                policy='raising_at_end',
                error=repr(acc.failures[0]),
                failures=len(acc.failures),
                collected=len(acc.results),
            )
            raise acc.unload_into(FailAtEndCollectError)
        return list(acc.results)

    return Collector.of(
        FailAtEndAccumulator,
        accumulate,
        FailAtEndAccumulator.combine,
        finish,
        policy='raising_at_end',
    )


def raising_failures_at_end[T]() -> Collector[FailAtEndAccumulator, T]:
    """Same as ``raising_at_end`` with WrappedError as the only failure."""
    return raising_at_end(WrappedError)
