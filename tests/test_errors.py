"""Tests for error types and their struct variants."""

from __future__ import annotations

import copy
import pickle

import pytest

from bulky import (
    BulkyError,
    CollectError,
    ConfigurationError,
    FailAtEndCollect,
    FailAtEndCollectError,
    FailFastCollect,
    FailFastCollectError,
    WrappedError,
)


class TestWrappedError:
    """Tests for WrappedError."""

    def test_carries_cause(self) -> None:
        cause = ValueError('bad')
        error = WrappedError(cause)
        assert error.cause is cause
        assert error.__cause__ is cause

    def test_message_names_the_cause(self) -> None:
        assert str(WrappedError(KeyError('k'))) == "KeyError: 'k'"

    def test_is_a_bulky_error(self) -> None:
        assert isinstance(WrappedError(ValueError()), BulkyError)


class TestCollectError:
    """Tests for the generic CollectError."""

    def test_accessors(self) -> None:
        first, second = ValueError('1'), ValueError('2')
        error = CollectError([first, second], iter(['a', 'b']))
        assert error.causes == (first, second)
        assert error.cause is first
        assert error.results == ('a', 'b')
        assert error.partial_result == error.results
        assert error.__cause__ is first

    def test_without_causes(self) -> None:
        error = CollectError([], [1])
        assert error.cause is None
        assert error.__cause__ is None

    def test_results_are_snapshots(self) -> None:
        results = [1]
        error = CollectError([ValueError()], results)
        results.append(2)
        assert error.results == (1,)


class TestFailFastCollectError:
    """Tests for FailFastCollectError and its struct variant."""

    def test_single_cause(self) -> None:
        cause = OSError('disk')
        error = FailFastCollectError(cause, [1, 2])
        assert error.causes == (cause,)
        assert error.cause is cause
        assert error.results == (1, 2)
        assert isinstance(error, CollectError)
        assert 'after 2 result(s)' in str(error)

    def test_struct_conversion(self) -> None:
        cause = OSError('disk')
        struct = FailFastCollectError(cause, [1]).to_struct()
        assert struct == FailFastCollect(cause, (1,))
        back = struct.to_exception()
        assert isinstance(back, FailFastCollectError)
        assert back.cause is cause
        assert back.results == (1,)

    def test_struct_is_frozen(self) -> None:
        struct = FailFastCollect(ValueError(), ())
        with pytest.raises(AttributeError):
            struct.results = (1,)  # type: ignore[misc]


class TestFailAtEndCollectError:
    """Tests for FailAtEndCollectError and its struct variant."""

    def test_accessors(self) -> None:
        causes = [KeyError('a'), KeyError('b')]
        error = FailAtEndCollectError(causes, [3])
        assert error.causes == tuple(causes)
        assert error.results == (3,)
        assert str(error) == '2 failure(s) while collecting, 1 result(s) computed'

    def test_struct_conversion(self) -> None:
        causes = (KeyError('a'),)
        struct = FailAtEndCollectError(causes, ['x']).to_struct()
        assert struct == FailAtEndCollect(causes, ('x',))
        back = struct.to_exception()
        assert isinstance(back, FailAtEndCollectError)
        assert back.causes == causes


class TestCopyAndPickle:
    """Errors survive copy and pickle with their payload intact."""

    def test_wrapped_error_pickles(self) -> None:
        error = pickle.loads(pickle.dumps(WrappedError(ValueError('x'))))
        assert isinstance(error.cause, ValueError)
        assert error.cause.args == ('x',)
        assert error.__cause__ is error.cause

    def test_fail_fast_copies(self) -> None:
        cause = OSError('disk')
        error = copy.copy(FailFastCollectError(cause, [1, 2]))
        assert error.cause is cause
        assert error.results == (1, 2)

    def test_fail_at_end_pickles(self) -> None:
        error = pickle.loads(pickle.dumps(FailAtEndCollectError([KeyError('a')], ['x'])))
        assert isinstance(error, FailAtEndCollectError)
        assert error.causes[0].args == ('a',)
        assert error.results == ('x',)

    def test_collect_error_copies(self) -> None:
        error = copy.copy(CollectError([ValueError('1')], [3]))
        assert type(error) is CollectError
        assert error.results == (3,)


class TestWithPrefix:
    """Tests for CollectError.with_prefix."""

    def test_fail_fast_keeps_type_and_cause(self) -> None:
        cause = ValueError('bad')
        error = FailFastCollectError(cause, [3]).with_prefix([1, 2])
        assert isinstance(error, FailFastCollectError)
        assert error.cause is cause
        assert error.results == (1, 2, 3)

    def test_fail_at_end_keeps_causes(self) -> None:
        causes = (KeyError('a'), KeyError('b'))
        error = FailAtEndCollectError(causes, ['c']).with_prefix(['a'])
        assert isinstance(error, FailAtEndCollectError)
        assert error.causes == causes
        assert error.results == ('a', 'c')


class TestConfigurationError:
    """Tests for ConfigurationError."""

    def test_hierarchy(self) -> None:
        assert issubclass(ConfigurationError, BulkyError)
        assert issubclass(ConfigurationError, ValueError)
