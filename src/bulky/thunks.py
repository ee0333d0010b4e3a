"""Deferred evaluation: wrap functions so they produce thunks instead of values.

A thunk is a zero-argument callable. Mapping ``lazy(f)`` over a sequence builds
one thunk per element without calling ``f``; a collector invokes them later and
decides what to do when one raises.

Example:
    ```python
    from bulky import discarding, lazy, lift

    thunks = map(lazy(int), ['1', 'x', '3'])
    thunks = map(lift(lambda n: n * 10), thunks)
    discarding(ValueError).collect(thunks)
    # [10, 30]
    ```
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

__all__ = ['Thunk', 'lazy', 'lazylift', 'lift', 'to_thunk']

type Thunk[T] = Callable[[], T]
"""A deferred computation yielding a ``T`` (or raising) when called."""

_NAMED_AFTER = ('__module__', '__name__', '__qualname__', '__doc__')


def _named_after[F: Callable[..., Any]](f: Callable[..., Any]) -> Callable[[F], F]:
    """Give the decorated wrapper ``f``'s name and docstring, but keep its own signature."""

    def decorate(wrapper: F) -> F:
        for attr in _NAMED_AFTER:
            value = getattr(f, attr, None)
            if value is not None:
                setattr(wrapper, attr, value)
        return wrapper

    return decorate


def lazy[T, R](f: Callable[[T], R]) -> Callable[[T], Thunk[R]]:
    """Wrap a function into one that returns a thunk of its result.

    Nothing is computed when ``lazy`` is called, nor when the returned function
    is applied to an input: ``f`` only runs when the thunk is invoked.

    ``map(lazy(f), xs)`` is equivalent to ``map(lift(f), map(to_thunk(), xs))``.

    Args:
        f: The function to defer.

    Returns:
        A function mapping an input to a thunk of ``f(input)``.

    Example:
        ```python
        parse = lazy(int)
        thunk = parse('42')  # int() not called yet
        thunk()
        # 42
        ```
    """

    @_named_after(f)
    def deferred(value: T) -> Thunk[R]:
        def thunk() -> R:
            return f(value)

        return thunk

    return deferred


def to_thunk[T]() -> Callable[[T], Thunk[T]]:
    """Return a function that wraps a value in a thunk of that value."""

    def wrap(value: T) -> Thunk[T]:
        return lambda: value

    return wrap


def lift[T, R](f: Callable[[T], R]) -> Callable[[Thunk[T]], Thunk[R]]:
    """Wrap a function into one that accepts and returns thunks.

    Meant for the ``map`` steps that follow an initial ``map(lazy(...))``: each
    lifted step is deferred as well, so the whole chain only runs when the
    collector invokes the final thunk. An error raised by the upstream thunk
    goes through untouched.

    Args:
        f: The function to apply to the thunk's value.

    Returns:
        A function mapping a thunk of ``T`` to a thunk of ``f(T)``.

    Example:
        ```python
        double = lift(lambda n: n * 2)
        double(lambda: 21)()
        # 42
        ```
    """

    @_named_after(f)
    def lifted(upstream: Thunk[T]) -> Thunk[R]:
        def thunk() -> R:
            return f(upstream())

        return thunk

    return lifted


lazylift = lift
"""Same as ``lift``."""
