"""sneaky: funnel the errors a function raises into a single WrappedError kind."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, overload

import wrapt

from bulky.errors import WrappedError

__all__ = ['sneaky']


@overload
def sneaky[**P, T](func: Callable[P, T], /) -> Callable[P, T]: ...


@overload
def sneaky[**P, T](
    func: Callable[P, T],
    *,
    exceptions: tuple[type[BaseException], ...],
) -> Callable[P, T]: ...


@overload
def sneaky[**P, T](
    func: None = None,
    *,
    exceptions: tuple[type[BaseException], ...] | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]: ...


def sneaky(
    func: Callable[..., Any] | None = None,
    *,
    exceptions: tuple[type[BaseException], ...] | None = None,
) -> Any:
    """Make a function raise WrappedError instead of the errors it declares.

    Any error raised by ``func`` that is an instance of ``exceptions`` is
    re-raised as ``WrappedError(error)``, chained with ``from error``. Other
    errors propagate unchanged, and a WrappedError raised from inside ``func``
    is never wrapped a second time.

    This is what lets ``discarding_failures()`` and the other ``*_failure(s)``
    collectors tell "this element failed" apart from a genuine bug.

    Can be used as a call or as a decorator, with or without arguments:
        parse = sneaky(parse_uri)

        @sneaky
        def load(path): ...

        @sneaky(exceptions=(OSError, ValueError))
        def specific(path): ...

    Args:
        func: The function to wrap (when used without parentheses).
        exceptions: Tuple of exception types to wrap. Defaults to (Exception,).

    Returns:
        A wrapped function with the same signature as ``func``.

    Example:
        ```python
        from bulky import discarding_failures, lazy, sneaky

        thunks = map(lazy(sneaky(int)), ['1', 'x', '3'])
        discarding_failures().collect(thunks)
        # [1, 3]
        ```
    """
    wrap = exceptions if exceptions is not None else (Exception,)

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[..., Any],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        try:
            return wrapped(*args, **kwargs)
        except WrappedError:
            raise
        except wrap as e:
            raise WrappedError(e) from e

    if func is not None:
        return wrapper(func)
    return wrapper
