"""Custom decorators for Tempyral.

This module provides decorator utilities for the library:
    - @memoize: Memoization for pure lookups such as zone id canonicalization

This module is not part of the public API.
"""

from __future__ import annotations

import functools
from typing import Callable, TypeVar, ParamSpec

P = ParamSpec("P")
T = TypeVar("T")


def memoize(func: Callable[P, T]) -> Callable[P, T]:
    """Memoize a function whose arguments are hashable.

    Results are cached for the lifetime of the process, so only pure
    functions of their arguments should be decorated.

    Args:
        func: The function to memoize.

    Returns:
        A memoized version of the function.

    Examples:
        >>> @memoize
        ... def month_code(month: int) -> str:
        ...     return f"M{month:02d}"
        >>> month_code(3)
        'M03'
    """
    cache: dict[tuple, T] = {}

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        key = (args, tuple(sorted(kwargs.items())))
        if key not in cache:
            cache[key] = func(*args, **kwargs)
        return cache[key]

    # Expose cache for tests
    wrapper._cache = cache  # type: ignore[attr-defined]
    wrapper._clear_cache = cache.clear  # type: ignore[attr-defined]
    return wrapper


__all__ = [
    "memoize",
]
