"""Bounded cache of compiled JSONPath expressions."""

from __future__ import annotations

import logging
import typing as t

import memoization
from memoization import CachingAlgorithmFlag

from jsonpath_stream.compiler import CompiledPath, compile_path

__all__ = [
    "DEFAULT_CACHE_SIZE",
    "PathCache",
    "compile_cached",
    "make_path_cache",
]

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 50


class PathCache:
    """A thread-safe, least-recently-used cache of compiled paths.

    Entries are keyed by the expression text. Two threads compiling the same
    expression at once may both run the compiler, but only one result is kept
    and both results compare equal.
    """

    def __init__(self, max_size: int = DEFAULT_CACHE_SIZE) -> None:
        """Create a new cache.

        Args:
            max_size: Maximum number of compiled paths to keep.

        Raises:
            ValueError: If ``max_size`` is not a positive integer.
        """
        if isinstance(max_size, bool) or not isinstance(max_size, int) or max_size < 1:
            msg = f"Path cache size must be a positive integer, got {max_size!r}"
            raise ValueError(msg)

        self.max_size = max_size
        self._compile: t.Callable[[str], CompiledPath] = memoization.cached(
            max_size=max_size,
            algorithm=CachingAlgorithmFlag.LRU,
            thread_safe=True,
        )(compile_path)

    def get_or_compile(self, expression: str) -> CompiledPath:
        """Return the cached compiled path, compiling it on a miss.

        Args:
            expression: A string representing a JSONPath expression.

        Returns:
            A compiled JSONPath object.
        """
        return self._compile(expression)

    def info(self) -> t.Any:  # noqa: ANN401
        """Return hit, miss and size statistics of the underlying cache."""
        return self._compile.cache_info()  # type: ignore[attr-defined]

    def clear(self) -> None:
        """Drop every cached entry."""
        logger.debug("Clearing JSONPath cache")
        self._compile.cache_clear()  # type: ignore[attr-defined]

    def __len__(self) -> int:
        return self.info().current_size  # type: ignore[no-any-return]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(max_size={self.max_size})"


def make_path_cache(max_size: int | None = None) -> PathCache:
    """Create a path cache with the default capacity unless one is given.

    Args:
        max_size: Optional maximum number of entries.

    Returns:
        A new, empty path cache.
    """
    return PathCache(DEFAULT_CACHE_SIZE if max_size is None else max_size)


_default_cache = make_path_cache()


def compile_cached(expression: str) -> CompiledPath:
    """Compile a JSONPath expression through the process-wide cache.

    Args:
        expression: A string representing a JSONPath expression.

    Returns:
        A compiled JSONPath object.
    """
    return _default_cache.get_or_compile(expression)
