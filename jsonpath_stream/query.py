"""High level entry point combining the path cache, extractor and renderer."""

from __future__ import annotations

import typing as t

from jsonpath_stream.cache import make_path_cache
from jsonpath_stream.extractor import extract
from jsonpath_stream.render import wrap_to_array

if t.TYPE_CHECKING:
    from jsonpath_stream.cache import PathCache
    from jsonpath_stream.compiler import CompiledPath
    from jsonpath_stream.extractor import StreamingBackend

__all__ = ["JsonPathQuery"]


class JsonPathQuery:
    """Run JSONPath queries against JSON documents.

    Instances are safe to share between threads: the path cache is the only
    mutable state and it is synchronized.

    Example:
        >>> JsonPathQuery().query('{"a": 5}', "$.a")
        '5'
    """

    def __init__(
        self,
        *,
        cache: PathCache | None = None,
        backend: StreamingBackend | None = None,
        force_array_wrap: bool = False,
    ) -> None:
        """Create a query runner.

        Args:
            cache: Cache of compiled paths. A new default-sized cache if omitted.
            backend: Streaming parser backend, ``ijson`` if omitted.
            force_array_wrap: Default for wrapping a single match in an array.
        """
        self.cache = cache if cache is not None else make_path_cache()
        self.backend = backend
        self.force_array_wrap = force_array_wrap

    @classmethod
    def from_config(cls, config: t.Mapping[str, t.Any]) -> JsonPathQuery:
        """Create a query runner from validated settings.

        Args:
            config: Settings as returned by ``configuration.load_config``.

        Returns:
            A new query runner.
        """
        return cls(
            cache=make_path_cache(config.get("cache_size")),
            force_array_wrap=config.get("force_array_wrap", False),
        )

    def compile(self, expression: str) -> CompiledPath:
        """Compile an expression through the cache."""
        return self.cache.get_or_compile(expression)

    def read(self, document: str | bytes, expression: str) -> list[t.Any]:
        """Return every value selected by ``expression``, in document order.

        Args:
            document: The JSON document.
            expression: A JSONPath expression.

        Returns:
            The matched values.
        """
        return extract(document, self.compile(expression), backend=self.backend)

    def query(
        self,
        document: str | bytes,
        expression: str,
        *,
        force_array_wrap: bool | None = None,
    ) -> str:
        """Return the values selected by ``expression`` as JSON text.

        Args:
            document: The JSON document.
            expression: A JSONPath expression.
            force_array_wrap: Wrap a single match in an array. Defaults to the
                instance setting.

        Returns:
            The rendered JSON text.
        """
        return self.render(
            self.read(document, expression),
            force_array_wrap=force_array_wrap,
        )

    def render(
        self,
        matches: t.Sequence[t.Any],
        *,
        force_array_wrap: bool | None = None,
    ) -> str:
        """Render matched values as JSON text.

        Args:
            matches: Values returned by ``read``.
            force_array_wrap: Wrap a single match in an array. Defaults to the
                instance setting.

        Returns:
            The rendered JSON text.
        """
        if force_array_wrap is None:
            force_array_wrap = self.force_array_wrap
        return wrap_to_array(matches, force_array_wrap)
