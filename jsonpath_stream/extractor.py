"""Streaming extraction of JSONPath matches from a JSON document."""

from __future__ import annotations

import io
import logging
import typing as t
from dataclasses import dataclass
from typing import Protocol

import ijson
from ijson.common import ObjectBuilder

from jsonpath_stream.exceptions import JsonParseError

if t.TYPE_CHECKING:
    from jsonpath_stream.compiler import CompiledPath, PathComponent

__all__ = [
    "IjsonBackend",
    "StreamingBackend",
    "extract",
]

logger = logging.getLogger(__name__)

_CONTAINER_START = frozenset(("start_map", "start_array"))
_CONTAINER_END = frozenset(("end_map", "end_array"))


class StreamingBackend(Protocol):
    """Protocol for streaming JSON parsers able to apply a compiled path."""

    def parse_and_visit(
        self,
        document: str | bytes,
        path: CompiledPath,
    ) -> list[t.Any]:
        """Parse a document and collect the values selected by a path.

        Args:
            document: The JSON document.
            path: The compiled path to apply.

        Returns:
            The matched values in document order.

        Raises:
            JsonParseError: If the document is not well-formed JSON.
        """
        ...


@dataclass
class _Frame:
    """An open container in the event stream."""

    states: frozenset[int]
    is_array: bool
    index: int = 0
    key: str | None = None

    def next_component(self) -> PathComponent:
        if self.is_array:
            component = self.index
            self.index += 1
            return component
        return self.key  # type: ignore[return-value]


@dataclass
class _Capture:
    """A matched value being rebuilt from events."""

    slot: int
    depth: int
    builder: ObjectBuilder


def _feed(captures: list[_Capture], event: str, value: t.Any) -> None:  # noqa: ANN401
    for capture in captures:
        capture.builder.event(event, value)


class IjsonBackend:
    """Streaming backend built on ``ijson`` parse events.

    Only the sub-trees selected by the path are materialized. Integers are
    returned as ``int`` and other numbers as ``decimal.Decimal``.
    """

    def parse_and_visit(
        self,
        document: str | bytes,
        path: CompiledPath,
    ) -> list[t.Any]:
        """Parse a document and collect the values selected by a path.

        Args:
            document: The JSON document.
            path: The compiled path to apply.

        Returns:
            The matched values in document order.

        Raises:
            JsonParseError: If the document is not well-formed JSON.
        """
        try:
            return self._collect(document, path)
        except (ijson.JSONError, UnicodeError) as exc:
            # The parser message may quote the document, keep it out of the error.
            logger.debug("Unable to parse JSON document", exc_info=exc)
            raise JsonParseError from exc

    def _collect(self, document: str | bytes, path: CompiledPath) -> list[t.Any]:
        if isinstance(document, str):
            document = document.encode("utf-8")

        results: list[t.Any] = []
        stack: list[_Frame] = []
        captures: list[_Capture] = []

        events = ijson.basic_parse(io.BytesIO(document), use_float=False)
        for event, value in events:
            if event == "map_key":
                stack[-1].key = value
                _feed(captures, event, value)
                continue

            if event in _CONTAINER_END:
                _feed(captures, event, value)
                stack.pop()
            else:
                states = self._value_states(stack, path)
                if path.is_match(states):
                    captures.append(_Capture(len(results), len(stack), ObjectBuilder()))
                    results.append(None)
                _feed(captures, event, value)
                if event in _CONTAINER_START:
                    stack.append(_Frame(states, is_array=event == "start_array"))
                    continue

            # A value at depth len(stack) is now complete.
            while captures and captures[-1].depth == len(stack):
                capture = captures.pop()
                results[capture.slot] = capture.builder.value

        return results

    @staticmethod
    def _value_states(stack: list[_Frame], path: CompiledPath) -> frozenset[int]:
        if not stack:
            return path.initial_states()
        parent = stack[-1]
        component = parent.next_component()
        if not parent.states:
            return parent.states
        return path.advance(parent.states, component)


_default_backend = IjsonBackend()


def extract(
    document: str | bytes,
    path: CompiledPath,
    *,
    backend: StreamingBackend | None = None,
) -> list[t.Any]:
    """Extract every value selected by a compiled path.

    Args:
        document: The JSON document, as text or UTF-8 bytes.
        path: The compiled path to apply.
        backend: Optional streaming backend, defaults to ``ijson``.

    Returns:
        The matched values in document order. Empty when nothing matches.
    """
    matches = (backend or _default_backend).parse_and_visit(document, path)
    logger.debug("JSONPath '%s' matches: %d", path.expression, len(matches))
    return matches
