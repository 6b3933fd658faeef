"""JSONPath compilation into immutable, stream-friendly segment lists."""

from __future__ import annotations

import abc
import dataclasses
import logging
import typing as t
from dataclasses import dataclass, field

from jsonpath_ng import jsonpath as jp
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError
from jsonpath_ng.ext import parse

from jsonpath_stream.exceptions import PathSyntaxError, UnsupportedPathError

__all__ = [
    "CompiledPath",
    "DescendantsSegment",
    "FieldSegment",
    "IndexSegment",
    "Segment",
    "SliceSegment",
    "compile_path",
]

logger = logging.getLogger(__name__)

WILDCARD = "*"

#: A single step of a location inside a document: a member name or an index.
PathComponent = t.Union[str, int]


@dataclass(frozen=True)
class Segment(abc.ABC):
    """Base class for a compiled path step."""

    #: True when the segment follows a ``..`` operator.
    recursive: bool = field(default=False, kw_only=True)

    #: True when the segment may also match without consuming a component.
    optional: t.ClassVar[bool] = False

    @abc.abstractmethod
    def accepts(self, component: PathComponent) -> bool:
        """Check whether this segment selects the given location component.

        Args:
            component: A member name or an array position.

        Returns:
            True if the component is selected.
        """
        ...


@dataclass(frozen=True)
class DescendantsSegment(Segment):
    """The location itself and everything below it, as in ``$..@``."""

    recursive: bool = field(default=True, kw_only=True)
    optional: t.ClassVar[bool] = True

    def accepts(self, component: PathComponent) -> bool:  # noqa: ARG002, D102
        return True


@dataclass(frozen=True)
class FieldSegment(Segment):
    """Object member access by name, ``*`` selects every member."""

    names: tuple[str, ...]

    def accepts(self, component: PathComponent) -> bool:  # noqa: D102
        if not isinstance(component, str):
            return False
        return WILDCARD in self.names or component in self.names


@dataclass(frozen=True)
class IndexSegment(Segment):
    """Array element access by position."""

    indices: tuple[int, ...]

    def accepts(self, component: PathComponent) -> bool:  # noqa: D102
        return isinstance(component, int) and component in self.indices


@dataclass(frozen=True)
class SliceSegment(Segment):
    """Array element access over a half-open range. ``[*]`` is the full range."""

    start: int = 0
    end: int | None = None
    step: int = 1

    def accepts(self, component: PathComponent) -> bool:  # noqa: D102
        if not isinstance(component, int) or component < self.start:
            return False
        if self.end is not None and component >= self.end:
            return False
        return (component - self.start) % self.step == 0


@dataclass(frozen=True)
class CompiledPath:
    """An immutable, reusable JSONPath.

    Matching is expressed as a small automaton over segment positions so that a
    streaming parser can evaluate it one location component at a time.
    """

    expression: str
    segments: tuple[Segment, ...]

    def _closure(self, states: t.Iterable[int]) -> frozenset[int]:
        reached = set(states)
        for state in sorted(reached):
            while state < len(self.segments) and self.segments[state].optional:
                state += 1
                reached.add(state)
        return frozenset(reached)

    def initial_states(self) -> frozenset[int]:
        """Return the automaton states at the document root."""
        return self._closure((0,))

    def advance(
        self,
        states: frozenset[int],
        component: PathComponent,
    ) -> frozenset[int]:
        """Compute the states reached by descending into ``component``.

        Args:
            states: States at the parent location.
            component: Member name or array position of the child.

        Returns:
            States at the child location. Empty if nothing below can match.
        """
        reached: set[int] = set()
        for state in states:
            if state >= len(self.segments):
                continue
            segment = self.segments[state]
            if segment.accepts(component):
                reached.add(state + 1)
            if segment.recursive:
                reached.add(state)
        return self._closure(reached)

    def is_match(self, states: frozenset[int]) -> bool:
        """Check whether a location with the given states is selected."""
        return len(self.segments) in states

    def matches(self, location: t.Iterable[PathComponent]) -> bool:
        """Check whether a concrete location is selected by this path.

        Args:
            location: Member names and array positions from the root.

        Returns:
            True if the location is selected.
        """
        states = self.initial_states()
        for component in location:
            states = self.advance(states, component)
            if not states:
                return False
        return self.is_match(states)

    def __str__(self) -> str:
        return self.expression


def _unsupported(expression: str, node: jp.JSONPath) -> UnsupportedPathError:
    msg = (
        f"JSONPath construct '{type(node).__name__}' in '{expression}' "
        "cannot be evaluated on a stream"
    )
    return UnsupportedPathError(msg, expression=expression)


def _mark_recursive(segments: list[Segment]) -> list[Segment]:
    if not segments:
        return segments
    first, *rest = segments
    return [dataclasses.replace(first, recursive=True), *rest]


def _slice_segment(expression: str, node: jp.Slice) -> SliceSegment:
    start = 0 if node.start is None else node.start
    step = 1 if node.step is None else node.step
    if step == 0:
        msg = f"Slice step cannot be zero in '{expression}'"
        raise PathSyntaxError(msg, expression=expression)
    if start < 0 or step < 0 or (node.end is not None and node.end < 0):
        raise _unsupported(expression, node)
    return SliceSegment(start, node.end, step)


def _flatten(  # noqa: C901
    expression: str,
    node: jp.JSONPath,
    *,
    leading: bool = True,
) -> list[Segment]:
    """Walk a jsonpath_ng expression tree left to right.

    Args:
        expression: The source text, for error messages.
        node: The expression node (Root, Child, Fields, etc.)
        leading: True while no segment has been produced yet.
    """
    match node:
        case jp.Root():
            if not leading:
                raise _unsupported(expression, node)
            return []
        case jp.This() if type(node) is jp.This:
            return []
        case jp.Child():
            left = _flatten(expression, node.left, leading=leading)
            right = _flatten(
                expression,
                node.right,
                leading=leading and not left,
            )
            return left + right
        case jp.Descendants():
            left = _flatten(expression, node.left, leading=leading)
            right = _flatten(expression, node.right, leading=False)
            if not right:
                return [*left, DescendantsSegment()]
            return left + _mark_recursive(right)
        case jp.Fields():
            return [FieldSegment(tuple(node.fields))]
        case jp.Index():
            # jsonpath_ng>=1.7 stores a tuple of indices
            indices = getattr(node, "indices", None)
            if indices is None:
                indices = (node.index,)
            if any(index < 0 for index in indices):
                raise _unsupported(expression, node)
            return [IndexSegment(tuple(indices))]
        case jp.Slice():
            return [_slice_segment(expression, node)]
        case _:
            raise _unsupported(expression, node)


def compile_path(expression: str) -> CompiledPath:
    """Compile a JSONPath expression.

    Args:
        expression: A string representing a JSONPath expression.

    Returns:
        A compiled JSONPath object.

    Raises:
        PathSyntaxError: If the expression is malformed.
    """
    if not isinstance(expression, str) or not expression.strip():
        msg = f"Invalid JSONPath expression: {expression!r}"
        raise PathSyntaxError(msg, expression=expression)

    try:
        tree = parse(expression)
    except (JsonPathLexerError, JsonPathParserError) as exc:
        msg = f"Invalid JSONPath expression '{expression}': {exc}"
        raise PathSyntaxError(msg, expression=expression) from exc

    compiled = CompiledPath(expression, tuple(_flatten(expression, tree)))
    logger.debug(
        "Compiled JSONPath '%s' into %d segments",
        expression,
        len(compiled.segments),
    )
    return compiled
