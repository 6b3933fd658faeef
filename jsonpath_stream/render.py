"""Classification and JSON rendering of extracted matches."""

from __future__ import annotations

import enum
import typing as t
from collections.abc import Mapping, Sequence

import simplejson

from jsonpath_stream.exceptions import InternalSerializationError

__all__ = [
    "Classification",
    "classify",
    "is_array",
    "is_array_or_object",
    "is_object",
    "render",
    "serialize",
    "wrap_to_array",
]

EMPTY_ARRAY = "[]"


class Classification(str, enum.Enum):
    """Shape of a match collection."""

    EMPTY = "empty"
    SINGLE_SCALAR = "single-scalar"
    SINGLE_CONTAINER = "single-container"
    MULTIPLE = "multiple"


def is_array(value: t.Any) -> bool:  # noqa: ANN401
    """Return True if the value is a JSON array."""
    return isinstance(value, Sequence) and not isinstance(
        value,
        (str, bytes, bytearray),
    )


def is_object(value: t.Any) -> bool:  # noqa: ANN401
    """Return True if the value is a JSON object."""
    return isinstance(value, Mapping)


def is_array_or_object(value: t.Any) -> bool:  # noqa: ANN401
    """Return True if the value is a JSON container."""
    return is_array(value) or is_object(value)


def classify(matches: t.Sequence[t.Any]) -> Classification:
    """Classify a match collection by its serialization shape.

    Args:
        matches: Values returned by an extraction.

    Returns:
        The classification tag.
    """
    if len(matches) > 1:
        return Classification.MULTIPLE
    if not matches:
        return Classification.EMPTY
    if is_array_or_object(matches[0]):
        return Classification.SINGLE_CONTAINER
    return Classification.SINGLE_SCALAR


def serialize(value: t.Any) -> str:  # noqa: ANN401
    """Serialize a parsed JSON value into compact JSON text.

    Args:
        value: A JSON value, as returned by an extraction.

    Returns:
        A string of serialized json.

    Raises:
        InternalSerializationError: If the value cannot be encoded.
    """
    try:
        return simplejson.dumps(
            value,
            use_decimal=True,
            allow_nan=False,
            ensure_ascii=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError) as exc:
        msg = f"Unable to serialize value of type '{type(value).__name__}'"
        raise InternalSerializationError(msg) from exc


def wrap_to_array(
    matches: t.Sequence[t.Any],
    unconditionally: bool = False,  # noqa: FBT001, FBT002
) -> str:
    """Render a match collection as JSON text.

    Several matches always render as an array. A single match renders bare
    unless ``unconditionally`` is set, in which case it is wrapped in an array.

    Args:
        matches: Values returned by an extraction.
        unconditionally: Wrap a single match in an array.

    Returns:
        The rendered JSON text.
    """
    if len(matches) > 1:
        return serialize(list(matches))
    if not matches:
        return EMPTY_ARRAY

    serialized = serialize(matches[0])
    if unconditionally:
        return f"[{serialized}]"
    return serialized


render = wrap_to_array
