"""Defines a common set of exceptions which callers can catch."""

from __future__ import annotations


class JsonPathStreamError(Exception):
    """Base class for all errors raised by this package."""


class PathSyntaxError(JsonPathStreamError):
    """Raised when a JSONPath expression cannot be compiled."""

    def __init__(self, message: str, *, expression: object = None) -> None:
        """Initialize a PathSyntaxError.

        Args:
            message: A message describing the error.
            expression: The offending JSONPath expression.
        """
        super().__init__(message)
        self.expression = expression


class UnsupportedPathError(PathSyntaxError):
    """Raised when a valid JSONPath uses a construct that cannot be streamed."""


class JsonParseError(JsonPathStreamError):
    """Raised when a JSON document is not well-formed.

    The message is always generic. Parser output may echo fragments of the
    document, so it is only available through ``__cause__`` and the
    ``jsonpath_stream.extractor`` debug log.
    """

    DEFAULT_MESSAGE = "Failed to parse JSON document"

    def __init__(self, *args: object) -> None:  # noqa: ARG002
        """Initialize a JsonParseError with the generic message.

        Positional arguments are ignored, they are accepted so that the error
        can be rebuilt from its ``args`` when unpickled.
        """
        super().__init__(self.DEFAULT_MESSAGE)


class InternalSerializationError(JsonPathStreamError):
    """Raised when an already parsed value cannot be encoded back to JSON."""


class ConfigValidationError(JsonPathStreamError):
    """Raised when settings fail validation."""

    def __init__(
        self,
        message: str,
        *,
        errors: list[str] | None = None,
    ) -> None:
        """Initialize a ConfigValidationError.

        Args:
            message: A message describing the error.
            errors: A list of errors which caused the validation error.
        """
        super().__init__(message)
        self.errors = errors or []
