"""Streaming JSONPath queries over JSON documents."""

from __future__ import annotations

from jsonpath_stream.cache import (
    DEFAULT_CACHE_SIZE,
    PathCache,
    compile_cached,
    make_path_cache,
)
from jsonpath_stream.compiler import CompiledPath, compile_path
from jsonpath_stream.exceptions import (
    InternalSerializationError,
    JsonParseError,
    JsonPathStreamError,
    PathSyntaxError,
    UnsupportedPathError,
)
from jsonpath_stream.extractor import IjsonBackend, StreamingBackend, extract
from jsonpath_stream.query import JsonPathQuery
from jsonpath_stream.render import (
    Classification,
    classify,
    is_array,
    is_array_or_object,
    is_object,
    render,
    serialize,
    wrap_to_array,
)

__all__ = [
    "DEFAULT_CACHE_SIZE",
    "Classification",
    "CompiledPath",
    "IjsonBackend",
    "InternalSerializationError",
    "JsonParseError",
    "JsonPathQuery",
    "JsonPathStreamError",
    "PathCache",
    "PathSyntaxError",
    "StreamingBackend",
    "UnsupportedPathError",
    "classify",
    "compile_cached",
    "compile_path",
    "extract",
    "is_array",
    "is_array_or_object",
    "is_object",
    "make_path_cache",
    "render",
    "serialize",
    "wrap_to_array",
]
