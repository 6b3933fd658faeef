"""Top level test fixtures."""

from __future__ import annotations

import os

import pytest

from jsonpath_stream.cache import PathCache
from jsonpath_stream.configuration import ENV_PREFIX
from jsonpath_stream.query import JsonPathQuery


@pytest.fixture(autouse=True)
def _reset_envvars(monkeypatch: pytest.MonkeyPatch):
    """Remove envvars that might interfere with tests."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)


@pytest.fixture
def path_cache() -> PathCache:
    return PathCache(max_size=5)


@pytest.fixture
def query(path_cache: PathCache) -> JsonPathQuery:
    return JsonPathQuery(cache=path_cache)
