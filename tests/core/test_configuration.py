from __future__ import annotations

import json
import typing as t

import pytest

from jsonpath_stream.configuration import (
    CONFIG_JSONSCHEMA,
    ENV_PREFIX,
    load_config,
    merge_config_sources,
    parse_environment_config,
    validate_config,
)
from jsonpath_stream.exceptions import ConfigValidationError

if t.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def config_file1(tmp_path: Path) -> str:
    filepath = tmp_path / "file1.json"
    filepath.write_text(json.dumps({"cache_size": 10}), encoding="utf-8")
    return str(filepath)


@pytest.fixture
def config_file2(tmp_path: Path) -> str:
    filepath = tmp_path / "file2.json"
    filepath.write_text(
        json.dumps({"cache_size": 20, "force_array_wrap": True}),
        encoding="utf-8",
    )
    return str(filepath)


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep a stray .env file from being picked up."""
    monkeypatch.chdir(tmp_path)


def test_defaults():
    assert load_config() == {
        "cache_size": 50,
        "force_array_wrap": False,
        "log_level": "INFO",
    }


def test_get_env_var_config(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
):
    monkeypatch.setenv("JSONPATH_STREAM_CACHE_SIZE", "12")
    monkeypatch.setenv("JSONPATH_STREAM_FORCE_ARRAY_WRAP", "TRUE")
    monkeypatch.setenv("JSONPATH_STREAM_LOG_LEVEL", "debug")
    monkeypatch.setenv("JSONPATH_STREAM_UNKNOWN", "ignored")

    with caplog.at_level("INFO"):
        env_config = parse_environment_config(CONFIG_JSONSCHEMA, ENV_PREFIX)

    assert env_config == {
        "cache_size": 12,
        "force_array_wrap": True,
        "log_level": "DEBUG",
    }
    assert "Parsing 'cache_size' config from env variable" in caplog.text


def test_env_var_from_dotenv_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    dotenv_file = tmp_path / "custom.env"
    dotenv_file.write_text("JSONPATH_STREAM_CACHE_SIZE=7\n", encoding="utf-8")
    # Registered so the variable written by the .env loader is removed afterwards.
    monkeypatch.setenv("JSONPATH_STREAM_CACHE_SIZE", "placeholder")

    env_config = parse_environment_config(
        CONFIG_JSONSCHEMA,
        ENV_PREFIX,
        dotenv_path=str(dotenv_file),
    )

    assert env_config == {"cache_size": 7}


def test_merge_config_sources(
    config_file1: str,
    config_file2: str,
    monkeypatch: pytest.MonkeyPatch,
):
    monkeypatch.setenv("JSONPATH_STREAM_CACHE_SIZE", "30")

    assert merge_config_sources([config_file1]) == {"cache_size": 10}
    assert merge_config_sources([config_file1, config_file2]) == {
        "cache_size": 20,
        "force_array_wrap": True,
    }
    assert merge_config_sources([config_file2, "ENV"])["cache_size"] == 30
    assert merge_config_sources(["ENV", config_file1])["cache_size"] == 10


def test_missing_config_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError, match="Could not locate config file"):
        merge_config_sources([str(tmp_path / "missing.json")])


@pytest.mark.parametrize(
    "config,message",
    [
        ({"cache_size": 0}, "0 is less than the minimum of 1"),
        ({"cache_size": "many"}, "'many' is not of type 'integer'"),
        ({"force_array_wrap": "yes"}, "'yes' is not of type 'boolean'"),
        ({"log_level": "LOUD"}, "'LOUD' is not one of"),
        ({"colour": "blue"}, "Additional properties are not allowed"),
    ],
)
def test_validate_config_errors(config: dict, message: str):
    with pytest.raises(ConfigValidationError) as exc_info:
        validate_config(config)

    assert len(exc_info.value.errors) == 1
    assert message in exc_info.value.errors[0]


def test_invalid_env_var_is_reported(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("JSONPATH_STREAM_CACHE_SIZE", "lots")

    with pytest.raises(ConfigValidationError, match="cache_size"):
        load_config(["ENV"])


def test_validate_config_does_not_mutate_input():
    config = {"cache_size": 3}

    assert validate_config(config)["force_array_wrap"] is False
    assert config == {"cache_size": 3}
