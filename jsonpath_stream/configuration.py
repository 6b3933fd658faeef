"""Settings for JSONPath queries, loaded from files and environment variables."""

from __future__ import annotations

import decimal
import logging
import os
import typing as t
from pathlib import Path

import simplejson
from dotenv import find_dotenv
from dotenv.main import DotEnv
from jsonschema import Draft7Validator, validators

from jsonpath_stream.cache import DEFAULT_CACHE_SIZE
from jsonpath_stream.exceptions import ConfigValidationError

if t.TYPE_CHECKING:
    from jsonschema import ValidationError
    from jsonschema.protocols import Validator

__all__ = [
    "CONFIG_JSONSCHEMA",
    "ENV_PREFIX",
    "load_config",
    "merge_config_sources",
    "parse_environment_config",
    "validate_config",
]

logger = logging.getLogger(__name__)

ENV_PREFIX = "JSONPATH_STREAM_"
TRUTHY = ("true", "1", "yes", "on")

CONFIG_JSONSCHEMA: dict[str, t.Any] = {
    "type": "object",
    "properties": {
        "cache_size": {
            "type": "integer",
            "minimum": 1,
            "default": DEFAULT_CACHE_SIZE,
            "description": "Maximum number of compiled JSONPath expressions to keep.",
        },
        "force_array_wrap": {
            "type": "boolean",
            "default": False,
            "description": "Wrap a single match in a JSON array.",
        },
        "log_level": {
            "type": "string",
            "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            "default": "INFO",
            "description": "Log level of the command line interface.",
        },
    },
    "additionalProperties": False,
}


def _extend_validator_with_defaults(
    validator_class: type[Validator],
) -> type[Validator]:
    """Fill in defaults, before validating with the provided JSON Schema Validator.

    Args:
        validator_class: The JSON Schema Validator class to extend.

    Returns:
        The extended JSON Schema Validator class.
    """
    validate_properties = validator_class.VALIDATORS["properties"]

    def set_defaults(
        validator: Validator,
        properties: t.Mapping[str, dict],
        instance: t.MutableMapping[str, t.Any],
        schema: dict,
    ) -> t.Generator[ValidationError, None, None]:
        for prop, subschema in properties.items():
            if "default" in subschema:
                instance.setdefault(prop, subschema["default"])

        yield from validate_properties(validator, properties, instance, schema)

    return validators.extend(validator_class, {"properties": set_defaults})  # type: ignore[no-any-return]


ConfigValidator = _extend_validator_with_defaults(Draft7Validator)


def _format_validation_error(error: ValidationError) -> str:
    result = f"{error.message}"
    if error.path:
        result += f" in config[{']['.join(repr(index) for index in error.path)}]"
    return result


def _read_json_file(path: Path) -> dict[str, t.Any]:
    return simplejson.loads(  # type: ignore[no-any-return]
        path.read_text(encoding="utf-8"),
        parse_float=decimal.Decimal,
    )


def parse_environment_config(
    config_schema: dict[str, t.Any],
    prefix: str,
    dotenv_path: str | None = None,
) -> dict[str, t.Any]:
    """Parse configuration from environment variables.

    Args:
        config_schema: A JSON Schema dictionary for the configuration.
        prefix: Prefix for environment variables.
        dotenv_path: Path to a .env file. If None, will try to find one in increasingly
            higher folders.

    Returns:
        A configuration dictionary.
    """
    result: dict[str, t.Any] = {}

    if not dotenv_path:
        dotenv_path = find_dotenv(usecwd=True)

    logger.debug("Loading configuration from %s", dotenv_path)
    DotEnv(dotenv_path).set_as_environment_variables()

    for config_key, schema in config_schema.get("properties", {}).items():
        env_var_name = prefix + config_key.upper().replace("-", "_")
        if env_var_name not in os.environ:
            continue

        env_var_value = os.environ[env_var_name]
        logger.info(
            "Parsing '%s' config from env variable '%s'.",
            config_key,
            env_var_name,
        )
        if schema.get("type") == "integer":
            try:
                result[config_key] = int(env_var_value)
            except ValueError:
                # Left as text so validation reports it.
                result[config_key] = env_var_value
        elif schema.get("type") == "boolean":
            result[config_key] = env_var_value.lower() in TRUTHY
        elif schema.get("enum"):
            result[config_key] = env_var_value.upper()
        else:
            result[config_key] = env_var_value
    return result


def merge_config_sources(
    inputs: t.Iterable[str],
    config_schema: dict[str, t.Any] = CONFIG_JSONSCHEMA,
    env_prefix: str = ENV_PREFIX,
) -> dict[str, t.Any]:
    """Merge configuration from multiple sources into a single dictionary.

    Later sources take precedence over earlier ones.

    Args:
        inputs: A sequence of configuration sources (file paths or ENV).
        config_schema: A JSON Schema dictionary for the configuration.
        env_prefix: Prefix for environment variables.

    Raises:
        FileNotFoundError: If any of config files does not exist.

    Returns:
        A single configuration dictionary.
    """
    config: dict[str, t.Any] = {}
    for config_input in inputs:
        if config_input == "ENV":
            env_config = parse_environment_config(config_schema, prefix=env_prefix)
            config.update(env_config)
            continue

        config_path = Path(config_input)

        if not config_path.is_file():
            msg = (
                f"Could not locate config file at '{config_path}'. Please check that "
                "the file exists."
            )
            raise FileNotFoundError(msg)

        config.update(_read_json_file(config_path))

    return config


def validate_config(
    config: t.Mapping[str, t.Any],
    config_schema: dict[str, t.Any] = CONFIG_JSONSCHEMA,
) -> dict[str, t.Any]:
    """Validate settings and fill in defaults.

    Args:
        config: A configuration dictionary.
        config_schema: A JSON Schema dictionary for the configuration.

    Returns:
        A copy of the configuration with defaults applied.

    Raises:
        ConfigValidationError: If validation fails.
    """
    validated = dict(config)
    validator = ConfigValidator(config_schema)
    errors = [_format_validation_error(e) for e in validator.iter_errors(validated)]
    if errors:
        summary = f"Config validation failed: {'; '.join(errors)}"
        raise ConfigValidationError(summary, errors=errors)
    return validated


def load_config(inputs: t.Iterable[str] = ()) -> dict[str, t.Any]:
    """Merge and validate settings from the given sources.

    Args:
        inputs: A sequence of configuration sources (file paths or ENV).

    Returns:
        A validated configuration dictionary with defaults applied.
    """
    return validate_config(merge_config_sources(inputs))
