"""Command line interface: run a JSONPath query against a JSON document."""

from __future__ import annotations

import logging
import sys
import typing as t

import click

from jsonpath_stream._logging import setup_console_logging
from jsonpath_stream.configuration import load_config
from jsonpath_stream.exceptions import (
    ConfigValidationError,
    JsonParseError,
    PathSyntaxError,
)
from jsonpath_stream.query import JsonPathQuery

logger = logging.getLogger(__name__)

PACKAGE_NAME = "jsonpath-stream"


class QueryCommand(click.Command):
    """Click command that logs captured warnings and config errors."""

    def invoke(self, ctx: click.Context) -> t.Any:  # noqa: ANN401
        """Invoke the command, capturing warnings and logging them.

        Args:
            ctx: The `click` context.

        Returns:
            The result of the command invocation.
        """
        logging.captureWarnings(capture=True)
        try:
            return super().invoke(ctx)
        except ConfigValidationError as exc:
            for error in exc.errors:
                logger.error("Config validation error: %s", error)  # noqa: TRY400
            sys.exit(1)


@click.command(
    name=PACKAGE_NAME,
    cls=QueryCommand,
    context_settings={"help_option_names": ["--help"]},
)
@click.version_option(package_name=PACKAGE_NAME, prog_name=PACKAGE_NAME)
@click.argument("expression")
@click.option(
    "--input",
    "file_input",
    help="A path to read the JSON document from instead of from standard in.",
    type=click.File("rb"),
)
@click.option(
    "--wrap/--no-wrap",
    default=None,
    help="Wrap a single match in a JSON array.",
)
@click.option(
    "--config",
    multiple=True,
    help="Configuration file location or 'ENV' to use environment variables.",
    type=click.STRING,
    default=(),
)
@click.option(
    "--log-level",
    type=click.Choice(
        ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        case_sensitive=False,
    ),
    default=None,
    help="Log level, overrides the configured one.",
)
def cli(
    expression: str,
    file_input: t.BinaryIO | None,
    wrap: bool | None,  # noqa: FBT001
    config: tuple[str, ...],
    log_level: str | None,
) -> None:
    """Print the values of a JSON document selected by a JSONPath EXPRESSION."""
    try:
        settings = load_config(config)
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc

    setup_console_logging(log_level=(log_level or settings["log_level"]).upper())

    runner = JsonPathQuery.from_config(settings)
    try:
        runner.compile(expression)
    except PathSyntaxError as exc:
        raise click.BadParameter(str(exc), param_hint="'EXPRESSION'") from exc

    document = (file_input or click.get_binary_stream("stdin")).read()
    try:
        matches = runner.read(document, expression)
    except JsonParseError as exc:
        raise click.ClickException(str(exc)) from exc

    logger.debug("Rendering %d matches", len(matches))
    click.echo(runner.render(matches, force_array_wrap=wrap))
