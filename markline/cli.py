"""
Converts a markline document to HTML or plain text.
The result is printed to stdout unless an output file is given.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from .config import RENDERER_NAMES, ConfigError, build_config
from .filesystem import write_output
from .log import get_logger
from .parser import ConvertFileError, convert_file

__all__ = ["cli"]

logger = get_logger(__name__)


class ClickEchoHandler(logging.Handler):
    """Logging handler writing records to stderr through `click.echo`."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def configure_logging(verbose: bool) -> None:
    """Route markline log records to stderr, at DEBUG level when `verbose`."""
    package_logger = get_logger("markline")
    if not any(isinstance(handler, ClickEchoHandler) for handler in package_logger.handlers):
        handler = ClickEchoHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@click.command()
@click.version_option(package_name="markline")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True),
    help="Write the result to this file instead of stdout",
)
@click.option("--format", "renderer", type=click.Choice(RENDERER_NAMES), help="Output format")
@click.option("--fence", "embedded_marker", help="Marker opening and closing embedded blocks")
@click.option("--keywords/--no-keywords", default=None, help="Render [...] and {...} keywords")
@click.option("-v", "--verbose", is_flag=True, help="Log parsing details to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    output: str | None = None,
    renderer: str | None = None,
    embedded_marker: str | None = None,
    keywords: bool | None = None,
    verbose: bool = False,
):
    """
    Entry point for converting a markline document.

    Args:
        filepath: Path to the document to convert.
        output: Optional destination file.
        renderer: Override for the output format (`html` or `text`).
        embedded_marker: Override for the embedded block fence.
        keywords: Override for keyword rendering.
        verbose: Emit debug logging on stderr.

    Returns:
        None.

    Raises:
        click.BadParameter: If an override or a configuration file holds an
            invalid value.
        click.ClickException: If the file cannot be read, exceeds a limit, or
            the output cannot be written.

    Examples:
        markline notes.md --format text -o notes.txt
    """
    configure_logging(verbose)

    path = Path(filepath).expanduser()
    try:
        config = build_config(
            path.resolve().parent,
            renderer=renderer,
            embedded_marker=embedded_marker,
            keywords=keywords,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        result = convert_file(path, config)
    except ConvertFileError as error:
        raise click.ClickException(str(error)) from error

    if output is None:
        click.echo(result)
        return

    try:
        write_output(Path(output), result)
    except IOError as error:
        raise click.ClickException(str(error)) from error
    logger.debug("Wrote %d characters to %s", len(result), output)


if __name__ == "__main__":
    cli()
