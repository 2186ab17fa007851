"""Command-line entry point: ``dtc [DATETIME] [TIMEZONE]``."""

from __future__ import annotations

import logging
import sys

import click

from . import __version__
from .converter import convert
from .settings import get_settings
from .timezone_utils import DEFAULT_FORMAT, DEFAULT_TIMEZONE

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("datetime_string", metavar="[DATETIME]", required=False, default="")
@click.argument("target_timezone", metavar="[TIMEZONE]", required=False, default=DEFAULT_TIMEZONE)
@click.option(
    "-f",
    "--format",
    "output_format",
    default=DEFAULT_FORMAT,
    show_default=True,
    help="strftime pattern for the date and time; the timezone name is always appended.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log each parsing step to stderr.")
@click.version_option(__version__, prog_name="dtc")
def main(datetime_string: str, target_timezone: str, output_format: str, verbose: bool) -> None:
    """Convert DATETIME to TIMEZONE (default UTC).

    DATETIME defaults to now and is read as UTC unless it names a timezone,
    e.g. "2023-10-01 11:20:00 cest" or "11:20 Europe/Berlin". Put negative
    offsets after "--", e.g. dtc -- "09:00" -05:00.
    """

    configure_logging(verbose)

    try:
        settings = get_settings(target_timezone=target_timezone, output_format=output_format, verbose=verbose)
        result = convert(datetime_string, settings)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    click.echo(result.rendered)


if __name__ == "__main__":  # pragma: no cover
    main()
