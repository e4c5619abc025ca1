"""CLI entry point for esa-mirror (esa command)."""

import logging

import click

from esamirror import __version__
from esamirror.cli.migrate_cmd import migrate_cmd
from esamirror.cli.post_cmd import attach_cmd, create_cmd, fetch_cmd, push_cmd

_LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


@click.group()
@click.version_option(version=__version__, prog_name="esa-mirror")
@click.option("--verbose", "-v", count=True, help="Log more (-v info, -vv debug).")
def cli(verbose: int) -> None:
    """esa-mirror — local-first mirror for esa.io posts."""
    logging.basicConfig(
        level=_LOG_LEVELS[min(verbose, len(_LOG_LEVELS) - 1)],
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


cli.add_command(create_cmd)
cli.add_command(push_cmd)
cli.add_command(fetch_cmd)
cli.add_command(attach_cmd)
cli.add_command(migrate_cmd)


if __name__ == "__main__":
    cli()
