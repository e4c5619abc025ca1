"""CLI command for converting legacy body.md + settings.json posts."""

from __future__ import annotations

from pathlib import Path

import click

from esamirror.core.config import resolve_home
from esamirror.core.errors import EsaMirrorError
from esamirror.core.migrate import migrate


@click.command("migrate")
@click.option("--remove", is_flag=True, help="Delete legacy files after conversion; emptied directories are removed.")
@click.option(
    "--home",
    type=click.Path(path_type=Path),
    default=None,
    help="Mirror root directory (default: ESA_HOME or current directory).",
)
def migrate_cmd(remove: bool, home: Path | None) -> None:
    """Convert legacy post directories into single .md documents."""
    home_path = home or resolve_home()
    try:
        result = migrate(home_path, remove=remove)
    except EsaMirrorError as e:
        raise click.ClickException(str(e)) from e

    for legacy_dir, path in result.migrated:
        click.echo(f"ok: {legacy_dir} to {path}")
    for legacy_dir, reason in result.skipped:
        click.echo(f"skipped: {legacy_dir} ({reason})")
    if not result.migrated and not result.skipped:
        click.echo("No legacy posts found.")
