"""CLI post commands: esa create, push, fetch, attach."""

from __future__ import annotations

from pathlib import Path

import click

from esamirror.core.config import load_settings, resolve_home
from esamirror.core.errors import EsaMirrorError
from esamirror.core.post import Post

_home_option = click.option(
    "--home",
    type=click.Path(path_type=Path),
    default=None,
    help="Mirror root directory (default: ESA_HOME or current directory).",
)


def _engine(home: Path):
    """Build a SyncEngine with settings resolved once for this invocation."""
    from esamirror.sync.engine import SyncEngine
    from esamirror.sync.gateway import EsaGateway

    settings = load_settings(home)
    return SyncEngine(home, EsaGateway(settings), settings.user)


@click.command("create")
@click.argument("post_name")
@_home_option
def create_cmd(post_name: str, home: Path | None) -> None:
    """Create a new local post file POST_NAME (category/.../name).

    The post starts as WIP with no tags and no remote number.
    """
    home_path = home or resolve_home()
    try:
        post = Post.new(post_name, home_path)
        path = post.save()
    except EsaMirrorError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"ok: {post.name} to {path}")


@click.command("push")
@click.argument("post_name")
@_home_option
def push_cmd(post_name: str, home: Path | None) -> None:
    """Push a local post to esa.io.

    Creates the remote post on first push, updates it afterwards.
    """
    home_path = home or resolve_home()
    try:
        result = _engine(home_path).push(post_name)
    except EsaMirrorError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"ok: {result.name} to {result.url}")


@click.command("fetch")
@click.option("--name", "post_name", default=None, help="Fetch posts matching category/.../name.")
@click.option("--number", "post_number", type=click.IntRange(min=0), default=None,
              help="Fetch a single post by number.")
@_home_option
def fetch_cmd(post_name: str | None, post_number: int | None, home: Path | None) -> None:
    """Fetch posts from esa.io into local files.

    Without options, fetches every post by the configured user.
    Local files are overwritten with the remote content.
    """
    from esamirror.sync.engine import AllPosts, ByName, ByNumber

    if post_name is not None and post_number is not None:
        raise click.UsageError("--name and --number are mutually exclusive.")

    if post_name is not None:
        selector = ByName(post_name)
    elif post_number is not None:
        selector = ByNumber(post_number)
    else:
        selector = AllPosts()

    home_path = home or resolve_home()
    try:
        result = _engine(home_path).fetch(selector)
    except EsaMirrorError as e:
        raise click.ClickException(str(e)) from e

    for fetched in result.saved:
        click.echo(f"ok: {fetched.url} to {fetched.path}")
    for label in result.skipped:
        click.echo(f"skipped: {label} (no category)")


@click.command("attach")
@click.argument("file", type=click.Path(path_type=Path))
@_home_option
def attach_cmd(file: Path, home: Path | None) -> None:
    """Upload FILE as an esa.io attachment and print its URL."""
    home_path = home or resolve_home()
    try:
        result = _engine(home_path).attach(file)
    except EsaMirrorError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"ok: {file} to {result.url}")
