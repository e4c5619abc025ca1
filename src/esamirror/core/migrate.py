"""One-time migration from the legacy sidecar layout.

Older mirrors stored each post as a directory::

    <category>/.../<name>/body.md
    <category>/.../<name>/settings.json   {"tags": [...], "wip": bool, "number": int|null}

This module rewrites them as single ``<category>/.../<name>.md`` documents.
Existing documents are never overwritten.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from esamirror.core.errors import EsaMirrorError, MetaInvalidError
from esamirror.core.models import Meta, MigrationResult
from esamirror.core.names import PostName
from esamirror.core.post import Post

log = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"
BODY_FILE = "body.md"


def find_legacy_posts(home: Path) -> list[Path]:
    """Return legacy post directories (those holding settings.json) under *home*."""
    found: list[Path] = []
    if not home.exists():
        return found
    for settings in sorted(home.rglob(SETTINGS_FILE)):
        rel = settings.relative_to(home)
        if any(part.startswith(".") for part in rel.parts):
            continue
        found.append(settings.parent)
    return found


def read_legacy_post(post_dir: Path, home: Path) -> Post:
    """Build a Post from a legacy directory."""
    name = PostName.parse(post_dir.relative_to(home).as_posix())
    try:
        data = json.loads((post_dir / SETTINGS_FILE).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise MetaInvalidError(f"{post_dir / SETTINGS_FILE}: {e}") from e
    if not isinstance(data, dict):
        raise MetaInvalidError(f"{post_dir / SETTINGS_FILE}: expected a JSON object")

    body_path = post_dir / BODY_FILE
    body = body_path.read_text(encoding="utf-8") if body_path.exists() else None
    return Post(name, home, meta=Meta.from_mapping(data), body=body)


def migrate(home: Path, remove: bool = False) -> MigrationResult:
    """Convert every legacy post under *home* to the document format.

    Args:
        home: Mirror root.
        remove: Delete the legacy files of each converted post once every
            post has been converted. A directory is removed only if it is
            then empty, so nested legacy posts and new documents survive.

    Returns:
        Migrated document paths and skipped directories with reasons.
    """
    result = MigrationResult()
    for post_dir in find_legacy_posts(home):
        try:
            post = read_legacy_post(post_dir, home)
        except (EsaMirrorError, OSError) as e:
            log.warning("Cannot migrate %s: %s", post_dir, e)
            result.skipped.append((post_dir, str(e)))
            continue

        if post.path.exists():
            log.warning("Not migrating %s: %s already exists", post_dir, post.path)
            result.skipped.append((post_dir, f"{post.path} already exists"))
            continue

        post.save()
        result.migrated.append((post_dir, post.path))
        log.info("Migrated %s -> %s", post_dir, post.path)

    if remove:
        _remove_legacy([post_dir for post_dir, _ in result.migrated])
    return result


def _remove_legacy(post_dirs: list[Path]) -> None:
    # Deepest first, so a parent can be removed once its children are gone.
    for post_dir in sorted(post_dirs, key=lambda p: len(p.parts), reverse=True):
        for filename in (SETTINGS_FILE, BODY_FILE):
            (post_dir / filename).unlink(missing_ok=True)
        if not any(post_dir.iterdir()):
            post_dir.rmdir()
        else:
            log.info("Kept %s: directory is not empty", post_dir)
