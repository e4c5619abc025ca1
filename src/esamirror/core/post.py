"""Post entity: a named document on disk mirrored to an esa.io post."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path, PurePath
from typing import Any

from esamirror.core import codec
from esamirror.core.errors import AlreadyExistsError, NotExistsError, PostWriteError
from esamirror.core.fileutil import atomic_write
from esamirror.core.models import Meta
from esamirror.core.names import PostName

log = logging.getLogger(__name__)

NameLike = str | PurePath | PostName


class Post:
    """A post's name, metadata and body, bound to a mirror root directory.

    ``body`` is None until loaded or assigned; it is written as empty text.
    """

    def __init__(
        self,
        name: PostName,
        home: Path,
        meta: Meta | None = None,
        body: str | None = None,
    ) -> None:
        self.name = name
        self.home = home
        self.meta = meta if meta is not None else Meta()
        self.body = body

    def __repr__(self) -> str:
        return f"Post(name={str(self.name)!r}, number={self.number!r})"

    @property
    def path(self) -> Path:
        return self.name.to_path(self.home)

    @property
    def number(self) -> int | None:
        return self.meta.number

    def assign_number(self, number: int | None) -> None:
        """Record the server number; a missing number keeps the current one."""
        if number is not None:
            self.meta.number = number

    # --- Construction ---

    @classmethod
    def new(cls, name: NameLike, home: Path) -> Post:
        """Create an unsynced post; fails if its file already exists."""
        post_name = PostName.parse(name)
        path = post_name.to_path(home)
        if path.exists():
            raise AlreadyExistsError(path)
        return cls(post_name, home)

    @classmethod
    def load(cls, name: NameLike, home: Path) -> Post:
        """Read and decode the post file for *name*."""
        post_name = PostName.parse(name)
        path = post_name.to_path(home)
        if not path.is_file():
            raise NotExistsError(path)
        with open(path, encoding="utf-8", newline="") as f:
            text = f.read()
        meta, body = codec.decode(text)
        return cls(post_name, home, meta=meta, body=body)

    @classmethod
    def from_remote(cls, name: NameLike, record: Mapping[str, Any], home: Path) -> Post:
        """Map a remote record's body_md/tags/wip/number onto a Post."""
        meta = Meta.from_mapping(
            {
                "tags": record.get("tags") or [],
                "wip": record.get("wip", False),
                "number": record.get("number"),
            }
        )
        return cls(PostName.parse(name), home, meta=meta, body=record.get("body_md"))

    # --- Persistence ---

    def save(self) -> Path:
        """Encode and write the post, replacing any existing file."""
        path = self.path
        try:
            atomic_write(path, codec.encode(self.meta, self.body))
        except OSError as e:
            raise PostWriteError(f"failed to write {path}: {e}") from e
        log.info("Saved %s (number=%s)", path, self.number)
        return path

    def to_remote_payload(self) -> dict[str, Any]:
        """Fields sent on create/update. The number travels in the URL, not here."""
        return {
            "category": self.name.category,
            "name": self.name.filename,
            "body_md": self.body or "",
            "tags": list(self.meta.tags),
            "wip": self.meta.wip,
        }
