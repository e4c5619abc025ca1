"""Hierarchical post names: category segments plus a filename.

A name like ``infra/db/runbook`` maps to the file ``<home>/infra/db/runbook.md``
and to the remote pair ``category="infra/db"``, ``name="runbook"``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePath, PureWindowsPath

from esamirror.core.errors import NameInvalidError

POST_SUFFIX = ".md"

_SPECIAL_SEGMENTS = {"", ".", ".."}


def split_segments(name: str | PurePath) -> list[str]:
    """Split a name on both separator styles without normalizing it.

    A PurePath is taken as pathlib normalized it: pathlib drops `.` parts
    and repeated separators when the path is built, so `PurePosixPath("a/./b")`
    names `a/b` while the string `"a/./b"` is invalid. `..` parts survive
    and are rejected either way.
    """
    return str(name).replace("\\", "/").split("/")


def validate(name: str | PurePath) -> None:
    """Raise NameInvalidError unless *name* has >= 2 literal segments.

    Empty, ``.``, ``..`` and root/drive segments are all rejected, so
    absolute paths and paths that escape the mirror root never pass.
    """
    segments = split_segments(name)
    if len(segments) < 2:
        raise NameInvalidError(str(name))
    for segment in segments:
        if segment in _SPECIAL_SEGMENTS or PureWindowsPath(segment).drive:
            raise NameInvalidError(str(name))


def is_valid(name: str | PurePath) -> bool:
    try:
        validate(name)
    except NameInvalidError:
        return False
    return True


@dataclass(frozen=True)
class PostName:
    """A validated post name."""

    segments: tuple[str, ...]

    @classmethod
    def parse(cls, name: str | PurePath | PostName) -> PostName:
        """Build a PostName, dropping a trailing ``.md`` from the filename."""
        if isinstance(name, PostName):
            return name
        text = str(name)
        if text.endswith(POST_SUFFIX):
            text = text[: -len(POST_SUFFIX)]
        validate(text)
        return cls(tuple(split_segments(text)))

    @classmethod
    def from_remote(cls, category: str, filename: str) -> PostName:
        """Build a PostName from a remote record, keeping the name verbatim."""
        text = f"{category}/{filename}"
        validate(text)
        return cls(tuple(split_segments(text)))

    @property
    def category(self) -> str:
        return "/".join(self.segments[:-1])

    @property
    def filename(self) -> str:
        return self.segments[-1]

    def to_path(self, home: Path) -> Path:
        """Return the on-disk document path under *home*."""
        *dirs, filename = self.segments
        return home.joinpath(*dirs, filename + POST_SUFFIX)

    def __str__(self) -> str:
        return "/".join(self.segments)
