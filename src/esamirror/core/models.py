"""Core data models for esa-mirror."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from esamirror.core.errors import MetaInvalidError

MAX_POST_NUMBER = 2**64 - 1


@dataclass
class Meta:
    """Post metadata stored in the document frontmatter.

    ``number`` is the server-assigned post number; None means the post
    has never been pushed.
    """

    tags: list[str] = field(default_factory=list)
    wip: bool = True
    number: int | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Meta):
            return NotImplemented
        # Tags behave as a set.
        return (
            sorted(self.tags) == sorted(other.tags)
            and self.wip == other.wip
            and self.number == other.number
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Meta:
        """Validate and build Meta from a parsed frontmatter or remote record."""
        if "tags" not in data:
            raise MetaInvalidError("missing field `tags`")
        if "wip" not in data:
            raise MetaInvalidError("missing field `wip`")

        tags = data["tags"]
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise MetaInvalidError(f"`tags` must be a list of strings, got {tags!r}")

        wip = data["wip"]
        if not isinstance(wip, bool):
            raise MetaInvalidError(f"`wip` must be a boolean, got {wip!r}")

        number = data.get("number")
        if number is not None:
            if isinstance(number, bool) or not isinstance(number, int):
                raise MetaInvalidError(f"`number` must be an integer, got {number!r}")
            if not 0 <= number <= MAX_POST_NUMBER:
                raise MetaInvalidError(f"`number` out of range: {number}")

        return cls(tags=list(tags), wip=wip, number=number)

    def to_dict(self) -> dict[str, Any]:
        """Frontmatter fields in canonical order; number omitted when unset."""
        data: dict[str, Any] = {"tags": list(self.tags), "wip": self.wip}
        if self.number is not None:
            data["number"] = self.number
        return data


# --- Sync results ---


@dataclass
class PushResult:
    """Outcome of pushing one post."""

    name: str
    number: int
    url: str
    created: bool


@dataclass
class FetchedPost:
    """A remote record written to a local file."""

    name: str
    path: Path
    url: str = ""


@dataclass
class FetchResult:
    """Outcome of a fetch. ``skipped`` lists records with no category."""

    saved: list[FetchedPost] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


@dataclass
class AttachResult:
    """Outcome of an attachment upload; ``response`` is the raw upload response."""

    path: Path
    url: str
    status_code: int
    response: Any = None


@dataclass
class MigrationResult:
    """Outcome of migrating legacy sidecar posts: (legacy dir, new document) pairs."""

    migrated: list[tuple[Path, Path]] = field(default_factory=list)
    skipped: list[tuple[Path, str]] = field(default_factory=list)
