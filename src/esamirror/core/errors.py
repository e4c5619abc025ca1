"""Error types for esa-mirror.

Every error is terminal for the operation that raised it; nothing is retried.
"""

from __future__ import annotations


class EsaMirrorError(Exception):
    """Base error for all esa-mirror operations."""


class ConfigError(EsaMirrorError):
    """Required configuration (team, user, API key) is missing."""


class NameInvalidError(EsaMirrorError):
    """Post name is not of the form category/[...]/filename."""

    def __init__(self, name: str) -> None:
        super().__init__(f"invalid post name '{name}': must be ([category/]+)filename")
        self.name = name


class AlreadyExistsError(EsaMirrorError):
    """A post file already exists where a new one would be created."""

    def __init__(self, path: object) -> None:
        super().__init__(f"'{path}' already exists")
        self.path = path


class NotExistsError(EsaMirrorError):
    """The post file does not exist."""

    def __init__(self, path: object) -> None:
        super().__init__(f"'{path}' does not exist")
        self.path = path


class FormatInvalidError(EsaMirrorError):
    """Document is missing its +++ delimited metadata block."""


class MetaInvalidError(EsaMirrorError):
    """Metadata block could not be parsed or has missing/malformed fields."""


class PostWriteError(EsaMirrorError):
    """Failed to write a post file or its parent directories."""


class TransportError(EsaMirrorError):
    """A request to the remote service failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UploadFailedError(EsaMirrorError):
    """Attachment upload failed."""
