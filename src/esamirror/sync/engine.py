"""SyncEngine — reconciles local post files with esa.io.

Push decides create vs. update from the locally cached post number:
  - number absent  → create, then store the assigned number
  - number present → update that post

Fetch materializes remote records into local files, unconditionally
overwriting whatever is on disk. Bulk fetch is not atomic: a failure
mid-iteration keeps the files already written and aborts the rest.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from esamirror.core.errors import TransportError
from esamirror.core.models import AttachResult, FetchedPost, FetchResult, PushResult
from esamirror.core.names import PostName
from esamirror.core.post import NameLike, Post
from esamirror.sync.gateway import RemoteGateway, attachment_meta

log = logging.getLogger(__name__)


# --- Fetch selectors ---


@dataclass(frozen=True)
class ByName:
    """Posts by the current user matching a category/name."""

    name: NameLike


@dataclass(frozen=True)
class ByNumber:
    """A single post by its server number."""

    number: int


@dataclass(frozen=True)
class AllPosts:
    """Every post by the current user."""


FetchSelector = Union[ByName, ByNumber, AllPosts]


class SyncEngine:
    """Orchestrate push/fetch/attach between a mirror root and a RemoteGateway."""

    def __init__(self, home: Path, gateway: RemoteGateway, user: str) -> None:
        self.home = home
        self.gateway = gateway
        self.user = user

    def push(self, name: NameLike) -> PushResult:
        """Send a local post to esa.io and record the returned number."""
        post = Post.load(name, self.home)
        payload = post.to_remote_payload()

        if post.number is None:
            log.info("Creating remote post for %s", post.name)
            response = self.gateway.create(payload)
            if response.get("number") is None:
                raise TransportError(f"create response for {post.name} has no post number")
            created = True
        else:
            log.info("Updating remote post #%d for %s", post.number, post.name)
            response = self.gateway.update(post.number, payload)
            created = False

        post.assign_number(response.get("number"))
        post.save()

        return PushResult(
            name=str(post.name),
            number=post.number,
            url=response.get("url", ""),
            created=created,
        )

    def fetch(self, selector: FetchSelector) -> FetchResult:
        """Fetch remote posts matching *selector* and write them locally."""
        if isinstance(selector, ByNumber):
            records = [self.gateway.get(selector.number)]
        elif isinstance(selector, ByName):
            records = self._search(self.name_query(selector.name))
        elif isinstance(selector, AllPosts):
            records = self._search(self.user_query())
        else:
            raise TypeError(f"Unknown fetch selector: {selector!r}")

        result = FetchResult()
        for record in records:
            if record.get("category") is None:
                label = record.get("url") or record.get("name", "?")
                log.warning("Skipping uncategorized post %s", label)
                result.skipped.append(str(label))
                continue
            result.saved.append(self._save_record(record))
        return result

    def attach(self, path: Path) -> AttachResult:
        """Upload a file as an attachment via a pre-signed policy."""
        file_meta = attachment_meta(path)
        policy = self.gateway.get_upload_policy(file_meta)
        response = self.gateway.upload(path, policy)

        attachment = policy.get("attachment") or {}
        url = attachment.get("url") or attachment.get("endpoint", "")
        return AttachResult(
            path=path,
            url=url,
            status_code=response.status_code,
            response=response,
        )

    # --- Queries ---

    def user_query(self) -> str:
        return f"user:{self.user}"

    def name_query(self, name: NameLike) -> str:
        post_name = PostName.parse(name)
        terms = [
            self.user_query(),
            f"category:{post_name.category}",
            f"name:{post_name.filename}",
        ]
        return " ".join(terms)

    # --- Internal ---

    def _search(self, query: str) -> list[dict[str, Any]]:
        log.info("Searching esa.io: %s", query)
        response = self.gateway.search(query)
        posts = response.get("posts")
        if not isinstance(posts, list):
            raise TransportError(f"search response has no post list (q={query!r})")
        return posts

    def _save_record(self, record: dict[str, Any]) -> FetchedPost:
        name = PostName.from_remote(record["category"], record.get("name", ""))
        post = Post.from_remote(name, record, self.home)
        path = post.save()
        return FetchedPost(name=str(name), path=path, url=record.get("url", ""))
