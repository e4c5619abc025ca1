"""esa.io API gateway.

Each call is one blocking request/response round trip. Nothing is retried:
any failure surfaces as TransportError (API calls) or UploadFailedError
(the direct attachment upload).
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import httpx

from esamirror.core.config import EsaSettings
from esamirror.core.errors import TransportError, UploadFailedError

log = logging.getLogger(__name__)


@runtime_checkable
class RemoteGateway(Protocol):
    """Contract for the remote post store."""

    def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Create a post. The response carries the assigned ``number`` and ``url``."""
        ...

    def update(self, number: int, payload: dict[str, Any]) -> dict[str, Any]:
        """Update post *number* and return the updated record."""
        ...

    def search(self, query: str) -> dict[str, Any]:
        """Run a search query. Returns ``{"posts": [record, ...], ...}``."""
        ...

    def get(self, number: int) -> dict[str, Any]:
        """Fetch a single post record by number."""
        ...

    def get_upload_policy(self, file_meta: dict[str, Any]) -> dict[str, Any]:
        """Request a pre-signed upload policy for an attachment."""
        ...

    def upload(self, path: Path, policy: dict[str, Any]) -> httpx.Response:
        """Upload *path* directly to the policy's endpoint."""
        ...


def attachment_meta(path: Path) -> dict[str, Any]:
    """Describe a local file for an upload policy request."""
    try:
        size = path.stat().st_size
    except OSError as e:
        raise UploadFailedError(f"cannot read attachment {path}: {e}") from e
    content_type, _ = mimetypes.guess_type(path.name)
    return {
        "type": content_type or "application/octet-stream",
        "size": size,
        "name": path.name,
    }


class EsaGateway:
    """RemoteGateway backed by the esa.io v1 REST API."""

    def __init__(self, settings: EsaSettings) -> None:
        self._settings = settings
        self._base_url = f"{settings.endpoint}/v1/teams/{settings.team}"

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._settings.api_key}",
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        path: str,
        json: dict | None = None,
        params: dict | None = None,
    ) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        log.debug("%s %s params=%s", method.upper(), url, params)
        send = getattr(httpx, method)
        kwargs: dict[str, Any] = {
            "headers": self._headers,
            "timeout": self._settings.timeout,
        }
        if json is not None:
            kwargs["json"] = json
        if params is not None:
            kwargs["params"] = params

        try:
            resp = send(url, **kwargs)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise TransportError(
                f"esa.io API error ({status}) on {method.upper()} {url}: {e}",
                status_code=status,
            ) from e
        except (httpx.HTTPError, OSError) as e:
            raise TransportError(f"esa.io API unreachable ({method.upper()} {url}): {e}") from e
        except ValueError as e:
            raise TransportError(f"esa.io API returned invalid JSON ({method.upper()} {url}): {e}") from e

    def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("post", "/posts", json={"post": payload})

    def update(self, number: int, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("patch", f"/posts/{number}", json={"post": payload})

    def search(self, query: str) -> dict[str, Any]:
        return self._request(
            "get", "/posts", params={"q": query, "per_page": self._settings.per_page}
        )

    def get(self, number: int) -> dict[str, Any]:
        return self._request("get", f"/posts/{number}")

    def get_upload_policy(self, file_meta: dict[str, Any]) -> dict[str, Any]:
        return self._request("post", "/attachments/policies", json=file_meta)

    def upload(self, path: Path, policy: dict[str, Any]) -> httpx.Response:
        try:
            endpoint = policy["attachment"]["endpoint"]
            form = {k: str(v) for k, v in policy["form"].items()}
        except (KeyError, TypeError, AttributeError) as e:
            raise UploadFailedError(f"upload policy is malformed: {e}") from e

        content_type = form.get("Content-Type", "application/octet-stream")
        log.info("Uploading %s to %s", path.name, endpoint)
        try:
            with open(path, "rb") as f:
                resp = httpx.post(
                    endpoint,
                    data=form,
                    files={"file": (path.name, f, content_type)},
                    timeout=self._settings.timeout,
                )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UploadFailedError(
                f"upload rejected ({e.response.status_code}): {e.response.text}"
            ) from e
        except (httpx.HTTPError, OSError) as e:
            raise UploadFailedError(f"upload of {path} failed: {e}") from e
        return resp
