"""Async GitHub API client used to download repository licenses."""

from __future__ import annotations

import base64
import binascii
from typing import Any

import httpx
import structlog

from licenseplist.exceptions import FetchError
from licenseplist.models import LibraryDescriptor

log = structlog.get_logger("licenseplist.fetcher")

_API_BASE_URL = "https://api.github.com"
_DEFAULT_TIMEOUT = 30.0


class GitHubClient:
    """Thin async wrapper around the GitHub REST API.

    The token, when given, is attached to every request; without it the
    client still works against the anonymous rate limit.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"token {token}"
        self._client = httpx.AsyncClient(
            base_url=_API_BASE_URL,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def get_json(self, path: str) -> dict[str, Any] | None:
        """GET *path* and return its JSON object, or None on 404.

        Other non-2xx responses raise :class:`httpx.HTTPStatusError`.
        """
        resp = await self._client.get(path)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        data = resp.json()
        return data if isinstance(data, dict) else None

    async def get_license(self, owner: str, repo: str) -> dict[str, Any] | None:
        return await self.get_json(f"/repos/{owner}/{repo}/license")

    async def get_repository(self, owner: str, repo: str) -> dict[str, Any] | None:
        return await self.get_json(f"/repos/{owner}/{repo}")


def decode_license_content(payload: dict[str, Any]) -> str:
    """Decode the ``content`` field of a ``/license`` response."""
    content = payload.get("content")
    if not isinstance(content, str):
        raise ValueError("response has no content")
    if payload.get("encoding", "base64") != "base64":
        return content
    try:
        return base64.b64decode(content).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ValueError(f"undecodable content: {exc}") from exc


class GitHubLicenseSource:
    """License capability backed by the GitHub ``/license`` endpoint.

    When a repository has no detectable license and is a fork, the parent
    repository is tried once.
    """

    def __init__(self, client: GitHubClient) -> None:
        self._client = client

    async def fetch_license(self, descriptor: LibraryDescriptor) -> str:
        ref = descriptor.remote_ref
        if ref is None:
            raise FetchError(descriptor.display_name, "no GitHub repository")
        owner, repo = ref

        payload = await self._client.get_license(owner, repo)
        if payload is None:
            parent = await self._fork_parent(owner, repo)
            if parent is not None:
                log.debug(
                    "fetcher.try_parent",
                    library=descriptor.display_name,
                    parent="/".join(parent),
                )
                payload = await self._client.get_license(*parent)
        if payload is None:
            raise FetchError(descriptor.display_name, f"no license found in {owner}/{repo}")

        try:
            return decode_license_content(payload)
        except ValueError as exc:
            raise FetchError(descriptor.display_name, str(exc)) from exc

    async def _fork_parent(self, owner: str, repo: str) -> tuple[str, str] | None:
        info = await self._client.get_repository(owner, repo)
        if not info or not info.get("fork"):
            return None
        parent = info.get("parent") or {}
        parent_owner = (parent.get("owner") or {}).get("login")
        parent_name = parent.get("name")
        if parent_owner and parent_name:
            return parent_owner, parent_name
        return None
