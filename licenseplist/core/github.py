"""GitHub URL utilities."""

from __future__ import annotations

import re

_GITHUB_URL_RE = re.compile(
    r"(?:https?://|ssh://git@|git@)?(?:www\.)?github\.com[/:]([^/\s]+)/([^/#?\s]+)",
)


def parse_github_url(url: str) -> tuple[str, str] | None:
    """Extract (owner, repo) from various GitHub URL formats.

    Handles:
      - https://github.com/owner/repo
      - https://github.com/owner/repo.git
      - git@github.com:owner/repo.git
      - ssh://git@github.com/owner/repo

    Returns None for URLs that are not hosted on GitHub.
    """
    m = _GITHUB_URL_RE.search(url.strip().rstrip("/"))
    if not m:
        return None
    owner = m.group(1)
    repo = m.group(2).removesuffix(".git")
    if not owner or not repo:
        return None
    return owner, repo


def split_owner_repo(spec: str) -> tuple[str, str] | None:
    """Split an ``owner/repo`` shorthand. Returns None when malformed."""
    parts = spec.strip().split("/")
    if len(parts) == 2 and all(parts):
        return parts[0], parts[1].removesuffix(".git")
    return None


def repo_html_url(owner: str, repo: str) -> str:
    return f"https://github.com/{owner}/{repo}"
