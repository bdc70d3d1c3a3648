"""
github_client.py

Responsibility: Isolate all direct GitHub interaction.

This module must be the only place that:
- Constructs GitHub URLs (tag tarballs and REST endpoints)
- Sends HTTP requests to github.com / api.github.com
- Interprets GitHub responses / error payloads

Everything else (formula rewriting, git commands, CLI behavior) should use this client.
"""

from __future__ import annotations

import hashlib
import logging
import re
from typing import Any

import requests

from tapbump.errors import TapbumpError

logger = logging.getLogger(__name__)

_SHA256_RE = re.compile(r"^[0-9a-f]{64}$")

_CHUNK_SIZE = 64 * 1024


class GitHubError(TapbumpError, RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def tarball_url(repo: str, tag: str) -> str:
    return f"https://github.com/{repo}/archive/refs/tags/{tag}.tar.gz"


def validate_sha256(value: str) -> str:
    """
    Return `value` lowercased if it is a 64-character hex digest; raise GitHubError otherwise.
    """
    digest = (value or "").strip().lower()
    if not _SHA256_RE.match(digest):
        raise GitHubError("Failed to get valid SHA256")
    return digest


class GitHubClient:
    def __init__(self, token: str | None = None, api_base: str = "https://api.github.com", timeout: float = 60) -> None:
        self._token = (token or "").strip() or None
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "tapbump",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _request(self, method: str, path: str) -> Any:
        url = f"{self._api_base}{path}"
        r = requests.request(method, url, headers=self._headers(), timeout=self._timeout)
        if r.status_code >= 400:
            try:
                payload = r.json()
            except ValueError:
                payload = {"message": r.text}
            raise GitHubError(
                f"GitHub API error {r.status_code} {method} {path}: {payload.get('message', payload)}",
                status_code=r.status_code,
            )
        if r.status_code == 204:
            return None
        return r.json()

    def tag_exists(self, repo: str, tag: str) -> bool:
        """
        Return True if `tag` is already published on GitHub for `repo`.
        """
        try:
            self._request("GET", f"/repos/{repo}/git/ref/tags/{tag}")
        except GitHubError as e:
            if e.status_code == 404:
                return False
            raise
        return True

    def tarball_sha256(self, url: str) -> str:
        """
        Download the tarball at `url` (following redirects) and return its SHA-256 hex digest.
        """
        logger.info("Fetching SHA256 from %s...", url)
        headers = {"User-Agent": "tapbump"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        digest = hashlib.sha256()
        size = 0
        try:
            with requests.get(url, headers=headers, stream=True, allow_redirects=True, timeout=self._timeout) as r:
                if r.status_code >= 400:
                    raise GitHubError(f"Tarball download failed: HTTP {r.status_code} {url}", status_code=r.status_code)
                for chunk in r.iter_content(chunk_size=_CHUNK_SIZE):
                    if chunk:
                        digest.update(chunk)
                        size += len(chunk)
        except requests.RequestException as e:
            raise GitHubError(f"Tarball download failed: {url}: {e}") from e

        if size == 0:
            raise GitHubError("Failed to get valid SHA256")
        logger.debug("Hashed %d bytes from %s", size, url)
        return validate_sha256(digest.hexdigest())
