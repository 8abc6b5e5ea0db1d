"""Async GitHub REST client for repository activity analysis.

REST wrapper with:
- optional token auth (caller-supplied, else GITHUB_TOKEN / GH_TOKEN)
- per-request timeout, no automatic retry
- rate-limit observation (warn when the quota is exhausted)
"""

from __future__ import annotations

import base64
import binascii
import logging
import os
import time
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class GitHubAPIError(RuntimeError):
    """Upstream failure. ``status_code`` is None for transport errors and timeouts."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, url: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code in (403, 429)


class GitHubClient:
    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = "https://api.github.com",
        user_agent: str = "repo-activity-lens/1.0",
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        env_token = os.getenv("GITHUB_TOKEN")
        if not env_token:
            env_token = os.getenv("GH_TOKEN")
        if env_token:
            env_token = env_token.strip() or None
        self._token = token or env_token
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": user_agent,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            self._headers["Authorization"] = f"Bearer {self._token}"
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            timeout=timeout,
            transport=transport,
        )
        self.rate_limit_remaining: Optional[int] = None

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    def _observe_rate_limit(self, r: httpx.Response) -> None:
        remaining = r.headers.get("X-RateLimit-Remaining")
        reset = r.headers.get("X-RateLimit-Reset")
        try:
            rem_i = int(remaining) if remaining is not None else None
            reset_i = int(reset) if reset is not None else None
        except ValueError:
            rem_i, reset_i = None, None

        if rem_i is None:
            return
        self.rate_limit_remaining = rem_i
        if rem_i == 0:
            wait_s = max(0, (reset_i or 0) - int(time.time()))
            logger.warning("github rate limit exhausted; resets in %ss", wait_s)

    async def get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        """GET JSON for a path or full URL. Raises GitHubAPIError on any failure."""
        url = path if path.startswith("http") else f"{self._base_url}{path}"
        try:
            r = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise GitHubAPIError(f"GitHub request failed for {url}: {exc}", url=url) from exc

        self._observe_rate_limit(r)
        if r.status_code >= 400:
            raise GitHubAPIError(
                f"GitHub API error {r.status_code} for {url}: {r.text[:200]}",
                status_code=r.status_code,
                url=url,
            )
        try:
            return r.json()
        except ValueError as exc:
            raise GitHubAPIError(
                f"GitHub API returned non-JSON body for {url}",
                status_code=r.status_code,
                url=url,
            ) from exc

    async def get_repo(self, owner: str, repo: str) -> dict:
        return await self.get_json(f"/repos/{owner}/{repo}")

    async def get_readme(self, owner: str, repo: str, max_chars: int = 800) -> str:
        """README text truncated to ``max_chars``. Raises GitHubAPIError when unavailable."""
        data = await self.get_json(f"/repos/{owner}/{repo}/readme")
        if not isinstance(data, dict):
            return ""
        return decode_readme_content(data, max_chars)

    async def get_commit(self, owner: str, repo: str, sha: str) -> dict:
        return await self.get_json(f"/repos/{owner}/{repo}/commits/{sha}")


def decode_readme_content(payload: dict, max_chars: int = 800) -> str:
    content = payload.get("content") or ""
    if not content:
        return ""
    if (payload.get("encoding") or "base64").lower() == "base64":
        try:
            text = base64.b64decode(content).decode("utf-8", errors="replace")
        except (binascii.Error, ValueError):
            logger.warning("readme content was not valid base64; using raw text")
            text = content
    else:
        text = content
    return text[:max_chars]
