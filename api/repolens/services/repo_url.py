"""Parse GitHub repository references into (owner, repo)."""

from __future__ import annotations

import re
from typing import Optional

_FULL_RE = re.compile(r"^(?:https?://)?(?:www\.)?github\.com/([A-Za-z0-9_.-]+)/([A-Za-z0-9_.-]+)/?$", re.IGNORECASE)
_SHORT_RE = re.compile(r"^([A-Za-z0-9_.-]+)/([A-Za-z0-9_.-]+)$")


def parse_repo_url(url: Optional[str]) -> Optional[tuple[str, str]]:
    """Accepts https://github.com/o/r(.git), github.com/o/r and o/r. Returns None otherwise."""
    if not url or not isinstance(url, str):
        return None
    u = url.strip().rstrip("/")
    if u.lower().endswith(".git"):
        u = u[:-4]
    m = _FULL_RE.match(u) or _SHORT_RE.match(u)
    if not m:
        return None
    return (m.group(1), m.group(2))


def build_repo_url(owner: str, repo: str) -> str:
    return f"https://github.com/{owner}/{repo}"
