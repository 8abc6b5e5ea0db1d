"""Page-number cursor walker over list endpoints."""

from __future__ import annotations

import logging
from typing import Any, Optional

from repolens.services.github_client import GitHubAPIError, GitHubClient

logger = logging.getLogger(__name__)


async def fetch_paginated(
    client: GitHubClient,
    path: str,
    *,
    per_page: int = 100,
    max_items: Optional[int] = None,
    optional: bool = False,
    params: Optional[dict[str, Any]] = None,
) -> list[Any]:
    """Fetch pages 1, 2, ... until a short page or ``max_items`` is reached.

    Items keep server order. In required mode any page failure propagates. In
    optional mode a failure ends pagination and what was accumulated is returned.
    """
    out: list[Any] = []
    page = 1
    while max_items is None or len(out) < max_items:
        query = dict(params or {})
        query.update({"page": page, "per_page": per_page})
        try:
            data = await client.get_json(path, params=query)
        except GitHubAPIError as exc:
            if not optional:
                raise
            logger.warning("pagination stopped path=%s page=%s items=%s error=%s", path, page, len(out), exc)
            break
        if not isinstance(data, list) or not data:
            break
        out.extend(data)
        if len(data) < per_page:
            break
        page += 1
    if max_items is not None:
        return out[:max_items]
    return out
