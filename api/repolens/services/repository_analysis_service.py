"""Repository activity analysis pipeline.

metadata + README + contributors (concurrent) -> commit stream (sequential pages)
-> commit scan -> sampled commit details (bounded batches) -> aggregate model.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

from repolens.models.repository_activity import IdentityRecord, RepositoryActivityModel
from repolens.services.activity_aggregator import (
    AggregationContext,
    build_activity_model,
    merge_commit_details,
    scan_commits,
)
from repolens.services.analysis_settings import AnalysisSettings, load_analysis_settings
from repolens.services.commit_sampling import iter_batches, sample_indices
from repolens.services.github_client import GitHubAPIError, GitHubClient
from repolens.services.identity_resolver import identity_record_from_api
from repolens.services.pagination import fetch_paginated

logger = logging.getLogger(__name__)


class AnalysisTimeoutError(RuntimeError):
    """The whole-run deadline expired before the model was complete."""


async def fetch_readme(client: GitHubClient, owner: str, repo: str, max_chars: int) -> str:
    try:
        return await client.get_readme(owner, repo, max_chars=max_chars)
    except GitHubAPIError as exc:
        logger.info("readme unavailable owner=%s repo=%s error=%s", owner, repo, exc)
        return ""


async def fetch_identity_records(
    client: GitHubClient, owner: str, repo: str, per_page: int = 100
) -> list[IdentityRecord]:
    rows = await fetch_paginated(
        client,
        f"/repos/{owner}/{repo}/contributors",
        per_page=per_page,
        optional=True,
        params={"anon": "false"},
    )
    records: list[IdentityRecord] = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        record = identity_record_from_api(row)
        if record is not None:
            records.append(record)
    return records


async def fetch_commits(
    client: GitHubClient, owner: str, repo: str, per_page: int = 100, max_items: int = 500
) -> list[dict]:
    rows = await fetch_paginated(
        client,
        f"/repos/{owner}/{repo}/commits",
        per_page=per_page,
        max_items=max_items,
    )
    return [row for row in rows if isinstance(row, dict)]


async def _sample_commit_details(
    client: GitHubClient,
    owner: str,
    repo: str,
    commits: list[dict],
    context: AggregationContext,
    settings: AnalysisSettings,
) -> None:
    indices = sample_indices(len(commits), min(len(commits), settings.sample_size))
    logger.info("fetching details for %d of %d commits", len(indices), len(commits))

    async def _fetch(idx: int) -> dict:
        sha = commits[idx].get("sha")
        if not sha:
            raise GitHubAPIError(f"commit at index {idx} has no sha")
        return await client.get_commit(owner, repo, sha)

    async for details in iter_batches(indices, _fetch, batch_size=settings.batch_size):
        merge_commit_details(context, details)


async def _run_analysis(
    client: GitHubClient, owner: str, repo: str, settings: AnalysisSettings
) -> RepositoryActivityModel:
    logger.info("analyzing repository %s/%s", owner, repo)
    tasks = [
        asyncio.ensure_future(client.get_repo(owner, repo)),
        asyncio.ensure_future(fetch_readme(client, owner, repo, settings.readme_char_budget)),
        asyncio.ensure_future(fetch_identity_records(client, owner, repo, per_page=settings.per_page)),
    ]
    try:
        metadata, readme, identities = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise
    logger.info("repository=%s contributors_listed=%d", metadata.get("full_name") or repo, len(identities))

    commits = await fetch_commits(
        client, owner, repo, per_page=settings.per_page, max_items=settings.max_commits
    )
    logger.info("fetched %d commits", len(commits))

    context = AggregationContext()
    scan_commits(context, commits)
    await _sample_commit_details(client, owner, repo, commits, context, settings)

    model = build_activity_model(
        owner=owner,
        repo=repo,
        metadata=metadata,
        readme=readme,
        identities=identities,
        commits=commits,
        context=context,
        top_folder_limit=settings.top_folder_limit,
        contributor_area_limit=settings.contributor_area_limit,
        recent_commit_limit=settings.recent_commit_limit,
    )
    logger.info(
        "analysis complete %s/%s contributors=%d automated=%d commits=%d",
        owner,
        repo,
        model.counts.human_contributors,
        model.counts.automated_accounts,
        model.counts.total_commits,
    )
    return model


async def analyze_repository(
    owner: str,
    repo: str,
    token: Optional[str] = None,
    *,
    settings: Optional[AnalysisSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RepositoryActivityModel:
    """Run the full pipeline for ``owner/repo``.

    Raises GitHubAPIError when metadata or the commit stream cannot be fetched,
    and AnalysisTimeoutError when the run exceeds ``settings.deadline_s``.
    """
    cfg = settings or load_analysis_settings()
    async with GitHubClient(
        token=token or cfg.github_token,
        base_url=cfg.github_api_url,
        user_agent=cfg.user_agent,
        timeout=cfg.request_timeout_s,
        transport=transport,
    ) as client:
        try:
            return await asyncio.wait_for(_run_analysis(client, owner, repo, cfg), timeout=cfg.deadline_s)
        except asyncio.TimeoutError as exc:
            raise AnalysisTimeoutError(
                f"analysis of {owner}/{repo} exceeded {cfg.deadline_s:.0f}s deadline"
            ) from exc
