"""Fold commit activity and sampled file changes into the repository activity model.

``AggregationContext`` is owned by a single analysis run. The commit scan is a
sequential fold over the commit stream; sampled details are merged one batch at
a time, after every fetch in that batch has completed.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from repolens.models.repository_activity import (
    ActivityRecord,
    ChangeSummary,
    CommitHeadline,
    ContributorCounts,
    FolderChangeTally,
    IdentityRecord,
    RepositoryActivityModel,
    RepositoryOverview,
    ValidationFlags,
)
from repolens.services.identity_resolver import IdentityResolution, coerce_count, resolve_identities
from repolens.services.path_classifier import area_of, areas_from_message, folder_of

logger = logging.getLogger(__name__)

STATUS_ADDED = "added"
STATUS_MODIFIED = "modified"
STATUS_REMOVED = "removed"


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _author_login(commit: Mapping[str, Any]) -> Optional[str]:
    author = commit.get("author") or {}
    if not isinstance(author, Mapping):
        return None
    login = author.get("login")
    return str(login) if login else None


def _commit_author(commit: Mapping[str, Any]) -> dict:
    inner = commit.get("commit") or {}
    author = inner.get("author") if isinstance(inner, dict) else None
    return author if isinstance(author, dict) else {}


def _commit_message(commit: Mapping[str, Any]) -> str:
    inner = commit.get("commit") or {}
    if not isinstance(inner, dict):
        return ""
    return str(inner.get("message") or "")


class AggregationContext:
    def __init__(self) -> None:
        self.activity: dict[str, ActivityRecord] = {}
        self.folder_changes: dict[str, int] = {}
        self.area_changes: dict[str, int] = {}
        # path -> last observed status
        self.file_status: dict[str, str] = {}
        self.sampled_commits = 0
        self.failed_samples = 0

    def activity_for(self, login: str, name: str) -> ActivityRecord:
        row = self.activity.get(login)
        if row is None:
            row = ActivityRecord(login=login, name=name)
            self.activity[login] = row
        return row

    def status_count(self, status: str) -> int:
        return sum(1 for value in self.file_status.values() if value == status)


def scan_commits(context: AggregationContext, commits: list[Mapping[str, Any]]) -> None:
    """Sequential fold over the full commit stream: counts, active period, message areas."""
    for commit in commits:
        if not isinstance(commit, Mapping):
            continue
        login = _author_login(commit)
        if not login:
            continue
        author = _commit_author(commit)
        row = context.activity_for(login, str(author.get("name") or login))
        row.commit_count += 1
        row.observe_timestamp(_parse_timestamp(author.get("date")))
        for area in areas_from_message(_commit_message(commit)):
            row.add_area(area)


def merge_commit_details(context: AggregationContext, details: list[Optional[Mapping[str, Any]]]) -> None:
    """Merge one completed batch of commit details. None or malformed entries are failed samples."""
    for detail in details:
        context.sampled_commits += 1
        if not isinstance(detail, Mapping):
            context.failed_samples += 1
            continue
        files = detail.get("files") or []
        if not isinstance(files, list):
            continue
        login = _author_login(detail)
        row = context.activity.get(login) if login else None

        for change in files:
            if not isinstance(change, Mapping):
                continue
            filename = str(change.get("filename") or "")
            if not filename:
                continue
            folder = folder_of(filename)
            context.folder_changes[folder] = context.folder_changes.get(folder, 0) + 1
            area = area_of(folder)
            if area:
                context.area_changes[area] = context.area_changes.get(area, 0) + 1

            status = str(change.get("status") or "")
            if status not in (STATUS_ADDED, STATUS_REMOVED):
                status = STATUS_MODIFIED
            context.file_status[filename] = status

            if row is not None:
                row.lines_added += coerce_count(change.get("additions"))
                row.lines_removed += coerce_count(change.get("deletions"))
                if area:
                    row.add_area(area)


def top_folders(folder_changes: Mapping[str, int], limit: int) -> list[FolderChangeTally]:
    ordered = sorted(folder_changes.items(), key=lambda item: (-item[1], item[0]))
    return [FolderChangeTally(folder=folder, change_count=count) for folder, count in ordered[:limit]]


def recent_headlines(commits: list[Mapping[str, Any]], limit: int) -> list[CommitHeadline]:
    out: list[CommitHeadline] = []
    for commit in [c for c in commits if isinstance(c, Mapping)][:limit]:
        author = _commit_author(commit)
        message = _commit_message(commit)
        out.append(
            CommitHeadline(
                message=message.split("\n", 1)[0],
                author=_author_login(commit) or str(author.get("name") or "") or "Unknown",
                date=author.get("date"),
            )
        )
    return out


def build_overview(metadata: Mapping[str, Any], readme: str) -> RepositoryOverview:
    return RepositoryOverview(
        name=str(metadata.get("name") or ""),
        full_name=str(metadata.get("full_name") or ""),
        description=str(metadata.get("description") or ""),
        primary_language=str(metadata.get("language") or "Not specified"),
        topics=list(metadata.get("topics") or []),
        stars=coerce_count(metadata.get("stargazers_count")),
        forks=coerce_count(metadata.get("forks_count")),
        open_issues=coerce_count(metadata.get("open_issues_count")),
        created_at=metadata.get("created_at"),
        updated_at=metadata.get("updated_at"),
        default_branch=metadata.get("default_branch"),
        readme=readme or "",
    )


def compute_validation(resolution: IdentityResolution, overview: RepositoryOverview) -> ValidationFlags:
    expected_humans = sum(1 for record in resolution.accepted if not record.is_automated)
    logins = {c.login for c in resolution.contributors}
    count_consistency = len(resolution.contributors) == expected_humans
    no_duplicate_identity = len(logins) == len(resolution.contributors)
    has_descriptive_purpose = bool(overview.description.strip() or overview.readme.strip())
    return ValidationFlags(
        count_consistency=count_consistency,
        no_duplicate_identity=no_duplicate_identity,
        has_descriptive_purpose=has_descriptive_purpose,
        automated_excluded=len(resolution.automated),
        is_valid=count_consistency and no_duplicate_identity and has_descriptive_purpose,
    )


def build_activity_model(
    *,
    owner: str,
    repo: str,
    metadata: Mapping[str, Any],
    readme: str,
    identities: list[IdentityRecord],
    commits: list[Mapping[str, Any]],
    context: AggregationContext,
    top_folder_limit: int = 10,
    contributor_area_limit: int = 5,
    recent_commit_limit: int = 20,
) -> RepositoryActivityModel:
    """Produce the final model. Does not mutate ``context``; repeated calls give equal output."""
    resolution = resolve_identities(identities, context.activity, area_limit=contributor_area_limit)
    overview = build_overview(metadata, readme)
    validation = compute_validation(resolution, overview)
    if not validation.is_valid:
        logger.warning(
            "validation flags owner=%s repo=%s count_consistency=%s no_duplicate_identity=%s has_descriptive_purpose=%s",
            owner,
            repo,
            validation.count_consistency,
            validation.no_duplicate_identity,
            validation.has_descriptive_purpose,
        )

    change_summary = ChangeSummary(
        most_changed_folders=top_folders(context.folder_changes, top_folder_limit),
        area_changes=dict(sorted(context.area_changes.items(), key=lambda item: (-item[1], item[0]))),
        new_files=context.status_count(STATUS_ADDED),
        modified_files=context.status_count(STATUS_MODIFIED),
        deleted_files=context.status_count(STATUS_REMOVED),
        total_commits=len(commits),
        sampled_commits=context.sampled_commits,
        failed_samples=context.failed_samples,
    )
    counts = ContributorCounts(
        total_contributors=len(resolution.accepted),
        human_contributors=len(resolution.contributors),
        automated_accounts=len(resolution.automated),
        total_commits=len(commits),
    )
    return RepositoryActivityModel(
        owner=owner,
        repo=repo,
        overview=overview,
        contributors=resolution.contributors,
        automated_accounts=resolution.automated,
        change_summary=change_summary,
        counts=counts,
        recent_commits=recent_headlines(commits, recent_commit_limit),
        validation=validation,
    )
