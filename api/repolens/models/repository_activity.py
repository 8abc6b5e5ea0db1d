"""Repository activity models.

Records produced while aggregating one repository's history. Identity records
come from the authoritative contributor listing, activity records from the
commit stream; the resolved model is what downstream summarization consumes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class IdentityRecord(BaseModel):
    """One account from the authoritative contributor listing."""

    model_config = ConfigDict(frozen=True)

    login: str = Field(min_length=1)
    id: int
    contributions: int = Field(default=0, ge=0)
    avatar_url: str = ""
    is_automated: bool = False


class ActivityRecord(BaseModel):
    """Per-login activity accumulated from the commit stream and sampled details."""

    login: str
    name: str
    commit_count: int = Field(default=0, ge=0)
    first_commit_at: Optional[datetime] = None
    last_commit_at: Optional[datetime] = None
    areas: list[str] = Field(default_factory=list)
    lines_added: int = Field(default=0, ge=0)
    lines_removed: int = Field(default=0, ge=0)

    def add_area(self, area: str) -> None:
        if area not in self.areas:
            self.areas.append(area)

    def observe_timestamp(self, ts: Optional[datetime]) -> None:
        if ts is None:
            return
        if self.first_commit_at is None or ts < self.first_commit_at:
            self.first_commit_at = ts
        if self.last_commit_at is None or ts > self.last_commit_at:
            self.last_commit_at = ts


class ResolvedContributor(BaseModel):
    """Human contributor: identity record joined with its activity (if any)."""

    login: str
    id: int
    name: str
    contributions: int = Field(ge=0)
    avatar_url: str = ""
    main_areas: list[str] = Field(default_factory=list)
    commit_count: int = Field(default=0, ge=0)
    first_commit_at: Optional[datetime] = None
    last_commit_at: Optional[datetime] = None
    lines_added: int = Field(default=0, ge=0)
    lines_removed: int = Field(default=0, ge=0)


class AutomatedAccount(BaseModel):
    login: str
    id: int
    contributions: int = Field(default=0, ge=0)
    avatar_url: str = ""


class FolderChangeTally(BaseModel):
    folder: str
    change_count: int = Field(ge=1)


class ValidationFlags(BaseModel):
    """Advisory data-quality signal; never used to reject or retry a run."""

    model_config = ConfigDict(frozen=True)

    count_consistency: bool
    no_duplicate_identity: bool
    has_descriptive_purpose: bool
    automated_excluded: int = Field(default=0, ge=0)
    is_valid: bool


class RepositoryOverview(BaseModel):
    name: str
    full_name: str
    description: str = ""
    primary_language: str = "Not specified"
    topics: list[str] = Field(default_factory=list)
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    default_branch: Optional[str] = None
    readme: str = ""


class CommitHeadline(BaseModel):
    message: str
    author: str
    date: Optional[str] = None


class ChangeSummary(BaseModel):
    most_changed_folders: list[FolderChangeTally] = Field(default_factory=list)
    area_changes: dict[str, int] = Field(default_factory=dict)
    new_files: int = Field(default=0, ge=0)
    modified_files: int = Field(default=0, ge=0)
    deleted_files: int = Field(default=0, ge=0)
    total_commits: int = Field(default=0, ge=0)
    sampled_commits: int = Field(default=0, ge=0)
    failed_samples: int = Field(default=0, ge=0)


class ContributorCounts(BaseModel):
    total_contributors: int = Field(ge=0)
    human_contributors: int = Field(ge=0)
    automated_accounts: int = Field(ge=0)
    total_commits: int = Field(ge=0)


class RepositoryActivityModel(BaseModel):
    """Aggregated, deduplicated activity model for one repository."""

    owner: str
    repo: str
    overview: RepositoryOverview
    contributors: list[ResolvedContributor] = Field(default_factory=list)
    automated_accounts: list[AutomatedAccount] = Field(default_factory=list)
    change_summary: ChangeSummary
    counts: ContributorCounts
    recent_commits: list[CommitHeadline] = Field(default_factory=list)
    validation: ValidationFlags


class AnalyzeRequest(BaseModel):
    """POST /api/analyze request body."""

    repo_url: str = Field(min_length=1)
    github_token: Optional[str] = None


class AnalyzeResponse(RepositoryActivityModel):
    """POST /api/analyze response: the activity model plus request context."""

    url: str
    analyzed_at: datetime
