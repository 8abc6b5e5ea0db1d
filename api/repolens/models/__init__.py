"""Pydantic models."""

from repolens.models.error import ErrorDetail
from repolens.models.repository_activity import (
    ActivityRecord,
    AnalyzeRequest,
    AnalyzeResponse,
    AutomatedAccount,
    ChangeSummary,
    CommitHeadline,
    ContributorCounts,
    FolderChangeTally,
    IdentityRecord,
    RepositoryActivityModel,
    RepositoryOverview,
    ResolvedContributor,
    ValidationFlags,
)

__all__ = [
    "ActivityRecord",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "AutomatedAccount",
    "ChangeSummary",
    "CommitHeadline",
    "ContributorCounts",
    "ErrorDetail",
    "FolderChangeTally",
    "IdentityRecord",
    "RepositoryActivityModel",
    "RepositoryOverview",
    "ResolvedContributor",
    "ValidationFlags",
]
