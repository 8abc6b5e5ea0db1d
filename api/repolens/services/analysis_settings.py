"""Environment-driven settings for repository analysis runs."""

from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_USER_AGENT = "repo-activity-lens/1.0"


class AnalysisSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    github_api_url: str = DEFAULT_GITHUB_API_URL
    user_agent: str = DEFAULT_USER_AGENT
    github_token: Optional[str] = None
    per_page: int = Field(default=100, ge=1, le=100)
    max_commits: int = Field(default=500, ge=1)
    sample_size: int = Field(default=50, ge=0)
    batch_size: int = Field(default=10, ge=1)
    readme_char_budget: int = Field(default=800, ge=0)
    request_timeout_s: float = Field(default=20.0, gt=0.0)
    deadline_s: float = Field(default=120.0, gt=0.0)
    recent_commit_limit: int = Field(default=20, ge=0)
    top_folder_limit: int = Field(default=10, ge=0)
    contributor_area_limit: int = Field(default=5, ge=0)


def _env_token() -> Optional[str]:
    raw = os.getenv("GITHUB_TOKEN") or os.getenv("GH_TOKEN") or ""
    return raw.strip() or None


def _env_int(name: str, default: int, *, lo: int, hi: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return max(lo, min(hi, int(raw)))
    except ValueError:
        return default


def _env_float(name: str, default: float, *, lo: float, hi: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return max(lo, min(hi, float(raw)))
    except ValueError:
        return default


def load_analysis_settings(**overrides) -> AnalysisSettings:
    """Build settings from the environment; keyword overrides win over env values."""
    values = {
        "github_api_url": (os.getenv("GITHUB_API_URL") or DEFAULT_GITHUB_API_URL).strip().rstrip("/"),
        "user_agent": (os.getenv("GITHUB_USER_AGENT") or DEFAULT_USER_AGENT).strip(),
        "github_token": _env_token(),
        "per_page": _env_int("REPO_ANALYSIS_PER_PAGE", 100, lo=1, hi=100),
        "max_commits": _env_int("REPO_ANALYSIS_MAX_COMMITS", 500, lo=1, hi=10000),
        "sample_size": _env_int("REPO_ANALYSIS_SAMPLE_SIZE", 50, lo=0, hi=500),
        "batch_size": _env_int("REPO_ANALYSIS_BATCH_SIZE", 10, lo=1, hi=50),
        "readme_char_budget": _env_int("REPO_ANALYSIS_README_CHARS", 800, lo=0, hi=100000),
        "request_timeout_s": _env_float("REPO_ANALYSIS_REQUEST_TIMEOUT_S", 20.0, lo=1.0, hi=300.0),
        "deadline_s": _env_float("REPO_ANALYSIS_DEADLINE_S", 120.0, lo=5.0, hi=3600.0),
        "recent_commit_limit": _env_int("REPO_ANALYSIS_RECENT_COMMITS", 20, lo=0, hi=500),
        "top_folder_limit": _env_int("REPO_ANALYSIS_TOP_FOLDERS", 10, lo=0, hi=500),
        "contributor_area_limit": _env_int("REPO_ANALYSIS_CONTRIBUTOR_AREAS", 5, lo=0, hi=50),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return AnalysisSettings(**values)
