"""Pytest configuration and fixtures.

Async tests use the ``pytest-asyncio`` plugin (``@pytest.mark.asyncio``);
upstream GitHub calls are mocked with ``respx``.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _isolate_github_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Tokens and tuning knobs from the developer shell must not leak into tests.
    for key in (
        "GITHUB_TOKEN",
        "GH_TOKEN",
        "GITHUB_API_URL",
        "GITHUB_USER_AGENT",
        "REPO_ANALYSIS_PER_PAGE",
        "REPO_ANALYSIS_MAX_COMMITS",
        "REPO_ANALYSIS_SAMPLE_SIZE",
        "REPO_ANALYSIS_BATCH_SIZE",
        "REPO_ANALYSIS_README_CHARS",
        "REPO_ANALYSIS_REQUEST_TIMEOUT_S",
        "REPO_ANALYSIS_DEADLINE_S",
        "REPO_ANALYSIS_RECENT_COMMITS",
        "REPO_ANALYSIS_TOP_FOLDERS",
        "REPO_ANALYSIS_CONTRIBUTOR_AREAS",
    ):
        monkeypatch.delenv(key, raising=False)

