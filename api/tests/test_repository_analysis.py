"""End-to-end tests for the repository activity pipeline against a mocked GitHub API."""

from __future__ import annotations

import asyncio
import base64

import httpx
import pytest
import respx
from httpx import Response

from github_payloads import GITHUB, make_commit, make_detail, make_file

from repolens.services.analysis_settings import AnalysisSettings
from repolens.services.github_client import GitHubAPIError
from repolens.services.repository_analysis_service import AnalysisTimeoutError, analyze_repository

REPO = f"{GITHUB}/repos/owner/repo"


def _mock_repo(
    *,
    contributors: list[dict] | Response,
    commits: list[dict] | Response,
    details: dict[str, Response],
    readme: Response | None = None,
) -> None:
    respx.get(REPO).mock(
        return_value=Response(
            200,
            json={"name": "repo", "full_name": "owner/repo", "description": "", "language": "Go"},
        )
    )
    respx.get(f"{REPO}/readme").mock(
        return_value=readme
        or Response(
            200,
            json={"content": base64.b64encode(b"# repo\nA tool.").decode("ascii"), "encoding": "base64"},
        )
    )
    if isinstance(contributors, Response):
        respx.get(f"{REPO}/contributors").mock(return_value=contributors)
    else:
        respx.get(f"{REPO}/contributors").mock(return_value=Response(200, json=contributors))
    if isinstance(commits, Response):
        respx.get(f"{REPO}/commits").mock(return_value=commits)
    else:
        respx.get(f"{REPO}/commits").mock(side_effect=[Response(200, json=commits), Response(200, json=[])])
    for sha, response in details.items():
        respx.get(f"{REPO}/commits/{sha}").mock(return_value=response)


@pytest.mark.asyncio
@respx.mock
async def test_analyze_repository_alice_and_bot_scenario():
    _mock_repo(
        contributors=[
            {"login": "alice", "id": 1, "contributions": 10},
            {"login": "ci[bot]", "id": 2, "contributions": 3},
        ],
        commits=[
            make_commit("c2", "alice", name="Alice", date="2024-02-01T00:00:00Z", message="Add tests"),
            make_commit("c1", "alice", name="Alice", date="2024-01-01T00:00:00Z", message="Initial commit"),
        ],
        details={
            "c2": Response(200, json=make_detail("c2", "alice", [make_file("tests/test_x.py", "added", 12, 0)])),
            "c1": Response(200, json=make_detail("c1", "alice", [make_file("main.go", "added", 30, 0)])),
        },
    )

    model = await analyze_repository("owner", "repo")

    assert [c.login for c in model.contributors] == ["alice"]
    alice = model.contributors[0]
    assert alice.contributions == 10
    assert alice.commit_count == 2
    assert (alice.lines_added, alice.lines_removed) == (42, 0)
    assert [a.login for a in model.automated_accounts] == ["ci[bot]"]
    assert model.counts.human_contributors == 1
    assert model.counts.total_commits == 2
    assert model.change_summary.new_files == 2
    assert model.overview.readme.startswith("# repo")
    assert model.validation.count_consistency is True
    assert model.validation.has_descriptive_purpose is True
    assert [h.message for h in model.recent_commits] == ["Add tests", "Initial commit"]


@pytest.mark.asyncio
@respx.mock
async def test_analyze_repository_degrades_optional_sources():
    _mock_repo(
        contributors=Response(403, json={"message": "forbidden"}),
        commits=[make_commit("c1", "alice")],
        details={"c1": Response(500, json={"message": "boom"})},
        readme=Response(404, json={"message": "Not Found"}),
    )

    model = await analyze_repository("owner", "repo")

    assert model.contributors == []
    assert model.overview.readme == ""
    assert model.change_summary.total_commits == 1
    assert model.change_summary.failed_samples == 1
    assert model.change_summary.most_changed_folders == []
    assert model.validation.has_descriptive_purpose is False


@pytest.mark.asyncio
@respx.mock
async def test_analyze_repository_samples_evenly_in_batches():
    commits = [make_commit(f"c{i}", "alice") for i in range(100)]
    _mock_repo(
        contributors=[{"login": "alice", "id": 1, "contributions": 100}],
        commits=commits,
        details={},
    )
    detail_route = respx.get(url__regex=rf"{REPO}/commits/c\d+").mock(
        return_value=Response(200, json=make_detail("cx", "alice", [make_file("src/a.py", "modified", 1, 1)]))
    )
    settings = AnalysisSettings(sample_size=20, batch_size=5)

    model = await analyze_repository("owner", "repo", settings=settings)

    requested = sorted(int(str(call.request.url).rsplit("/c", 1)[1]) for call in detail_route.calls)
    assert requested == list(range(0, 100, 5))
    assert model.change_summary.sampled_commits == 20
    assert model.change_summary.total_commits == 100
    assert model.contributors[0].lines_added == 20


@pytest.mark.asyncio
async def test_analyze_repository_metadata_failure_is_fatal():
    not_found = Response(404, json={"message": "Not Found"})
    with respx.mock(assert_all_called=False) as router:
        router.get(REPO).mock(return_value=not_found)
        router.get(f"{REPO}/readme").mock(return_value=not_found)
        router.get(f"{REPO}/contributors").mock(return_value=not_found)
        commits_route = router.get(f"{REPO}/commits").mock(return_value=Response(200, json=[]))

        with pytest.raises(GitHubAPIError) as exc_info:
            await analyze_repository("owner", "repo")

    assert exc_info.value.status_code == 404
    assert not commits_route.called


@pytest.mark.asyncio
@respx.mock
async def test_analyze_repository_survives_malformed_upstream_entries():
    _mock_repo(
        contributors=[
            {"login": "alice", "id": 1, "contributions": "lots"},
            {"login": "bob", "id": 2, "contributions": 4},
        ],
        commits=[make_commit("c2", "alice"), make_commit("c1", "bob")],
        details={
            "c2": Response(200, json=["not", "a", "commit"]),
            "c1": Response(200, json=make_detail("c1", "bob", [make_file("src/a.py", additions="n/a", deletions=3)])),
        },
    )

    model = await analyze_repository("owner", "repo")

    assert [c.login for c in model.contributors] == ["bob", "alice"]
    assert model.contributors[1].contributions == 0
    bob = model.contributors[0]
    assert (bob.lines_added, bob.lines_removed) == (0, 3)
    assert model.change_summary.sampled_commits == 2
    assert model.change_summary.failed_samples == 1


@pytest.mark.asyncio
@respx.mock
async def test_analyze_repository_commit_stream_failure_is_fatal():
    _mock_repo(contributors=[], commits=Response(429, json={"message": "slow down"}), details={})

    with pytest.raises(GitHubAPIError) as exc_info:
        await analyze_repository("owner", "repo")

    assert exc_info.value.is_rate_limited


@pytest.mark.asyncio
@respx.mock
async def test_analyze_repository_passes_caller_token():
    _mock_repo(contributors=[], commits=[], details={})

    await analyze_repository("owner", "repo", "caller-token")

    assert all(call.request.headers["authorization"] == "Bearer caller-token" for call in respx.calls)


@pytest.mark.asyncio
async def test_analyze_repository_deadline_raises_timeout():
    async def slow_handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1.0)
        return httpx.Response(200, json={})

    settings = AnalysisSettings(deadline_s=0.05)

    with pytest.raises(AnalysisTimeoutError):
        await analyze_repository(
            "owner", "repo", settings=settings, transport=httpx.MockTransport(slow_handler)
        )
