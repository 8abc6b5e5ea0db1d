"""Repository analysis route."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request

from repolens.models.error import ErrorDetail
from repolens.models.repository_activity import AnalyzeRequest, AnalyzeResponse
from repolens.services import repository_analysis_service
from repolens.services.github_client import GitHubAPIError
from repolens.services.repo_url import build_repo_url, parse_repo_url

router = APIRouter()
logger = logging.getLogger(__name__)

NOT_FOUND_DETAIL = "Repository not found. It may not exist or be private; try providing a GitHub token."
RATE_LIMIT_DETAIL = "GitHub API rate limit exceeded. Provide a GitHub token or try again later."


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    responses={
        400: {"model": ErrorDetail},
        403: {"model": ErrorDetail},
        404: {"model": ErrorDetail},
        500: {"model": ErrorDetail},
        504: {"model": ErrorDetail},
    },
)
async def analyze(body: AnalyzeRequest, request: Request) -> AnalyzeResponse:
    """Aggregate contributors, change hotspots and commit volume for a GitHub repository."""
    parsed = parse_repo_url(body.repo_url)
    if parsed is None:
        raise HTTPException(
            status_code=400,
            detail="Invalid repository URL. Use https://github.com/owner/repo or owner/repo.",
        )
    owner, repo = parsed
    settings = getattr(request.app.state, "analysis_settings", None)

    try:
        model = await repository_analysis_service.analyze_repository(
            owner, repo, body.github_token, settings=settings
        )
    except GitHubAPIError as exc:
        logger.warning("analysis failed owner=%s repo=%s status=%s error=%s", owner, repo, exc.status_code, exc)
        if exc.is_not_found:
            raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL) from exc
        if exc.is_rate_limited:
            raise HTTPException(status_code=403, detail=RATE_LIMIT_DETAIL) from exc
        raise HTTPException(status_code=500, detail=f"Analysis failed: {exc}") from exc
    except repository_analysis_service.AnalysisTimeoutError as exc:
        logger.warning("analysis timed out owner=%s repo=%s", owner, repo)
        raise HTTPException(status_code=504, detail=str(exc)) from exc

    return AnalyzeResponse(
        **model.model_dump(),
        url=build_repo_url(owner, repo),
        analyzed_at=datetime.now(timezone.utc),
    )
