#!/usr/bin/env python3
"""Analyze a GitHub repository's contributor activity and print the model as JSON.

Usage:
  python scripts/analyze_repo.py OWNER/REPO [--token TOKEN] [--max-commits N] [--sample-size N] [-v]

Notes:
- Accepts owner/repo or a github.com URL
- Falls back to GITHUB_TOKEN / GH_TOKEN (also read from api/.env)
- Exit code 2 for an unparsable repository, 1 for upstream failures
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

_api_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _api_dir)
load_dotenv(os.path.join(_api_dir, ".env"))

from repolens.services.analysis_settings import load_analysis_settings  # noqa: E402
from repolens.services.github_client import GitHubAPIError  # noqa: E402
from repolens.services.repo_url import parse_repo_url  # noqa: E402
from repolens.services.repository_analysis_service import (  # noqa: E402
    AnalysisTimeoutError,
    analyze_repository,
)

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Aggregate contributor activity for a GitHub repository")
    ap.add_argument("repository", help="owner/repo or https://github.com/owner/repo")
    ap.add_argument("--token", default=None, help="GitHub token (default: GITHUB_TOKEN)")
    ap.add_argument("--max-commits", type=int, default=None, help="Cap on commits fetched")
    ap.add_argument("--sample-size", type=int, default=None, help="Commits sampled for file detail")
    ap.add_argument("--deadline", type=float, default=None, help="Overall deadline in seconds")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )
    parsed = parse_repo_url(args.repository)
    if parsed is None:
        logger.error("not a GitHub repository reference: %s", args.repository)
        return 2
    owner, repo = parsed
    settings = load_analysis_settings(
        max_commits=args.max_commits,
        sample_size=args.sample_size,
        deadline_s=args.deadline,
    )
    try:
        model = asyncio.run(analyze_repository(owner, repo, args.token, settings=settings))
    except GitHubAPIError as exc:
        logger.error("analysis failed status=%s: %s", exc.status_code, exc)
        return 1
    except AnalysisTimeoutError as exc:
        logger.error("%s", exc)
        return 1
    print(model.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
