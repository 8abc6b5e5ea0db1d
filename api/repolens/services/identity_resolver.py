"""Contributor identity resolution.

The contributors listing is the source of truth for who contributed; the
commit stream only enriches those identities with activity. Accounts are
deduplicated by login and by numeric id (first seen wins), and automated
accounts are kept out of the human contributor list.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, NamedTuple, Optional

from repolens.models.repository_activity import (
    ActivityRecord,
    AutomatedAccount,
    IdentityRecord,
    ResolvedContributor,
)

logger = logging.getLogger(__name__)


class IdentityResolution(NamedTuple):
    contributors: list[ResolvedContributor]
    automated: list[AutomatedAccount]
    accepted: list[IdentityRecord]


def is_automated_account(login: Optional[str]) -> bool:
    """Heuristic classifier for bot/service accounts by login."""
    if not login:
        return False
    return "[bot]" in login or login.endswith("-bot") or (login.endswith("bot") and "[" in login)


def coerce_count(value: Any) -> int:
    """Non-negative int from an upstream count field; 0 when absent or malformed."""
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0


def identity_record_from_api(payload: Mapping[str, Any]) -> Optional[IdentityRecord]:
    """Build an IdentityRecord from a contributors-listing entry; None when login/id are missing."""
    login = str(payload.get("login") or "").strip()
    raw_id = payload.get("id")
    if not login or raw_id is None:
        return None
    try:
        account_id = int(raw_id)
    except (TypeError, ValueError):
        return None
    return IdentityRecord(
        login=login,
        id=account_id,
        contributions=coerce_count(payload.get("contributions")),
        avatar_url=str(payload.get("avatar_url") or ""),
        is_automated=is_automated_account(login),
    )


def resolve_identities(
    records: list[IdentityRecord],
    activity: Mapping[str, ActivityRecord],
    *,
    area_limit: int = 5,
) -> IdentityResolution:
    seen_logins: set[str] = set()
    seen_ids: set[int] = set()
    accepted: list[IdentityRecord] = []
    humans: list[ResolvedContributor] = []
    automated: list[AutomatedAccount] = []

    for record in records:
        if record.login in seen_logins or record.id in seen_ids:
            logger.debug("skipping duplicate identity login=%s id=%s", record.login, record.id)
            continue
        seen_logins.add(record.login)
        seen_ids.add(record.id)
        accepted.append(record)

        if record.is_automated:
            automated.append(
                AutomatedAccount(
                    login=record.login,
                    id=record.id,
                    contributions=record.contributions,
                    avatar_url=record.avatar_url,
                )
            )
            continue

        humans.append(_join_activity(record, activity.get(record.login), area_limit))

    humans.sort(key=lambda c: c.contributions, reverse=True)
    return IdentityResolution(contributors=humans, automated=automated, accepted=accepted)


def _join_activity(
    record: IdentityRecord,
    row: Optional[ActivityRecord],
    area_limit: int,
) -> ResolvedContributor:
    if row is None:
        return ResolvedContributor(
            login=record.login,
            id=record.id,
            name=record.login,
            contributions=record.contributions,
            avatar_url=record.avatar_url,
        )
    return ResolvedContributor(
        login=record.login,
        id=record.id,
        name=row.name or record.login,
        contributions=record.contributions,
        avatar_url=record.avatar_url,
        main_areas=list(row.areas[:area_limit]),
        commit_count=row.commit_count,
        first_commit_at=row.first_commit_at,
        last_commit_at=row.last_commit_at,
        lines_added=row.lines_added,
        lines_removed=row.lines_removed,
    )
