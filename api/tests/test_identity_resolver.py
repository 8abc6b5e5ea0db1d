from __future__ import annotations

from datetime import datetime, timezone

import pytest

from repolens.models.repository_activity import ActivityRecord, IdentityRecord
from repolens.services.identity_resolver import (
    coerce_count,
    identity_record_from_api,
    is_automated_account,
    resolve_identities,
)


def _record(login: str, account_id: int, contributions: int = 1) -> IdentityRecord:
    return identity_record_from_api({"login": login, "id": account_id, "contributions": contributions})


@pytest.mark.parametrize(
    "login",
    ["dependabot[bot]", "github-actions[bot]", "ci[bot]", "release-bot", "[renovate]bot"],
)
def test_is_automated_account_detects_bot_logins(login: str) -> None:
    assert is_automated_account(login) is True


@pytest.mark.parametrize("login", ["alice", "robot", "abbott", "bot-maker", "", None])
def test_is_automated_account_leaves_humans_alone(login) -> None:
    assert is_automated_account(login) is False


def test_identity_record_from_api_classifies_and_validates() -> None:
    bot = identity_record_from_api({"login": "ci[bot]", "id": 2, "contributions": 3, "avatar_url": "a"})
    assert bot is not None and bot.is_automated is True and bot.avatar_url == "a"
    assert identity_record_from_api({"login": "", "id": 3}) is None
    assert identity_record_from_api({"login": "x"}) is None
    assert identity_record_from_api({"login": "x", "id": "nope"}) is None


def test_identity_record_from_api_zeroes_malformed_contributions() -> None:
    record = identity_record_from_api({"login": "alice", "id": 1, "contributions": "lots"})
    assert record is not None and record.contributions == 0
    assert coerce_count(-3) == 0
    assert coerce_count("7") == 7
    assert coerce_count([1]) == 0


def test_resolve_dedups_by_login_and_by_id_first_seen_wins() -> None:
    records = [
        _record("alice", 1, 10),
        _record("alice", 99, 4),  # same login, different id
        _record("alice-renamed", 1, 7),  # same id under another login
        _record("bob", 2, 5),
    ]

    result = resolve_identities(records, {})

    assert [c.login for c in result.contributors] == ["alice", "bob"]
    assert [r.login for r in result.accepted] == ["alice", "bob"]
    logins = [c.login for c in result.contributors]
    ids = [c.id for c in result.contributors]
    assert len(set(logins)) == len(logins)
    assert len(set(ids)) == len(ids)


def test_resolve_separates_automated_accounts() -> None:
    records = [_record("alice", 1, 10), _record("ci[bot]", 2, 30)]
    activity = {"ci[bot]": ActivityRecord(login="ci[bot]", name="ci", commit_count=30)}

    result = resolve_identities(records, activity)

    assert [c.login for c in result.contributors] == ["alice"]
    assert [a.login for a in result.automated] == ["ci[bot]"]
    human_accepted = [r for r in result.accepted if not r.is_automated]
    assert len(result.contributors) == len(human_accepted)


def test_resolve_sorts_by_contributions_stably() -> None:
    records = [_record("a", 1, 5), _record("b", 2, 9), _record("c", 3, 5), _record("d", 4, 9)]

    result = resolve_identities(records, {})

    assert [c.login for c in result.contributors] == ["b", "d", "a", "c"]


def test_resolve_joins_activity_and_defaults_when_absent() -> None:
    first = datetime(2024, 1, 1, tzinfo=timezone.utc)
    last = datetime(2024, 3, 1, tzinfo=timezone.utc)
    activity = {
        "alice": ActivityRecord(
            login="alice",
            name="Alice Smith",
            commit_count=2,
            first_commit_at=first,
            last_commit_at=last,
            areas=["frontend", "testing", "api", "backend", "styling", "utilities"],
            lines_added=40,
            lines_removed=4,
        )
    }

    result = resolve_identities([_record("alice", 1, 10), _record("carol", 3, 1)], activity, area_limit=5)
    alice, carol = result.contributors

    assert alice.name == "Alice Smith"
    assert alice.commit_count == 2
    assert alice.first_commit_at == first and alice.last_commit_at == last
    assert alice.main_areas == ["frontend", "testing", "api", "backend", "styling"]
    assert (alice.lines_added, alice.lines_removed) == (40, 4)

    assert carol.name == "carol"
    assert carol.commit_count == 0
    assert carol.main_areas == []
    assert carol.first_commit_at is None


def test_resolve_empty_inputs() -> None:
    result = resolve_identities([], {})
    assert result.contributors == [] and result.automated == [] and result.accepted == []
