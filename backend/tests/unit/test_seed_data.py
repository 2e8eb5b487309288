"""Unit tests for the development seeders."""

from __future__ import annotations

from chirp.models import Follow, Tweet, User
from chirp.seeds import seed_data


def _counts(session) -> tuple[int, int, int]:
    return (
        session.query(User).count(),
        session.query(Tweet).count(),
        session.query(Follow).count(),
    )


def test_run_all_creates_fixtures(db, session) -> None:
    summary = seed_data.run_all(db)

    assert summary["users"] == {"created": len(seed_data.USER_FIXTURES), "existing": 0}
    assert summary["tweets"]["created"] == len(seed_data.TWEET_FIXTURES)
    assert summary["follows"]["created"] == len(seed_data.FOLLOW_FIXTURES)

    testuser = session.query(User).filter_by(username="testuser").one()
    assert testuser.verify_password("password123")
    assert testuser.following_count == 2
    assert testuser.followers_count == 2
    assert session.query(User).filter_by(username="admin").one().is_admin


def test_run_all_is_idempotent(db, session) -> None:
    seed_data.run_all(db)
    before = _counts(session)

    summary = seed_data.run_all(db)

    assert _counts(session) == before
    assert all(counters["created"] == 0 for counters in summary.values())
    assert session.query(User).filter_by(username="testuser").one().following_count == 2
