"""Idempotent database seed helpers for local development environments."""

from __future__ import annotations

import logging
from typing import Any, cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from chirp.models.follow import Follow
from chirp.models.tweet import Tweet
from chirp.models.user import Role, User

LOGGER = logging.getLogger(__name__)

# ``testuser`` comes first so a fresh database always has a known login.
USER_FIXTURES: list[dict[str, Any]] = [
    {
        "username": "testuser",
        "email": "test@example.com",
        "display_name": "Test User",
        "password": "password123",
        "bio": "Just here to try things out.",
    },
    {
        "username": "admin",
        "email": "admin@example.com",
        "display_name": "Chirp Admin",
        "password": "adminpass123",
        "role": Role.ADMIN,
        "is_verified": True,
    },
    {
        "username": "alexm",
        "email": "alex.martinez@example.com",
        "display_name": "Alex Martinez",
        "password": "devPass123!",
        "bio": "Coffee, code and cycling.",
    },
    {
        "username": "jamielee",
        "email": "jamie.lee@example.com",
        "display_name": "Jamie Lee",
        "password": "strongPass123",
    },
    {
        "username": "sarak",
        "email": "sara.kim@example.com",
        "display_name": "Sara Kim",
        "password": "tweetMore2024",
        "is_verified": True,
    },
]

TWEET_FIXTURES: list[tuple[str, str]] = [
    ("testuser", "Hello, Chirp!"),
    ("testuser", "Second tweet, still figuring out hashtags."),
    ("alexm", "Morning ride done. 40km before breakfast."),
    ("alexm", "Anyone else debugging timezones today?"),
    ("jamielee", "Reading list for the weekend is getting out of hand."),
    ("sarak", "Shipped a new release. Changelog in the replies."),
    ("admin", "Welcome to Chirp. Be kind."),
]

FOLLOW_FIXTURES: list[tuple[str, str]] = [
    ("testuser", "alexm"),
    ("testuser", "sarak"),
    ("alexm", "testuser"),
    ("jamielee", "testuser"),
    ("jamielee", "sarak"),
    ("sarak", "admin"),
]


def _session(database: SQLAlchemy) -> Session:
    """Return the current SQLAlchemy session."""
    return cast(Session, database.session)


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def seed_users(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create the fixture accounts, leaving existing ones untouched."""
    if verbose:
        LOGGER.info("Seeding users...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    for fixture in USER_FIXTURES:
        username = str(fixture["username"])
        user = session.execute(select(User).filter_by(username=username)).scalar_one_or_none()
        created = user is None
        if user is None:
            user = User(
                username=username,
                email=str(fixture["email"]),
                display_name=str(fixture["display_name"]),
                bio=fixture.get("bio"),
                role=fixture.get("role", Role.USER),
                is_verified=bool(fixture.get("is_verified", False)),
            )
            user.password = str(fixture["password"])
            session.add(user)
            session.flush()
        _touch(summary, "users", created)

    session.commit()
    return summary


def seed_tweets(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create fixture tweets once per ``(author, content)`` pair."""
    if verbose:
        LOGGER.info("Seeding tweets...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    for username, content in TWEET_FIXTURES:
        author = session.execute(select(User).filter_by(username=username)).scalar_one()
        existing = session.execute(
            select(Tweet.id).filter_by(user_id=author.id, content=content)
        ).first()
        if existing is None:
            session.add(Tweet(user_id=author.id, content=content))
        _touch(summary, "tweets", existing is None)

    session.commit()
    return summary


def seed_follows(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create fixture follow edges and keep both counters in step."""
    if verbose:
        LOGGER.info("Seeding follows...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    for follower_name, following_name in FOLLOW_FIXTURES:
        follower = session.execute(select(User).filter_by(username=follower_name)).scalar_one()
        following = session.execute(select(User).filter_by(username=following_name)).scalar_one()
        existing = session.execute(
            select(Follow.id).filter_by(follower_id=follower.id, following_id=following.id)
        ).first()
        if existing is None:
            session.add(Follow(follower_id=follower.id, following_id=following.id))
            session.execute(
                update(User)
                .where(User.id == follower.id)
                .values(following_count=User.following_count + 1)
            )
            session.execute(
                update(User)
                .where(User.id == following.id)
                .values(followers_count=User.followers_count + 1)
            )
        _touch(summary, "follows", existing is None)

    session.commit()
    return summary


def run_all(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Run all seeders in the correct foreign-key order."""
    if verbose:
        LOGGER.info("Running full seed pipeline...")
    combined: dict[str, dict[str, int]] = {}
    for func in (seed_users, seed_tweets, seed_follows):
        result = func(database, verbose=verbose)
        for table, counters in result.items():
            entry = combined.setdefault(table, {"created": 0, "existing": 0})
            entry["created"] += counters.get("created", 0)
            entry["existing"] += counters.get("existing", 0)
    return combined


__all__ = ["seed_users", "seed_tweets", "seed_follows", "run_all"]
