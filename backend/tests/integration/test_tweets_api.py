"""Integration tests for tweet endpoints."""

from __future__ import annotations

from tests.factories.tweet import TweetFactory
from tests.factories.user import AdminFactory, UserFactory
from tests.helpers.auth import login_headers

TWEETS = "/api/v1/tweets"


def test_create_and_fetch_tweet(client, session) -> None:
    UserFactory(username="poster", display_name="Poster")
    session.commit()
    headers = login_headers(client, "poster")

    resp = client.post(TWEETS, json={"content": "  first chirp  "}, headers=headers)

    assert resp.status_code == 201
    tweet = resp.get_json()["data"]
    assert tweet["content"] == "first chirp"
    assert tweet["author"]["username"] == "poster"
    assert tweet["author"]["display_name"] == "Poster"

    fetched = client.get(f"{TWEETS}/{tweet['id']}")
    assert fetched.status_code == 200
    assert fetched.get_json()["data"]["id"] == tweet["id"]


def test_create_requires_auth(client) -> None:
    resp = client.post(TWEETS, json={"content": "anon"})

    assert resp.status_code == 401


def test_create_rejects_bad_content(client, session) -> None:
    UserFactory(username="verbose")
    session.commit()
    headers = login_headers(client, "verbose")

    too_long = client.post(TWEETS, json={"content": "x" * 281}, headers=headers)
    blank = client.post(TWEETS, json={"content": "    "}, headers=headers)
    missing = client.post(TWEETS, json={}, headers=headers)

    assert too_long.status_code == 400
    assert too_long.get_json()["code"] == "invalid_tweet"
    assert blank.get_json()["code"] == "invalid_tweet"
    assert missing.get_json()["code"] == "validation_error"


def test_latest_is_public_and_paginated(client, session) -> None:
    author = UserFactory()
    ids = [TweetFactory(author=author).id for _ in range(3)]
    session.commit()

    first = client.get(f"{TWEETS}?limit=2").get_json()
    assert [t["id"] for t in first["data"]] == [ids[2], ids[1]]
    assert first["meta"]["has_more"] is True

    rest = client.get(f"{TWEETS}?limit=2&cursor={first['meta']['next_cursor']}").get_json()
    assert [t["id"] for t in rest["data"]] == [ids[0]]
    assert rest["meta"] == {"has_more": False, "next_cursor": None}


def test_timeline(client, session) -> None:
    me = UserFactory(username="reader")
    friend = UserFactory(username="pal")
    stranger = UserFactory()
    mine = TweetFactory(author=me).id
    theirs = TweetFactory(author=friend).id
    TweetFactory(author=stranger)
    session.commit()
    headers = login_headers(client, "reader")
    client.post("/api/v1/users/pal/follow", headers=headers)

    resp = client.get(f"{TWEETS}/timeline", headers=headers)

    assert resp.status_code == 200
    assert [t["id"] for t in resp.get_json()["data"]] == [theirs, mine]
    assert client.get(f"{TWEETS}/timeline").status_code == 401


def test_delete_tweet(client, session) -> None:
    owner = UserFactory(username="owner")
    UserFactory(username="intruder")
    AdminFactory(username="moderator")
    first = TweetFactory(author=owner).id
    second = TweetFactory(author=owner).id
    session.commit()

    forbidden = client.delete(f"{TWEETS}/{first}", headers=login_headers(client, "intruder"))
    assert forbidden.status_code == 403

    own = client.delete(f"{TWEETS}/{first}", headers=login_headers(client, "owner"))
    assert own.status_code == 204
    assert client.get(f"{TWEETS}/{first}").status_code == 404

    moderated = client.delete(f"{TWEETS}/{second}", headers=login_headers(client, "moderator"))
    assert moderated.status_code == 204


def test_unknown_tweet(client) -> None:
    assert client.get(f"{TWEETS}/999999").status_code == 404
