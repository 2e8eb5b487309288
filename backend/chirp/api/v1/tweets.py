"""Tweet endpoints."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from chirp.api.deps import (
    current_claims,
    json_response,
    parse_cursor,
    require_auth,
    service_context,
    timing,
)
from chirp.schemas import TweetCreateSchema, TweetSchema, build_cursor_meta
from chirp.services._shared.dto import CursorPageOut
from chirp.services._shared.errors import ServiceError
from chirp.services.tweets.dto import TweetCreateIn, TweetOut
from chirp.services.tweets.service import TweetService

bp = Blueprint("tweets", __name__, url_prefix="/tweets")

tweet_schema = TweetSchema()
tweet_list_schema = TweetSchema(many=True)
tweet_create_schema = TweetCreateSchema()


def _service() -> TweetService:
    return TweetService(
        ctx=service_context(),
        max_length=int(current_app.config.get("TWEET_MAX_LENGTH", 280)),
    )


def _page_body(result: CursorPageOut[TweetOut]) -> dict:
    meta = build_cursor_meta(has_more=result.has_more, next_cursor=result.next_cursor)
    return {"data": tweet_list_schema.dump(result.items), "meta": meta}


@bp.post("")
@require_auth
@timing
def create_tweet():
    """Publish a tweet as the authenticated user."""

    payload = tweet_create_schema.load(request.get_json(silent=True) or {})
    service = _service()
    try:
        tweet = service.create(
            TweetCreateIn(author_id=current_claims().principal_id, content=payload["content"])
        )
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"data": tweet_schema.dump(tweet)}, status=201)


@bp.get("")
@timing
def list_tweets():
    """Newest tweets from everyone."""

    page = parse_cursor()
    service = _service()
    try:
        result = service.latest(page)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response(_page_body(result))


@bp.get("/timeline")
@require_auth
@timing
def timeline():
    """The caller's own tweets plus those of users they follow."""

    page = parse_cursor()
    service = _service()
    try:
        result = service.timeline(current_claims().principal_id, page)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response(_page_body(result))


@bp.get("/<int:tweet_id>")
@timing
def get_tweet(tweet_id: int):
    """Return a single tweet."""

    service = _service()
    try:
        tweet = service.get(tweet_id)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"data": tweet_schema.dump(tweet)})


@bp.delete("/<int:tweet_id>")
@require_auth
@timing
def delete_tweet(tweet_id: int):
    """Delete a tweet written by the caller (administrators may delete any)."""

    service = _service()
    try:
        service.delete(tweet_id)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return "", 204
