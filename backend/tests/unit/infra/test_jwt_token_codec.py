"""Unit tests for the PyJWT token codec."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from chirp.infra.jwt.jwt_token_codec import JWTTokenCodec
from chirp.models.user import Role
from chirp.services._shared.ports.token_codec import (
    AccessClaims,
    TokenConfig,
    TokenFailure,
    TokenVerificationError,
)


def _clock_at(moment: datetime):
    return lambda: moment


@pytest.fixture()
def codec(token_config) -> JWTTokenCodec:
    return JWTTokenCodec(token_config)


@pytest.fixture()
def claims() -> AccessClaims:
    return AccessClaims(principal_id=42, username="alice", role=Role.USER)


class TestIssueAndVerify:
    def test_access_token_round_trips_identity(self, codec, claims):
        token = codec.issue_access_token(claims)

        verified = codec.verify_access_token(token)
        assert verified.principal_id == 42
        assert verified.username == "alice"
        assert verified.role is Role.USER
        assert verified.expires_at - verified.issued_at == timedelta(minutes=15)

    def test_refresh_token_carries_principal_only(self, codec, token_config):
        token = codec.issue_refresh_token(7)

        verified = codec.verify_refresh_token(token)
        assert verified.principal_id == 7
        payload = jwt.decode(token, token_config.refresh_secret, algorithms=["HS256"])
        assert "username" not in payload
        assert "role" not in payload
        assert payload["sub"] == "7"
        assert payload["type"] == "refresh"

    def test_access_payload_shape(self, codec, claims, token_config):
        token = codec.issue_access_token(claims)

        payload = jwt.decode(token, token_config.access_secret, algorithms=["HS256"])
        assert payload["sub"] == "42"
        assert payload["role"] == "USER"
        assert payload["type"] == "access"
        assert {"iat", "exp", "jti"} <= payload.keys()

    def test_tokens_issued_in_same_second_differ(self, token_config, claims):
        fixed = JWTTokenCodec(token_config, clock=_clock_at(datetime.now(UTC)))

        assert fixed.issue_access_token(claims) != fixed.issue_access_token(claims)
        assert fixed.issue_refresh_token(1) != fixed.issue_refresh_token(1)


class TestFailures:
    def test_expired_access_token_reports_expired(self, token_config, claims):
        past = datetime.now(UTC) - timedelta(hours=1)
        issuer = JWTTokenCodec(token_config, clock=_clock_at(past))
        token = issuer.issue_access_token(claims)

        with pytest.raises(TokenVerificationError) as err:
            JWTTokenCodec(token_config).verify_access_token(token)
        assert err.value.failure is TokenFailure.EXPIRED

    def test_expired_refresh_token_reports_expired(self, token_config):
        past = datetime.now(UTC) - timedelta(days=8)
        token = JWTTokenCodec(token_config, clock=_clock_at(past)).issue_refresh_token(1)

        with pytest.raises(TokenVerificationError) as err:
            JWTTokenCodec(token_config).verify_refresh_token(token)
        assert err.value.failure is TokenFailure.EXPIRED

    def test_secrets_are_not_interchangeable(self, codec, claims):
        access = codec.issue_access_token(claims)
        refresh = codec.issue_refresh_token(42)

        with pytest.raises(TokenVerificationError) as err:
            codec.verify_refresh_token(access)
        assert err.value.failure is TokenFailure.INVALID

        with pytest.raises(TokenVerificationError) as err:
            codec.verify_access_token(refresh)
        assert err.value.failure is TokenFailure.INVALID

    def test_same_secret_still_checks_token_type(self, claims):
        shared = TokenConfig(access_secret="s" * 40, refresh_secret="s" * 40)
        codec = JWTTokenCodec(shared)

        with pytest.raises(TokenVerificationError, match="Expected a access token"):
            codec.verify_access_token(codec.issue_refresh_token(1))

    def test_foreign_signature_is_invalid(self, codec, claims):
        other = JWTTokenCodec(TokenConfig(access_secret="x" * 40, refresh_secret="y" * 40))
        token = other.issue_access_token(claims)

        with pytest.raises(TokenVerificationError) as err:
            codec.verify_access_token(token)
        assert err.value.failure is TokenFailure.INVALID

    @pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c"])
    def test_garbage_is_invalid(self, codec, garbage):
        with pytest.raises(TokenVerificationError) as err:
            codec.verify_access_token(garbage)
        assert err.value.failure is TokenFailure.INVALID

    def test_missing_username_claim_is_invalid(self, codec, token_config):
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "1", "type": "access", "role": "USER", "iat": now, "exp": now + timedelta(minutes=5)},
            token_config.access_secret,
            algorithm="HS256",
        )

        with pytest.raises(TokenVerificationError) as err:
            codec.verify_access_token(token)
        assert err.value.failure is TokenFailure.INVALID

    def test_token_without_exp_is_accepted_without_expiry(self, codec, token_config):
        token = jwt.encode(
            {"sub": "1", "type": "access", "username": "u", "role": "USER", "iat": datetime.now(UTC)},
            token_config.access_secret,
            algorithm="HS256",
        )

        verified = codec.verify_access_token(token)
        assert verified.expires_at is None


def test_token_config_repr_hides_secrets(token_config):
    text = repr(token_config)
    assert token_config.access_secret not in text
    assert token_config.refresh_secret not in text
