"""Unit tests for the session core (login, refresh, logout, authenticate)."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from chirp.infra.jwt.jwt_token_codec import JWTTokenCodec
from chirp.models.user import Role
from chirp.services._shared.errors import AuthError, AuthErrorKind, LedgerError
from chirp.services._shared.ports.revocation_ledger import InMemoryRevocationLedger
from chirp.services._shared.ports.token_codec import AccessClaims
from chirp.services.auth.dto import LoginIn, LogoutIn, RefreshIn, TokenPairOut
from chirp.services.auth.service import FALLBACK_REVOCATION_TTL, AuthService
from tests.factories.user import UserFactory


class _FailingLedger(InMemoryRevocationLedger):
    """Ledger whose store is unreachable."""

    def record(self, token, expires_at):
        raise LedgerError("store down")

    def is_revoked(self, token):
        raise LedgerError("store down")

    def sweep_expired(self):
        raise LedgerError("store down")


class _RecordFailsLedger(InMemoryRevocationLedger):
    def record(self, token, expires_at):
        raise LedgerError("write failed")


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def codec(token_config) -> JWTTokenCodec:
    return JWTTokenCodec(token_config)


@pytest.fixture()
def ledger() -> InMemoryRevocationLedger:
    return InMemoryRevocationLedger()


@pytest.fixture()
def service(codec, ledger) -> AuthService:
    """AuthService wired to the real codec and an in-memory ledger."""
    return AuthService(token_codec=codec, ledger=ledger)


@pytest.fixture()
def alice(session):
    user = UserFactory(username="alice", email="alice@example.com", password="s3cretpass")
    session.commit()
    return user


def _kind(excinfo) -> AuthErrorKind:
    return excinfo.value.kind


# -------------------------------- Login ----------------------------------- #
class TestLogin:
    def test_login_by_username_issues_pair(self, service, alice):
        pair = service.login(LoginIn(identifier="alice", password="s3cretpass"))

        assert isinstance(pair, TokenPairOut)
        assert pair.user.id == alice.id
        assert pair.user.username == "alice"
        claims = service.authenticate(pair.access_token)
        assert claims.principal_id == alice.id
        assert claims.role is Role.USER

    def test_login_by_email_is_equivalent(self, service, alice):
        pair = service.login(LoginIn(identifier="alice@example.com", password="s3cretpass"))

        assert pair.user.id == alice.id

    def test_user_projection_never_contains_password_hash(self, service, alice):
        pair = service.login(LoginIn(identifier="alice", password="s3cretpass"))

        assert not hasattr(pair.user, "password_hash")

    @pytest.mark.parametrize(
        "identifier,password",
        [("alice", "wrong-password"), ("nobody", "s3cretpass"), ("", "s3cretpass")],
    )
    def test_failures_are_indistinguishable(self, service, alice, identifier, password):
        with pytest.raises(AuthError) as err:
            service.login(LoginIn(identifier=identifier, password=password))

        assert _kind(err) is AuthErrorKind.INVALID_CREDENTIALS
        assert err.value.message == "Invalid username/email or password"

    def test_inactive_user_cannot_log_in(self, service, session):
        UserFactory(username="sleepy", is_active=False)
        session.commit()

        with pytest.raises(AuthError) as err:
            service.login(LoginIn(identifier="sleepy", password="password123"))
        assert _kind(err) is AuthErrorKind.INVALID_CREDENTIALS

    def test_login_repr_masks_password(self):
        assert "hunter2" not in repr(LoginIn(identifier="a", password="hunter2"))


# ------------------------------- Refresh ---------------------------------- #
class TestRefresh:
    def test_refresh_returns_new_pair_and_keeps_old_token_usable(self, service, alice):
        first = service.login(LoginIn(identifier="alice", password="s3cretpass"))

        second = service.refresh(RefreshIn(refresh_token=first.refresh_token))
        third = service.refresh(RefreshIn(refresh_token=first.refresh_token))

        assert second.refresh_token != first.refresh_token
        assert second.access_token != first.access_token
        assert third.user.id == alice.id

    def test_refresh_picks_up_current_role(self, service, alice, session):
        pair = service.login(LoginIn(identifier="alice", password="s3cretpass"))
        alice.role = Role.ADMIN
        session.commit()

        refreshed = service.refresh(RefreshIn(refresh_token=pair.refresh_token))

        assert service.authenticate(refreshed.access_token).role is Role.ADMIN

    def test_access_token_is_not_a_refresh_token(self, service, alice):
        pair = service.login(LoginIn(identifier="alice", password="s3cretpass"))

        with pytest.raises(AuthError) as err:
            service.refresh(RefreshIn(refresh_token=pair.access_token))
        assert _kind(err) is AuthErrorKind.INVALID_REFRESH_TOKEN

    def test_expired_refresh_token(self, token_config, ledger, alice):
        past = datetime.now(UTC) - timedelta(days=8)
        old_codec = JWTTokenCodec(token_config, clock=lambda: past)
        token = old_codec.issue_refresh_token(alice.id)
        service = AuthService(token_codec=JWTTokenCodec(token_config), ledger=ledger)

        with pytest.raises(AuthError) as err:
            service.refresh(RefreshIn(refresh_token=token))
        assert _kind(err) is AuthErrorKind.REFRESH_TOKEN_EXPIRED

    def test_revoked_refresh_token_is_invalid(self, service, ledger, alice):
        pair = service.login(LoginIn(identifier="alice", password="s3cretpass"))
        ledger.record(pair.refresh_token, datetime.now(UTC) + timedelta(days=7))

        with pytest.raises(AuthError) as err:
            service.refresh(RefreshIn(refresh_token=pair.refresh_token))
        assert _kind(err) is AuthErrorKind.INVALID_REFRESH_TOKEN

    def test_unknown_principal_is_user_not_found(self, service, codec):
        token = codec.issue_refresh_token(999_999)

        with pytest.raises(AuthError) as err:
            service.refresh(RefreshIn(refresh_token=token))
        assert _kind(err) is AuthErrorKind.USER_NOT_FOUND

    def test_deactivated_user_is_user_not_found(self, service, alice, session):
        pair = service.login(LoginIn(identifier="alice", password="s3cretpass"))
        alice.is_active = False
        session.commit()

        with pytest.raises(AuthError) as err:
            service.refresh(RefreshIn(refresh_token=pair.refresh_token))
        assert _kind(err) is AuthErrorKind.USER_NOT_FOUND

    def test_garbage_refresh_token(self, service):
        with pytest.raises(AuthError) as err:
            service.refresh(RefreshIn(refresh_token="garbage"))
        assert _kind(err) is AuthErrorKind.INVALID_REFRESH_TOKEN


# ---------------------------- Authenticate -------------------------------- #
class TestAuthenticate:
    def test_expired_access_token(self, token_config, ledger):
        past = datetime.now(UTC) - timedelta(hours=1)
        token = JWTTokenCodec(token_config, clock=lambda: past).issue_access_token(
            AccessClaims(principal_id=1, username="x", role=Role.USER)
        )
        service = AuthService(token_codec=JWTTokenCodec(token_config), ledger=ledger)

        with pytest.raises(AuthError) as err:
            service.authenticate(token)
        assert _kind(err) is AuthErrorKind.TOKEN_EXPIRED

    def test_garbage_access_token(self, service):
        with pytest.raises(AuthError) as err:
            service.authenticate("nope")
        assert _kind(err) is AuthErrorKind.INVALID_TOKEN

    def test_refresh_token_is_not_an_access_token(self, service, codec):
        with pytest.raises(AuthError) as err:
            service.authenticate(codec.issue_refresh_token(1))
        assert _kind(err) is AuthErrorKind.INVALID_TOKEN

    def test_ledger_failure_is_internal(self, codec):
        service = AuthService(token_codec=codec, ledger=_FailingLedger())
        token = codec.issue_access_token(AccessClaims(principal_id=1, username="x", role=Role.USER))

        with pytest.raises(AuthError) as err:
            service.authenticate(token)
        assert _kind(err) is AuthErrorKind.INTERNAL_ERROR

    def test_ledger_not_consulted_for_bad_signature(self, codec):
        service = AuthService(token_codec=codec, ledger=_FailingLedger())

        with pytest.raises(AuthError) as err:
            service.authenticate("not.a.token")
        assert _kind(err) is AuthErrorKind.INVALID_TOKEN


# -------------------------------- Logout ---------------------------------- #
class TestLogout:
    def test_logout_revokes_until_token_expiry(self, service, ledger, alice):
        pair = service.login(LoginIn(identifier="alice", password="s3cretpass"))
        claims = service.authenticate(pair.access_token)

        service.logout(LogoutIn(access_token=pair.access_token))

        assert ledger.is_revoked(pair.access_token)
        assert ledger.expiry_of(pair.access_token) == claims.expires_at
        with pytest.raises(AuthError) as err:
            service.authenticate(pair.access_token)
        assert _kind(err) is AuthErrorKind.INVALID_TOKEN

    def test_logout_is_idempotent(self, service, ledger, alice):
        pair = service.login(LoginIn(identifier="alice", password="s3cretpass"))

        service.logout(LogoutIn(access_token=pair.access_token))
        service.logout(LogoutIn(access_token=pair.access_token))

        assert ledger.is_revoked(pair.access_token)

    def test_logout_does_not_affect_other_sessions(self, service, alice):
        first = service.login(LoginIn(identifier="alice", password="s3cretpass"))
        second = service.login(LoginIn(identifier="alice", password="s3cretpass"))

        service.logout(LogoutIn(access_token=first.access_token))

        assert service.authenticate(second.access_token).principal_id == alice.id

    def test_logout_leaves_refresh_token_working(self, service, alice):
        pair = service.login(LoginIn(identifier="alice", password="s3cretpass"))

        service.logout(LogoutIn(access_token=pair.access_token))

        assert service.refresh(RefreshIn(refresh_token=pair.refresh_token)).user.id == alice.id

    def test_logout_with_garbage_or_expired_token_is_noop(self, token_config, ledger):
        past = datetime.now(UTC) - timedelta(hours=1)
        expired = JWTTokenCodec(token_config, clock=lambda: past).issue_access_token(
            AccessClaims(principal_id=1, username="x", role=Role.USER)
        )
        service = AuthService(token_codec=JWTTokenCodec(token_config), ledger=ledger)

        service.logout(LogoutIn(access_token="garbage"))
        service.logout(LogoutIn(access_token=expired))

        assert not ledger.is_revoked("garbage")
        assert not ledger.is_revoked(expired)

    def test_logout_ledger_write_failure_is_internal(self, codec):
        service = AuthService(token_codec=codec, ledger=_RecordFailsLedger())
        token = codec.issue_access_token(AccessClaims(principal_id=1, username="x", role=Role.USER))

        with pytest.raises(AuthError) as err:
            service.logout(LogoutIn(access_token=token))
        assert _kind(err) is AuthErrorKind.INTERNAL_ERROR

    def test_logout_ledger_read_failure_is_internal(self, codec):
        service = AuthService(token_codec=codec, ledger=_FailingLedger())
        token = codec.issue_access_token(AccessClaims(principal_id=1, username="x", role=Role.USER))

        with pytest.raises(AuthError) as err:
            service.logout(LogoutIn(access_token=token))
        assert _kind(err) is AuthErrorKind.INTERNAL_ERROR

    def test_fallback_expiry_when_token_has_no_exp(self, ledger):
        class _NoExpCodec:
            def verify_access_token(self, token):
                return AccessClaims(principal_id=1, username="x", role=Role.USER)

        service = AuthService(token_codec=_NoExpCodec(), ledger=ledger)
        before = datetime.now(UTC)

        service.logout(LogoutIn(access_token="opaque"))

        expiry = ledger.expiry_of("opaque")
        assert expiry is not None
        assert before + FALLBACK_REVOCATION_TTL <= expiry <= datetime.now(UTC) + FALLBACK_REVOCATION_TTL


# -------------------------------- Sweep ----------------------------------- #
def test_sweep_delegates_to_ledger(codec):
    now = datetime.now(UTC)
    ledger = InMemoryRevocationLedger(clock=lambda: now)
    ledger.record("a", now - timedelta(minutes=1))
    ledger.record("b", now + timedelta(minutes=1))
    service = AuthService(token_codec=codec, ledger=ledger)

    assert service.sweep_expired() == 1


def test_sweep_failure_is_internal(codec):
    service = AuthService(token_codec=codec, ledger=_FailingLedger())

    with pytest.raises(AuthError) as err:
        service.sweep_expired()
    assert _kind(err) is AuthErrorKind.INTERNAL_ERROR
