from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from http import HTTPStatus

import pytest

from authapi.application.services.session_manager import SessionManager
from authapi.domain.sessions.exceptions import (InvalidOrExpiredTokenError,
                                                MissingCredentialError,
                                                RefreshFailedError,
                                                SessionExpiredError,
                                                UnauthenticatedError)
from authapi.domain.users.exceptions import InvalidCredentialsError
from authapi.infrastructure.cache import InMemorySessionCache
from conftest import (DeterministicHasher, InMemoryUserRepository, ManualClock,
                      make_manager_config, make_user)


def test_issue_session_stores_record_under_user_id(
    sessions: SessionManager, users: InMemoryUserRepository, cache: InMemorySessionCache
) -> None:
    user = users.save(make_user())

    pair = sessions.issue_session(user)

    assert pair.access_token and pair.refresh_token
    assert pair.access_token != pair.refresh_token
    record = json.loads(cache.get(user.id))
    assert record["id"] == user.id
    assert record["email"] == "alice@example.com"
    assert "password_hash" not in record


def test_full_snapshot_includes_password_hash(
    users: InMemoryUserRepository, cache: InMemorySessionCache, hasher: DeterministicHasher
) -> None:
    manager = SessionManager(
        config=make_manager_config(store_full_snapshot=True),
        users=users,
        cache=cache,
        password_hasher=hasher,
    )
    user = users.save(make_user())

    manager.issue_session(user)

    assert json.loads(cache.get(user.id))["password_hash"] == "hashed:secret123"


def test_verify_access_returns_live_user(
    sessions: SessionManager, users: InMemoryUserRepository
) -> None:
    user = users.save(make_user())
    pair = sessions.issue_session(user)
    renamed = users.save(user.with_profile(name="Alice B."))

    resolved = sessions.verify_access(pair.access_token)

    assert resolved == renamed


@pytest.mark.parametrize("token", [None, ""])
def test_verify_access_without_token(sessions: SessionManager, token: str | None) -> None:
    with pytest.raises(MissingCredentialError) as exc_info:
        sessions.verify_access(token)
    assert exc_info.value.status == HTTPStatus.UNAUTHORIZED


def test_verify_access_rejects_garbage(sessions: SessionManager) -> None:
    with pytest.raises(InvalidOrExpiredTokenError):
        sessions.verify_access("not-a-token")


def test_verify_access_rejects_refresh_token(
    sessions: SessionManager, users: InMemoryUserRepository
) -> None:
    pair = sessions.issue_session(users.save(make_user()))

    with pytest.raises(InvalidOrExpiredTokenError):
        sessions.verify_access(pair.refresh_token)


def test_verify_access_rejects_expired_token(
    users: InMemoryUserRepository, cache: InMemorySessionCache, hasher: DeterministicHasher
) -> None:
    issued = datetime.now(UTC) - timedelta(hours=1)
    past = SessionManager(
        config=make_manager_config(),
        users=users,
        cache=cache,
        password_hasher=hasher,
        clock=lambda: issued,
    )
    pair = past.issue_session(users.save(make_user()))

    with pytest.raises(InvalidOrExpiredTokenError):
        past.verify_access(pair.access_token)


def test_verify_access_after_logout_reports_expired_session(
    sessions: SessionManager, users: InMemoryUserRepository
) -> None:
    user = users.save(make_user())
    pair = sessions.issue_session(user)

    sessions.logout(user)

    with pytest.raises(SessionExpiredError) as exc_info:
        sessions.verify_access(pair.access_token)
    assert exc_info.value.message == "Invalid token or session has expired"


def test_verify_access_when_user_was_deleted(
    sessions: SessionManager, users: InMemoryUserRepository
) -> None:
    user = users.save(make_user())
    pair = sessions.issue_session(user)
    users.delete(user)

    with pytest.raises(SessionExpiredError):
        sessions.verify_access(pair.access_token)


def test_session_record_expiry_revokes_tokens(
    sessions: SessionManager, users: InMemoryUserRepository, cache_clock: ManualClock
) -> None:
    pair = sessions.issue_session(users.save(make_user()))

    cache_clock.advance(timedelta(minutes=61).total_seconds())

    with pytest.raises(SessionExpiredError):
        sessions.verify_access(pair.access_token)
    with pytest.raises(RefreshFailedError):
        sessions.refresh_access(pair.refresh_token)


def test_require_user() -> None:
    user = make_user()
    assert SessionManager.require_user(user) is user
    with pytest.raises(UnauthenticatedError):
        SessionManager.require_user(None)


def test_refresh_access_issues_new_access_token(
    sessions: SessionManager, users: InMemoryUserRepository
) -> None:
    user = users.save(make_user())
    pair = sessions.issue_session(user)

    access_token = sessions.refresh_access(pair.refresh_token)

    assert sessions.verify_access(access_token) == user


@pytest.mark.parametrize("token", [None, "", "garbage"])
def test_refresh_access_rejects_bad_tokens(sessions: SessionManager, token: str | None) -> None:
    with pytest.raises(RefreshFailedError) as exc_info:
        sessions.refresh_access(token)
    assert exc_info.value.status == HTTPStatus.FORBIDDEN


def test_refresh_access_rejects_access_token(
    sessions: SessionManager, users: InMemoryUserRepository
) -> None:
    pair = sessions.issue_session(users.save(make_user()))

    with pytest.raises(RefreshFailedError):
        sessions.refresh_access(pair.access_token)


def test_refresh_after_logout_fails(
    sessions: SessionManager, users: InMemoryUserRepository
) -> None:
    user = users.save(make_user())
    pair = sessions.issue_session(user)
    sessions.logout(user)

    with pytest.raises(RefreshFailedError):
        sessions.refresh_access(pair.refresh_token)


def test_refresh_after_user_deleted_fails(
    sessions: SessionManager, users: InMemoryUserRepository
) -> None:
    user = users.save(make_user())
    pair = sessions.issue_session(user)
    users.delete(user)

    with pytest.raises(RefreshFailedError):
        sessions.refresh_access(pair.refresh_token)


def test_logout_is_idempotent(sessions: SessionManager, users: InMemoryUserRepository) -> None:
    user = users.save(make_user())
    sessions.logout(user)
    sessions.logout(user)


def test_login_again_revives_session(
    sessions: SessionManager, users: InMemoryUserRepository
) -> None:
    user = users.save(make_user())
    old_pair = sessions.issue_session(user)
    sessions.logout(user)

    sessions.issue_session(user)

    # Old tokens are tied to the user id, not to a particular login.
    assert sessions.verify_access(old_pair.access_token) == user


def test_change_password_rehashes(
    sessions: SessionManager, users: InMemoryUserRepository
) -> None:
    user = users.save(make_user())

    updated = sessions.change_password(user, "secret123", "brand-new-pass")

    assert updated.password_hash == "hashed:brand-new-pass"
    assert users.find_by_id(user.id).password_hash == "hashed:brand-new-pass"


def test_change_password_rejects_wrong_old_password(
    sessions: SessionManager, users: InMemoryUserRepository
) -> None:
    user = users.save(make_user())

    with pytest.raises(InvalidCredentialsError) as exc_info:
        sessions.change_password(user, "not-the-password", "brand-new-pass")

    assert exc_info.value.status == HTTPStatus.FORBIDDEN
    assert exc_info.value.message == "Invalid password"
    assert users.find_by_id(user.id).password_hash == "hashed:secret123"


def test_change_password_keeps_existing_session(
    sessions: SessionManager, users: InMemoryUserRepository
) -> None:
    user = users.save(make_user())
    pair = sessions.issue_session(user)

    sessions.change_password(user, "secret123", "brand-new-pass")

    assert sessions.verify_access(pair.access_token).password_hash == "hashed:brand-new-pass"


def test_refresh_does_not_extend_session_ttl(
    sessions: SessionManager,
    users: InMemoryUserRepository,
    cache: InMemorySessionCache,
    cache_clock: ManualClock,
) -> None:
    user = users.save(make_user())
    pair = sessions.issue_session(user)
    expires_at = cache._store[user.id].expires_at

    cache_clock.advance(timedelta(minutes=50).total_seconds())
    sessions.refresh_access(pair.refresh_token)
    assert cache._store[user.id].expires_at == expires_at

    cache_clock.advance(timedelta(minutes=11).total_seconds())
    with pytest.raises(RefreshFailedError):
        sessions.refresh_access(pair.refresh_token)
