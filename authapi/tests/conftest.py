from __future__ import annotations

import base64
import os
import tempfile
from datetime import UTC, datetime, timedelta

# Settings are read once and cached, so the environment must be fixed before
# anything from authapi is imported.
_TMP_DIR = tempfile.mkdtemp(prefix="authapi-tests-")
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'authapi.db')}"
os.environ["LOG_FILE"] = os.path.join(_TMP_DIR, "app.log")
os.environ["CACHE_BACKEND"] = "memory"
os.environ["ENABLE_RATE_LIMIT"] = "0"
os.environ["PASSWORD_HASH_METHOD"] = "pbkdf2:sha256:1000"

from authapi.application.services.tokens import generate_rsa_key_pair  # noqa: E402

ACCESS_PRIVATE_KEY, ACCESS_PUBLIC_KEY = generate_rsa_key_pair()
REFRESH_PRIVATE_KEY, REFRESH_PUBLIC_KEY = generate_rsa_key_pair()


def _b64(value: str) -> str:
    return base64.b64encode(value.encode("ascii")).decode("ascii")


os.environ["ACCESS_TOKEN_PRIVATE_KEY"] = _b64(ACCESS_PRIVATE_KEY)
os.environ["ACCESS_TOKEN_PUBLIC_KEY"] = _b64(ACCESS_PUBLIC_KEY)
os.environ["REFRESH_TOKEN_PRIVATE_KEY"] = _b64(REFRESH_PRIVATE_KEY)
os.environ["REFRESH_TOKEN_PUBLIC_KEY"] = _b64(REFRESH_PUBLIC_KEY)

import pytest  # noqa: E402

from authapi.application.services.session_manager import (  # noqa: E402
    SessionManager, SessionManagerConfig)
from authapi.domain.users.entities import User  # noqa: E402
from authapi.domain.users.repositories import (PasswordHasher,  # noqa: E402
                                               UserRepository)
from authapi.infrastructure.cache import InMemorySessionCache  # noqa: E402


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def find_by_id(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def find_by_email(self, email: str) -> User | None:
        return next((u for u in self._users.values() if u.email == email), None)

    def find_all(self, *, name: str | None = None, email: str | None = None) -> list[User]:
        return [
            u
            for u in self._users.values()
            if (name is None or u.name == name) and (email is None or u.email == email)
        ]

    def save(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def delete(self, user: User) -> None:
        self._users.pop(user.id, None)


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


class ManualClock:
    """Monotonic seconds that only move when a test says so."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_user(
    user_id: str = "user-1",
    *,
    name: str = "Alice",
    email: str = "alice@example.com",
    password: str = "secret123",
) -> User:
    now = datetime.now(UTC)
    return User(
        id=user_id,
        name=name,
        email=email,
        password_hash=f"hashed:{password}",
        created_at=now,
        updated_at=now,
    )


def make_manager_config(**overrides) -> SessionManagerConfig:
    values = {
        "access_private_key": ACCESS_PRIVATE_KEY,
        "access_public_key": ACCESS_PUBLIC_KEY,
        "refresh_private_key": REFRESH_PRIVATE_KEY,
        "refresh_public_key": REFRESH_PUBLIC_KEY,
        "access_ttl": timedelta(minutes=15),
        "refresh_ttl": timedelta(minutes=60),
        "session_ttl": timedelta(minutes=60),
    }
    values.update(overrides)
    return SessionManagerConfig(**values)


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def cache_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def cache(cache_clock: ManualClock) -> InMemorySessionCache:
    return InMemorySessionCache(clock=cache_clock)


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def sessions(
    users: InMemoryUserRepository,
    cache: InMemorySessionCache,
    hasher: DeterministicHasher,
) -> SessionManager:
    return SessionManager(
        config=make_manager_config(),
        users=users,
        cache=cache,
        password_hasher=hasher,
    )
