# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from authapi.application.services.password_hashing import \
    WerkzeugPasswordHasher
from authapi.application.services.session_manager import (SessionManager,
                                                           SessionManagerConfig)
from authapi.application.use_cases.users.change_password import \
    ChangePasswordUseCase
from authapi.application.use_cases.users.login_user import LoginUserUseCase
from authapi.application.use_cases.users.logout_user import LogoutUserUseCase
from authapi.application.use_cases.users.manage_users import (DeleteUserUseCase,
                                                              GetUserUseCase,
                                                              ListUsersUseCase,
                                                              UpdateUserUseCase)
from authapi.application.use_cases.users.refresh_access_token import \
    RefreshAccessTokenUseCase
from authapi.application.use_cases.users.register_user import \
    RegisterUserUseCase
from authapi.domain.sessions.repositories import SessionCache
from authapi.infrastructure.cache import InMemorySessionCache
from authapi.infrastructure.redis_cache import RedisSessionCache
from authapi.infrastructure.repositories.users.sqlalchemy_user_repository import \
    SqlAlchemyUserRepository
from authapi.interfaces.http.controllers.auth_controller import AuthController
from authapi.interfaces.http.controllers.misc_controller import MiscController
from authapi.interfaces.http.controllers.users_controller import \
    UsersController
from authapi.interfaces.http.cookies import SessionCookies
from authapi.interfaces.http.guards import AuthGuard
from authapi.shared.config import AppConfig, load_config
from authapi.shared.logging import logger


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or load_config()

    @property
    def config(self) -> AppConfig:
        return self._config

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher(self._config.security.password_hash_method)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository()

    @cached_property
    def session_cache(self) -> SessionCache:
        if self._config.cache.backend == "redis":
            logger.info("session.cache: using redis")
            return RedisSessionCache.from_url(self._config.cache.redis_url)
        logger.info("session.cache: using in-memory store")
        return InMemorySessionCache()

    @cached_property
    def session_manager(self) -> SessionManager:
        return SessionManager(
            config=SessionManagerConfig.from_settings(
                self._config.tokens, self._config.cache
            ),
            users=self.user_repository,
            cache=self.session_cache,
            password_hasher=self.password_hasher,
        )

    # Use cases

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            sessions=self.session_manager,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(sessions=self.session_manager)

    @cached_property
    def refresh_access_token_use_case(self) -> RefreshAccessTokenUseCase:
        return RefreshAccessTokenUseCase(sessions=self.session_manager)

    @cached_property
    def change_password_use_case(self) -> ChangePasswordUseCase:
        return ChangePasswordUseCase(sessions=self.session_manager)

    @cached_property
    def list_users_use_case(self) -> ListUsersUseCase:
        return ListUsersUseCase(users=self.user_repository)

    @cached_property
    def get_user_use_case(self) -> GetUserUseCase:
        return GetUserUseCase(users=self.user_repository)

    @cached_property
    def update_user_use_case(self) -> UpdateUserUseCase:
        return UpdateUserUseCase(users=self.user_repository)

    @cached_property
    def delete_user_use_case(self) -> DeleteUserUseCase:
        return DeleteUserUseCase(users=self.user_repository)

    # HTTP

    @cached_property
    def auth_guard(self) -> AuthGuard:
        return AuthGuard(self.session_manager)

    @cached_property
    def session_cookies(self) -> SessionCookies:
        manager_config = self.session_manager.config
        return SessionCookies(
            access_max_age=manager_config.access_ttl,
            refresh_max_age=manager_config.refresh_ttl,
            secure=self._config.security.cookie_secure,
            samesite=self._config.security.cookie_samesite,
        )

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            refresh_use_case=self.refresh_access_token_use_case,
            change_password_use_case=self.change_password_use_case,
            guard=self.auth_guard,
            cookies=self.session_cookies,
        )

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(
            list_users=self.list_users_use_case,
            get_user=self.get_user_use_case,
            register_user=self.register_user_use_case,
            update_user=self.update_user_use_case,
            delete_user=self.delete_user_use_case,
            guard=self.auth_guard,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(cache=self.session_cache)
