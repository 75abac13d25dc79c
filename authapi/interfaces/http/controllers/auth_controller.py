# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request

from authapi.application.use_cases.users.change_password import ChangePasswordUseCase
from authapi.application.use_cases.users.login_user import LoginUserUseCase
from authapi.application.use_cases.users.logout_user import LogoutUserUseCase
from authapi.application.use_cases.users.refresh_access_token import \
    RefreshAccessTokenUseCase
from authapi.application.use_cases.users.register_user import \
    RegisterUserUseCase
from authapi.interfaces.http.cookies import SessionCookies
from authapi.interfaces.http.dto.auth import (ChangePasswordRequestDTO,
                                              LoginRequestDTO,
                                              LoginSuccessDTO,
                                              RegisterRequestDTO, StatusDTO)
from authapi.interfaces.http.dto.users import user_payload
from authapi.interfaces.http.guards import REFRESH_COOKIE, AuthGuard, current_user
from authapi.shared.errors.validation import parse_payload
from authapi.shared.logging import logger
from authapi.shared.middleware.rate_limit import rate_limit


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        refresh_use_case: RefreshAccessTokenUseCase,
        change_password_use_case: ChangePasswordUseCase,
        guard: AuthGuard,
        cookies: SessionCookies,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._refresh_use_case = refresh_use_case
        self._change_password_use_case = change_password_use_case
        self._guard = guard
        self._cookies = cookies

    @rate_limit(limit=5, window_seconds=60.0)
    def register(self) -> tuple[Response, int]:
        dto = parse_payload(RegisterRequestDTO, request.get_json(silent=True) or {})

        user = self._register_use_case.execute(dto.name, dto.email, dto.password)

        logger.info(f"auth.register: ok user_id={user.id}")
        return jsonify(user_payload(user)), HTTPStatus.CREATED

    @rate_limit(limit=10, window_seconds=60.0)
    def login(self) -> tuple[Response, int]:
        dto = parse_payload(LoginRequestDTO, request.get_json(silent=True) or {})

        result = self._login_use_case.execute(dto.email, dto.password)

        payload = LoginSuccessDTO(access_token=result.tokens.access_token)
        response = jsonify(payload.model_dump(by_alias=True))
        self._cookies.attach(
            response, result.tokens.access_token, result.tokens.refresh_token
        )
        logger.info(f"auth.login: ok user_id={result.user.id}")
        return response, HTTPStatus.OK

    def logout(self) -> tuple[Response, int]:
        user = current_user()
        self._logout_use_case.execute(user)

        response = jsonify(StatusDTO().model_dump())
        self._cookies.clear(response)
        logger.info(f"auth.logout: ok user_id={user.id}")
        return response, HTTPStatus.OK

    def refresh(self) -> tuple[Response, int]:
        access_token = self._refresh_use_case.execute(request.cookies.get(REFRESH_COOKIE))

        payload = LoginSuccessDTO(access_token=access_token)
        response = jsonify(payload.model_dump(by_alias=True))
        self._cookies.attach(response, access_token)
        return response, HTTPStatus.OK

    def change_password(self) -> tuple[Response, int]:
        dto = parse_payload(ChangePasswordRequestDTO, request.get_json(silent=True) or {})

        user = self._change_password_use_case.execute(
            current_user(), dto.old_password, dto.password
        )

        logger.info(f"auth.change_password: ok user_id={user.id}")
        return jsonify(user_payload(user)), HTTPStatus.OK

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule(
            "/logout", view_func=self._guard.protect(self.logout), methods=["GET"]
        )
        bp.add_url_rule("/refresh", view_func=self.refresh, methods=["GET"])
        bp.add_url_rule(
            "/reset", view_func=self._guard.protect(self.change_password), methods=["PUT"]
        )
        return bp
