# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request

from authapi.application.use_cases.users.manage_users import (DeleteUserUseCase,
                                                              GetUserUseCase,
                                                              ListUsersUseCase,
                                                              UpdateUserUseCase)
from authapi.application.use_cases.users.register_user import \
    RegisterUserUseCase
from authapi.interfaces.http.dto.auth import RegisterRequestDTO
from authapi.interfaces.http.dto.users import (UpdateUserRequestDTO,
                                               UserQueryDTO, user_payload,
                                               users_payload)
from authapi.interfaces.http.guards import AuthGuard
from authapi.shared.errors.validation import parse_payload


class UsersController:
    def __init__(
        self,
        *,
        list_users: ListUsersUseCase,
        get_user: GetUserUseCase,
        register_user: RegisterUserUseCase,
        update_user: UpdateUserUseCase,
        delete_user: DeleteUserUseCase,
        guard: AuthGuard,
    ) -> None:
        self._list_users = list_users
        self._get_user = get_user
        self._register_user = register_user
        self._update_user = update_user
        self._delete_user = delete_user
        self._guard = guard

    def list_users(self) -> tuple[Response, int]:
        query = parse_payload(UserQueryDTO, request.args.to_dict())
        users = self._list_users.execute(name=query.name, email=query.email)
        return jsonify(users_payload(users)), HTTPStatus.OK

    def get_user(self, user_id: str) -> tuple[Response, int]:
        return jsonify(user_payload(self._get_user.execute(user_id))), HTTPStatus.OK

    def create_user(self) -> tuple[Response, int]:
        dto = parse_payload(RegisterRequestDTO, request.get_json(silent=True) or {})
        user = self._register_user.execute(dto.name, dto.email, dto.password)
        return jsonify(user_payload(user)), HTTPStatus.CREATED

    def update_user(self, user_id: str) -> tuple[Response, int]:
        dto = parse_payload(UpdateUserRequestDTO, request.get_json(silent=True) or {})
        user = self._update_user.execute(user_id, name=dto.name, email=dto.email)
        return jsonify(user_payload(user)), HTTPStatus.OK

    def delete_user(self, user_id: str) -> tuple[str, int]:
        self._delete_user.execute(user_id)
        return "", HTTPStatus.NO_CONTENT

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("users", __name__, url_prefix="/api/users")
        # Every route below needs a live session.
        bp.before_request(self._guard.deserialize_user)
        bp.before_request(self._guard.require_user)
        bp.add_url_rule("", view_func=self.list_users, methods=["GET"])
        bp.add_url_rule("", view_func=self.create_user, methods=["POST"])
        bp.add_url_rule("/<user_id>", view_func=self.get_user, methods=["GET"])
        bp.add_url_rule("/<user_id>", view_func=self.update_user, methods=["PUT"])
        bp.add_url_rule("/<user_id>", view_func=self.delete_user, methods=["DELETE"])
        return bp
