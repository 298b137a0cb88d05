from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import auth_required, json_body, require_field, require_owner_or_admin
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..core.policy import Operation
from .model import User


def _user_json(user: User) -> dict:
    return {
        "user_id": user.user_id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "department": user.department,
        "student_id": user.student_id,
        "qr_code": user.qr_code,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


def register(app: Flask, container: Container) -> None:
    gateway = container.identity_gateway

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        data = json_body()
        user_id = container.user_service.register(
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            student_id=data.get("student_id"),
            department=data.get("department"),
        )
        return jsonify(_user_json(container.user_service.get_user(user_id))), 201

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        data = json_body()
        principal, token = container.auth_service.login(data.get("email", ""), data.get("password", ""))
        return jsonify({"token": token, "user_id": principal.user_id, "role": principal.role.value})

    @app.route("/api/users/me", methods=["GET"], endpoint="users_me")
    @auth_required(gateway)
    def users_me(principal):
        return jsonify(_user_json(container.user_service.get_user(principal.user_id)))

    @app.route("/api/users/me/password", methods=["PUT"], endpoint="users_change_password")
    @auth_required(gateway)
    def users_change_password(principal):
        data = json_body()
        container.auth_service.change_password(
            principal.user_id,
            data.get("current_password", ""),
            data.get("new_password", ""),
            data.get("confirm_password", ""),
        )
        return jsonify({"message": "Password updated successfully"})

    @app.route("/api/users", methods=["GET"], endpoint="users_list")
    @auth_required(gateway, Operation.VIEW_ANY_USER_DATA)
    def users_list(principal):
        return jsonify([_user_json(u) for u in container.user_service.list_users()])

    @app.route("/api/users/<int:user_id>", methods=["GET"], endpoint="users_get")
    @auth_required(gateway)
    def users_get(user_id: int, principal):
        require_owner_or_admin(principal, user_id)
        return jsonify(_user_json(container.user_service.get_user(user_id)))

    @app.route("/api/users/<int:user_id>/profile", methods=["PUT"], endpoint="users_update_profile")
    @auth_required(gateway)
    def users_update_profile(user_id: int, principal):
        require_owner_or_admin(principal, user_id)
        data = json_body()
        container.user_service.update_profile(
            user_id=user_id,
            name=data.get("name", ""),
            department=data.get("department"),
            student_id=data.get("student_id"),
        )
        return jsonify(_user_json(container.user_service.get_user(user_id)))

    @app.route("/api/users/<int:user_id>/role", methods=["PUT"], endpoint="users_change_role")
    @auth_required(gateway, Operation.CHANGE_USER_ROLE)
    def users_change_role(user_id: int, principal):
        data = json_body()
        try:
            role = Role(require_field(data, "role"))
        except ValueError:
            raise ValidationError("Unknown role")
        container.user_service.change_role(user_id=user_id, role=role)
        return jsonify(_user_json(container.user_service.get_user(user_id)))

    @app.route("/api/users/<int:user_id>/qr-code", methods=["POST"], endpoint="users_assign_qr_code")
    @auth_required(gateway)
    def users_assign_qr_code(user_id: int, principal):
        require_owner_or_admin(principal, user_id)
        qr_code = container.user_service.assign_qr_code(user_id=user_id)
        return jsonify({"user_id": user_id, "qr_code": qr_code})
