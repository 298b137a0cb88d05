from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import auth_required, int_field, json_body, require_owner_or_admin, to_json
from ..container import Container
from ..core.policy import Operation


def register(app: Flask, container: Container) -> None:
    gateway = container.identity_gateway
    service = container.points_service

    @app.route("/api/users/<int:user_id>/points", methods=["POST"], endpoint="points_award")
    @auth_required(gateway, Operation.AWARD_POINTS)
    def points_award(user_id: int, principal):
        data = json_body()
        entry_id = service.award_points(
            user_id=user_id,
            points=int_field(data, "points"),
            reason=data.get("reason", ""),
            assigned_by=principal.user_id,
        )
        return jsonify({"entry_id": entry_id, "total": service.total_points(user_id)}), 201

    @app.route("/api/users/<int:user_id>/points", methods=["GET"], endpoint="points_for_user")
    @auth_required(gateway, Operation.VIEW_OWN_POINTS)
    def points_for_user(user_id: int, principal):
        require_owner_or_admin(principal, user_id)
        return jsonify({"total": service.total_points(user_id), "entries": to_json(service.list_points(user_id))})
