from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import auth_required, to_json
from ..container import Container
from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..core.exceptions import ValidationError
from ..core.policy import Operation


def register(app: Flask, container: Container) -> None:
    gateway = container.identity_gateway
    service = container.notification_service

    @app.route("/api/notifications", methods=["GET"], endpoint="notifications_list")
    @auth_required(gateway, Operation.READ_NOTIFICATIONS)
    def notifications_list(principal):
        try:
            limit = int(request.args.get("limit", DEFAULT_NOTIFICATION_LIMIT))
        except ValueError:
            raise ValidationError("'limit' must be an integer")
        return jsonify(to_json(service.list_notifications(user_id=principal.user_id, limit=limit)))

    @app.route("/api/notifications/unread-count", methods=["GET"], endpoint="notifications_unread_count")
    @auth_required(gateway, Operation.READ_NOTIFICATIONS)
    def notifications_unread_count(principal):
        return jsonify({"unread": service.unread_count(user_id=principal.user_id)})

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="notifications_mark_read")
    @auth_required(gateway, Operation.READ_NOTIFICATIONS)
    def notifications_mark_read(notification_id: int, principal):
        service.mark_as_read(notification_id=notification_id, user_id=principal.user_id)
        return jsonify({"ok": True})

    @app.route("/api/notifications/read-all", methods=["POST"], endpoint="notifications_mark_all_read")
    @auth_required(gateway, Operation.READ_NOTIFICATIONS)
    def notifications_mark_all_read(principal):
        return jsonify({"updated": service.mark_all_as_read(user_id=principal.user_id)})
