from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import auth_required, int_field, json_body, require_field, require_owner_or_admin, to_json
from ..container import Container
from ..core.policy import Operation


def register(app: Flask, container: Container) -> None:
    gateway = container.identity_gateway
    service = container.attendance_service

    @app.route("/api/events/<int:event_id>/attendance", methods=["POST"], endpoint="attendance_record")
    @auth_required(gateway, Operation.RECORD_ATTENDANCE)
    def attendance_record(event_id: int, principal):
        data = json_body()
        record = service.record_attendance(event_id, int_field(data, "user_id"), require_field(data, "action"))
        return jsonify(to_json(record))

    @app.route("/api/events/<int:event_id>/attendance/scan", methods=["POST"], endpoint="attendance_scan")
    @auth_required(gateway, Operation.RECORD_ATTENDANCE)
    def attendance_scan(event_id: int, principal):
        data = json_body()
        record = service.record_scan(event_id, str(require_field(data, "qr_code")), data.get("action", "check_in"))
        return jsonify(to_json(record))

    @app.route("/api/events/<int:event_id>/attendance", methods=["GET"], endpoint="attendance_by_event")
    @auth_required(gateway, Operation.LIST_EVENT_ATTENDANCE)
    def attendance_by_event(event_id: int, principal):
        return jsonify(to_json(service.list_by_event(event_id)))

    @app.route("/api/attendance/<int:attendance_id>/status", methods=["PUT"], endpoint="attendance_update_status")
    @auth_required(gateway, Operation.UPDATE_ATTENDANCE_STATUS)
    def attendance_update_status(attendance_id: int, principal):
        data = json_body()
        record = service.update_attendance_status(attendance_id, require_field(data, "status"))
        return jsonify(to_json(record))

    @app.route("/api/users/<int:user_id>/attendance", methods=["GET"], endpoint="attendance_by_user")
    @auth_required(gateway, Operation.VIEW_OWN_ATTENDANCE)
    def attendance_by_user(user_id: int, principal):
        require_owner_or_admin(principal, user_id)
        return jsonify(to_json(service.list_by_user(user_id)))
