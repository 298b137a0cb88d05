from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import auth_required, date_field, int_field, json_body, time_field, to_json
from ..container import Container
from ..core.exceptions import ValidationError
from ..core.policy import Operation


def _event_fields(data: dict) -> dict:
    return {
        "title": data.get("title", ""),
        "description": data.get("description", ""),
        "event_date": date_field(data, "event_date"),
        "start_time": time_field(data, "start_time"),
        "end_time": time_field(data, "end_time"),
        "location": data.get("location", ""),
        "organization_id": int_field(data, "organization_id"),
        "mandatory": bool(data.get("mandatory", False)),
        "sanction": data.get("sanction"),
    }


def register(app: Flask, container: Container) -> None:
    gateway = container.identity_gateway
    service = container.event_service

    @app.route("/api/events", methods=["GET"], endpoint="events_list")
    @auth_required(gateway, Operation.VIEW_EVENTS)
    def events_list(principal):
        return jsonify(to_json(service.list_events()))

    @app.route("/api/events/<int:event_id>", methods=["GET"], endpoint="events_get")
    @auth_required(gateway, Operation.VIEW_EVENTS)
    def events_get(event_id: int, principal):
        return jsonify(to_json(service.get_event(event_id)))

    @app.route("/api/events", methods=["POST"], endpoint="events_create")
    @auth_required(gateway, Operation.MANAGE_EVENTS)
    def events_create(principal):
        event_id = service.create_event(**_event_fields(json_body()))
        return jsonify(to_json(service.get_event(event_id))), 201

    @app.route("/api/events/<int:event_id>", methods=["PUT"], endpoint="events_update")
    @auth_required(gateway, Operation.MANAGE_EVENTS)
    def events_update(event_id: int, principal):
        service.update_event(event_id=event_id, **_event_fields(json_body()))
        return jsonify(to_json(service.get_event(event_id)))

    @app.route("/api/events/<int:event_id>", methods=["DELETE"], endpoint="events_delete")
    @auth_required(gateway, Operation.MANAGE_EVENTS)
    def events_delete(event_id: int, principal):
        service.delete_event(event_id)
        return jsonify({"ok": True})

    @app.route("/api/events/<int:event_id>/officers", methods=["PUT"], endpoint="events_assign_officers")
    @auth_required(gateway, Operation.MANAGE_EVENTS)
    def events_assign_officers(event_id: int, principal):
        officer_ids = json_body().get("officer_ids")
        if not isinstance(officer_ids, list):
            raise ValidationError("'officer_ids' must be a list")
        try:
            ids = [int(o) for o in officer_ids]
        except (TypeError, ValueError):
            raise ValidationError("'officer_ids' must contain user ids")
        service.assign_officers(event_id=event_id, officer_ids=ids)
        return jsonify(to_json(service.get_event(event_id)))
