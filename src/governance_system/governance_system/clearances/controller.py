from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import auth_required, int_field, json_body, require_field, require_owner_or_admin, to_json
from ..container import Container
from ..core.policy import Operation


def register(app: Flask, container: Container) -> None:
    gateway = container.identity_gateway
    service = container.clearance_service

    @app.route("/api/clearances", methods=["POST"], endpoint="clearances_request")
    @auth_required(gateway, Operation.REQUEST_CLEARANCE)
    def clearances_request(principal):
        data = json_body()
        clearance = service.request_clearance(
            user_id=principal.user_id,
            organization_id=int_field(data, "organization_id"),
        )
        return jsonify(to_json(clearance)), 201

    @app.route("/api/clearances/<int:clearance_id>/status", methods=["PUT"], endpoint="clearances_decide")
    @auth_required(gateway, Operation.DECIDE_CLEARANCE)
    def clearances_decide(clearance_id: int, principal):
        data = json_body()
        clearance = service.update_clearance_status(
            clearance_id=clearance_id,
            status=require_field(data, "status"),
            remarks=data.get("remarks"),
        )
        return jsonify(to_json(clearance))

    @app.route("/api/clearances/pending", methods=["GET"], endpoint="clearances_pending")
    @auth_required(gateway, Operation.LIST_ORGANIZATION_CLEARANCES)
    def clearances_pending(principal):
        return jsonify(to_json(service.list_pending()))

    @app.route(
        "/api/organizations/<int:organization_id>/clearances",
        methods=["GET"],
        endpoint="clearances_by_organization",
    )
    @auth_required(gateway, Operation.LIST_ORGANIZATION_CLEARANCES)
    def clearances_by_organization(organization_id: int, principal):
        return jsonify(to_json(service.list_by_organization(organization_id)))

    @app.route("/api/users/<int:user_id>/clearances", methods=["GET"], endpoint="clearances_by_user")
    @auth_required(gateway, Operation.VIEW_OWN_CLEARANCES)
    def clearances_by_user(user_id: int, principal):
        require_owner_or_admin(principal, user_id)
        return jsonify(to_json(service.list_by_user(user_id)))
