from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import auth_required, int_field, json_body, require_field, to_json
from ..container import Container
from ..core.enums import OrganizationType
from ..core.exceptions import ValidationError
from ..core.policy import Operation


def _org_type(value) -> OrganizationType:
    try:
        return OrganizationType(value)
    except ValueError:
        raise ValidationError("Type must be ssg, department or club")


def register(app: Flask, container: Container) -> None:
    gateway = container.identity_gateway
    service = container.organization_service

    @app.route("/api/organizations", methods=["GET"], endpoint="organizations_list")
    @auth_required(gateway)
    def organizations_list(principal):
        return jsonify(to_json(service.list_organizations()))

    @app.route("/api/organizations/<int:organization_id>", methods=["GET"], endpoint="organizations_get")
    @auth_required(gateway)
    def organizations_get(organization_id: int, principal):
        return jsonify(to_json(service.get_organization(organization_id)))

    @app.route("/api/organizations", methods=["POST"], endpoint="organizations_create")
    @auth_required(gateway, Operation.MANAGE_ORGANIZATIONS)
    def organizations_create(principal):
        data = json_body()
        organization_id = service.create_organization(
            name=data.get("name", ""),
            type=_org_type(require_field(data, "type")),
            department=data.get("department"),
        )
        return jsonify(to_json(service.get_organization(organization_id))), 201

    @app.route("/api/organizations/<int:organization_id>", methods=["PUT"], endpoint="organizations_update")
    @auth_required(gateway, Operation.MANAGE_ORGANIZATIONS)
    def organizations_update(organization_id: int, principal):
        data = json_body()
        service.update_organization(
            organization_id=organization_id,
            name=data.get("name"),
            type=_org_type(data["type"]) if data.get("type") else None,
            department=data.get("department"),
        )
        return jsonify(to_json(service.get_organization(organization_id)))

    @app.route("/api/organizations/<int:organization_id>/members", methods=["GET"], endpoint="organizations_members")
    @auth_required(gateway, Operation.VIEW_ANY_USER_DATA)
    def organizations_members(organization_id: int, principal):
        return jsonify(to_json(service.list_members(organization_id)))

    @app.route("/api/organizations/<int:organization_id>/members", methods=["POST"], endpoint="organizations_add_member")
    @auth_required(gateway, Operation.MANAGE_ORGANIZATIONS)
    def organizations_add_member(organization_id: int, principal):
        data = json_body()
        service.add_member(
            organization_id=organization_id,
            user_id=int_field(data, "user_id"),
            is_admin=bool(data.get("is_admin", False)),
        )
        return jsonify({"ok": True}), 201

    @app.route(
        "/api/organizations/<int:organization_id>/members/<int:user_id>",
        methods=["DELETE"],
        endpoint="organizations_remove_member",
    )
    @auth_required(gateway, Operation.MANAGE_ORGANIZATIONS)
    def organizations_remove_member(organization_id: int, user_id: int, principal):
        service.remove_member(organization_id=organization_id, user_id=user_id)
        return jsonify({"ok": True})

    @app.route(
        "/api/organizations/<int:organization_id>/members/<int:user_id>/admin",
        methods=["PUT"],
        endpoint="organizations_set_admin",
    )
    @auth_required(gateway, Operation.MANAGE_ORGANIZATIONS)
    def organizations_set_admin(organization_id: int, user_id: int, principal):
        data = json_body()
        service.set_member_admin(
            organization_id=organization_id,
            user_id=user_id,
            is_admin=bool(data.get("is_admin", False)),
        )
        return jsonify({"ok": True})
