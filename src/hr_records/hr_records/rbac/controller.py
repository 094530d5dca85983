from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.payload import json_body
from ..common.validators import require_non_empty
from ..container import Container
from .model import Role


def to_representation(role: Role) -> dict:
    return {
        "id": role.role_id,
        "name": role.name,
        "description": role.description,
        "permissions": role.permission_names,
    }


def register(app: Flask, container: Container) -> None:
    def _permission_name() -> str:
        data = json_body()
        return require_non_empty(data.get("permission"), "permission")

    @app.route("/api/roles", methods=["GET"], endpoint="api_roles")
    def list_roles():
        return jsonify([to_representation(r) for r in container.role_service.list_roles(g.principal)])

    @app.route("/api/roles", methods=["POST"], endpoint="api_role_create")
    def create_role():
        data = json_body()
        role = container.role_service.create_role(
            g.principal,
            name=data.get("name", ""),
            permission_names=data.get("permissions") or [],
            description=data.get("description"),
        )
        return jsonify(to_representation(role)), 201

    @app.route("/api/roles/<int:role_id>", methods=["GET"], endpoint="api_role_detail")
    def get_role(role_id: int):
        return jsonify(to_representation(container.role_service.get_role(g.principal, role_id)))

    @app.route("/api/roles/<int:role_id>/permissions", methods=["POST"], endpoint="api_role_grant")
    def grant_permission(role_id: int):
        role = container.role_service.grant_permission(g.principal, role_id=role_id, permission_name=_permission_name())
        return jsonify(to_representation(role))

    @app.route("/api/roles/<int:role_id>/permissions", methods=["DELETE"], endpoint="api_role_revoke")
    def revoke_permission(role_id: int):
        role = container.role_service.revoke_permission(g.principal, role_id=role_id, permission_name=_permission_name())
        return jsonify(to_representation(role))
