from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.payload import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/departments", methods=["GET"], endpoint="api_departments")
    def list_departments():
        return jsonify(container.department_service.list_departments(g.principal))

    @app.route("/api/departments", methods=["POST"], endpoint="api_department_create")
    def create_department():
        data = json_body()
        department = container.department_service.create_department(
            g.principal,
            name=data.get("name", ""),
            description=data.get("description"),
            manager_id=data.get("manager_id"),
            parent_id=data.get("parent_id"),
        )
        return jsonify(department), 201

    @app.route("/api/departments/<int:department_id>", methods=["GET"], endpoint="api_department_detail")
    def get_department(department_id: int):
        return jsonify(container.department_service.get_department(g.principal, department_id))

    @app.route("/api/departments/<int:department_id>", methods=["PUT", "PATCH"], endpoint="api_department_update")
    def update_department(department_id: int):
        changes = json_body()
        return jsonify(container.department_service.update_department(g.principal, department_id, changes=changes))

    @app.route("/api/departments/<int:department_id>", methods=["DELETE"], endpoint="api_department_delete")
    def delete_department(department_id: int):
        container.department_service.delete_department(g.principal, department_id)
        return "", 204
