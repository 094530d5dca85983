from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.payload import json_body
from ..common.validators import require_int
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/me", methods=["GET"], endpoint="api_me")
    def me():
        return jsonify(container.employee_service.get_employee(g.principal, g.principal.employee_id))

    @app.route("/api/employees", methods=["GET"], endpoint="api_employees")
    def list_employees():
        return jsonify(container.employee_service.list_employees(g.principal))

    @app.route("/api/employees/search", methods=["GET"], endpoint="api_employees_search")
    def search_employees():
        keyword = request.args.get("q", "")
        return jsonify(container.employee_service.search_employees(g.principal, keyword))

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="api_employee_detail")
    def get_employee(employee_id: int):
        return jsonify(container.employee_service.get_employee(g.principal, employee_id))

    @app.route("/api/employees/<int:employee_id>", methods=["PUT", "PATCH"], endpoint="api_employee_update")
    def update_employee(employee_id: int):
        data = json_body()
        expected_version = data.pop("version", None)
        employee = container.employee_service.update_employee(
            g.principal,
            employee_id,
            changes=data,
            expected_version=expected_version,
        )
        return jsonify(employee)

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="api_employee_deactivate")
    def deactivate_employee(employee_id: int):
        container.employee_service.deactivate_employee(g.principal, employee_id)
        return "", 204

    @app.route("/api/employees/<int:employee_id>/promote", methods=["POST"], endpoint="api_employee_promote")
    def promote_employee(employee_id: int):
        data = json_body()
        department_id = data.get("department_id")
        if department_id is None:
            raise ValidationError("department_id is required")
        employee = container.employee_service.promote_to_manager(
            g.principal, employee_id, require_int(department_id, "department_id")
        )
        return jsonify(employee)

    @app.route(
        "/api/departments/<int:department_id>/employees",
        methods=["GET"],
        endpoint="api_department_employees",
    )
    def department_employees(department_id: int):
        return jsonify(container.employee_service.list_department_employees(g.principal, department_id))
