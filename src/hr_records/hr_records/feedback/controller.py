from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.payload import json_body
from ..common.validators import optional_int, require_int
from ..container import Container
from ..core.exceptions import ValidationError
from .service import to_representation


def register(app: Flask, container: Container) -> None:
    def _many(entries):
        return jsonify([to_representation(f) for f in entries])

    @app.route("/api/feedback", methods=["GET"], endpoint="api_feedback")
    def visible_feedback():
        return _many(container.feedback_service.list_visible_feedback(g.principal))

    @app.route("/api/feedback", methods=["POST"], endpoint="api_feedback_submit")
    def submit_feedback():
        data = json_body()
        employee_id = data.get("employee_id")
        if employee_id is None:
            raise ValidationError("employee_id is required")
        feedback = container.feedback_service.submit_feedback(
            g.principal,
            require_int(employee_id, "employee_id"),
            content=data.get("content", ""),
            rating=optional_int(data.get("rating"), "Rating"),
            category=data.get("category"),
            polish=bool(data.get("polish", False)),
        )
        return jsonify(to_representation(feedback)), 201

    @app.route("/api/feedback/my", methods=["GET"], endpoint="api_feedback_my")
    def my_feedback():
        return _many(container.feedback_service.list_my_feedback(g.principal))

    @app.route("/api/feedback/employee/<int:employee_id>", methods=["GET"], endpoint="api_feedback_for_employee")
    def feedback_for_employee(employee_id: int):
        return _many(container.feedback_service.list_feedback_for_employee(g.principal, employee_id))

    @app.route("/api/feedback/<int:feedback_id>/hide", methods=["POST"], endpoint="api_feedback_hide")
    def hide_feedback(feedback_id: int):
        return jsonify(to_representation(container.feedback_service.hide_feedback(g.principal, feedback_id)))

    @app.route("/api/feedback/<int:feedback_id>", methods=["DELETE"], endpoint="api_feedback_delete")
    def delete_feedback(feedback_id: int):
        container.feedback_service.delete_feedback(g.principal, feedback_id)
        return "", 204
