from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.payload import json_body
from ..container import Container
from ..core.enums import AbsenceStatus
from ..core.exceptions import ValidationError
from .service import to_representation


def register(app: Flask, container: Container) -> None:
    def _many(absences):
        return jsonify([to_representation(a) for a in absences])

    @app.route("/api/absences", methods=["GET"], endpoint="api_absences")
    def list_absences():
        raw = (request.args.get("status") or "").strip().upper()
        try:
            status = AbsenceStatus(raw) if raw else None
        except ValueError:
            raise ValidationError(f"Invalid status: {raw}")
        return _many(container.absence_service.list_absences(g.principal, status=status))

    @app.route("/api/absences", methods=["POST"], endpoint="api_absence_submit")
    def submit_absence():
        data = json_body()
        absence = container.absence_service.submit_absence(
            g.principal,
            absence_type=data.get("type"),
            start_date=parse_iso_date(data.get("start_date")),
            end_date=parse_iso_date(data.get("end_date")),
            reason=data.get("reason"),
        )
        return jsonify(to_representation(absence)), 201

    @app.route("/api/absences/my", methods=["GET"], endpoint="api_absences_my")
    def my_absences():
        return _many(container.absence_service.list_my_absences(g.principal))

    @app.route("/api/absences/pending", methods=["GET"], endpoint="api_absences_pending")
    def pending_absences():
        return _many(container.absence_service.list_pending(g.principal))

    @app.route("/api/absences/<int:absence_id>", methods=["GET"], endpoint="api_absence_detail")
    def get_absence(absence_id: int):
        return jsonify(to_representation(container.absence_service.get_absence(g.principal, absence_id)))

    @app.route("/api/absences/<int:absence_id>/review", methods=["POST"], endpoint="api_absence_review")
    def review_absence(absence_id: int):
        data = json_body()
        absence = container.absence_service.review_absence(
            g.principal,
            absence_id,
            decision=data.get("decision"),
            comment=data.get("comment"),
            expected_version=data.get("version"),
        )
        return jsonify(to_representation(absence))

    @app.route("/api/absences/<int:absence_id>/cancel", methods=["POST"], endpoint="api_absence_cancel")
    def cancel_absence(absence_id: int):
        data = json_body()
        absence = container.absence_service.cancel_absence(
            g.principal,
            absence_id,
            expected_version=data.get("version"),
        )
        return jsonify(to_representation(absence))
