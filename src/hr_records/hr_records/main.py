from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, g, jsonify, request, session

from config import get_settings_module

from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_employees, list_tables

from .container import Container, build_container
from .absences.controller import register as register_absences
from .departments.controller import register as register_departments
from .employees.controller import register as register_employees
from .feedback.controller import register as register_feedback
from .rbac.controller import register as register_roles
from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

log = logging.getLogger(__name__)

# Endpoints reachable without a resolved principal.
PUBLIC_ENDPOINTS = frozenset({"health", "static"})


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return jsonify({"error": "validation_failed", "message": str(e)}), 400

    @app.errorhandler(AuthenticationError)
    def _authentication(e: AuthenticationError):
        return jsonify({"error": "unauthenticated", "message": str(e)}), 401

    @app.errorhandler(AuthorizationError)
    def _authorization(e: AuthorizationError):
        return jsonify({"error": "forbidden", "reason": e.reason.value, "message": str(e)}), 403

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return jsonify({"error": "not_found", "message": str(e)}), 404

    @app.errorhandler(ConflictError)
    def _conflict(e: ConflictError):
        return jsonify({"error": "conflict", "retryable": e.retryable, "message": str(e)}), 409


def _register_principal_hook(app: Flask, container: Container) -> None:
    @app.before_request
    def _resolve_principal():
        if request.endpoint in PUBLIC_ENDPOINTS or request.endpoint is None:
            return None
        employee_id = session.get("employee_id")
        if employee_id is None:
            raise AuthenticationError("Not authenticated")
        try:
            g.principal = container.principal_service.resolve(int(employee_id))
        except NotFoundError:
            session.clear()
            raise AuthenticationError("Unknown employee")
        return None


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        log.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        auto_init_db = bool(getattr(settings, "AUTO_INIT_DB", False))
        auto_seed_db = bool(getattr(settings, "AUTO_SEED_DB", False))
        if auto_init_db:
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            log.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if auto_seed_db:
            seed_path = Path(__file__).resolve().parents[3] / "database" / "seed.sql"
            apply_seed_sql(db_config, seed_path=seed_path)
            ensure_demo_employees(db_config)
            log.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            role_cache_ttl_seconds=getattr(settings, "ROLE_CACHE_TTL_SECONDS", 300),
            manager_role_name=getattr(settings, "MANAGER_ROLE_NAME", "MANAGER"),
        )

    app.extensions["hr_records"] = container

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    _register_error_handlers(app)
    _register_principal_hook(app, container)

    register_employees(app, container)
    register_departments(app, container)
    register_absences(app, container)
    register_feedback(app, container)
    register_roles(app, container)

    return app
