from __future__ import annotations

from functools import wraps

from flask import Flask, g, jsonify, request

from ..auth.authenticator import bearer_token
from ..common.logging import get_logger
from ..core.exceptions import (
    AuthenticationError,
    DomainError,
    DuplicateConflictError,
    MissingPrerequisiteError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from ..container import Container
from .model import AttendanceInput, AttendancePatch
from .service import AttendanceService

logger = get_logger(__name__)

_STATUS_BY_ERROR = {
    ValidationError: 400,
    MissingPrerequisiteError: 400,
    AuthenticationError: 401,
    NotFoundError: 404,
    DuplicateConflictError: 409,
    StoreError: 500,
}


def error_response(e: DomainError):
    status = next((code for cls, code in _STATUS_BY_ERROR.items() if isinstance(e, cls)), 400)
    body = {"success": False, "error": str(e), "kind": e.kind}
    if isinstance(e, DuplicateConflictError):
        body["duplicate"] = True
        if e.existing is not None:
            body["existingRecord"] = e.existing.summary()
    return jsonify(body), status


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def register(app: Flask, container: Container) -> None:
    def bearer_required(view):
        """Authenticate before any store access; the user id lands in ``g.user_id``."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                g.user_id = container.authenticator.authenticate(bearer_token(request.headers.get("Authorization")))
            except AuthenticationError as e:
                return error_response(e)
            return view(*args, **kwargs)

        return wrapper

    def json_errors(action: str):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                try:
                    return view(*args, **kwargs)
                except DomainError as e:
                    return error_response(e)
                except Exception as e:
                    logger.exception("Unexpected error while trying to %s", action)
                    return jsonify({"success": False, "error": f"Failed to {action}: {e}", "kind": "internal"}), 500

            return wrapper

        return decorator

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"success": True})

    _register_book(app, "/attendance", "attendance", container.doctor_attendance, bearer_required, json_errors)
    _register_book(
        app,
        "/employee-attendance",
        "employee_attendance",
        container.employee_attendance,
        bearer_required,
        json_errors,
    )


def _register_book(app: Flask, base: str, name: str, service: AttendanceService, bearer_required, json_errors) -> None:
    @app.route(base, methods=["GET"], endpoint=f"{name}_list")
    @bearer_required
    @json_errors("fetch attendance")
    def list_records():
        args = request.args
        records = service.list(
            date=args.get("date"),
            subject_id=args.get("subjectId") or args.get("doctorId") or args.get("employeeId"),
            event_type=args.get("eventType") or args.get("type"),
        )
        return jsonify({"success": True, "attendance": [r.to_dict() for r in records]})

    @app.route(f"{base}/<record_id>", methods=["GET"], endpoint=f"{name}_get")
    @bearer_required
    @json_errors("fetch attendance")
    def get_record(record_id: str):
        return jsonify({"success": True, "attendance": service.get(record_id).to_dict()})

    @app.route(base, methods=["POST"], endpoint=f"{name}_create")
    @bearer_required
    @json_errors("record attendance")
    def create_record():
        record = service.create(AttendanceInput.from_payload(_json_body()), actor_id=g.user_id)
        return (
            jsonify(
                {
                    "success": True,
                    "message": f"{record.event_type.value} recorded for {record.subject_name} on {record.date} at {record.time}",
                    "attendance": record.to_dict(),
                }
            ),
            201,
        )

    @app.route(f"{base}/<record_id>", methods=["PUT"], endpoint=f"{name}_update")
    @bearer_required
    @json_errors("update attendance")
    def update_record(record_id: str):
        record = service.update(record_id, AttendancePatch.from_payload(_json_body()), actor_id=g.user_id)
        return jsonify({"success": True, "message": "Attendance updated", "attendance": record.to_dict()})

    @app.route(f"{base}/<record_id>", methods=["DELETE"], endpoint=f"{name}_delete")
    @bearer_required
    @json_errors("delete attendance")
    def delete_record(record_id: str):
        service.delete(record_id)
        return jsonify({"success": True, "message": "Attendance deleted"})
