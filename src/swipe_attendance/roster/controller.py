from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_teacher_id, domain_error_response, login_required, server_error_response
from ..core.exceptions import DomainError
from ..container import Container
from .model import Student

# JSON key -> service keyword
_FIELD_MAP = {
    "name": "name",
    "rollNumber": "roll_number",
    "class": "class_name",
    "section": "section",
    "age": "age",
    "gender": "gender",
    "photo": "photo",
}


def student_json(s: Student) -> dict:
    return {
        "id": s.student_id,
        "name": s.name,
        "rollNumber": s.roll_number,
        "class": s.class_name,
        "section": s.section,
        "age": s.age,
        "gender": s.gender.value,
        "photo": s.photo,
        "createdAt": s.created_at.isoformat() if s.created_at else None,
    }


def _fields_from(data: dict, *, partial: bool) -> dict:
    if partial:
        return {kw: data[key] for key, kw in _FIELD_MAP.items() if key in data}
    return {kw: data.get(key) for key, kw in _FIELD_MAP.items()}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    @login_required
    def list_students():
        subject = request.args.get("subject")
        try:
            if subject:
                students = container.roster_service.list_roster(current_teacher_id(), subject)
            else:
                students = container.roster_service.list_students(current_teacher_id())
            return jsonify([student_json(s) for s in students])
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("fetching students")

    @app.route("/api/students", methods=["POST"], endpoint="create_student")
    @login_required
    def create_student():
        data = request.get_json(silent=True) or {}
        try:
            student = container.roster_service.add(current_teacher_id(), **_fields_from(data, partial=False))
            return jsonify(student_json(student)), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("creating student")

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="update_student")
    @login_required
    def update_student(student_id: int):
        data = request.get_json(silent=True) or {}
        try:
            student = container.roster_service.update(
                current_teacher_id(), student_id, **_fields_from(data, partial=True)
            )
            return jsonify(student_json(student))
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("updating student")

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="delete_student")
    @login_required
    def delete_student(student_id: int):
        try:
            container.roster_service.remove(current_teacher_id(), student_id)
            return jsonify({"success": True, "message": "Student deleted successfully"})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("deleting student")
