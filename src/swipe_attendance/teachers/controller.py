from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.http import (
    current_teacher_id,
    domain_error_response,
    error_response,
    login_required,
    server_error_response,
)
from ..core.exceptions import DomainError
from ..container import Container
from .service import SessionTeacher


def _teacher_json(t: SessionTeacher) -> dict:
    return {"id": t.teacher_id, "name": t.name, "email": t.email, "subjects": list(t.subjects)}


def _start_session(t: SessionTeacher) -> None:
    session.clear()
    session["teacher_id"] = t.teacher_id
    session["name"] = t.name
    session["subjects"] = list(t.subjects)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        data = request.get_json(silent=True) or {}
        try:
            teacher = container.teacher_service.register(
                name=data.get("name", ""),
                email=data.get("email", ""),
                password=data.get("password", ""),
                subjects=data.get("subjects") or [],
            )
            _start_session(teacher)
            return jsonify({"success": True, "message": "User created successfully", "user": _teacher_json(teacher)}), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("registering")

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        data = request.get_json(silent=True) or {}
        try:
            teacher = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
            _start_session(teacher)
            return jsonify({"success": True, "message": "Login successful", "user": _teacher_json(teacher)})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("logging in")

    @app.route("/api/auth/quick-login", methods=["POST"], endpoint="auth_quick_login")
    def auth_quick_login():
        data = request.get_json(silent=True) or {}
        if not data.get("name") or not data.get("subject"):
            return error_response("Name and subject are required", 400)
        try:
            teacher = container.teacher_service.quick_login(name=str(data["name"]), subject=str(data["subject"]))
            _start_session(teacher)
            return jsonify({"success": True, "message": "Login successful", "user": _teacher_json(teacher)})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("logging in")

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def auth_logout():
        session.clear()
        return jsonify({"success": True, "message": "Logged out"})

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def auth_me():
        try:
            teacher = container.teacher_service.get(current_teacher_id())
            return jsonify({"success": True, "user": _teacher_json(SessionTeacher.from_teacher(teacher))})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("loading profile")
