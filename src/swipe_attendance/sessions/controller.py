from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, request, session

from ..common.http import (
    current_teacher_id,
    domain_error_response,
    error_response,
    login_required,
    server_error_response,
)
from ..core.exceptions import DomainError, OutOfRangeError
from ..container import Container
from ..history.controller import entry_json, summary_json
from ..roster.controller import student_json
from .model import SessionState
from .service import StepResult

SESSION_KEY = "attendance_session"


def _load_state() -> Optional[SessionState]:
    data = session.get(SESSION_KEY)
    return SessionState.from_dict(data) if data else None


def _store_state(state: SessionState) -> None:
    session[SESSION_KEY] = state.to_dict()


def register(app: Flask, container: Container) -> None:
    def _state_json(state: SessionState) -> dict:
        student = container.session_service.current_student(current_teacher_id(), state)
        return {
            "subject": state.subject,
            "startedAt": state.started_at.isoformat(),
            "position": state.position,
            "total": state.size,
            "remaining": state.remaining,
            "complete": state.is_complete,
            "currentStudent": student_json(student) if student else None,
            "decisions": [{"studentId": d.student_id, "status": d.status.value} for d in state.decisions],
            "summary": summary_json(state.summary),
        }

    def _step_json(result: StepResult) -> dict:
        _store_state(result.state)
        body = {"success": True, "session": _state_json(result.state)}
        if result.entry is not None:
            body["record"] = entry_json(result.entry)
        return body

    def _require_state():
        state = _load_state()
        if state is None:
            return None, error_response("No attendance session in progress", 404)
        return state, None

    @app.route("/api/sessions", methods=["POST"], endpoint="start_session")
    @login_required
    def start_session():
        data = request.get_json(silent=True) or {}
        try:
            result = container.session_service.begin(current_teacher_id(), str(data.get("subject") or ""))
            return jsonify(_step_json(result)), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("starting attendance")

    @app.route("/api/sessions/current", methods=["GET"], endpoint="current_session")
    @login_required
    def current_session():
        try:
            state, missing = _require_state()
            if missing:
                return missing
            return jsonify({"success": True, "session": _state_json(state)})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("loading attendance session")

    @app.route("/api/sessions/current/decisions", methods=["POST"], endpoint="decide_student")
    @login_required
    def decide_student():
        data = request.get_json(silent=True) or {}
        try:
            state, missing = _require_state()
            if missing:
                return missing
            try:
                result = container.session_service.decide(current_teacher_id(), state, data.get("status"))
            except OutOfRangeError as e:
                # Nothing changes; the client may ignore this.
                return jsonify({"success": False, "message": str(e), "session": _state_json(state)}), 409
            return jsonify(_step_json(result))
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("marking attendance")

    @app.route("/api/sessions/current/retake", methods=["POST"], endpoint="retake_session")
    @login_required
    def retake_session():
        try:
            state, missing = _require_state()
            if missing:
                return missing
            result = container.session_service.retake(current_teacher_id(), state)
            return jsonify(_step_json(result))
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("retaking attendance")

    @app.route("/api/sessions/current", methods=["DELETE"], endpoint="abandon_session")
    @login_required
    def abandon_session():
        session.pop(SESSION_KEY, None)
        return jsonify({"success": True, "message": "Attendance session discarded"})

    @app.route("/api/attendance", methods=["POST"], endpoint="record_attendance")
    @login_required
    def record_attendance():
        data = request.get_json(silent=True) or {}
        subject = data.get("subject")
        students = data.get("students")
        if not subject or not isinstance(students, list):
            return error_response("Subject and students array are required", 400)

        try:
            entry = container.session_service.record(current_teacher_id(), str(subject), students)
            return jsonify(entry_json(entry)), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("saving attendance")
