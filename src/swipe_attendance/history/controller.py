from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import (
    current_teacher_id,
    domain_error_response,
    error_response,
    login_required,
    server_error_response,
)
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import DomainError
from ..container import Container
from ..sessions.aggregator import AttendanceSummary
from .model import HistoryEntry, Pagination


def summary_json(s: AttendanceSummary) -> dict:
    return {
        "totalStudents": s.total,
        "presentCount": s.present,
        "absentCount": s.absent,
        "attendanceRate": s.rate,
    }


def entry_json(e: HistoryEntry) -> dict:
    return {
        "id": e.entry_id,
        "subject": e.subject,
        "date": e.started_at.isoformat(),
        "createdAt": e.created_at.isoformat(),
        "students": [
            {
                "studentId": d.student_id,
                "status": d.status.value,
                "name": d.name,
                "rollNumber": d.roll_number,
                "class": d.class_name,
                "section": d.section,
            }
            for d in e.decisions
        ],
        **summary_json(e.summary),
    }


def pagination_json(p: Pagination) -> dict:
    return {"total": p.total, "page": p.page, "limit": p.limit, "totalPages": p.total_pages}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    @login_required
    def list_attendance():
        try:
            date_s = (request.args.get("date") or "").strip()
            date_filter = parse_iso_date(date_s) if date_s else None
            page = int(request.args.get("page", 1))
            limit = int(request.args.get("limit", app.config.get("DEFAULT_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT)))
        except ValueError:
            return error_response("date must be YYYY-MM-DD; page and limit must be numbers", 400)

        try:
            result = container.history_service.query(
                current_teacher_id(),
                subject=request.args.get("subject") or None,
                date_filter=date_filter,
                page=page,
                limit=limit,
            )
            return jsonify(
                {
                    "attendance": [entry_json(e) for e in result.entries],
                    "pagination": pagination_json(result.pagination),
                }
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("fetching attendance records")
