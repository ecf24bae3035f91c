from __future__ import annotations

from datetime import datetime

from flask import Flask, jsonify

from ..common.http import current_teacher_id, domain_error_response, login_required, server_error_response
from ..core.exceptions import DomainError
from ..container import Container
from ..history.controller import entry_json


def register(app: Flask, container: Container) -> None:
    started_at = datetime.now()

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        now = datetime.now()
        return jsonify(
            {
                "status": "OK",
                "timestamp": now.isoformat(),
                "uptime": (now - started_at).total_seconds(),
                "message": "Swipe Attendance is running!",
            }
        )

    @app.route("/api/dashboard/stats", methods=["GET"], endpoint="dashboard_stats")
    @login_required
    def dashboard_stats():
        try:
            stats = container.dashboard_service.stats(current_teacher_id())
            return jsonify(
                {
                    "totalStudents": stats.total_students,
                    "totalAttendanceRecords": stats.total_records,
                    "averageAttendanceRate": stats.average_rate,
                    "recentAttendance": [entry_json(e) for e in stats.recent],
                }
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("fetching dashboard statistics")
