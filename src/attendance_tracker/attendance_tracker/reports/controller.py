from __future__ import annotations

from flask import Flask, request

from ..common.web import faculty_or_above, json_errors, role_required, success
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/class/<class_id>", methods=["GET"], endpoint="api_class_report")
    @role_required(faculty_or_above)
    @json_errors
    def class_report(class_id: str):
        threshold = request.args.get("threshold", "")
        report = container.report_service.build_class_report(
            class_id,
            threshold=int(threshold) if threshold.isdigit() else None,
        )
        return success({"rows": report.rows, "summary": report.summary})

    @app.route("/api/reports/class/<class_id>/absentees", methods=["GET"], endpoint="api_absentee_report")
    @role_required(faculty_or_above)
    @json_errors
    def absentee_report(class_id: str):
        report = container.report_service.build_absentee_report(
            class_id,
            start=request.args.get("startDate"),
            end=request.args.get("endDate"),
        )
        return success({"rows": report.rows, "summary": report.summary})
