from __future__ import annotations

from flask import Flask, request

from ..common.web import (
    any_user,
    current_role,
    current_student_id,
    current_user_id,
    error,
    faculty_or_above,
    json_errors,
    role_required,
    success,
)
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _int_arg(name: str):
        value = request.args.get(name, "")
        return int(value) if value.isdigit() else None

    @app.route("/api/attendance/student/<int:student_id>", methods=["GET"], endpoint="api_student_attendance")
    @role_required(any_user)
    @json_errors
    def student_attendance(student_id: int):
        view = container.attendance_service.student_summary(
            student_id,
            current_role=current_role(),
            current_student_id=current_student_id(),
        )
        data = view.as_dict(limit=_int_arg("limit"))
        data["overallPercentage"] = view.summary.display_percentage
        return success(data)

    def _mark_payload() -> dict:
        data = request.get_json(silent=True) or {}
        return {
            "class_id": str(data.get("classId") or data.get("class_assigned") or "").strip(),
            "day": data.get("date"),
            "absent_roll_numbers": data.get("absentRollNumbers") or data.get("absentees") or [],
            "od_roll_numbers": data.get("odRollNumbers") or [],
        }

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="api_mark_attendance")
    @role_required(faculty_or_above)
    @json_errors
    def mark_attendance():
        payload = _mark_payload()
        if not payload["class_id"]:
            return error("classId is required", 400)
        result = container.attendance_service.mark_class(
            current_role=current_role(),
            faculty_id=current_user_id(),
            **payload,
        )
        return success(result.as_dict(), message="Attendance marked successfully", status=201)

    @app.route("/api/attendance/edit", methods=["PUT"], endpoint="api_edit_attendance")
    @role_required(faculty_or_above)
    @json_errors
    def edit_attendance():
        payload = _mark_payload()
        if not payload["class_id"]:
            return error("classId is required", 400)
        result = container.attendance_service.edit_class(
            current_role=current_role(),
            faculty_id=current_user_id(),
            **payload,
        )
        return success(result.as_dict(), message="Attendance updated successfully")

    @app.route("/api/attendance/reason", methods=["PATCH"], endpoint="api_submit_reason")
    @role_required(any_user)
    @json_errors
    def submit_reason():
        data = request.get_json(silent=True) or {}
        student_id = str(data.get("studentId") or current_student_id() or "")
        if not student_id.isdigit():
            return error("studentId is required", 400)
        record = container.attendance_service.submit_reason(
            current_role=current_role(),
            current_student_id=current_student_id(),
            student_id=int(student_id),
            day=data.get("date"),
            reason=data.get("reason") or "",
        )
        return success(record.as_dict(), message="Reason submitted successfully")
