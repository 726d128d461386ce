from __future__ import annotations

from flask import Flask, request, session

from ..common.datetime_utils import to_calendar_date
from ..common.web import (
    current_role,
    current_user_id,
    faculty_or_above,
    hod_or_above,
    json_errors,
    role_required,
    success,
)
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    def _department(data: dict) -> str:
        # Admin and principal are not tied to one department and must name it.
        if current_role() in (Role.ADMIN, Role.PRINCIPAL):
            return str(data.get("department") or session.get("department") or "").strip()
        return str(session.get("department") or "").strip()

    @app.route("/api/holidays", methods=["GET"], endpoint="api_list_holidays")
    @role_required(faculty_or_above)
    @json_errors
    def list_holidays():
        year = request.args.get("year", "")
        holidays = container.holiday_service.list_for_department(
            _department(request.args),
            start=to_calendar_date(request.args.get("startDate")),
            end=to_calendar_date(request.args.get("endDate")),
            year=int(year) if year.isdigit() else None,
        )
        return success([h.as_dict() for h in holidays])

    @app.route("/api/holidays", methods=["POST"], endpoint="api_create_holiday")
    @role_required(hod_or_above, "Only HOD and above can declare holidays")
    @json_errors
    def create_holiday():
        data = request.get_json(silent=True) or {}
        holiday_id = container.holiday_service.declare(
            current_role=current_role(),
            user_id=current_user_id(),
            department=_department(data),
            holiday_date=data.get("date"),
            reason=data.get("reason") or "",
        )
        return success({"id": holiday_id}, message="Holiday created successfully", status=201)

    @app.route("/api/holidays/<int:holiday_id>", methods=["PUT"], endpoint="api_update_holiday")
    @role_required(hod_or_above, "Only HOD and above can edit holidays")
    @json_errors
    def update_holiday(holiday_id: int):
        data = request.get_json(silent=True) or {}
        container.holiday_service.update(
            current_role=current_role(),
            user_id=current_user_id(),
            department=_department(data),
            holiday_id=holiday_id,
            holiday_date=data.get("date"),
            reason=data.get("reason") or "",
        )
        return success({"id": holiday_id}, message="Holiday updated successfully")

    @app.route("/api/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="api_delete_holiday")
    @role_required(hod_or_above, "Only HOD and above can delete holidays")
    @json_errors
    def delete_holiday(holiday_id: int):
        container.holiday_service.delete(
            current_role=current_role(),
            user_id=current_user_id(),
            department=_department(request.args),
            holiday_id=holiday_id,
        )
        return success(message="Holiday deleted successfully")
