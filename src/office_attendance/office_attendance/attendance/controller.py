from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_int
from ..core.enums import Role
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    AlreadyResolvedError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    OutOfRangeError,
)
from ..geo.model import Coordinates
from ..container import Container

logger = logging.getLogger(__name__)

_CONFLICTS = (AlreadyCheckedInError, AlreadyCheckedOutError, AlreadyResolvedError)


def _parse_bool(value) -> bool:
    return value is True or str(value).strip().lower() in {"true", "1", "yes"}


def _optional_date(name: str) -> Optional[date]:
    value = (request.args.get(name) or "").strip()
    return parse_iso_date(value) if value else None


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service
    approvals = container.approval_service

    def _error(message: str, status: int, **extra):
        return jsonify({"success": False, "message": message, **extra}), status

    def _current_user_id() -> int:
        return int(session["user_id"])

    def _current_role() -> Role:
        return Role(session.get("role", Role.EMPLOYEE.value))

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return _error("Please log in to continue", 401)
            return view(*args, **kwargs)

        return wrapper

    def roles_required(*roles: Role):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                if "user_id" not in session:
                    return _error("Please log in to continue", 401)
                if session.get("role") not in {r.value for r in roles}:
                    return _error("You do not have permission", 403)
                return view(*args, **kwargs)

            return wrapper

        return decorator

    def domain_errors(view):
        """Translate domain errors into JSON responses."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except OutOfRangeError as e:
                return _error(
                    str(e),
                    400,
                    distance=round(e.distance_m),
                    allowedRadius=e.allowed_radius_m,
                )
            except _CONFLICTS as e:
                return _error(str(e), 409)
            except NotFoundError as e:
                return _error(str(e), 404)
            except AuthorizationError as e:
                return _error(str(e), 403)
            except DomainError as e:
                return _error(str(e), 400)
            except Exception:
                logger.exception("Unhandled error in %s", view.__name__)
                return _error("Server error", 500)

        return wrapper

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    @domain_errors
    def check_in():
        data = request.get_json(silent=True) or {}
        coords = Coordinates(data.get("latitude"), data.get("longitude"))
        is_remote = _parse_bool(data.get("isRemote", False))

        record = attendance.check_in(
            _current_user_id(),
            coords,
            is_remote=is_remote,
            notes=data.get("notes"),
        )
        message = (
            "Remote check-in recorded. Waiting for manager approval."
            if is_remote
            else "Check-in recorded"
        )
        return (
            jsonify(
                {
                    "success": True,
                    "message": message,
                    "attendanceId": record.attendance_id,
                    "checkInTime": record.check_in_time.isoformat(),
                    "requiresApproval": is_remote,
                    "record": attendance.to_view(record),
                }
            ),
            201,
        )

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    @domain_errors
    def check_out():
        data = request.get_json(silent=True) or {}
        coords = Coordinates(data.get("latitude"), data.get("longitude"))
        attendance_id = data.get("attendanceId")
        if attendance_id is None:
            latest = attendance.get_latest(_current_user_id())
            if not latest:
                raise NotFoundError("Attendance record not found")
            attendance_id = latest.attendance_id

        record = attendance.check_out(
            require_int(attendance_id, "attendanceId"),
            coords,
            user_id=_current_user_id(),
        )
        return jsonify(
            {
                "success": True,
                "message": "Check-out recorded",
                "checkOutTime": record.check_out_time.isoformat(),
                "record": attendance.to_view(record),
            }
        )

    @app.route("/api/attendance/latest", methods=["GET"], endpoint="attendance_latest")
    @login_required
    @domain_errors
    def latest():
        record = attendance.get_latest(_current_user_id())
        return jsonify(attendance.to_view(record) if record else {})

    @app.route("/api/attendance/me", methods=["GET"], endpoint="attendance_me")
    @login_required
    @domain_errors
    def my_history():
        records = attendance.list_history(
            _current_user_id(),
            start_date=_optional_date("startDate"),
            end_date=_optional_date("endDate"),
            limit=None,
        )
        return jsonify([attendance.to_view(r) for r in records])

    @app.route("/api/attendance/my-pending", methods=["GET"], endpoint="attendance_my_pending")
    @login_required
    @domain_errors
    def my_pending():
        return jsonify([attendance.to_view(r) for r in attendance.list_my_pending(_current_user_id())])

    @app.route("/api/attendance/pending-approvals", methods=["GET"], endpoint="attendance_pending_approvals")
    @roles_required(Role.ADMIN, Role.MANAGER)
    @domain_errors
    def pending_approvals():
        pending = approvals.list_pending(manager_id=_current_user_id(), current_role=_current_role())
        return jsonify([attendance.to_view(r) for r in pending])

    @app.route("/api/attendance/approve/<int:attendance_id>", methods=["PUT"], endpoint="attendance_approve")
    @roles_required(Role.ADMIN, Role.MANAGER)
    @domain_errors
    def approve(attendance_id: int):
        data = request.get_json(silent=True) or {}
        record = approvals.resolve(
            attendance_id=attendance_id,
            manager_id=_current_user_id(),
            current_role=_current_role(),
            decision=str(data.get("action", "")),
            notes=data.get("notes"),
        )
        return jsonify(
            {
                "success": True,
                "message": f"Attendance record {record.approval_status.value}",
                "record": attendance.to_view(record),
            }
        )

    @app.route("/api/attendance/user/<int:user_id>", methods=["GET"], endpoint="attendance_for_user")
    @roles_required(Role.ADMIN, Role.MANAGER)
    @domain_errors
    def attendance_for_user(user_id: int):
        records = attendance.list_for_worker(
            current_user_id=_current_user_id(),
            current_role=_current_role(),
            worker_id=user_id,
            start_date=_optional_date("startDate"),
            end_date=_optional_date("endDate"),
        )
        return jsonify([attendance.to_view(r) for r in records])

    @app.route("/api/attendance/report", methods=["GET"], endpoint="attendance_report")
    @roles_required(Role.ADMIN, Role.MANAGER)
    @domain_errors
    def report():
        start = _optional_date("startDate")
        end = _optional_date("endDate")
        if not start or not end:
            return _error("startDate and endDate are required", 400)
        user_id = request.args.get("userId", type=int)

        data = container.report_service.build_attendance_report(
            current_user_id=_current_user_id(),
            current_role=_current_role(),
            start=start,
            end=end,
            user_id=user_id,
        )
        return jsonify({"rows": data.rows, "summary": data.summary})

    @app.route("/api/attendance/office-location", methods=["GET"], endpoint="office_location_get")
    @login_required
    @domain_errors
    def get_office_location():
        return jsonify(container.office_location_service.get_office_location().to_dict())

    @app.route("/api/attendance/office-location", methods=["PUT"], endpoint="office_location_update")
    @roles_required(Role.ADMIN)
    @domain_errors
    def update_office_location():
        data = request.get_json(silent=True) or {}
        if any(data.get(k) is None for k in ("latitude", "longitude", "allowedRadius")):
            return _error("latitude, longitude and allowedRadius are required", 400)

        location = container.office_location_service.update_office_location(
            current_role=_current_role(),
            admin_user_id=_current_user_id(),
            latitude=data["latitude"],
            longitude=data["longitude"],
            allowed_radius_m=data["allowedRadius"],
        )
        return jsonify({"success": True, "message": "Office location updated", **location.to_dict()})

    @app.route("/api/attendance/office-location/check", methods=["GET"], endpoint="office_location_check")
    @login_required
    @domain_errors
    def check_office_distance():
        check = container.radius_policy.is_within_office(
            request.args.get("latitude"),
            request.args.get("longitude"),
        )
        return jsonify(
            {
                "distance": round(check.distance_m),
                "isWithin": check.is_within,
                "allowedRadius": check.allowed_radius_m,
            }
        )
