from __future__ import annotations

import csv
import io
from datetime import date, timedelta

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.images import face_input
from ..common.validators import require_int
from ..common.web import (
    current_role,
    current_user_id,
    domain_error_response,
    json_body,
    login_required,
    ok,
    request_payload,
    roles_required,
    server_error_response,
)
from ..container import Container
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError
from ..geo.model import Coordinates
from .report import REPORT_FIELDS


def register(app: Flask, container: Container) -> None:
    def _report_range() -> tuple[date, date]:
        today = date.today()
        start_s = request.args.get("start")
        end_s = request.args.get("end")
        start = parse_iso_date(start_s) if start_s else today - timedelta(days=DEFAULT_REPORT_DAYS)
        end = parse_iso_date(end_s) if end_s else today
        return start, end

    def _report_scope() -> dict:
        """Students only ever see their own rows."""

        class_id = request.args.get("class_id", type=int)
        if current_role() == Role.STUDENT:
            return {"class_id": class_id, "user_id": current_user_id()}
        return {"class_id": class_id, "user_id": request.args.get("user_id", type=int)}

    def _write_report_csv(*, data, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/attendance/face", methods=["POST"], endpoint="attendance_face")
    @login_required
    def attendance_face():
        """Face + location submission (kiosk or student device)."""

        try:
            payload = request_payload()
            class_id = require_int(payload.get("class_id"), "Class", minimum=1)
            coords = Coordinates.parse(payload.get("latitude"), payload.get("longitude"))
            image, descriptor = face_input(payload, request.files)

            resolution = container.attendance_resolver.submit_face(
                class_id=class_id,
                coordinates=coords,
                image=image,
                descriptor=descriptor,
            )
            status = 201 if resolution.record_id else 202
            return ok(status, **resolution.to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("marking attendance")

    @app.route("/attendance/geo", methods=["POST"], endpoint="attendance_geo")
    @roles_required(Role.STUDENT)
    def attendance_geo():
        try:
            data = json_body()
            class_id = require_int(data.get("class_id"), "Class", minimum=1)
            coords = Coordinates.parse(data.get("latitude"), data.get("longitude"))

            resolution = container.attendance_resolver.submit_geo(
                user_id=current_user_id(),
                class_id=class_id,
                coordinates=coords,
            )
            status = 201 if resolution.record_id else 202
            return ok(status, **resolution.to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("marking attendance")

    @app.route("/attendance/manual", methods=["POST"], endpoint="attendance_manual")
    @roles_required(Role.OWNER, Role.STAFF)
    def attendance_manual():
        try:
            data = json_body()
            work_date = parse_iso_date(data["date"]) if data.get("date") else date.today()
            record_id = container.attendance_service.mark_manual(
                current_role=current_role(),
                user_id=data.get("user_id"),
                class_id=data.get("class_id"),
                work_date=work_date,
                status=data.get("status", ""),
                note=data.get("note", ""),
            )
            return ok(record_id=record_id, message="Attendance saved")
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("saving attendance")

    @app.route("/attendance/me", methods=["GET"], endpoint="attendance_me")
    @login_required
    def attendance_me():
        try:
            limit = request.args.get("limit", default=30, type=int)
            if limit <= 0 or limit > 365:
                raise ValidationError("limit must be between 1 and 365")
            return ok(records=container.attendance_service.history(current_user_id(), limit=limit))
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("loading attendance history")

    @app.route("/classes/<int:class_id>/attendance", methods=["GET"], endpoint="class_attendance")
    @roles_required(Role.OWNER, Role.STAFF)
    def class_attendance(class_id: int):
        try:
            date_s = request.args.get("date")
            work_date = parse_iso_date(date_s) if date_s else date.today()
            sheet = container.attendance_service.class_sheet(
                current_role=current_role(), class_id=class_id, work_date=work_date
            )
            return ok(date=work_date.strftime("%Y-%m-%d"), students=sheet)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("loading the class sheet")

    @app.route("/attendance/report", methods=["GET"], endpoint="attendance_report")
    @login_required
    def attendance_report():
        try:
            start, end = _report_range()
            data = container.report_service.build_attendance_report(start=start, end=end, **_report_scope())
            return ok(
                start=start.strftime("%Y-%m-%d"),
                end=end.strftime("%Y-%m-%d"),
                rows=data.rows,
                summary=data.summary,
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("building the report")

    @app.route("/attendance/report.csv", methods=["GET"], endpoint="attendance_report_csv")
    @login_required
    def attendance_report_csv():
        try:
            start, end = _report_range()
            data = container.report_service.build_attendance_report(start=start, end=end, **_report_scope())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("exporting the report")

        filename = f"attendance_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return _write_report_csv(data=data, filename=filename)
