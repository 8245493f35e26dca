from __future__ import annotations

from datetime import date

from flask import Flask, request

from ..common.http import domain_error, json_error, server_error
from ..core.exceptions import DomainError
from ..container import Container
from ..users.model import MarksConfig
from .export import render_pdf, write_csv


def register(app: Flask, container: Container, *, prefix: str = "/api") -> None:
    def _download(payload: bytes, *, mimetype: str, filename: str):
        return app.response_class(
            payload,
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    def _int_arg(name: str, default: int) -> int:
        value = request.args.get(name)
        return int(value) if value not in (None, "") else default

    @app.route(f"{prefix}/reports/attendance.<fmt>", methods=["GET"], endpoint="attendance_report")
    def attendance_report(fmt: str):
        if fmt not in ("csv", "pdf"):
            return json_error(f"Unsupported report format: {fmt}", 404, "not_found")
        try:
            data = container.report_service.attendance_report(
                start_date=request.args.get("startDate") or None,
                end_date=request.args.get("endDate") or None,
                subject=request.args.get("subject") or None,
                teacher_id=request.args.get("teacherId") or None,
            )
            filename = f"attendance_report_{date.today().isoformat()}.{fmt}"
            if fmt == "csv":
                return _download(write_csv(data), mimetype="text/csv", filename=filename)
            return _download(render_pdf(data), mimetype="application/pdf", filename=filename)
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "building the attendance report")

    @app.route(f"{prefix}/reports/marks.pdf", methods=["GET"], endpoint="marks_report")
    def marks_report():
        teacher_id = request.args.get("teacherId")
        if not teacher_id:
            return json_error("teacherId is required", 400, "validation")
        try:
            defaults = MarksConfig()
            config = MarksConfig(
                max_cie1=_int_arg("maxCie1", defaults.max_cie1),
                max_cie2=_int_arg("maxCie2", defaults.max_cie2),
                max_assignment=_int_arg("maxAssignment", defaults.max_assignment),
            )
            teacher = container.users_repo.get_by_id(teacher_id)
            data = container.report_service.marks_report(
                teacher_id=teacher_id,
                teacher_name=teacher.name if teacher else "",
                config=config,
                sort_key=request.args.get("sort") or "name",
                descending=request.args.get("direction") == "desc",
            )
            filename = f"student_marks_{date.today().isoformat()}.pdf"
            return _download(render_pdf(data), mimetype="application/pdf", filename=filename)
        except ValueError:
            return json_error("Mark limits must be numbers", 400, "validation")
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "building the marks report")
