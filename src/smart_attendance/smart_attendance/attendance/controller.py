from __future__ import annotations

from flask import Flask, jsonify, request

from ..capture.qr_codes import decode_qr_image
from ..common.http import domain_error, json_body, json_error, server_error
from ..core.enums import AttendanceStatus
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container, *, prefix: str = "/api") -> None:
    @app.route(f"{prefix}/attendance", methods=["GET"], endpoint="list_attendance")
    def list_attendance():
        try:
            records = container.attendance_service.list_records(
                student_id=request.args.get("studentId"),
                start_date=request.args.get("startDate"),
                end_date=request.args.get("endDate"),
                subject=request.args.get("subject"),
            )
            return jsonify([r.to_dict() for r in records])
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "listing attendance")

    @app.route(f"{prefix}/attendance", methods=["POST"], endpoint="mark_attendance")
    def mark_attendance():
        try:
            record = container.attendance_service.mark(json_body())
            return jsonify(record.to_dict()), 201
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "marking attendance")

    @app.route(f"{prefix}/attendance/scan", methods=["POST"], endpoint="scan_attendance_image")
    def scan_attendance_image():
        """Accept an uploaded photo of a student badge and mark them present."""
        try:
            if "image" not in request.files:
                return json_error("Missing image file", 400, "validation")

            payload = decode_qr_image(request.files["image"].read(), decoder=app.config.get("QR_DECODER"))
            if not payload:
                return json_error("No QR code detected in the image", 400, "validation")

            teacher_id = request.form.get("teacherId", "")
            student = container.user_service.get_user(payload)
            if teacher_id not in student.teacher_ids:
                return json_error("Student not found in your class list", 400, "validation")

            record = container.attendance_service.mark(
                {
                    "studentId": student.user_id,
                    "studentName": student.name,
                    "teacherId": teacher_id,
                    "subject": request.form.get("subject"),
                    "status": AttendanceStatus.PRESENT.value,
                }
            )
            return jsonify(record.to_dict()), 201
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "marking attendance from an image")
