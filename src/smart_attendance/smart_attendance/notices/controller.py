from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import domain_error, json_body, server_error
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container, *, prefix: str = "/api") -> None:
    @app.route(f"{prefix}/notices", methods=["GET"], endpoint="list_notices")
    def list_notices():
        try:
            notices = container.notice_service.list_notices(
                teacher_id=request.args.get("teacherId") or None,
                student_id=request.args.get("studentId") or None,
            )
            return jsonify([n.to_dict() for n in notices])
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "listing notices")

    @app.route(f"{prefix}/notices", methods=["POST"], endpoint="create_notice")
    def create_notice():
        try:
            notice = container.notice_service.create_notice(json_body())
            return jsonify(notice.to_dict()), 201
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "creating a notice")

    @app.route(f"{prefix}/notices/<notice_id>", methods=["PUT"], endpoint="update_notice")
    def update_notice(notice_id: str):
        try:
            notice = container.notice_service.update_notice(notice_id, json_body())
            return jsonify(notice.to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "updating a notice")

    @app.route(f"{prefix}/notices/<notice_id>", methods=["DELETE"], endpoint="delete_notice")
    def delete_notice(notice_id: str):
        try:
            container.notice_service.delete_notice(notice_id)
            return jsonify({"message": "Notice deleted"})
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "deleting a notice")
