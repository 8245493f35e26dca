from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..capture.qr_codes import render_student_qr
from ..common.http import domain_error, json_body, server_error
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container, *, prefix: str = "/api") -> None:
    @app.route(f"{prefix}/login", methods=["POST"], endpoint="login")
    def login():
        try:
            data = json_body()
            user = container.auth_service.login(data.get("email"), data.get("password"), data.get("role"))
            return jsonify(user.to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "logging in")

    @app.route(f"{prefix}/forgot-password", methods=["POST"], endpoint="forgot_password")
    def forgot_password():
        try:
            message = container.auth_service.forgot_password(json_body().get("email"))
            return jsonify({"message": message})
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "requesting a password reset")

    @app.route(f"{prefix}/users", methods=["GET"], endpoint="list_users")
    def list_users():
        try:
            users = container.user_service.list_users(request.args.get("role") or None)
            return jsonify([u.to_dict() for u in users])
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "listing users")

    @app.route(f"{prefix}/users", methods=["POST"], endpoint="create_user")
    def create_user():
        try:
            user = container.user_service.create_user(json_body())
            return jsonify(user.to_dict()), 201
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "creating a user")

    @app.route(f"{prefix}/users/<user_id>", methods=["PUT"], endpoint="update_user")
    def update_user(user_id: str):
        try:
            user = container.user_service.update_user(user_id, json_body())
            return jsonify(user.to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "updating a user")

    @app.route(f"{prefix}/users/<user_id>", methods=["DELETE"], endpoint="delete_user")
    def delete_user(user_id: str):
        try:
            container.user_service.delete_user(user_id)
            return jsonify({"message": "User deleted successfully"})
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "deleting a user")

    @app.route(f"{prefix}/users/<user_id>/qr", methods=["GET"], endpoint="user_qr_image")
    def user_qr_image(user_id: str):
        """PNG badge the student shows to the teacher's scanner."""
        try:
            user = container.user_service.get_user(user_id)
            buf = io.BytesIO(render_student_qr(user.user_id))
            return send_file(buf, mimetype="image/png", download_name=f"{user.user_id}.png")
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "rendering a QR badge")
