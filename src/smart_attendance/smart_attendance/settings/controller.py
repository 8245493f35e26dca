from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import utc_iso_now
from ..common.http import domain_error, json_body, server_error
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container, *, prefix: str = "/api") -> None:
    @app.route(f"{prefix}/settings", methods=["GET"], endpoint="get_settings")
    def get_settings():
        try:
            return jsonify(container.settings_service.get_settings().to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "loading settings")

    @app.route(f"{prefix}/settings", methods=["POST"], endpoint="save_settings")
    def save_settings():
        try:
            return jsonify(container.settings_service.save_settings(json_body()).to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(e, "saving settings")

    @app.route(f"{prefix}/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok", "storeConnectionState": container.store_state(), "timestamp": utc_iso_now()})
