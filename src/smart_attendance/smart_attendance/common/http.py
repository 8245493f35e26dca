from __future__ import annotations

import logging
from typing import Any

from flask import jsonify, request

from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)


def json_error(message: str, status: int, code: str):
    return jsonify({"message": message, "code": code}), status


def domain_error(e: DomainError):
    return json_error(str(e), e.status_code, e.code)


def server_error(e: Exception, action: str):
    # Store errors are passed through verbatim.
    logger.exception("unhandled error while %s", action)
    return json_error(str(e) or "Internal server error", 500, "server_error")


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
