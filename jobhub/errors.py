"""Domain errors and their JSON rendering."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from flask import jsonify

logger = logging.getLogger(__name__)


class JobHubError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(JobHubError):
    status_code = 400
    code = "validation_error"


class NotFoundError(JobHubError):
    status_code = 404
    code = "not_found"


class PersistenceUnavailable(JobHubError):
    """The database could not be reached; callers decide whether to retry."""

    status_code = 503
    code = "persistence_unavailable"


def register_error_handlers(app) -> None:
    @app.errorhandler(JobHubError)
    def _handle_jobhub_error(exc: JobHubError):
        if exc.status_code >= 500:
            logger.error("%s: %s", exc.code, exc.message)
        return jsonify(exc.to_payload()), exc.status_code
