# FILE: erp/core/errors.py
from __future__ import annotations

from typing import Any, Optional


class ErpError(RuntimeError):
    """
    Base for errors that map 1:1 to an HTTP response.
    Raised from services; turned into {"message", "details"} by the API layer.
    """
    status_code = 500

    def __init__(self, message: str, *, details: Any = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code


class BadRequest(ErpError):
    status_code = 400


class ValidationFailed(BadRequest):
    """Field-level validation problems. details = [{"field": ..., "message": ...}]"""


class Unauthorized(ErpError):
    status_code = 401


class Forbidden(ErpError):
    status_code = 403


class NotFound(ErpError):
    status_code = 404


class Conflict(ErpError):
    status_code = 409
