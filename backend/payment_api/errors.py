"""Failures the services raise, each carrying the HTTP status it maps to."""

from typing import Dict, Optional

GENERIC_ERROR_MESSAGE = "Internal server error"


class ServiceError(Exception):
    status_code = 500
    default_message = GENERIC_ERROR_MESSAGE

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, object]:
        return {"success": False, "message": self.message}


class InvalidInput(ServiceError):
    status_code = 400
    default_message = "Missing required fields"


class Conflict(ServiceError):
    status_code = 400
    default_message = "User already exists"


class NotFound(ServiceError):
    status_code = 404
    default_message = "Not found"


class Unauthorized(ServiceError):
    status_code = 401
    default_message = "Incorrect password"


class Internal(ServiceError):
    status_code = 500
