"""
Domain errors raised by the service layer.

Services never raise HTTPException; they raise one of these and the
handlers registered in main.py turn them into JSON responses:

    PortalError
    ├── ValidationError     400  (field-level messages in .errors)
    │   └── InvalidCredentials
    ├── Unauthenticated     401
    ├── Forbidden           403
    ├── NotFound            404
    └── Conflict            400  (clients treat it like any bad request)
"""

from typing import List, Optional


class PortalError(Exception):
    status_code = 500
    default_message = "Server Error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class ValidationError(PortalError):
    status_code = 400
    default_message = "Invalid input"


class InvalidCredentials(ValidationError):
    default_message = "Invalid credentials"


class Unauthenticated(PortalError):
    status_code = 401
    default_message = "Not authorized, no token"


class Forbidden(PortalError):
    status_code = 403
    default_message = "Not authorized"


class NotFound(PortalError):
    status_code = 404
    default_message = "Not found"


class Conflict(PortalError):
    status_code = 400
    default_message = "Already exists"
