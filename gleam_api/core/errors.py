# gleam_api/core/errors.py
"""
Failure kinds raised by the services and rendered once by the app-level
error handler as ``{"error": ..., "message": ...}`` with a matching status.
"""

from typing import Any, Dict, Optional


class GleamAPIError(Exception):
    """Base class for every failure that maps to an HTTP response."""

    status_code = 500
    error = "Internal server error"
    default_message = "An unexpected error occurred."

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message}


class InvalidInputError(GleamAPIError):
    status_code = 400
    error = "Invalid request"
    default_message = "The request body is malformed."

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None):
        if error:
            self.error = error
        super().__init__(message)


class MethodNotAllowedError(GleamAPIError):
    status_code = 405
    error = "Method Not Allowed"
    default_message = "This endpoint does not support the requested method."


class NotFoundError(GleamAPIError):
    status_code = 404
    error = "Not Found"
    default_message = "The requested resource does not exist."

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None):
        if error:
            self.error = error
        super().__init__(message)


class UpstreamAPIError(GleamAPIError):
    """OpenAI answered with an error status; its status and message are passed through."""
    error = "OpenAI API error"


class UpstreamEmptyResponseError(GleamAPIError):
    default_message = "Empty response from OpenAI"


class UpstreamMalformedJSONError(GleamAPIError):
    error = "Invalid JSON response from AI"
    default_message = "The model reply could not be parsed."


class InternalError(GleamAPIError):
    pass
