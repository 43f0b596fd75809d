"""
User-friendly error messages and status codes.

Every failure on the request path maps to one ErrorCode. The client sees the
short message and the status code; the underlying cause stays in the logs.
"""
from typing import Tuple
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for different types of failures."""

    # Authentication Errors (401)
    AUTH_MISSING = "AUTH_MISSING"
    AUTH_MALFORMED = "AUTH_MALFORMED"
    AUTH_INVALID = "AUTH_INVALID"

    # Request Errors (400, 404, 405)
    INVALID_FORMAT = "INVALID_FORMAT"
    MISSING_FIELD = "MISSING_FIELD"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

    # Server Errors (500)
    AUTH_CONTEXT_MISSING = "AUTH_CONTEXT_MISSING"
    GENERATION_FAILED = "GENERATION_FAILED"
    RESPONSE_ENCODE_FAILED = "RESPONSE_ENCODE_FAILED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


ERROR_MESSAGES = {
    ErrorCode.AUTH_MISSING: "Authorization header required",
    ErrorCode.AUTH_MALFORMED: "Invalid authorization header format",
    ErrorCode.AUTH_INVALID: "Invalid or expired token",

    ErrorCode.INVALID_FORMAT: "Invalid request body",
    ErrorCode.MISSING_FIELD: "Missing required fields: projectDescription, colorVibe, colorCount",
    ErrorCode.NOT_FOUND: "Not Found",
    ErrorCode.METHOD_NOT_ALLOWED: "Method not allowed",

    ErrorCode.AUTH_CONTEXT_MISSING: "Internal server error",
    ErrorCode.GENERATION_FAILED: "Failed to generate images",
    ErrorCode.RESPONSE_ENCODE_FAILED: "Internal server error",
    ErrorCode.UNKNOWN_ERROR: "Something unexpected happened. Please try again.",
}


ERROR_STATUS_CODES = {
    ErrorCode.AUTH_MISSING: 401,
    ErrorCode.AUTH_MALFORMED: 401,
    ErrorCode.AUTH_INVALID: 401,

    ErrorCode.INVALID_FORMAT: 400,
    ErrorCode.MISSING_FIELD: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.METHOD_NOT_ALLOWED: 405,

    ErrorCode.AUTH_CONTEXT_MISSING: 500,
    ErrorCode.GENERATION_FAILED: 500,
    ErrorCode.RESPONSE_ENCODE_FAILED: 500,
    ErrorCode.UNKNOWN_ERROR: 500,
}


def get_error_response(error_code: ErrorCode) -> Tuple[str, int]:
    """
    Get user-friendly error message and HTTP status code.

    Args:
        error_code: The error code enum

    Returns:
        Tuple of (error_message, status_code)
    """
    message = ERROR_MESSAGES.get(error_code, ERROR_MESSAGES[ErrorCode.UNKNOWN_ERROR])
    status_code = ERROR_STATUS_CODES.get(error_code, 500)
    return message, status_code
