"""
API error types and the mapping from HTTP status to user-facing messages.
"""

SEVERITY_INFO = "info"
SEVERITY_WARNING = "warning"
SEVERITY_ERROR = "error"

CONNECTION_ERROR = (
    "Connection Error",
    "Unable to connect to server. Please check your internet connection.",
    SEVERITY_ERROR,
)

STATUS_MESSAGES = {
    400: (
        "Invalid Request",
        "The request contains invalid data. Please check your input.",
        SEVERITY_WARNING,
    ),
    401: ("Authentication Required", "Please log in to continue.", SEVERITY_INFO),
    403: (
        "Access Denied",
        "You do not have permission to perform this action.",
        SEVERITY_WARNING,
    ),
    404: ("Not Found", "The requested resource was not found.", SEVERITY_WARNING),
    409: (
        "Conflict",
        "The request conflicts with the current state of the resource.",
        SEVERITY_WARNING,
    ),
    422: ("Validation Error", "The request contains validation errors.", SEVERITY_WARNING),
    429: ("Too Many Requests", "Too many requests. Please try again later.", SEVERITY_WARNING),
    500: ("Server Error", "Internal server error. Please try again later.", SEVERITY_ERROR),
    502: (
        "Bad Gateway",
        "Server is temporarily unavailable. Please try again later.",
        SEVERITY_ERROR,
    ),
    503: (
        "Service Unavailable",
        "Service is temporarily unavailable. Please try again later.",
        SEVERITY_ERROR,
    ),
    504: ("Gateway Timeout", "Request timeout. Please try again.", SEVERITY_ERROR),
}


def describe_status(status_code):
    """Return ``(title, message, severity)`` for an HTTP status code."""
    if status_code in STATUS_MESSAGES:
        return STATUS_MESSAGES[status_code]
    severity = SEVERITY_ERROR if status_code >= 500 else SEVERITY_WARNING
    return f"Error {status_code}", f"Server returned error code {status_code}", severity


class ApiError(Exception):
    """An unsuccessful API call."""

    def __init__(self, message, status_code=None, title="Error", severity=SEVERITY_ERROR, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.title = title
        self.severity = severity
        self.payload = payload

    def __str__(self):
        return self.message


class ApiConnectionError(ApiError):
    """The server could not be reached or did not answer in time."""

    def __init__(self, message=None):
        title, default_message, severity = CONNECTION_ERROR
        super().__init__(message or default_message, title=title, severity=severity)


def _server_message(payload):
    """Pull a human readable message out of an error body, if there is one."""
    if isinstance(payload, dict):
        for key in ("detail", "message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
        # DRF field errors: {"field": ["message", ...]}
        for field, value in payload.items():
            if isinstance(value, list) and value:
                return f"{field}: {value[0]}"
            if isinstance(value, str) and value:
                return f"{field}: {value}"
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        return payload[0]
    return None


def error_from_response(response):
    """Build an ApiError from a non-2xx ``requests.Response``."""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    title, default_message, severity = describe_status(response.status_code)
    return ApiError(
        _server_message(payload) or default_message,
        status_code=response.status_code,
        title=title,
        severity=severity,
        payload=payload,
    )
