"""Exception types raised by the DMS client and the tool layer."""

from typing import Any


class PaperlessBridgeError(Exception):
    """Base exception for all errors raised by the bridge."""
    pass


class RequestError(PaperlessBridgeError):
    """The DMS backend answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int, response_body: Any = None):
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)


class ValidationError(PaperlessBridgeError):
    """A tool argument failed a pre-flight check. Raised before any request is sent."""
    pass


class InvalidInputError(ValidationError):
    """A payload could not be decoded (e.g. malformed base64 file data)."""
    pass


class NotConfiguredError(PaperlessBridgeError):
    """The HTTP client was used before boot() was called."""
    pass
