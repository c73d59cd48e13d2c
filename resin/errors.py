"""
Exceptions raised when talking to the Resin API.

Errors are raised by the resource client and device lookup, and passed through unchanged by the
services built on top of them.
"""

from typing import Optional


class ResinError(Exception):
    """
    Base class of all errors raised by this library.
    """

    def __init__(self, message: str = "", status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NotFoundError(ResinError, LookupError):
    """
    The referenced application, device or record does not exist.
    """


class ValidationError(ResinError, ValueError):
    """
    The backend rejected the request, e.g. a malformed variable name or value.
    """


class TransportError(ResinError):
    """
    The backend could not be reached.
    """


class RequestError(ResinError):
    """
    Any other unsuccessful response from the backend.
    """
