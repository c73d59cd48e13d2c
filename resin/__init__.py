"""Resin API access: settings, errors and the generic resource client"""

__version__ = "1.0.0"

from .errors import NotFoundError, RequestError, ResinError, TransportError, ValidationError
from .settings import Settings


__all__ = [
    'NotFoundError', 'RequestError', 'ResinError', 'Settings', 'TransportError',
    'ValidationError',
]
