"""
Wire Layer Package

This package contains the pieces a method call passes through on its way
to and from the service.

Modules:
- base: HTTP transport
- envelope: Request envelope builder and signing
- response: Response validator/unwrapper
"""

from .base import HealthServiceTransport
from .envelope import build_request, requires_authentication
from .response import ResponseOutcome, classify_response, error_for_outcome

__all__ = [
    "HealthServiceTransport",
    "build_request",
    "requires_authentication",
    "ResponseOutcome",
    "classify_response",
    "error_for_outcome",
]
