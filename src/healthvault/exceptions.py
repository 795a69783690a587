"""
SDK Exceptions

Responsibilities:
- Define the SDK exception hierarchy
- Carry the service status code and error text for service failures
- Tell callers whether retrying can help

All SDK exceptions inherit from HealthVaultError.
"""

from typing import Optional

from .enums import ErrorKind


class HealthVaultError(Exception):
    """
    Base exception for all SDK errors.

    Attributes:
        message: Error message
        details: Optional dict with additional error context
        retryable: True when the same call may succeed if repeated later
    """

    retryable = False

    def __init__(self, message: str, details: dict = None):
        """Initialize SDK error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(HealthVaultError):
    """
    Required configuration is missing or invalid.

    Raised when:
    - No Shell URL is set on the redirect parameters or the settings
    - No application id or health service URL is configured
    """
    pass


class ArgumentError(HealthVaultError, ValueError):
    """
    An argument violates its contract.

    Raised before any network I/O when:
    - A required value is missing or empty
    - A range is inverted
    - A parameter fragment is not well-formed XML
    """
    pass


class ThingSerializationError(HealthVaultError):
    """An item cannot be written because mandatory data is missing."""
    pass


class AuthenticationError(HealthVaultError):
    """
    Authentication failed.

    Raised when:
    - The service rejects the application credentials
    - The authentication response carries no token or shared secret
    """
    pass


class NotAuthenticatedError(AuthenticationError):
    """A method call was attempted before authenticate() succeeded."""
    pass


class TransportError(HealthVaultError):
    """
    The request could not be delivered or the HTTP exchange failed.

    Raised when:
    - The service is unreachable
    - The HTTP status is not 2xx
    """

    retryable = True


class RequestTimeoutError(TransportError):
    """The call did not complete within its timeout."""
    pass


class ResponseFormatError(HealthVaultError):
    """The response body is not a well-formed service response."""
    pass


class HealthServiceError(HealthVaultError):
    """
    The service answered with a non-zero status code.

    Attributes:
        status_code: Raw status code returned by the service
        error_text: Error message returned by the service
        kind: Classified error kind
    """

    kind = ErrorKind.UNKNOWN

    def __init__(self, status_code: int, error_text: Optional[str] = None):
        message = f"HealthVault returned status {status_code}"
        if error_text:
            message = f"{message}: {error_text}"
        super().__init__(
            message,
            details={"status_code": status_code, "kind": self.kind.value},
        )
        self.status_code = status_code
        self.error_text = error_text


class BadRequestError(HealthServiceError):
    """The request was malformed or named an unknown method."""

    kind = ErrorKind.BAD_REQUEST


class PermissionDeniedError(HealthServiceError):
    """The application or person may not perform the operation."""

    kind = ErrorKind.PERMISSION_DENIED


class RecordNotFoundError(HealthServiceError):
    """The person or record does not exist or is not accessible."""

    kind = ErrorKind.RECORD_NOT_FOUND


class VersionMismatchError(HealthServiceError):
    """The method version or item version stamp does not match."""

    kind = ErrorKind.VERSION_MISMATCH


class UnknownServiceError(HealthServiceError):
    """Any status code without a more specific kind."""

    kind = ErrorKind.UNKNOWN


class CredentialExpiredError(HealthServiceError):
    """The session credential was still rejected after re-authenticating."""

    kind = ErrorKind.CREDENTIAL_EXPIRED
