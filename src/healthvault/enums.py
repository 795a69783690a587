"""Enumeration types for the SDK"""
from enum import Enum, IntEnum


class HealthServiceStatusCode(IntEnum):
    """Status codes carried in <response><status><code>

    Only the codes the SDK classifies are listed. The service may return
    others; those are preserved as raw integers and surface as UNKNOWN.
    """
    OK = 0
    FAILED = 1
    BAD_HTTP = 2
    INVALID_XML = 3
    BAD_SIGNATURE = 4
    BAD_METHOD = 5
    INVALID_APP = 6
    CREDENTIAL_TOKEN_EXPIRED = 7
    INVALID_TOKEN = 8
    INVALID_PERSON = 9
    INVALID_RECORD = 10
    ACCESS_DENIED = 11
    BAD_METHOD_VERSION = 12
    INVALID_THING = 13
    VERSION_STAMP_MISMATCH = 18
    AUTHENTICATED_SESSION_TOKEN_EXPIRED = 65


class ErrorKind(str, Enum):
    """Closed set of failure kinds a service status code maps to"""
    BAD_REQUEST = "bad_request"
    PERMISSION_DENIED = "permission_denied"
    RECORD_NOT_FOUND = "record_not_found"
    VERSION_MISMATCH = "version_mismatch"
    CREDENTIAL_EXPIRED = "credential_expired"
    UNKNOWN = "unknown"


class ResponseStatus(str, Enum):
    """Outcome of classifying a raw service response

    SUCCESS: status code 0, payload available.
    CREDENTIAL_EXPIRED: the session credential must be replaced before the
        call can be retried.
    FAILURE: terminal failure, never retried automatically.
    """
    SUCCESS = "success"
    CREDENTIAL_EXPIRED = "credential_expired"
    FAILURE = "failure"


class ActionPlanWindowType(str, Enum):
    """Window in which a frequency task's occurrences must be completed"""
    UNKNOWN = "Unknown"
    NONE = "None"
    DAILY = "Daily"
    WEEKLY = "Weekly"
