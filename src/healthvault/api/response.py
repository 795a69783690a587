"""
Response Validator/Unwrapper

Responsibilities:
- Parse the raw response document
- Classify the status code into success, credential expired or failure
- Map terminal failures to their typed exception

classify_response() never raises for a non-zero status; it returns a
tagged outcome and leaves raising to the connection.
"""

from dataclasses import dataclass
from typing import Dict, Optional
from xml.etree import ElementTree

from ..enums import ErrorKind, HealthServiceStatusCode, ResponseStatus
from ..exceptions import (
    BadRequestError,
    CredentialExpiredError,
    HealthServiceError,
    PermissionDeniedError,
    RecordNotFoundError,
    ResponseFormatError,
    UnknownServiceError,
    VersionMismatchError,
)
from ..models import HealthServiceResponseData
from ..utils import child_text, element_to_string, local_name, strip_namespaces

_KIND_BY_STATUS: Dict[int, ErrorKind] = {
    HealthServiceStatusCode.BAD_HTTP: ErrorKind.BAD_REQUEST,
    HealthServiceStatusCode.INVALID_XML: ErrorKind.BAD_REQUEST,
    HealthServiceStatusCode.BAD_METHOD: ErrorKind.BAD_REQUEST,
    HealthServiceStatusCode.INVALID_THING: ErrorKind.BAD_REQUEST,
    HealthServiceStatusCode.BAD_SIGNATURE: ErrorKind.PERMISSION_DENIED,
    HealthServiceStatusCode.INVALID_APP: ErrorKind.PERMISSION_DENIED,
    HealthServiceStatusCode.ACCESS_DENIED: ErrorKind.PERMISSION_DENIED,
    HealthServiceStatusCode.INVALID_PERSON: ErrorKind.RECORD_NOT_FOUND,
    HealthServiceStatusCode.INVALID_RECORD: ErrorKind.RECORD_NOT_FOUND,
    HealthServiceStatusCode.BAD_METHOD_VERSION: ErrorKind.VERSION_MISMATCH,
    HealthServiceStatusCode.VERSION_STAMP_MISMATCH: ErrorKind.VERSION_MISMATCH,
    HealthServiceStatusCode.CREDENTIAL_TOKEN_EXPIRED: ErrorKind.CREDENTIAL_EXPIRED,
    HealthServiceStatusCode.INVALID_TOKEN: ErrorKind.CREDENTIAL_EXPIRED,
    HealthServiceStatusCode.AUTHENTICATED_SESSION_TOKEN_EXPIRED: ErrorKind.CREDENTIAL_EXPIRED,
}

_EXCEPTION_BY_KIND = {
    ErrorKind.BAD_REQUEST: BadRequestError,
    ErrorKind.PERMISSION_DENIED: PermissionDeniedError,
    ErrorKind.RECORD_NOT_FOUND: RecordNotFoundError,
    ErrorKind.VERSION_MISMATCH: VersionMismatchError,
    ErrorKind.CREDENTIAL_EXPIRED: CredentialExpiredError,
    ErrorKind.UNKNOWN: UnknownServiceError,
}


def classify_status(status_code: int) -> ErrorKind:
    """Error kind for a non-zero status code; UNKNOWN when unrecognized."""
    return _KIND_BY_STATUS.get(status_code, ErrorKind.UNKNOWN)


@dataclass(frozen=True)
class ResponseOutcome:
    """
    Tagged classification of a response.

    Attributes:
        status: SUCCESS, CREDENTIAL_EXPIRED or FAILURE
        data: The unwrapped response (present for every status)
        kind: Error kind for non-success outcomes
    """
    status: ResponseStatus
    data: HealthServiceResponseData
    kind: Optional[ErrorKind] = None

    @property
    def is_success(self) -> bool:
        return self.status is ResponseStatus.SUCCESS


def parse_response(body: str) -> HealthServiceResponseData:
    """
    Unwrap a raw response document.

    Raises:
        ResponseFormatError: If body is not XML or has no integer status code
    """
    try:
        root = ElementTree.fromstring(body)
    except ElementTree.ParseError as e:
        raise ResponseFormatError(f"Response is not well-formed XML: {e}")

    strip_namespaces(root)
    if root.tag != "response":
        raise ResponseFormatError(f"Unexpected response root <{root.tag}>")

    code_text = child_text(root, "status/code")
    try:
        status_code = int(code_text)
    except (TypeError, ValueError):
        raise ResponseFormatError(f"Response status code is missing or invalid: {code_text!r}")

    info_xml = None
    for child in root:
        if local_name(child.tag) == "info":
            info_xml = element_to_string(child)
            break

    return HealthServiceResponseData(
        status_code=status_code,
        info_xml=info_xml,
        error_text=child_text(root, "status/error/message"),
        response_xml=body,
    )


def classify_response(body: str) -> ResponseOutcome:
    """
    Parse and classify a raw response document.

    Raises:
        ResponseFormatError: If the body cannot be parsed
    """
    data = parse_response(body)
    if data.status_code == HealthServiceStatusCode.OK:
        return ResponseOutcome(status=ResponseStatus.SUCCESS, data=data)

    kind = classify_status(data.status_code)
    if kind is ErrorKind.CREDENTIAL_EXPIRED:
        return ResponseOutcome(status=ResponseStatus.CREDENTIAL_EXPIRED, data=data, kind=kind)
    return ResponseOutcome(status=ResponseStatus.FAILURE, data=data, kind=kind)


def error_for_outcome(outcome: ResponseOutcome) -> HealthServiceError:
    """Exception instance describing a non-success outcome."""
    error_class = _EXCEPTION_BY_KIND[outcome.kind]
    return error_class(outcome.data.status_code, outcome.data.error_text)
