"""
Request Envelope Builder

Responsibilities:
- Assemble the <wc-request:request> document for a method call
- Hash the <info> section and sign the <header> section
- Build the credential parameters for CreateAuthenticatedSessionToken

Everything here is a pure function of its arguments: identical inputs
produce byte-identical output, which the signature depends on.
"""

import base64
import hashlib
import hmac
from datetime import datetime
from typing import Optional
from uuid import UUID
from xml.etree import ElementTree

from ..models import MethodCallRequest, SessionCredential
from ..utils import element_to_string, format_msg_time, parse_fragment, sub_element_text

REQUEST_NAMESPACE = "urn:com.microsoft.wc.request"
HMAC_ALGORITHM = "HMACSHA256"
HASH_ALGORITHM = "SHA256"

CREATE_SESSION_TOKEN_METHOD = "CreateAuthenticatedSessionToken"

# Methods the service accepts without a session credential; the header
# carries <app-id> instead of <auth-session>.
ANONYMOUS_METHODS = frozenset({
    CREATE_SESSION_TOKEN_METHOD,
    "GetServiceDefinition",
})


def requires_authentication(method_name: str) -> bool:
    """True when method_name must be signed with a session credential."""
    return method_name not in ANONYMOUS_METHODS


def compute_info_hash(info: ElementTree.Element) -> str:
    """Base64 SHA-256 digest of the serialized <info> element."""
    digest = hashlib.sha256(element_to_string(info).encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")


def compute_hmac(secret: bytes, content: str) -> str:
    """Base64 HMAC-SHA256 of content keyed by secret."""
    digest = hmac.new(secret, content.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def _build_header(
    application_id: UUID,
    credential: Optional[SessionCredential],
    request: MethodCallRequest,
    info_hash: str,
    msg_time: datetime,
    language: str,
    country: str,
    msg_ttl: int,
    sdk_version: str,
) -> ElementTree.Element:
    header = ElementTree.Element("header")
    sub_element_text(header, "method", request.method_name)
    sub_element_text(header, "method-version", request.method_version)
    if request.record_id is not None:
        sub_element_text(header, "record-id", request.record_id)
    if credential is not None:
        auth_session = ElementTree.SubElement(header, "auth-session")
        sub_element_text(auth_session, "auth-token", credential.token)
    else:
        sub_element_text(header, "app-id", application_id)
    sub_element_text(header, "language", language)
    sub_element_text(header, "country", country)
    sub_element_text(header, "msg-time", format_msg_time(msg_time))
    sub_element_text(header, "msg-ttl", msg_ttl)
    sub_element_text(header, "version", sdk_version)
    info_hash_element = ElementTree.SubElement(header, "info-hash")
    hash_data = sub_element_text(info_hash_element, "hash-data", info_hash)
    hash_data.set("algName", HASH_ALGORITHM)
    return header


def build_request(
    application_id: UUID,
    credential: Optional[SessionCredential],
    request: MethodCallRequest,
    *,
    msg_time: datetime,
    language: str = "en",
    country: str = "US",
    msg_ttl: int = 1800,
    sdk_version: str = "",
) -> bytes:
    """
    Build the wire body for a method call.

    Args:
        application_id: Calling application
        credential: Session credential; None for anonymous methods
        request: Method name, version, parameters and record id
        msg_time: Timestamp written to <msg-time>
        language: Request language
        country: Request country
        msg_ttl: Seconds the service should consider the message valid
        sdk_version: Value of <version>

    Returns:
        UTF-8 encoded request document

    Raises:
        ArgumentError: If request.parameters is not well-formed XML
    """
    info = parse_fragment(request.parameters, "info")
    header = _build_header(
        application_id,
        credential,
        request,
        compute_info_hash(info),
        msg_time,
        language,
        country,
        msg_ttl,
        sdk_version,
    )

    root = ElementTree.Element("wc-request:request", {"xmlns:wc-request": REQUEST_NAMESPACE})
    if credential is not None:
        auth = ElementTree.SubElement(root, "auth")
        hmac_data = sub_element_text(
            auth, "hmac-data", compute_hmac(credential.secret_bytes, element_to_string(header))
        )
        hmac_data.set("algName", HMAC_ALGORITHM)
    root.append(header)
    root.append(info)
    return element_to_string(root).encode("utf-8")


def build_session_token_parameters(
    application_id: UUID,
    application_secret: bytes,
    signing_time: datetime,
) -> str:
    """
    Build the <info> fragment for CreateAuthenticatedSessionToken.

    The <content> block is signed with the application's own secret so the
    service can verify the application before issuing a session token.
    """
    content = ElementTree.Element("content")
    sub_element_text(content, "app-id", application_id)
    sub_element_text(content, "hmac", HMAC_ALGORITHM)
    sub_element_text(content, "signing-time", format_msg_time(signing_time))

    auth_info = ElementTree.Element("auth-info")
    sub_element_text(auth_info, "app-id", application_id)
    credential = ElementTree.SubElement(auth_info, "credential")
    appserver = ElementTree.SubElement(credential, "appserver2")
    signature = sub_element_text(
        appserver, "hmacSig", compute_hmac(application_secret, element_to_string(content))
    )
    signature.set("algName", HMAC_ALGORITHM)
    appserver.append(content)
    return element_to_string(auth_info)
