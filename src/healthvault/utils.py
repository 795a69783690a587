"""
Utility Functions

Responsibilities:
- XML element helpers shared by the envelope builder, response parser,
  sub-clients and item types
- Query string encoding compatible with the Shell redirect interface
- Error message sanitizing for logs

This module contains utility functions used across the SDK.
"""

import re
from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple
from urllib.parse import quote_plus
from uuid import UUID
from xml.etree import ElementTree

from .exceptions import ArgumentError, ResponseFormatError


def local_name(tag: str) -> str:
    """Return a tag without its '{namespace}' prefix."""
    return tag.rsplit('}', 1)[-1]


def strip_namespaces(element: ElementTree.Element) -> ElementTree.Element:
    """
    Remove namespace qualifiers from an element tree in place.

    Service responses qualify only a few wrapper elements; callers look
    children up by local name.

    Args:
        element: Root of the tree

    Returns:
        The same element, for chaining
    """
    for node in element.iter():
        if isinstance(node.tag, str):
            node.tag = local_name(node.tag)
        for key in list(node.attrib):
            if key.startswith('{'):
                node.attrib[local_name(key)] = node.attrib.pop(key)
    return element


def child_text(element: ElementTree.Element, path: str, default: Optional[str] = None) -> Optional[str]:
    """Text of the first element matching path, or default when absent."""
    child = element.find(path)
    if child is None or child.text is None:
        return default
    return child.text


def parse_uuid(value: Optional[str], field: str) -> UUID:
    """
    Parse an identifier read from a service response.

    Raises:
        ResponseFormatError: If value is missing or not a UUID
    """
    try:
        return UUID((value or "").strip())
    except ValueError:
        raise ResponseFormatError(f"Response has a missing or invalid {field}: {value!r}")


def sub_element_text(parent: ElementTree.Element, tag: str, text) -> ElementTree.Element:
    """Append <tag>text</tag> to parent and return the new element."""
    child = ElementTree.SubElement(parent, tag)
    child.text = str(text)
    return child


def element_to_string(element: ElementTree.Element) -> str:
    """Serialize an element without an XML declaration."""
    return ElementTree.tostring(element, encoding="unicode", short_empty_elements=True)


def parse_fragment(fragment: Optional[str], wrapper: str) -> ElementTree.Element:
    """
    Parse an XML fragment (zero or more sibling elements and text) by
    wrapping it in a single element.

    Raises:
        ArgumentError: If the fragment is not well-formed
    """
    try:
        return ElementTree.fromstring(f"<{wrapper}>{fragment or ''}</{wrapper}>")
    except ElementTree.ParseError as e:
        raise ArgumentError(f"Parameters are not well-formed XML: {e}")


def format_msg_time(value: datetime) -> str:
    """Format a timestamp as UTC ISO 8601 with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


_PERCENT_ESCAPE = re.compile(r'%[0-9A-F]{2}')


def url_encode(value: str) -> str:
    """
    Form-encode a single key or value.

    Spaces become '+', reserved characters become lowercase percent
    escapes, and "-_.!*'()" plus alphanumerics are left as is. This matches
    what the Shell service emits and expects.
    """
    encoded = quote_plus(value, safe="!*'()")
    return _PERCENT_ESCAPE.sub(lambda m: m.group(0).lower(), encoded)


def to_query_string(parameters: Iterable[Tuple[str, str]]) -> str:
    """Serialize key/value pairs to 'k1=v1&k2=v2' with every part encoded."""
    return "&".join(
        f"{url_encode(key)}={url_encode(value)}" for key, value in parameters
    )


def sanitize_error_message(message: str) -> str:
    """
    Sanitize error message to remove sensitive information.

    Args:
        message: Raw error message

    Returns:
        Sanitized error message
    """
    # Remove shared secrets
    message = re.sub(r'(shared[-_]?secret)["\']?\s*[:=>]\s*["\']?[^"\'<&\s]+', r'\1=***', message, flags=re.IGNORECASE)

    # Remove potential tokens
    message = re.sub(r'(auth[-_]?token|token)["\']?\s*[:=>]\s*["\']?[\w\-\.\+/=]+', r'\1=***', message, flags=re.IGNORECASE)

    return message
