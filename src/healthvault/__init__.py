"""
HealthVault SDK - Python client for the HealthVault health records service

This package authenticates an application against the service, signs and
sends method calls, and exposes typed sub-clients over one connection.

Main Components:
- HealthVaultConnection: Main entry point; authenticate() and execute()
- Sub-clients: person, platform, vocabulary, thing and action plan
- Item types: XML models for thing data (approximate dates, coded values)
- ShellRedirectParameters: Builds Shell redirect URLs

Usage:
    from healthvault import HealthVaultConnection, HealthVaultSettings

    settings = HealthVaultSettings()
    async with HealthVaultConnection(settings) as connection:
        await connection.authenticate()
        person = await connection.person_client.get_person_info()
        things = await connection.get_thing_client(person.selected_record).get_things()
"""

from .config import HealthVaultSettings
from .connection import HealthVaultConnection
from .exceptions import (
    HealthVaultError,
    ConfigurationError,
    ArgumentError,
    ThingSerializationError,
    AuthenticationError,
    NotAuthenticatedError,
    TransportError,
    RequestTimeoutError,
    ResponseFormatError,
    HealthServiceError,
    BadRequestError,
    PermissionDeniedError,
    RecordNotFoundError,
    VersionMismatchError,
    UnknownServiceError,
    CredentialExpiredError,
)
from .models import DateRange, HealthRecordInfo, ServiceInstance, SessionCredential
from .shell import ShellRedirectParameters

__version__ = "0.1.0"

__all__ = [
    "HealthVaultConnection",
    "HealthVaultSettings",
    "ShellRedirectParameters",
    "DateRange",
    "HealthRecordInfo",
    "ServiceInstance",
    "SessionCredential",
    "HealthVaultError",
    "ConfigurationError",
    "ArgumentError",
    "ThingSerializationError",
    "AuthenticationError",
    "NotAuthenticatedError",
    "TransportError",
    "RequestTimeoutError",
    "ResponseFormatError",
    "HealthServiceError",
    "BadRequestError",
    "PermissionDeniedError",
    "RecordNotFoundError",
    "VersionMismatchError",
    "UnknownServiceError",
    "CredentialExpiredError",
]
