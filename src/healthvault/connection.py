"""
HealthVault Connection

Responsibilities:
- Application identity and service instance selection
- Session credential lifecycle (authenticate, refresh on expiry)
- The single choke point for method calls: execute()
- Typed sub-client accessors

This is the main entry point for users of the SDK.
"""

import asyncio
import base64
import binascii
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Type, TypeVar
from uuid import UUID

import httpx

from .api.base import HealthServiceTransport
from .api.envelope import (
    CREATE_SESSION_TOKEN_METHOD,
    build_request,
    build_session_token_parameters,
    requires_authentication,
)
from .api.response import ResponseOutcome, classify_response, error_for_outcome
from .auth import SessionManager
from .clients.action_plan import ActionPlanClient
from .clients.base import BaseClient
from .clients.person import PersonClient
from .clients.platform import PlatformClient
from .clients.thing import ThingClient
from .clients.vocabulary import VocabularyClient
from .config import HealthVaultSettings
from .enums import ResponseStatus
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    NotAuthenticatedError,
    RequestTimeoutError,
)
from .models import (
    HealthRecordInfo,
    HealthServiceResponseData,
    MethodCallRequest,
    ServiceInstance,
    SessionCredential,
)
from .utils import child_text

logger = logging.getLogger(__name__)

TClient = TypeVar("TClient", bound=BaseClient)

CREATE_SESSION_TOKEN_VERSION = 2


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealthVaultConnection:
    """
    A single authenticated channel to the service for one application.

    This class handles:
    1. Service instance resolution (explicit or from settings)
    2. Application authentication and session credential refresh
    3. Signing, sending and unwrapping every method call
    4. Sub-client creation

    Usage:
        async with HealthVaultConnection(settings) as connection:
            await connection.authenticate()
            person = await connection.person_client.get_person_info()

    Args:
        settings: Application and service configuration
        application_id: Overrides settings.application_id
        service_instance: Overrides the instance described by settings
        http_client: Optional httpx.AsyncClient used by the transport
        clock: Returns the current UTC time; written to <msg-time>
    """

    def __init__(
        self,
        settings: HealthVaultSettings,
        *,
        application_id: Optional[UUID] = None,
        service_instance: Optional[ServiceInstance] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize connection."""
        application_id = application_id or settings.application_id
        if application_id is None:
            raise ConfigurationError("An application id is required")

        self.settings = settings
        self._application_id = application_id
        self._service_instance = service_instance
        self._clock = clock

        self.transport = HealthServiceTransport(
            timeout=settings.request_timeout_seconds,
            client=http_client,
        )
        self.session_manager = SessionManager(self._create_session_credential)

    @property
    def application_id(self) -> UUID:
        return self._application_id

    @property
    def service_instance(self) -> Optional[ServiceInstance]:
        """The selected service instance, None until first resolved."""
        return self._service_instance

    @property
    def session_credential(self) -> Optional[SessionCredential]:
        return self.session_manager.credential

    def is_authenticated(self) -> bool:
        return self.session_manager.is_authenticated()

    async def authenticate(self) -> None:
        """
        Authenticate the application and store a new session credential.

        Every call performs a round trip; calls that overlap share one.

        Raises:
            ConfigurationError: If the instance or application secret is
                missing or invalid
            AuthenticationError: If the service rejects the application
        """
        self._resolve_service_instance()
        await self.session_manager.authenticate()

    async def execute(
        self,
        method_name: str,
        method_version: int,
        parameters: Optional[str] = None,
        record_id: Optional[UUID] = None,
        *,
        timeout: Optional[float] = None,
    ) -> HealthServiceResponseData:
        """
        Call a method on the service.

        Args:
            method_name: Name of the remote method
            method_version: Version of the remote method (>= 1)
            parameters: Serialized XML fragment for <info>, or None
            record_id: Record the call is scoped to
            timeout: Seconds before the call is abandoned

        Returns:
            Unwrapped response data

        Raises:
            ArgumentError: If the name, version or parameters are invalid
            NotAuthenticatedError: If the method needs a credential and
                authenticate() has not succeeded
            CredentialExpiredError: If the credential is still rejected
                after one re-authentication
            HealthServiceError: For any other non-zero status
            TransportError: On network or HTTP failures
        """
        request = MethodCallRequest(method_name, method_version, parameters, record_id)
        if timeout is None:
            return await self._execute(request)

        try:
            return await asyncio.wait_for(self._execute(request), timeout)
        except asyncio.TimeoutError:
            raise RequestTimeoutError(
                f"{method_name} did not complete within {timeout} seconds"
            )

    async def _execute(self, request: MethodCallRequest) -> HealthServiceResponseData:
        needs_credential = requires_authentication(request.method_name)
        credential = self.session_manager.credential if needs_credential else None
        if needs_credential and credential is None:
            raise NotAuthenticatedError(
                f"Call authenticate() before calling {request.method_name}"
            )

        outcome = await self._send(request, credential)

        if outcome.status is ResponseStatus.CREDENTIAL_EXPIRED and needs_credential:
            logger.info(
                f"{request.method_name}: session credential rejected "
                f"(status {outcome.data.status_code}), re-authenticating"
            )
            credential = await self.session_manager.refresh(credential)
            outcome = await self._send(request, credential)

        if outcome.is_success:
            return outcome.data

        error = error_for_outcome(outcome)
        logger.warning(f"{request.method_name} failed: {error.message}")
        raise error

    async def _send(
        self,
        request: MethodCallRequest,
        credential: Optional[SessionCredential],
    ) -> ResponseOutcome:
        instance = self._resolve_service_instance()
        body = build_request(
            self._application_id,
            credential,
            request,
            msg_time=self._clock(),
            language=self.settings.language,
            country=self.settings.country,
            msg_ttl=self.settings.msg_ttl_seconds,
            sdk_version=self.settings.sdk_version,
        )
        response_text = await self.transport.post(instance.health_service_url, body)
        return classify_response(response_text)

    def _resolve_service_instance(self) -> ServiceInstance:
        if self._service_instance is None:
            instance = self.settings.default_service_instance()
            if not instance.health_service_url.startswith(("https://", "http://")):
                raise ConfigurationError(
                    f"Invalid health service URL: {instance.health_service_url!r}"
                )
            logger.info(f"Using service instance {instance.name} ({instance.instance_id})")
            self._service_instance = instance
        return self._service_instance

    def _application_secret(self) -> bytes:
        secret = self.settings.application_shared_secret
        if not secret:
            raise ConfigurationError("An application shared secret is required to authenticate")
        try:
            return base64.b64decode(secret, validate=True)
        except binascii.Error:
            raise ConfigurationError("The application shared secret must be base64 encoded")

    async def _create_session_credential(self) -> SessionCredential:
        """Perform one CreateAuthenticatedSessionToken round trip."""
        issued_at = self._clock()
        request = MethodCallRequest(
            CREATE_SESSION_TOKEN_METHOD,
            CREATE_SESSION_TOKEN_VERSION,
            build_session_token_parameters(
                self._application_id, self._application_secret(), issued_at
            ),
        )
        outcome = await self._send(request, None)
        if not outcome.is_success:
            error = error_for_outcome(outcome)
            raise AuthenticationError(
                f"Authentication failed: {error.message}",
                details={"status_code": outcome.data.status_code},
            ) from error

        info = outcome.data.info()
        token = child_text(info, "token") if info is not None else None
        shared_secret = child_text(info, "shared-secret") if info is not None else None
        if not token or not shared_secret:
            raise AuthenticationError("Authentication response has no token or shared secret")

        expires_at = None
        ttl = child_text(info, "token-ttl")
        if ttl and ttl.isdigit():
            expires_at = issued_at + timedelta(seconds=int(ttl))

        logger.info(f"Authenticated application {self._application_id}")
        return SessionCredential(
            token=token,
            shared_secret=shared_secret,
            issued_at=issued_at,
            expires_at=expires_at,
        )

    def get_client(self, client_class: Type[TClient], record: Optional[HealthRecordInfo] = None) -> TClient:
        """
        Create a sub-client of the given type bound to this connection.

        Record scoped clients (ThingClient, ActionPlanClient) require record.
        """
        if getattr(client_class, "record_scoped", False):
            return client_class(self, record)
        return client_class(self)

    @property
    def platform_client(self) -> PlatformClient:
        return PlatformClient(self)

    @property
    def person_client(self) -> PersonClient:
        return PersonClient(self)

    @property
    def vocabulary_client(self) -> VocabularyClient:
        return VocabularyClient(self)

    def get_thing_client(self, record: HealthRecordInfo) -> ThingClient:
        return ThingClient(self, record)

    def get_action_plan_client(self, record: HealthRecordInfo) -> ActionPlanClient:
        return ActionPlanClient(self, record)

    async def close(self):
        """Forget the credential and close the HTTP client."""
        self.session_manager.clear()
        await self.transport.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
