"""
Transport

Responsibilities:
- HTTP client lifecycle management (using httpx)
- POST of request envelopes to the health service URL
- Conversion of network and HTTP failures to SDK exceptions
- Compressed responses (gzip/deflate are decoded by httpx)

This is the only module that performs network I/O.
"""

import logging
from typing import Optional

import httpx

from ..exceptions import RequestTimeoutError, TransportError
from ..utils import sanitize_error_message

logger = logging.getLogger(__name__)


class HealthServiceTransport:
    """
    HTTP transport for method calls.

    This class provides:
    1. A single pooled httpx.AsyncClient shared by every call
    2. POST of the XML envelope with the headers the service expects
    3. Exception conversion for network errors and non-2xx responses

    Args:
        timeout: Request timeout in seconds
        client: Optional preconfigured httpx.AsyncClient (tests pass one
            built on httpx.MockTransport)
    """

    def __init__(
        self,
        timeout: float = 30,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize transport."""
        self.timeout = timeout
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self._closed = False

    async def post(self, url: str, body: bytes) -> str:
        """
        Send a request envelope.

        Args:
            url: Health service URL
            body: Envelope produced by the envelope builder

        Returns:
            Response body as text

        Raises:
            RequestTimeoutError: If the request times out
            TransportError: On network errors, non-2xx responses or use
                after close()
        """
        if self._closed or self.client.is_closed:
            raise TransportError("Transport is closed")

        headers = {
            "Content-Type": "text/xml; charset=utf-8",
            "Accept-Encoding": "gzip, deflate",
        }
        logger.debug(f"POST {url} ({len(body)} bytes)")

        try:
            response = await self.client.post(url, content=body, headers=headers)
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(f"Request timed out: {str(e)}")
        except httpx.RequestError as e:
            raise TransportError(f"Request failed: {sanitize_error_message(str(e))}")

        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> str:
        """
        Handle HTTP response and convert errors.

        The service reports its own failures inside a 200 response; any
        other HTTP status means the request never reached the method
        dispatcher.

        Raises:
            TransportError: On non-2xx status
        """
        if response.status_code >= 200 and response.status_code < 300:
            logger.debug(f"Response {response.status_code} ({len(response.content)} bytes)")
            return response.text

        raise TransportError(
            f"HTTP {response.status_code} from {response.url}",
            details={"status_code": response.status_code},
        )

    async def close(self):
        """Close HTTP client and cleanup resources."""
        self._closed = True
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        """Async context manager support."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Cleanup on exit."""
        await self.close()
