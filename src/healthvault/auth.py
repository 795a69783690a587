"""
Session Manager

Responsibilities:
- Hold the current session credential
- Run at most one authentication round trip at a time
- Collapse concurrent credential refreshes into a single round trip

The credential is an immutable value swapped by reference, so a request
is always signed with one complete credential.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .models import SessionCredential

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Manages the session credential lifecycle.

    This class handles:
    1. Obtaining a credential through the authenticator coroutine
    2. Sharing one in-flight authentication between overlapping callers
    3. Refreshing a stale credential once, however many calls saw it expire

    The in-flight authentication runs as its own task, shielded from each
    of its waiters. A cancelled caller leaves the round trip running for the
    others; when the last waiter is cancelled the round trip is cancelled
    too, so a call that no longer exists never replaces the credential.

    Args:
        authenticator: Coroutine function performing one authentication
            round trip and returning the new credential
    """

    def __init__(self, authenticator: Callable[[], Awaitable[SessionCredential]]):
        """Initialize session manager."""
        self._authenticator = authenticator

        # Credential state
        self._credential: Optional[SessionCredential] = None
        self._lock = asyncio.Lock()
        self._inflight: Optional[asyncio.Task] = None
        self._waiters = 0

    @property
    def credential(self) -> Optional[SessionCredential]:
        """Current credential, or None before the first authentication."""
        return self._credential

    def is_authenticated(self) -> bool:
        return self._credential is not None

    async def authenticate(self) -> SessionCredential:
        """
        Obtain a new credential.

        Joins the in-flight authentication when one is running; otherwise
        starts a new round trip.

        Raises:
            AuthenticationError: If the service rejects the application
        """
        async with self._lock:
            task = self._start_or_join()
        return await self._wait(task)

    async def refresh(self, stale: Optional[SessionCredential]) -> SessionCredential:
        """
        Replace a credential the service reported as expired.

        If another caller already replaced it, the current credential is
        returned without a round trip. If a refresh is running, it is
        joined.

        Args:
            stale: The credential the failed call was signed with

        Raises:
            AuthenticationError: If re-authentication fails; the stale
                credential is discarded in that case
        """
        async with self._lock:
            current = self._credential
            if current is not None and current is not stale:
                logger.debug("Credential already refreshed by a concurrent call")
                return current
            task = self._start_or_join()

        try:
            return await self._wait(task)
        except asyncio.CancelledError:
            raise
        except Exception:
            if self._credential is stale:
                self._credential = None
            raise

    def clear(self) -> None:
        """Forget the current credential."""
        self._credential = None

    def _start_or_join(self) -> asyncio.Task:
        # Caller holds self._lock.
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.ensure_future(self._run())
            self._inflight.add_done_callback(self._consume_exception)
            self._waiters = 0
        self._waiters += 1
        return self._inflight

    async def _wait(self, task: asyncio.Task) -> SessionCredential:
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if task is self._inflight:
                self._waiters -= 1
                if self._waiters == 0 and not task.done():
                    logger.debug("Every waiter cancelled, abandoning authentication")
                    task.cancel()
                    self._inflight = None
            raise

    async def _run(self) -> SessionCredential:
        credential = await self._authenticator()
        self._credential = credential
        return credential

    @staticmethod
    def _consume_exception(task: asyncio.Task) -> None:
        # Waiters may all have been cancelled; mark the exception retrieved.
        if not task.cancelled():
            task.exception()
