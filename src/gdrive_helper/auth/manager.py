"""
Authentication manager for the Drive helper.

Tracks the OAuth state of one client: the client id, the token client built
by the identity provider, and the access token the provider delivers. Each
client owns its own manager; there is no shared instance.
"""

import asyncio
import logging
from typing import Optional, Dict, Any, List

from aiogoogle.auth.creds import UserCreds

from .provider import IdentityProvider, TokenClient
from ..config import DEFAULT_POLL_INTERVAL
from ..exceptions import (
    AuthenticationError,
    ProviderUnavailableError,
    UninitializedError,
    UnauthenticatedError,
)
from ..services.drive.constants import DRIVE_FILE_SCOPE
from ..utils.log_sanitizer import sanitize_token

logger = logging.getLogger(__name__)


class AuthManager:
    """
    Token lifecycle for one client.

    Uninitialized -> init() -> provider ready, token client built ->
    authenticate() -> access token stored.
    """

    def __init__(self, provider: IdentityProvider, poll_interval: float = DEFAULT_POLL_INTERVAL):
        self._provider = provider
        self._poll_interval = poll_interval
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._waiters: List[asyncio.Future] = []

        self.client_id: Optional[str] = None
        self.token_client: Optional[TokenClient] = None
        self.access_token: Optional[str] = None
        self.provider_ready = False

    @property
    def is_initialized(self) -> bool:
        return self.token_client is not None

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None

    async def wait_for_provider(self, timeout: Optional[float] = None) -> None:
        """
        Polls the identity provider until it reports availability.
        Args:
            timeout: Seconds to wait before giving up; None waits forever.
        Raises:
            ProviderUnavailableError: The provider did not become available in time.
        """
        if self.provider_ready:
            return

        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout
        while not self._provider.is_available():
            if deadline is not None and loop.time() >= deadline:
                logger.error("Identity provider unavailable after %.1fs", timeout)
                raise ProviderUnavailableError(
                    f"Identity provider did not become available within {timeout} seconds"
                )
            await asyncio.sleep(self._poll_interval)

        self.provider_ready = True
        logger.info("Identity provider ready")

    async def init(self, client_id: str, timeout: Optional[float] = None) -> None:
        """
        Waits for the identity provider and builds the token client.
        Args:
            client_id: OAuth client identifier.
            timeout: Seconds to wait for the provider; None waits forever.
        """
        if not client_id:
            raise ValueError("client_id cannot be empty")

        self.client_id = client_id
        self._loop = asyncio.get_running_loop()
        await self.wait_for_provider(timeout)
        self.token_client = self._provider.init_token_client(
            client_id, DRIVE_FILE_SCOPE, self._on_token_response
        )
        logger.info("Token client initialized")

    async def authenticate(self, timeout: Optional[float] = None) -> str:
        """
        Requests an access token and waits until the provider delivers it.
        Args:
            timeout: Seconds to wait for the user to finish consent; None waits forever.
        Returns:
            The access token.
        Raises:
            UninitializedError: init() has not built a token client.
            AuthenticationError: The provider reported an error or the wait timed out.
        """
        if self.token_client is None:
            raise UninitializedError("Drive client not initialized. Call init(client_id) first.")

        waiter = self._loop.create_future()
        self._waiters.append(waiter)
        try:
            self.token_client.request_access_token()
            return await asyncio.wait_for(waiter, timeout)
        except asyncio.TimeoutError:
            logger.error("Timed out waiting for access token")
            raise AuthenticationError(f"No access token received within {timeout} seconds")
        finally:
            if waiter in self._waiters:
                self._waiters.remove(waiter)

    def set_access_token(self, access_token: str) -> None:
        """Installs an access token obtained outside the consent flow."""
        if not access_token:
            raise ValueError("access_token cannot be empty")
        self.access_token = access_token
        logger.info("Access token set: %s", sanitize_token(access_token))

    def clear_access_token(self) -> None:
        self.access_token = None

    def require_access_token(self) -> str:
        if not self.access_token:
            raise UnauthenticatedError("No access token. Call authenticate() first.")
        return self.access_token

    def user_creds(self) -> UserCreds:
        """
        Get aiogoogle-compatible UserCreds for the current access token.
        Returns:
            UserCreds object for use with aiogoogle
        """
        return UserCreds(access_token=self.access_token, scopes=[DRIVE_FILE_SCOPE])

    def _on_token_response(self, response: Dict[str, Any]) -> None:
        # Token clients may call back from their own thread
        if self._loop is None or self._loop.is_closed():
            logger.warning("Token response arrived after the event loop closed")
            return
        self._loop.call_soon_threadsafe(self._deliver, response)

    def _deliver(self, response: Dict[str, Any]) -> None:
        waiters, self._waiters = self._waiters, []

        error = response.get("error")
        if error or not response.get("access_token"):
            description = response.get("error_description") or error or "no access token in response"
            logger.error("Authentication failed: %s", description)
            for waiter in waiters:
                if not waiter.done():
                    waiter.set_exception(AuthenticationError(f"Authentication failed: {description}"))
            return

        self.access_token = response["access_token"]
        logger.info("Authenticated successfully: %s", sanitize_token(self.access_token))
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(self.access_token)
