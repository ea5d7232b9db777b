"""
Identity provider abstraction.

An identity provider issues OAuth access tokens after the user consents. The
token client it builds dispatches a consent request and reports the outcome
later through a callback, which may run on a different thread than the
caller.
"""

import logging
import os
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional, Dict, Any

from google_auth_oauthlib.flow import InstalledAppFlow

from ..config import DriveClientConfig
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

TokenCallback = Callable[[Dict[str, Any]], None]

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"


class TokenClient(ABC):
    """Requests access tokens for one client id and scope."""

    @abstractmethod
    def request_access_token(self) -> None:
        """Starts a consent request. Returns once the request is dispatched."""


class IdentityProvider(ABC):
    """Source of token clients."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether token clients can be built yet."""

    @abstractmethod
    def init_token_client(self, client_id: str, scope: str, callback: TokenCallback) -> TokenClient:
        """
        Builds a token client.
        Args:
            client_id: OAuth client identifier.
            scope: OAuth scope to request.
            callback: Invoked with the token response mapping once consent completes.
        Returns:
            A TokenClient bound to the callback.
        """


class GoogleTokenClient(TokenClient):
    """
    Token client running the installed-app consent flow.

    The flow opens a browser and blocks on a local redirect server, so it runs
    on a background thread and reports through the callback.
    """

    def __init__(self, flow: InstalledAppFlow, callback: TokenCallback, port: int = 0):
        self._flow = flow
        self._callback = callback
        self._port = port

    def request_access_token(self) -> None:
        logger.info("Dispatching access token request")
        thread = threading.Thread(target=self._run_flow, name="gdrive-consent", daemon=True)
        thread.start()

    def _run_flow(self) -> None:
        try:
            creds = self._flow.run_local_server(port=self._port)
        except Exception as e:
            logger.error("Consent flow failed: %s", e)
            self._callback({"error": "consent_failed", "error_description": str(e)})
            return

        response = {
            "access_token": creds.token,
            "scope": " ".join(creds.scopes or []),
        }
        if creds.refresh_token:
            response["refresh_token"] = creds.refresh_token
        self._callback(response)


class GoogleIdentityProvider(IdentityProvider):
    """
    Identity provider backed by google-auth-oauthlib.

    Available once an OAuth client configuration can be loaded: an inline
    client secret, or a client-secrets file present on disk.
    """

    def __init__(self, config: Optional[DriveClientConfig] = None):
        self._config = config or DriveClientConfig.from_env()

    def is_available(self) -> bool:
        if self._config.client_secret:
            return True
        return os.path.exists(self._config.credentials_path)

    def _build_flow(self, client_id: str, scope: str) -> InstalledAppFlow:
        if self._config.client_secret:
            client_config = {
                "installed": {
                    "client_id": client_id,
                    "client_secret": self._config.client_secret,
                    "auth_uri": AUTH_URI,
                    "token_uri": TOKEN_URI,
                    "redirect_uris": ["http://localhost"],
                }
            }
            return InstalledAppFlow.from_client_config(client_config, scopes=[scope])

        logger.info("Loading client configuration from %s", self._config.credentials_path)
        flow = InstalledAppFlow.from_client_secrets_file(self._config.credentials_path, scopes=[scope])
        file_client_id = flow.client_config.get("client_id")
        if file_client_id and file_client_id != client_id:
            raise ValidationError(
                f"Client secrets file {self._config.credentials_path} is for client {file_client_id}, not {client_id}"
            )
        return flow

    def init_token_client(self, client_id: str, scope: str, callback: TokenCallback) -> TokenClient:
        flow = self._build_flow(client_id, scope)
        return GoogleTokenClient(flow, callback, port=self._config.oauth_port)
