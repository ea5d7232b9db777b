"""
Configuration for the Drive helper.

Values default to the environment so deployments can override them without
code changes, the same way the credential paths are resolved.
"""

import os
from dataclasses import dataclass
from typing import Optional

CREDENTIALS_PATH = "credentials.json"
DEFAULT_PROVIDER_TIMEOUT = 30.0
DEFAULT_POLL_INTERVAL = 0.1
DEFAULT_OAUTH_PORT = 0


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")


@dataclass
class DriveClientConfig:
    """
    Settings for a Drive client.
    Args:
        client_id: OAuth client identifier.
        client_secret: OAuth client secret; when None the client-secrets file is used.
        credentials_path: Path to a client-secrets file downloaded from Google Cloud Console.
        provider_timeout: Seconds to wait for the identity provider; None waits forever.
        poll_interval: Seconds between provider availability checks.
        oauth_port: Local port for the consent redirect server (0 picks a free port).
    """
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    credentials_path: str = CREDENTIALS_PATH
    provider_timeout: Optional[float] = DEFAULT_PROVIDER_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    oauth_port: int = DEFAULT_OAUTH_PORT

    def __post_init__(self):
        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if self.provider_timeout is not None and self.provider_timeout < 0:
            raise ValueError("provider_timeout cannot be negative")

    @classmethod
    def from_env(cls) -> "DriveClientConfig":
        """
        Builds a configuration from GOOGLE_* and GDRIVE_* environment variables.
        Returns:
            A DriveClientConfig with unset variables left at their defaults.
        """
        return cls(
            client_id=os.getenv("GOOGLE_CLIENT_ID"),
            client_secret=os.getenv("GOOGLE_CLIENT_SECRET"),
            credentials_path=os.getenv("GOOGLE_CREDENTIALS_PATH", CREDENTIALS_PATH),
            provider_timeout=_float_env("GDRIVE_PROVIDER_TIMEOUT", DEFAULT_PROVIDER_TIMEOUT),
            poll_interval=_float_env("GDRIVE_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
            oauth_port=int(_float_env("GDRIVE_OAUTH_PORT", DEFAULT_OAUTH_PORT)),
        )
