from .manager import AuthManager
from .provider import IdentityProvider, TokenClient, GoogleIdentityProvider, GoogleTokenClient

__all__ = [
    "AuthManager",
    "IdentityProvider",
    "TokenClient",
    "GoogleIdentityProvider",
    "GoogleTokenClient",
]
