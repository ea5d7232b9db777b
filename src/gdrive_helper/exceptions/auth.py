from .base import AuthenticationError


class UninitializedError(AuthenticationError):
    """Raised when authentication is requested before init() built a token client."""
    pass


class UnauthenticatedError(AuthenticationError):
    """Raised when an operation needs an access token and none is present."""
    pass


class ProviderUnavailableError(AuthenticationError):
    """Raised when the identity provider does not become available in time."""
    pass
