from .base import DriveHelperError, AuthenticationError, APIError, ValidationError
from .auth import UninitializedError, UnauthenticatedError, ProviderUnavailableError
from .drive import RemoteFailureError, DriveError, DriveFileNotFoundError, AmbiguousFileError

__all__ = [
    "DriveHelperError",
    "AuthenticationError",
    "APIError",
    "ValidationError",
    "UninitializedError",
    "UnauthenticatedError",
    "ProviderUnavailableError",
    "RemoteFailureError",
    "DriveError",
    "DriveFileNotFoundError",
    "AmbiguousFileError",
]
