class DriveHelperError(Exception):
    """Base exception for all Drive helper errors."""
    pass


class AuthenticationError(DriveHelperError):
    """Raised when authentication fails."""
    pass


class APIError(DriveHelperError):
    """Raised when API calls fail."""
    pass


class ValidationError(DriveHelperError):
    """Raised when input validation fails."""
    pass
