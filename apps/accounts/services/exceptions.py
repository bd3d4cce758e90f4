"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class UserRegistrationError(AccountsServiceError):
    """Raised when user registration fails."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    pass


class InvalidTokenError(AccountsServiceError):
    """Raised when a refresh token is missing, expired or of the wrong type."""
    pass


class InvalidOTPError(AccountsServiceError):
    """Raised when a one-time code is wrong, missing or expired."""
    pass


class AlreadyVerifiedError(AccountsServiceError):
    """Raised when verifying an account that is already verified."""
    pass


class RateLimitedError(AccountsServiceError):
    """Raised when too many attempts were made in the current window."""
    pass


class UserNotFoundError(AccountsServiceError):
    """Raised when user does not exist."""
    pass


class PasswordChangeError(AccountsServiceError):
    """Raised when the current password is wrong or the new one is unchanged."""
    pass


class InsufficientPermissionsError(AccountsServiceError):
    """Raised when the acting user may not edit the target account."""
    pass
