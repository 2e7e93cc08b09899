class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or the session is missing."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a staff member lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""

    status_code = 404


class TrackingNotAllowedError(AuthorizationError):
    """Raised when today's attendance state does not allow presence tracking."""

    def __init__(self, reason: str):
        super().__init__(f"Presence tracking not allowed: {reason}")
        self.reason = reason
