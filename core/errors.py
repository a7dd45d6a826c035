# core/errors.py
# Error taxonomy shared by the store, session and credential layers.
# Routers never build status codes themselves; the handlers registered in
# main.py map these to HTTP responses.


class ForumError(Exception):
    """Base class for every failure that reaches a client."""
    status_code = 500
    error = "internal_error"

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class ValidationError(ForumError):
    status_code = 400
    error = "validation_error"


class AuthRequired(ForumError):
    status_code = 401
    error = "auth_required"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class NotFound(ForumError):
    status_code = 404
    error = "not_found"


class Conflict(ForumError):
    status_code = 409
    error = "conflict"


class HashingError(ForumError):
    """The password hasher failed internally (RNG or backend failure)."""

    def __init__(self, message: str = "Error processing request"):
        super().__init__(message)


class SessionNotFound(NotFound):
    def __init__(self, message: str = "Session not found"):
        super().__init__(message)


class SessionExpired(ForumError):
    status_code = 401
    error = "session_expired"

    def __init__(self, message: str = "Session expired"):
        super().__init__(message)
