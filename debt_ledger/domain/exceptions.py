"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationFailure(DomainException):
    """Required field missing or malformed"""

    pass


class AuthFailure(DomainException):
    """Caller could not be authenticated"""

    pass


class MissingTokenError(AuthFailure):
    """No bearer token supplied"""

    def __init__(self, message: str = "Authentication token not provided"):
        super().__init__(message)


class InvalidTokenError(AuthFailure):
    """Token is malformed or its signature does not match"""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class ExpiredTokenError(AuthFailure):
    """Token signature is valid but exp is in the past"""

    def __init__(self, message: str = "Token expired"):
        super().__init__(message)


class InvalidCredentialsError(AuthFailure):
    """Unknown email or wrong password"""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class NotFoundError(DomainException):
    """Resource does not exist or is not owned by the caller"""

    pass


class DebtNotFoundError(NotFoundError):
    def __init__(self, message: str = "Debt not found"):
        super().__init__(message)


class NotificationNotFoundError(NotFoundError):
    def __init__(self, message: str = "Notification not found"):
        super().__init__(message)


class ConflictError(DomainException):
    """Write would violate a uniqueness constraint"""

    pass


class EmailAlreadyRegisteredError(ConflictError):
    def __init__(self, message: str = "A user with that email already exists"):
        super().__init__(message)


class StorageFailure(DomainException):
    """Persistence layer failed; the surrounding transaction was rolled back"""

    pass
