from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class NoFaceDetectedError(DomainError):
    """The submitted photo contains no detectable face (retake the photo)."""


class FaceNotRecognizedError(DomainError):
    """A face was found but no enrolled descriptor is close enough."""

    def __init__(self, message: str, *, distance: Optional[float] = None):
        super().__init__(message)
        self.distance = distance


class ClassLocationMissingError(DomainError):
    """The class has no registered location, so geofencing is impossible."""
