"""
Service Errors

Every failure the engine reports is a ServiceError subclass. Most of them are
carried as values (see DrawResult) rather than raised; only programmer errors
such as a malformed indicator kind or an out-of-range preset slot propagate.
"""


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")


class InsufficientDataError(ServiceError):
    """Price series shorter than the indicator window. Not fatal."""
    pass


class UnknownIndicatorError(ServiceError):
    """Malformed kind discriminant or parameter vector."""
    pass


class CachePersistError(ServiceError):
    """Cache batch write failed and was rolled back."""
    pass


class RenderError(ServiceError):
    """Chart handle rejected a draw."""
    pass


class NotFoundError(ServiceError):
    """Referenced indicator id is not registered."""
    pass


class IndexOutOfRangeError(ServiceError):
    """Preset slot number outside the configured range."""
    pass
